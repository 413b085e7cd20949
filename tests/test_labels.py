import pytest

from geoscene.labels import sanitize_label


def test_greek_macros_become_glyphs():
    assert sanitize_label("\\alpha + \\theta") == "α + θ"


def test_vec_subscript_and_braces_are_stripped():
    assert sanitize_label("\\vec{v}_1") == "v1"


@pytest.mark.parametrize(
    'raw, expected',
    [
        ("$A$", "A"),
        ("$\\angle ABC$", "∠ ABC"),
        ("$2\\pi r$", "2π r"),
        ("\\beta\\gamma", "βγ"),
        ("x^2", "x^2"),
        ("AB = 5 cm", "AB = 5 cm"),
    ],
)
def test_sanitize_label_table(raw, expected):
    assert sanitize_label(raw) == expected


def test_unknown_and_longer_macros_are_left_alone():
    assert sanitize_label("\\pitchfork") == "\\pitchfork"
    assert sanitize_label("\\sqrt{2}") == "\\sqrt2"


@pytest.mark.parametrize('raw', [None, "", "$$", "{}_"])
def test_empty_labels_return_none(raw):
    assert sanitize_label(raw) is None
