import re
from typing import Optional

_MATH_DELIM_RE = re.compile(r'\$')
_MACRO_RE = re.compile(r'\\([A-Za-z]+)(?![A-Za-z])')

# Named macros rendered as a single glyph
_MACRO_GLYPHS = {
    'alpha': 'α',
    'beta': 'β',
    'gamma': 'γ',
    'theta': 'θ',
    'pi': 'π',
    'angle': '∠',
}

# Macros that only decorate their argument; the argument itself is kept
_DROPPED_MACROS = {'vec'}

_STRIP_CHARS = str.maketrans('', '', '_{}')


def _replace_macro(m: re.Match) -> str:
    name = m.group(1)
    if name in _MACRO_GLYPHS:
        return _MACRO_GLYPHS[name]
    if name in _DROPPED_MACROS:
        return ''
    return m.group(0)


def sanitize_label(text: Optional[str]) -> Optional[str]:
    """
    Turn author math markup into plain display text.

    ``$`` delimiters go away, a handful of Greek-letter and operator macros
    become Unicode glyphs, ``\\vec`` is dropped and subscript markers and
    braces are removed.  Anything else is left as written.
    """
    if not text:
        return None
    out = _MATH_DELIM_RE.sub('', text)
    out = _MACRO_RE.sub(_replace_macro, out)
    out = out.translate(_STRIP_CHARS)
    return out or None
