import math

SIGNIFICANT_DIGITS = 6
MAX_DECIMALS = 12


def format_float(value: float, decimals: int = 4) -> str:
    if math.isnan(value) or math.isinf(value):
        raise ValueError("Cannot format non-finite float for SVG output")
    formatted = f"{value:.{decimals}f}"
    if "." in formatted:
        formatted = formatted.rstrip("0").rstrip(".")
    if formatted in ("", "-0"):
        return "0"
    return formatted


def decimals_for_span(span: float, significant: int = SIGNIFICANT_DIGITS) -> int:
    """Decimal places that keep ``significant`` digits across a view of size ``span``."""

    if not (span > 0.0 and math.isfinite(span)):
        return 4
    return min(max(significant - math.ceil(math.log10(span)), 0), MAX_DECIMALS)
