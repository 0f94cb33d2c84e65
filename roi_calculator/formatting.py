"""
Display formatting for calculator values and report text.

Rounding is half-away-from-zero on the exact binary value, so 0.125 shows
as "0.13" the same way the browser calculator shows it.
"""

from decimal import Decimal, ROUND_HALF_UP


def _round(value: float, places: int) -> Decimal:
    exponent = Decimal(1).scaleb(-places)
    return Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def format_fixed(value: float, places: int) -> str:
    text = f"{_round(value, places):.{places}f}"
    # Decimal keeps the sign of negative zero
    if text.startswith('-') and _round(value, places) == 0:
        text = text[1:]
    return text


def format_currency(value: float) -> str:
    """USD text: cents below $5, whole dollars otherwise (e.g. $3.50, $1,234)."""
    places = 2 if 0 < value < 5 else 0
    rounded = _round(abs(value), places)
    sign = '-' if value < 0 and rounded != 0 else ''
    return f"{sign}${rounded:,.{places}f}"


def format_number(value: float) -> str:
    """Compact number: 1.5B / 2.3M / 4.0K, or 2/1/0 decimals for small values."""
    if value >= 1_000_000_000:
        return format_fixed(value / 1_000_000_000, 1) + 'B'
    if value >= 1_000_000:
        return format_fixed(value / 1_000_000, 1) + 'M'
    if value >= 1000:
        return format_fixed(value / 1000, 1) + 'K'
    if 0 < value < 1:
        return format_fixed(value, 2)
    if 0 < value < 10:
        return format_fixed(value, 1)
    return format_fixed(value, 0)


def format_ratio(value: float) -> str:
    return f"{format_fixed(value, 1)}×"


def sanitize_text(text) -> str:
    """Replace characters the core PDF fonts (latin-1) cannot encode."""
    if text is None:
        return ''
    text = str(text)
    replacements = {
        '•': '-', '–': '-', '—': '-',
        '‘': "'", '’': "'",
        '“': '"', '”': '"',
        '…': '...', '×': 'x',
    }
    for unicode_char, ascii_char in replacements.items():
        text = text.replace(unicode_char, ascii_char)

    try:
        text.encode('latin-1')
        return text
    except UnicodeEncodeError:
        return text.encode('ascii', 'replace').decode('ascii')
