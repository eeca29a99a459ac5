"""
Text normalization and display formatting helpers.

``normalize`` maps typographic Unicode characters onto a Latin-1 subset that
the standard PDF fonts can render; the formatting helpers produce the
currency and date strings used throughout the document.

License: MIT
"""

from datetime import date, datetime
from typing import Any, Optional, Union

from docpress import config

# Substitutions applied before the Latin-1 filter. No replacement value
# contains a key, so a second pass is a no-op.
_SUBSTITUTIONS = {
    # Bullets and list markers
    "\u2022": "-",      # Bullet
    "\u25e6": "-",      # White bullet
    "\u2023": "-",      # Triangular bullet
    "\u2043": "-",      # Hyphen bullet
    "\u25cf": "-",      # Black circle
    "\u25cb": "-",      # White circle
    "\u25a0": "-",      # Black square
    "\u25a1": "-",      # White square
    "\u25aa": "-",      # Small black square
    "\u25ab": "-",      # Small white square

    # Math symbols
    "\u00d7": "x",      # Multiplication sign
    "\u00f7": "/",      # Division sign
    "\u00b1": "+/-",    # Plus-minus
    "\u2264": "<=",         # Less-than or equal
    "\u2265": ">=",         # Greater-than or equal
    "\u2260": "!=",         # Not equal
    "\u2248": "~",          # Almost equal
    "\u221e": "infinity",   # Infinity

    # Quotes and apostrophes
    "\u201c": '"',      # Left double quotation mark
    "\u201d": '"',      # Right double quotation mark
    "\u201e": '"',      # Low double quotation mark
    "\u00ab": '"',      # Left guillemet
    "\u00bb": '"',      # Right guillemet
    "\u2018": "'",      # Left single quotation mark
    "\u2019": "'",      # Right single quotation mark
    "\u201a": "'",      # Low single quotation mark
    "\u2039": "'",          # Single left guillemet
    "\u203a": "'",          # Single right guillemet

    # Dashes and spaces
    "\u2014": "-",      # Em dash
    "\u2013": "-",      # En dash
    "\u2011": "-",      # Non-breaking hyphen
    "\u2212": "-",      # Minus sign
    "\u00ad": "",       # Soft hyphen
    "\u00a0": " ",      # Non-breaking space
    "\u2009": " ",      # Thin space
    "\u200b": "",       # Zero-width space
    "\ufeff": "",       # Byte order mark

    "\u2026": "...",    # Horizontal ellipsis

    # Arrows
    "\u2192": "->",         # Right arrow
    "\u2190": "<-",         # Left arrow
    "\u2191": "^",          # Up arrow
    "\u2193": "v",          # Down arrow
    "\u21d2": "=>",         # Double right arrow
    "\u21d0": "<=",         # Double left arrow

    # Checkmarks and crosses
    "\u2713": "[v]",        # Check mark
    "\u2714": "[v]",        # Heavy check mark
    "\u2717": "[x]",        # Ballot X
    "\u2718": "[x]",        # Heavy ballot X
    "\u2611": "[v]",        # Checked box
    "\u2610": "[ ]",        # Empty box
    "\u2612": "[x]",        # Crossed box

    # Currency
    "\u20ac": "EUR",        # Euro
    "\u00a3": "GBP",        # Pound
    "\u00a5": "JPY",        # Yen
    "\u20b9": "INR",        # Rupee

    # Other common symbols
    "\u00a9": "(c)",        # Copyright
    "\u00ae": "(R)",        # Registered
    "\u2122": "(TM)",       # Trademark
    "\u00b0": " deg",       # Degree
    "\u00b5": "u",          # Micro
    "\u00b6": "",           # Pilcrow
    "\u00a7": "S",          # Section sign
    "\u2020": "*",          # Dagger
    "\u2021": "**",         # Double dagger

    # Fractions
    "\u00bd": "1/2",        # One half
    "\u00bc": "1/4",        # One quarter
    "\u00be": "3/4",        # Three quarters
    "\u2153": "1/3",        # One third
    "\u2154": "2/3",        # Two thirds
}

_TRANSLATION = str.maketrans(_SUBSTITUTIONS)

LATIN1_MAX = 0xFF


def normalize(text: Any) -> str:
    """
    Map text onto the renderable Latin-1 subset.

    Args:
        text: Any value; ``None`` yields an empty string and other
            non-string values are converted with ``str()``

    Returns:
        Text containing only code points up to U+00FF
    """
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)
    substituted = text.translate(_TRANSLATION)
    return "".join(ch for ch in substituted if ord(ch) <= LATIN1_MAX)


def format_currency(amount: Union[int, float, None], symbol: Optional[str] = None) -> str:
    """Format an amount as ``$1,234.50`` (negative amounts as ``-$1.00``)."""
    symbol = config.CURRENCY_SYMBOL if symbol is None else symbol
    value = float(amount or 0)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def _coerce_datetime(value: Union[date, datetime, None]) -> datetime:
    if value is None:
        return datetime.now()
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def format_date(value: Union[date, datetime, None]) -> str:
    """Long-form date, e.g. ``January 1, 2025``. ``None`` means today."""
    moment = _coerce_datetime(value)
    return f"{moment:%B} {moment.day}, {moment.year}"


def format_datetime(value: Union[date, datetime, None], long: bool = False) -> str:
    """Date with 12-hour clock time: ``Jan 1, 2025 3:04 PM`` (``long`` spells out the month)."""
    moment = _coerce_datetime(value)
    month = f"{moment:%B}" if long else f"{moment:%b}"
    hour = moment.hour % 12 or 12
    return f"{month} {moment.day}, {moment.year} {hour}:{moment:%M} {moment:%p}"
