"""
Utility functions for input preprocessing and validation
"""

from typing import Optional, Union
import re

Number = Union[int, float]

_PERSIAN_DIGITS = "۰۱۲۳۴۵۶۷۸۹"
_ARABIC_DIGITS = "٠١٢٣٤٥٦٧٨٩"
_PERSIAN_DECIMAL = "٫"

_TO_ENGLISH = str.maketrans(
    {
        **{d: str(i) for i, d in enumerate(_PERSIAN_DIGITS)},
        **{d: str(i) for i, d in enumerate(_ARABIC_DIGITS)},
        _PERSIAN_DECIMAL: ".",
    }
)
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")

_TO_PERSIAN = str.maketrans(
    {**{str(i): d for i, d in enumerate(_PERSIAN_DIGITS)}, ".": _PERSIAN_DECIMAL}
)


def to_english_digits(text: Optional[str]) -> str:
    """
    Convert Persian / Arabic-Indic digits and the Persian decimal separator
    to ASCII so the value can be parsed.

    Args:
        text: Raw field text, possibly None

    Returns:
        Text with ASCII digits ('' for None)
    """
    if text is None:
        return ""
    return str(text).translate(_TO_ENGLISH)


def to_persian_digits(value: Optional[Union[Number, str]]) -> str:
    """Render a number with Persian digits; None becomes '-'."""
    if value is None:
        return "-"
    return str(value).translate(_TO_PERSIAN)


def parse_numeric_input(
    text: Optional[Union[str, Number]],
    minimum: Optional[Number] = 0,
    maximum: Optional[Number] = None,
    is_float: bool = False,
) -> Optional[Number]:
    """
    Sanitize a numeric field and clamp it into range.

    Non-digit characters are dropped (and the decimal point for integer
    fields). Empty or unparseable input yields None. Float values are
    rounded to one decimal after clamping.

    Args:
        text: Field text (any digit script) or a number
        minimum: Inclusive lower bound, None for unbounded
        maximum: Inclusive upper bound, None for unbounded
        is_float: Whether the field accepts decimals

    Returns:
        Clamped number or None
    """
    english = to_english_digits(None if text is None else str(text))
    sanitized = re.sub(r"[^0-9.]" if is_float else r"[^0-9]", "", english)
    # Only the leading number counts: "1.2.3" reads as 1.2
    match = _LEADING_NUMBER.match(sanitized)
    if match is None:
        return None

    num = float(match.group()) if is_float else int(match.group())

    if maximum is not None and num > maximum:
        num = maximum
    if minimum is not None and num < minimum:
        num = minimum
    if is_float:
        num = round(float(num), 1)
    return num


def step_value(
    current: Optional[Number],
    increase: bool,
    step: Number = 1,
    minimum: Optional[Number] = 0,
    maximum: Optional[Number] = None,
    is_float: bool = False,
    start_value: Number = 0,
) -> Optional[Number]:
    """Nudge a field by one step (wheel / drag), starting from start_value when empty."""
    value = current if current else start_value
    value += step if increase else -step
    if maximum is not None and value > maximum:
        value = maximum
    if minimum is not None and value < minimum:
        value = minimum
    return round(float(value), 1) if is_float else int(value)
