import math
import re
from typing import Any

# Leading decimal number of a string, as read by a form field ("12.5%" -> 12.5)
LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_value(value: Any, default: float = 0.0) -> float:
    """
    Tolerantly parse a number from a JSON field or form value.

    Strings are read up to the end of their leading number, so units and
    trailing text are dropped. ``None``, booleans, text with no leading number,
    values too large for a float and NaN/infinity all map to ``default`` so a
    bad field never turns a calculation into NaN.

    Examples:
        parse_value(None, 0) -> 0
        parse_value("", 5) -> 5
        parse_value("abc", 0) -> 0
        parse_value(" 42.5 ", 0) -> 42.5
        parse_value("12.5%", 0) -> 12.5
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        match = LEADING_NUMBER.match(value)
        if match is None:
            return default
        value = match.group(0)
    try:
        parsed = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if math.isnan(parsed) or math.isinf(parsed):
        return default
    return parsed
