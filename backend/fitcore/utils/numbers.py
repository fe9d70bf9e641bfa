"""Numeric parsing and rounding helpers."""
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

Number = Union[int, float]


def round_half_up(value: Number, places: int = 0) -> float:
    """
    Round with halves going away from zero.

    Built-in ``round`` uses banker's rounding (``round(0.25, 1) == 0.2``);
    displayed nutrition values round ``.5`` up.

    Args:
        value: Value to round
        places: Decimal places to keep

    Returns:
        Rounded value
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def round_int(value: Number) -> int:
    """Round half-up to an integer."""
    return int(round_half_up(value, 0))


def parse_number(value: Union[str, Number, None]) -> Optional[float]:
    """
    Parse user input into a finite float.

    Args:
        value: Text as typed, or an already numeric value

    Returns:
        Parsed float, or None if the input is blank or not a finite number
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = value.strip().replace(",", ".")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number
