"""Field checks shared by the record validate() methods."""
from typing import Any

from .errors import ValidationError


def check_number(
        field: str, value: Any, integer: bool = False, positive: bool = False
) -> None:
    """
    Raise ValidationError unless value is None or a non-negative number.

    Bools are rejected even though they are ints. With positive=True zero
    is rejected as well.
    """
    if value is None:
        return
    kind = "integer" if integer else "number"
    sign = "positive" if positive else "non-negative"
    types = int if integer else (int, float)
    if (
        isinstance(value, bool)
        or not isinstance(value, types)
        or value < 0
        or (positive and value == 0)
    ):
        raise ValidationError(f"{field} must be a {sign} {kind}")
