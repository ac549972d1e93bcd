"""
Best-effort conversion of scalar values between types.

Used by the conversion step so that 5 and 5.0, "42" and 42 or an enum
and its underlying value can be compared without failing purely on type.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Any, Callable

logger = logging.getLogger(__name__)

CONVERTIBLE_SOURCES = (bool, int, float, Decimal, Fraction, str, Enum)


def _to_int(value: Any) -> int:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{value!r} has a fractional part")
    if isinstance(value, (Decimal, Fraction)) and value != int(value):
        raise ValueError(f"{value!r} has a fractional part")
    if isinstance(value, str):
        return int(value.strip())
    return int(value)


def _to_float(value: Any) -> float:
    if isinstance(value, Enum):
        value = value.value
    return float(value)


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, float):
        # Go through str() so 0.1 becomes Decimal("0.1") and not its binary expansion
        return Decimal(str(value))
    if isinstance(value, Fraction):
        return Decimal(value.numerator) / Decimal(value.denominator)
    if isinstance(value, str):
        return Decimal(value.strip())
    return Decimal(value)


def _to_fraction(value: Any) -> Fraction:
    if isinstance(value, Enum):
        value = value.value
    return Fraction(value)


def _to_str(value: Any) -> str:
    if isinstance(value, Enum):
        return value.name
    return str(value)


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
        raise ValueError(f"{value!r} is not a boolean")
    if isinstance(value, (int, float, Decimal, Fraction)) and value not in (0, 1):
        raise ValueError(f"{value!r} is not a boolean")
    return bool(value)


def _to_enum(value: Any, enum_type: type[Enum]) -> Enum:
    if isinstance(value, str):
        try:
            return enum_type[value]
        except KeyError:
            pass
    if isinstance(value, Enum):
        value = value.value
    return enum_type(value)


CONVERTERS: dict[type, Callable[[Any], Any]] = {
    int: _to_int,
    float: _to_float,
    Decimal: _to_decimal,
    Fraction: _to_fraction,
    str: _to_str,
    bool: _to_bool,
}


def try_convert(value: Any, target_type: type) -> tuple[bool, Any]:
    """
    Attempt to convert a scalar value to the target type.

    Args:
        value: The value to convert
        target_type: The type to convert to

    Returns:
        Tuple of (converted, value). When the conversion is not supported
        or fails, converted is False and the original value is returned.
    """
    if value is None or not isinstance(value, CONVERTIBLE_SOURCES):
        return False, value

    if issubclass(target_type, Enum):
        converter: Callable[[Any], Any] = lambda v: _to_enum(v, target_type)
    else:
        converter = CONVERTERS.get(target_type)
        if converter is None:
            return False, value

    try:
        return True, converter(value)
    except (ValueError, TypeError, ArithmeticError) as e:
        logger.debug(
            f"Could not convert {value!r} to {target_type.__name__}: {type(e).__name__}: {e}"
        )
        return False, value
