"""Unit conversion table for values reported by the NWS API.

Each exported field belongs to a dimension with a single exposed unit. The
upstream ``unitCode`` (e.g. ``wmoUnit:degC``) must be one of the codes
accepted for that dimension, otherwise the value is treated as missing.

==============  =============  ==========================================
Dimension       Exposed unit   Accepted codes
==============  =============  ==========================================
temperature     celsius        degC (as is), degF, K
length          meters         m (as is), km
pressure        pascals        Pa (as is), hPa
ratio           percent        percent (as is)
==============  =============  ==========================================

api.weather.gov reports every exported field in the "as is" unit, so in
practice values pass through unchanged.
"""

from collections.abc import Callable
from enum import Enum

from .schemas import Measurement

_UNIT_PREFIXES = ("wmoUnit:", "unit:")


class Dimension(str, Enum):
    """Physical dimension of an exported field."""

    TEMPERATURE = "temperature"
    LENGTH = "length"
    PRESSURE = "pressure"
    RATIO = "ratio"


def _identity(value: float) -> float:
    return value


CONVERSIONS: dict[Dimension, dict[str, Callable[[float], float]]] = {
    Dimension.TEMPERATURE: {
        "degC": _identity,
        "degF": lambda v: (v - 32.0) * 5.0 / 9.0,
        "K": lambda v: v - 273.15,
    },
    Dimension.LENGTH: {
        "m": _identity,
        "km": lambda v: v * 1000.0,
    },
    Dimension.PRESSURE: {
        "Pa": _identity,
        "hPa": lambda v: v * 100.0,
    },
    Dimension.RATIO: {
        "percent": _identity,
    },
}


def normalize_unit(unit_code: str) -> str:
    """Strip the ``wmoUnit:`` / ``unit:`` namespace from a unit code."""
    for prefix in _UNIT_PREFIXES:
        if unit_code.startswith(prefix):
            return unit_code[len(prefix) :]
    return unit_code


def is_supported(unit_code: str, dimension: Dimension) -> bool:
    """Check whether a unit code can be converted for the given dimension."""
    return normalize_unit(unit_code) in CONVERSIONS[dimension]


def convert(measurement: Measurement, dimension: Dimension) -> float | None:
    """Convert a measurement to the exposed unit of its dimension.

    Args:
        measurement: Value and unit code from the API.
        dimension: Dimension of the field the measurement came from.

    Returns:
        Value in the exposed unit, or None if the unit is not accepted.
    """
    converter = CONVERSIONS[dimension].get(normalize_unit(measurement.unit_code))
    if converter is None:
        return None
    return converter(measurement.value)
