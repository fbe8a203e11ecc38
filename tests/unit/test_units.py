"""Tests for the unit conversion table."""

import pytest

from nws_exporter.schemas import Measurement
from nws_exporter.units import Dimension, convert, is_supported, normalize_unit


@pytest.mark.parametrize(
    "unit_code, expected",
    [
        ("wmoUnit:degC", "degC"),
        ("unit:degC", "degC"),
        ("degC", "degC"),
    ],
)
def test_normalize_unit(unit_code: str, expected: str):
    assert normalize_unit(unit_code) == expected


def test_identity_units_pass_through():
    """Test values already in the exposed unit are not rescaled."""
    assert convert(Measurement(value=-1.1, unit_code="wmoUnit:degC"), Dimension.TEMPERATURE) == -1.1
    assert convert(Measurement(value=16090, unit_code="wmoUnit:m"), Dimension.LENGTH) == 16090
    assert convert(Measurement(value=102000, unit_code="wmoUnit:Pa"), Dimension.PRESSURE) == 102000
    assert convert(Measurement(value=55.39, unit_code="wmoUnit:percent"), Dimension.RATIO) == 55.39


def test_fahrenheit_to_celsius():
    value = convert(Measurement(value=212.0, unit_code="wmoUnit:degF"), Dimension.TEMPERATURE)
    assert value == pytest.approx(100.0)


def test_kelvin_to_celsius():
    value = convert(Measurement(value=273.15, unit_code="wmoUnit:K"), Dimension.TEMPERATURE)
    assert value == pytest.approx(0.0)


def test_kilometers_to_meters():
    assert convert(Measurement(value=16.09, unit_code="wmoUnit:km"), Dimension.LENGTH) == pytest.approx(16090.0)


def test_hectopascals_to_pascals():
    assert convert(Measurement(value=1020.0, unit_code="wmoUnit:hPa"), Dimension.PRESSURE) == pytest.approx(102000.0)


def test_unsupported_unit():
    assert not is_supported("wmoUnit:km_h-1", Dimension.LENGTH)
    assert convert(Measurement(value=3.0, unit_code="wmoUnit:km_h-1"), Dimension.LENGTH) is None
