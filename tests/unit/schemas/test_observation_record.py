"""Tests for observation schemas."""

import pytest
from pydantic import ValidationError

from nws_exporter.schemas import MetricSample, Measurement, ObservationRecord, StationInfo


class TestMeasurement:
    def test_valid_measurement(self):
        m = Measurement(value=15.0, unit_code="wmoUnit:degC")
        assert m.value == 15.0

    def test_nan_rejected(self):
        with pytest.raises(ValidationError):
            Measurement(value=float("nan"), unit_code="wmoUnit:degC")

    def test_empty_unit_rejected(self):
        with pytest.raises(ValidationError):
            Measurement(value=1.0, unit_code="")

    def test_frozen(self):
        m = Measurement(value=1.0, unit_code="wmoUnit:m")
        with pytest.raises(ValidationError):
            m.value = 2.0


class TestObservationRecord:
    def test_minimal_record_has_no_readings(self, sample_station_url: str):
        """Test every reading defaults to absent, not zero."""
        record = ObservationRecord(station=sample_station_url)
        assert record.station_code is None
        assert record.elevation is None
        assert record.temperature is None
        assert record.dewpoint is None
        assert record.barometric_pressure is None
        assert record.visibility is None
        assert record.relative_humidity is None
        assert record.wind_chill is None

    def test_empty_station_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            ObservationRecord(station="")
        assert "station" in str(exc_info.value)


class TestStationInfo:
    def test_station_info(self, sample_station_url: str):
        info = StationInfo(id=sample_station_url, station_identifier="KBOS", name="Boston")
        assert info.elevation is None
        assert info.timezone is None


class TestMetricSample:
    def test_equality_includes_labels(self):
        a = MetricSample(name="nws_temperature_degrees", labels={"station": "a"}, value=1.0)
        b = MetricSample(name="nws_temperature_degrees", labels={"station": "a"}, value=1.0)
        c = MetricSample(name="nws_temperature_degrees", labels={"station": "b"}, value=1.0)
        assert a == b
        assert a != c
