"""Unit tests for smbg extraction and unit conversion."""

from __future__ import annotations

import logging

import pytest

from models.records import NormalizedReading
from models.tidepool import RawMeasurement
from services.extractor import ReadingExtractor, extract, to_display_value


def _measurement(type_: str = "smbg", device_time: str = "2021-03-17T08:33:00", value=5.5, **extra):
    return RawMeasurement.model_validate(
        {"type": type_, "deviceTime": device_time, "value": value, **extra}
    )


def test_extract_empty_sequence_returns_empty_list() -> None:
    assert extract([]) == []


def test_extract_slices_device_time_and_converts_value() -> None:
    readings = extract([_measurement(device_time="2021-03-17T08:33:00", value=5.5)])

    assert readings == [NormalizedReading(date="2021-03-17", time="08:33:00", value="99")]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (5.5, "99"),
        (-0.1, "-1"),
        (4.05, "72"),
        (0.0, "0"),
    ],
)
def test_to_display_value_truncates_toward_zero(raw: float, expected: str) -> None:
    assert to_display_value(raw) == expected


def test_extract_drops_other_types_and_keeps_feed_order() -> None:
    feed = [
        _measurement(device_time="2021-03-18T09:00:00", value=6.0),
        _measurement(type_="cbg", value=10.0),
        _measurement(type_="upload", value=None),
        _measurement(device_time="2021-03-17T07:00:00", value=5.0),
    ]

    readings = ReadingExtractor().extract(feed)

    assert len(readings) <= len(feed)
    assert [reading.date for reading in readings] == ["2021-03-18", "2021-03-17"]
    assert [reading.value for reading in readings] == ["108", "90"]


def test_extract_ignores_timezone_suffix() -> None:
    readings = extract([_measurement(device_time="2021-03-17T23:59:59.000Z")])

    assert readings[0].date == "2021-03-17"
    assert readings[0].time == "23:59:59"


def test_extract_skips_smbg_without_usable_fields(caplog: pytest.LogCaptureFixture) -> None:
    feed = [
        _measurement(device_time="2021-03-17"),
        _measurement(device_time=None),
        _measurement(value=None),
        _measurement(device_time="2021-03-19T10:00:00", value=7.0),
    ]

    with caplog.at_level(logging.WARNING, logger="services.extractor"):
        readings = extract(feed)

    assert readings == [NormalizedReading(date="2021-03-19", time="10:00:00", value="126")]
    assert len(caplog.records) == 3


def test_extract_flags_unexpected_units(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="services.extractor"):
        readings = extract([_measurement(value=5.5, units="mg/dL")])

    assert readings[0].value == "99"
    assert any(getattr(record, "units", None) == "mg/dL" for record in caplog.records)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), 1e308])
def test_extract_skips_values_without_a_finite_conversion(
    value: float, caplog: pytest.LogCaptureFixture
) -> None:
    feed = [_measurement(value=value), _measurement(device_time="2021-03-18T10:00:00", value=5.0)]

    with caplog.at_level(logging.WARNING, logger="services.extractor"):
        readings = extract(feed)

    assert readings == [NormalizedReading(date="2021-03-18", time="10:00:00", value="90")]
    assert len(caplog.records) == 1


def test_to_display_value_rejects_overflow() -> None:
    with pytest.raises(ValueError):
        to_display_value(1e308)


def test_extract_skips_smbg_with_mistyped_fields() -> None:
    feed = [
        _measurement(value={"amount": 3}),
        _measurement(units={"bg": "mmol/L"}),
        _measurement(device_time="2021-03-19T10:00:00", value=7.0),
    ]

    assert extract(feed) == [NormalizedReading(date="2021-03-19", time="10:00:00", value="126")]


def test_extract_ignores_other_types_with_structured_fields() -> None:
    feed = [
        _measurement(type_="pumpSettings", value=None, units={"carb": "grams", "bg": "mmol/L"}),
        _measurement(type_="food", value={"amount": 3}),
        _measurement(value=5.5),
    ]

    assert extract(feed) == [NormalizedReading(date="2021-03-17", time="08:33:00", value="99")]
