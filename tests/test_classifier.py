from __future__ import annotations

import json

import pytest

from models.records import NormalizedReading
from services.classifier import Failure, Success, classify
from services.errors import MalformedPayload
from services.extractor import extract


def test_array_payload_is_success() -> None:
    raw = b'[{"type":"smbg","deviceTime":"2021-01-01T00:00:00","value":5.5}]'

    outcome = classify(raw)

    assert isinstance(outcome, Success)
    assert len(outcome.measurements) == 1
    measurement = outcome.measurements[0]
    assert measurement.type == "smbg"
    assert measurement.device_time == "2021-01-01T00:00:00"
    assert measurement.value == 5.5


def test_empty_array_is_success_not_error() -> None:
    outcome = classify(b"[]")

    assert isinstance(outcome, Success)
    assert outcome.measurements == []


def test_heterogeneous_records_keep_unknown_fields() -> None:
    raw = json.dumps(
        [
            {
                "type": "upload",
                "deviceManufacturers": ["Acme"],
                "client": {"name": "uploader", "private": {"os": "mac"}},
            },
            {
                "type": "smbg",
                "deviceTime": "2021-01-01T08:00:00",
                "value": 6.1,
                "units": "mmol/L",
                "annotations": [{"code": "bg/out-of-range"}],
                "payload": {"logIndices": [1, 2]},
            },
        ]
    ).encode("utf-8")

    outcome = classify(raw)

    assert isinstance(outcome, Success)
    assert [m.type for m in outcome.measurements] == ["upload", "smbg"]
    assert outcome.measurements[1].units == "mmol/L"


def test_object_payload_is_failure_with_fields() -> None:
    raw = b'{"status":403,"id":"x","code":"invalid","message":"bad creds"}'

    outcome = classify(raw)

    assert isinstance(outcome, Failure)
    assert outcome.error.status == 403
    assert outcome.error.id == "x"
    assert outcome.error.code == "invalid"
    assert outcome.error.message == "bad creds"


def test_object_without_status_is_malformed() -> None:
    with pytest.raises(MalformedPayload):
        classify(b'{"unexpected": true}')


@pytest.mark.parametrize("raw", [b"not json", b"", b"[1, 2]", b'"text"'])
def test_unparseable_payload_is_malformed(raw: bytes) -> None:
    with pytest.raises(MalformedPayload):
        classify(raw)


def test_records_with_structured_fields_do_not_break_the_feed() -> None:
    raw = json.dumps(
        [
            {"type": "pumpSettings", "units": {"carb": "grams", "bg": "mmol/L"}},
            {"type": "food", "value": {"amount": 3}},
            {"type": "smbg", "deviceTime": "2021-03-17T08:33:00", "value": 5.5, "units": "mmol/L"},
        ]
    ).encode("utf-8")

    outcome = classify(raw)

    assert isinstance(outcome, Success)
    assert [m.type for m in outcome.measurements] == ["pumpSettings", "food", "smbg"]
    assert extract(outcome.measurements) == [
        NormalizedReading(date="2021-03-17", time="08:33:00", value="99")
    ]


@pytest.mark.parametrize("number", [b"1e308", b"NaN"])
def test_non_finite_smbg_values_are_skipped_after_classification(number: bytes) -> None:
    raw = b'[{"type":"smbg","deviceTime":"2021-03-17T08:33:00","value":' + number + b"}]"

    outcome = classify(raw)

    assert isinstance(outcome, Success)
    assert extract(outcome.measurements) == []
