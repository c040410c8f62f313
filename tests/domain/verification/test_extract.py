from __future__ import annotations

import logging

import pytest

from vcstatus.domain.verification.extract import (
    extract_expiry_date,
    extract_screen_name,
    revealed_attribute,
    revealed_attributes,
)

from tests.helpers.verification import make_proof_payload


def test_revealed_attributes_from_first_format() -> None:
    proof = make_proof_payload(revealed={"screen_name": "example", "host": "x.com"})

    attributes = revealed_attributes(proof)

    assert attributes is not None
    assert set(attributes) == {"screen_name", "host"}
    assert revealed_attribute(proof, "host") == "x.com"


@pytest.mark.parametrize(
    "proof",
    [
        None,
        "not a mapping",
        {},
        {"by_format": None},
        {"by_format": {"pres": {}}},
        {"by_format": {"pres": {"anoncreds": {"requested_proof": {}}}}},
        {"by_format": {"pres": {"anoncreds": "broken"}}},
    ],
)
def test_revealed_attributes_fail_soft(
    proof: object,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.WARNING):
        assert revealed_attributes(proof) is None

    assert caplog.records


def test_revealed_attribute_missing_or_blank() -> None:
    proof = make_proof_payload(revealed={"screen_name": ""})

    assert revealed_attribute(proof, "screen_name") is None
    assert revealed_attribute(proof, "host") is None


def test_extract_screen_name() -> None:
    assert extract_screen_name(make_proof_payload(revealed={"screen_name": "bob"})) == "bob"
    assert extract_screen_name(make_proof_payload()) is None


def test_extract_expiry_date_converts_to_end_of_day() -> None:
    proof = make_proof_payload(revealed={"expiry_date": "2029-08-31"})

    assert extract_expiry_date(proof) == "2029-08-31T23:59:59.999Z"


@pytest.mark.parametrize("raw", ["20290831", "2029-8-31", "2029-02-30", "31/08/2029", ""])
def test_extract_expiry_date_rejects_other_formats(raw: str) -> None:
    assert extract_expiry_date(make_proof_payload(revealed={"expiry_date": raw})) is None
