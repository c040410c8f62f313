"""Presentation requests sent to the verifier for each category."""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date

MINIMUM_AGE_YEARS = 18

ACCOUNT_ATTRIBUTES = (
    "screen_name",
    "verification_timestamp",
    "host",
    "notary_url",
    "verifier_key",
    "notary_key",
    "version",
)
AGE_ATTRIBUTES = ("issuing_authority", "expiry_date")


def generate_nonce() -> str:
    return str(secrets.randbelow(1_000_000_000))


def birth_date_threshold(today: date, *, years: int = MINIMUM_AGE_YEARS) -> int:
    """Latest admissible birth date as a ``YYYYMMDD`` integer."""

    try:
        threshold = today.replace(year=today.year - years)
    except ValueError:
        threshold = today.replace(year=today.year - years, month=3, day=1)
    return int(threshold.strftime("%Y%m%d"))


def _restricted(name: str, cred_def_id: str) -> dict[str, object]:
    return {"name": name, "restrictions": [{"cred_def_id": cred_def_id}]}


def _proof_request(
    connection_id: str,
    cred_def_id: str,
    *,
    name: str,
    attributes: tuple[str, ...],
    predicates: dict[str, object],
    nonce: str,
) -> dict[str, object]:
    return {
        "connection_id": connection_id,
        "anoncreds": {"cred_def_id": cred_def_id},
        "presentation_request": {
            "anoncreds": {
                "name": name,
                "version": "1.0",
                "requested_attributes": {
                    attribute: _restricted(attribute, cred_def_id) for attribute in attributes
                },
                "requested_predicates": predicates,
                "nonce": nonce,
            }
        },
    }


def age_proof_request(
    connection_id: str,
    cred_def_id: str,
    *,
    today: date,
    nonce: str | None = None,
) -> dict[str, object]:
    """Request proof of majority age from a mobile driving licence credential."""

    predicate = _restricted("date_of_birth", cred_def_id)
    predicate["p_type"] = "<="
    predicate["p_value"] = birth_date_threshold(today)
    return _proof_request(
        connection_id,
        cred_def_id,
        name="mDL Age Verification",
        attributes=AGE_ATTRIBUTES,
        predicates={"age_verification": predicate},
        nonce=nonce or generate_nonce(),
    )


def account_proof_request(
    connection_id: str,
    cred_def_id: str,
    *,
    nonce: str | None = None,
) -> dict[str, object]:
    """Request the notarised attributes of an external account credential."""

    return _proof_request(
        connection_id,
        cred_def_id,
        name="X Account Verification",
        attributes=ACCOUNT_ATTRIBUTES,
        predicates={},
        nonce=nonce or generate_nonce(),
    )
