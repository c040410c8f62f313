"""Schema-tolerant extraction of revealed attributes from proof records.

Proof records come from the verifier service as loosely structured JSON.
Revealed attributes live at::

    by_format.pres.<format>.requested_proof.revealed_attrs.<name>.raw

Every step fails soft: a missing or mistyped level logs a warning and yields
``None``. Nothing here raises on unexpected input.
"""

from __future__ import annotations

import re
from datetime import date
from logging import getLogger
from typing import TYPE_CHECKING, cast

if TYPE_CHECKING:
    from collections.abc import Mapping

log = getLogger(__name__)

_EXPIRY_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _child(value: object, key: str) -> Mapping[str, object] | None:
    if not isinstance(value, dict):
        return None
    child = cast("Mapping[str, object]", value).get(key)
    if not isinstance(child, dict):
        return None
    return cast("Mapping[str, object]", child)


def revealed_attributes(proof: object) -> Mapping[str, object] | None:
    """Return the revealed attribute mapping of the first presentation format."""

    presentation = _child(_child(proof, "by_format"), "pres")
    if presentation is None:
        log.warning("No proof data found in by_format.pres")
        return None

    if not presentation:
        log.warning("No format keys found in proof data")
        return None

    # The first format is the one the verifier negotiated (anoncreds in practice).
    first_format = next(iter(presentation.values()))
    attributes = _child(_child(first_format, "requested_proof"), "revealed_attrs")
    if attributes is None:
        log.warning("No revealed attributes found in proof")
        return None
    return attributes


def revealed_attribute(proof: object, name: str) -> str | None:
    """Return the raw value of one revealed attribute as a string."""

    attributes = revealed_attributes(proof)
    if attributes is None:
        return None

    attribute = _child(attributes, name)
    if attribute is None:
        log.warning(
            "No %s attribute found in revealed attributes (available: %s)",
            name,
            sorted(attributes),
        )
        return None

    raw = attribute.get("raw")
    if raw is None or raw == "":
        log.warning("No raw %s value found", name)
        return None
    return str(raw)


def extract_screen_name(proof: object) -> str | None:
    return revealed_attribute(proof, "screen_name")


def extract_expiry_date(proof: object) -> str | None:
    """Return the revealed ``expiry_date`` as an end-of-day UTC ISO timestamp.

    The credential stores ``YYYY-MM-DD``; anything else is rejected.
    """

    raw = revealed_attribute(proof, "expiry_date")
    if raw is None:
        return None

    if not _EXPIRY_DATE_PATTERN.match(raw):
        log.warning("Invalid expiry date format %r, expected YYYY-MM-DD", raw)
        return None
    try:
        date.fromisoformat(raw)
    except ValueError:
        log.warning("Expiry date %r is not a calendar date", raw)
        return None
    return f"{raw}T23:59:59.999Z"


__all__ = [
    "extract_expiry_date",
    "extract_screen_name",
    "revealed_attribute",
    "revealed_attributes",
]
