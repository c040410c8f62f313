"""Verification record model.

A verification record is one attestation stored in the owner's repository
collection. Records are read from user-writable storage, so ``from_value``
accepts any mapping and degrades missing or mistyped fields to empty values
instead of raising. Validity is decided later by the validator.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, cast

if TYPE_CHECKING:
    from collections.abc import Mapping


def _as_str(value: object) -> str:
    return value if isinstance(value, str) else ""


def _as_optional_str(value: object) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _as_tags(value: object) -> tuple[str, ...] | None:
    if not isinstance(value, list | tuple):
        return None
    items = cast("list[object] | tuple[object, ...]", value)
    return tuple(item for item in items if isinstance(item, str))


def _as_mapping(value: object) -> Mapping[str, object]:
    if isinstance(value, dict):
        return cast("Mapping[str, object]", value)
    return {}


@dataclass(frozen=True, slots=True)
class CommitRef:
    cid: str
    rev: str

    @classmethod
    def from_value(cls, value: object) -> CommitRef | None:
        mapping = _as_mapping(value)
        cid = _as_str(mapping.get("cid"))
        rev = _as_str(mapping.get("rev"))
        if not cid and not rev:
            return None
        return cls(cid=cid, rev=rev)


@dataclass(frozen=True, slots=True, kw_only=True)
class CredentialData:
    """Credential payload embedded in a verification record.

    ``type`` is ``None`` when the stored value was missing or not list-shaped.
    """

    uri: str = ""
    hash: str = ""
    type: tuple[str, ...] | None = ()
    purpose: tuple[str, ...] = ()
    expiration_date: str | None = None
    screen_name: str | None = None

    @classmethod
    def from_value(cls, value: object) -> CredentialData:
        mapping = _as_mapping(value)
        return cls(
            uri=_as_str(mapping.get("uri")),
            hash=_as_str(mapping.get("hash")),
            type=_as_tags(mapping.get("type")),
            purpose=_as_tags(mapping.get("purpose")) or (),
            expiration_date=_as_optional_str(mapping.get("expirationDate")),
            screen_name=_as_optional_str(mapping.get("screenName")),
        )

    def to_value(self) -> dict[str, object]:
        value: dict[str, object] = {
            "uri": self.uri,
            "hash": self.hash,
            "type": list(self.type or ()),
            "purpose": list(self.purpose),
        }
        if self.expiration_date is not None:
            value["expirationDate"] = self.expiration_date
        if self.screen_name is not None:
            value["screenName"] = self.screen_name
        return value


@dataclass(frozen=True, slots=True, kw_only=True)
class VerificationRecord:
    """One attestation as persisted in the owner's repository collection."""

    handle: str = ""
    display_name: str = ""
    subject: str = ""
    assertion: str = ""
    created_at: str = ""
    credential: CredentialData = CredentialData()

    # Store metadata, populated once the record has been written.
    uri: str | None = None
    cid: str | None = None
    rkey: str | None = None
    commit: CommitRef | None = None

    @classmethod
    def from_value(
        cls,
        value: object,
        *,
        uri: str | None = None,
        cid: str | None = None,
        rkey: str | None = None,
        commit: CommitRef | None = None,
    ) -> VerificationRecord:
        mapping = _as_mapping(value)
        return cls(
            handle=_as_str(mapping.get("handle")),
            display_name=_as_str(mapping.get("displayName")),
            subject=_as_str(mapping.get("subject")),
            assertion=_as_str(mapping.get("assertion")),
            created_at=_as_str(mapping.get("createdAt")),
            credential=CredentialData.from_value(mapping.get("credential")),
            uri=uri,
            cid=cid,
            rkey=rkey,
            commit=commit,
        )

    def to_value(self) -> dict[str, object]:
        """Return the stored value (without store metadata)."""

        return {
            "handle": self.handle,
            "displayName": self.display_name,
            "subject": self.subject,
            "assertion": self.assertion,
            "createdAt": self.created_at,
            "credential": self.credential.to_value(),
        }

    def with_store_metadata(
        self,
        *,
        uri: str | None,
        cid: str | None,
        commit: CommitRef | None = None,
    ) -> VerificationRecord:
        return replace(self, uri=uri, cid=cid, rkey=rkey_from_uri(uri), commit=commit)


def rkey_from_uri(uri: str | None) -> str | None:
    """Return the record key, the last path segment of an ``at://`` URI."""

    if not uri:
        return None
    return uri.rsplit("/", 1)[-1] or None
