"""Repository store adapter for ``com.atproto.repo`` XRPC endpoints."""

from __future__ import annotations

from .client import RecordStoreError, XrpcRecordStore
from .schema import CreateRecordResponse, ListRecordsResponse, RecordEnvelope

__all__ = [
    "CreateRecordResponse",
    "ListRecordsResponse",
    "RecordEnvelope",
    "RecordStoreError",
    "XrpcRecordStore",
]
