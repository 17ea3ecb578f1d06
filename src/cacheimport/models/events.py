"""Inbound storage notification models."""

from __future__ import annotations

from urllib.parse import unquote_plus

from pydantic import BaseModel

from cacheimport.core.types import JsonDict


class StorageEvent(BaseModel):
    """Object key and bucket of the notification that triggered the handler."""

    name: str
    bucket: str = ""

    @classmethod
    def from_s3_record(cls, record: JsonDict) -> StorageEvent:
        """Build from one ``Records[]`` entry of an S3 event notification.

        S3 URL-encodes object keys in notifications (spaces arrive as ``+``).
        """
        s3 = record.get("s3", {})
        return cls(
            name=unquote_plus(s3.get("object", {}).get("key", "")),
            bucket=s3.get("bucket", {}).get("name", ""),
        )


def events_from_notification(payload: JsonDict) -> list[StorageEvent]:
    """Extract storage events from a Lambda payload.

    Accepts either an S3 notification (``{"Records": [...]}``) or a bare
    ``{"name": ..., "bucket": ...}`` event.
    """
    if "Records" in payload:
        return [StorageEvent.from_s3_record(r) for r in payload["Records"]]
    return [StorageEvent.model_validate(payload)]
