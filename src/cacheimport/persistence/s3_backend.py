"""S3 object store backend implementing IObjectStore."""

from __future__ import annotations

import io

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from cacheimport.core.exceptions import StorageError
from cacheimport.storage.paths import parse_path

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class S3ObjectStore:
    """Production IObjectStore backed by S3; paths are ``s3://bucket/key``."""

    def __init__(self, region: str = "us-east-1", endpoint_url: str | None = None) -> None:
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("s3", **kwargs)

    def exists(self, path: str) -> bool:
        bucket, key = parse_path(path)
        try:
            self._client.head_object(Bucket=bucket, Key=key)
            return True
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                return False
            raise StorageError(f"S3 existence check failed for {path!r}: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"S3 existence check failed for {path!r}: {exc}") from exc

    def write(self, path: str, data: bytes) -> None:
        bucket, key = parse_path(path)
        with io.BytesIO(data) as body:
            try:
                self._client.put_object(Bucket=bucket, Key=key, Body=body)
            except (ClientError, BotoCoreError) as exc:
                raise StorageError(f"Failed to write data to {bucket}/{key}: {exc}") from exc
