"""Integration test fixtures — LocalStack S3 and SNS."""

from __future__ import annotations

import os
import uuid

import boto3
import pytest

# Default LocalStack endpoint
LOCALSTACK_URL = os.environ.get("LOCALSTACK_URL", "http://localhost:4566")


def _localstack_available() -> bool:
    """Check if LocalStack is reachable."""
    try:
        client = boto3.client("s3", region_name="us-east-1", endpoint_url=LOCALSTACK_URL)
        client.list_buckets()
        return True
    except Exception:
        return False


skip_no_localstack = pytest.mark.skipif(
    not _localstack_available(),
    reason="LocalStack not available",
)


@pytest.fixture(scope="session")
def localstack_s3():
    """S3 client pointing at LocalStack."""
    return boto3.client("s3", region_name="us-east-1", endpoint_url=LOCALSTACK_URL)


@pytest.fixture(scope="session")
def localstack_sns():
    """SNS client pointing at LocalStack."""
    return boto3.client("sns", region_name="us-east-1", endpoint_url=LOCALSTACK_URL)


@pytest.fixture
def resource_bucket(localstack_s3):
    """Fresh resource bucket per test."""
    name = f"cacheimport-it-{uuid.uuid4().hex[:12]}"
    localstack_s3.create_bucket(Bucket=name)
    return name
