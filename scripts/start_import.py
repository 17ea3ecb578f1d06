"""Drop the Init marker that starts a cache import for one table.

Usage:
    python scripts/start_import.py --bucket my-resources --root imports/acme \
        --table-id acme_2024_01 --endpoint-url http://localhost:4566
"""

from __future__ import annotations

import argparse
from typing import Any

import boto3

INIT_FILE = "init.txt"


def init_marker_key(root: str, table_id: str) -> str:
    """``<root>/control/<table_id>/init.txt``."""
    parts = [p.strip("/") for p in (root, "control", table_id, INIT_FILE) if p.strip("/")]
    return "/".join(parts)


def drop_init_marker(s3: Any, bucket: str, root: str, table_id: str) -> str:
    """Write an empty Init marker. Returns the key written."""
    if not table_id:
        raise ValueError("table_id must be non-empty")
    key = init_marker_key(root, table_id)
    s3.put_object(Bucket=bucket, Key=key, Body=b"")
    print(f"  Wrote s3://{bucket}/{key}")
    return key


def main() -> None:
    parser = argparse.ArgumentParser(description="Start a cache import by writing its Init marker")
    parser.add_argument("--bucket", required=True, help="Resource bucket holding the import")
    parser.add_argument("--root", default="", help="Import root key prefix (e.g. imports/acme)")
    parser.add_argument("--table-id", required=True, help="Cache table to build")
    parser.add_argument("--endpoint-url", default=None, help="S3 endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    args = parser.parse_args()

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    s3 = boto3.client("s3", **kwargs)

    print("Starting import...")
    drop_init_marker(s3, args.bucket, args.root, args.table_id)

    print("Done!")


if __name__ == "__main__":
    main()
