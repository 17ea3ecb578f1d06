"""Amazon Keyspaces backend implementing IWideColumnAdmin.

A wide-column table maps onto a Keyspaces table inside the keyspace named by
the configured instance. Rows are keyed by ``row_key``; a column family is a
``map<text, text>`` column holding the family's qualifiers.
"""

from __future__ import annotations

import logging
import time

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from cacheimport.core.exceptions import ProvisioningError, TableNotReadyError

logger = logging.getLogger(__name__)

ROW_KEY_COLUMN = "row_key"
FAMILY_COLUMN_TYPE = "map<text, text>"


class KeyspacesAdminClient:
    """Production IWideColumnAdmin bound to one project and keyspace."""

    def __init__(self, project_id: str, keyspace: str, region: str = "us-east-1",
                 endpoint_url: str | None = None, poll_interval: float = 2.0,
                 max_polls: int = 150) -> None:
        self._project_id = project_id
        self._keyspace = keyspace
        self._poll_interval = poll_interval
        self._max_polls = max_polls
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("keyspaces", **kwargs)

    def create_table(self, table_id: str, timeout: float | None = None) -> None:
        """Create the table and block until Keyspaces reports it ACTIVE.

        ``timeout`` bounds the wait in seconds; running out raises
        ``TableNotReadyError`` with the table left behind.
        """
        try:
            self._client.create_table(
                keyspaceName=self._keyspace,
                tableName=table_id,
                schemaDefinition={
                    "allColumns": [{"name": ROW_KEY_COLUMN, "type": "text"}],
                    "partitionKeys": [{"name": ROW_KEY_COLUMN}],
                },
                tags=[{"key": "project", "value": self._project_id}],
            )
        except (ClientError, BotoCoreError) as exc:
            raise ProvisioningError(
                f"Keyspaces create_table failed for {self._keyspace}.{table_id}: {exc}"
            ) from exc
        self._wait_active(table_id, timeout)

    def create_column_family(self, table_id: str, family: str) -> None:
        try:
            self._client.update_table(
                keyspaceName=self._keyspace,
                tableName=table_id,
                addColumns=[{"name": family, "type": FAMILY_COLUMN_TYPE}],
            )
        except (ClientError, BotoCoreError) as exc:
            raise ProvisioningError(
                f"Keyspaces add column {family} failed for {self._keyspace}.{table_id}: {exc}"
            ) from exc

    def delete_table(self, table_id: str) -> None:
        try:
            self._client.delete_table(keyspaceName=self._keyspace, tableName=table_id)
        except (ClientError, BotoCoreError) as exc:
            raise ProvisioningError(
                f"Keyspaces delete_table failed for {self._keyspace}.{table_id}: {exc}"
            ) from exc

    def _wait_active(self, table_id: str, timeout: float | None) -> None:
        stop_at = None if timeout is None else time.monotonic() + timeout
        for _ in range(self._max_polls):
            try:
                resp = self._client.get_table(keyspaceName=self._keyspace, tableName=table_id)
            except (ClientError, BotoCoreError) as exc:
                raise ProvisioningError(
                    f"Keyspaces get_table failed for {self._keyspace}.{table_id}: {exc}"
                ) from exc
            status = resp.get("status")
            if status == "ACTIVE":
                return
            if status != "CREATING":
                raise ProvisioningError(
                    f"Table {self._keyspace}.{table_id} entered status {status} while creating"
                )
            delay = self._poll_interval
            if stop_at is not None:
                remaining = stop_at - time.monotonic()
                if remaining <= 0:
                    break
                delay = min(delay, remaining)
            logger.debug("Waiting for table %s.%s to become ACTIVE", self._keyspace, table_id)
            time.sleep(delay)
        raise TableNotReadyError(f"Table {self._keyspace}.{table_id} did not become ACTIVE")
