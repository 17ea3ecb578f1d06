"""TableAdmin — bounded-retry creation and compensating deletion of cache tables."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from cacheimport.core.config import RetryConfig
from cacheimport.core.exceptions import ProvisioningError, TableNotReadyError
from cacheimport.core.protocols import IWideColumnAdmin
from cacheimport.core.types import AdminFactory

logger = logging.getLogger(__name__)

COLUMN_FAMILY = "csv"


@dataclass(frozen=True)
class BackoffPolicy:
    """Fixed-delay retry policy bounded by an overall deadline."""

    max_attempts: int = 3
    delay_seconds: float = 60.0
    deadline_seconds: float = 600.0

    @classmethod
    def from_config(cls, config: RetryConfig) -> BackoffPolicy:
        return cls(
            max_attempts=config.create_table_attempts,
            delay_seconds=config.delay_seconds,
            deadline_seconds=config.deadline_seconds,
        )


class TableAdmin:
    """Creates and deletes wide-column tables through per-call admin clients.

    ``admin_factory(project_id, instance)`` returns an ``IWideColumnAdmin``.
    Waits between attempts go through ``cancel.wait`` so a set event stops the
    retry loop early; ``clock`` measures the deadline.
    """

    def __init__(
        self,
        admin_factory: AdminFactory,
        policy: BackoffPolicy | None = None,
        *,
        cancel: threading.Event | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._admin_factory = admin_factory
        self._policy = policy or BackoffPolicy()
        self._cancel = cancel or threading.Event()
        self._clock = clock

    def _admin(self, project_id: str, instance: str) -> IWideColumnAdmin:
        try:
            return self._admin_factory(project_id, instance)
        except Exception as exc:
            raise ProvisioningError(f"Unable to create a table admin client: {exc}") from exc

    def setup_table(self, project_id: str, instance: str, table_id: str) -> None:
        """Create ``table_id`` and its column family.

        Not idempotent: an existing table makes every create attempt fail.

        Each create call is bounded by the time left before the deadline.

        Raises:
            ProvisioningError: creation failed on every attempt, the deadline
                passed, the wait was cancelled, the new table never became
                ready, or the column family failed.
        """
        admin = self._admin(project_id, instance)
        policy = self._policy
        deadline = self._clock() + policy.deadline_seconds
        last_error: Exception | None = None

        for attempt in range(policy.max_attempts):
            logger.info("Creating new table (%d): %s/%s", attempt, instance, table_id)
            try:
                admin.create_table(table_id, timeout=max(deadline - self._clock(), 0.0))
                break
            except TableNotReadyError as exc:
                # The table is left CREATING; another create call would conflict.
                raise ProvisioningError(
                    f"Unable to create table: {table_id}, not ready before the deadline "
                    f"on attempt {attempt + 1}, got error: {exc}"
                ) from exc
            except Exception as exc:
                last_error = exc
                logger.warning("Error creating table %s: %s, retry...", table_id, exc)

            if attempt == policy.max_attempts - 1:
                continue
            remaining = deadline - self._clock()
            if remaining <= 0:
                raise ProvisioningError(
                    f"Unable to create table: {table_id}, deadline exceeded after "
                    f"{attempt + 1} attempt(s), got error: {last_error}"
                ) from last_error
            if self._cancel.wait(min(policy.delay_seconds, remaining)):
                raise ProvisioningError(
                    f"Unable to create table: {table_id}, cancelled after "
                    f"{attempt + 1} attempt(s), got error: {last_error}"
                ) from last_error
        else:
            raise ProvisioningError(
                f"Unable to create table: {table_id} after {policy.max_attempts} "
                f"attempt(s), got error: {last_error}"
            ) from last_error

        logger.info("Creating column family %s in table %s/%s", COLUMN_FAMILY, instance, table_id)
        try:
            admin.create_column_family(table_id, COLUMN_FAMILY)
        except Exception as exc:
            raise ProvisioningError(
                f"Unable to create column family: {COLUMN_FAMILY} for table: {table_id}, "
                f"got error: {exc}"
            ) from exc

    def delete_table(self, project_id: str, instance: str, table_id: str) -> None:
        """Single-attempt deletion, used as a compensating action."""
        admin = self._admin(project_id, instance)
        logger.info("Deleting table %s/%s", instance, table_id)
        try:
            admin.delete_table(table_id)
        except Exception as exc:
            raise ProvisioningError(f"Unable to delete table: {table_id}, got error: {exc}") from exc
