"""Protocol interfaces for all cacheimport collaborators.

The handler talks to storage, the table admin API, the job launcher, and the
message bus only through these Protocols, so every backend has a dict-backed
fake for tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cacheimport.models.events import StorageEvent
    from cacheimport.models.workflow import JobLaunchRequest


# ---------------------------------------------------------------------------
# Object Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IObjectStore(Protocol):
    """Existence checks and marker writes against absolute storage paths."""

    def exists(self, path: str) -> bool: ...

    def write(self, path: str, data: bytes) -> None: ...


# ---------------------------------------------------------------------------
# Wide-column Admin
# ---------------------------------------------------------------------------

@runtime_checkable
class IWideColumnAdmin(Protocol):
    """Admin API of a wide-column store, bound to one project and instance."""

    def create_table(self, table_id: str, timeout: float | None = None) -> None: ...

    def create_column_family(self, table_id: str, family: str) -> None: ...

    def delete_table(self, table_id: str) -> None: ...


# ---------------------------------------------------------------------------
# Batch Job Launcher
# ---------------------------------------------------------------------------

@runtime_checkable
class IJobLauncher(Protocol):
    """Starts the batch ingestion job; returns the run id of the launch request."""

    def launch(self, request: JobLaunchRequest) -> str: ...


# ---------------------------------------------------------------------------
# Message Bus
# ---------------------------------------------------------------------------

@runtime_checkable
class IMessagePublisher(Protocol):
    """Publishes a single message to a topic; returns the message id."""

    def publish(self, topic: str, message: str) -> str: ...


# ---------------------------------------------------------------------------
# Alerting
# ---------------------------------------------------------------------------

@runtime_checkable
class IAlertSink(Protocol):
    """Receives every failure the top-level handler converts into a result."""

    def report(self, event: StorageEvent, error: Exception) -> None: ...
