"""cacheimport exception hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cacheimport.models.workflow import CompensationOutcome


class CacheImportError(Exception):
    """Base exception for all cacheimport errors."""


class ConfigurationError(CacheImportError):
    """A required setting is absent."""


class PathFormatError(CacheImportError):
    """A storage path or event key does not have the expected shape."""


class DuplicateWorkError(CacheImportError):
    """The Launched marker already exists for a table."""

    def __init__(self, table_id: str) -> None:
        self.table_id = table_id
        super().__init__(f"Cache was already built for {table_id}")


class StorageError(CacheImportError):
    """Object storage operation failed."""


class ProvisioningError(CacheImportError):
    """Wide-column table or column family could not be created or deleted."""


class TableNotReadyError(ProvisioningError):
    """A created table did not become usable in time; it may still exist."""


class JobLaunchError(CacheImportError):
    """Batch ingestion job launch request failed."""


class PublishError(CacheImportError):
    """Message bus publish failed."""


class StepFailedError(CacheImportError):
    """A workflow step failed after provisioning; carries the rollback outcome."""

    def __init__(
        self,
        step: str,
        table_id: str,
        message: str,
        compensation: CompensationOutcome | None = None,
    ) -> None:
        self.step = step
        self.table_id = table_id
        self.compensation = compensation
        super().__init__(f"Step {step} failed for table {table_id}: {message}")
