"""CacheImportStateMachine — Init -> Launched -> Completed for one cache table.

All state lives in marker objects under ``<root>/control/<table_id>/``:

* ``init.*`` lands       -> provision the table, launch the ingestion job,
                             write ``launched.txt`` (state LAUNCHED).
* ``completed.*`` lands  -> ingestion finished (state COMPLETED).

The Launched marker is the idempotency token for provisioning. Two Init events
for the same table racing each other can both see it absent; the second table
creation then fails.
"""

from __future__ import annotations

import logging

from cacheimport.core.config import ImportSettings
from cacheimport.core.exceptions import (
    DuplicateWorkError,
    StepFailedError,
    StorageError,
)
from cacheimport.core.protocols import IJobLauncher, IObjectStore
from cacheimport.models.workflow import CompensationOutcome, JobLaunchRequest, WorkflowState
from cacheimport.provisioning.table_admin import TableAdmin
from cacheimport.storage.paths import (
    COMPLETED_MARKER,
    INIT_MARKER,
    LAUNCHED_FILE,
    ImportLocation,
    import_root,
    marker_kind,
    table_id_from_key,
)

logger = logging.getLogger(__name__)


class CacheImportStateMachine:
    """Drives one control-branch event to its next workflow state."""

    def __init__(
        self,
        *,
        settings: ImportSettings,
        store: IObjectStore,
        tables: TableAdmin,
        launcher: IJobLauncher,
    ) -> None:
        self._settings = settings
        self._store = store
        self._tables = tables
        self._launcher = launcher

    def handle(self, bucket: str, key: str) -> WorkflowState | None:
        """Process one control key; returns the state reached, or None for no-op."""
        kind = marker_kind(key)
        if kind == INIT_MARKER:
            return self._on_init(bucket, key)
        if kind == COMPLETED_MARKER:
            return self._on_completed(key)
        logger.info("[%s] No transition for control file", key)
        return None

    def _on_init(self, bucket: str, key: str) -> WorkflowState:
        logger.info("[%s] State Init", key)
        table_id = table_id_from_key(key)
        location = ImportLocation(bucket, import_root(key))
        launched_path = location.marker(table_id, LAUNCHED_FILE)

        try:
            exists = self._store.exists(launched_path)
        except StorageError as exc:
            raise StorageError(f"Failed to check {LAUNCHED_FILE}: {exc}") from exc
        if exists:
            raise DuplicateWorkError(table_id)

        s = self._settings
        self._tables.setup_table(s.project_id, s.instance, table_id)

        request = JobLaunchRequest(
            project_id=s.project_id,
            instance=s.instance,
            cluster=s.cluster,
            table_id=table_id,
            data_path=location.cache,
            control_path=location.control,
            template=s.job_template,
        )
        try:
            run_id = self._launcher.launch(request)
        except Exception as exc:
            outcome = self._compensate(table_id, reason="failed job launch")
            raise StepFailedError("launch_job", table_id, str(exc), outcome) from exc

        # Save the fact that the job was launched.
        try:
            self._store.write(launched_path, b"")
        except Exception as exc:
            # The launched job keeps running against a deleted table.
            logger.error("[%s] Job run %s orphaned by failed marker write", key, run_id)
            outcome = self._compensate(table_id, reason="failed marker write")
            raise StepFailedError("write_launched_marker", table_id, str(exc), outcome) from exc

        logger.info("[%s] State Launched (job run %s)", key, run_id)
        return WorkflowState.LAUNCHED

    def _on_completed(self, key: str) -> WorkflowState:
        # TODO: notify the serving layer to load the finished table.
        logger.info("[%s] Completed work", key)
        return WorkflowState.COMPLETED

    def _compensate(self, table_id: str, *, reason: str) -> CompensationOutcome:
        """Best-effort delete of the just-created table."""
        s = self._settings
        try:
            self._tables.delete_table(s.project_id, s.instance, table_id)
        except Exception as exc:
            logger.error("Failed to delete table %s on %s: %s", table_id, reason, exc)
            return CompensationOutcome(
                action="delete_table", table_id=table_id, succeeded=False, error=str(exc),
            )
        logger.info("Deleted table %s on %s", table_id, reason)
        return CompensationOutcome(action="delete_table", table_id=table_id, succeeded=True)
