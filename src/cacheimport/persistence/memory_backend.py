"""In-memory backends for unit tests — dict-backed recording fakes.

Every fake appends ``(operation, argument)`` tuples to ``calls`` and, when a
shared ``journal`` list is passed in, to that list as well so tests can assert
cross-collaborator ordering. Failures are injected by setting the matching
``fail_*`` attribute to an exception instance (or a list consumed per call).
"""

from __future__ import annotations

from typing import Any

from cacheimport.core.exceptions import ProvisioningError


class _Recorder:
    def __init__(self, journal: list[tuple[str, Any]] | None = None) -> None:
        self.calls: list[tuple[str, Any]] = []
        self._journal = journal

    def _record(self, op: str, arg: Any) -> None:
        self.calls.append((op, arg))
        if self._journal is not None:
            self._journal.append((op, arg))

    def count(self, op: str) -> int:
        return sum(1 for name, _ in self.calls if name == op)

    @staticmethod
    def _next_failure(failure: Any) -> Exception | None:
        if isinstance(failure, list):
            return failure.pop(0) if failure else None
        return failure


class MemoryObjectStore(_Recorder):
    """Dict-backed IObjectStore keyed by absolute ``s3://`` path."""

    def __init__(self, journal: list[tuple[str, Any]] | None = None) -> None:
        super().__init__(journal)
        self.objects: dict[str, bytes] = {}
        self.fail_exists: Any = None
        self.fail_write: Any = None

    def exists(self, path: str) -> bool:
        self._record("exists", path)
        err = self._next_failure(self.fail_exists)
        if err is not None:
            raise err
        return path in self.objects

    def write(self, path: str, data: bytes) -> None:
        self._record("write", path)
        err = self._next_failure(self.fail_write)
        if err is not None:
            raise err
        self.objects[path] = data


class MemoryWideColumnAdmin(_Recorder):
    """Dict-backed IWideColumnAdmin; creating an existing table fails."""

    def __init__(self, journal: list[tuple[str, Any]] | None = None) -> None:
        super().__init__(journal)
        self.tables: dict[str, set[str]] = {}
        self.create_timeouts: list[float | None] = []
        self.fail_create_table: Any = None
        self.fail_create_column_family: Any = None
        self.fail_delete_table: Any = None

    def create_table(self, table_id: str, timeout: float | None = None) -> None:
        self._record("create_table", table_id)
        self.create_timeouts.append(timeout)
        err = self._next_failure(self.fail_create_table)
        if err is not None:
            raise err
        if table_id in self.tables:
            raise ProvisioningError(f"Table {table_id} already exists")
        self.tables[table_id] = set()

    def create_column_family(self, table_id: str, family: str) -> None:
        self._record("create_column_family", (table_id, family))
        err = self._next_failure(self.fail_create_column_family)
        if err is not None:
            raise err
        if table_id not in self.tables:
            raise ProvisioningError(f"Table {table_id} not found")
        self.tables[table_id].add(family)

    def delete_table(self, table_id: str) -> None:
        self._record("delete_table", table_id)
        err = self._next_failure(self.fail_delete_table)
        if err is not None:
            raise err
        self.tables.pop(table_id, None)


class MemoryJobLauncher(_Recorder):
    """Records launch requests and hands back sequential run ids."""

    def __init__(self, journal: list[tuple[str, Any]] | None = None) -> None:
        super().__init__(journal)
        self.requests: list[Any] = []
        self.fail_launch: Any = None

    def launch(self, request: Any) -> str:
        self._record("launch", request.table_id)
        err = self._next_failure(self.fail_launch)
        if err is not None:
            raise err
        self.requests.append(request)
        return f"jr_{len(self.requests)}"


class MemoryMessagePublisher(_Recorder):
    """Records published messages per topic."""

    def __init__(self, journal: list[tuple[str, Any]] | None = None) -> None:
        super().__init__(journal)
        self.messages: dict[str, list[str]] = {}
        self.fail_publish: Any = None

    def publish(self, topic: str, message: str) -> str:
        self._record("publish", (topic, message))
        err = self._next_failure(self.fail_publish)
        if err is not None:
            raise err
        self.messages.setdefault(topic, []).append(message)
        return f"msg-{sum(len(v) for v in self.messages.values())}"


class MemoryAlertSink:
    """Collects reported failures."""

    def __init__(self) -> None:
        self.reports: list[tuple[Any, Exception]] = []

    def report(self, event: Any, error: Exception) -> None:
        self.reports.append((event, error))

