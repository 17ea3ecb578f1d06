"""Tests for TableAdmin retry, deadline, and column-family behavior."""

from __future__ import annotations

import pytest

from cacheimport.core.exceptions import ProvisioningError, TableNotReadyError
from cacheimport.provisioning.table_admin import COLUMN_FAMILY, BackoffPolicy, TableAdmin
from tests.fakes import MemoryWideColumnAdmin


class RecordingEvent:
    """threading.Event stand-in that records waits instead of sleeping."""

    def __init__(self, cancel_after: int | None = None, clock=None) -> None:
        self.waits: list[float] = []
        self._cancel_after = cancel_after
        self._clock = clock

    def wait(self, timeout: float) -> bool:
        self.waits.append(timeout)
        if self._clock is not None:
            self._clock.advance(timeout)
        return self._cancel_after is not None and len(self.waits) >= self._cancel_after


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def admin():
    return MemoryWideColumnAdmin()


@pytest.fixture
def factory_calls():
    return []


def make_tables(admin, factory_calls, event=None, clock=None, policy=None):
    def factory(project_id, instance):
        factory_calls.append((project_id, instance))
        return admin

    clock = clock or FakeClock()
    return TableAdmin(
        factory,
        policy or BackoffPolicy(),
        cancel=event or RecordingEvent(clock=clock),
        clock=clock,
    )


class TestSetupTable:
    def test_creates_table_and_column_family_once(self, admin, factory_calls):
        tables = make_tables(admin, factory_calls)
        tables.setup_table("proj", "ks", "T1")
        assert admin.count("create_table") == 1
        assert admin.calls[-1] == ("create_column_family", ("T1", COLUMN_FAMILY))
        assert admin.tables == {"T1": {"csv"}}
        assert factory_calls == [("proj", "ks")]

    def test_retries_after_transient_failure(self, admin, factory_calls):
        admin.fail_create_table = [ProvisioningError("unavailable")]
        event = RecordingEvent()
        tables = make_tables(admin, factory_calls, event=event)
        tables.setup_table("proj", "ks", "T1")
        assert admin.count("create_table") == 2
        assert event.waits == [60.0]
        assert "T1" in admin.tables

    def test_gives_up_after_three_attempts(self, admin, factory_calls):
        admin.fail_create_table = ProvisioningError("still unavailable")
        event = RecordingEvent()
        tables = make_tables(admin, factory_calls, event=event)
        with pytest.raises(ProvisioningError, match="Unable to create table: T1 after 3") as exc_info:
            tables.setup_table("proj", "ks", "T1")
        assert "still unavailable" in str(exc_info.value)
        assert admin.count("create_table") == 3
        assert admin.count("create_column_family") == 0
        assert event.waits == [60.0, 60.0]

    def test_existing_table_is_not_idempotent(self, admin, factory_calls):
        tables = make_tables(admin, factory_calls)
        tables.setup_table("proj", "ks", "T1")
        with pytest.raises(ProvisioningError):
            tables.setup_table("proj", "ks", "T1")

    def test_column_family_failure_is_not_retried(self, admin, factory_calls):
        admin.fail_create_column_family = ProvisioningError("quota")
        tables = make_tables(admin, factory_calls)
        with pytest.raises(ProvisioningError, match="column family: csv"):
            tables.setup_table("proj", "ks", "T1")
        assert admin.count("create_column_family") == 1
        assert admin.count("create_table") == 1

    def test_wait_is_capped_by_deadline(self, admin, factory_calls):
        admin.fail_create_table = [ProvisioningError("a"), ProvisioningError("b")]
        clock = FakeClock()
        event = RecordingEvent(clock=clock)
        policy = BackoffPolicy(max_attempts=3, delay_seconds=60.0, deadline_seconds=90.0)
        tables = make_tables(admin, factory_calls, event=event, clock=clock, policy=policy)
        tables.setup_table("proj", "ks", "T1")
        assert event.waits == [60.0, 30.0]

    def test_deadline_exceeded_stops_retrying(self, admin, factory_calls):
        admin.fail_create_table = ProvisioningError("slow")
        clock = FakeClock()
        event = RecordingEvent(clock=clock)
        policy = BackoffPolicy(max_attempts=3, delay_seconds=60.0, deadline_seconds=60.0)
        tables = make_tables(admin, factory_calls, event=event, clock=clock, policy=policy)
        with pytest.raises(ProvisioningError, match="deadline exceeded"):
            tables.setup_table("proj", "ks", "T1")
        assert admin.count("create_table") == 2

    def test_create_call_is_bounded_by_remaining_deadline(self, admin, factory_calls):
        admin.fail_create_table = [ProvisioningError("a"), ProvisioningError("b")]
        clock = FakeClock()
        event = RecordingEvent(clock=clock)
        policy = BackoffPolicy(max_attempts=3, delay_seconds=60.0, deadline_seconds=600.0)
        tables = make_tables(admin, factory_calls, event=event, clock=clock, policy=policy)
        tables.setup_table("proj", "ks", "T1")
        assert admin.create_timeouts == [600.0, 540.0, 480.0]

    def test_table_not_ready_is_not_retried(self, admin, factory_calls):
        admin.fail_create_table = TableNotReadyError("Table ks.T1 did not become ACTIVE")
        event = RecordingEvent()
        tables = make_tables(admin, factory_calls, event=event)
        with pytest.raises(ProvisioningError, match="not ready before the deadline on attempt 1"):
            tables.setup_table("proj", "ks", "T1")
        assert admin.count("create_table") == 1
        assert admin.count("create_column_family") == 0
        assert event.waits == []

    def test_cancellation_stops_retrying(self, admin, factory_calls):
        admin.fail_create_table = ProvisioningError("unavailable")
        event = RecordingEvent(cancel_after=1)
        tables = make_tables(admin, factory_calls, event=event)
        with pytest.raises(ProvisioningError, match="cancelled"):
            tables.setup_table("proj", "ks", "T1")
        assert admin.count("create_table") == 1

    def test_admin_factory_failure_is_provisioning_error(self):
        def factory(project_id, instance):
            raise RuntimeError("no credentials")

        tables = TableAdmin(factory, BackoffPolicy())
        with pytest.raises(ProvisioningError, match="admin client"):
            tables.setup_table("proj", "ks", "T1")


class TestDeleteTable:
    def test_deletes_table(self, admin, factory_calls):
        tables = make_tables(admin, factory_calls)
        tables.setup_table("proj", "ks", "T1")
        tables.delete_table("proj", "ks", "T1")
        assert "T1" not in admin.tables

    def test_single_attempt_failure_raises(self, admin, factory_calls):
        admin.fail_delete_table = ProvisioningError("denied")
        tables = make_tables(admin, factory_calls)
        with pytest.raises(ProvisioningError, match="Unable to delete table: T1"):
            tables.delete_table("proj", "ks", "T1")
        assert admin.count("delete_table") == 1
