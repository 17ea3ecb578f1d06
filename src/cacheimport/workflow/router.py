"""EventRouter — classifies a storage event by key shape and dispatches it."""

from __future__ import annotations

import logging
from typing import Protocol

from cacheimport.models.events import StorageEvent
from cacheimport.models.workflow import HandlerResult, ResultStatus, Route, WorkflowState
from cacheimport.storage.paths import (
    CONTROL_DIR,
    CONTROLLER_TRIGGER_FILE,
    PROCESS_DIR,
    branch_segment,
)

logger = logging.getLogger(__name__)


class _StateMachine(Protocol):
    def handle(self, bucket: str, key: str) -> WorkflowState | None: ...


class _Trigger(Protocol):
    def trigger(self, bucket: str, key: str) -> str: ...


class EventRouter:
    """Routes ``.../control/<table>/<marker>`` keys to the state machine and
    ``.../process/<dir>/trigger.csv`` keys to the controller trigger.

    Errors from either target propagate; the caller turns them into results.
    """

    def __init__(self, state_machine: _StateMachine, controller_trigger: _Trigger,
                 default_bucket: str = "") -> None:
        self._state_machine = state_machine
        self._controller_trigger = controller_trigger
        self._default_bucket = default_bucket

    def route(self, event: StorageEvent) -> HandlerResult:
        bucket = event.bucket or self._default_bucket
        branch = branch_segment(event.name)
        if branch is None:
            logger.info("Expected 3+ '/'-separated parts, got %s; ignoring as irrelevant file", event.name)
            return self._ignored(event, bucket)

        if branch == CONTROL_DIR:
            state = self._state_machine.handle(bucket, event.name)
            return HandlerResult(
                status=ResultStatus.OK if state else ResultStatus.IGNORED,
                event_name=event.name, bucket=bucket, route=Route.CONTROL, state=state,
            )
        if branch == PROCESS_DIR and event.name.endswith(CONTROLLER_TRIGGER_FILE):
            message_id = self._controller_trigger.trigger(bucket, event.name)
            return HandlerResult(
                status=ResultStatus.OK, event_name=event.name, bucket=bucket,
                route=Route.PROCESS, message_id=message_id,
            )

        logger.info("Ignore irrelevant trigger from file %s", event.name)
        return self._ignored(event, bucket)

    @staticmethod
    def _ignored(event: StorageEvent, bucket: str) -> HandlerResult:
        return HandlerResult(status=ResultStatus.IGNORED, event_name=event.name, bucket=bucket)
