"""Workflow state, job launch, compensation, and handler result models."""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel


class WorkflowState(StrEnum):
    INIT = "INIT"
    LAUNCHED = "LAUNCHED"
    COMPLETED = "COMPLETED"


class ResultStatus(StrEnum):
    OK = "ok"
    IGNORED = "ignored"
    FAILED = "failed"


class Route(StrEnum):
    CONTROL = "control"
    PROCESS = "process"


class JobLaunchRequest(BaseModel):
    """Parameters handed to the batch ingestion job launcher."""

    project_id: str
    instance: str
    cluster: str
    table_id: str
    data_path: str  # cache directory the job writes into
    control_path: str  # control directory the job signals completion in
    template: str


class CompensationOutcome(BaseModel):
    """Result of a best-effort rollback step."""

    action: str
    table_id: str
    succeeded: bool
    error: str = ""


class HandlerResult(BaseModel):
    """Structured outcome of handling one storage event."""

    status: ResultStatus
    event_name: str
    bucket: str = ""
    route: Optional[Route] = None
    state: Optional[WorkflowState] = None
    message_id: str = ""
    error: str = ""
    compensation: Optional[CompensationOutcome] = None
