"""Lambda entry point: S3 notification -> EventRouter -> structured results.

Failures never escape as exceptions. Each becomes a ``failed``
HandlerResult and is passed to the configured alert sink.
"""

from __future__ import annotations

import logging
from typing import Any

from cacheimport.core.config import ImportSettings, load_settings
from cacheimport.core.exceptions import CacheImportError
from cacheimport.core.logger_setup import configure_logging
from cacheimport.core.protocols import IAlertSink
from cacheimport.core.types import JsonDict
from cacheimport.launch.glue_launcher import GlueJobLauncher
from cacheimport.messaging.alerts import LoggingAlertSink, TopicAlertSink
from cacheimport.messaging.controller_trigger import ControllerTrigger
from cacheimport.messaging.sns_publisher import SNSPublisher
from cacheimport.models.events import StorageEvent, events_from_notification
from cacheimport.models.workflow import HandlerResult, ResultStatus, Route
from cacheimport.persistence import create_persistence
from cacheimport.provisioning.table_admin import BackoffPolicy, TableAdmin
from cacheimport.storage.paths import branch_segment
from cacheimport.workflow.router import EventRouter
from cacheimport.workflow.state_machine import CacheImportStateMachine

logger = logging.getLogger(__name__)

_ROUTES = {r.value for r in Route}

_runtime: tuple[EventRouter, IAlertSink] | None = None


def build_router(settings: ImportSettings) -> tuple[EventRouter, IAlertSink]:
    """Wire production backends from settings."""
    store, admin_factory = create_persistence(settings)
    publisher = SNSPublisher(region=settings.aws.region, endpoint_url=settings.aws.endpoint_url)
    launcher = GlueJobLauncher(region=settings.aws.region, endpoint_url=settings.aws.endpoint_url)

    state_machine = CacheImportStateMachine(
        settings=settings,
        store=store,
        tables=TableAdmin(admin_factory, BackoffPolicy.from_config(settings.retry)),
        launcher=launcher,
    )
    trigger = ControllerTrigger(publisher, settings.controller_trigger_topic)
    router = EventRouter(state_machine, trigger, default_bucket=settings.bucket)

    alerts: IAlertSink
    if settings.alert_topic:
        alerts = TopicAlertSink(publisher, settings.alert_topic)
    else:
        alerts = LoggingAlertSink()
    return router, alerts


def handle_event(router: EventRouter, alerts: IAlertSink, event: StorageEvent) -> HandlerResult:
    """Route one event, converting any failure into a reported result."""
    try:
        return router.route(event)
    except CacheImportError as exc:
        return _failed(alerts, event, exc)
    except Exception as exc:
        logger.exception("Unexpected error handling %s", event.name)
        return _failed(alerts, event, exc)


def _failed(alerts: IAlertSink, event: StorageEvent, exc: Exception) -> HandlerResult:
    alerts.report(event, exc)
    branch = branch_segment(event.name)
    return HandlerResult(
        status=ResultStatus.FAILED,
        event_name=event.name,
        bucket=event.bucket,
        route=Route(branch) if branch in _ROUTES else None,
        error=str(exc),
        compensation=getattr(exc, "compensation", None),
    )


def _get_runtime() -> tuple[EventRouter, IAlertSink]:
    global _runtime
    if _runtime is None:
        settings = load_settings()
        configure_logging(settings.log_level)
        _runtime = build_router(settings)
    return _runtime


def lambda_handler(event: JsonDict, _context: Any) -> JsonDict:
    router, alerts = _get_runtime()
    results = [handle_event(router, alerts, e) for e in events_from_notification(event)]
    failed = sum(1 for r in results if r.status == ResultStatus.FAILED)
    if failed:
        logger.warning("%d of %d event(s) failed", failed, len(results))
    return {
        "results": [r.model_dump(mode="json") for r in results],
        "failed": failed,
    }
