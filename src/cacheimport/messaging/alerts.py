"""Alert sinks the top-level handler reports failures to."""

from __future__ import annotations

import json
import logging

from cacheimport.core.protocols import IMessagePublisher
from cacheimport.models.events import StorageEvent

logger = logging.getLogger(__name__)


class LoggingAlertSink:
    """Logs failures at ERROR with traceback for log-based alerting."""

    def report(self, event: StorageEvent, error: Exception) -> None:
        logger.error(
            "Handler failed for s3://%s/%s: %s", event.bucket, event.name, error,
            exc_info=(type(error), error, error.__traceback__),
        )


class TopicAlertSink:
    """Logs, then publishes a JSON failure summary to an alert topic."""

    def __init__(self, publisher: IMessagePublisher, topic: str) -> None:
        self._publisher = publisher
        self._topic = topic
        self._log = LoggingAlertSink()

    def report(self, event: StorageEvent, error: Exception) -> None:
        self._log.report(event, error)
        payload = {
            "bucket": event.bucket,
            "name": event.name,
            "error_type": type(error).__name__,
            "error": str(error),
        }
        # Alert delivery must not mask the failure being reported.
        try:
            self._publisher.publish(self._topic, json.dumps(payload))
        except Exception:
            logger.exception("Failed to publish alert to %s", self._topic)
