"""ControllerTrigger — wakes the import controller when a trigger file lands."""

from __future__ import annotations

import logging

from cacheimport.core.exceptions import ConfigurationError
from cacheimport.core.protocols import IMessagePublisher
from cacheimport.storage.paths import StoragePath

logger = logging.getLogger(__name__)


class ControllerTrigger:
    """Publishes the absolute path of a trigger object to the controller topic."""

    def __init__(self, publisher: IMessagePublisher, topic: str | None) -> None:
        self._publisher = publisher
        self._topic = topic

    def trigger(self, bucket: str, key: str) -> str:
        """Publish one message and return its message id. No retry."""
        if not self._topic:
            raise ConfigurationError("controller_trigger_topic is not set")
        path = StoragePath(bucket, key).uri
        logger.info("Using topic %s to trigger controller for %s", self._topic, path)
        return self._publisher.publish(self._topic, path)
