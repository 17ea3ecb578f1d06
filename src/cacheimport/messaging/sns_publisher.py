"""SNS publisher implementing IMessagePublisher."""

from __future__ import annotations

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from cacheimport.core.exceptions import PublishError


class SNSPublisher:
    """Production IMessagePublisher; ``topic`` is an SNS topic ARN."""

    def __init__(self, region: str = "us-east-1", endpoint_url: str | None = None) -> None:
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("sns", **kwargs)

    def publish(self, topic: str, message: str) -> str:
        try:
            resp = self._client.publish(TopicArn=topic, Message=message)
        except (ClientError, BotoCoreError) as exc:
            raise PublishError(f"SNS publish to {topic!r} failed: {exc}") from exc
        return resp["MessageId"]
