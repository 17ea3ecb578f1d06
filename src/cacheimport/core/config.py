"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from cacheimport.core.exceptions import ConfigurationError


class AWSConfig(BaseSettings):
    """Shared boto3 client configuration."""

    model_config = {"env_prefix": "CACHEIMPORT_AWS_"}

    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class RetryConfig(BaseSettings):
    """Table-creation backoff policy."""

    model_config = {"env_prefix": "CACHEIMPORT_RETRY_"}

    create_table_attempts: int = 3
    delay_seconds: float = 60.0
    deadline_seconds: float = 600.0


class ImportSettings(BaseSettings):
    """Root settings; every field without a default must be set and non-empty."""

    model_config = {"env_prefix": "CACHEIMPORT_"}

    environment: Literal["dev", "staging", "prod"] = "dev"
    log_level: str = "INFO"

    project_id: str = Field(min_length=1)
    bucket: str = Field(min_length=1)
    instance: str = Field(min_length=1)  # Keyspaces keyspace
    cluster: str = Field(min_length=1)
    job_template: str = Field(min_length=1)  # Glue job name
    controller_trigger_topic: str = Field(min_length=1)  # SNS topic ARN
    alert_topic: str | None = None

    aws: AWSConfig = AWSConfig()
    retry: RetryConfig = RetryConfig()


def load_settings(**overrides: Any) -> ImportSettings:
    """Build settings from the environment, failing fast on missing values.

    Raises:
        ConfigurationError: naming every required setting that is absent or empty.
    """
    try:
        return ImportSettings(**overrides)
    except ValidationError as exc:
        names = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        raise ConfigurationError(
            f"Required settings are not set in environment: {', '.join(names)}"
        ) from exc
