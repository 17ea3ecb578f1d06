"""AWS Glue launcher for the cache ingestion job, implementing IJobLauncher."""

from __future__ import annotations

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from cacheimport.core.exceptions import JobLaunchError
from cacheimport.models.workflow import JobLaunchRequest

logger = logging.getLogger(__name__)


def job_arguments(request: JobLaunchRequest) -> dict[str, str]:
    """Glue job run arguments; Glue requires the ``--`` prefix on every key."""
    return {
        "--project_id": request.project_id,
        "--instance": request.instance,
        "--cluster": request.cluster,
        "--table_id": request.table_id,
        "--data_path": request.data_path,
        "--control_path": request.control_path,
    }


class GlueJobLauncher:
    """Starts one run of the Glue job named by ``request.template``.

    Only the launch request is observed; the job signals its own completion
    by writing the completed marker under ``control_path``.
    """

    def __init__(self, region: str = "us-east-1", endpoint_url: str | None = None) -> None:
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("glue", **kwargs)

    def launch(self, request: JobLaunchRequest) -> str:
        logger.info("Launching job %s for table %s", request.template, request.table_id)
        try:
            resp = self._client.start_job_run(
                JobName=request.template,
                Arguments=job_arguments(request),
            )
        except (ClientError, BotoCoreError) as exc:
            raise JobLaunchError(
                f"Failed to launch job {request.template} for table {request.table_id}: {exc}"
            ) from exc
        run_id = resp["JobRunId"]
        logger.info("Launched job run %s for table %s", run_id, request.table_id)
        return run_id
