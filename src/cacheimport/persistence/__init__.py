"""Pluggable AWS backends behind Protocol interfaces."""

from __future__ import annotations

from functools import partial

from cacheimport.core.config import ImportSettings, load_settings
from cacheimport.persistence.keyspaces_backend import KeyspacesAdminClient
from cacheimport.persistence.s3_backend import S3ObjectStore


def create_persistence(settings: ImportSettings | None = None):
    """Create the object store and table admin factory from settings.

    Returns:
        Tuple of (object_store, admin_factory), where
        ``admin_factory(project_id, instance)`` builds a Keyspaces admin client.
    """
    if settings is None:
        settings = load_settings()

    store = S3ObjectStore(
        region=settings.aws.region,
        endpoint_url=settings.aws.endpoint_url,
    )

    admin_factory = partial(
        _keyspaces_admin,
        region=settings.aws.region,
        endpoint_url=settings.aws.endpoint_url,
    )

    return store, admin_factory


def _keyspaces_admin(project_id: str, instance: str, *, region: str,
                     endpoint_url: str | None) -> KeyspacesAdminClient:
    return KeyspacesAdminClient(
        project_id=project_id, keyspace=instance, region=region, endpoint_url=endpoint_url,
    )
