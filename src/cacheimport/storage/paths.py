"""Canonical storage locations for an import.

An import root is laid out as::

    <root>/config/config.textproto
    <root>/tmcf_csv/*.csv, *.tmcf     (source data)
    <root>/cache/                     (ingestion job output)
    <root>/control/<table_id>/{init,launched,completed}.*  (markers; written as .txt)
    <root>/process/<...>/trigger.csv  (controller trigger drops)

The import name handed to the controller is the last segment of the root.
"""

from __future__ import annotations

from dataclasses import dataclass

from cacheimport.core.exceptions import PathFormatError

SCHEME = "s3"
SCHEME_PREFIX = f"{SCHEME}://"

CONTROL_DIR = "control"
PROCESS_DIR = "process"
INIT_MARKER = "init"
LAUNCHED_MARKER = "launched"
COMPLETED_MARKER = "completed"
MARKER_EXTENSION = ".txt"
LAUNCHED_FILE = LAUNCHED_MARKER + MARKER_EXTENSION
CONTROLLER_TRIGGER_FILE = "trigger.csv"


def parse_path(path: str) -> tuple[str, str]:
    """Split ``s3://<bucket>/<key>`` into ``(bucket, key)``."""
    if not path.startswith(SCHEME_PREFIX):
        raise PathFormatError(f"Unexpected path: {path}")
    bucket, _, key = path[len(SCHEME_PREFIX):].partition("/")
    if not bucket:
        raise PathFormatError(f"Unexpected path: {path}")
    return bucket, key


def join_path(base: str, *parts: str) -> str:
    """Join path segments with single slashes, skipping empty parts."""
    pieces = [base.rstrip("/")] if base else []
    pieces.extend(p.strip("/") for p in parts if p and p.strip("/"))
    return "/".join(pieces)


@dataclass(frozen=True)
class StoragePath:
    bucket: str
    key: str = ""

    def __post_init__(self) -> None:
        if not self.bucket:
            raise PathFormatError("Storage path requires a bucket")

    @classmethod
    def parse(cls, path: str) -> StoragePath:
        return cls(*parse_path(path))

    @property
    def uri(self) -> str:
        return f"{SCHEME_PREFIX}{self.bucket}/{self.key}"

    def __str__(self) -> str:
        return self.uri


@dataclass(frozen=True)
class ImportLocation:
    """Well-known locations under one import root (a key prefix in a bucket)."""

    bucket: str
    root: str = ""

    @property
    def import_name(self) -> str:
        return self.root.rstrip("/").rsplit("/", 1)[-1]

    def _path(self, *parts: str) -> str:
        return StoragePath(self.bucket, join_path(self.root, *parts)).uri

    @property
    def root_path(self) -> str:
        return self._path()

    @property
    def config(self) -> str:
        return self._path("config", "config.textproto")

    @property
    def data(self) -> str:
        return self._path("tmcf_csv")

    @property
    def cache(self) -> str:
        return self._path("cache")

    @property
    def control(self) -> str:
        return self._path(CONTROL_DIR)

    def marker(self, table_id: str, marker_file: str) -> str:
        return self._path(CONTROL_DIR, table_id, marker_file)


def branch_segment(key: str) -> str | None:
    """Return the third-from-last key segment, or None for shallow keys."""
    parts = key.split("/")
    if len(parts) < 3:
        return None
    return parts[-3]


def import_root(key: str) -> str:
    """Key prefix before the ``control``/``process`` segment."""
    parts = key.split("/")
    if len(parts) < 3:
        raise PathFormatError(f"Expected 3+ '/'-separated parts, got {key}")
    return "/".join(parts[:-3])


def table_id_from_key(key: str) -> str:
    """Second-to-last segment of ``<root>/control/<table_id>/<marker>``."""
    parts = key.split("/")
    if len(parts) < 3 or not parts[-2]:
        raise PathFormatError(f"No table id in control key {key}")
    return parts[-2]


def marker_kind(key: str) -> str | None:
    """Marker name of ``.../<marker>.<ext>``, e.g. ``init`` for ``init.marker``.

    Returns None when the basename has no extension.
    """
    basename = key.rsplit("/", 1)[-1]
    stem, dot, _ = basename.partition(".")
    return stem if dot else None
