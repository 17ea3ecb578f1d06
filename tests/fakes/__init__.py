"""Shared test doubles — re-export memory backends."""

from __future__ import annotations

from cacheimport.persistence.memory_backend import (
    MemoryAlertSink,
    MemoryJobLauncher,
    MemoryMessagePublisher,
    MemoryObjectStore,
    MemoryWideColumnAdmin,
)

__all__ = [
    "MemoryAlertSink",
    "MemoryJobLauncher",
    "MemoryMessagePublisher",
    "MemoryObjectStore",
    "MemoryWideColumnAdmin",
]
