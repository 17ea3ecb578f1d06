"""Type aliases used across cacheimport."""

from __future__ import annotations

from typing import Any, Callable

JsonDict = dict[str, Any]
AdminFactory = Callable[[str, str], Any]  # (project_id, instance) -> IWideColumnAdmin
