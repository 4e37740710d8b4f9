from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..errors import ResolutionError
from . import ConnectionParams


def params_from_mapping(endpoint_id: str, entry: Any) -> ConnectionParams:
    """Build ConnectionParams from one endpoint entry of a config mapping."""
    if not isinstance(entry, Mapping):
        raise ResolutionError(f"endpoint '{endpoint_id}' is not a mapping")
    url = entry.get("server_url") or entry.get("url")
    if not url:
        raise ResolutionError(f"endpoint '{endpoint_id}' has no server_url")
    return ConnectionParams(
        server_url=str(url),
        principal=str(entry.get("principal") or ""),
        credentials=str(entry.get("credentials") or ""),
    )


class StaticResolver:
    """Resolve endpoints from an in-memory mapping of id -> parameters."""

    type_name = "static"

    def __init__(self, configuration: Optional[Dict[str, Any]] = None):
        self.configuration = configuration or {}

    def lookup(self, endpoint_id: Optional[str]) -> ConnectionParams:
        if not endpoint_id:
            raise ResolutionError("no endpoint id configured")
        if endpoint_id not in self.configuration:
            raise ResolutionError(f"unknown endpoint '{endpoint_id}'")
        return params_from_mapping(endpoint_id, self.configuration[endpoint_id])
