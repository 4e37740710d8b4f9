from __future__ import annotations

from typing import Any, Dict, List, Optional

import yaml

from ..config import load_yaml_files
from ..errors import ResolutionError
from . import ConnectionParams
from .static import params_from_mapping


class FileResolver:
    """Resolve endpoints from YAML files under an ``endpoints`` key.

    Files are re-read on every lookup so edits to credentials apply to the
    next search without restarting anything.
    """

    type_name = "file"

    def __init__(self, configuration: Optional[Dict[str, Any]] = None):
        self.configuration = configuration or {}
        paths = self.configuration.get("paths") or self.configuration.get("path")
        if isinstance(paths, str):
            paths = [paths]
        self.paths: List[str] = list(paths or [])

    def lookup(self, endpoint_id: Optional[str]) -> ConnectionParams:
        if not endpoint_id:
            raise ResolutionError("no endpoint id configured")
        if not self.paths:
            raise ResolutionError("file resolver has no paths configured")
        try:
            data = load_yaml_files(self.paths)
        except (OSError, yaml.YAMLError) as e:
            raise ResolutionError(f"could not read endpoint files: {e}") from e
        endpoints = data.get("endpoints") or {}
        if endpoint_id not in endpoints:
            raise ResolutionError(f"unknown endpoint '{endpoint_id}'")
        return params_from_mapping(endpoint_id, endpoints[endpoint_id])
