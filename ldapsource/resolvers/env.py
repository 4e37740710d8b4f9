from __future__ import annotations

import os
import re
from typing import Any, Dict, Optional

from ..errors import ResolutionError
from . import ConnectionParams

DEFAULT_PREFIX = "LDAPSOURCE"


def env_key(prefix: str, endpoint_id: str, suffix: str) -> str:
    ident = re.sub(r"[^A-Za-z0-9]", "_", endpoint_id).upper()
    return f"{prefix}_{ident}_{suffix}"


class EnvResolver:
    """Resolve endpoints from environment variables.

    ``<PREFIX>_<ID>_URL`` is required; ``_PRINCIPAL`` and ``_CREDENTIALS``
    default to empty (anonymous bind). The environment is read on every
    lookup.
    """

    type_name = "env"

    def __init__(self, configuration: Optional[Dict[str, Any]] = None):
        self.configuration = configuration or {}
        self.prefix = str(self.configuration.get("prefix") or DEFAULT_PREFIX)

    def lookup(self, endpoint_id: Optional[str]) -> ConnectionParams:
        if not endpoint_id:
            raise ResolutionError("no endpoint id configured")
        url_key = env_key(self.prefix, endpoint_id, "URL")
        url = os.environ.get(url_key)
        if not url:
            raise ResolutionError(f"unknown endpoint '{endpoint_id}' ({url_key} not set)")
        return ConnectionParams(
            server_url=url,
            principal=os.environ.get(env_key(self.prefix, endpoint_id, "PRINCIPAL"), ""),
            credentials=os.environ.get(
                env_key(self.prefix, endpoint_id, "CREDENTIALS"), ""
            ),
        )
