"""Placeholder rendering for host-supplied filter fields.

The connector receives fully rendered text; the CLI and HTTP surfaces use
this module to fill ``{{ name }}`` placeholders before calling it.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from jinja2 import Environment, StrictUndefined
from ldap3.utils.conv import escape_filter_chars

_jinja = Environment(undefined=StrictUndefined)
_jinja.filters["ldap_escape"] = lambda v: escape_filter_chars(str(v))


def render_template(template: str, context: Dict[str, Any]) -> str:
    tpl = _jinja.from_string(template)
    return tpl.render(**(context or {}))


def render_fields(
    fields: Dict[str, Optional[str]], context: Dict[str, Any]
) -> Dict[str, Optional[str]]:
    """Render every string value that contains template syntax."""
    out: Dict[str, Optional[str]] = {}
    for k, v in (fields or {}).items():
        if isinstance(v, str) and ("{{" in v or "{%" in v):
            out[k] = render_template(v, context)
        else:
            out[k] = v
    return out


def parse_vars(pairs: Optional[List[str]]) -> Dict[str, str]:
    """Turn ``["KEY=VALUE", ...]`` into a dict; the first '=' splits."""
    out: Dict[str, str] = {}
    for p in pairs or []:
        if "=" not in p:
            raise ValueError(f"expected KEY=VALUE, got '{p}'")
        k, v = p.split("=", 1)
        k = k.strip()
        if not k:
            raise ValueError(f"empty variable name in '{p}'")
        out[k] = v
    return out
