from __future__ import annotations

import copy
from typing import Any, Dict, List, Tuple

import yaml


def load_yaml_files(paths: List[str]) -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    for p in paths:
        with open(p, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        merged = deep_merge(merged, data)
    return merged


def deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge dict b into a and return the result (new dict)."""
    out = copy.deepcopy(a)
    for k, v in (b or {}).items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


def get_resolver_config(cfg: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
    section = cfg.get("resolver") or {}
    return str(section.get("type") or "static"), section.get("configuration") or {}


def get_connector_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    return cfg.get("connector", {}) or {}


def get_search_defaults(cfg: Dict[str, Any]) -> Dict[str, Any]:
    return cfg.get("search", {}) or {}


def build_connector(cfg: Dict[str, Any]):
    """Create a configured LdapSearchConnector from a loaded config dict."""
    from .connector import LdapSearchConnector
    from .resolvers import create_resolver

    type_name, resolver_conf = get_resolver_config(cfg)
    resolver = create_resolver(type_name, resolver_conf)
    return LdapSearchConnector(get_connector_config(cfg), resolver=resolver)
