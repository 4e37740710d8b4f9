"""Endpoint resolvers with lazy imports and entry point discovery.

A resolver turns an endpoint identifier into the connection parameters
needed to bind to a directory server. Any object with a
``lookup(endpoint_id) -> ConnectionParams`` method will do; resolvers are
looked up by type name so host configuration can name them.

This module exposes:
- ConnectionParams
- create_resolver(type_name, configuration)
- discover_entry_points() - finds resolvers registered via entry points
- register_resolver(name, constructor) - for runtime registration
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from importlib.metadata import entry_points
from typing import Any, Callable, Dict

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "ldapsource.resolvers"

# Registry for resolvers registered at runtime
_resolver_registry: Dict[str, Callable[[dict], Any]] = {}
# Track if entry points have been discovered
_entry_points_discovered = False


@dataclass(frozen=True)
class ConnectionParams:
    server_url: str
    principal: str = ""
    credentials: str = field(default="", repr=False)


def _derive_class_name(name: str) -> str:
    # last segment, capitalize first letter, append 'Resolver'
    base = name.split(".")[-1]
    if not base:
        raise ValueError("invalid resolver type name")
    return base.capitalize() + "Resolver"


def discover_entry_points() -> Dict[str, Callable[[dict], Any]]:
    """Discover resolvers registered via entry points.

    Returns a dict mapping resolver names to their constructors. Entry points
    should be registered in the 'ldapsource.resolvers' group.
    """
    discovered = {}
    for ep in entry_points(group=ENTRY_POINT_GROUP):
        try:
            discovered[ep.name] = ep.load()
        except Exception as e:
            # a broken plugin must not take the other resolvers down with it
            logger.warning("failed to load resolver plugin '%s': %s", ep.name, e)
    return discovered


def register_resolver(name: str, constructor: Callable[[dict], Any]) -> None:
    """Register a resolver at runtime.

    Args:
        name: The resolver type name (e.g. "static", "vault")
        constructor: A callable that takes a configuration dict and returns a
                     resolver instance
    """
    _resolver_registry[name] = constructor


def create_resolver(type_name: str, configuration: dict):
    """Create an instance of the named resolver.

    The function tries, in order:
    1. runtime-registered resolvers (via register_resolver)
    2. entry point plugins (via discover_entry_points)
    3. module:Class (explicit module and class separated by ':')
    4. module.Class (fully-qualified class path)
    5. ldapsource.resolvers.<type_name> exposing <Name>Resolver
    """
    global _entry_points_discovered

    if type_name in _resolver_registry:
        return _resolver_registry[type_name](configuration)

    if not _entry_points_discovered:
        _resolver_registry.update(discover_entry_points())
        _entry_points_discovered = True

    if type_name in _resolver_registry:
        return _resolver_registry[type_name](configuration)

    last_exc = None

    if ":" in type_name:
        module_part, class_part = type_name.split(":", 1)
        try:
            mod = importlib.import_module(module_part)
        except Exception as e:
            raise ImportError(
                f"could not import module '{module_part}': {e}"
            ) from e
        ctor = getattr(mod, class_part, None)
        if ctor is None:
            raise ImportError(
                f"module '{module_part}' has no attribute '{class_part}'"
            ) from None
        return ctor(configuration)

    if "." in type_name:
        module_part, class_part = type_name.rsplit(".", 1)
        try:
            mod = importlib.import_module(module_part)
            ctor = getattr(mod, class_part, None)
            if ctor is not None:
                return ctor(configuration)
        except Exception as e:
            last_exc = e

    mod_name = f"ldapsource.resolvers.{type_name}"
    try:
        mod = importlib.import_module(mod_name)
    except Exception as e:
        raise ImportError(
            f"could not import resolver for type '{type_name}': {last_exc or e}"
        ) from e

    ctor = getattr(mod, _derive_class_name(type_name), None)
    if ctor is None:
        raise ImportError(f"module '{mod_name}' does not expose a Resolver class")
    return ctor(configuration)


__all__ = [
    "ConnectionParams",
    "create_resolver",
    "register_resolver",
    "discover_entry_points",
]
