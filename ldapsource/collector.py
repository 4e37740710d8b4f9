from __future__ import annotations

from typing import Any, Iterable, List, Optional


def entry_dn(entry: Any) -> Optional[str]:
    """Return the full distinguished name of a search entry.

    Accepts both the raw ldap3 response dicts (``{"dn": ...}``) and ldap3
    ``Entry`` objects.
    """
    if entry is None:
        return None
    if isinstance(entry, dict):
        dn = entry.get("dn")
    else:
        dn = getattr(entry, "entry_dn", None)
    return None if dn is None else str(dn)


def collect(entries: Iterable[Any]) -> List[str]:
    """Drain ``entries`` into a list of DNs in the order they were yielded.

    Absent entries are skipped. Errors raised while iterating propagate to
    the caller, which is responsible for discarding the partial list.
    """
    names: List[str] = []
    for entry in entries:
        dn = entry_dn(entry)
        if dn is not None:
            names.append(dn)
    return names


__all__ = ["collect", "entry_dn"]
