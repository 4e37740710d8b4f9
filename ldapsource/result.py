from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from .errors import LdapSourceError

# key fragments whose values never leave the connector
REDACTED_KEYS = ("password", "secret", "credentials", "token", "pw")


def _make_notes(notes: Optional[Iterable[Any]]) -> List[str]:
    return [str(n) for n in notes or () if n is not None]


def sanitize_meta(meta: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if meta is None:
        return {}
    out: Dict[str, Any] = dict(meta)
    for k in list(out.keys()):
        lk = k.lower()
        if any(r in lk for r in REDACTED_KEYS):
            out[k] = "<redacted>"
    return out


def make_result(
    *,
    success: bool,
    code: Optional[int] = None,
    error: Optional[str] = None,
    data: Any = None,
    notes: Optional[Iterable[Any]] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Build the internal search outcome.

    Returns:
      {"status": {"success": bool, "code": int|None, "error": str|None,
                  "notes": [str,...]},
       "data": ..., "meta": {...}}
    """
    return {
        "status": {
            "success": bool(success),
            "code": code,
            "error": None if success else (error or "unexpected"),
            "notes": _make_notes(notes),
        },
        "data": data,
        "meta": sanitize_meta(meta),
    }


def result_from_exception(
    exc: BaseException, meta: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    if isinstance(exc, LdapSourceError):
        kind, code = exc.kind, exc.code
    else:
        kind, code = "unexpected", None
    m = dict(meta or {})
    m["exception"] = repr(exc)
    return make_result(
        success=False,
        code=code,
        error=kind,
        data=None,
        notes=[str(exc)],
        meta=m,
    )


def is_success(result: Dict[str, Any]) -> bool:
    return bool((result.get("status") or {}).get("success"))


__all__ = [
    "REDACTED_KEYS",
    "make_result",
    "result_from_exception",
    "sanitize_meta",
    "is_success",
]
