from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional, Union


class AttributeValue:
    """Ordered, possibly multi-valued attribute value handed to the host.

    A single string is stored as a one-element value; ``None`` as no values.
    """

    def __init__(self, values: Union[str, Iterable[str], None] = None):
        if values is None:
            self._values: List[str] = []
        elif isinstance(values, str):
            self._values = [values]
        else:
            self._values = [str(v) for v in values]

    @property
    def values(self) -> List[str]:
        return list(self._values)

    def get_value(self) -> Optional[str]:
        return self._values[0] if self._values else None

    def get_values(self) -> List[str]:
        return list(self._values)

    def to_list(self) -> List[str]:
        return list(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def __bool__(self) -> bool:
        return bool(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AttributeValue):
            return self._values == other._values
        if isinstance(other, (list, tuple)):
            return self._values == list(other)
        return NotImplemented

    def __hash__(self):
        return hash(tuple(self._values))

    def __str__(self) -> str:
        return ", ".join(self._values)

    def __repr__(self) -> str:
        return f"AttributeValue({self._values!r})"


def to_jsonable(values: Dict[str, Any]) -> Dict[str, Any]:
    """Replace AttributeValue containers with plain lists for serialization."""
    out: Dict[str, Any] = {}
    for k, v in (values or {}).items():
        out[k] = v.to_list() if isinstance(v, AttributeValue) else v
    return out


__all__ = ["AttributeValue", "to_jsonable"]
