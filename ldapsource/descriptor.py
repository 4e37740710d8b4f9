"""Static field metadata used by hosts to render configuration screens.

Nothing here talks to a directory. The connector publishes one
SourceDescriptor describing the fields it reads at configuration time and
the filter fields it reads on every search.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence


class FieldDescriptor:
    field_type = "field"

    def __init__(
        self,
        name: str,
        description: str = "",
        default: Optional[str] = None,
        required: bool = False,
    ):
        self.name = name
        self.description = description
        self.default = default
        self.required = required

    def validate(self, value: Optional[str]) -> List[str]:
        if self.required and not (value or "").strip():
            return [f"'{self.name}' is required"]
        return []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.field_type,
            "description": self.description,
            "default": self.default,
            "required": self.required,
        }


class TextFieldDescriptor(FieldDescriptor):
    field_type = "text"


class SelectFieldDescriptor(FieldDescriptor):
    field_type = "select"

    def __init__(
        self,
        name: str,
        description: str = "",
        options: Sequence[str] = (),
        default: Optional[str] = None,
        required: bool = False,
    ):
        super().__init__(name, description, default=default, required=required)
        self.options = list(options)

    def validate(self, value: Optional[str]) -> List[str]:
        errors = super().validate(value)
        if value and value not in self.options:
            errors.append(
                f"'{self.name}' must be one of {', '.join(self.options)}, got '{value}'"
            )
        return errors

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["options"] = list(self.options)
        return d


class GuiDescriptor:
    """An ordered group of fields with a description."""

    def __init__(self, description: str = ""):
        self.description = description
        self._fields: List[FieldDescriptor] = []

    def add_field(self, field: FieldDescriptor) -> None:
        if field.name in self.field_names:
            raise ValueError(f"duplicate field '{field.name}'")
        self._fields.append(field)

    @property
    def fields(self) -> List[FieldDescriptor]:
        return list(self._fields)

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self._fields]

    def defaults(self) -> Dict[str, Optional[str]]:
        return {f.name: f.default for f in self._fields}

    def validate(self, values: Optional[Mapping[str, Any]]) -> List[str]:
        """Return a list of human-readable problems, empty when valid."""
        values = values or {}
        errors: List[str] = []
        for f in self._fields:
            v = values.get(f.name)
            errors.extend(f.validate(None if v is None else str(v)))
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "fields": [f.to_dict() for f in self._fields],
        }


class FilterFieldsGuiDescriptor(GuiDescriptor):
    pass


class SourceDescriptor:
    def __init__(
        self,
        plugin: Any,
        type_name: str,
        config_descriptor: GuiDescriptor,
        filter_descriptor: FilterFieldsGuiDescriptor,
    ):
        self.plugin = plugin
        self.type_name = type_name
        self.config_descriptor = config_descriptor
        self.filter_descriptor = filter_descriptor

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type_name,
            "configuration": self.config_descriptor.to_dict(),
            "filter": self.filter_descriptor.to_dict(),
        }


class FieldList:
    """Read-only set of named field values pushed by the host."""

    def __init__(self, fields: Optional[Iterable[tuple]] = None):
        self._values: Dict[str, Optional[str]] = {}
        for name, value in fields or ():
            self._values[str(name)] = None if value is None else str(value)

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]]) -> "FieldList":
        return cls((values or {}).items())

    def get_field_value(self, name: str) -> Optional[str]:
        return self._values.get(name)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        v = self._values.get(name)
        return default if v is None else v

    def names(self) -> List[str]:
        return list(self._values.keys())

    def to_dict(self) -> Dict[str, Optional[str]]:
        return dict(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __repr__(self) -> str:
        return f"FieldList({self._values!r})"


def as_field_list(values: Any) -> FieldList:
    if isinstance(values, FieldList):
        return values
    return FieldList.from_mapping(values)


__all__ = [
    "FieldDescriptor",
    "TextFieldDescriptor",
    "SelectFieldDescriptor",
    "GuiDescriptor",
    "FilterFieldsGuiDescriptor",
    "SourceDescriptor",
    "FieldList",
    "as_field_list",
]
