"""Field references — stable, hashable handles on a record's writable fields.

A ``FieldRef`` names one field on a destination record type. Patterns store
references, never accessor functions, so two references to the same field
always compare equal::

    @dataclass
    class Product:
        product_id: str | None = None

    ref = field_ref(Product, "product_id")
    ref == fields_of(Product).product_id   # True

Records may be attribute-based (dataclasses, plain classes) or mutable
mappings such as ``dict``.
"""

from __future__ import annotations

import dataclasses
import inspect
import types
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any

from deeplink.errors import UnknownField

type FieldValue = str | list[str]


@dataclass(frozen=True, slots=True)
class FieldRef:
    """Reference to field ``name`` on instances of ``owner``."""

    owner: type
    name: str

    def get(self, instance: Any) -> Any:
        """Return the field's current value, or ``None`` when unset."""
        if isinstance(instance, Mapping):
            return instance.get(self.name)
        return getattr(instance, self.name, None)

    def set(self, instance: Any, value: Any) -> None:
        """Write *value* into the field on *instance*."""
        if isinstance(instance, MutableMapping):
            instance[self.name] = value
        else:
            setattr(instance, self.name, value)

    def is_set(self, instance: Any) -> bool:
        """Return True if the field currently holds a value on *instance*."""
        if isinstance(instance, Mapping):
            return self.name in instance
        return hasattr(instance, self.name)

    def unset(self, instance: Any) -> None:
        """Remove the field's value from *instance*."""
        if isinstance(instance, MutableMapping):
            instance.pop(self.name, None)
        else:
            delattr(instance, self.name)

    def __str__(self) -> str:
        return f"{self.owner.__qualname__}.{self.name}"


def declared_fields(record_type: type) -> frozenset[str] | None:
    """Return the field names *record_type* declares.

    ``None`` means the type accepts any name (mapping records).
    """
    if isinstance(record_type, type) and issubclass(record_type, Mapping):
        return None
    if dataclasses.is_dataclass(record_type):
        return frozenset(f.name for f in dataclasses.fields(record_type))

    names: set[str] = set()
    for klass in inspect.getmro(record_type):
        if klass is object:
            continue
        names.update(inspect.get_annotations(klass))
        names.update(
            n for n, v in vars(klass).items() if not n.startswith("_") and _is_data_attribute(v)
        )
    return frozenset(names)


def _is_data_attribute(value: Any) -> bool:
    """Return True for class attributes that hold data (defaults, slots)."""
    if isinstance(value, types.MemberDescriptorType):
        return True
    if isinstance(value, property | classmethod | staticmethod):
        return False
    return not callable(value)


def field_ref(record_type: type, name: str) -> FieldRef:
    """Create a validated reference to *name* on *record_type*.

    Raises ``UnknownField`` if the type does not declare the field.
    """
    known = declared_fields(record_type)
    if known is not None and name not in known:
        raise UnknownField(record_type, name)
    return FieldRef(owner=record_type, name=name)


class RecordFields:
    """Attribute-access namespace of field references for one record type.

    Usage::

        F = fields_of(Product)
        builder.append_field(F.product_id)
    """

    __slots__ = ("_record_type",)

    def __init__(self, record_type: type) -> None:
        self._record_type = record_type

    def __getattr__(self, name: str) -> FieldRef:
        if name.startswith("_"):
            raise AttributeError(name)
        return field_ref(self._record_type, name)

    def __repr__(self) -> str:
        return f"RecordFields({self._record_type.__qualname__})"


def fields_of(record_type: type) -> RecordFields:
    """Return a ``RecordFields`` namespace for *record_type*."""
    return RecordFields(record_type)
