"""Literal, Field, and FieldList frozen dataclasses."""

from dataclasses import dataclass

from deeplink.fields import FieldRef


def escape_literal(text: str) -> str:
    """Double braces so *text* reads back as literal template text."""
    return text.replace("{", "{{").replace("}", "}}")


@dataclass(frozen=True, slots=True)
class Literal:
    """Text that must appear verbatim in the URL.

    ``/product/`` in ``/product/{product_id}``.
    """

    text: str

    def __str__(self) -> str:
        return escape_literal(self.text)


@dataclass(frozen=True, slots=True)
class Field:
    """A placeholder bound to one scalar field.

    ``{product_id}`` in ``/product/{product_id}``.
    """

    ref: FieldRef

    def __str__(self) -> str:
        return f"{{{self.ref.name}}}"


@dataclass(frozen=True, slots=True)
class FieldList:
    """A placeholder bound to a multi-value field.

    ``{ids[,]}`` in ``/ids={ids[,]}``; the capture is split on ``separator``.
    """

    ref: FieldRef
    separator: str

    def __str__(self) -> str:
        return f"{{{self.ref.name}[{self.separator}]}}"


type Segment = Literal | Field | FieldList
type Placeholder = Field | FieldList


def is_placeholder(segment: Segment) -> bool:
    """Return True if *segment* captures URL text."""
    return isinstance(segment, Field | FieldList)
