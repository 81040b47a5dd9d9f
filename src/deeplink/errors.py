"""Deeplink exception hierarchy.

Shared across the pattern builder, template parser, and matcher so every
module raises and catches the same types.

Two layers:

- ``PatternError``: structural template mistakes, raised while a pattern
  is being built. These are programmer errors; fail fast at startup.
- ``MatchError``: expected outcomes of matching runtime input. Callers
  treat ``NoMatch`` as a normal negative result and ``MalformedURL`` as
  an input-validation failure.
"""

from dataclasses import dataclass
from typing import Any


class DeeplinkError(Exception):
    """Base for all deeplink-specific errors."""


class PatternError(DeeplinkError):
    """Raised when a pattern or template is structurally invalid.

    Typically raised once, at import or startup time, when the deeplink
    is declared.
    """


class ConsecutivePlaceholders(PatternError):  # noqa: N818
    """Two placeholders were appended with no literal text between them.

    The matcher cannot decide where one capture ends and the next begins.
    """

    def __init__(self, previous: Any, new: Any) -> None:
        self.previous = previous
        self.new = new
        super().__init__(
            f"Placeholder {new} directly follows placeholder {previous}; "
            "separate them with literal text."
        )


class DuplicateField(PatternError):  # noqa: N818
    """A field is targeted by more than one placeholder in the same pattern."""

    def __init__(self, field: Any) -> None:
        self.field = field
        super().__init__(f"Field {field} is already bound by another placeholder.")


class UnknownField(PatternError):  # noqa: N818
    """A template names a field the record type does not declare."""

    def __init__(self, record_type: type, name: str) -> None:
        self.record_type = record_type
        self.name = name
        super().__init__(f"{record_type.__qualname__} has no field {name!r}.")


class TemplateSyntaxError(PatternError):
    """A template string does not follow the placeholder grammar.

    ``position`` is the zero-based index in ``template`` where parsing
    stopped.
    """

    def __init__(self, template: str, position: int, reason: str) -> None:
        self.template = template
        self.position = position
        self.reason = reason
        super().__init__(f"{reason} at position {position} in template {template!r}")


@dataclass(frozen=True, slots=True)
class MatchError(DeeplinkError):
    """A URL could not be matched against a pattern.

    Raised by the matcher; no bindings are ever applied when it is raised.
    """

    url: str
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.detail}: {self.url}"
        return self.url


class MalformedURL(MatchError):  # noqa: N818
    """The input could not be decomposed as a URL reference."""

    def __init__(self, url: str, detail: str = "Malformed URL") -> None:
        super().__init__(url=url, detail=detail)


class NoMatch(MatchError):  # noqa: N818
    """The URL is well-formed but does not fit the pattern's shape."""

    def __init__(self, url: str, detail: str = "URL does not match pattern") -> None:
        super().__init__(url=url, detail=detail)
