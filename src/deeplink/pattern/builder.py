"""Pattern builder and the immutable Pattern it produces.

Patterns are assembled left to right, the way a template reads: literal
text, then a placeholder, then more literal text. Every placeholder append
is validated immediately so a bad template fails at declaration time,
before any URL is matched against it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import quote

from deeplink.errors import ConsecutivePlaceholders, DuplicateField, PatternError
from deeplink.fields import FieldRef
from deeplink.matching.url import URI_CHARS
from deeplink.pattern.segment import (
    Field,
    FieldList,
    Literal,
    Placeholder,
    Segment,
    is_placeholder,
)

logger = logging.getLogger("deeplink.pattern")

# RFC 3986 reserved characters and "%" pass through; everything else is escaped.
_LITERAL_SAFE = ":/?#[]@!$&'()*+,;=%"


def encode_literal(text: str) -> str:
    """Percent-encode *text* the way it appears in a well-formed URL.

    ``"/my page/"`` becomes ``"/my%20page/"``; text that is already valid
    URL text is returned unchanged.
    """
    return quote(text, safe=_LITERAL_SAFE)


def check_placeholder(existing: Iterable[Segment], new: Placeholder) -> None:
    """Validate appending *new* after *existing*.

    Raises ``PatternError`` for a bad list separator,
    ``ConsecutivePlaceholders`` if the last existing segment is a
    placeholder, then ``DuplicateField`` if *new*'s field is already bound.
    """
    if isinstance(new, FieldList):
        separator = new.separator
        if not isinstance(separator, str) or len(separator) != 1:
            msg = f"List separator for {new.ref} must be a single character, got {separator!r}."
            raise PatternError(msg)

    existing = tuple(existing)
    if existing and is_placeholder(existing[-1]):
        raise ConsecutivePlaceholders(existing[-1], new)

    for segment in existing:
        if not isinstance(segment, Literal) and segment.ref == new.ref:
            raise DuplicateField(new.ref)


def check_segments(segments: tuple[Segment, ...]) -> None:
    """Validate a complete segment sequence.

    Literals must be non-empty URL text; placeholders follow the same rules
    as ``PatternBuilder`` appends.
    """
    for index, segment in enumerate(segments):
        if isinstance(segment, Literal):
            if not isinstance(segment.text, str) or not segment.text:
                raise PatternError("Literal segments must hold non-empty text.")
            if not URI_CHARS.fullmatch(segment.text):
                msg = f"Literal {segment.text!r} is not URL text; percent-encode it."
                raise PatternError(msg)
        elif isinstance(segment, Field | FieldList):
            check_placeholder(segments[:index], segment)
        else:
            raise PatternError(f"Not a pattern segment: {segment!r}")


@dataclass(frozen=True, slots=True)
class Pattern:
    """An immutable, ordered sequence of segments.

    Built once (usually at startup) and shared freely between threads.
    Compares and hashes by its segments. Constructing one directly runs
    the same validation as ``PatternBuilder``.
    """

    segments: tuple[Segment, ...] = ()

    def __post_init__(self) -> None:
        check_segments(tuple(self.segments))

    @classmethod
    def parse(cls, template: str, record_type: type) -> Pattern:
        """Compile *template* against *record_type*.

        See ``deeplink.pattern.template`` for the grammar.
        """
        from deeplink.pattern.template import parse_template

        return parse_template(template, record_type)

    @property
    def fields(self) -> tuple[FieldRef, ...]:
        """Field references of every placeholder, in template order."""
        return tuple(s.ref for s in self.segments if not isinstance(s, Literal))

    @property
    def literal_text(self) -> str:
        """All literal text in the pattern, concatenated."""
        return "".join(s.text for s in self.segments if isinstance(s, Literal))

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return "".join(str(s) for s in self.segments)


class PatternBuilder:
    """Incremental pattern assembly with structural validation.

    Usage::

        F = fields_of(Product)
        builder = PatternBuilder()
        builder.append_literal("/product/")
        builder.append_field(F.product_id)
        pattern = builder.build()
    """

    __slots__ = ("_segments",)

    def __init__(self) -> None:
        self._segments: list[Segment] = []

    @property
    def segments(self) -> tuple[Segment, ...]:
        return tuple(self._segments)

    def append_literal(self, text: str) -> None:
        """Append literal text. Empty text is ignored; adjacent literals merge.

        Characters that cannot appear raw in a URL (spaces, non-ASCII,
        braces) are percent-encoded so the literal compares against the
        URL as it is actually written.
        """
        if not text:
            return
        text = encode_literal(text)
        if self._segments and isinstance(self._segments[-1], Literal):
            self._segments[-1] = Literal(self._segments[-1].text + text)
            return
        self._segments.append(Literal(text))

    def append_field(self, ref: FieldRef) -> None:
        """Append a single-value placeholder bound to *ref*.

        Raises ``ConsecutivePlaceholders`` if the previous segment is a
        placeholder, then ``DuplicateField`` if *ref* is already bound.
        """
        self._append_placeholder(Field(ref))

    def append_field_list(self, ref: FieldRef, separator: str) -> None:
        """Append a multi-value placeholder bound to *ref*, split on *separator*.

        *separator* must be a single character. Uniqueness is checked on
        *ref* alone: a second list placeholder on the same field is rejected
        whatever its separator.
        """
        self._append_placeholder(FieldList(ref, separator))

    def _append_placeholder(self, new: Placeholder) -> None:
        check_placeholder(self._segments, new)
        self._segments.append(new)

    def build(self) -> Pattern:
        """Freeze the current segments into a ``Pattern``."""
        pattern = Pattern(tuple(self._segments))
        logger.debug("Built pattern %s (%d segments)", pattern, len(pattern))
        return pattern
