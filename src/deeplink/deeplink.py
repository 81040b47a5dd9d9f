"""Deeplink — a compiled pattern paired with the record type it fills.

Usage::

    @dataclass
    class Product:
        product_id: str | None = None

    product_link = Deeplink("/product/{product_id}", Product)

    product = product_link.parse("https://example.com/product/123")
    product.product_id  # "123"

The record type must be constructible with no arguments when ``parse`` is
called without an explicit destination.
"""

from __future__ import annotations

from typing import Any

from deeplink.config import MatchConfig
from deeplink.errors import NoMatch
from deeplink.matching.matcher import collect_bindings, match
from deeplink.matching.url import parse_url
from deeplink.pattern.builder import Pattern


class Deeplink[T]:
    """A URL shape bound to one destination record type.

    Immutable after creation; safe to share between threads.
    """

    __slots__ = ("_config", "_pattern", "_record_type")

    def __init__(
        self,
        template: str | Pattern,
        record_type: type[T],
        config: MatchConfig | None = None,
    ) -> None:
        if isinstance(template, Pattern):
            self._pattern = template
        else:
            self._pattern = Pattern.parse(template, record_type)
        self._record_type = record_type
        self._config = config

    @property
    def pattern(self) -> Pattern:
        return self._pattern

    @property
    def record_type(self) -> type[T]:
        return self._record_type

    def parse(self, url: str, into: T | None = None) -> T:
        """Match *url* and return the populated record.

        Binds into *into* when given, otherwise into a fresh
        ``record_type()``. Raises ``MalformedURL`` or ``NoMatch``.
        """
        record = self._record_type() if into is None else into
        match(self._pattern, url, record, self._config)
        return record

    def matches(self, url: str) -> bool:
        """Return True if *url* fits this deeplink.

        Nothing is constructed or written. Only ``NoMatch`` is treated as
        a negative answer; ``MalformedURL`` propagates.
        """
        try:
            collect_bindings(self._pattern, parse_url(url), self._config)
        except NoMatch:
            return False
        return True

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Deeplink):
            return NotImplemented
        return (self._pattern, self._record_type) == (other._pattern, other._record_type)

    def __hash__(self) -> int:
        return hash((self._pattern, self._record_type))

    def __str__(self) -> str:
        return str(self._pattern)

    def __repr__(self) -> str:
        return f"Deeplink({str(self._pattern)!r}, {self._record_type.__qualname__})"
