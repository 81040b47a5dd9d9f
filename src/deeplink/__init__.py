"""Deeplink — declare a URL shape, match URLs against it, bind the pieces.

A pattern mixes literal text with named placeholders. Matching a concrete
URL either binds every placeholder onto a record or fails without touching
the record at all.

Basic usage::

    from dataclasses import dataclass
    from deeplink import Deeplink

    @dataclass
    class Product:
        product_id: str | None = None

    link = Deeplink("/product/{product_id}", Product)
    link.parse("https://example.com/product/123").product_id  # "123"

List placeholders split their capture on a one-character separator::

    @dataclass
    class Selection:
        ids: list[str] | None = None

    Deeplink("/ids={ids[,]}", Selection).parse("/ids=1,2,3").ids  # ["1", "2", "3"]
"""

__version__ = "0.1.0"
__all__ = [
    "ConsecutivePlaceholders",
    "Deeplink",
    "DeeplinkError",
    "DuplicateField",
    "Field",
    "FieldList",
    "FieldRef",
    "Literal",
    "MalformedURL",
    "MatchConfig",
    "MatchError",
    "NoMatch",
    "ParsedURL",
    "Pattern",
    "PatternBuilder",
    "PatternError",
    "TemplateSyntaxError",
    "UnknownField",
    "field_ref",
    "fields_of",
    "match",
    "parse_template",
    "parse_url",
]

# Public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "ConsecutivePlaceholders": "deeplink.errors",
    "Deeplink": "deeplink.deeplink",
    "DeeplinkError": "deeplink.errors",
    "DuplicateField": "deeplink.errors",
    "Field": "deeplink.pattern.segment",
    "FieldList": "deeplink.pattern.segment",
    "FieldRef": "deeplink.fields",
    "Literal": "deeplink.pattern.segment",
    "MalformedURL": "deeplink.errors",
    "MatchConfig": "deeplink.config",
    "MatchError": "deeplink.errors",
    "NoMatch": "deeplink.errors",
    "ParsedURL": "deeplink.matching.url",
    "Pattern": "deeplink.pattern.builder",
    "PatternBuilder": "deeplink.pattern.builder",
    "PatternError": "deeplink.errors",
    "TemplateSyntaxError": "deeplink.errors",
    "UnknownField": "deeplink.errors",
    "field_ref": "deeplink.fields",
    "fields_of": "deeplink.fields",
    "match": "deeplink.matching.matcher",
    "parse_template": "deeplink.pattern.template",
    "parse_url": "deeplink.matching.url",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import deeplink`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    from importlib import import_module

    return getattr(import_module(module_name), name)
