"""Template strings — a compact way to declare a pattern.

Grammar::

    template    := ( text | "{{" | "}}" | placeholder )*
    placeholder := "{" name "}"                -> Field
                 | "{" name "[" sep "]" "}"    -> FieldList split on sep
    name        := Python identifier
    sep         := exactly one character

Examples::

    "/product/{product_id}"        -> Literal("/product/"), Field(product_id)
    "/ids={ids[,]}"                -> Literal("/ids="), FieldList(ids, ",")
    "/raw/{{literal}}/{slug}"      -> Literal("/raw/{literal}/"), Field(slug)

The parser drives ``PatternBuilder``, so adjacent placeholders and repeated
fields raise the same errors as direct builder calls.
"""

from deeplink.errors import TemplateSyntaxError
from deeplink.fields import field_ref
from deeplink.pattern.builder import Pattern, PatternBuilder


def parse_template(template: str, record_type: type) -> Pattern:
    """Compile *template* into a ``Pattern`` bound to fields of *record_type*.

    Raises ``TemplateSyntaxError`` for grammar violations, ``UnknownField``
    for names *record_type* does not declare, and the builder's
    ``ConsecutivePlaceholders`` / ``DuplicateField`` for structural errors.
    """
    builder = PatternBuilder()
    text: list[str] = []
    i = 0
    n = len(template)

    while i < n:
        char = template[i]

        if char == "{" and template.startswith("{{", i):
            text.append("{")
            i += 2
            continue

        if char == "}":
            if template.startswith("}}", i):
                text.append("}")
                i += 2
                continue
            raise TemplateSyntaxError(template, i, "Unmatched '}'")

        if char == "{":
            builder.append_literal("".join(text))
            text.clear()
            i = _parse_placeholder(template, i, builder, record_type)
            continue

        text.append(char)
        i += 1

    builder.append_literal("".join(text))
    return builder.build()


def _parse_placeholder(
    template: str,
    start: int,
    builder: PatternBuilder,
    record_type: type,
) -> int:
    """Parse the placeholder opening at *start*; return the index after it."""
    i = start + 1
    n = len(template)
    while i < n and template[i] not in "[}":
        i += 1

    if i >= n:
        raise TemplateSyntaxError(template, start, "Unterminated placeholder")

    name = template[start + 1 : i]
    if not name.isidentifier():
        raise TemplateSyntaxError(template, start + 1, f"Invalid field name {name!r}")

    if template[i] == "}":
        builder.append_field(field_ref(record_type, name))
        return i + 1

    # List placeholder: "[" sep "]" "}"
    if template[i + 2 : i + 4] != "]}":
        raise TemplateSyntaxError(
            template, i, "List separator must be one character written as '[sep]}'"
        )
    builder.append_field_list(field_ref(record_type, name), template[i + 1])
    return i + 4
