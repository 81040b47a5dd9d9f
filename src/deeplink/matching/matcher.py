"""Single-pattern URL matching with all-or-nothing binding.

One linear pass aligns the pattern's segments against the URL text:

1. A ``Literal`` must appear exactly at the cursor.
2. A placeholder captures up to the first occurrence of the literal that
   follows it. When that literal closes the pattern it must sit at the end
   of the text, and a placeholder in last position takes the rest.
3. Captures are percent-decoded (``FieldList`` captures are split on the
   separator first) and staged.
4. Only when every segment is consumed and no text is left over are the
   staged bindings written to the destination record.
"""

import logging
from typing import Any
from urllib.parse import unquote

from deeplink.config import DEFAULT_CONFIG, MatchConfig
from deeplink.errors import NoMatch
from deeplink.fields import FieldRef, FieldValue
from deeplink.matching.url import ParsedURL, parse_url
from deeplink.pattern.builder import Pattern
from deeplink.pattern.segment import Field, Literal

logger = logging.getLogger("deeplink.matcher")

_UNSET = object()


def match(
    pattern: Pattern,
    url: str,
    destination: Any,
    config: MatchConfig | None = None,
) -> None:
    """Match *url* against *pattern* and bind captures onto *destination*.

    Returns ``None`` on success.
    Raises ``MalformedURL`` if *url* cannot be decomposed.
    Raises ``NoMatch`` if *url* does not fit the pattern. *destination* is
    left untouched whenever an error is raised.
    """
    config = config or DEFAULT_CONFIG
    parsed = parse_url(url)
    bindings = collect_bindings(pattern, parsed, config)
    _commit(bindings, destination)
    logger.debug("Matched %s against %s (%d fields)", url, pattern, len(bindings))


def collect_bindings(
    pattern: Pattern,
    parsed: ParsedURL,
    config: MatchConfig | None = None,
) -> dict[FieldRef, FieldValue]:
    """Align *pattern* against *parsed* and return the staged bindings.

    Pure: nothing is written anywhere. Raises ``NoMatch`` on any mismatch.
    """
    config = config or DEFAULT_CONFIG
    # A "?" after the first "#" belongs to the fragment, not the query.
    literal_text = pattern.literal_text
    text = parsed.target(
        with_query="?" in literal_text.partition("#")[0],
        with_fragment="#" in literal_text,
    )

    segments = pattern.segments
    bindings: dict[FieldRef, FieldValue] = {}
    cursor = 0

    for index, segment in enumerate(segments):
        if isinstance(segment, Literal):
            if not text.startswith(segment.text, cursor):
                raise NoMatch(parsed.url, f"Expected {segment.text!r} at offset {cursor}")
            cursor += len(segment.text)
            continue

        # Placeholders are always followed by a literal or the end of the pattern.
        following, is_tail = _following_literal(segments, index + 1)
        if not following:
            end = len(text)
        elif is_tail:
            # The closing literal can only sit at the very end of the text.
            end = len(text) - len(following)
            if end < cursor or not text.endswith(following):
                raise NoMatch(parsed.url, f"Expected {following!r} at the end")
        else:
            end = text.find(following, cursor)
            if end == -1:
                raise NoMatch(parsed.url, f"Expected {following!r} after offset {cursor}")

        value = _extract(segment, text[cursor:end], parsed, config)
        if value is not _UNSET:
            bindings[segment.ref] = value
        cursor = end

    if cursor != len(text):
        raise NoMatch(parsed.url, f"Unmatched trailing text {text[cursor:]!r}")

    return bindings


def _following_literal(segments: tuple[Any, ...], start: int) -> tuple[str, bool]:
    """Return the literal text run starting at *start* and whether it ends the pattern."""
    index = start
    parts: list[str] = []
    while index < len(segments) and isinstance(segments[index], Literal):
        parts.append(segments[index].text)
        index += 1
    return "".join(parts), index == len(segments)


def _extract(segment: Any, raw: str, parsed: ParsedURL, config: MatchConfig) -> Any:
    """Turn one raw capture into the value bound to *segment*'s field."""
    if isinstance(segment, Field):
        if not raw and not config.allow_empty_field:
            raise NoMatch(parsed.url, f"Empty value for {segment.ref}")
        return unquote(raw)

    if not raw:
        return _UNSET if config.empty_list_as_absent else []
    return [unquote(part) for part in raw.split(segment.separator)]


def _commit(bindings: dict[FieldRef, FieldValue], destination: Any) -> None:
    """Write *bindings* onto *destination*, restoring prior values on failure."""
    written: list[tuple[FieldRef, Any]] = []
    try:
        for ref, value in bindings.items():
            previous = ref.get(destination) if ref.is_set(destination) else _UNSET
            ref.set(destination, value)
            written.append((ref, previous))
    except Exception:
        for ref, previous in reversed(written):
            if previous is _UNSET:
                ref.unset(destination)
            else:
                ref.set(destination, previous)
        raise
