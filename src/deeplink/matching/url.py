"""URL decomposition.

Splits a URL reference into the parts the matcher compares against:
the raw path (not split into segments, since pattern literals may contain
slashes), the raw query, and the raw fragment. Anything that is not a
syntactically valid RFC 3986 reference raises ``MalformedURL``.
"""

import re
from dataclasses import dataclass
from urllib.parse import parse_qsl, unquote, urlsplit

from deeplink.errors import MalformedURL

# Characters RFC 3986 allows anywhere in a URI reference (unreserved,
# reserved, and "%" for escapes).
URI_CHARS = re.compile(r"[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]*")
_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+\-.]*")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass(frozen=True, slots=True)
class ParsedURL:
    """A decomposed URL reference.

    ``query`` and ``fragment`` are ``None`` when the URL has no ``?`` or
    ``#`` at all, and ``""`` when the delimiter is present with nothing
    after it.
    """

    url: str
    scheme: str
    netloc: str
    path: str
    query: str | None
    fragment: str | None

    @property
    def query_items(self) -> list[tuple[str, str]]:
        """Decoded query pairs in URL order; repeated keys are kept."""
        if not self.query:
            return []
        return parse_qsl(self.query, keep_blank_values=True)

    def target(self, *, with_query: bool = False, with_fragment: bool = False) -> str:
        """Return the raw text a pattern is aligned against.

        The path always participates; the query and fragment are appended
        with their delimiters only when requested and present.
        """
        parts = [self.path]
        if with_query and self.query is not None:
            parts.append("?" + self.query)
        if with_fragment and self.fragment is not None:
            parts.append("#" + self.fragment)
        return "".join(parts)


def parse_url(url: str) -> ParsedURL:
    """Decompose *url* into a ``ParsedURL``.

    Accepts absolute URLs (``https://example.com/a?b#c``) and relative
    references (``/a?b#c``). Raises ``MalformedURL`` otherwise.
    """
    if not isinstance(url, str) or not url:
        raise MalformedURL(repr(url), "Empty or non-string URL")

    if not URI_CHARS.fullmatch(url):
        raise MalformedURL(url, "URL contains characters not allowed by RFC 3986")

    if url.count("#") > 1:
        raise MalformedURL(url, "URL contains more than one '#'")

    if _BAD_ESCAPE.search(url):
        raise MalformedURL(url, "Invalid percent escape")

    try:
        unquote(url, errors="strict")
    except UnicodeDecodeError as exc:
        raise MalformedURL(url, "Percent escapes do not decode to UTF-8") from exc

    # A ":" before any "/", "?" or "#" sits in scheme position.
    head = re.split(r"[/?#]", url, maxsplit=1)[0]
    if ":" in head and not _SCHEME.fullmatch(head.split(":", 1)[0]):
        raise MalformedURL(url, "Invalid URL scheme")

    try:
        parts = urlsplit(url)
        parts.port  # noqa: B018
    except ValueError as exc:
        raise MalformedURL(url, str(exc)) from exc

    # "https://example.com" and "https://example.com/" name the same resource.
    path = parts.path or ("/" if parts.netloc else "")

    before_fragment, hash_sign, _ = url.partition("#")
    return ParsedURL(
        url=url,
        scheme=parts.scheme,
        netloc=parts.netloc,
        path=path,
        query=parts.query if "?" in before_fragment else None,
        fragment=parts.fragment if hash_sign else None,
    )
