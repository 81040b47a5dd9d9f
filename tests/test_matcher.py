"""Tests for deeplink.matching.matcher — alignment, extraction, commit."""

from dataclasses import dataclass

import pytest

from deeplink.config import MatchConfig
from deeplink.errors import MalformedURL, NoMatch
from deeplink.fields import fields_of
from deeplink.matching.matcher import collect_bindings, match
from deeplink.matching.url import parse_url
from deeplink.pattern.builder import Pattern, PatternBuilder


@dataclass
class Product:
    product_id: str | None = None


@dataclass
class Ticket:
    event: str | None = None
    section: str | None = None
    ids: list[str] | None = None
    tags: list[str] | None = None


@dataclass(frozen=True)
class FrozenTicket:
    event: str | None = None
    ids: list[str] | None = None


def _product_pattern() -> Pattern:
    b = PatternBuilder()
    b.append_literal("/product/")
    b.append_field(fields_of(Product).product_id)
    return b.build()


def _ids_pattern() -> Pattern:
    b = PatternBuilder()
    b.append_literal("/ids=")
    b.append_field_list(fields_of(Ticket).ids, ",")
    return b.build()


class TestProductExample:
    def test_matches(self) -> None:
        product = Product()
        match(_product_pattern(), "https://example.com/product/123", product)
        assert product.product_id == "123"

    def test_empty_capture_fails_by_default(self) -> None:
        product = Product()
        with pytest.raises(NoMatch):
            match(_product_pattern(), "https://example.com/product/", product)
        assert product.product_id is None

    def test_empty_capture_binds_when_allowed(self) -> None:
        product = Product()
        config = MatchConfig(allow_empty_field=True)
        match(_product_pattern(), "https://example.com/product/", product, config)
        assert product.product_id == ""

    def test_other_path_fails(self) -> None:
        product = Product()
        with pytest.raises(NoMatch):
            match(_product_pattern(), "https://example.com/other/123", product)
        assert product.product_id is None

    def test_query_ignored_when_pattern_has_none(self) -> None:
        product = Product()
        match(_product_pattern(), "https://example.com/product/123?ref=mail#reviews", product)
        assert product.product_id == "123"

    def test_relative_reference(self) -> None:
        product = Product()
        match(_product_pattern(), "/product/abc", product)
        assert product.product_id == "abc"

    def test_percent_decoded(self) -> None:
        product = Product()
        match(_product_pattern(), "/product/red%20shoe%2F2", product)
        assert product.product_id == "red shoe/2"

    def test_plus_is_not_space(self) -> None:
        product = Product()
        match(_product_pattern(), "/product/a+b", product)
        assert product.product_id == "a+b"

    def test_final_placeholder_takes_rest_of_path(self) -> None:
        product = Product()
        match(_product_pattern(), "/product/a/b/c", product)
        assert product.product_id == "a/b/c"

    def test_malformed(self) -> None:
        product = Product()
        with pytest.raises(MalformedURL):
            match(_product_pattern(), "ht tp://example.com/product/123", product)
        assert product.product_id is None

    def test_malformed_never_reported_as_no_match(self) -> None:
        with pytest.raises(MalformedURL):
            match(_product_pattern(), "1bad:/other", Product())


class TestFieldListExample:
    def test_splits(self) -> None:
        ticket = Ticket()
        match(_ids_pattern(), "https://example.com/ids=1,2,3", ticket)
        assert ticket.ids == ["1", "2", "3"]

    def test_single_item(self) -> None:
        ticket = Ticket()
        match(_ids_pattern(), "/ids=7", ticket)
        assert ticket.ids == ["7"]

    def test_empty_capture_is_empty_list(self) -> None:
        ticket = Ticket()
        match(_ids_pattern(), "https://example.com/ids=", ticket)
        assert ticket.ids == []

    def test_empty_capture_absent_when_configured(self) -> None:
        ticket = Ticket()
        match(_ids_pattern(), "/ids=", ticket, MatchConfig(empty_list_as_absent=True))
        assert ticket.ids is None

    def test_empty_items_kept(self) -> None:
        ticket = Ticket()
        match(_ids_pattern(), "/ids=1,,2", ticket)
        assert ticket.ids == ["1", "", "2"]

    def test_encoded_separator_stays_in_item(self) -> None:
        ticket = Ticket()
        match(_ids_pattern(), "/ids=a%2Cb,c", ticket)
        assert ticket.ids == ["a,b", "c"]


class TestAlignment:
    def test_placeholder_between_literals(self) -> None:
        ticket = Ticket()
        match(Pattern.parse("/sell/{event}/regular", Ticket), "/sell/opera/regular", ticket)
        assert ticket.event == "opera"

    def test_capture_stops_at_first_following_literal(self) -> None:
        ticket = Ticket()
        match(Pattern.parse("/{event}/{section}", Ticket), "/a/b/c", ticket)
        assert ticket.event == "a"
        assert ticket.section == "b/c"

    def test_trailing_text_fails(self) -> None:
        with pytest.raises(NoMatch):
            match(Pattern.parse("/sell/{event}/regular", Ticket), "/sell/opera/regular/x", Ticket())

    def test_missing_following_literal_fails(self) -> None:
        with pytest.raises(NoMatch):
            match(Pattern.parse("/sell/{event}/regular", Ticket), "/sell/opera", Ticket())

    def test_closing_literal_anchors_at_end(self) -> None:
        ticket = Ticket()
        match(Pattern.parse("/files/{event}.json", Ticket), "/files/v1.json.json", ticket)
        assert ticket.event == "v1.json"

    def test_closing_slash_keeps_inner_slashes(self) -> None:
        ticket = Ticket()
        match(Pattern.parse("/u/{event}/", Ticket), "/u/a/b/", ticket)
        assert ticket.event == "a/b"

    def test_closing_literal_missing_fails(self) -> None:
        with pytest.raises(NoMatch):
            match(Pattern.parse("/files/{event}.json", Ticket), "/files/v1.json.txt", Ticket())

    def test_closing_literal_cannot_overlap_capture_start(self) -> None:
        with pytest.raises(NoMatch):
            match(Pattern.parse("/a/{event}/a/", Ticket), "/a/", Ticket())

    def test_question_mark_in_fragment_literal_does_not_pull_in_query(self) -> None:
        pattern = Pattern.parse("/a#b?c={event}", Ticket)
        ticket = Ticket()
        match(pattern, "/a?utm=1#b?c=2", ticket)
        assert ticket.event == "2"
        other = Ticket()
        match(pattern, "/a#b?c=3", other)
        assert other.event == "3"

    def test_encoded_template_literal_matches_encoded_url(self) -> None:
        ticket = Ticket()
        match(Pattern.parse("/my page/{event}", Ticket), "/my%20page/opera", ticket)
        assert ticket.event == "opera"

    def test_literal_only_pattern(self) -> None:
        ticket = Ticket()
        match(Pattern.parse("/about", Ticket), "https://example.com/about", ticket)
        assert ticket == Ticket()

    def test_literal_only_pattern_rejects_longer_path(self) -> None:
        with pytest.raises(NoMatch):
            match(Pattern.parse("/about", Ticket), "/about/team", Ticket())

    def test_literals_are_case_sensitive(self) -> None:
        with pytest.raises(NoMatch):
            match(_product_pattern(), "/Product/1", Product())

    def test_leading_placeholder(self) -> None:
        ticket = Ticket()
        match(Pattern.parse("{event}/tickets", Ticket), "myapp:concert/tickets", ticket)
        assert ticket.event == "concert"

    def test_query_participates_when_pattern_mentions_it(self) -> None:
        ticket = Ticket()
        pattern = Pattern.parse("/search?event={event}&tags={tags[+]}", Ticket)
        match(pattern, "https://example.com/search?event=opera&tags=red+blue#x", ticket)
        assert ticket.event == "opera"
        assert ticket.tags == ["red", "blue"]

    def test_missing_query_fails_when_pattern_mentions_it(self) -> None:
        with pytest.raises(NoMatch):
            match(Pattern.parse("/search?event={event}", Ticket), "/search", Ticket())

    def test_fragment_participates_when_pattern_mentions_it(self) -> None:
        ticket = Ticket()
        match(Pattern.parse("/show#{section}", Ticket), "/show?x=1#balcony", ticket)
        assert ticket.section == "balcony"

    def test_query_and_fragment(self) -> None:
        ticket = Ticket()
        pattern = Pattern.parse("/e/{event}?ids={ids[,]}#{section}", Ticket)
        match(pattern, "/e/opera?ids=1,2#stalls", ticket)
        assert ticket == Ticket(event="opera", section="stalls", ids=["1", "2"])

    def test_mapping_destination(self) -> None:
        record: dict[str, object] = {}
        match(Pattern.parse("/e/{event}?ids={ids[,]}", dict), "/e/opera?ids=1,2", record)
        assert record == {"event": "opera", "ids": ["1", "2"]}


class TestAllOrNothing:
    def test_no_partial_binding_on_late_failure(self) -> None:
        ticket = Ticket()
        pattern = Pattern.parse("/e/{event}/s/{section}/end", Ticket)
        with pytest.raises(NoMatch):
            match(pattern, "/e/opera/s/stalls/oops", ticket)
        assert ticket == Ticket()

    def test_no_partial_binding_on_empty_field(self) -> None:
        ticket = Ticket()
        pattern = Pattern.parse("/e/{event}/s/{section}", Ticket)
        with pytest.raises(NoMatch):
            match(pattern, "/e/opera/s/", ticket)
        assert ticket.event is None

    def test_existing_values_untouched_on_failure(self) -> None:
        ticket = Ticket(event="keep", ids=["9"])
        with pytest.raises(NoMatch):
            match(_ids_pattern(), "/other=1", ticket)
        assert ticket == Ticket(event="keep", ids=["9"])

    def test_unbound_fields_untouched_on_success(self) -> None:
        ticket = Ticket(section="keep")
        match(Pattern.parse("/e/{event}", Ticket), "/e/opera", ticket)
        assert ticket == Ticket(event="opera", section="keep")

    def test_failed_commit_rolls_back_attribute_record(self) -> None:
        class Guarded:
            event: str | None = None
            section: str | None = None

            def __setattr__(self, name: str, value: object) -> None:
                if name == "section" and value is not None:
                    raise TypeError("section is read-only")
                object.__setattr__(self, name, value)

        record = Guarded()
        pattern = Pattern.parse("/e/{event}/s/{section}", Guarded)
        with pytest.raises(TypeError):
            match(pattern, "/e/opera/s/stalls", record)
        assert record.event is None

    def test_frozen_record_raises_and_stays_unchanged(self) -> None:
        record = FrozenTicket()
        pattern = Pattern.parse("/e/{event}", FrozenTicket)
        with pytest.raises(AttributeError):
            match(pattern, "/e/opera", record)
        assert record == FrozenTicket()


class TestCollectBindings:
    def test_returns_staged_values(self) -> None:
        F = fields_of(Ticket)
        pattern = Pattern.parse("/e/{event}?ids={ids[,]}", Ticket)
        bindings = collect_bindings(pattern, parse_url("/e/opera?ids=1,2"))
        assert bindings == {F.event: "opera", F.ids: ["1", "2"]}

    def test_absent_list_not_staged(self) -> None:
        bindings = collect_bindings(
            _ids_pattern(), parse_url("/ids="), MatchConfig(empty_list_as_absent=True)
        )
        assert bindings == {}


class TestRoundTrip:
    """Rendering a pattern with concrete values and matching it recovers them."""

    @pytest.mark.parametrize(
        ("template", "url", "expected"),
        [
            ("/product/{event}", "/product/123", Ticket(event="123")),
            (
                "/sell/{event}/regular/{section}",
                "https://t.example/sell/rock/regular/A-12",
                Ticket(event="rock", section="A-12"),
            ),
            ("/ids={ids[,]}", "/ids=1,2,3", Ticket(ids=["1", "2", "3"])),
            (
                "/e/{event}/tags={tags[;]}&ids={ids[,]}",
                "/e/x/tags=a;b&ids=4,5",
                Ticket(event="x", tags=["a", "b"], ids=["4", "5"]),
            ),
            (
                "/e/{event}?s={section}#{ids[.]}",
                "myapp://host/e/jazz?s=front#1.2",
                Ticket(event="jazz", section="front", ids=["1", "2"]),
            ),
            ("/q/{event}", "/q/caf%C3%A9", Ticket(event="café")),
            ("/files/{event}.json", "/files/v1.json.json", Ticket(event="v1.json")),
            ("/u/{event}/", "/u/a/b/", Ticket(event="a/b")),
            (
                "/s/{section}/e/{ids[,]}/",
                "/s/A/e/1/,2/",
                Ticket(section="A", ids=["1/", "2"]),
            ),
        ],
    )
    def test_recovers_values(self, template: str, url: str, expected: Ticket) -> None:
        ticket = Ticket()
        match(Pattern.parse(template, Ticket), url, ticket)
        assert ticket == expected
