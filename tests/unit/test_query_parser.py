"""Unit tests for the search query grammar."""

from datetime import date

import pytest

from fedisearch.application.services.query_parser import (
    OperatorTerm,
    ParsedQuery,
    PhraseTerm,
    TermPrefix,
    TextTerm,
    parse,
)
from fedisearch.domain.exceptions import GrammarError


class TestParseTerms:
    """Tests for term recognition."""

    def test_plain_keywords(self) -> None:
        parsed = parse("hello   world")
        assert parsed.terms == (TextTerm("hello"), TextTerm("world"))
        assert parsed.text == "hello world"
        assert parsed.operators == ()

    def test_empty_text(self) -> None:
        parsed = parse("   ")
        assert parsed == ParsedQuery()
        assert parsed.has_text is False

    def test_quoted_phrase_is_one_term(self) -> None:
        parsed = parse('cats "open  source" dogs')
        assert parsed.terms[1] == PhraseTerm("open source")
        assert parsed.text == 'cats "open source" dogs'

    def test_prefixes(self) -> None:
        parsed = parse('+cats -dogs -"bad news"')
        assert parsed.terms == (
            TextTerm("cats", TermPrefix.MUST),
            TextTerm("dogs", TermPrefix.MUST_NOT),
            PhraseTerm("bad news", TermPrefix.MUST_NOT),
        )
        assert parsed.text == 'cats -dogs -"bad news"'

    def test_lone_dash_is_keyword(self) -> None:
        assert parse("a - b").terms[1] == TextTerm("-")

    def test_operator_separated_from_text(self) -> None:
        parsed = parse("from:@Alice@Example.com has:media kittens")
        assert parsed.text == "kittens"
        assert parsed.operators == (
            OperatorTerm("from", "alice@example.com"),
            OperatorTerm("has", "media"),
        )

    def test_quoted_operator_value(self) -> None:
        parsed = parse('language:"en" hello')
        assert parsed.operators == (OperatorTerm("language", "en"),)

    def test_negated_operator(self) -> None:
        term = parse("-is:reply").operators[0]
        assert term == OperatorTerm("is", "reply", TermPrefix.MUST_NOT)
        assert term.negated is True

    def test_unrecognized_key_is_plain_text(self) -> None:
        parsed = parse("note:important https://example.com")
        assert parsed.operators == ()
        assert parsed.text == "note:important https://example.com"

    def test_date_operators(self) -> None:
        parsed = parse("before:2024-02-01 after:2023-12-31 during:2024-01-15")
        assert [t.date_value for t in parsed.operators] == [
            date(2024, 2, 1),
            date(2023, 12, 31),
            date(2024, 1, 15),
        ]

    def test_operators_for(self) -> None:
        parsed = parse("in:library has:poll has:media")
        assert [t.value for t in parsed.operators_for("has")] == ["poll", "media"]
        assert parsed.operators_for("in")[0].value == "library"


class TestParseErrors:
    """Tests for malformed syntax."""

    def test_unterminated_phrase(self) -> None:
        with pytest.raises(GrammarError, match="Unterminated quoted phrase") as exc_info:
            parse('hello "world')
        assert exc_info.value.details == {"position": 6}
        assert exc_info.value.error_code == "GRAMMAR_ERROR"

    def test_unterminated_operator_value(self) -> None:
        with pytest.raises(GrammarError, match="Unterminated quoted operator value"):
            parse('from:"alice')

    def test_operator_without_value(self) -> None:
        with pytest.raises(GrammarError, match="has no value"):
            parse("cats from:")

    def test_invalid_date(self) -> None:
        with pytest.raises(GrammarError, match="Invalid date"):
            parse("before:yesterday")

    def test_unknown_in_value(self) -> None:
        with pytest.raises(GrammarError, match="Unknown value for 'in:'"):
            parse("in:everywhere")

    def test_unknown_has_value(self) -> None:
        with pytest.raises(GrammarError, match="Unknown value for 'has:'"):
            parse("has:cheese")

    def test_invalid_language(self) -> None:
        with pytest.raises(GrammarError, match="Invalid language code"):
            parse("language:english!")

    def test_invalid_handle(self) -> None:
        with pytest.raises(GrammarError, match="Invalid account handle"):
            parse("from:a@b@c")
