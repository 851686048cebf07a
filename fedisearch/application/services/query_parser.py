"""Search query grammar: free text, quoted phrases, and key:value operators.

Parses search text into an immutable ParsedQuery that separates residual
free text (relevance matching) from structured constraints (exact-match and
range filters). Pure and stateless; no I/O.

Grammar (whitespace separated terms):

    term     := [prefix] (phrase | operator | word)
    prefix   := "+" | "-"
    phrase   := '"' chars '"'
    operator := key ":" (word | phrase)

Unrecognized keys are kept as plain words.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum

from fedisearch.domain.exceptions import GrammarError


class TermPrefix(str, Enum):
    """Boolean prefix of a term."""

    NONE = ""
    MUST = "+"
    MUST_NOT = "-"


# Operator keys and the values each one accepts (None = any non-empty value).
OPERATOR_VALUES: dict[str, frozenset[str] | None] = {
    "from": None,
    "is": frozenset({"reply", "sensitive"}),
    "has": frozenset({"media", "poll", "link", "embed", "image", "video", "audio"}),
    "language": None,
    "before": None,
    "after": None,
    "during": None,
    "in": frozenset({"all", "library"}),
}
DATE_OPERATORS = frozenset({"before", "after", "during"})

_OPERATOR_RE = re.compile(r"(?P<key>[A-Za-z_]+):(?P<value>.*)", re.DOTALL)
_LANGUAGE_RE = re.compile(r"[a-z]{2,3}(-[a-z0-9]{2,8})?")


@dataclass(frozen=True)
class TextTerm:
    """A bare keyword."""

    text: str
    prefix: TermPrefix = TermPrefix.NONE


@dataclass(frozen=True)
class PhraseTerm:
    """A quoted phrase, matched as one unit."""

    phrase: str
    prefix: TermPrefix = TermPrefix.NONE


@dataclass(frozen=True)
class OperatorTerm:
    """A recognized key:value constraint. Values are normalized to lower case."""

    key: str
    value: str
    prefix: TermPrefix = TermPrefix.NONE

    @property
    def negated(self) -> bool:
        return self.prefix is TermPrefix.MUST_NOT

    @property
    def date_value(self) -> date:
        """Value of a before/after/during operator as a date."""
        return date.fromisoformat(self.value)


Term = TextTerm | PhraseTerm | OperatorTerm


@dataclass(frozen=True)
class ParsedQuery:
    """Parsed search text: an ordered conjunction of terms."""

    terms: tuple[Term, ...] = ()

    @property
    def text(self) -> str:
        """Residual free text in websearch syntax (phrases quoted, exclusions as -term)."""
        parts: list[str] = []
        for term in self.terms:
            if isinstance(term, OperatorTerm):
                continue
            negation = "-" if term.prefix is TermPrefix.MUST_NOT else ""
            if isinstance(term, PhraseTerm):
                parts.append(f'{negation}"{term.phrase}"')
            else:
                parts.append(f"{negation}{term.text}")
        return " ".join(parts)

    @property
    def operators(self) -> tuple[OperatorTerm, ...]:
        return tuple(t for t in self.terms if isinstance(t, OperatorTerm))

    def operators_for(self, key: str) -> tuple[OperatorTerm, ...]:
        return tuple(t for t in self.operators if t.key == key)

    @property
    def has_text(self) -> bool:
        return any(not isinstance(t, OperatorTerm) for t in self.terms)


def parse(text: str) -> ParsedQuery:
    """Parse search text into a ParsedQuery.

    Args:
        text: Raw search text.

    Returns:
        ParsedQuery with terms in input order.

    Raises:
        GrammarError: Unterminated quote, operator without value, or an
            invalid operator value.
    """
    terms: list[Term] = []
    pos = 0
    length = len(text)
    while pos < length:
        if text[pos].isspace():
            pos += 1
            continue
        start = pos
        prefix = TermPrefix.NONE
        if text[pos] in "+-" and pos + 1 < length and not text[pos + 1].isspace():
            prefix = TermPrefix(text[pos])
            pos += 1
        if text[pos] == '"':
            close = text.find('"', pos + 1)
            if close == -1:
                raise GrammarError("Unterminated quoted phrase", position=start)
            phrase = " ".join(text[pos + 1 : close].split())
            pos = close + 1
            if phrase:
                terms.append(PhraseTerm(phrase, prefix))
            continue
        word, pos = _read_word(text, pos)
        terms.append(_classify_word(word, prefix, start))
    return ParsedQuery(tuple(terms))


def _read_word(text: str, pos: int) -> tuple[str, int]:
    """Read up to the next whitespace, keeping key:"quoted value" together."""
    end = pos
    while end < len(text) and not text[end].isspace():
        if text[end] == '"' and end > pos and text[end - 1] == ":":
            close = text.find('"', end + 1)
            if close == -1:
                raise GrammarError("Unterminated quoted operator value", position=end)
            end = close + 1
            continue
        end += 1
    return text[pos:end], end


def _classify_word(word: str, prefix: TermPrefix, position: int) -> Term:
    match = _OPERATOR_RE.fullmatch(word)
    if match is None or match.group("key").lower() not in OPERATOR_VALUES:
        return TextTerm(word, prefix)
    key = match.group("key").lower()
    value = match.group("value")
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = " ".join(value[1:-1].split())
    value = value.strip().lower()
    if not value:
        raise GrammarError(f"Operator '{key}:' has no value", position=position)
    return OperatorTerm(key, _normalize_value(key, value, position), prefix)


def _normalize_value(key: str, value: str, position: int) -> str:
    allowed = OPERATOR_VALUES[key]
    if allowed is not None and value not in allowed:
        raise GrammarError(
            f"Unknown value for '{key}:': {value!r} (expected one of {sorted(allowed)})",
            position=position,
        )
    if key == "from":
        value = value.lstrip("@")
        if not value or value.count("@") > 1:
            raise GrammarError(f"Invalid account handle for 'from:': {value!r}", position=position)
    elif key == "language":
        if not _LANGUAGE_RE.fullmatch(value):
            raise GrammarError(f"Invalid language code: {value!r}", position=position)
    elif key in DATE_OPERATORS:
        try:
            date.fromisoformat(value)
        except ValueError:
            raise GrammarError(
                f"Invalid date for '{key}:': {value!r} (expected YYYY-MM-DD)",
                position=position,
            ) from None
    return value
