from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from ..db import FOLD_FUNCTION
from .types import Record

SEARCH_MODES = ("literal", "simplified")
RECORD_FIELDS = ("text", "subtext")


def _check_field(field: str) -> str:
    if field not in RECORD_FIELDS:
        raise ValueError(f"unknown record field: {field}")
    return field


def _quote(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


@dataclass(frozen=True)
class Contains:
    field: str
    value: str

    def __post_init__(self) -> None:
        _check_field(self.field)

    def to_sql(self) -> tuple[str, list[Any]]:
        return f"instr({FOLD_FUNCTION}({self.field}), ?) > 0", [self.value.casefold()]

    def evaluate(self, record: Record) -> bool:
        return self.value.casefold() in getattr(record, self.field).casefold()

    def describe(self) -> str:
        return f"{self.field} CONTAINS[c] {_quote(self.value)}"


@dataclass(frozen=True)
class BeginsWith:
    field: str
    value: str

    def __post_init__(self) -> None:
        _check_field(self.field)

    def to_sql(self) -> tuple[str, list[Any]]:
        folded = self.value.casefold()
        return f"substr({FOLD_FUNCTION}({self.field}), 1, ?) = ?", [len(folded), folded]

    def evaluate(self, record: Record) -> bool:
        return getattr(record, self.field).casefold().startswith(self.value.casefold())

    def describe(self) -> str:
        return f"{self.field} BEGINSWITH[c] {_quote(self.value)}"


@dataclass(frozen=True)
class And:
    terms: tuple[Predicate, ...]

    def to_sql(self) -> tuple[str, list[Any]]:
        return _join_sql(self.terms, "AND")

    def evaluate(self, record: Record) -> bool:
        return all(term.evaluate(record) for term in self.terms)

    def describe(self) -> str:
        return "(" + " AND ".join(term.describe() for term in self.terms) + ")"


@dataclass(frozen=True)
class Or:
    terms: tuple[Predicate, ...]

    def to_sql(self) -> tuple[str, list[Any]]:
        return _join_sql(self.terms, "OR")

    def evaluate(self, record: Record) -> bool:
        return any(term.evaluate(record) for term in self.terms)

    def describe(self) -> str:
        return "(" + " OR ".join(term.describe() for term in self.terms) + ")"


Predicate = Union[Contains, BeginsWith, And, Or]


def _join_sql(terms: tuple[Predicate, ...], op: str) -> tuple[str, list[Any]]:
    if not terms:
        raise ValueError(f"{op} needs at least one term")
    clauses: list[str] = []
    params: list[Any] = []
    for term in terms:
        clause, term_params = term.to_sql()
        clauses.append(clause)
        params.extend(term_params)
    return "(" + f" {op} ".join(clauses) + ")", params


def search_term(raw: str) -> str:
    """Pick the match term: the second whitespace token when there are two or more."""

    tokens = raw.split()
    if len(tokens) > 1:
        return tokens[1]
    return raw


def build_filter(raw: str, mode: str = "literal") -> Predicate | None:
    """Turn raw search input into a record predicate.

    ``literal`` keeps the redundant ``text CONTAINS term AND text BEGINSWITH``
    branch exactly as the list screen has always issued it. ``simplified``
    drops it; the two select the same records.
    """

    if mode not in SEARCH_MODES:
        raise ValueError(f"unknown search mode: {mode}")
    if not raw:
        return None
    term = search_term(raw)
    text_match = Contains("text", term)
    subtext_match = Contains("subtext", raw)
    if mode == "simplified":
        return Or((text_match, subtext_match))
    prefix_match = And(
        (
            Contains("text", term),
            Or((BeginsWith("text", term[0]), BeginsWith("text", raw[0]))),
        )
    )
    return Or((text_match, prefix_match, subtext_match))
