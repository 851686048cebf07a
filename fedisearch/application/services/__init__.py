"""Application services: query classification, grammar parsing, status privacy filter."""

from fedisearch.application.services.query_classifier import (
    CategorySearch,
    DirectResourceCandidate,
    classify,
)
from fedisearch.application.services.query_parser import ParsedQuery, parse
from fedisearch.application.services.status_filter import StatusFilter, filter_statuses

__all__ = [
    "CategorySearch",
    "DirectResourceCandidate",
    "ParsedQuery",
    "StatusFilter",
    "classify",
    "filter_statuses",
    "parse",
]
