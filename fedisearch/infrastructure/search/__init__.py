"""Status search backends: relational full-text, document index, and disabled."""

from fedisearch.infrastructure.search.index_backend import IndexContentSearchBackend
from fedisearch.infrastructure.search.index_client import SearchIndexClient
from fedisearch.infrastructure.search.null_backend import NullContentSearchBackend
from fedisearch.infrastructure.search.pg_backend import PostgresContentSearchBackend

__all__ = [
    "IndexContentSearchBackend",
    "NullContentSearchBackend",
    "PostgresContentSearchBackend",
    "SearchIndexClient",
]
