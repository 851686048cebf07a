"""Domain layer: enums and exceptions.

No dependencies on infrastructure. Used by application and
infrastructure layers.
"""

from fedisearch.domain.enums import (
    ResourceKind,
    SearchBackend,
    SearchCategory,
    SearchScope,
    Visibility,
)
from fedisearch.domain.exceptions import (
    BackendConnectivityError,
    BackendFatalError,
    FedisearchException,
    GrammarError,
    SqlNotConfiguredException,
    ValidationException,
)

__all__ = [
    "BackendConnectivityError",
    "BackendFatalError",
    "FedisearchException",
    "GrammarError",
    "ResourceKind",
    "SearchBackend",
    "SearchCategory",
    "SearchScope",
    "SqlNotConfiguredException",
    "ValidationException",
    "Visibility",
]
