"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from fedisearch.infrastructure.
"""

from fedisearch.application.interfaces.repositories import (
    IContentSearchBackend,
    IRelationshipRepository,
)
from fedisearch.application.interfaces.services import (
    IAccountSearchService,
    IHashtagSearchService,
    IUrlResolver,
)

__all__ = [
    "IAccountSearchService",
    "IContentSearchBackend",
    "IHashtagSearchService",
    "IRelationshipRepository",
    "IUrlResolver",
]
