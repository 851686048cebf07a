"""Persistence repositories. Re-exports for dependency injection."""

from fedisearch.infrastructure.persistence.repositories.relationship_repo import (
    RelationshipRepository,
)

__all__ = ["RelationshipRepository"]
