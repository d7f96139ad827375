"""Graph package - relationship edges kept in sync with their mirrors."""

from kinship.graph.models import (
    AssertResult,
    PersonNode,
    RelationshipEdge,
    RelationshipView,
    StaleRelationship,
)
from kinship.graph.person_store import GenderLookup, PersonStore
from kinship.graph.relation_store import RelationStore
from kinship.graph.maintainer import RelationshipGraph

__all__ = [
    "AssertResult",
    "PersonNode",
    "RelationshipEdge",
    "RelationshipView",
    "StaleRelationship",
    "GenderLookup",
    "PersonStore",
    "RelationStore",
    "RelationshipGraph",
]
