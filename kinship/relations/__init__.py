"""Reciprocal relationship labels."""
from kinship.relations.table import ReciprocityEntry, ReciprocityTable, load_table
from kinship.relations.resolver import (
    ReciprocityResolver,
    Resolution,
    ResolutionOutcome,
    get_resolver,
    list_known_relationship_types,
    resolve_reciprocal,
)

__all__ = [
    "ReciprocityEntry",
    "ReciprocityTable",
    "load_table",
    "ReciprocityResolver",
    "Resolution",
    "ResolutionOutcome",
    "get_resolver",
    "list_known_relationship_types",
    "resolve_reciprocal",
]
