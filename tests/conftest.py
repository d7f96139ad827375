"""Shared pytest fixtures: temp stores and a small family."""

import pytest

from kinship.config import RelationSettings
from kinship.graph import PersonNode, PersonStore, RelationshipGraph, RelationStore


@pytest.fixture
def persons(tmp_path):
    """Person store on a temp database."""
    return PersonStore(db_path=str(tmp_path / "persons.db"))


@pytest.fixture
def edges(tmp_path):
    """Relation store on a temp database."""
    return RelationStore(db_path=str(tmp_path / "relations.db"))


@pytest.fixture
def relation_config():
    """Default reciprocity settings, independent of the environment."""
    return RelationSettings(
        vocabulary="en",
        absent_gender="male",
        unknown_type_policy="identity",
        unknown_fallback_label="other",
        extra_table_path=None,
    )


@pytest.fixture
def graph(persons, edges, relation_config):
    """RelationshipGraph instance."""
    return RelationshipGraph(persons=persons, edges=edges, config=relation_config)


@pytest.fixture
def family(persons):
    """A few people: two men, two women, one with no recorded gender."""
    return {
        "ramesh": persons.add_person(PersonNode(name="Ramesh", gender="M")),
        "padma": persons.add_person(PersonNode(name="Padma", gender="F")),
        "arjun": persons.add_person(PersonNode(name="Arjun", gender="male")),
        "priya": persons.add_person(PersonNode(name="Priya", gender="female")),
        "chris": persons.add_person(PersonNode(name="Chris")),
    }
