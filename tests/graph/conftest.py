"""Pytest fixtures for graph tests."""

import sqlite3

import pytest

from kinship.graph import RelationshipGraph, RelationStore


class FailingRelationStore(RelationStore):
    """Relation store whose Nth edge insert raises a storage error."""

    def __init__(self, db_path: str, fail_on: int = 2):
        super().__init__(db_path)
        self.fail_on = fail_on
        self.inserts = 0

    def insert_edge(self, conn, edge):
        self.inserts += 1
        if self.inserts == self.fail_on:
            raise sqlite3.OperationalError("disk I/O error")
        return super().insert_edge(conn, edge)


@pytest.fixture
def make_failing_graph(tmp_path, persons, relation_config):
    """Build a graph whose relation store fails on a given insert."""
    def _make(fail_on: int = 2) -> RelationshipGraph:
        store = FailingRelationStore(str(tmp_path / "relations.db"), fail_on=fail_on)
        return RelationshipGraph(persons=persons, edges=store, config=relation_config)
    return _make
