"""
Test relation MCP server tools.

Tools are called directly, the way agents would call them through MCP.
"""

import pytest

from kinship.mcp.servers import relation_server
from kinship.mcp.servers.relation_server import (
    add_person,
    assert_relationship,
    change_gender,
    get_relationships,
    list_relationship_types,
    remove_relationship,
    resolve_reciprocal,
)


@pytest.fixture(autouse=True)
def server_graph(graph, monkeypatch):
    """Point the server singleton at a temp graph."""
    monkeypatch.setattr(relation_server, "_graph", graph)
    return graph


class TestReciprocityTools:
    """Lookup tools."""

    def test_resolve_reciprocal(self):
        result = resolve_reciprocal("son", "female")
        assert result["reciprocal"] == "mother"
        assert result["outcome"] == "resolved"

    def test_resolve_unknown(self):
        result = resolve_reciprocal("mentor")
        assert result["reciprocal"] == "mentor"
        assert result["outcome"] == "unknown_type"

    def test_list_types(self):
        result = list_relationship_types()
        assert result["count"] == 22
        assert "grandmother" in result["relationship_types"]


class TestRelationshipTools:
    """Write and read tools."""

    def test_full_flow(self):
        ramesh = add_person("Ramesh", "M")["person"]["id"]
        arjun = add_person("Arjun", "M")["person"]["id"]

        result = assert_relationship(ramesh, arjun, "son")
        assert result["success"]
        assert result["mirror"]["relation_type"] == "father"

        view = get_relationships(arjun)
        assert view["count"] == 1
        assert view["relationships"][0]["label"] == "father"

        stale = change_gender(ramesh, "F")
        assert stale["success"]
        assert stale["stale"][0]["expected_reciprocal"] == "mother"

        removed = remove_relationship(ramesh, arjun)
        assert removed["success"]
        assert len(removed["removed"]) == 2

    def test_add_person_requires_name(self):
        assert not add_person("  ")["success"]

    def test_invalid_relationship(self):
        person = add_person("Solo")["person"]["id"]
        result = assert_relationship(person, person, "brother")
        assert not result["success"]
        assert "themselves" in result["error"]

    def test_change_gender_unknown_person(self):
        assert not change_gender(404, "male")["success"]

    def test_assert_unknown_person(self, server_graph):
        ramesh = add_person("Ramesh", "M")["person"]["id"]

        result = assert_relationship(ramesh, 999, "son")

        assert not result["success"]
        assert result["error"] == "Person 999 not found"
        assert server_graph.get_all_relationships() == []
        assert not assert_relationship(999, ramesh, "father")["success"]
