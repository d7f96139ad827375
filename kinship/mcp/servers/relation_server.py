"""
Relation MCP Server - Tools for reciprocal relationship management.

This server provides tools that agents use to:
- Look up the reciprocal of a relationship label
- Record and remove relationships with their mirror edges
- Review relationships made stale by a gender change

Architecture:
    Agent → MCP Protocol → relation_server.py → RelationshipGraph → SQLite
"""

from typing import Dict, Optional

from mcp.server.fastmcp import FastMCP

from kinship.errors import InconsistentGraphWrite, InvalidRelationshipError, PersonNotFoundError
from kinship.graph import PersonNode, RelationshipGraph


# Initialize MCP server
mcp = FastMCP("relation-server")

# Lazy-loaded singleton
_graph: Optional[RelationshipGraph] = None


def get_graph() -> RelationshipGraph:
    """Get or create RelationshipGraph instance."""
    global _graph
    if _graph is None:
        _graph = RelationshipGraph()
    return _graph


# =============================================================================
# RECIPROCITY TOOLS
# =============================================================================

@mcp.tool()
def resolve_reciprocal(relation_type: str, gender: Optional[str] = None) -> Dict:
    """
    Get the reciprocal of a relationship label.

    Args:
        relation_type: Label such as "son", "aunt", "husband"
        gender: Gender of the person who holds the reciprocal ("male"/"female")

    Returns:
        {"reciprocal": label, "outcome": how it was resolved}
        An empty reciprocal means no mirror relationship exists.
    """
    resolution = get_graph().resolver.explain(relation_type, gender)
    return {
        "relation_type": relation_type,
        "reciprocal": resolution.label,
        "outcome": resolution.outcome.value,
        "gender_used": resolution.gender_used,
    }


@mcp.tool()
def list_relationship_types() -> Dict:
    """List every relationship label with a known reciprocal."""
    types = sorted(get_graph().known_relationship_types())
    return {"count": len(types), "relationship_types": types}


# =============================================================================
# PERSON TOOLS
# =============================================================================

@mcp.tool()
def add_person(name: str, gender: Optional[str] = None) -> Dict:
    """
    Add a person so relationships can refer to them.

    Args:
        name: Display name
        gender: "male", "female", "M" or "F"

    Returns:
        {"success": True, "person": {...}}
    """
    if not name or not name.strip():
        return {"success": False, "error": "Name required"}

    persons = get_graph().persons
    person_id = persons.add_person(PersonNode(name=name.strip(), gender=gender))
    return {"success": True, "person": persons.get_person(person_id).to_dict()}


@mcp.tool()
def change_gender(person_id: int, gender: Optional[str] = None) -> Dict:
    """
    Change a person's gender. Existing relationships are NOT retyped.

    Returns:
        {"success": True, "stale": [...]} listing relationships whose mirror
        label may now be wrong, for manual review.
    """
    try:
        stale = get_graph().change_gender(person_id, gender)
    except PersonNotFoundError as e:
        return {"success": False, "error": str(e)}
    return {"success": True, "stale": [s.to_dict() for s in stale]}


# =============================================================================
# RELATIONSHIP TOOLS
# =============================================================================

@mcp.tool()
def assert_relationship(source_id: int, target_id: int, relation_type: str) -> Dict:
    """
    Record that target is the <relation_type> of source, plus its mirror.

    Args:
        source_id: Person the relationship is described from
        target_id: Person who holds the relation_type label
        relation_type: Label such as "son" (target is source's son)

    Returns:
        {"success": True, "forward": {...}, "mirror": {...} or None, ...}
    """
    graph = get_graph()
    for person_id in (source_id, target_id):
        if graph.persons.get_person(person_id) is None:
            return {"success": False, "error": str(PersonNotFoundError(person_id))}

    try:
        result = graph.assert_relationship(source_id, target_id, relation_type)
    except (InvalidRelationshipError, InconsistentGraphWrite) as e:
        return {"success": False, "error": str(e)}
    return {"success": True, **result.to_dict()}


@mcp.tool()
def remove_relationship(source_id: int, target_id: int) -> Dict:
    """Remove the relationship between two persons together with its mirror."""
    try:
        removed = get_graph().remove_relationship(source_id, target_id)
    except InconsistentGraphWrite as e:
        return {"success": False, "error": str(e)}
    return {"success": True, "removed": [edge.to_dict() for edge in removed]}


@mcp.tool()
def get_relationships(person_id: int) -> Dict:
    """
    Get all relationships of a person, from that person's point of view.

    Returns:
        {"count": n, "relationships": [{"related_id": .., "label": ..}, ...]}
    """
    views = get_graph().relationships_for(person_id)
    return {"count": len(views), "relationships": [v.to_dict() for v in views]}


if __name__ == "__main__":
    mcp.run()
