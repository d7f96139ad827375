"""FastAPI backend for reciprocal relationship management."""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from kinship.errors import InconsistentGraphWrite, InvalidRelationshipError, PersonNotFoundError
from kinship.graph import PersonNode, RelationshipGraph
from kinship.log import configure_logging

logger = logging.getLogger(__name__)

app = FastAPI(title="Kinship Network API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class PersonRequest(BaseModel):
    name: str = Field(min_length=1)
    gender: Optional[str] = None


class GenderRequest(BaseModel):
    gender: Optional[str] = None


class RelationshipRequest(BaseModel):
    source_id: int
    target_id: int
    relation_type: str


_graph: Optional[RelationshipGraph] = None


def get_graph() -> RelationshipGraph:
    """Get or create RelationshipGraph instance."""
    global _graph
    if _graph is None:
        configure_logging()
        _graph = RelationshipGraph()
    return _graph


@app.get("/api/relationship-types")
async def relationship_types(graph: RelationshipGraph = Depends(get_graph)):
    return {"relationship_types": sorted(graph.known_relationship_types())}


@app.get("/api/reciprocal")
async def reciprocal(relation_type: str, gender: Optional[str] = None,
                     graph: RelationshipGraph = Depends(get_graph)):
    resolution = graph.resolver.explain(relation_type, gender)
    return {
        "relation_type": relation_type,
        "reciprocal": resolution.label,
        "outcome": resolution.outcome.value,
    }


@app.post("/api/persons", status_code=201)
async def add_person(req: PersonRequest, graph: RelationshipGraph = Depends(get_graph)):
    person_id = graph.persons.add_person(PersonNode(name=req.name, gender=req.gender))
    return graph.persons.get_person(person_id).to_dict()


@app.put("/api/persons/{person_id}/gender")
async def change_gender(person_id: int, req: GenderRequest,
                        graph: RelationshipGraph = Depends(get_graph)):
    try:
        stale = graph.change_gender(person_id, req.gender)
    except PersonNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"person_id": person_id, "stale": [s.to_dict() for s in stale]}


@app.get("/api/persons/{person_id}/relationships")
async def person_relationships(person_id: int, graph: RelationshipGraph = Depends(get_graph)):
    if graph.persons.get_person(person_id) is None:
        raise HTTPException(status_code=404, detail=f"Person {person_id} not found")
    views = graph.relationships_for(person_id)
    return {"count": len(views), "relationships": [v.to_dict() for v in views]}


@app.post("/api/relationships", status_code=201)
async def assert_relationship(req: RelationshipRequest, graph: RelationshipGraph = Depends(get_graph)):
    for person_id in (req.source_id, req.target_id):
        if graph.persons.get_person(person_id) is None:
            raise HTTPException(status_code=404, detail=f"Person {person_id} not found")
    try:
        result = graph.assert_relationship(req.source_id, req.target_id, req.relation_type)
    except InvalidRelationshipError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except InconsistentGraphWrite as e:
        logger.error("Relationship write failed: %s (%s)", e, e.__cause__)
        raise HTTPException(status_code=409, detail=str(e))
    return result.to_dict()


@app.delete("/api/relationships/{source_id}/{target_id}")
async def remove_relationship(source_id: int, target_id: int,
                              graph: RelationshipGraph = Depends(get_graph)):
    try:
        removed = graph.remove_relationship(source_id, target_id)
    except InconsistentGraphWrite as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not removed:
        raise HTTPException(status_code=404, detail="Relationship not found")
    return {"removed": [edge.to_dict() for edge in removed]}
