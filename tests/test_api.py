"""Tests for the HTTP API."""

import sqlite3

import pytest
from fastapi.testclient import TestClient

from kinship.api.main import app, get_graph


@pytest.fixture
def client(graph):
    app.dependency_overrides[get_graph] = lambda: graph
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_person(client, name, gender=None):
    response = client.post("/api/persons", json={"name": name, "gender": gender})
    assert response.status_code == 201
    return response.json()["id"]


class TestLookups:
    """Reciprocity lookups."""

    def test_relationship_types(self, client):
        response = client.get("/api/relationship-types")
        assert response.status_code == 200
        assert "wife" in response.json()["relationship_types"]

    def test_reciprocal(self, client):
        response = client.get("/api/reciprocal", params={"relation_type": "husband", "gender": "male"})
        body = response.json()
        assert body["reciprocal"] == ""
        assert body["outcome"] == "missing_for_gender"


class TestRelationships:
    """Relationship endpoints."""

    def test_assert_and_list(self, client):
        padma = create_person(client, "Padma", "F")
        priya = create_person(client, "Priya", "F")

        response = client.post("/api/relationships",
                               json={"source_id": padma, "target_id": priya, "relation_type": "daughter"})
        assert response.status_code == 201
        assert response.json()["mirror"]["relation_type"] == "mother"

        listing = client.get(f"/api/persons/{priya}/relationships").json()
        assert listing["relationships"][0]["label"] == "mother"

    def test_unknown_person(self, client):
        padma = create_person(client, "Padma", "F")
        response = client.post("/api/relationships",
                               json={"source_id": padma, "target_id": 999, "relation_type": "son"})
        assert response.status_code == 404

    def test_self_relation(self, client):
        padma = create_person(client, "Padma", "F")
        response = client.post("/api/relationships",
                               json={"source_id": padma, "target_id": padma, "relation_type": "sister"})
        assert response.status_code == 422

    def test_storage_failure_is_conflict(self, client, graph, monkeypatch):
        a = create_person(client, "Ramesh", "M")
        b = create_person(client, "Arjun", "M")

        def broken_insert(conn, edge):
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr(graph.edges, "insert_edge", broken_insert)
        response = client.post("/api/relationships",
                               json={"source_id": a, "target_id": b, "relation_type": "son"})
        assert response.status_code == 409
        assert graph.get_all_relationships() == []

    def test_delete(self, client):
        a = create_person(client, "Ramesh", "M")
        b = create_person(client, "Arjun", "M")
        client.post("/api/relationships", json={"source_id": a, "target_id": b, "relation_type": "son"})

        response = client.delete(f"/api/relationships/{a}/{b}")
        assert response.status_code == 200
        assert len(response.json()["removed"]) == 2
        assert client.delete(f"/api/relationships/{a}/{b}").status_code == 404


class TestGender:
    """Gender change endpoint."""

    def test_stale_report(self, client):
        a = create_person(client, "Ramesh", "M")
        b = create_person(client, "Arjun", "M")
        client.post("/api/relationships", json={"source_id": a, "target_id": b, "relation_type": "son"})

        response = client.put(f"/api/persons/{a}/gender", json={"gender": "female"})
        assert response.status_code == 200
        assert response.json()["stale"][0]["stored_reciprocal"] == "father"

    def test_unknown_person(self, client):
        response = client.put("/api/persons/999/gender", json={"gender": "female"})
        assert response.status_code == 404
