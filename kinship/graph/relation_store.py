"""
Relation Store - SQLite storage for directed relationship edges.

This is a DATA LAYER component:
- Reads and writes rows of the relationships table
- NO reciprocity logic (the maintainer decides which edges to write)

Compound writes go through ``transaction()`` so a forward edge and its
mirror are committed or rolled back together.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from kinship.config import settings
from kinship.graph.models import RelationshipEdge


class RelationStore:
    """Storage for relationship edges."""

    def __init__(self, db_path: Optional[str] = None, timeout: float = 30.0):
        self.db_path = db_path or settings.database.relations_db_path
        self.timeout = timeout
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        """Initialize relationships table."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS relationships (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    pair_id TEXT NOT NULL,
                    source_id INTEGER NOT NULL,
                    target_id INTEGER NOT NULL,
                    relation_type TEXT NOT NULL,
                    is_mirror INTEGER DEFAULT 0,
                    one_way INTEGER DEFAULT 0,
                    resolved_gender TEXT,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP,

                    UNIQUE (source_id, target_id)
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_relationship_pair ON relationships(pair_id)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_relationship_source ON relationships(source_id)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_relationship_target ON relationships(target_id)")

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Open a write transaction.

        Commits when the block exits normally, rolls back on any exception
        and re-raises it.
        """
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                conn.execute("BEGIN IMMEDIATE")
                yield conn
        finally:
            conn.close()

    # =========================================================================
    # WRITES (inside a transaction)
    # =========================================================================

    def insert_edge(self, conn: sqlite3.Connection, edge: RelationshipEdge) -> RelationshipEdge:
        """Insert an edge and set its id."""
        cursor = conn.execute("""
            INSERT INTO relationships (
                pair_id, source_id, target_id, relation_type,
                is_mirror, one_way, resolved_gender, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            edge.pair_id, edge.source_id, edge.target_id, edge.relation_type,
            int(edge.is_mirror), int(edge.one_way), edge.resolved_gender, edge.created_at
        ))
        edge.id = cursor.lastrowid
        return edge

    def delete_pair(self, conn: sqlite3.Connection, pair_id: str) -> int:
        """Delete every edge of a pair; returns rows deleted."""
        cursor = conn.execute("DELETE FROM relationships WHERE pair_id = ?", (pair_id,))
        return cursor.rowcount

    # =========================================================================
    # READS
    # =========================================================================

    def get_edge(self, source_id: int, target_id: int,
                 conn: Optional[sqlite3.Connection] = None) -> Optional[RelationshipEdge]:
        """Edge from source to target, forward or mirror."""
        rows = self._select(
            "SELECT * FROM relationships WHERE source_id = ? AND target_id = ?",
            (source_id, target_id), conn
        )
        return rows[0] if rows else None

    def find_between(self, person1_id: int, person2_id: int,
                     conn: Optional[sqlite3.Connection] = None) -> list[RelationshipEdge]:
        """All edges between two persons in either direction."""
        return self._select("""
            SELECT * FROM relationships
            WHERE (source_id = ? AND target_id = ?) OR (source_id = ? AND target_id = ?)
            ORDER BY id
        """, (person1_id, person2_id, person2_id, person1_id), conn)

    def get_pair(self, pair_id: str,
                 conn: Optional[sqlite3.Connection] = None) -> list[RelationshipEdge]:
        """Forward edge first, then its mirror if any."""
        return self._select(
            "SELECT * FROM relationships WHERE pair_id = ? ORDER BY is_mirror, id",
            (pair_id,), conn
        )

    def edges_from(self, person_id: int) -> list[RelationshipEdge]:
        """Edges whose source is the person."""
        return self._select(
            "SELECT * FROM relationships WHERE source_id = ? ORDER BY id", (person_id,)
        )

    def edges_for_person(self, person_id: int) -> list[RelationshipEdge]:
        """Edges touching the person in either direction."""
        return self._select(
            "SELECT * FROM relationships WHERE source_id = ? OR target_id = ? ORDER BY id",
            (person_id, person_id)
        )

    def get_all(self) -> list[RelationshipEdge]:
        """Get all edges."""
        return self._select("SELECT * FROM relationships ORDER BY id", ())

    def _select(self, sql: str, params: tuple,
                conn: Optional[sqlite3.Connection] = None) -> list[RelationshipEdge]:
        if conn is not None:
            return [self._row_to_edge(row) for row in conn.execute(sql, params).fetchall()]

        with sqlite3.connect(self.db_path, timeout=self.timeout) as own:
            own.row_factory = sqlite3.Row
            return [self._row_to_edge(row) for row in own.execute(sql, params).fetchall()]

    def _row_to_edge(self, row: sqlite3.Row) -> RelationshipEdge:
        """Convert database row to RelationshipEdge."""
        return RelationshipEdge(
            id=row["id"],
            pair_id=row["pair_id"],
            source_id=row["source_id"],
            target_id=row["target_id"],
            relation_type=row["relation_type"],
            is_mirror=bool(row["is_mirror"]),
            one_way=bool(row["one_way"]),
            resolved_gender=row["resolved_gender"],
            created_at=row["created_at"],
        )
