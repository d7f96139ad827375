"""SQLite store for person gender data."""

import sqlite3
from pathlib import Path
from typing import Optional, Protocol

from kinship.config import settings
from kinship.graph.models import PersonNode
from kinship.relations.gender import parse_gender


class GenderLookup(Protocol):
    """Anything that can report a person's gender."""

    def get_gender(self, person_id: int) -> Optional[str]: ...


class PersonStore:
    """Store persons and their gender in SQLite."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or settings.database.persons_db_path
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        """Initialize database schema."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS persons (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    gender TEXT,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_person_name ON persons(name)")

    def add_person(self, person: PersonNode) -> int:
        """Add a person and return their ID."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "INSERT INTO persons (name, gender) VALUES (?, ?)",
                (person.name, parse_gender(person.gender))
            )
            return cursor.lastrowid

    def get_person(self, person_id: int) -> Optional[PersonNode]:
        """Get person by ID."""
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            row = conn.execute(
                "SELECT * FROM persons WHERE id = ?", (person_id,)
            ).fetchone()
            return self._row_to_person(row) if row else None

    def get_gender(self, person_id: int) -> Optional[str]:
        """Gender of a person: 'male', 'female' or None."""
        person = self.get_person(person_id)
        return person.gender if person else None

    def get_all(self) -> list[PersonNode]:
        """Get all persons."""
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute("SELECT * FROM persons ORDER BY id").fetchall()
            return [self._row_to_person(row) for row in rows]

    def update_gender(self, person_id: int, gender: Optional[str]) -> bool:
        """Set a person's gender; unrecognized values clear it."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "UPDATE persons SET gender = ? WHERE id = ?",
                (parse_gender(gender), person_id)
            )
            return cursor.rowcount > 0

    def delete_person(self, person_id: int) -> bool:
        """Delete a person by ID."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute("DELETE FROM persons WHERE id = ?", (person_id,))
            return cursor.rowcount > 0

    def _row_to_person(self, row: sqlite3.Row) -> PersonNode:
        """Convert database row to PersonNode."""
        return PersonNode(id=row["id"], name=row["name"], gender=row["gender"])
