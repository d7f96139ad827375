"""Shared data models for graph operations."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class PersonNode:
    """Person node; gender is 'male', 'female' or None."""
    name: str
    gender: Optional[str] = None
    id: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class RelationshipEdge:
    """
    Directed relationship: target is the <relation_type> of source.

    Forward edge and mirror share a pair_id. resolved_gender is the gender
    the resolver read when the pair was written ("male" for an absent gender
    under the default policy, None when the mirror was suppressed for it).
    """
    source_id: int
    target_id: int
    relation_type: str
    pair_id: str = ""
    is_mirror: bool = False
    one_way: bool = False
    resolved_gender: Optional[str] = None
    id: Optional[int] = None
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AssertResult:
    """Outcome of asserting a relationship."""
    forward: RelationshipEdge
    mirror: Optional[RelationshipEdge] = None
    outcome: str = "resolved"
    replaced: list[RelationshipEdge] = field(default_factory=list)

    @property
    def one_way(self) -> bool:
        return self.mirror is None

    def to_dict(self) -> dict:
        return {
            "forward": self.forward.to_dict(),
            "mirror": self.mirror.to_dict() if self.mirror else None,
            "one_way": self.one_way,
            "outcome": self.outcome,
            "replaced": [e.to_dict() for e in self.replaced],
        }


@dataclass
class StaleRelationship:
    """Pair whose mirror label was resolved with a gender that has since changed."""
    forward: RelationshipEdge
    stored_reciprocal: str
    expected_reciprocal: str
    old_gender: Optional[str]
    new_gender: Optional[str]

    def to_dict(self) -> dict:
        return {
            "forward": self.forward.to_dict(),
            "stored_reciprocal": self.stored_reciprocal,
            "expected_reciprocal": self.expected_reciprocal,
            "old_gender": self.old_gender,
            "new_gender": self.new_gender,
        }


@dataclass
class RelationshipView:
    """A relationship seen from one person: related_id is my <label>."""
    person_id: int
    related_id: int
    label: str
    is_mirror: bool = False
    derived: bool = False

    def to_dict(self) -> dict:
        return asdict(self)
