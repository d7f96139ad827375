"""
Relationship graph maintainer.

Keeps relationship edges bidirectional. An edge (A -> B, T) means
"B is the T of A"; its mirror (B -> A, T') means "A is the T' of B", with T'
resolved from T and A's gender.

Usage:
    graph = RelationshipGraph()
    graph.assert_relationship(ramesh_id, arjun_id, "son")   # mirror: father
    graph.relationships_for(arjun_id)
    stale = graph.change_gender(ramesh_id, "female")
"""

import logging
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

from kinship.config import RelationSettings, settings
from kinship.errors import InconsistentGraphWrite, InvalidRelationshipError, PersonNotFoundError
from kinship.graph.models import AssertResult, RelationshipEdge, RelationshipView, StaleRelationship
from kinship.graph.person_store import GenderLookup, PersonStore
from kinship.graph.relation_store import RelationStore
from kinship.relations.resolver import ReciprocityResolver, Resolution, ResolutionOutcome
from kinship.relations.table import load_table
from kinship.relations.vocabulary import from_contact_type

logger = logging.getLogger(__name__)

UNKNOWN_IDENTITY = "identity"
UNKNOWN_SUPPRESS = "suppress"
UNKNOWN_LABEL = "label"


class KeyedLocks:
    """
    One lock per set of person ids, held only while in use.

    Entries are reference counted and dropped when the last holder leaves.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[frozenset, list] = {}

    @contextmanager
    def hold(self, *person_ids: int) -> Iterator[None]:
        key = frozenset(person_ids)
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


class RelationshipGraph:
    """
    Main interface for relationship writes and reads.

    Combines the person store (gender lookup), the relation store and the
    reciprocity resolver. One relationship is kept per pair of persons;
    asserting a new type for a pair replaces the old one.
    """

    def __init__(self, persons: Optional[GenderLookup] = None,
                 edges: Optional[RelationStore] = None,
                 resolver: Optional[ReciprocityResolver] = None,
                 config: Optional[RelationSettings] = None):
        self.config = config or settings.relations
        self.persons = persons if persons is not None else PersonStore()
        self.edges = edges if edges is not None else RelationStore()
        self.resolver = resolver or ReciprocityResolver(
            load_table(self.config.vocabulary, self.config.extra_table_path),
            absent_gender=self.config.absent_gender,
        )
        self._locks = KeyedLocks()

    # ─────────────────────────────────────────
    # Writes
    # ─────────────────────────────────────────

    def assert_relationship(self, source_id: int, target_id: int, relation_type: str) -> AssertResult:
        """
        Record that target is the <relation_type> of source.

        Writes the forward edge and, when a reciprocal exists, the mirror
        edge in one transaction. Any edges already between the two persons
        are replaced in the same transaction.

        Raises:
            InvalidRelationshipError: empty type or source == target
            InconsistentGraphWrite: the transaction failed and was rolled back
        """
        relation_type = (relation_type or "").strip()
        if not relation_type:
            raise InvalidRelationshipError("Relationship type is required")
        if source_id == target_id:
            raise InvalidRelationshipError(f"Person {source_id} cannot be related to themselves")

        # The source's gender lock keeps change_gender from running between
        # the gender read and the write.
        with self._locks.hold(source_id), self._locks.hold(source_id, target_id):
            source_gender = self.persons.get_gender(source_id)
            resolution = self.resolver.explain(relation_type, source_gender)
            mirror_label = self._mirror_label(relation_type, resolution)
            gender_used = self.resolver.gender_in_use(source_gender)

            pair_id = uuid.uuid4().hex
            forward = RelationshipEdge(
                source_id=source_id,
                target_id=target_id,
                relation_type=relation_type,
                pair_id=pair_id,
                one_way=not mirror_label,
                resolved_gender=gender_used,
            )
            mirror = None
            if mirror_label:
                mirror = RelationshipEdge(
                    source_id=target_id,
                    target_id=source_id,
                    relation_type=mirror_label,
                    pair_id=pair_id,
                    is_mirror=True,
                    resolved_gender=gender_used,
                )

            try:
                with self.edges.transaction() as conn:
                    replaced = self.edges.find_between(source_id, target_id, conn)
                    for old_pair in {edge.pair_id for edge in replaced}:
                        self.edges.delete_pair(conn, old_pair)
                    self.edges.insert_edge(conn, forward)
                    if mirror:
                        self.edges.insert_edge(conn, mirror)
            except sqlite3.Error as e:
                logger.error("Relationship %s -> %s (%s) rolled back: %s",
                             source_id, target_id, relation_type, e)
                raise InconsistentGraphWrite(source_id, target_id, "assert") from e

        if mirror:
            logger.info("Related %s -> %s as %r, mirror %r", source_id, target_id, relation_type, mirror_label)
        else:
            logger.info("Related %s -> %s as %r, one-way (%s)",
                        source_id, target_id, relation_type, resolution.outcome.value)

        return AssertResult(forward=forward, mirror=mirror,
                            outcome=resolution.outcome.value, replaced=replaced)

    def remove_relationship(self, source_id: int, target_id: int) -> list[RelationshipEdge]:
        """
        Remove the relationship between two persons and its mirror.

        The mirror is found through the pair id stored at creation, so a later
        gender change cannot make it unreachable. Returns the removed edges.
        """
        with self._locks.hold(source_id, target_id):
            try:
                with self.edges.transaction() as conn:
                    edge = (self.edges.get_edge(source_id, target_id, conn)
                            or self.edges.get_edge(target_id, source_id, conn))
                    if edge is None:
                        logger.debug("No relationship between %s and %s to remove", source_id, target_id)
                        return []
                    removed = self.edges.get_pair(edge.pair_id, conn)
                    self.edges.delete_pair(conn, edge.pair_id)
            except sqlite3.Error as e:
                logger.error("Removing relationship %s -> %s rolled back: %s", source_id, target_id, e)
                raise InconsistentGraphWrite(source_id, target_id, "remove") from e

        logger.info("Removed %d edge(s) between %s and %s", len(removed), source_id, target_id)
        return removed

    def change_gender(self, person_id: int, new_gender: Optional[str]) -> list[StaleRelationship]:
        """
        Update a person's gender without touching any edge.

        Returns the relationships whose mirror label was resolved with the old
        gender and would resolve differently now. Re-asserting a relationship
        reconciles it.
        """
        with self._locks.hold(person_id):
            if not self.persons.update_gender(person_id, new_gender):
                raise PersonNotFoundError(person_id)
            stale = self.stale_relationships(person_id)

        for report in stale:
            logger.warning(
                "Relationship %s -> %s (%r) has mirror %r resolved for %s; %s would now give %r",
                report.forward.source_id, report.forward.target_id, report.forward.relation_type,
                report.stored_reciprocal, report.old_gender, report.new_gender, report.expected_reciprocal,
            )
        return stale

    def import_contact_relation(self, person_id: int, related_id: int, contact_type: str) -> AssertResult:
        """Assert a contact-book relation ("child", "spouse", ...) using the related person's gender."""
        label = from_contact_type(
            contact_type,
            self.persons.get_gender(related_id),
            vocabulary=self.config.vocabulary,
        )
        return self.assert_relationship(person_id, related_id, label)

    # ─────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────

    def stale_relationships(self, person_id: int) -> list[StaleRelationship]:
        """Pairs where person_id is the forward source and the mirror no longer matches their gender."""
        current = self.persons.get_gender(person_id)
        in_use = self.resolver.gender_in_use(current)
        stale = []
        for edge in self.edges.edges_from(person_id):
            if edge.is_mirror or edge.resolved_gender == in_use:
                continue
            expected = self._mirror_label(edge.relation_type,
                                          self.resolver.explain(edge.relation_type, current))
            pair = self.edges.get_pair(edge.pair_id)
            stored = next((e.relation_type for e in pair if e.is_mirror), "")
            if expected != stored:
                stale.append(StaleRelationship(
                    forward=edge,
                    stored_reciprocal=stored,
                    expected_reciprocal=expected,
                    old_gender=edge.resolved_gender,
                    new_gender=in_use,
                ))
        return stale

    def relationships_for(self, person_id: int) -> list[RelationshipView]:
        """
        Every relationship of a person, from that person's side.

        One-way pairs seen from the target side get a label derived from the
        resolver on read; they are left out when nothing can be derived.
        """
        views = []
        for edge in self.edges.edges_for_person(person_id):
            if edge.source_id == person_id:
                views.append(RelationshipView(person_id, edge.target_id, edge.relation_type,
                                              is_mirror=edge.is_mirror))
            elif edge.one_way:
                gender = self.persons.get_gender(edge.source_id)
                label = self._mirror_label(edge.relation_type, self.resolver.explain(edge.relation_type, gender))
                if label:
                    views.append(RelationshipView(person_id, edge.source_id, label, derived=True))
        return views

    def get_relationship(self, source_id: int, target_id: int) -> Optional[RelationshipEdge]:
        return self.edges.get_edge(source_id, target_id)

    def get_all_relationships(self) -> list[RelationshipEdge]:
        return self.edges.get_all()

    def known_relationship_types(self) -> frozenset[str]:
        return self.resolver.known_types()

    def _mirror_label(self, relation_type: str, resolution: Resolution) -> str:
        """Mirror label for a resolution, applying the unknown-type policy."""
        if resolution.outcome is not ResolutionOutcome.UNKNOWN_TYPE:
            return resolution.label

        policy = self.config.unknown_type_policy
        if policy == UNKNOWN_SUPPRESS:
            return ""
        if policy == UNKNOWN_LABEL:
            return self.config.unknown_fallback_label
        return relation_type
