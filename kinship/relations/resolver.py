"""
Reciprocity resolver.

Given "B is the <relationship_type> of A" and A's gender, returns what A is
to B. The resolver never raises: unknown types come back unchanged
(identity fallback) and genders with no reciprocal come back as "".
Use ``explain`` when the caller needs to tell those cases apart.
"""

import logging
import threading
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from kinship.relations.gender import MALE, parse_gender
from kinship.relations.table import ReciprocityTable, load_table

logger = logging.getLogger(__name__)

ABSENT_AS_MALE = "male"
ABSENT_SUPPRESSES = "none"


class ResolutionOutcome(str, Enum):
    """How a reciprocal label was produced."""
    RESOLVED = "resolved"
    MISSING_FOR_GENDER = "missing_for_gender"
    UNKNOWN_TYPE = "unknown_type"
    GENDER_SUPPRESSED = "gender_suppressed"


@dataclass(frozen=True)
class Resolution:
    """Result of resolving one reciprocal label."""
    label: str
    outcome: ResolutionOutcome
    gender_used: Optional[str] = None

    @property
    def has_mirror(self) -> bool:
        return bool(self.label)


class ResolutionStats:
    """Thread-safe outcome counters for telemetry."""

    def __init__(self):
        self._lock = threading.Lock()
        self._counts: Counter = Counter()

    def record(self, outcome: ResolutionOutcome) -> None:
        with self._lock:
            self._counts[outcome.value] += 1

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return {outcome.value: self._counts[outcome.value] for outcome in ResolutionOutcome}

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()


class ReciprocityResolver:
    """Resolve reciprocal relationship labels from a ReciprocityTable."""

    def __init__(self, table: ReciprocityTable, absent_gender: str = ABSENT_AS_MALE):
        if absent_gender not in (ABSENT_AS_MALE, ABSENT_SUPPRESSES):
            raise ValueError(f"absent_gender must be 'male' or 'none', got {absent_gender!r}")
        self.table = table
        self.absent_gender = absent_gender
        self.stats = ResolutionStats()

    def explain(self, relationship_type: str, target_gender: Optional[str] = None) -> Resolution:
        """Resolve and report how the label was chosen."""
        entry = self.table.get(relationship_type)
        if entry is None:
            logger.warning("Unknown relationship type %r, using it as its own reciprocal", relationship_type)
            return self._done(Resolution(relationship_type, ResolutionOutcome.UNKNOWN_TYPE))

        gender = self.gender_in_use(target_gender)
        if gender is None:
            logger.debug("No gender for reciprocal of %r, mirror suppressed", relationship_type)
            return self._done(Resolution("", ResolutionOutcome.GENDER_SUPPRESSED))

        label = entry.for_gender(gender)
        if not label:
            logger.debug("%r has no %s reciprocal", relationship_type, gender)
            return self._done(Resolution("", ResolutionOutcome.MISSING_FOR_GENDER, gender))

        return self._done(Resolution(label, ResolutionOutcome.RESOLVED, gender))

    def resolve(self, relationship_type: str, target_gender: Optional[str] = None) -> str:
        """Reciprocal label; identity for unknown types, "" when none exists."""
        return self.explain(relationship_type, target_gender).label

    def gender_in_use(self, target_gender: Optional[str]) -> Optional[str]:
        """Gender a lookup for target_gender reads; None when the absent-gender policy suppresses."""
        gender = parse_gender(target_gender)
        if gender is None and self.absent_gender == ABSENT_AS_MALE:
            return MALE
        return gender

    def known_types(self) -> frozenset[str]:
        return self.table.labels()

    def _done(self, resolution: Resolution) -> Resolution:
        self.stats.record(resolution.outcome)
        return resolution


# Lazy-loaded default resolver built from settings
_default: Optional[ReciprocityResolver] = None
_default_lock = threading.Lock()


def get_resolver() -> ReciprocityResolver:
    """Get or create the process-wide resolver."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                from kinship.config import settings
                config = settings.relations
                table = load_table(config.vocabulary, config.extra_table_path)
                _default = ReciprocityResolver(table, absent_gender=config.absent_gender)
    return _default


def resolve_reciprocal(relationship_type: str, target_gender: Optional[str] = None) -> str:
    """Reciprocal of ``relationship_type`` for a holder of ``target_gender``."""
    return get_resolver().resolve(relationship_type, target_gender)


def list_known_relationship_types() -> frozenset[str]:
    """Relationship labels the default table knows."""
    return get_resolver().known_types()
