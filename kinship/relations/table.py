"""
Reciprocity table: relationship label -> reciprocal labels by gender.

An entry answers "if B is the <label> of A, what is A to B?". The answer
depends on A's gender, so each entry carries a male and a female reciprocal.
An empty slot means the vocabulary has no reciprocal for that gender
(a male person cannot be the "wife" of his husband).

The table is data only. New labels are added through ``VOCABULARIES`` or an
extra JSON file, never by changing the resolver.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Optional

from kinship.errors import ReciprocityTableError
from kinship.relations.gender import FEMALE, MALE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReciprocityEntry:
    """Reciprocal labels for one relationship type."""
    male: str
    female: str

    def for_gender(self, gender: str) -> str:
        return self.female if gender == FEMALE else self.male


E = ReciprocityEntry

ENGLISH = {
    # Parent / child
    "son": E("father", "mother"),
    "daughter": E("father", "mother"),
    "father": E("son", "daughter"),
    "mother": E("son", "daughter"),
    # Grandparent / grandchild
    "grandson": E("grandfather", "grandmother"),
    "granddaughter": E("grandfather", "grandmother"),
    "grandfather": E("grandson", "granddaughter"),
    "grandmother": E("grandson", "granddaughter"),
    # Siblings
    "brother": E("brother", "sister"),
    "sister": E("brother", "sister"),
    # Aunt or uncle / niece or nephew
    "uncle": E("nephew", "niece"),
    "aunt": E("nephew", "niece"),
    "nephew": E("uncle", "aunt"),
    "niece": E("uncle", "aunt"),
    # Child-in-law / parent-in-law
    "groom": E("father-in-law", "mother-in-law"),
    "bride": E("father-in-law", "mother-in-law"),
    "father-in-law": E("groom", "bride"),
    "mother-in-law": E("groom", "bride"),
    # Spouses: no same-gender reciprocal in this vocabulary
    "husband": E("", "wife"),
    "wife": E("husband", ""),
    # Siblings-in-law
    "brother-in-law": E("brother-in-law", "sister-in-law"),
    "sister-in-law": E("brother-in-law", "sister-in-law"),
}

HEBREW = {
    "בן": E("אב", "אם"),
    "בת": E("אב", "אם"),
    "אב": E("בן", "בת"),
    "אם": E("בן", "בת"),
    "נכד": E("סבא", "סבתא"),
    "נכדה": E("סבא", "סבתא"),
    "סבא": E("נכד", "נכדה"),
    "סבתא": E("נכד", "נכדה"),
    "אח": E("אח", "אחות"),
    "אחות": E("אח", "אחות"),
    "דוד": E("אחיין", "אחיינית"),
    "דודה": E("אחיין", "אחיינית"),
    "אחיין": E("דוד", "דודה"),
    "אחיינית": E("דוד", "דודה"),
    "חתן": E("חותן", "חותנת"),
    "כלה": E("חותן", "חותנת"),
    "חותן": E("חתן", "כלה"),
    "חותנת": E("חתן", "כלה"),
    "בעל": E("", "אישה"),
    "אישה": E("בעל", ""),
    "גיס": E("גיס", "גיסה"),
    "גיסה": E("גיס", "גיסה"),
}

VOCABULARIES = {
    "en": ENGLISH,
    "he": HEBREW,
}


class ReciprocityTable(Mapping):
    """Immutable mapping from relationship label to ReciprocityEntry."""

    def __init__(self, entries: dict[str, ReciprocityEntry]):
        self._entries = MappingProxyType(dict(entries))
        self._slots = self._index_slots(self._entries)

    @staticmethod
    def _index_slots(entries) -> dict[str, frozenset[str]]:
        """Genders under which each label appears as somebody's reciprocal."""
        slots: dict[str, set[str]] = {}
        for entry in entries.values():
            for gender, label in ((MALE, entry.male), (FEMALE, entry.female)):
                if label:
                    slots.setdefault(label, set()).add(gender)
        return {label: frozenset(genders) for label, genders in slots.items()}

    def __getitem__(self, label: str) -> ReciprocityEntry:
        return self._entries[label]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def labels(self) -> frozenset[str]:
        """All known relationship labels."""
        return frozenset(self._entries)

    def implied_gender(self, label: str) -> Optional[str]:
        """
        Gender a label implies about the person holding it.

        None for unknown labels and for gender-neutral ones that fill both slots.
        """
        genders = self._slots.get(label, frozenset())
        if len(genders) == 1:
            return next(iter(genders))
        return None

    def check_consistency(self) -> list[str]:
        """Return problems that break the round-trip law (empty when sound)."""
        problems = []
        for label, entry in self._entries.items():
            for gender in (MALE, FEMALE):
                reciprocal = entry.for_gender(gender)
                if not reciprocal:
                    continue
                if reciprocal not in self._entries:
                    problems.append(f"'{label}' -> '{reciprocal}' ({gender}) has no entry for '{reciprocal}'")
                    continue
                back_genders = self._slots.get(label)
                if not back_genders:
                    problems.append(f"'{label}' is never a reciprocal, so '{reciprocal}' cannot map back")
                    continue
                for back_gender in sorted(back_genders):
                    back = self._entries[reciprocal].for_gender(back_gender)
                    if back != label:
                        problems.append(
                            f"'{label}' -> '{reciprocal}' ({gender}) maps back to "
                            f"'{back or '<empty>'}' ({back_gender})"
                        )
        return problems


def _read_extra_entries(path: str) -> dict[str, ReciprocityEntry]:
    """Read {"label": {"male": "...", "female": "..."}} from a JSON file."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ReciprocityTableError(f"Cannot read reciprocity entries from {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ReciprocityTableError(f"{path}: expected a JSON object of label entries")

    entries = {}
    for label, pair in raw.items():
        if not isinstance(pair, dict):
            raise ReciprocityTableError(f"{path}: entry '{label}' must be an object")
        entries[label] = ReciprocityEntry(
            male=str(pair.get("male") or ""),
            female=str(pair.get("female") or ""),
        )
    return entries


@lru_cache(maxsize=None)
def load_table(vocabulary: str = "en", extra_path: Optional[str] = None) -> ReciprocityTable:
    """Build the table for a vocabulary, optionally extended from a JSON file."""
    if vocabulary not in VOCABULARIES:
        raise ReciprocityTableError(
            f"Unknown vocabulary '{vocabulary}'. Available: {', '.join(sorted(VOCABULARIES))}"
        )

    entries = dict(VOCABULARIES[vocabulary])
    if extra_path:
        extra = _read_extra_entries(extra_path)
        entries.update(extra)
        logger.info("Loaded %d extra reciprocity entries from %s", len(extra), extra_path)

    table = ReciprocityTable(entries)
    problems = table.check_consistency()
    if problems:
        raise ReciprocityTableError("Inconsistent reciprocity table: " + "; ".join(problems))

    logger.debug("Reciprocity table '%s' ready with %d labels", vocabulary, len(table))
    return table
