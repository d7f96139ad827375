"""
Exception hierarchy for the kinship service.

    KinshipError (base)
    ├── ReciprocityTableError     bad vocabulary or inconsistent table data
    ├── InvalidRelationshipError  malformed relationship assertion
    ├── PersonNotFoundError       unknown person id
    └── InconsistentGraphWrite    forward + mirror write could not be committed

The reciprocity resolver never raises. Unknown relationship types and missing
reciprocals are reported as data, not exceptions.
"""


class KinshipError(Exception):
    """Base class for all kinship errors."""


class ReciprocityTableError(KinshipError):
    """Reciprocity table could not be built."""


class InvalidRelationshipError(KinshipError):
    """Relationship assertion is malformed (empty type, self relation)."""


class PersonNotFoundError(KinshipError):
    """Person id does not exist in the person store."""

    def __init__(self, person_id: int):
        super().__init__(f"Person {person_id} not found")
        self.person_id = person_id


class InconsistentGraphWrite(KinshipError):
    """
    Compound relationship write failed and was rolled back.

    The storage error that caused it is kept as ``__cause__``.
    """

    def __init__(self, source_id: int, target_id: int, operation: str):
        super().__init__(
            f"{operation} of relationship {source_id} -> {target_id} failed; "
            f"no changes were kept"
        )
        self.source_id = source_id
        self.target_id = target_id
        self.operation = operation
