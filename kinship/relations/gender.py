"""Gender values used when picking reciprocal labels."""

from typing import Optional

MALE = "male"
FEMALE = "female"

GENDERS = (MALE, FEMALE)

_ALIASES = {
    "male": MALE,
    "m": MALE,
    "female": FEMALE,
    "f": FEMALE,
}


def parse_gender(value) -> Optional[str]:
    """Normalize 'male'/'female'/'M'/'F' (any case); anything else is None."""
    if not value or not isinstance(value, str):
        return None
    return _ALIASES.get(value.strip().lower())
