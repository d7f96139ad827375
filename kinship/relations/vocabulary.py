"""Translation between relationship vocabularies and contact-book types."""

from typing import Optional

from kinship.relations.gender import FEMALE, MALE, parse_gender

EN_TO_HE = {
    "son": "בן",
    "daughter": "בת",
    "father": "אב",
    "mother": "אם",
    "grandson": "נכד",
    "granddaughter": "נכדה",
    "grandfather": "סבא",
    "grandmother": "סבתא",
    "brother": "אח",
    "sister": "אחות",
    "uncle": "דוד",
    "aunt": "דודה",
    "nephew": "אחיין",
    "niece": "אחיינית",
    "groom": "חתן",
    "bride": "כלה",
    "father-in-law": "חותן",
    "mother-in-law": "חותנת",
    "husband": "בעל",
    "wife": "אישה",
    "brother-in-law": "גיס",
    "sister-in-law": "גיסה",
    # Generic words with no reciprocal entry
    "spouse": "בן/בת זוג",
    "parent": "הורה",
    "child": "ילד/ה",
    "sibling": "אח/ות",
    "grandparent": "סב/תא",
    "grandchild": "נכד/ה",
    "relative": "קרוב משפחה",
    "friend": "חבר",
    "other": "אחר",
}

HE_TO_EN = {he: en for en, he in EN_TO_HE.items()}

# Contact-book relation types -> (male label, female label, neutral fallback)
CONTACT_TYPES = {
    "spouse": ("husband", "wife", "spouse"),
    "husband": ("husband", "husband", "husband"),
    "wife": ("wife", "wife", "wife"),
    "domesticpartner": ("husband", "wife", "spouse"),
    "partner": ("husband", "wife", "spouse"),
    "child": ("son", "daughter", "child"),
    "son": ("son", "son", "son"),
    "daughter": ("daughter", "daughter", "daughter"),
    "parent": ("father", "mother", "parent"),
    "father": ("father", "father", "father"),
    "mother": ("mother", "mother", "mother"),
    "sibling": ("brother", "sister", "sibling"),
    "brother": ("brother", "brother", "brother"),
    "sister": ("sister", "sister", "sister"),
    "grandparent": ("grandfather", "grandmother", "grandparent"),
    "grandchild": ("grandson", "granddaughter", "grandchild"),
    "relative": ("relative", "relative", "relative"),
    "friend": ("friend", "friend", "friend"),
}


def translate(label: str, to_vocabulary: str) -> str:
    """Translate a label to 'en' or 'he'; unmatched labels pass through."""
    if to_vocabulary == "he":
        return EN_TO_HE.get(label, label)
    if to_vocabulary == "en":
        return HE_TO_EN.get(label, label)
    raise ValueError(f"Unknown vocabulary '{to_vocabulary}'")


def from_contact_type(contact_type: str, holder_gender: Optional[str] = None,
                      vocabulary: str = "en") -> str:
    """
    Turn a contact-book relation type into a vocabulary label.

    Args:
        contact_type: Type as exported by the contact book ("spouse", "child", ...)
        holder_gender: Gender of the person the label describes
        vocabulary: Target vocabulary, "en" or "he"

    Returns:
        Specific label when the gender is known ("child" + female -> "daughter"),
        otherwise the generic word. Unknown contact types come back lowercased.
    """
    key = (contact_type or "").strip().lower().replace(" ", "")
    if key not in CONTACT_TYPES:
        label = (contact_type or "").strip().lower() or "relative"
        return translate(label, vocabulary)

    male, female, neutral = CONTACT_TYPES[key]
    gender = parse_gender(holder_gender)
    label = male if gender == MALE else female if gender == FEMALE else neutral
    return translate(label, vocabulary)
