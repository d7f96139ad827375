"""Tests for the reciprocity table."""

import json

import pytest

from kinship.errors import ReciprocityTableError
from kinship.relations.table import (
    ENGLISH,
    HEBREW,
    ReciprocityEntry,
    ReciprocityTable,
    load_table,
)


class TestBuiltInVocabularies:
    """Built-in label sets."""

    @pytest.mark.parametrize("vocabulary", ["en", "he"])
    def test_consistent(self, vocabulary):
        """Built-in tables satisfy the round-trip law."""
        assert load_table(vocabulary).check_consistency() == []

    def test_same_shape(self):
        """Hebrew and English tables cover the same relationships."""
        assert len(ENGLISH) == len(HEBREW) == 22

    def test_required_classes_present(self):
        """Every kinship class has both directions."""
        table = load_table("en")
        for label in ["son", "daughter", "father", "mother",
                      "grandson", "granddaughter", "grandfather", "grandmother",
                      "brother", "sister", "uncle", "aunt", "nephew", "niece",
                      "groom", "bride", "father-in-law", "mother-in-law",
                      "husband", "wife", "brother-in-law", "sister-in-law"]:
            assert label in table

    def test_symmetric_under_swap(self):
        """Every non-empty reciprocal is itself a key."""
        table = load_table("en")
        for entry in table.values():
            for reciprocal in (entry.male, entry.female):
                if reciprocal:
                    assert reciprocal in table

    def test_spouse_is_asymmetric(self):
        """Husband/wife only have an opposite-gender reciprocal."""
        table = load_table("en")
        assert table["husband"] == ReciprocityEntry("", "wife")
        assert table["wife"] == ReciprocityEntry("husband", "")

    def test_hebrew_parent(self):
        table = load_table("he")
        assert table["בן"].male == "אב"
        assert table["בן"].female == "אם"


class TestImpliedGender:
    """Gender implied by a label."""

    def test_gendered_labels(self):
        table = load_table("en")
        assert table.implied_gender("father") == "male"
        assert table.implied_gender("niece") == "female"
        assert table.implied_gender("wife") == "female"
        assert table.implied_gender("brother-in-law") == "male"

    def test_unknown_label(self):
        assert load_table("en").implied_gender("mentor") is None

    def test_neutral_label(self):
        """A label filling both slots implies no gender."""
        table = ReciprocityTable({"cousin": ReciprocityEntry("cousin", "cousin")})
        assert table.implied_gender("cousin") is None
        assert table.check_consistency() == []


class TestTableIsReadOnly:
    """Table cannot be mutated after loading."""

    def test_no_item_assignment(self):
        table = load_table("en")
        with pytest.raises(TypeError):
            table["son"] = ReciprocityEntry("x", "y")

    def test_entries_frozen(self):
        entry = load_table("en")["son"]
        with pytest.raises(AttributeError):
            entry.male = "x"

    def test_loaded_once(self):
        """Same vocabulary returns the cached table."""
        assert load_table("en") is load_table("en")


class TestConsistencyCheck:
    """Detection of broken reciprocity data."""

    def test_missing_reciprocal_key(self):
        table = ReciprocityTable({"godfather": ReciprocityEntry("godson", "goddaughter")})
        problems = table.check_consistency()
        assert any("godson" in p for p in problems)

    def test_non_involutive_pair(self):
        table = ReciprocityTable({
            "son": ReciprocityEntry("father", "mother"),
            "father": ReciprocityEntry("daughter", "daughter"),
            "mother": ReciprocityEntry("son", "daughter"),
            "daughter": ReciprocityEntry("father", "mother"),
        })
        problems = table.check_consistency()
        assert any("'son' -> 'father'" in p for p in problems)


class TestLoadTable:
    """Building tables from vocabularies and extra files."""

    def test_unknown_vocabulary(self):
        with pytest.raises(ReciprocityTableError):
            load_table("fr")

    def test_extra_entries_extend_table(self, tmp_path):
        """New labels are added from JSON without touching code."""
        path = tmp_path / "extra.json"
        path.write_text(json.dumps({
            "godfather": {"male": "godson", "female": "goddaughter"},
            "godmother": {"male": "godson", "female": "goddaughter"},
            "godson": {"male": "godfather", "female": "godmother"},
            "goddaughter": {"male": "godfather", "female": "godmother"},
        }), encoding="utf-8")

        table = load_table("en", str(path))
        assert table["godson"].female == "godmother"
        assert "son" in table

    def test_inconsistent_extra_entries_rejected(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"mentor": {"male": "mentee", "female": "mentee"}}), encoding="utf-8")

        with pytest.raises(ReciprocityTableError, match="mentee"):
            load_table("en", str(path))

    def test_unreadable_extra_file(self, tmp_path):
        with pytest.raises(ReciprocityTableError):
            load_table("en", str(tmp_path / "missing.json"))

    def test_extra_file_must_be_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ReciprocityTableError):
            load_table("en", str(path))
