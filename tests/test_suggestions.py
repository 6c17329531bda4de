"""Tests for typo suggestions."""

from formulavalidator.engine import levenshtein_distance, suggest_name
from formulavalidator.engine.grammar import is_valid_name, suggestion_threshold


class TestLevenshteinDistance:
    """Tests for edit distance."""

    def test_known_distances(self):
        """Test classic examples."""
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("flaw", "lawn") == 2
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("same", "same") == 0

    def test_symmetric(self):
        """Test argument order does not matter."""
        assert levenshtein_distance("rate", "tax_rate") == levenshtein_distance("tax_rate", "rate")


class TestSuggestionThreshold:
    """Tests for the length-scaled threshold."""

    def test_short_names_use_minimum(self):
        """Test the floor of two edits."""
        assert suggestion_threshold("x") == 2
        assert suggestion_threshold("abcdef") == 2

    def test_long_names_scale(self):
        """Test a third of the length, rounded up."""
        assert suggestion_threshold("abcdefg") == 3
        assert suggestion_threshold("temprature") == 4


class TestSuggestName:
    """Tests for picking a suggestion."""

    def test_close_typo(self):
        """Test a single-edit typo."""
        assert suggest_name("temprature", ["pressure", "temperature"]) == "temperature"

    def test_no_candidates(self):
        """Test an empty namespace."""
        assert suggest_name("unknown", []) is None

    def test_nothing_close(self):
        """Test that distant names are not suggested."""
        assert suggest_name("velocity", ["a", "b"]) is None

    def test_tie_goes_to_earlier_candidate(self):
        """Test caller order breaks ties."""
        assert suggest_name("cat", ["bat", "hat"]) == "bat"
        assert suggest_name("cat", ["hat", "bat"]) == "hat"

    def test_prefix_completion(self):
        """Test that a truncated name completes to the shortest extension."""
        assert suggest_name("temp", ["temperature", "temperatures"]) == "temperature"

    def test_prefix_completion_needs_three_characters(self):
        """Test that very short prefixes are not completed."""
        assert suggest_name("te", ["temperature"]) is None

    def test_completion_is_case_sensitive(self):
        """Test that completion does not ignore case."""
        assert suggest_name("Temp", ["temperature"]) is None


class TestIsValidName:
    """Tests for names a formula can reference."""

    def test_valid_names(self):
        """Test letters, digits and underscores after a letter or underscore."""
        assert is_valid_name("temperature")
        assert is_valid_name("_x1")

    def test_invalid_names(self):
        """Test empty names, leading digits, spaces and non-ASCII letters."""
        assert not is_valid_name("")
        assert not is_valid_name("1temp")
        assert not is_valid_name("te mp")
        assert not is_valid_name("tempé")
