"""Unit tests for the suggestion engine."""

import pytest

from .lib import levenshtein, max_suggestion_distance, rank_options, suggest_closest


class TestLevenshtein:
    """Tests for the edit distance."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("", "", 0),
            ("abc", "", 3),
            ("", "abc", 3),
            ("kitten", "sitting", 3),
            ("amdin", "admin", 2),
            ("flaw", "lawn", 2),
            ("same", "same", 0),
        ],
    )
    def test_distances(self, a, b, expected):
        assert levenshtein(a, b) == expected

    @pytest.mark.unit
    def test_symmetric(self):
        assert levenshtein("select", "selcet") == levenshtein("selcet", "select")


class TestSuggestClosest:
    """Tests for suggest_closest."""

    @pytest.mark.unit
    def test_transposition_is_suggested(self):
        assert suggest_closest("amdin", ["admin", "user"]) == "admin"

    @pytest.mark.unit
    def test_distant_value_has_no_suggestion(self):
        assert suggest_closest("xyz123zzz", ["admin", "user"]) is None

    @pytest.mark.unit
    def test_case_and_whitespace_are_ignored(self):
        assert suggest_closest("  ADMIN ", ["admin", "user"]) == "admin"

    @pytest.mark.unit
    def test_empty_options(self):
        assert suggest_closest("anything", []) is None

    @pytest.mark.unit
    def test_tie_keeps_first_option(self):
        assert suggest_closest("ab", ["aa", "bb"]) == "aa"

    @pytest.mark.unit
    def test_threshold_grows_with_input_length(self):
        assert max_suggestion_distance("ab") == 3
        assert max_suggestion_distance("abcdefghijkl") == 6

    @pytest.mark.unit
    def test_non_string_values(self):
        assert suggest_closest(12, [10, 99]) == 10


class TestRankOptions:
    """Tests for rank_options."""

    @pytest.mark.unit
    def test_closest_first(self):
        assert rank_options("usr", ["admin", "guest", "user"]) == [
            "user",
            "admin",
            "guest",
        ]

    @pytest.mark.unit
    def test_input_order_without_match(self):
        assert rank_options("xyz123zzz", ["admin", "user"]) == ["admin", "user"]
