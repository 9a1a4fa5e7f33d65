"""
Tests for edit distance between token names.

Run with: python -m pytest token_audit/similarity/test_edit_distance.py -v
"""

import pytest

from token_audit.similarity.edit_distance import levenshtein, within_distance


class TestLevenshtein:
    """Tests for classic Levenshtein distance."""

    @pytest.mark.parametrize('a,b,expected', [
        ('', '', 0),
        ('', 'abc', 3),
        ('abc', '', 3),
        ('kitten', 'sitting', 3),
        ('--accent-color', '--accent-colour', 1),
        ('--accent-color', '--accent-hue', 5),
        ('flaw', 'lawn', 2),
    ])
    def test_known_distances(self, a, b, expected):
        """Test distances against hand-computed values."""
        assert levenshtein(a, b) == expected

    def test_symmetric(self):
        """Test distance does not depend on argument order."""
        assert levenshtein('--gap-sm', '--gap-small') == levenshtein('--gap-small', '--gap-sm')


class TestWithinDistance:
    """Tests for the threshold check."""

    def test_at_threshold(self):
        """Test a distance equal to the threshold is within it."""
        assert within_distance('kitten', 'sitting', 3)

    def test_length_gap_short_circuits(self):
        """Test names whose lengths differ by more than the threshold are never close."""
        assert not within_distance('--a', '--abcdef', 3)

    def test_zero_threshold(self):
        """Test threshold 0 only accepts identical names."""
        assert within_distance('--a', '--a', 0)
        assert not within_distance('--a', '--b', 0)
