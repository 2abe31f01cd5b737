"""
Tests for the pattern list helpers.

Run with: pytest src/PhyPatterns/test/test_pattern_utils.py -v
"""

import numpy as np
import pytest
from PhyPatterns.Alphabet import NUCLEOTIDES
from PhyPatterns.MSA import MSA, SeqRecord
from PhyPatterns.PatternUtils import (empirical_state_frequencies,
                                      equal_state_frequencies,
                                      pattern_to_string)
from PhyPatterns.SitePatterns import SitePatterns


def patterns_from_rows(rows : list[str], **kwargs) -> SitePatterns:
    records = [SeqRecord(row, f"t{i}") for i, row in enumerate(rows)]
    return SitePatterns(MSA(records = records), strip = False, **kwargs)


class TestStateFrequencies:

    def test_equal(self):
        patterns = patterns_from_rows(["A", "C"])
        np.testing.assert_allclose(equal_state_frequencies(patterns),
                                   [0.25] * 4)

    def test_weighted(self):
        # sites: AC, AC, GT -> A 2, C 2, G 1, T 1
        patterns = patterns_from_rows(["AAG", "CCT"])
        np.testing.assert_allclose(empirical_state_frequencies(patterns),
                                   [2 / 6, 2 / 6, 1 / 6, 1 / 6])

    def test_ambiguity_follows_estimate(self):
        # an unknown next to three As ends up counted as an A
        patterns = patterns_from_rows(["A", "A", "A", "N"])
        freqs = empirical_state_frequencies(patterns)
        assert freqs.sum() == pytest.approx(1.0)
        assert freqs[0] == pytest.approx(1.0, abs = 1e-6)

    def test_sums_to_one(self):
        patterns = patterns_from_rows(["ACRTG-", "AYGTNN", "CCGTAA"])
        assert patterns.get_state_frequencies().sum() == pytest.approx(1.0)


class TestPatternToString:

    def test_render(self):
        pattern = NUCLEOTIDES.encode("ACGTN-")
        assert pattern_to_string(pattern, NUCLEOTIDES) == "ACGTN-"
