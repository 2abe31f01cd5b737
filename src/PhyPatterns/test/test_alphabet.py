"""
Tests for the data types in Alphabet.py.

Run with: pytest src/PhyPatterns/test/test_alphabet.py -v
"""

import numpy as np
import pytest
from PhyPatterns.Alphabet import (AlphabetError, NUCLEOTIDES, AMINO_ACIDS,
                                  CODONS,
                                  TabulatedDataType, snp_data_type)


class TestNucleotides:

    def test_dna_mapping(self):
        assert NUCLEOTIDES.get_state('A') == 0
        assert NUCLEOTIDES.get_state('C') == 1
        assert NUCLEOTIDES.get_state('G') == 2
        assert NUCLEOTIDES.get_state('T') == 3
        assert NUCLEOTIDES.get_state('U') == 3
        assert NUCLEOTIDES.get_state('n') == NUCLEOTIDES.get_unknown_state()
        assert NUCLEOTIDES.get_state('?') == NUCLEOTIDES.get_unknown_state()
        assert NUCLEOTIDES.get_state('-') == NUCLEOTIDES.get_gap_state()

    def test_counts(self):
        assert NUCLEOTIDES.state_count() == 4
        assert NUCLEOTIDES.ambiguous_state_count() == 16
        assert NUCLEOTIDES.get_type() == "DNA"

    def test_reverse_map(self):
        assert NUCLEOTIDES.get_char(0) == 'A'
        assert NUCLEOTIDES.get_char(NUCLEOTIDES.get_gap_state()) == '-'
        with pytest.raises(AlphabetError):
            NUCLEOTIDES.get_char(99)

    def test_invalid_mapping(self):
        with pytest.raises(AlphabetError):
            NUCLEOTIDES.get_state('Z')

    def test_possible_states(self):
        purine = NUCLEOTIDES.get_state('R')
        assert list(NUCLEOTIDES.get_states(purine)) == [0, 2]
        assert list(NUCLEOTIDES.get_states(0)) == [0]
        assert list(NUCLEOTIDES.get_states(NUCLEOTIDES.get_gap_state())) \
            == [0, 1, 2, 3]

    def test_state_flags(self):
        gap = NUCLEOTIDES.get_gap_state()
        unknown = NUCLEOTIDES.get_unknown_state()
        purine = NUCLEOTIDES.get_state('R')

        assert NUCLEOTIDES.is_gap_state(gap)
        assert not NUCLEOTIDES.is_gap_state(unknown)
        assert NUCLEOTIDES.is_unknown_state(unknown)
        assert not NUCLEOTIDES.is_unknown_state(purine)
        assert NUCLEOTIDES.is_ambiguous_state(purine)
        assert NUCLEOTIDES.is_ambiguous_state(gap)
        assert not NUCLEOTIDES.is_ambiguous_state(3)

    def test_unambiguously_different(self):
        a, c = NUCLEOTIDES.get_state('A'), NUCLEOTIDES.get_state('C')
        purine = NUCLEOTIDES.get_state('R')
        unknown = NUCLEOTIDES.get_unknown_state()
        gap = NUCLEOTIDES.get_gap_state()

        assert NUCLEOTIDES.are_unambiguously_different(a, c)
        assert not NUCLEOTIDES.are_unambiguously_different(a, a)
        assert not NUCLEOTIDES.are_unambiguously_different(purine, a)
        assert NUCLEOTIDES.are_unambiguously_different(purine, c)
        assert not NUCLEOTIDES.are_unambiguously_different(unknown, c)
        assert not NUCLEOTIDES.are_unambiguously_different(gap, a)

    def test_encode_decode(self):
        codes = NUCLEOTIDES.encode("ACGTN-")
        assert codes.tolist() == [0, 1, 2, 3, 14, 15]
        assert NUCLEOTIDES.decode(codes) == "ACGTN-"


class TestAminoAcids:

    def test_protein_mapping(self):
        assert AMINO_ACIDS.state_count() == 20
        assert AMINO_ACIDS.get_state('A') == 0
        assert AMINO_ACIDS.get_state('Y') == 19
        assert AMINO_ACIDS.get_state('X') == AMINO_ACIDS.get_unknown_state()
        assert AMINO_ACIDS.get_state('-') == AMINO_ACIDS.get_gap_state()

    def test_ambiguity(self):
        asx = AMINO_ACIDS.get_state('B')
        assert not AMINO_ACIDS.are_unambiguously_different(
            asx, AMINO_ACIDS.get_state('D'))
        assert AMINO_ACIDS.are_unambiguously_different(
            asx, AMINO_ACIDS.get_state('E'))


class TestSNP:

    def test_snp_data_type(self):
        snp = snp_data_type(2)
        assert snp.state_count() == 3
        assert snp.get_state('0') == 0
        assert snp.get_state('2') == 2
        assert snp.get_state('?') == 3
        assert snp.get_state('N') == 3
        assert snp.get_state('-') == 4

    def test_invalid_ploidy(self):
        with pytest.raises(AlphabetError):
            snp_data_type(0)


class TestUserDataType:

    def test_bad_ambiguity(self):
        with pytest.raises(AlphabetError):
            TabulatedDataType("BAD", "AB", {"C" : "AZ"})

    def test_duplicate_characters(self):
        with pytest.raises(AlphabetError):
            TabulatedDataType("BAD", "AB", {"A" : "AB"})

    def test_state_set_is_read_only(self):
        mask = NUCLEOTIDES.get_state_set(0)
        assert mask.dtype == np.bool_
        with pytest.raises(ValueError):
            mask[1] = True


class TestCodons:

    def test_counts(self):
        assert CODONS.state_count() == 61
        assert CODONS.ambiguous_state_count() == 63
        assert CODONS.symbol_length() == 3
        assert NUCLEOTIDES.symbol_length() == 1

    def test_mapping(self):
        assert CODONS.get_state("AAA") == 0
        assert CODONS.get_state("ATG") == 14
        assert CODONS.get_state("aug") == 14
        # TAA, TAG and TGA come before it and are skipped
        assert CODONS.get_state("TTT") == 60
        assert CODONS.get_char(14) == "ATG"

    def test_stop_codon(self):
        with pytest.raises(AlphabetError):
            CODONS.get_state("TGA")

    def test_ambiguous_triplets(self):
        assert CODONS.get_state("NNN") == CODONS.get_unknown_state()
        assert CODONS.get_state("ACR") == CODONS.get_unknown_state()
        assert CODONS.get_state("---") == CODONS.get_gap_state()
        assert CODONS.get_state("A-G") == CODONS.get_gap_state()
        assert CODONS.is_ambiguous_state(CODONS.get_gap_state())
        with pytest.raises(AlphabetError):
            CODONS.get_state("AZG")
        with pytest.raises(AlphabetError):
            CODONS.get_state("AC")

    def test_compatibility(self):
        assert CODONS.are_unambiguously_different(0, 14)
        assert not CODONS.are_unambiguously_different(
            14, CODONS.get_unknown_state())

    def test_encode(self):
        assert CODONS.encode("ATGAAA---").tolist() == \
            [14, 0, CODONS.get_gap_state()]
        assert CODONS.decode([14, CODONS.get_unknown_state()]) == "ATGNNN"
        with pytest.raises(AlphabetError):
            CODONS.encode("ATGA")
