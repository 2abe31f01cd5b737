"""
Tests for reading alignments into MSA objects.

Run with: pytest src/PhyPatterns/test/test_msa.py -v
"""

import numpy as np
import pytest
from PhyPatterns.Alphabet import NUCLEOTIDES, AMINO_ACIDS, CODONS
from PhyPatterns.MSA import MSA, MSAError, SeqRecord


NEXUS_TEXT = """#NEXUS
BEGIN DATA;
    DIMENSIONS NTAX=3 NCHAR=4;
    FORMAT DATATYPE=DNA MISSING=? GAP=-;
    MATRIX
        t1 ACGT
        t2 ACGA
        t3 AC-T
    ;
END;
"""

FASTA_TEXT = """>t1
ACGT
>t2
ACGA
>t3
AC-T
"""


def simple_msa(**kwargs) -> MSA:
    records = [SeqRecord("ACGT", "t1"),
               SeqRecord("ACGA", "t2"),
               SeqRecord("AC-T", "t3")]
    return MSA(records = records, **kwargs)


class TestMSAConstruction:

    def test_from_records(self):
        msa = simple_msa()
        assert msa.site_count() == 4
        assert msa.taxon_count() == 3
        assert msa.pattern_length() == 3
        assert msa.state_count() == 4
        assert msa.get_data_type() is NUCLEOTIDES
        assert msa.get_site_pattern(2).tolist() == [2, 2, 15]
        assert msa.get_pattern_weight(0) == 1.0
        assert not msa.are_uncertain()

    def test_from_nexus_file(self, tmp_path):
        path = tmp_path / "aln.nex"
        path.write_text(NEXUS_TEXT)
        msa = MSA(str(path))
        assert msa.taxon_count() == 3
        assert msa.get_taxon_id(0) == "t1"
        assert msa.get_site_pattern(3).tolist() == [3, 0, 3]

    def test_from_fasta_file(self, tmp_path):
        path = tmp_path / "aln.fasta"
        path.write_text(FASTA_TEXT)
        msa = MSA(str(path), file_format = "fasta")
        assert msa.site_count() == 4
        assert msa.get_taxon_index("t3") == 2
        assert msa.get_site_pattern(2).tolist() == [2, 2, 15]

    def test_needs_input(self):
        with pytest.raises(MSAError):
            MSA()

    def test_empty(self):
        with pytest.raises(MSAError):
            MSA(records = [])

    def test_ragged(self):
        with pytest.raises(MSAError):
            MSA(records = [SeqRecord("ACGT", "t1"), SeqRecord("ACG", "t2")])

    def test_strict_characters(self):
        with pytest.raises(MSAError):
            MSA(records = [SeqRecord("ACGZ", "t1")])

    def test_lenient_characters(self):
        with pytest.warns(UserWarning):
            msa = MSA(records = [SeqRecord("ACGZ", "t1")], strict = False)
        assert msa.get_site_pattern(3).tolist() == \
            [NUCLEOTIDES.get_unknown_state()]

    def test_protein(self):
        msa = MSA(records = [SeqRecord("MKV", "p1"), SeqRecord("MKX", "p2")],
                  data_type = AMINO_ACIDS)
        assert msa.state_count() == 20
        assert msa.get_site_pattern(2)[1] == AMINO_ACIDS.get_unknown_state()

    def test_site_weights(self):
        msa = simple_msa(site_weights = [1.0, 2.0, 0.5, 3.0])
        assert msa.get_pattern_weight(1) == 2.0
        with pytest.raises(MSAError):
            simple_msa(site_weights = [1.0, 2.0])


class TestMSAQueries:

    def test_site_pattern_is_a_copy(self):
        msa = simple_msa()
        column = msa.get_site_pattern(0)
        column[0] = 3
        assert msa.get_site_pattern(0)[0] == 0

    def test_site_out_of_range(self):
        with pytest.raises(MSAError):
            simple_msa().get_site_pattern(4)

    def test_taxon_lookup(self):
        msa = simple_msa()
        assert msa.get_taxon_index("t2") == 1
        assert msa.seq_by_name("t2").get_seq() == "ACGA"
        with pytest.raises(MSAError):
            msa.get_taxon_index("t9")

    def test_subset(self):
        msa = simple_msa(site_weights = [1.0, 2.0, 0.5, 3.0])
        sub = msa.subset(["t3", "t1", "t9"])
        assert sub.taxon_count() == 2
        assert [sub.get_taxon_id(i) for i in range(2)] == ["t1", "t3"]
        assert sub.get_site_pattern(2).tolist() == [2, 15]
        assert sub.get_pattern_weight(3) == 3.0

    def test_subset_without_matches(self):
        sub = simple_msa().subset(["nobody"])
        assert sub.taxon_count() == 0
        assert sub.site_count() == 4
        assert sub.get_site_pattern(1).tolist() == []

    def test_subset_leaves_original_alone(self):
        msa = simple_msa()
        msa.subset(["t2"])
        assert msa.taxon_count() == 3
        assert msa.get_site_pattern(3).tolist() == [3, 0, 3]


class TestMSAUncertainty:

    def test_declared_uncertain_without_matrices(self):
        msa = simple_msa(uncertain = True)
        assert msa.are_uncertain()
        assert msa.get_uncertain_site_pattern(0) is None

    def test_uncertainty_matrix(self):
        probs = np.full((2, 4), 0.25)
        msa = MSA(records = [SeqRecord("AC", "t1", uncertainty = probs),
                             SeqRecord("RN", "t2")])
        assert msa.are_uncertain()

        matrix = msa.get_uncertain_site_pattern(0)
        assert matrix.shape == (2, 4)
        np.testing.assert_allclose(matrix[0], [0.25] * 4)
        # the purine row comes from the code's possible states
        np.testing.assert_allclose(matrix[1], [1.0, 0.0, 1.0, 0.0])

    def test_uncertainty_shape(self):
        with pytest.raises(MSAError):
            MSA(records = [SeqRecord("AC", "t1",
                                     uncertainty = np.ones((3, 4)))])


class TestCodonMSA:

    def test_three_characters_per_site(self):
        msa = MSA(records = [SeqRecord("ATGAAA", "t1"),
                             SeqRecord("ATGNNN", "t2")],
                  data_type = CODONS)
        assert msa.site_count() == 2
        assert msa.state_count() == 61
        assert msa.get_site_pattern(0).tolist() == [14, 14]
        assert msa.get_site_pattern(1).tolist() == \
            [0, CODONS.get_unknown_state()]

    def test_partial_codon(self):
        with pytest.raises(MSAError):
            MSA(records = [SeqRecord("ATGA", "t1")], data_type = CODONS)

    def test_stop_codon(self):
        with pytest.raises(MSAError):
            MSA(records = [SeqRecord("TAA", "t1")], data_type = CODONS)
        with pytest.warns(UserWarning):
            msa = MSA(records = [SeqRecord("TAA", "t1")], data_type = CODONS,
                      strict = False)
        assert msa.get_site_pattern(0).tolist() == [CODONS.get_unknown_state()]
