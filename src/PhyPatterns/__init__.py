#! /usr/bin/env python
# -*- coding: utf-8 -*-

##############################################################################
##  -- PhyPatterns --
##  Library for the Compression of Alignment Site Patterns
##
##  Copyright 2025 Mark Kessler, Luay Nakhleh.
##  All rights reserved.
##############################################################################

"""
PhyPatterns - Site Pattern Compression for Phylogenetic Likelihoods

Reduces a multiple sequence alignment to its distinct column patterns, with
weights, for likelihood engines whose cost scales with the number of unique
patterns.
"""

# Alphabets and alignments
from .Alphabet import (DataType, TabulatedDataType, Nucleotides, AminoAcids,
                       Codons, CODONS, STOP_CODONS,
                       AlphabetError, snp_data_type, NUCLEOTIDES, AMINO_ACIDS)
from .MSA import MSA, SeqRecord, MSAError

# Pattern table
from .PatternStore import PatternStore, PatternStoreError
from .SiteIndex import (SiteIndexValid, SiteIndexRetired, SiteIndexError,
                        SiteIndexRetiredError, STRIPPED)
from .Compression import (CompressionType, compress_ambiguous_patterns,
                          count_invariant_sites, minimum_unambiguous,
                          DEFAULT_AMBIGUITY_THRESHOLD, DEFAULT_COMPRESSION_TYPE)
from .Config import SitePatternsConfig, ConfigError
from .SitePatterns import (SitePatterns, SitePatternsError,
                           PatternArgumentError, UnsupportedPatternOperation,
                           NoAlignmentError)
from .PatternUtils import empirical_state_frequencies, equal_state_frequencies

__version__ = "1.0.0"
__author__ = "Mark Kessler"
