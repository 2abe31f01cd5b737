#! /usr/bin/env python
# -*- coding: utf-8 -*-

##############################################################################
##  -- PhyPatterns --
##  Library for the Compression of Alignment Site Patterns
##
##  Copyright 2025 Mark Kessler, Luay Nakhleh.
##  All rights reserved.
##
##  See "LICENSE.txt" for terms and conditions of usage.
##
##  If you use this work or any portion thereof in published work,
##  please cite it as:
##
##     Mark Kessler, Luay Nakhleh. 2025.
##
##############################################################################

"""
Author : Mark Kessler
Last Edit : 10/19/26
First Included in Version : 1.0.0
Docs   - [x]
Tests  - [x]
Design - [x]

Stores the set of site patterns of an alignment, with a weight per pattern,
and (while patterns are only compressed by exact matching) the pattern index
of every site.
"""

from __future__ import annotations
import dataclasses
import warnings
import numpy as np
from .Alphabet import DataType
from .Compression import (CompressionType, should_strip,
                          compress_ambiguous_patterns, count_invariant_sites)
from .Config import SitePatternsConfig
from .PatternStore import PatternStore
from .PatternUtils import empirical_state_frequencies
from .SiteIndex import SiteIndexValid, SiteIndexRetired, STRIPPED


###########################
#### EXCEPTION CLASSES ####
###########################

class SitePatternsError(Exception):
    """
    Base class for errors raised while building or querying SitePatterns.
    """

    def __init__(self, message : str = "Site Patterns Error") -> None:
        self.message = message
        super().__init__(self.message)


class PatternArgumentError(SitePatternsError, ValueError):
    """
    Raised at construction for arguments that don't fit the alignment, such
    as a constant site count vector of the wrong length.
    """
    pass


class UnsupportedPatternOperation(SitePatternsError, NotImplementedError):
    """
    Raised when uncertain data accessors are used on patterns that were not
    built from uncertain data.
    """
    pass


class NoAlignmentError(SitePatternsError, RuntimeError):
    """
    Raised when alignment derived properties are queried on SitePatterns
    that have no alignment.
    """

    def __init__(self, message : str = "SitePatterns has no alignment") \
                 -> None:
        super().__init__(message)

#######################
#### SITE PATTERNS ####
#######################

class SitePatterns:
    """
    Compressed table of the distinct column patterns of an alignment.

    The table is built once, at construction:
        1) sites are read from the alignment (in the configured range, with
           the configured stride), optionally stripping uninteresting
           invariant sites, and merged by exact equality unless the
           compression type is UNCOMPRESSED;
        2) for AMBIGUOUS_UNIQUE / AMBIGUOUS_CONSTANT, the table is first
           seeded with one constant pattern per state and, once every site is
           in, ambiguously compatible patterns are merged. After this the
           site -> pattern index is retired;
        3) the weight of invariant patterns is counted.

    After construction the table is read only.

    The alignment ('site_list') may be any object with the methods
    site_count, state_count, pattern_length, get_site_pattern,
    get_pattern_weight, are_uncertain, get_uncertain_site_pattern,
    get_data_type, taxon_count, get_taxon_id and get_taxon_index (see MSA).
    """

    def __init__(self,
                 site_list = None,
                 config : SitePatternsConfig = None,
                 **settings) -> None:
        """
        Args:
            site_list (optional): the alignment to build patterns from. If
                                  None, the table is empty. Defaults to None.
            config (SitePatternsConfig, optional): construction settings.
                                                   Defaults to
                                                   SitePatternsConfig().
            **settings: individual SitePatternsConfig fields, overriding
                        those in 'config' (ie compression =
                        CompressionType.AMBIGUOUS_UNIQUE).
        Raises:
            PatternArgumentError: if the constant site count vector does not
                                  have one entry per state, or a taxon subset
                                  is requested from an alignment that can't
                                  be subset.
        Returns:
            N/A
        """
        if config is None:
            config = SitePatternsConfig(**settings)
        elif settings:
            config = dataclasses.replace(config, **settings)

        self.config : SitePatternsConfig = config
        self.compression : CompressionType = config.compression
        self.id : str = None

        self._source = site_list
        self._uncertain : bool = False
        self._invariant_count : int = 0
        self._store : PatternStore = PatternStore(0)
        self._site_index : SiteIndexValid | SiteIndexRetired = \
            SiteIndexValid(0)

        if site_list is None:
            self._weights : np.ndarray = self._store.weights()
            return

        if config.taxa is not None:
            if not hasattr(site_list, "subset"):
                raise PatternArgumentError("A taxon subset was requested \
                                            from an alignment that can not \
                                            be subset")
            self._source = site_list.subset(list(config.taxa))

        counts = config.constant_site_counts
        if counts is not None:
            if len(counts) != self._source.state_count():
                raise PatternArgumentError("Constant site count array length \
                                            doesn't equal the number of \
                                            states")
            if not self.compression.is_ambiguous():
                warnings.warn(f"Constant site counts are only used by the \
                                ambiguous compression types and will be \
                                ignored for {self.compression.name}.")

        if self._source.taxon_count() == 0:
            warnings.warn("None of the requested taxa are in the alignment; \
                           the pattern table is empty.")
        else:
            self._add_patterns(self._source)

        self._weights : np.ndarray = self._store.weights()
        self._weights.flags.writeable = False

    ###############################
    #### TABLE CONSTRUCTION #######
    ###############################

    def _add_patterns(self, site_list) -> None:
        """
        Fill the pattern table from the alignment.

        Args:
            site_list: the alignment
        Returns:
            N/A
        """
        config = self.config
        data_type : DataType = site_list.get_data_type()
        state_count = site_list.state_count()
        pattern_length = site_list.pattern_length()
        ambiguous = self.compression.is_ambiguous()

        sites = config.site_range(site_list.site_count())

        # worst case: every site is a new pattern, plus the constant block
        capacity = len(sites) + (state_count if ambiguous else 0)

        self._uncertain = site_list.are_uncertain()
        self._store = PatternStore(capacity, uncertain = self._uncertain)
        self._site_index = SiteIndexValid(len(sites))

        if ambiguous:
            counts = config.constant_site_counts
            for state in range(state_count):
                constant = np.full(pattern_length, state, dtype = np.int32)
                weight = counts[state] if counts is not None else 0
                index = self._store.append(constant, weight)
                if self._uncertain:
                    self._store.set_uncertain(index,
                                              self._indicator_matrix(constant,
                                                                     data_type))

        stripped = 0
        for site_number, site in enumerate(sites):
            pattern = np.asarray(site_list.get_site_pattern(site),
                                 dtype = np.int32)
            weight = site_list.get_pattern_weight(site)

            if self._uncertain:
                index = self._add_uncertain_pattern(
                    pattern, weight, site_list.get_uncertain_site_pattern(site),
                    data_type)
            elif config.strip and should_strip(pattern, data_type):
                stripped += 1
                continue
            else:
                index = self._add_pattern(pattern, weight)

            self._site_index.assign(site_number, index)

        if len(sites) > 0 and stripped == len(sites):
            warnings.warn("Every site was stripped as invariant; the pattern \
                           table holds no alignment sites.")

        if ambiguous:
            compress_ambiguous_patterns(self._store,
                                        data_type,
                                        pattern_length,
                                        self.compression is
                                        CompressionType.AMBIGUOUS_CONSTANT,
                                        config.ambiguity_threshold)
            # several exact patterns may now share a slot
            self._site_index = self._site_index.retire()

        self._invariant_count = count_invariant_sites(self._store)

    def _add_pattern(self, pattern : np.ndarray, weight : float) -> int:
        """
        Adds a pattern to the table with the given weight. Unless the table is
        uncompressed, a pattern identical to one already stored is merged into
        it: the stored array is swapped for the incoming one and the weights
        are summed.

        Args:
            pattern (np.ndarray): state codes
            weight (float): site weight
        Returns:
            int: the index of the pattern in the table
        """
        if self.compression.is_compressed():
            index = self._store.find(pattern)
            if index is not None:
                self._store.replace(index, pattern)
                self._store.accumulate_weight(index, weight)
                return index

        return self._store.append(pattern, weight)

    def _add_uncertain_pattern(self,
                               pattern : np.ndarray,
                               weight : float,
                               uncertainty : np.ndarray | None,
                               data_type : DataType) -> int:
        """
        Adds an uncertain pattern as a new entry. Uncertain patterns are never
        merged.

        Args:
            pattern (np.ndarray): state codes
            weight (float): site weight
            uncertainty (np.ndarray | None): (taxa x states) probabilities,
                                             or None to derive them from
                                             'pattern'
            data_type (DataType): alphabet of the codes
        Returns:
            int: the index of the new entry
        """
        index = self._store.append(pattern, weight)
        if uncertainty is None:
            uncertainty = self._indicator_matrix(pattern, data_type)
        self._store.set_uncertain(index, uncertainty)
        return index

    @staticmethod
    def _indicator_matrix(pattern : np.ndarray,
                          data_type : DataType) -> np.ndarray:
        """
        1.0 for each possible state of each taxon's code, 0 elsewhere.

        Args:
            pattern (np.ndarray): state codes
            data_type (DataType): alphabet of the codes
        Returns:
            np.ndarray: (taxa x states) matrix
        """
        matrix = np.zeros((len(pattern), data_type.state_count()),
                          dtype = np.double)
        for taxon, state in enumerate(pattern):
            matrix[taxon, data_type.get_states(int(state))] = 1.0
        return matrix

    ##########################
    #### PATTERN ACCESS ######
    ##########################

    def pattern_count(self) -> int:
        """
        Returns the number of patterns in the table.

        Returns:
            int: pattern count
        """
        return self._store.pattern_count()

    def pattern_length(self) -> int:
        """
        Gets the length of the patterns, which is the number of taxa.

        Returns:
            int: the length of patterns
        """
        return self.taxon_count()

    def get_pattern(self, pattern_index : int) -> np.ndarray:
        """
        Gets the pattern as an array of state codes (one per taxon).

        Args:
            pattern_index (int): index into the pattern table
        Returns:
            np.ndarray: read only array of state codes
        """
        return self._store.get(pattern_index)

    def get_pattern_state(self, taxon : int, pattern_index : int) -> int:
        return int(self._store.get(pattern_index)[taxon])

    def get_pattern_weight(self, pattern_index : int) -> float:
        return self._store.weight_of(pattern_index)

    def get_pattern_weights(self) -> np.ndarray:
        """
        Returns:
            np.ndarray: read only array with the weight of every pattern
        """
        return self._weights

    def get_invariant_count(self) -> int:
        """
        Returns:
            int: the summed weight of patterns in which every taxon has the
                 same state code
        """
        return self._invariant_count

    def get_state_frequencies(self) -> np.ndarray:
        """
        Returns:
            np.ndarray: the empirical frequency of each state
        """
        return empirical_state_frequencies(self)

    def are_unique(self) -> bool:
        return self.compression.is_compressed()

    def are_uncertain(self) -> bool:
        return self._uncertain

    ########################
    #### SITE ACCESS #######
    ########################

    def site_count(self) -> int:
        """
        Returns:
            int: the number of alignment sites that were visited
        """
        return self._site_index.site_count()

    def has_site_index(self) -> bool:
        """
        Returns:
            bool: False once ambiguity compression has retired the site index
        """
        return self._site_index.is_valid()

    def get_pattern_index(self, site : int) -> int:
        """
        Gets the pattern index of a site, or -1 if the site was stripped.

        Args:
            site (int): index among the visited sites
        Raises:
            SiteIndexRetiredError: after ambiguity compression
        Returns:
            int: the pattern index
        """
        return self._site_index.pattern_index(site)

    def get_site_pattern(self, site : int) -> np.ndarray | None:
        """
        Gets the pattern of a site.

        Args:
            site (int): index among the visited sites
        Raises:
            SiteIndexRetiredError: after ambiguity compression
        Returns:
            np.ndarray | None: the pattern, or None if the site was stripped
        """
        index = self._site_index.pattern_index(site)
        return self._store.get(index) if index != STRIPPED else None

    def get_state(self, taxon : int, site : int) -> int:
        """
        The state code at (taxon, site). Stripped sites read as gaps.

        Args:
            taxon (int): taxon index
            site (int): index among the visited sites
        Raises:
            SiteIndexRetiredError: after ambiguity compression
        Returns:
            int: a state code
        """
        index = self._site_index.pattern_index(site)
        if index == STRIPPED:
            return self.get_data_type().get_gap_state()
        return int(self._store.get(index)[taxon])

    #############################
    #### UNCERTAIN ACCESS #######
    #############################

    def get_uncertain_pattern(self, pattern_index : int) -> np.ndarray:
        """
        Args:
            pattern_index (int): index into the pattern table
        Raises:
            UnsupportedPatternOperation: if the patterns are not uncertain
        Returns:
            np.ndarray: (taxa x states) probability matrix
        """
        self._require_uncertain("get_uncertain_pattern")
        return self._store.get_uncertain(pattern_index)

    def get_uncertain_pattern_state(self, taxon : int,
                                    pattern_index : int) -> np.ndarray:
        self._require_uncertain("get_uncertain_pattern_state")
        return self._store.get_uncertain(pattern_index)[taxon]

    def get_uncertain_site_pattern(self, site : int) -> np.ndarray:
        self._require_uncertain("get_uncertain_site_pattern")
        return self._store.get_uncertain(self._site_index.pattern_index(site))

    def get_uncertain_state(self, taxon : int, site : int) -> np.ndarray:
        self._require_uncertain("get_uncertain_state")
        return self.get_uncertain_site_pattern(site)[taxon]

    def _require_uncertain(self, operation : str) -> None:
        if not self._uncertain:
            raise UnsupportedPatternOperation(f"{operation} is not available: \
                                                these patterns were not built \
                                                from uncertain data")

    ###########################
    #### ALIGNMENT ACCESS #####
    ###########################

    def get_site_list(self):
        """
        Returns:
            the alignment the patterns were built from (after any taxon
            subset), or None
        """
        return self._source

    def get_data_type(self) -> DataType:
        return self._require_source().get_data_type()

    def state_count(self) -> int:
        return self._require_source().state_count()

    def taxon_count(self) -> int:
        return self._require_source().taxon_count()

    def get_taxon_id(self, taxon : int) -> str:
        return self._require_source().get_taxon_id(taxon)

    def get_taxon_index(self, name : str) -> int:
        return self._require_source().get_taxon_index(name)

    def get_taxa(self) -> list[str]:
        return [self.get_taxon_id(taxon) for taxon in range(self.taxon_count())]

    def _require_source(self):
        if self._source is None:
            raise NoAlignmentError()
        return self._source

    #####################
    #### IDENTIFIER #####
    #####################

    def get_id(self) -> str:
        return self.id

    def set_id(self, id : str) -> None:
        self.id = id

    def __len__(self) -> int:
        return self.pattern_count()

    def __repr__(self) -> str:
        return f"SitePatterns(id={self.id!r}, \
compression={self.compression.name}, patterns={self.pattern_count()}, \
invariant={self._invariant_count})"
