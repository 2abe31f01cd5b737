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

Site pattern predicates, the ambiguity aware second compression pass, and
invariant site counting.

A pattern is an integer array of state codes, one per taxon. Two patterns are
"unambiguously compatible" if at no taxon are their codes unambiguously
different, ie an ambiguity code acts as a wildcard for any state it may stand
for.
"""

from __future__ import annotations
from enum import Enum
import numpy as np
from .Alphabet import DataType
from .PatternStore import PatternStore


###################
#### CONSTANTS ####
###################

DEFAULT_AMBIGUITY_THRESHOLD : float = 0.25

# no pattern ever needs more unambiguous states than this to be merged
MINIMUM_UNAMBIGUOUS : int = 2


class CompressionType(Enum):
    """
    How site patterns are compressed.
    """

    # no compression - all patterns in order
    UNCOMPRESSED = "uncompressed"
    # only unique patterns stored, with weights
    UNIQUE_ONLY = "unique_only"
    # unique patterns and ambiguous matches stored with weights
    AMBIGUOUS_UNIQUE = "ambiguous_unique"
    # unique patterns, ambiguous matches only merged into constant patterns
    AMBIGUOUS_CONSTANT = "ambiguous_constant"

    def is_compressed(self) -> bool:
        return self is not CompressionType.UNCOMPRESSED

    def is_ambiguous(self) -> bool:
        return self in (CompressionType.AMBIGUOUS_UNIQUE,
                        CompressionType.AMBIGUOUS_CONSTANT)


DEFAULT_COMPRESSION_TYPE : CompressionType = CompressionType.UNIQUE_ONLY

############################
#### PATTERN PREDICATES ####
############################

def is_gapped(pattern : np.ndarray, data_type : DataType) -> bool:
    """
    Args:
        pattern (np.ndarray): state codes
        data_type (DataType): the alphabet of the codes
    Returns:
        bool: True if the pattern contains a gap state
    """
    return any(data_type.is_gap_state(int(state)) for state in pattern)

def is_ambiguous(pattern : np.ndarray, data_type : DataType) -> bool:
    """
    Args:
        pattern (np.ndarray): state codes
        data_type (DataType): the alphabet of the codes
    Returns:
        bool: True if the pattern contains an ambiguous state
    """
    return any(data_type.is_ambiguous_state(int(state)) for state in pattern)

def is_unknown(pattern : np.ndarray, data_type : DataType) -> bool:
    """
    Args:
        pattern (np.ndarray): state codes
        data_type (DataType): the alphabet of the codes
    Returns:
        bool: True if the pattern contains an unknown state
    """
    return any(data_type.is_unknown_state(int(state)) for state in pattern)

def is_invariant(pattern : np.ndarray,
                 data_type : DataType,
                 ignore_ambiguity : bool = False) -> bool:
    """
    Whether every taxon has the same state.

    With 'ignore_ambiguity', a code only breaks invariance if it is
    unambiguously different from the first taxon's code. Without it, codes
    must be identical.

    Args:
        pattern (np.ndarray): state codes
        data_type (DataType): the alphabet of the codes
        ignore_ambiguity (bool, optional): Defaults to False.
    Returns:
        bool: True if the pattern is invariant
    """
    if len(pattern) == 0:
        return True

    first = int(pattern[0])
    for state in pattern[1:]:
        if ignore_ambiguity:
            if data_type.are_unambiguously_different(first, int(state)):
                return False
        elif first != state:
            return False
    return True

def canonical_state_count(pattern : np.ndarray, data_type : DataType) -> int:
    """
    The number of canonical (non-ambiguous) states in the pattern.

    Args:
        pattern (np.ndarray): state codes
        data_type (DataType): the alphabet of the codes
    Returns:
        int: count of codes below the state count
    """
    return int(np.count_nonzero(np.asarray(pattern) < data_type.state_count()))

def compare_patterns(pattern1 : np.ndarray,
                     pattern2 : np.ndarray,
                     data_type : DataType,
                     allow_ambiguities : bool = False) -> bool:
    """
    Compares two patterns.

    Args:
        pattern1 (np.ndarray): state codes
        pattern2 (np.ndarray): state codes
        data_type (DataType): the alphabet of the codes
        allow_ambiguities (bool, optional): if True, the patterns only need
                                            to be unambiguously compatible.
                                            Defaults to False (identical).
    Returns:
        bool: True if the patterns match
    """
    if not allow_ambiguities:
        return bool(np.array_equal(pattern1, pattern2))

    for state1, state2 in zip(pattern1, pattern2):
        if data_type.are_unambiguously_different(int(state1), int(state2)):
            return False
    return True

def should_strip(pattern : np.ndarray, data_type : DataType) -> bool:
    """
    A site is stripped when it is invariant for an uninteresting reason: every
    taxon has the same canonical state. Sites whose invariance comes from a
    gap, ambiguous or unknown code are kept.

    Args:
        pattern (np.ndarray): state codes
        data_type (DataType): the alphabet of the codes
    Returns:
        bool: True if the site should be dropped
    """
    return is_invariant(pattern, data_type, ignore_ambiguity = True) \
        and not (is_gapped(pattern, data_type)
                 or is_ambiguous(pattern, data_type)
                 or is_unknown(pattern, data_type))

def minimum_unambiguous(ambiguity_threshold : float,
                        pattern_length : int) -> int:
    """
    The number of canonical states a pattern needs before it may be merged
    with an ambiguously compatible pattern.

    Args:
        ambiguity_threshold (float): fraction of taxa allowed to be ambiguous,
                                     in [0, 1)
        pattern_length (int): number of taxa
    Returns:
        int: min(2, floor((1 - threshold) * pattern_length))
    """
    return min(int((1.0 - ambiguity_threshold) * pattern_length),
               MINIMUM_UNAMBIGUOUS)

##############################
#### COMPRESSION PASSES ######
##############################

def compress_ambiguous_patterns(store : PatternStore,
                                data_type : DataType,
                                pattern_length : int,
                                constant_only : bool,
                                ambiguity_threshold : float
                                = DEFAULT_AMBIGUITY_THRESHOLD) -> int:
    """
    Merge patterns that are unambiguously compatible with an earlier pattern.

    The first data_type.state_count() slots of 'store' must hold the constant
    patterns (one per state). Every later pattern i with enough canonical
    states is compared against the live patterns j < i (or only against the
    constant block if 'constant_only'), in index order; the first compatible
    j absorbs i's weight and i is removed. Outside of constant only mode, if
    i has more canonical states than j, i's pattern becomes j's pattern.

    The store is compacted afterwards, keeping surviving patterns in order.

    Args:
        store (PatternStore): the pattern table, modified in place
        data_type (DataType): the alphabet of the patterns
        pattern_length (int): number of taxa
        constant_only (bool): only merge into the constant patterns
        ambiguity_threshold (float, optional): fraction of taxa allowed to be
                                               ambiguous. Defaults to 0.25.
    Returns:
        int: the number of patterns merged away
    """
    state_count = data_type.state_count()
    minimum = minimum_unambiguous(ambiguity_threshold, pattern_length)
    merged = 0

    for i in range(state_count, store.pattern_count()):
        if not store.is_live(i):
            continue

        candidate = store.get(i)
        canonical = canonical_state_count(candidate, data_type)
        if canonical < minimum:
            continue

        bound = state_count if constant_only else i
        for j in range(bound):
            if not store.is_live(j):
                continue

            target = store.get(j)
            if compare_patterns(candidate, target, data_type,
                                allow_ambiguities = True):
                if not constant_only and \
                        canonical > canonical_state_count(target, data_type):
                    # the less ambiguous pattern represents the class
                    store.replace(j, candidate)
                store.accumulate_weight(j, store.weight_of(i))
                store.tombstone(i)
                merged += 1
                break

    store.compact()
    return merged

def count_invariant_sites(store : PatternStore) -> int:
    """
    Sum of the (truncated) weights of every live pattern in which all taxa
    have the identical state code. Ambiguity is not ignored here.

    Args:
        store (PatternStore): the pattern table
    Returns:
        int: the invariant site count
    """
    count = 0
    for pattern, weight in store:
        if len(pattern) == 0 or np.all(pattern == pattern[0]):
            count += int(weight)
    return count
