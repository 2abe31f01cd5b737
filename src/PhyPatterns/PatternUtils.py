"""
General helpers that operate on anything with the pattern list surface
(pattern_count, get_pattern, get_pattern_weight, get_data_type), ie
SitePatterns.

Author: Mark Kessler
Date Last Edited: 10/19/26
Ready for Release:
    Docs    - [ X ]
    Design  - [ X ]
    Testing - [ X ]
"""

from __future__ import annotations
import numpy as np


# convergence settings for the empirical frequency iteration
FREQUENCY_TOLERANCE : float = 1e-8
MAX_FREQUENCY_ROUNDS : int = 1000


def equal_state_frequencies(patterns) -> np.ndarray:
    """
    Uniform frequencies over the canonical states of the pattern list's data
    type.

    Args:
        patterns: a pattern list
    Returns:
        np.ndarray: array of 1 / state_count
    """
    state_count = patterns.get_data_type().state_count()
    return np.full(state_count, 1.0 / state_count, dtype = np.double)

def empirical_state_frequencies(patterns) -> np.ndarray:
    """
    Weighted frequency of each canonical state over all patterns and taxa.

    An ambiguous code spreads its weight over the states it may stand for, in
    proportion to the current frequency estimate, so the estimate is refined
    until it stops changing (L1 difference below FREQUENCY_TOLERANCE) or
    MAX_FREQUENCY_ROUNDS rounds have run. Starts from equal frequencies.

    Args:
        patterns: a pattern list
    Returns:
        np.ndarray: state frequencies summing to 1
    """
    data_type = patterns.get_data_type()
    freqs = equal_state_frequencies(patterns)

    # tally how often each code occurs (weighted), then work per code
    code_weights = np.zeros(data_type.ambiguous_state_count(), dtype = np.double)
    for index in range(patterns.pattern_count()):
        weight = patterns.get_pattern_weight(index)
        for state in patterns.get_pattern(index):
            code_weights[int(state)] += weight

    if code_weights.sum() == 0:
        return freqs

    state_sets = np.array([data_type.get_state_set(code)
                           for code in range(data_type.ambiguous_state_count())],
                          dtype = np.double)

    for _ in range(MAX_FREQUENCY_ROUNDS):
        # share of each code's weight that goes to each state
        shares = state_sets * freqs
        totals = shares.sum(axis = 1, keepdims = True)
        totals[totals == 0] = 1.0
        tally = (shares / totals * code_weights[:, None]).sum(axis = 0)

        new_freqs = tally / tally.sum()
        difference = np.abs(new_freqs - freqs).sum()
        freqs = new_freqs
        if difference <= FREQUENCY_TOLERANCE:
            break

    return freqs

def pattern_to_string(pattern : np.ndarray, data_type) -> str:
    """
    Render a pattern with the characters of its data type.

    Args:
        pattern (np.ndarray): state codes
        data_type (DataType): the alphabet of the codes
    Returns:
        str: one character per taxon
    """
    return "".join(data_type.get_char(int(state)) for state in pattern)
