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
"""

from __future__ import annotations
import numpy as np


#########################
#### EXCEPTION CLASS ####
#########################

class PatternStoreError(Exception):
    """
    Raised on access to a slot that is out of range or no longer live, and
    when appending past the store's capacity.
    """

    def __init__(self, message : str = "Pattern Store Error") -> None:
        self.message = message
        super().__init__(self.message)

##########################
#### HELPER FUNCTIONS ####
##########################

def _freeze(pattern : np.ndarray | list[int]) -> np.ndarray:
    """
    Copy a pattern into a read only integer array, so that a stored pattern
    can be swapped out but never edited in place.

    Args:
        pattern (np.ndarray | list[int]): state codes
    Returns:
        np.ndarray: read only copy
    """
    frozen = np.array(pattern, dtype = np.int32, copy = True)
    frozen.flags.writeable = False
    return frozen

#######################
#### PATTERN STORE ####
#######################

class PatternStore:
    """
    Fixed capacity table of (pattern, weight) slots. Slots [0, pattern_count())
    are in use; each of them is either live or dead (tombstoned). Dead slots
    keep their position until compact() squeezes them out.

    An optional parallel table holds one (taxa x states) probability matrix
    per slot for uncertain data.

    find() assumes the live patterns are pairwise distinct, as they are in every
    compressed table. With duplicates (an uncompressed table) it reports the
    first one appended, until that slot is replaced or tombstoned.
    """

    def __init__(self, capacity : int, uncertain : bool = False) -> None:
        """
        Args:
            capacity (int): maximum number of slots
            uncertain (bool, optional): allocate the uncertainty table.
                                        Defaults to False.
        Returns:
            N/A
        """
        if capacity < 0:
            raise PatternStoreError("Capacity can not be negative")

        self._capacity : int = capacity
        self._count : int = 0
        self._patterns : list[np.ndarray] = [None] * capacity
        self._weights : np.ndarray = np.zeros(capacity, dtype = np.double)
        self._live : np.ndarray = np.zeros(capacity, dtype = bool)
        self._uncertain : list[np.ndarray] = [None] * capacity \
                                             if uncertain else None

        # pattern bytes -> first slot holding that exact pattern
        self._lookup : dict[bytes, int] = {}

    def capacity(self) -> int:
        return self._capacity

    def pattern_count(self) -> int:
        """
        Number of slots in use, dead ones included until the next compact().

        Returns:
            int: the slot count
        """
        return self._count

    def live_count(self) -> int:
        return int(np.count_nonzero(self._live[:self._count]))

    def append(self, pattern : np.ndarray | list[int], weight : float) -> int:
        """
        Add a new slot at the end of the table.

        Args:
            pattern (np.ndarray | list[int]): state codes, one per taxon
            weight (float): the weight of the new slot
        Raises:
            PatternStoreError: if the store is full
        Returns:
            int: index of the new slot
        """
        if self._count >= self._capacity:
            raise PatternStoreError(f"Pattern store is full \
                                      ({self._capacity} slots)")

        index = self._count
        frozen = _freeze(pattern)
        self._patterns[index] = frozen
        self._weights[index] = weight
        self._live[index] = True
        self._lookup.setdefault(frozen.tobytes(), index)
        self._count += 1
        return index

    def replace(self, index : int, pattern : np.ndarray | list[int]) -> None:
        """
        Swap the pattern stored at 'index' for another one. The weight is
        left alone.

        Args:
            index (int): a live slot
            pattern (np.ndarray | list[int]): the new pattern
        Returns:
            N/A
        """
        self._check_live(index)
        old_key = self._patterns[index].tobytes()
        frozen = _freeze(pattern)
        self._patterns[index] = frozen

        new_key = frozen.tobytes()
        if new_key == old_key:
            return
        if self._lookup.get(old_key) == index:
            del self._lookup[old_key]
        holder = self._lookup.get(new_key)
        if holder is None or holder > index:
            self._lookup[new_key] = index

    def accumulate_weight(self, index : int, delta : float) -> None:
        self._check_live(index)
        self._weights[index] += delta

    def get(self, index : int) -> np.ndarray:
        """
        The pattern at 'index'.

        Args:
            index (int): a live slot
        Raises:
            PatternStoreError: if the slot is out of range or dead
        Returns:
            np.ndarray: read only pattern array
        """
        self._check_live(index)
        return self._patterns[index]

    def weight_of(self, index : int) -> float:
        self._check_live(index)
        return float(self._weights[index])

    def weights(self) -> np.ndarray:
        """
        Copy of the weights of all live slots, in slot order.

        Returns:
            np.ndarray: weights
        """
        in_use = slice(0, self._count)
        return self._weights[in_use][self._live[in_use]].copy()

    def is_live(self, index : int) -> bool:
        return 0 <= index < self._count and bool(self._live[index])

    def find(self, pattern : np.ndarray | list[int]) -> int | None:
        """
        Index of the first live slot holding exactly 'pattern'.

        Args:
            pattern (np.ndarray | list[int]): state codes
        Returns:
            int | None: the slot index, or None if no slot matches
        """
        key = np.asarray(pattern, dtype = np.int32).tobytes()
        return self._lookup.get(key)

    def tombstone(self, index : int) -> None:
        """
        Mark a slot dead. Other slots keep their indices.

        Args:
            index (int): a live slot
        Returns:
            N/A
        """
        self._check_live(index)
        self._live[index] = False
        self._weights[index] = 0.0
        key = self._patterns[index].tobytes()
        if self._lookup.get(key) == index:
            del self._lookup[key]

    def compact(self) -> int:
        """
        Remove all dead slots, shifting the live ones left while preserving
        their relative order.

        Returns:
            int: the number of slots removed
        """
        write = 0
        for read in range(self._count):
            if not self._live[read]:
                continue
            if read != write:
                self._patterns[write] = self._patterns[read]
                self._weights[write] = self._weights[read]
                self._live[write] = True
                if self._uncertain is not None:
                    self._uncertain[write] = self._uncertain[read]
            write += 1

        removed = self._count - write
        for index in range(write, self._count):
            self._patterns[index] = None
            self._weights[index] = 0.0
            self._live[index] = False
            if self._uncertain is not None:
                self._uncertain[index] = None
        self._count = write

        self._lookup = {}
        for index in range(self._count):
            self._lookup.setdefault(self._patterns[index].tobytes(), index)

        return removed

    def has_uncertainty(self) -> bool:
        return self._uncertain is not None

    def set_uncertain(self, index : int, matrix : np.ndarray) -> None:
        """
        Attach a (taxa x states) probability matrix to a slot.

        Args:
            index (int): a live slot
            matrix (np.ndarray): probability matrix
        Raises:
            PatternStoreError: if this store has no uncertainty table
        Returns:
            N/A
        """
        self._check_live(index)
        if self._uncertain is None:
            raise PatternStoreError("This pattern store holds no uncertainty \
                                     data")
        self._uncertain[index] = np.asarray(matrix, dtype = np.double)

    def get_uncertain(self, index : int) -> np.ndarray:
        self._check_live(index)
        if self._uncertain is None:
            raise PatternStoreError("This pattern store holds no uncertainty \
                                     data")
        return self._uncertain[index]

    def __len__(self) -> int:
        return self._count

    def __iter__(self):
        for index in range(self._count):
            if self._live[index]:
                yield self._patterns[index], float(self._weights[index])

    def _check_live(self, index : int) -> None:
        if not 0 <= index < self._count:
            raise PatternStoreError(f"Pattern index {index} is out of range \
                                      (0 - {self._count - 1})")
        if not self._live[index]:
            raise PatternStoreError(f"Pattern {index} has been removed")
