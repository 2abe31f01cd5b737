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

Mapping from alignment sites to pattern table indices.

While patterns are only compressed by exact matching, each site belongs to
exactly one pattern (or was stripped). Once ambiguous patterns have been
merged, several exact patterns share a slot and the mapping is retired:
SiteIndexRetired has the same surface, but every lookup fails.
"""

from __future__ import annotations
import numpy as np


#########################
#### EXCEPTION CLASS ####
#########################

class SiteIndexError(Exception):
    """
    Raised when a site outside of the index is queried.
    """

    def __init__(self, message : str = "Site Index Error") -> None:
        self.message = message
        super().__init__(self.message)


class SiteIndexRetiredError(SiteIndexError):
    """
    Raised when the site index is queried after ambiguity compression.
    """

    def __init__(self, message : str = "Site index unavailable after \
                                        ambiguity compression") -> None:
        super().__init__(message)

####################
#### SITE INDEX ####
####################

# pattern index of a site that was stripped
STRIPPED : int = -1


class SiteIndexValid:
    """
    Site -> pattern index mapping.
    """

    def __init__(self, site_count : int) -> None:
        """
        Args:
            site_count (int): number of sites, all initially stripped
        Returns:
            N/A
        """
        self._indices : np.ndarray = np.full(site_count, STRIPPED,
                                             dtype = np.int64)

    def is_valid(self) -> bool:
        return True

    def site_count(self) -> int:
        return self._indices.size

    def assign(self, site : int, pattern_index : int) -> None:
        self._check(site)
        self._indices[site] = pattern_index

    def pattern_index(self, site : int) -> int:
        """
        The pattern index of 'site', or STRIPPED.

        Args:
            site (int): site position
        Raises:
            SiteIndexError: if the site is out of range
        Returns:
            int: the pattern table index
        """
        self._check(site)
        return int(self._indices[site])

    def is_stripped(self, site : int) -> bool:
        return self.pattern_index(site) == STRIPPED

    def indices(self) -> np.ndarray:
        return self._indices.copy()

    def retire(self) -> SiteIndexRetired:
        return SiteIndexRetired(self.site_count())

    def _check(self, site : int) -> None:
        if not 0 <= site < self._indices.size:
            raise SiteIndexError(f"Site {site} is out of range \
                                   (0 - {self._indices.size - 1})")


class SiteIndexRetired:
    """
    Stand in for a site index that is no longer meaningful.
    """

    def __init__(self, site_count : int) -> None:
        self._site_count : int = site_count

    def is_valid(self) -> bool:
        return False

    def site_count(self) -> int:
        return self._site_count

    def assign(self, site : int, pattern_index : int) -> None:
        raise SiteIndexRetiredError()

    def pattern_index(self, site : int) -> int:
        raise SiteIndexRetiredError()

    def is_stripped(self, site : int) -> bool:
        raise SiteIndexRetiredError()

    def indices(self) -> np.ndarray:
        raise SiteIndexRetiredError()

    def retire(self) -> SiteIndexRetired:
        return self
