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

Construction settings for SitePatterns, and the translation from a plain
mapping (as produced by an XML/JSON/YAML front end) into those settings.
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Any
from .Compression import (CompressionType, DEFAULT_COMPRESSION_TYPE,
                          DEFAULT_AMBIGUITY_THRESHOLD)


#########################
#### EXCEPTION CLASS ####
#########################

class ConfigError(Exception):
    """
    Raised for settings that can never be valid, independent of the alignment
    they are applied to.
    """

    def __init__(self, message : str = "Site pattern configuration error") \
                 -> None:
        self.message = message
        super().__init__(self.message)

###################
#### CONSTANTS ####
###################

# mapping key -> SitePatternsConfig field
_KEYS : dict[str, str] = {"taxa" : "taxa",
                          "from" : "from_site",
                          "to" : "to_site",
                          "every" : "every",
                          "strip" : "strip",
                          "compression" : "compression",
                          "ambiguityThreshold" : "ambiguity_threshold",
                          "constantPatterns" : "constant_site_counts"}

################
#### CONFIG ####
################

@dataclass(frozen = True)
class SitePatternsConfig:
    """
    Settings for building a SitePatterns table.

    from_site / to_site are zero indexed and inclusive; -1 means the first /
    last site. 'every' is the stride. constant_site_counts, if given, holds
    one count per state, used as the weight of the seeded constant patterns
    in the ambiguous compression modes.
    """

    taxa : tuple[str, ...] | None = None
    from_site : int = -1
    to_site : int = -1
    every : int = 1
    strip : bool = True
    compression : CompressionType = DEFAULT_COMPRESSION_TYPE
    ambiguity_threshold : float = DEFAULT_AMBIGUITY_THRESHOLD
    constant_site_counts : tuple[int, ...] | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.compression, CompressionType):
            object.__setattr__(self, "compression",
                               parse_compression(self.compression))

        if not 0.0 <= self.ambiguity_threshold < 1.0:
            raise ConfigError(f"Ambiguity threshold must be in [0, 1), got \
                                {self.ambiguity_threshold}")

        if self.taxa is not None:
            object.__setattr__(self, "taxa", tuple(self.taxa))

        if self.constant_site_counts is not None:
            object.__setattr__(self, "constant_site_counts",
                               tuple(self.constant_site_counts))

    def site_range(self, site_count : int) -> range:
        """
        The sites visited in an alignment of 'site_count' sites. A to_site
        past the last site stops at the last site.

        Args:
            site_count (int): number of sites in the source
        Returns:
            range: the visited site indices
        """
        start = 0 if self.from_site <= -1 else self.from_site
        stop = site_count - 1 if self.to_site <= -1 \
               else min(self.to_site, site_count - 1)
        step = 1 if self.every <= 0 else self.every
        return range(start, stop + 1, step)

    @classmethod
    def from_dict(cls, mapping : dict[str, Any]) -> SitePatternsConfig:
        """
        Build settings from a mapping of front end attribute names
        ("taxa", "from", "to", "every", "strip", "compression",
        "ambiguityThreshold", "constantPatterns"). The field names of this
        class are accepted as well.

        Args:
            mapping (dict[str, Any]): attribute name -> value
        Raises:
            ConfigError: on an unknown key or invalid value
        Returns:
            SitePatternsConfig: the settings
        """
        field_names = {field.name for field in fields(cls)}
        kwargs : dict[str, Any] = {}
        for key, value in mapping.items():
            if key in _KEYS:
                kwargs[_KEYS[key]] = value
            elif key in field_names:
                kwargs[key] = value
            else:
                raise ConfigError(f"Unknown site pattern setting '{key}'. \
                                    Available: {list(_KEYS.keys())}")
        return cls(**kwargs)


def parse_compression(value : str | CompressionType) -> CompressionType:
    """
    Accept a CompressionType, its name or its value, in any case.

    Args:
        value (str | CompressionType): ie "AMBIGUOUS_CONSTANT" or
                                       "unique_only"
    Raises:
        ConfigError: if 'value' names no compression type
    Returns:
        CompressionType: the compression type
    """
    if isinstance(value, CompressionType):
        return value

    key = str(value).strip().upper()
    for member in CompressionType:
        if key == member.name:
            return member
    raise ConfigError(f"Unknown compression type '{value}'. Available: \
                        {[member.name for member in CompressionType]}")
