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
Last Stable Edit : 10/19/26
First Included in Version : 1.0.0
Approved for Release: Yes.
"""

from __future__ import annotations
import copy
import warnings
import numpy as np
from Bio import AlignIO
from Bio.Nexus.Nexus import NexusError
from nexus import NexusReader
from .Alphabet import DataType, AlphabetError, NUCLEOTIDES


#########################
#### EXCEPTION CLASS ####
#########################

class MSAError(Exception):
    """
    This exception is raised when an alignment can not be read, is ragged, or
    is queried for a taxon or site that it does not have.
    """

    def __init__(self, message : str = "MSA Error") -> None:
        self.message = message
        super().__init__(self.message)

##############################
#### SEQUENCE RECORD, MSA ####
##############################

class SeqRecord:
    """
    An individual sequence record. A sequence record is defined by
    1) the data sequence
    2) a name/string identifier
    3) optionally, a per site probability for every canonical state
    """

    def __init__(self,
                 sequence : str | list[str],
                 name : str,
                 uncertainty : np.ndarray | list[list[float]] = None) -> None:
        """
        Initialize a Sequence Record

        Args:
            sequence (str | list[str]): a sequence of characters
            name (str): some name or label
            uncertainty (np.ndarray | list[list[float]], optional): a
                        (sites x states) matrix of state probabilities.
                        Defaults to None.
        """
        #data sequence
        self.seq : str = "".join(sequence)

        #sequence name
        self.name : str = name

        self.uncertainty : np.ndarray = None
        if uncertainty is not None:
            self.uncertainty = np.asarray(uncertainty, dtype = np.double)

    def get_name(self) -> str:
        """
        Get the name of the sequence.

        Returns:
            str: sequence label
        """
        return self.name

    def get_seq(self) -> str:
        return self.seq

    def __len__(self) -> int:
        return len(self.seq)


class MSA:
    """
    Class that provides all packaging and functionality services to do with
    Multiple Sequence Alignments. This class stores all data and metadata
    about a sequence alignment, and can handle file I/O from any alignment
    format that Biopython reads (nexus by default).

    An MSA is the source of raw site patterns for SitePatterns: it encodes
    every row into state codes with its DataType, and serves one column at a
    time.
    """

    def __init__(self,
                 filename : str = None,
                 records : list[SeqRecord] = None,
                 data_type : DataType = NUCLEOTIDES,
                 file_format : str = "nexus",
                 site_weights : list[float] | np.ndarray = None,
                 uncertain : bool = None,
                 strict : bool = True) -> None:
        """
        Initialize a Multiple Sequence Alignment (MSA), either from a file or
        from a list of sequence records.

        Args:
            filename (str, optional): file name to a commonly accepted
                                      alignment format. Defaults to None.
            records (list[SeqRecord], optional): In memory sequences, used
                                                 when no filename is given.
                                                 Defaults to None.
            data_type (DataType, optional): Alphabet used to encode the data.
                                            Defaults to NUCLEOTIDES.
            file_format (str, optional): Biopython AlignIO format name.
                                         Defaults to "nexus".
            site_weights (list[float] | np.ndarray, optional): One weight per
                                         site. Defaults to 1 for every site.
            uncertain (bool, optional): Whether this alignment reports
                                        uncertain data. Defaults to True iff
                                        any record carries an uncertainty
                                        matrix.
            strict (bool, optional): If False, characters that the data type
                                     can not map are read as the unknown
                                     state (with a warning) instead of raising.
                                     Defaults to True.
        Raises:
            MSAError: if the alignment is empty, ragged, or neither a filename
                      nor records are given.
        """
        self.filename : str = filename
        self.data_type : DataType = data_type
        self.file_format : str = file_format
        self.strict : bool = strict

        if filename is not None:
            self.records : list[SeqRecord] = self.parse()
        elif records is not None:
            self.records : list[SeqRecord] = list(records)
        else:
            raise MSAError("An MSA needs either a filename or a list of \
                            sequence records")

        if len(self.records) == 0:
            raise MSAError("Alignment contains no sequences")

        lengths = {len(rec) for rec in self.records}
        if len(lengths) != 1:
            raise MSAError(f"Sequences are not all the same length: \
                             {sorted(lengths)}")
        chars = lengths.pop()

        # codons and other multi character states span several characters
        width = data_type.symbol_length()
        if chars % width != 0:
            raise MSAError(f"Sequence length {chars} is not a multiple of \
                             {width}, as {data_type.get_type()} data needs")
        self.seq_len : int = chars // width

        # taxa x sites matrix of state codes
        self.data : np.ndarray = np.array([self._encode(rec)
                                           for rec in self.records],
                                          dtype = np.int32)
        self.data = self.data.reshape(len(self.records), self.seq_len)

        if site_weights is None:
            self.weights : np.ndarray = np.ones(self.seq_len, dtype = np.double)
        else:
            self.weights : np.ndarray = np.asarray(site_weights,
                                                   dtype = np.double)
            if self.weights.shape != (self.seq_len,):
                raise MSAError(f"Expected {self.seq_len} site weights, got \
                                 {self.weights.size}")

        for rec in self.records:
            if rec.uncertainty is not None:
                expected = (self.seq_len, data_type.state_count())
                if rec.uncertainty.shape != expected:
                    raise MSAError(f"Uncertainty matrix for {rec.name} has \
                                     shape {rec.uncertainty.shape}, expected \
                                     {expected}")

        if uncertain is None:
            uncertain = any(rec.uncertainty is not None
                            for rec in self.records)
        self.uncertain : bool = uncertain

    def parse(self) -> list[SeqRecord]:
        """
        Take a filename and grab the sequences and put them into
        SeqRecord objects.

        Returns: A list of SeqRecord objs
        """
        recs : list[SeqRecord] = []
        try:
            # If the file is in a Biopython supported data type
            msa = AlignIO.read(self.filename, self.file_format)
            for rec in msa:
                recs.append(SeqRecord(str(rec.seq), rec.id))
        except NexusError:
            if self.file_format != "nexus":
                raise
            # do same as above, just using the NexusReader as a work-around.
            reader = NexusReader.from_file(self.filename)
            for taxon, characters in reader.data:
                recs.append(SeqRecord(characters, taxon))
        return recs

    def _encode(self, rec : SeqRecord) -> list[int]:
        """
        Translate one record into state codes.

        Args:
            rec (SeqRecord): a sequence record
        Raises:
            MSAError: if strict and a character is unmappable
        Returns:
            list[int]: state codes, one per site
        """
        states : list[int] = []
        seq = rec.get_seq()
        width = self.data_type.symbol_length()
        for start in range(0, len(seq), width):
            char = seq[start:start + width]
            try:
                states.append(self.data_type.get_state(char))
            except AlphabetError as err:
                if self.strict:
                    raise MSAError(f"Sequence {rec.name}: {err.message}") \
                        from err
                warnings.warn(f"Character <{char}> in sequence {rec.name} \
                                is not part of the {self.data_type.get_type()} \
                                alphabet and was read as unknown.")
                states.append(self.data_type.get_unknown_state())
        return states

    ######################################
    #### ALIGNMENT SOURCE (SITE LIST) ####
    ######################################

    def get_records(self) -> list[SeqRecord]:
        """
        Retrieve all sequences that are in this alignment.

        Returns:
            list[SeqRecord]: list of all sequence records.
        """
        return self.records

    def site_count(self) -> int:
        return self.seq_len

    def state_count(self) -> int:
        return self.data_type.state_count()

    def taxon_count(self) -> int:
        return len(self.records)

    def pattern_length(self) -> int:
        """
        The length of a site pattern, which is the number of taxa.

        Returns:
            int: number of taxa
        """
        return self.taxon_count()

    def get_data_type(self) -> DataType:
        return self.data_type

    def get_site_pattern(self, site : int) -> np.ndarray:
        """
        Returns the column of state codes at 'site', one per taxon.

        Args:
            site (int): site index
        Raises:
            MSAError: if the site is out of range
        Returns:
            np.ndarray: a fresh integer array of length taxon_count()
        """
        self._check_site(site)
        return self.data[:, site].copy()

    def get_pattern_weight(self, site : int) -> float:
        self._check_site(site)
        return float(self.weights[site])

    def are_uncertain(self) -> bool:
        return self.uncertain

    def get_uncertain_site_pattern(self, site : int) -> np.ndarray | None:
        """
        Returns the (taxa x states) probability matrix at 'site'. Records
        without an uncertainty matrix contribute 1.0 for each state their
        character may stand for.

        Args:
            site (int): site index
        Returns:
            np.ndarray | None: the probability matrix, or None if no record
                               carries uncertainty data.
        """
        self._check_site(site)
        if not any(rec.uncertainty is not None for rec in self.records):
            return None

        matrix = np.zeros((self.taxon_count(), self.state_count()),
                          dtype = np.double)
        for taxon, rec in enumerate(self.records):
            if rec.uncertainty is not None:
                matrix[taxon] = rec.uncertainty[site]
            else:
                state_set = self.data_type.get_state_set(
                    int(self.data[taxon, site]))
                matrix[taxon, state_set] = 1.0
        return matrix

    def get_taxon_id(self, taxon : int) -> str:
        return self.records[taxon].get_name()

    def get_taxon_index(self, name : str) -> int:
        """
        Returns the row index of the taxon named 'name'.

        Args:
            name (str): The taxa/label name of the sequence.
                        Must match exactly (same case, spacing, etc)
        Raises:
            MSAError: if there is no such taxon
        Returns:
            int: row index
        """
        for index, record in enumerate(self.records):
            if record.get_name() == name:
                return index
        raise MSAError(f"name : {name} is not found in this alignment")

    def seq_by_name(self, name : str) -> SeqRecord:
        """
        Retrieves the sequence that belongs to this MSA that has a given name

        Args:
            name (str): The taxa/label name of the sequence.
        Returns:
            SeqRecord: the sequence with the label 'name'
        """
        return self.records[self.get_taxon_index(name)]

    def subset(self, taxa : list[str]) -> MSA:
        """
        A new alignment holding only the sequences whose names are in 'taxa',
        kept in this alignment's order. Names that this alignment does not
        contain are ignored, so the result may have no sequences at all (it
        keeps the site count and weights of this alignment either way).

        Args:
            taxa (list[str]): taxon names to keep
        Returns:
            MSA: the reduced alignment
        """
        wanted = set(taxa)
        rows = np.array([index for index, rec in enumerate(self.records)
                         if rec.get_name() in wanted], dtype = np.intp)

        sub = copy.copy(self)
        sub.records = [self.records[index] for index in rows]
        sub.data = self.data[rows, :]
        return sub

    def _check_site(self, site : int) -> None:
        if not 0 <= site < self.seq_len:
            raise MSAError(f"Site {site} is outside of the alignment \
                             (0 - {self.seq_len - 1})")
