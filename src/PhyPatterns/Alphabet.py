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

Data types (alphabets) map sequence characters to integer state codes. Codes
below the data type's state count are canonical (unambiguous) states; codes at
or above it are ambiguity codes, the unknown state, and the gap state, each of
which stands for a set of possible canonical states.

The pattern compression engine only ever talks to the DataType interface.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import numpy as np


#########################
#### EXCEPTION CLASS ####
#########################

class AlphabetError(Exception):
    """
    Error class for all errors relating to alphabet mappings.
    """
    def __init__(self, message : str = "Error during Alphabet class mapping\
                                        operation") -> None:
        """
        Initialize an AlphabetError with a message.

        Args:
            message (str): error message
        Returns:
            N/A
        """
        self.message = message
        super().__init__(self.message)


#############################
#### DATA TYPE INTERFACE ####
#############################

class DataType(ABC):
    """
    Capability interface for an alphabet of states. Everything that the site
    pattern compression needs to know about a character set goes through
    these methods.
    """

    @abstractmethod
    def get_type(self) -> str:
        """
        Returns the name of this data type (ie, "DNA").

        Args:
            N/A
        Returns:
            str: the data type name
        """
        pass

    @abstractmethod
    def state_count(self) -> int:
        """
        Number of canonical (unambiguous) states.

        Args:
            N/A
        Returns:
            int: the canonical state count
        """
        pass

    @abstractmethod
    def ambiguous_state_count(self) -> int:
        """
        Number of codes in total, canonical states included.

        Args:
            N/A
        Returns:
            int: the total number of state codes
        """
        pass

    @abstractmethod
    def get_state(self, char : str) -> int:
        pass

    @abstractmethod
    def get_char(self, state : int) -> str:
        pass

    @abstractmethod
    def get_state_set(self, state : int) -> np.ndarray:
        """
        Boolean mask of length state_count() with True for every canonical
        state that the code 'state' may stand for.

        Args:
            state (int): a state code
        Returns:
            np.ndarray: boolean array
        """
        pass

    @abstractmethod
    def get_gap_state(self) -> int:
        pass

    @abstractmethod
    def get_unknown_state(self) -> int:
        pass

    def symbol_length(self) -> int:
        """
        Number of sequence characters that make up one site (ie 3 for codons).

        Returns:
            int: characters per state
        """
        return 1

    def get_states(self, state : int) -> np.ndarray:
        """
        The canonical states that a code may stand for.

        Args:
            state (int): a state code
        Returns:
            np.ndarray: the indices of all possible canonical states
        """
        return np.flatnonzero(self.get_state_set(state))

    def is_gap_state(self, state : int) -> bool:
        return state == self.get_gap_state()

    def is_unknown_state(self, state : int) -> bool:
        return state == self.get_unknown_state()

    def is_ambiguous_state(self, state : int) -> bool:
        """
        Any code that is not a canonical state is ambiguous, including the gap
        and unknown states.

        Args:
            state (int): a state code
        Returns:
            bool: True if 'state' is not canonical
        """
        return state >= self.state_count()

    def are_unambiguously_different(self, state1 : int, state2 : int) -> bool:
        """
        Two codes are unambiguously different if no canonical state is
        possible for both of them.

        Args:
            state1 (int): a state code
            state2 (int): a state code
        Returns:
            bool: True if the two codes can not describe the same state
        """
        return not np.any(self.get_state_set(state1)
                          & self.get_state_set(state2))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_type()})"


class TabulatedDataType(DataType):
    """
    A DataType defined by a table of canonical characters and a table of
    ambiguity characters. State codes are assigned in table order: canonical
    characters first, then ambiguity codes, then the unknown character, then
    the gap character.
    """

    def __init__(self,
                 name : str,
                 canonical : str | list[str],
                 ambiguities : dict[str, str | list[str]] = None,
                 unknown_char : str = "?",
                 gap_char : str = "-",
                 aliases : dict[str, str] = None) -> None:
        """
        Args:
            name (str): Name of the data type, ie "DNA"
            canonical (str | list[str]): The canonical characters, in state
                                         order.
            ambiguities (dict[str, str | list[str]], optional): Map from an
                                         ambiguity character to the canonical
                                         characters it may stand for.
                                         Defaults to None.
            unknown_char (str, optional): The unknown character.
                                          Defaults to "?".
            gap_char (str, optional): The gap character. Defaults to "-".
            aliases (dict[str, str], optional): Extra characters that map to
                                                the same code as an already
                                                defined character. Defaults to
                                                None.
        Raises:
            AlphabetError: if a character is defined twice, or an ambiguity
                           refers to an undefined canonical character.
        Returns:
            N/A
        """
        self.name : str = name
        self._chars : list[str] = list(canonical)
        self._state_count : int = len(self._chars)

        ambiguities = ambiguities or {}

        # canonical states are singletons
        sets : list[np.ndarray] = []
        for state in range(self._state_count):
            mask = np.zeros(self._state_count, dtype = bool)
            mask[state] = True
            sets.append(mask)

        for char, members in ambiguities.items():
            mask = np.zeros(self._state_count, dtype = bool)
            for member in members:
                if member not in self._chars[:self._state_count]:
                    raise AlphabetError(f"Ambiguity code <{char}> refers to \
                                          undefined state <{member}>")
                mask[self._chars.index(member)] = True
            self._chars.append(char)
            sets.append(mask)

        # unknown and gap both allow any state
        self._unknown_state : int = len(self._chars)
        self._chars.append(unknown_char)
        sets.append(np.ones(self._state_count, dtype = bool))

        self._gap_state : int = len(self._chars)
        self._chars.append(gap_char)
        sets.append(np.ones(self._state_count, dtype = bool))

        if len(set(self._chars)) != len(self._chars):
            raise AlphabetError(f"Duplicate characters in data type {name}")

        self._state_sets : np.ndarray = np.array(sets, dtype = bool)
        self._state_sets.flags.writeable = False

        # code x code lookup, True where no canonical state is shared
        overlap = self._state_sets.astype(np.int32) @ \
                  self._state_sets.astype(np.int32).T
        self._different : np.ndarray = overlap == 0

        self._char_to_state : dict[str, int] = {char : state for state, char
                                                in enumerate(self._chars)}
        for alias, target in (aliases or {}).items():
            if target not in self._char_to_state:
                raise AlphabetError(f"Alias <{alias}> refers to undefined \
                                      character <{target}>")
            self._char_to_state[alias] = self._char_to_state[target]

    def get_type(self) -> str:
        return self.name

    def state_count(self) -> int:
        return self._state_count

    def ambiguous_state_count(self) -> int:
        return len(self._chars)

    def get_state(self, char : str) -> int:
        """
        Return the state code for a character in a sequence.

        Raises:
            AlphabetError: if the char encountered is undefined for this data
                           type.
        Args:
            char (str): a single sequence character
        Returns:
            int: the state code
        """
        try:
            return self._char_to_state[char.upper()]
        except KeyError:
            raise AlphabetError("Attempted to map <" + char + ">. That \
                                 character is invalid for this alphabet")

    def get_char(self, state : int) -> str:
        """
        Get the character that maps to "state".

        Raises:
            AlphabetError: if the provided state is not a valid code.
        Args:
            state (int): a state code
        Returns:
            str: the character for 'state'
        """
        if not 0 <= state < len(self._chars):
            raise AlphabetError("Given state does not exist in alphabet")
        return self._chars[state]

    def get_state_set(self, state : int) -> np.ndarray:
        if not 0 <= state < len(self._chars):
            raise AlphabetError("Given state does not exist in alphabet")
        return self._state_sets[state]

    def get_gap_state(self) -> int:
        return self._gap_state

    def get_unknown_state(self) -> int:
        return self._unknown_state

    def are_unambiguously_different(self, state1 : int, state2 : int) -> bool:
        return bool(self._different[state1, state2])

    def encode(self, sequence : str | list[str]) -> np.ndarray:
        """
        Map a whole sequence of characters to state codes.

        Args:
            sequence (str | list[str]): sequence characters
        Returns:
            np.ndarray: integer array of state codes
        """
        return np.array([self.get_state(char) for char in sequence],
                        dtype = np.int32)

    def decode(self, states : np.ndarray | list[int]) -> str:
        return "".join(self.get_char(int(state)) for state in states)


######################
#### DATA TYPES ######
######################

class Nucleotides(TabulatedDataType):
    """
    DNA/RNA with the IUPAC ambiguity codes.

     Symbol(s)	Name	   Possible states
         A	  Adenine	   A
         C	  Cytosine	   C
         G	  Guanine	   G
         T U	  Thymine  T
         K	    Keto	   G T
         M	    Amino	   A C
         R	    Purine	   A G
         S	    Strong	   C G
         W	    Weak	   A T
         Y	    Pyrimidine C T
         B	    Not A	   C G T
         D	    Not C	   A G T
         H	    Not G	   A C T
         V	    Not T	   A C G
         N ? X	Unknown    A C G T
         - .    Gap        A C G T
    """

    def __init__(self) -> None:
        super().__init__("DNA",
                         "ACGT",
                         {"K" : "GT", "M" : "AC", "R" : "AG", "S" : "CG",
                          "W" : "AT", "Y" : "CT", "B" : "CGT", "D" : "AGT",
                          "H" : "ACT", "V" : "ACG"},
                         unknown_char = "N",
                         gap_char = "-",
                         aliases = {"U" : "T", "?" : "N", "X" : "N",
                                    "." : "-"})


class AminoAcids(TabulatedDataType):
    """
    The twenty amino acids, with B (Asx), Z (Glx) and J (Xle) ambiguities.
    """

    def __init__(self) -> None:
        super().__init__("PROTEIN",
                         "ACDEFGHIKLMNPQRSTVWY",
                         {"B" : "DN", "Z" : "EQ", "J" : "IL"},
                         unknown_char = "X",
                         gap_char = "-",
                         aliases = {"?" : "X", "." : "-"})


# stop codons of the universal genetic code
STOP_CODONS : tuple[str, ...] = ("TAA", "TAG", "TGA")


class Codons(DataType):
    """
    Sense codons, read three nucleotides at a time. States are the codons in
    ACGT order (AAA, AAC, ..., TTT) with the stop codons left out, followed
    by the unknown and the gap state.

    A triplet holding any gap is a gap. A triplet holding any other
    ambiguity is unknown. Stop codons can not be mapped.
    """

    def __init__(self, stop_codons : tuple[str, ...] = STOP_CODONS) -> None:
        """
        Args:
            stop_codons (tuple[str, ...], optional): triplets that are not
                                                     states. Defaults to the
                                                     universal code's.
        Returns:
            N/A
        """
        self._stop_codons : frozenset[str] = frozenset(stop_codons)
        self._triplets : list[str] = [a + b + c
                                      for a in "ACGT"
                                      for b in "ACGT"
                                      for c in "ACGT"
                                      if a + b + c not in self._stop_codons]
        self._state_count : int = len(self._triplets)
        self._triplet_to_state : dict[str, int] = \
            {triplet : state for state, triplet in enumerate(self._triplets)}

        self._unknown_state : int = self._state_count
        self._gap_state : int = self._state_count + 1

        # canonical singletons, then unknown and gap allowing every codon
        self._state_sets : np.ndarray = np.vstack(
            [np.eye(self._state_count, dtype = bool),
             np.ones((2, self._state_count), dtype = bool)])
        self._state_sets.flags.writeable = False

    def get_type(self) -> str:
        return "CODON"

    def symbol_length(self) -> int:
        return 3

    def state_count(self) -> int:
        return self._state_count

    def ambiguous_state_count(self) -> int:
        return self._state_count + 2

    def get_state(self, triplet : str) -> int:
        """
        Return the state code of a nucleotide triplet.

        Args:
            triplet (str): three nucleotide characters
        Raises:
            AlphabetError: for a stop codon, a string that isn't three
                           characters long, or an invalid nucleotide.
        Returns:
            int: the state code
        """
        triplet = triplet.upper().replace("U", "T")
        if len(triplet) != 3:
            raise AlphabetError(f"Attempted to map <{triplet}>. Codons are \
                                  three characters long")

        if triplet in self._triplet_to_state:
            return self._triplet_to_state[triplet]
        if triplet in self._stop_codons:
            raise AlphabetError(f"Attempted to map <{triplet}>. That is a \
                                  stop codon")

        codes = [NUCLEOTIDES.get_state(char) for char in triplet]
        if any(NUCLEOTIDES.is_gap_state(code) for code in codes):
            return self._gap_state
        return self._unknown_state

    def get_char(self, state : int) -> str:
        """
        The triplet for a state code ("NNN" for unknown, "---" for gap).

        Raises:
            AlphabetError: if the provided state is not a valid code.
        Args:
            state (int): a state code
        Returns:
            str: three characters
        """
        if 0 <= state < self._state_count:
            return self._triplets[state]
        if state == self._unknown_state:
            return "NNN"
        if state == self._gap_state:
            return "---"
        raise AlphabetError("Given state does not exist in alphabet")

    def get_state_set(self, state : int) -> np.ndarray:
        if not 0 <= state < self.ambiguous_state_count():
            raise AlphabetError("Given state does not exist in alphabet")
        return self._state_sets[state]

    def get_gap_state(self) -> int:
        return self._gap_state

    def get_unknown_state(self) -> int:
        return self._unknown_state

    def encode(self, sequence : str | list[str]) -> np.ndarray:
        """
        Map a nucleotide sequence to codon state codes.

        Args:
            sequence (str | list[str]): nucleotide characters
        Raises:
            AlphabetError: if the length is not a multiple of three
        Returns:
            np.ndarray: integer array of state codes
        """
        sequence = "".join(sequence)
        if len(sequence) % 3 != 0:
            raise AlphabetError(f"Sequence length {len(sequence)} is not a \
                                  multiple of three")
        return np.array([self.get_state(sequence[start:start + 3])
                         for start in range(0, len(sequence), 3)],
                        dtype = np.int32)

    def decode(self, states : np.ndarray | list[int]) -> str:
        return "".join(self.get_char(int(state)) for state in states)


def snp_data_type(ploidy : int) -> TabulatedDataType:
    """
    For SNP data initialization. For data sets in which the maximum ploidy
    is Xn, use X as @ploidy.

    For phased SNP data, use 1. For unphased SNP data, use 2.

    Args:
        ploidy (int): The ploidyness value of a species
                      (ie, humans = 2, some plants > 2, etc)
    Raises:
        AlphabetError: if ploidy is less than 1
    Returns:
        TabulatedDataType: a data type with states str(int)->int
                           for 0 <= int <= ploidy, plus unknown and gap.
    """
    if ploidy < 1:
        raise AlphabetError("SNP ploidy must be at least 1")

    return TabulatedDataType("SNP",
                             [str(num) for num in range(ploidy + 1)],
                             unknown_char = "?",
                             gap_char = "-",
                             aliases = {"N" : "?"})


########################
### MODULE CONSTANTS ###
########################

NUCLEOTIDES : Nucleotides = Nucleotides()

AMINO_ACIDS : AminoAcids = AminoAcids()

CODONS : Codons = Codons()
