"""Protein and peptide entries of the evidence graph.

All entries live in two dense lists owned by an EntryStore and reference each
other by integer index only. Graph traversal bookkeeping is kept outside the
entries in a numpy bitset covering both node kinds:

    node id = protein index                   (0 .. n_proteins - 1)
    node id = n_proteins + peptide index      (n_proteins .. n_nodes - 1)
"""

from bisect import bisect_left
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from ..database.fasta_reader import ProteinRecord
from ..exceptions import InconsistentAdjacencyError


class ProteinType(Enum):
    """Protein classification based on experimental peptide evidence."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    PRIMARY_INDISTINGUISHABLE = "primary_indistinguishable"
    SECONDARY_INDISTINGUISHABLE = "secondary_indistinguishable"


@dataclass
class ProteinEntry:
    """Candidate protein node."""

    index: int
    record: ProteinRecord
    protein_type: Optional[ProteinType] = None  # set by classification
    weight: float = 0.0      # monoisotopic, Da
    coverage: float = 0.0    # fraction of residues covered by experimental peptides
    isd_group: int = -1
    msd_group: int = -1      # -1 without experimental support
    number_of_experimental_peptides: int = 0
    peptides: List[int] = field(default_factory=list)
    indis: List[int] = field(default_factory=list)  # indistinguishable fellows

    @property
    def accession(self) -> str:
        return self.record.accession

    @property
    def sequence(self) -> str:
        return self.record.sequence


@dataclass
class PeptideEntry:
    """Peptide node. Theoretical unless backed by a peptide hit."""

    index: int
    sequence: str
    experimental: bool = False
    peptide_identification: int = -1  # identification / feature index
    peptide_hit: int = -1             # hit index within it
    origin: str = ''
    intensity: Optional[float] = None
    isd_group: int = -1
    msd_group: int = -1
    proteins: List[int] = field(default_factory=list)


@dataclass
class ISDGroup:
    """Connected component of the full protein–peptide graph."""

    index: int
    proteins: List[int] = field(default_factory=list)
    peptides: List[int] = field(default_factory=list)
    msd_groups: List[int] = field(default_factory=list)


@dataclass
class MSDGroup:
    """Connected component of the experimental subgraph of one ISD group."""

    index: int
    isd_group: int
    proteins: List[int] = field(default_factory=list)
    peptides: List[int] = field(default_factory=list)
    number_of_target: int = 0
    number_of_decoy: int = 0
    number_of_target_plus_decoy: int = 0
    intensity: float = 0.0  # median of member peptide intensities


class EntryStore:
    """Dense, index-addressed storage for protein and peptide entries.

    Examples
    --------
    >>> store = EntryStore.from_records([ProteinRecord("P1", "MPEPTIDEK")])
    >>> q = store.add_peptide("PEPTIDEK")
    >>> store.link(0, q)
    >>> store.build_sequence_index()
    >>> store.find_peptide_entry("PEPTIDEK")
    0
    >>> store.find_peptide_entry("MISSING") == len(store.peptides)
    True
    """

    def __init__(self):
        self.proteins: List[ProteinEntry] = []
        self.peptides: List[PeptideEntry] = []

        # Sequence-sorted view for binary search
        self._sorted_sequences: List[str] = []
        self._sorted_indices: List[int] = []
        self._indexed = False

    @classmethod
    def from_records(cls, records: Sequence[ProteinRecord]) -> 'EntryStore':
        """Create one ProteinEntry per record, in record order."""
        store = cls()
        store.proteins = [
            ProteinEntry(index=i, record=record)
            for i, record in enumerate(records)
        ]
        return store

    @property
    def n_proteins(self) -> int:
        return len(self.proteins)

    @property
    def n_peptides(self) -> int:
        return len(self.peptides)

    @property
    def n_nodes(self) -> int:
        return len(self.proteins) + len(self.peptides)

    def add_peptide(self, sequence: str) -> int:
        """Append a theoretical peptide entry and return its index.

        Peptides added after ``build_sequence_index()`` are inserted into the
        sorted view as well.
        """
        index = len(self.peptides)
        self.peptides.append(PeptideEntry(index=index, sequence=sequence))

        if self._indexed:
            pos = bisect_left(self._sorted_sequences, sequence)
            self._sorted_sequences.insert(pos, sequence)
            self._sorted_indices.insert(pos, index)

        return index

    def link(self, protein_index: int, peptide_index: int) -> None:
        """Record an edge on both sides of the graph."""
        self.proteins[protein_index].peptides.append(peptide_index)
        self.peptides[peptide_index].proteins.append(protein_index)

    def build_sequence_index(self) -> None:
        """(Re)build the sequence-sorted view over all peptide entries."""
        order = sorted(range(len(self.peptides)), key=lambda i: self.peptides[i].sequence)
        self._sorted_indices = order
        self._sorted_sequences = [self.peptides[i].sequence for i in order]
        self._indexed = True

    def find_peptide_entry(self, sequence: str) -> int:
        """Binary search a peptide by exact sequence.

        Returns
        -------
        index : int
            Peptide index, or ``len(self.peptides)`` if the sequence is unknown.
            Callers must check for this sentinel.
        """
        pos = bisect_left(self._sorted_sequences, sequence)
        if pos < len(self._sorted_sequences) and self._sorted_sequences[pos] == sequence:
            return self._sorted_indices[pos]
        return len(self.peptides)

    def new_traversal(self) -> np.ndarray:
        """Return a cleared traversal bitset over all nodes."""
        return np.zeros(self.n_nodes, dtype=np.bool_)

    def peptide_node(self, peptide_index: int) -> int:
        """Node id of a peptide in the combined node numbering."""
        return len(self.proteins) + peptide_index

    def check_adjacency(self) -> None:
        """Verify every edge is recorded on both sides.

        Raises
        ------
        InconsistentAdjacencyError
            If a protein lists a peptide that does not list it back, or
            vice versa.
        """
        protein_side = {
            (protein.index, q) for protein in self.proteins for q in protein.peptides
        }
        peptide_side = {
            (p, peptide.index) for peptide in self.peptides for p in peptide.proteins
        }

        if protein_side != peptide_side:
            one_sided = sorted(protein_side ^ peptide_side)
            p, q = one_sided[0]
            raise InconsistentAdjacencyError(
                f"{len(one_sided)} one-directional edge(s), first between "
                f"protein {p} and peptide {q}"
            )
