"""Reindexing and protein classification.

Reindexing compacts protein and peptide indices to the entries that belong
to an MSD group. Classification consumes the resulting ``ReindexedNodes``,
which makes the required ordering (reindex first, classify second) explicit
in the call signatures.

Classification rules
--------------------
Proteins are grouped into equivalence classes of identical experimental
peptide sets.

- Class of one protein: PRIMARY if one of its peptides occurs in no other
  protein, otherwise SECONDARY.
- Class of several proteins (indistinguishable): PRIMARY_INDISTINGUISHABLE if
  one of the shared peptides occurs only in class members, otherwise
  SECONDARY_INDISTINGUISHABLE. Members list each other in ``indis``.

Proteins without experimental support are not classified.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

from ..exceptions import OrderingViolationError
from .entries import EntryStore, MSDGroup, ProteinType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReindexedNodes:
    """Dense reindex tables for proteins and peptides in MSD groups.

    ``reindexed_proteins[i]`` is the dense index of protein i, or
    ``len(reindexed_proteins)`` if it belongs to no MSD group (same for
    peptides).
    """

    reindexed_proteins: np.ndarray
    reindexed_peptides: np.ndarray

    @property
    def protein_sentinel(self) -> int:
        return len(self.reindexed_proteins)

    @property
    def peptide_sentinel(self) -> int:
        return len(self.reindexed_peptides)

    @property
    def n_proteins(self) -> int:
        """Number of proteins with experimental support."""
        return int((self.reindexed_proteins != self.protein_sentinel).sum())

    @property
    def n_peptides(self) -> int:
        """Number of experimental peptides."""
        return int((self.reindexed_peptides != self.peptide_sentinel).sum())


def reindex_nodes(
    msd_groups: List[MSDGroup],
    n_proteins: int,
    n_peptides: int,
) -> ReindexedNodes:
    """Assign dense indices to MSD group members.

    Indices are handed out in MSD group order, then member order.

    Parameters
    ----------
    msd_groups : List[MSDGroup]
        Groups from ``build_msd_groups()``
    n_proteins, n_peptides : int
        Sizes of the entry collections

    Returns
    -------
    reindexed : ReindexedNodes
        Reindex tables; non-members map to the table size
    """
    reindexed_proteins = np.full(n_proteins, n_proteins, dtype=np.int64)
    reindexed_peptides = np.full(n_peptides, n_peptides, dtype=np.int64)

    next_protein = 0
    next_peptide = 0
    for group in msd_groups:
        for p in group.proteins:
            reindexed_proteins[p] = next_protein
            next_protein += 1
        for q in group.peptides:
            reindexed_peptides[q] = next_peptide
            next_peptide += 1

    logger.debug(f"Reindexed {next_protein:,} proteins and {next_peptide:,} peptides")

    return ReindexedNodes(reindexed_proteins, reindexed_peptides)


def classify_proteins(store: EntryStore, reindexed: ReindexedNodes) -> Dict[ProteinType, int]:
    """Classify proteins as primary/secondary and find indistinguishable ones.

    Parameters
    ----------
    store : EntryStore
        Store after MSD grouping
    reindexed : ReindexedNodes
        Result of ``reindex_nodes()`` for this store

    Returns
    -------
    counts : Dict[ProteinType, int]
        Number of proteins per class

    Raises
    ------
    OrderingViolationError
        If ``reindexed`` is not a ReindexedNodes built for this store
    """
    if not isinstance(reindexed, ReindexedNodes):
        raise OrderingViolationError(
            "classify_proteins() requires the ReindexedNodes returned by reindex_nodes()"
        )
    if (len(reindexed.reindexed_proteins) != store.n_proteins
            or len(reindexed.reindexed_peptides) != store.n_peptides):
        raise OrderingViolationError(
            f"Reindex tables ({len(reindexed.reindexed_proteins)} proteins, "
            f"{len(reindexed.reindexed_peptides)} peptides) do not match the store "
            f"({store.n_proteins} proteins, {store.n_peptides} peptides)"
        )

    protein_sentinel = reindexed.protein_sentinel
    peptide_sentinel = reindexed.peptide_sentinel

    # Equivalence classes keyed by the sorted experimental peptide set.
    # dicts keep insertion order, so classes appear in protein index order.
    classes: Dict[Tuple[int, ...], List[int]] = {}
    for protein in store.proteins:
        protein.protein_type = None
        protein.indis = []
        protein.number_of_experimental_peptides = 0

        if reindexed.reindexed_proteins[protein.index] == protein_sentinel:
            continue

        experimental = tuple(sorted(
            q for q in protein.peptides
            if reindexed.reindexed_peptides[q] != peptide_sentinel
        ))
        protein.number_of_experimental_peptides = len(experimental)
        classes.setdefault(experimental, []).append(protein.index)

    counts = {protein_type: 0 for protein_type in ProteinType}

    for peptide_set, members in classes.items():
        member_set = set(members)
        has_unique = any(
            all(p in member_set for p in store.peptides[q].proteins)
            for q in peptide_set
        )

        if len(members) == 1:
            protein_type = ProteinType.PRIMARY if has_unique else ProteinType.SECONDARY
        else:
            protein_type = (
                ProteinType.PRIMARY_INDISTINGUISHABLE if has_unique
                else ProteinType.SECONDARY_INDISTINGUISHABLE
            )

        for p in members:
            protein = store.proteins[p]
            protein.protein_type = protein_type
            if len(members) > 1:
                protein.indis = [fellow for fellow in members if fellow != p]
        counts[protein_type] += len(members)

    logger.info(
        "✓ Classified proteins: "
        + ", ".join(f"{protein_type.value}={n:,}" for protein_type, n in counts.items())
    )

    return counts
