"""Per-group statistics and protein annotation.

- Target/decoy counts per MSD group
- MSD group intensity: median of member peptide intensities
- Protein monoisotopic weight and experimental sequence coverage
"""

import logging
from typing import Callable, List

import numpy as np
from numba import njit

from ..constants import AA_MASSES, H2O_MASS
from ..database.fasta_reader import ProteinRecord
from .entries import EntryStore, MSDGroup

logger = logging.getLogger(__name__)


def count_target_decoy(
    msd_groups: List[MSDGroup],
    store: EntryStore,
    is_decoy: Callable[[ProteinRecord], bool],
) -> None:
    """Count target and decoy proteins of every MSD group.

    Parameters
    ----------
    msd_groups : List[MSDGroup]
        Groups to update in place
    store : EntryStore
        Store holding the member proteins
    is_decoy : Callable[[ProteinRecord], bool]
        Target/decoy classifier (see ``make_decoy_classifier()``)
    """
    for group in msd_groups:
        n_decoy = sum(1 for p in group.proteins if is_decoy(store.proteins[p].record))
        group.number_of_decoy = n_decoy
        group.number_of_target = len(group.proteins) - n_decoy
        group.number_of_target_plus_decoy = len(group.proteins)


def median_intensity(intensities: List[float]) -> float:
    """Median of intensities; 0.0 for an empty list.

    Examples
    --------
    >>> median_intensity([2.0, 4.0, 6.0])
    4.0
    >>> median_intensity([1.0, 2.0, 3.0, 4.0])
    2.5
    """
    if not intensities:
        return 0.0
    return float(np.median(np.asarray(intensities, dtype=np.float64)))


def compute_msd_intensity(msd_groups: List[MSDGroup], store: EntryStore) -> None:
    """Set each MSD group's intensity to the median of its peptide intensities.

    Peptides without an intensity are ignored; a group without any
    intensity-bearing peptide gets 0.0.
    """
    for group in msd_groups:
        intensities = [
            store.peptides[q].intensity for q in group.peptides
            if store.peptides[q].intensity is not None
        ]
        group.intensity = median_intensity(intensities)


# =============================================================================
# Protein Annotation
# =============================================================================

def encode_sequence_to_ord(sequence: str) -> np.ndarray:
    """Encode a sequence string to an ord() array for Numba processing."""
    return np.array([ord(c) for c in sequence], dtype=np.uint8)


@njit
def calculate_protein_weight(sequence_ord: np.ndarray, aa_masses: np.ndarray) -> float:
    """Monoisotopic weight of a protein (residue masses + water).

    Parameters
    ----------
    sequence_ord : np.ndarray (uint8)
        Protein sequence as ord() values
    aa_masses : np.ndarray (float64)
        ord()-indexed residue masses (``constants.AA_MASSES``)

    Returns
    -------
    weight : float
        Neutral monoisotopic mass in Da; 0.0 for an empty sequence
    """
    if len(sequence_ord) == 0:
        return 0.0
    weight = H2O_MASS
    for i in range(len(sequence_ord)):
        weight += aa_masses[sequence_ord[i]]
    return weight


def sequence_coverage(protein_sequence: str, peptides: List[str]) -> float:
    """Fraction of residues covered by at least one peptide occurrence.

    Examples
    --------
    >>> sequence_coverage("AAAAKBBBBK", ["AAAAK"])
    0.5
    """
    if not protein_sequence:
        return 0.0

    covered = np.zeros(len(protein_sequence), dtype=np.bool_)
    for peptide in peptides:
        if not peptide:
            continue
        start = protein_sequence.find(peptide)
        while start != -1:
            covered[start:start + len(peptide)] = True
            start = protein_sequence.find(peptide, start + 1)

    return float(covered.sum()) / len(protein_sequence)


def annotate_proteins(store: EntryStore) -> None:
    """Fill weight and experimental coverage of every protein entry."""
    for protein in store.proteins:
        protein.weight = calculate_protein_weight(
            encode_sequence_to_ord(protein.sequence), AA_MASSES
        )
        experimental = [
            store.peptides[q].sequence for q in protein.peptides
            if store.peptides[q].experimental
        ]
        protein.coverage = sequence_coverage(protein.sequence, experimental) if experimental else 0.0
