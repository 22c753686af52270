"""In silico protein digestion.

Produces the theoretical peptide set of each candidate protein, which makes
up the full (in silico derived) side of the protein–peptide graph.

Supports:
- Trypsin specificity (cleaves after K/R, blocked by P) and related enzymes
- Missed cleavages
- Peptide length filtering
- Non-standard amino acid filtering
"""

import logging
from functools import partial
from typing import Callable, List

from ..config import ResolverParams
from ..constants import AA_MASSES_DICT, ENZYME_RULES

logger = logging.getLogger(__name__)


def digest_protein(
    sequence: str,
    enzyme: str = 'trypsin',
    min_length: int = 7,
    max_length: int = 35,
    missed_cleavages: int = 2,
) -> List[str]:
    """Digest a single protein sequence.

    Parameters
    ----------
    sequence : str
        Protein sequence
    enzyme : str
        Enzyme name (see ``ENZYME_RULES``)
    min_length : int
        Minimum peptide length (default: 7)
    max_length : int
        Maximum peptide length (default: 35)
    missed_cleavages : int
        Number of missed cleavages allowed (default: 2)

    Returns
    -------
    peptides : List[str]
        Peptides from this protein, deduplicated, in order of generation
        (all fully cleaved peptides first, then 1 missed cleavage, ...)

    Examples
    --------
    >>> digest_protein("PEPTIDEKRPASTEINK", min_length=1)
    ['PEPTIDEK', 'RPASTEINK', 'PEPTIDEKRPASTEINK']

    The R in "KRP" is not a cleavage site because trypsin is blocked by the
    following proline.
    """
    try:
        cleave_after, proline_blocks = ENZYME_RULES[enzyme.lower()]
    except KeyError:
        raise ValueError(f"Unknown enzyme: {enzyme}") from None

    # Cleavage sites are the index of the last residue of each fragment
    cleavage_sites = [-1]
    for i, aa in enumerate(sequence):
        if aa in cleave_after and i < len(sequence) - 1:
            if proline_blocks and sequence[i + 1] == 'P':
                continue
            cleavage_sites.append(i)
    cleavage_sites.append(len(sequence) - 1)

    peptides = []
    seen = set()

    for mc in range(missed_cleavages + 1):
        for i in range(len(cleavage_sites) - mc - 1):
            start = cleavage_sites[i] + 1
            end = cleavage_sites[i + mc + 1] + 1

            peptide = sequence[start:end]

            if not (min_length <= len(peptide) <= max_length):
                continue
            if peptide in seen:
                continue
            if all(aa in AA_MASSES_DICT for aa in peptide):
                seen.add(peptide)
                peptides.append(peptide)

    return peptides


def make_digestor(params: ResolverParams) -> Callable[[str], List[str]]:
    """Bind digestion settings from ResolverParams.

    Returns
    -------
    digest : Callable[[str], List[str]]
        Function mapping a protein sequence to its peptide set
    """
    params.validate()
    return partial(
        digest_protein,
        enzyme=params.enzyme,
        min_length=params.min_length,
        max_length=params.max_length,
        missed_cleavages=params.missed_cleavages,
    )
