"""Target/decoy classification and decoy protein generation.

Decoy proteins are recognised by an accession prefix (e.g. ``DECOY_``) unless
the record carries an explicit flag. For building concatenated databases,
decoy proteins can be generated from targets:
- Reverse: simple reversal (composition and mass preserved)
- Pseudo-reverse: reversal of each tryptic peptide, cleavage sites kept
- K↔R swap: reversal plus K↔R swap
"""

import logging
from typing import Callable, List, Sequence

from ..constants import DEFAULT_DECOY_PREFIXES, ENZYME_RULES
from .fasta_reader import ProteinRecord

logger = logging.getLogger(__name__)


def is_decoy_accession(
    accession: str,
    prefixes: Sequence[str] = DEFAULT_DECOY_PREFIXES,
) -> bool:
    """Return True if the accession starts with one of the decoy prefixes.

    Examples
    --------
    >>> is_decoy_accession("DECOY_P12345")
    True
    >>> is_decoy_accession("P12345")
    False
    """
    return accession.startswith(tuple(prefixes))


def make_decoy_classifier(
    prefixes: Sequence[str] = DEFAULT_DECOY_PREFIXES,
) -> Callable[[ProteinRecord], bool]:
    """Build a target/decoy classifier for ProteinRecords.

    An explicit ``record.is_decoy`` flag wins over the accession convention.
    """
    prefixes = tuple(prefixes)

    def is_decoy(record: ProteinRecord) -> bool:
        if record.is_decoy is not None:
            return record.is_decoy
        return is_decoy_accession(record.accession, prefixes)

    return is_decoy


def generate_reverse_decoy(sequence: str) -> str:
    """Reverse a protein sequence.

    >>> generate_reverse_decoy("MPEPTIDEK")
    'KEDITPEPM'
    """
    return sequence[::-1]


def generate_pseudo_reverse_decoy(sequence: str, enzyme: str = 'trypsin') -> str:
    """Reverse every cleavage product in place, keeping its C-terminal residue.

    Cleavage sites stay where they were, so the decoy digests into peptides
    of the same lengths as the target.

    >>> generate_pseudo_reverse_decoy("PEPTIDEKAAGR")
    'EDITPEPKGAAR'
    """
    cleave_after, _ = ENZYME_RULES[enzyme.lower()]

    pieces = []
    start = 0
    for i, aa in enumerate(sequence):
        if aa in cleave_after:
            pieces.append(sequence[start:i][::-1] + aa)
            start = i + 1
    if start < len(sequence):
        pieces.append(sequence[start:][::-1])

    return ''.join(pieces)


def generate_kr_swap_decoy(sequence: str) -> str:
    """Reverse the sequence and swap K↔R.

    >>> generate_kr_swap_decoy("PEPTADEK")
    'REDATPEP'
    """
    swap = {'K': 'R', 'R': 'K'}
    return ''.join(swap.get(aa, aa) for aa in sequence[::-1])


def generate_decoy_records(
    records: Sequence[ProteinRecord],
    method: str = 'reverse',
    prefix: str = 'DECOY_',
) -> List[ProteinRecord]:
    """Generate one decoy record per target record.

    Parameters
    ----------
    records : Sequence[ProteinRecord]
        Target proteins
    method : str
        'reverse', 'pseudo_reverse' or 'kr_swap'
    prefix : str
        Prefix prepended to each decoy accession

    Returns
    -------
    decoys : List[ProteinRecord]
        Decoy records flagged ``is_decoy=True``, same order as targets

    Raises
    ------
    ValueError
        If method is not recognized
    """
    if method == 'reverse':
        generator = generate_reverse_decoy
    elif method == 'pseudo_reverse':
        generator = generate_pseudo_reverse_decoy
    elif method == 'kr_swap':
        generator = generate_kr_swap_decoy
    else:
        raise ValueError(
            f"Unknown decoy method: {method}. "
            f"Must be 'reverse', 'pseudo_reverse', or 'kr_swap'"
        )

    logger.info(f"Generating {len(records):,} decoy proteins (method: {method})...")

    decoys = [
        ProteinRecord(
            accession=prefix + record.accession,
            sequence=generator(record.sequence),
            description=record.description,
            is_decoy=True,
        )
        for record in records
    ]

    logger.info(f"✓ Generated {len(decoys):,} decoys")

    return decoys
