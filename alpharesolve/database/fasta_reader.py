"""FASTA file reading and protein records.

Lightweight FASTA parser supplying the candidate proteins of a resolution
run. Supports:
- UniProt and generic FASTA formats
- Multi-FASTA files
- Protein ID extraction
- Decoy flagging by accession prefix
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union, List, Tuple, Optional, Sequence

from ..constants import DEFAULT_DECOY_PREFIXES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProteinRecord:
    """One candidate protein from a sequence database."""

    accession: str
    sequence: str
    description: str = ''
    is_decoy: Optional[bool] = None  # None → derive from accession


def parse_protein_id(
    header: str,
    decoy_prefixes: Sequence[str] = DEFAULT_DECOY_PREFIXES,
) -> Tuple[str, str]:
    """Extract protein ID and description from FASTA header.

    Supports multiple formats:
    - UniProt: >sp|P12345|NAME_HUMAN Description...
    - UniProt: >tr|A0A123|NAME_HUMAN Description...
    - Generic: >PROTEIN_ID Description...

    Parameters
    ----------
    header : str
        FASTA header line (without leading '>')
    decoy_prefixes : sequence of str
        Decoy tags kept on the accession when glued to the database field

    Returns
    -------
    protein_id : str
        Extracted protein identifier (empty for an empty header)
    description : str
        Full header line

    Examples
    --------
    >>> parse_protein_id("sp|P12345|NAME_HUMAN Some protein")
    ('P12345', 'sp|P12345|NAME_HUMAN Some protein')

    >>> parse_protein_id("PROT123 Description here")
    ('PROT123', 'PROT123 Description here')
    """
    description = header.strip()

    if '|' in header:
        parts = header.split('|')
        # Decoy tags are usually glued to the database field: DECOY_sp|P12345|...
        # Keep them on the accession so prefix-based classification still works.
        prefix = ''
        for tag in decoy_prefixes:
            if parts[0].startswith(tag):
                prefix = tag
                break
        protein_id = prefix + parts[1]
    else:
        fields = header.split()
        protein_id = fields[0] if fields else ''

    return protein_id, description


def read_fasta(
    fasta_path: Union[str, Path],
    min_length: int = 0,
    decoy_prefixes: Sequence[str] = DEFAULT_DECOY_PREFIXES,
) -> List[Tuple[str, str, str]]:
    """Read FASTA file and return list of (protein_id, sequence, description).

    Parameters
    ----------
    fasta_path : str or Path
        Path to FASTA file
    min_length : int
        Minimum protein length (default: 0, no filter)
    decoy_prefixes : sequence of str
        Decoy tags passed to parse_protein_id

    Returns
    -------
    proteins : List[Tuple[str, str, str]]
        List of (protein_id, sequence, description) tuples
    """
    fasta_path = Path(fasta_path)

    if not fasta_path.exists():
        raise FileNotFoundError(f"FASTA file not found: {fasta_path}")

    logger.info(f"Reading FASTA file: {fasta_path.name}")

    proteins = []
    current_id = None
    current_description = None
    current_seq = []

    with open(fasta_path) as f:
        for line in f:
            if line.startswith('>'):
                if current_id and current_seq:
                    sequence = ''.join(current_seq)
                    if len(sequence) >= min_length:
                        proteins.append((current_id, sequence, current_description))

                header = line[1:].strip()
                current_id, current_description = parse_protein_id(header, decoy_prefixes)
                current_seq = []
            else:
                current_seq.append(line.strip())

        # Last entry has no following header
        if current_id and current_seq:
            sequence = ''.join(current_seq)
            if len(sequence) >= min_length:
                proteins.append((current_id, sequence, current_description))

    logger.info(f"✓ Read {len(proteins):,} proteins from {fasta_path.name}")

    return proteins


def records_from_tuples(
    proteins: Sequence[Tuple[str, str, str]],
) -> List[ProteinRecord]:
    """Wrap (protein_id, sequence, description) tuples as ProteinRecords."""
    return [
        ProteinRecord(accession=protein_id, sequence=sequence, description=description)
        for protein_id, sequence, description in proteins
    ]


def records_from_fasta(
    fasta_paths: Union[str, Path, List[Union[str, Path]]],
    min_length: int = 0,
    decoy_prefixes: Sequence[str] = DEFAULT_DECOY_PREFIXES,
) -> List[ProteinRecord]:
    """Read one or more FASTA files into ProteinRecords.

    Parameters
    ----------
    fasta_paths : str, Path or list of them
        FASTA file(s) to read, concatenated in the given order
    min_length : int
        Minimum protein length
    decoy_prefixes : sequence of str
        Decoy tags kept on accessions

    Returns
    -------
    records : List[ProteinRecord]
        Candidate proteins in file order
    """
    if isinstance(fasta_paths, (str, Path)):
        fasta_paths = [fasta_paths]

    records = []
    for fasta_path in fasta_paths:
        proteins = read_fasta(fasta_path, min_length=min_length, decoy_prefixes=decoy_prefixes)
        records.extend(records_from_tuples(proteins))

    if len(fasta_paths) > 1:
        logger.info(f"✓ Combined {len(records):,} proteins from {len(fasta_paths)} files")

    return records
