"""Sequence database collaborators of the resolver.

- FASTA file reading into ProteinRecords
- In silico digestion (trypsin and related enzymes, missed cleavages)
- Target/decoy classification by accession convention
- Decoy protein generation for concatenated databases
"""

from .fasta_reader import (
    ProteinRecord,
    read_fasta,
    parse_protein_id,
    records_from_tuples,
    records_from_fasta,
)

from .digestion import (
    digest_protein,
    make_digestor,
)

from .decoys import (
    is_decoy_accession,
    make_decoy_classifier,
    generate_reverse_decoy,
    generate_pseudo_reverse_decoy,
    generate_kr_swap_decoy,
    generate_decoy_records,
)

__all__ = [
    # FASTA reading
    'ProteinRecord',
    'read_fasta',
    'parse_protein_id',
    'records_from_tuples',
    'records_from_fasta',

    # Protein digestion
    'digest_protein',
    'make_digestor',

    # Target/decoy
    'is_decoy_accession',
    'make_decoy_classifier',
    'generate_reverse_decoy',
    'generate_pseudo_reverse_decoy',
    'generate_kr_swap_decoy',
    'generate_decoy_records',
]
