#!/usr/bin/env python
"""Resolve protein groups for a FASTA database and a peptide table.

The peptide table is a TSV with a 'sequence' column and an optional
'intensity' column. With intensities, every row becomes a quantified
feature (rows with a blank intensity are skipped); without, every row
becomes one identification.

Writes one line per MSD group: group indices, target/decoy counts,
median intensity and member proteins with their classification.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import argparse
import csv
import logging

from alpharesolve.config import ResolverParams
from alpharesolve.database import generate_decoy_records, records_from_fasta
from alpharesolve.resolver import (
    ProteinResolver,
    read_peptide_table,
)


def main():
    parser = argparse.ArgumentParser(description='Resolve ISD/MSD protein groups')
    parser.add_argument('--fasta', type=str, required=True, nargs='+',
                       help='FASTA file(s) with candidate proteins')
    parser.add_argument('--peptides', type=str, required=True,
                       help="Peptide TSV with 'sequence' and optional 'intensity' column")
    parser.add_argument('--output', type=str, default='./msd_groups.tsv',
                       help='Output TSV with one row per MSD group')
    parser.add_argument('--enzyme', type=str, default='trypsin',
                       help='Digestion enzyme')
    parser.add_argument('--missed-cleavages', type=int, default=2,
                       help='Missed cleavages allowed during digestion')
    parser.add_argument('--min-length', type=int, default=7,
                       help='Minimum peptide length')
    parser.add_argument('--max-length', type=int, default=35,
                       help='Maximum peptide length')
    parser.add_argument('--add-decoys', choices=['reverse', 'pseudo_reverse', 'kr_swap'],
                       default=None, help='Append generated decoy proteins')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    params = ResolverParams(
        enzyme=args.enzyme,
        missed_cleavages=args.missed_cleavages,
        min_length=args.min_length,
        max_length=args.max_length,
    )

    records = records_from_fasta(
        [Path(p).expanduser() for p in args.fasta],
        decoy_prefixes=params.decoy_prefixes,
    )
    if args.add_decoys:
        records = records + generate_decoy_records(records, method=args.add_decoys)

    evidence = read_peptide_table(Path(args.peptides).expanduser())

    resolver = ProteinResolver(params)
    resolver.set_protein_data(records)
    result = resolver.resolve(evidence)

    output_path = Path(args.output).expanduser()
    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f, delimiter='\t')
        writer.writerow([
            'msd_group', 'isd_group', 'n_target', 'n_decoy', 'n_target_plus_decoy',
            'intensity', 'n_peptides', 'proteins', 'protein_types',
        ])
        for group in result.msd_groups:
            proteins = result.msd_proteins(group.index)
            writer.writerow([
                group.index,
                group.isd_group,
                group.number_of_target,
                group.number_of_decoy,
                group.number_of_target_plus_decoy,
                f"{group.intensity:.6g}",
                len(group.peptides),
                ';'.join(protein.accession for protein in proteins),
                ';'.join(protein.protein_type.value for protein in proteins),
            ])

    print(f"✓ Wrote {len(result.msd_groups):,} MSD groups to {output_path}")


if __name__ == '__main__':
    main()
