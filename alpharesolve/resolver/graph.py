"""Construction of the bipartite protein–peptide graph.

The in silico side is built by digesting every candidate protein; experimental
evidence is then laid on top of it from either an identification list or a
consensus map. Both evidence paths mark matching peptide entries as
experimental and keep a reference back to the hit that produced them.
"""

import logging
from typing import Callable, List, Optional, Sequence

from .entries import EntryStore, PeptideEntry
from .evidence import ConsensusMap, PeptideIdentification

logger = logging.getLogger(__name__)


def build_insilico_graph(
    store: EntryStore,
    digest: Callable[[str], List[str]],
) -> None:
    """Digest all proteins and link them to their theoretical peptides.

    Peptide entries are created on first occurrence of a sequence and are
    indexed in order of creation (protein order, then digestion order).
    A sequence shared by several proteins yields one entry with several edges.

    Parameters
    ----------
    store : EntryStore
        Store holding the protein entries; peptides are appended to it
    digest : Callable[[str], List[str]]
        Digestion collaborator mapping a protein sequence to its peptides
    """
    logger.info(f"Digesting {store.n_proteins:,} proteins...")

    seq_to_index = {}
    total_peptides_generated = 0

    for protein in store.proteins:
        peptides = digest(protein.sequence)
        total_peptides_generated += len(peptides)

        for sequence in peptides:
            index = seq_to_index.get(sequence)
            if index is None:
                index = store.add_peptide(sequence)
                seq_to_index[sequence] = index

            # Proteins are processed in index order, so a repeat edge can
            # only be the most recent one
            entry = store.peptides[index]
            if entry.proteins and entry.proteins[-1] == protein.index:
                continue
            store.link(protein.index, index)

        if (protein.index + 1) % 5000 == 0:
            logger.info(
                f"  Processed {protein.index + 1:,} proteins: "
                f"{store.n_peptides:,} unique peptides"
            )

    store.build_sequence_index()

    shared_peptides = sum(1 for entry in store.peptides if len(entry.proteins) > 1)
    logger.info(
        f"✓ In silico graph: {store.n_proteins:,} proteins, "
        f"{store.n_peptides:,} unique peptides "
        f"({total_peptides_generated:,} generated, {shared_peptides:,} shared)"
    )


def include_identifications(
    store: EntryStore,
    peptide_identifications: Sequence[PeptideIdentification],
    match_undigested: bool = True,
) -> int:
    """Mark peptides backed by identification hits as experimental.

    Parameters
    ----------
    store : EntryStore
        Store with the in silico graph already built
    peptide_identifications : Sequence[PeptideIdentification]
        Identification list; every hit of every identification is used
    match_undigested : bool
        Link sequences missing from the digest by sequence containment

    Returns
    -------
    n_found : int
        Number of hits matched to a peptide entry
    """
    n_found = 0
    n_hits = 0

    for i, identification in enumerate(peptide_identifications):
        for j, hit in enumerate(identification.hits):
            n_hits += 1
            index = _match_sequence(store, hit.sequence, match_undigested)
            if index is None:
                continue
            _mark_experimental(store.peptides[index], i, j, identification.identifier, None)
            n_found += 1

    _log_matching(n_found, n_hits, store)
    return n_found


def include_consensus(
    store: EntryStore,
    consensus: ConsensusMap,
    match_undigested: bool = True,
) -> int:
    """Mark peptides annotated on consensus features as experimental.

    Each matched peptide receives the intensity of its feature. A sequence
    annotated on several features keeps the reference to the first one and
    accumulates the intensities of all of them. A feature adds its intensity
    to a peptide once, even when several of its hits carry the sequence.

    Returns
    -------
    n_found : int
        Number of hits matched to a peptide entry
    """
    n_found = 0
    n_hits = 0

    for i, feature in enumerate(consensus.features):
        counted = set()
        for j, hit in enumerate(feature.hits):
            n_hits += 1
            index = _match_sequence(store, hit.sequence, match_undigested)
            if index is None:
                continue
            n_found += 1
            if index in counted:
                continue
            counted.add(index)
            _mark_experimental(
                store.peptides[index], i, j, consensus.identifier, float(feature.intensity)
            )

    _log_matching(n_found, n_hits, store)
    return n_found


def _match_sequence(
    store: EntryStore,
    sequence: str,
    match_undigested: bool,
) -> Optional[int]:
    """Find (or create by containment) the peptide entry for a sequence."""
    index = store.find_peptide_entry(sequence)
    if index < store.n_peptides:
        return index

    if not match_undigested or not sequence:
        logger.debug(f"Peptide {sequence} not found in digest")
        return None

    containing = [protein.index for protein in store.proteins if sequence in protein.sequence]
    if not containing:
        logger.debug(f"Peptide {sequence} not contained in any protein")
        return None

    index = store.add_peptide(sequence)
    for protein_index in containing:
        store.link(protein_index, index)
    return index


def _mark_experimental(
    entry: PeptideEntry,
    identification_index: int,
    hit_index: int,
    origin: str,
    intensity: Optional[float],
) -> None:
    if not entry.experimental:
        entry.experimental = True
        entry.peptide_identification = identification_index
        entry.peptide_hit = hit_index
        entry.origin = origin
        entry.intensity = intensity
    elif intensity is not None:
        entry.intensity = intensity if entry.intensity is None else entry.intensity + intensity


def _log_matching(n_found: int, n_hits: int, store: EntryStore) -> None:
    n_experimental = sum(1 for entry in store.peptides if entry.experimental)
    logger.info(
        f"✓ Matched {n_found:,} of {n_hits:,} peptide hits "
        f"({n_experimental:,} experimental peptides)"
    )
