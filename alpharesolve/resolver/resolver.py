"""Protein resolver: ISD/MSD grouping of proteins from peptide evidence.

Pipeline of one ``resolve`` call:

1. Entry store from the candidate proteins
2. In silico graph (digestion) + experimental evidence
3. ISD groups (full graph)
4. MSD groups (experimental subgraph of each ISD group)
5. Reindexing, then protein classification
6. Target/decoy counts, MSD intensities, protein weight and coverage

Results accumulate across calls until ``clear_results()``.

Examples
--------
>>> from alpharesolve.database import ProteinRecord
>>> from alpharesolve.resolver import ProteinResolver, PeptideIdentification, PeptideHit
>>> resolver = ProteinResolver()
>>> resolver.set_protein_data([ProteinRecord("P1", "MPEPTIDEKAAGGSSLLR")])
>>> result = resolver.resolve([PeptideIdentification([PeptideHit("AAGGSSLLR")])])
>>> len(result.msd_groups)
1
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np

from ..config import ResolverParams
from ..database.decoys import make_decoy_classifier
from ..database.digestion import make_digestor
from ..database.fasta_reader import ProteinRecord
from ..exceptions import EvidenceTypeError
from .classification import classify_proteins, reindex_nodes
from .clustering import adjacency_csr, build_isd_groups, build_msd_groups
from .entries import EntryStore, ISDGroup, MSDGroup, PeptideEntry, ProteinEntry
from .evidence import (
    ConsensusMap,
    Evidence,
    InputType,
    PeptideIdentification,
    get_peptide_hit,
    get_peptide_identification,
)
from .graph import build_insilico_graph, include_consensus, include_identifications
from .statistics import annotate_proteins, compute_msd_intensity, count_target_decoy

logger = logging.getLogger(__name__)


@dataclass
class ResolverResult:
    """Output of one resolution run."""

    identifier: str
    isd_groups: List[ISDGroup]
    msd_groups: List[MSDGroup]
    protein_entries: List[ProteinEntry]
    peptide_entries: List[PeptideEntry]
    reindexed_proteins: np.ndarray
    reindexed_peptides: np.ndarray
    input_type: InputType
    evidence: Evidence

    def get_peptide_identification(self, peptide: PeptideEntry):
        """Identification (or consensus feature) behind an experimental peptide."""
        return get_peptide_identification(self.evidence, peptide)

    def get_peptide_hit(self, peptide: PeptideEntry):
        """Peptide hit behind an experimental peptide."""
        return get_peptide_hit(self.evidence, peptide)

    def msd_proteins(self, msd_index: int) -> List[ProteinEntry]:
        """Protein entries of one MSD group, in member order."""
        return [self.protein_entries[p] for p in self.msd_groups[msd_index].proteins]

    def msd_peptides(self, msd_index: int) -> List[PeptideEntry]:
        """Peptide entries of one MSD group, in member order."""
        return [self.peptide_entries[q] for q in self.msd_groups[msd_index].peptides]


class ProteinResolver:
    """Resolve protein groups from identifications or consensus maps.

    Parameters
    ----------
    params : ResolverParams, optional
        Digestion, matching and decoy settings
    digest : Callable[[str], List[str]], optional
        Digestion collaborator; defaults to ``make_digestor(params)``
    is_decoy : Callable[[ProteinRecord], bool], optional
        Target/decoy classifier; defaults to the accession prefix convention
    """

    def __init__(
        self,
        params: Optional[ResolverParams] = None,
        digest: Optional[Callable[[str], List[str]]] = None,
        is_decoy: Optional[Callable[[ProteinRecord], bool]] = None,
    ):
        self.params = params if params is not None else ResolverParams()
        self.params.validate()

        self.digest = digest if digest is not None else make_digestor(self.params)
        self.is_decoy = is_decoy if is_decoy is not None else make_decoy_classifier(self.params.decoy_prefixes)

        self._protein_data: List[ProteinRecord] = []
        self._results: List[ResolverResult] = []

    def set_protein_data(self, protein_data: Sequence[ProteinRecord]) -> None:
        """Set the candidate proteins used by subsequent runs."""
        self._protein_data = list(protein_data)
        logger.info(f"Protein data set: {len(self._protein_data):,} proteins")

    def get_results(self) -> List[ResolverResult]:
        """All results produced since the last ``clear_results()``, in call order."""
        return self._results

    def clear_results(self) -> None:
        """Discard all accumulated results."""
        self._results = []

    def resolve(self, evidence: Evidence, identifier: Optional[str] = None) -> ResolverResult:
        """Resolve from either evidence source.

        Parameters
        ----------
        evidence : ConsensusMap or sequence of PeptideIdentification
            Peptide evidence of one run
        identifier : str, optional
            Result identifier; defaults to the evidence's own identifier

        Raises
        ------
        EvidenceTypeError
            If evidence is of neither kind
        """
        if isinstance(evidence, ConsensusMap):
            return self.resolve_consensus(evidence, identifier)
        if isinstance(evidence, (list, tuple)) and all(
            isinstance(item, PeptideIdentification) for item in evidence
        ):
            return self.resolve_id(evidence, identifier)
        raise EvidenceTypeError(
            f"Expected a ConsensusMap or a list of PeptideIdentification, "
            f"got {type(evidence).__name__}"
        )

    def resolve_id(
        self,
        peptide_identifications: Sequence[PeptideIdentification],
        identifier: Optional[str] = None,
    ) -> ResolverResult:
        """Compute ISD and MSD groups from an identification list."""
        if identifier is None:
            identifier = peptide_identifications[0].identifier if peptide_identifications else ''

        return self._run(
            identifier,
            InputType.PEPTIDE_IDENT,
            peptide_identifications,
            lambda store: include_identifications(
                store, peptide_identifications, self.params.match_undigested
            ),
        )

    def resolve_consensus(
        self,
        consensus: ConsensusMap,
        identifier: Optional[str] = None,
    ) -> ResolverResult:
        """Compute ISD and MSD groups from a consensus map."""
        if identifier is None:
            identifier = consensus.identifier

        return self._run(
            identifier,
            InputType.CONSENSUS,
            consensus,
            lambda store: include_consensus(store, consensus, self.params.match_undigested),
        )

    def _run(
        self,
        identifier: str,
        input_type: InputType,
        evidence: Evidence,
        include_evidence: Callable[[EntryStore], int],
    ) -> ResolverResult:
        logger.info(f"Resolving protein groups for '{identifier}' ({input_type.value})")

        if not self._protein_data:
            logger.warning("No protein data set; result will contain no groups")

        store = EntryStore.from_records(self._protein_data)
        build_insilico_graph(store, self.digest)

        n_found = include_evidence(store)
        if n_found == 0:
            logger.warning("No peptide evidence matched; result will contain no MSD groups")

        store.check_adjacency()

        adjacency = adjacency_csr(store)
        isd_groups = build_isd_groups(store, adjacency)
        msd_groups = build_msd_groups(store, isd_groups, adjacency)

        reindexed = reindex_nodes(msd_groups, store.n_proteins, store.n_peptides)
        classify_proteins(store, reindexed)

        count_target_decoy(msd_groups, store, self.is_decoy)
        compute_msd_intensity(msd_groups, store)
        annotate_proteins(store)

        result = ResolverResult(
            identifier=identifier,
            isd_groups=isd_groups,
            msd_groups=msd_groups,
            protein_entries=store.proteins,
            peptide_entries=store.peptides,
            reindexed_proteins=reindexed.reindexed_proteins,
            reindexed_peptides=reindexed.reindexed_peptides,
            input_type=input_type,
            evidence=evidence,
        )
        self._results.append(result)

        logger.info(
            f"✓ Resolved '{identifier}': {len(isd_groups):,} ISD groups, "
            f"{len(msd_groups):,} MSD groups"
        )

        return result
