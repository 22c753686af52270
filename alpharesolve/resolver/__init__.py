"""Protein–peptide group resolution.

Builds the bipartite protein–peptide graph, splits it into ISD groups (all
in silico peptides) and MSD groups (experimental peptides only), classifies
proteins and aggregates per-group statistics.
"""

from .entries import (
    EntryStore,
    ProteinEntry,
    PeptideEntry,
    ISDGroup,
    MSDGroup,
    ProteinType,
)

from .evidence import (
    InputType,
    PeptideHit,
    PeptideIdentification,
    ConsensusFeature,
    ConsensusMap,
    get_peptide_identification,
    get_peptide_hit,
    read_peptide_table,
)

from .graph import (
    build_insilico_graph,
    include_identifications,
    include_consensus,
)

from .clustering import (
    adjacency_csr,
    traverse_components,
    build_isd_groups,
    build_msd_groups,
)

from .classification import (
    ReindexedNodes,
    reindex_nodes,
    classify_proteins,
)

from .statistics import (
    count_target_decoy,
    median_intensity,
    compute_msd_intensity,
    calculate_protein_weight,
    sequence_coverage,
    annotate_proteins,
)

from .resolver import (
    ProteinResolver,
    ResolverResult,
)

__all__ = [
    # Entries and groups
    'EntryStore',
    'ProteinEntry',
    'PeptideEntry',
    'ISDGroup',
    'MSDGroup',
    'ProteinType',

    # Evidence
    'InputType',
    'PeptideHit',
    'PeptideIdentification',
    'ConsensusFeature',
    'ConsensusMap',
    'get_peptide_identification',
    'get_peptide_hit',
    'read_peptide_table',

    # Graph
    'build_insilico_graph',
    'include_identifications',
    'include_consensus',

    # Clustering
    'adjacency_csr',
    'traverse_components',
    'build_isd_groups',
    'build_msd_groups',

    # Classification
    'ReindexedNodes',
    'reindex_nodes',
    'classify_proteins',

    # Statistics
    'count_target_decoy',
    'median_intensity',
    'compute_msd_intensity',
    'calculate_protein_weight',
    'sequence_coverage',
    'annotate_proteins',

    # Resolver
    'ProteinResolver',
    'ResolverResult',
]
