"""ISD and MSD group construction by connected-component traversal.

The graph is flattened into CSR arrays (combined protein + peptide node
numbering, see ``entries``) and traversed with a Numba-compiled iterative
depth-first search. Neighbours are expanded in insertion order, so the visit
order equals that of a recursive traversal and group numbering and member
order are fully deterministic.

- ISD groups: components of the full graph, seeded by ascending protein index
- MSD groups: components of the subgraph of proteins and experimental
  peptides, computed per ISD group, again seeded by ascending protein index
"""

import logging
from typing import List, Optional, Tuple

import numpy as np
from numba import njit

from ..exceptions import InconsistentAdjacencyError
from .entries import EntryStore, ISDGroup, MSDGroup

logger = logging.getLogger(__name__)


# =============================================================================
# Graph Flattening
# =============================================================================

def adjacency_csr(store: EntryStore) -> Tuple[np.ndarray, np.ndarray]:
    """Flatten the bipartite graph into CSR arrays.

    Returns
    -------
    indptr : np.ndarray (int64)
        Neighbours of node n are ``indices[indptr[n]:indptr[n + 1]]``
    indices : np.ndarray (int64)
        Neighbour node ids, in adjacency insertion order
    """
    n_proteins = store.n_proteins

    degrees = np.zeros(store.n_nodes, dtype=np.int64)
    for protein in store.proteins:
        degrees[protein.index] = len(protein.peptides)
    for peptide in store.peptides:
        degrees[n_proteins + peptide.index] = len(peptide.proteins)

    indptr = np.zeros(store.n_nodes + 1, dtype=np.int64)
    np.cumsum(degrees, out=indptr[1:])

    indices = np.empty(indptr[-1], dtype=np.int64)
    for protein in store.proteins:
        start = indptr[protein.index]
        indices[start:start + len(protein.peptides)] = np.asarray(protein.peptides, dtype=np.int64) + n_proteins
    for peptide in store.peptides:
        start = indptr[n_proteins + peptide.index]
        indices[start:start + len(peptide.proteins)] = peptide.proteins

    return indptr, indices


# =============================================================================
# Core Traversal (Numba-Compiled)
# =============================================================================

@njit
def traverse_components(
    indptr: np.ndarray,
    indices: np.ndarray,
    seeds: np.ndarray,
    active: np.ndarray,
    traversed: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """Collect connected components by depth-first search.

    Parameters
    ----------
    indptr, indices : np.ndarray (int64)
        CSR adjacency from ``adjacency_csr()``
    seeds : np.ndarray (int64)
        Start nodes, tried in the given order
    active : np.ndarray (bool)
        Nodes allowed in a component; inactive nodes are never entered
    traversed : np.ndarray (bool)
        Traversal bitset, updated in place

    Returns
    -------
    order : np.ndarray (int64)
        Visited nodes, component after component, in visit order
    bounds : np.ndarray (int64)
        Component k is ``order[bounds[k]:bounds[k + 1]]``

    Notes
    -----
    Every node is pushed at most once per incident edge, so the stack never
    exceeds ``len(indices) + 1`` entries. Runs in O(nodes + edges).
    """
    n_nodes = len(traversed)
    order = np.empty(n_nodes, dtype=np.int64)
    bounds = np.empty(n_nodes + 1, dtype=np.int64)
    stack = np.empty(len(indices) + 1, dtype=np.int64)

    n_visited = 0
    n_components = 0
    bounds[0] = 0

    for s in range(len(seeds)):
        seed = seeds[s]
        if traversed[seed] or not active[seed]:
            continue

        stack[0] = seed
        top = 1
        while top > 0:
            top -= 1
            node = stack[top]
            if traversed[node]:
                continue
            traversed[node] = True
            order[n_visited] = node
            n_visited += 1

            # Push in reverse so the first neighbour is expanded first
            for k in range(indptr[node + 1] - 1, indptr[node] - 1, -1):
                neighbour = indices[k]
                if active[neighbour] and not traversed[neighbour]:
                    stack[top] = neighbour
                    top += 1

        n_components += 1
        bounds[n_components] = n_visited

    return order[:n_visited], bounds[:n_components + 1]


# =============================================================================
# Group Construction
# =============================================================================

def build_isd_groups(
    store: EntryStore,
    adjacency: Optional[Tuple[np.ndarray, np.ndarray]] = None,
) -> List[ISDGroup]:
    """Partition the full graph into ISD groups.

    Experimental and theoretical peptides are treated alike. Every protein
    and peptide ends up in exactly one group; ``isd_group`` is set on each
    entry.

    Raises
    ------
    InconsistentAdjacencyError
        If a peptide is not reachable from any protein
    """
    indptr, indices = adjacency if adjacency is not None else adjacency_csr(store)

    seeds = np.arange(store.n_proteins, dtype=np.int64)
    active = np.ones(store.n_nodes, dtype=np.bool_)
    traversed = store.new_traversal()

    order, bounds = traverse_components(indptr, indices, seeds, active, traversed)

    if not traversed.all():
        orphan = int(np.flatnonzero(~traversed)[0]) - store.n_proteins
        raise InconsistentAdjacencyError(f"Peptide {orphan} is not linked to any protein")

    isd_groups = []
    for k in range(len(bounds) - 1):
        group = ISDGroup(index=k)
        _split_members(order[bounds[k]:bounds[k + 1]], store.n_proteins, group)
        for p in group.proteins:
            store.proteins[p].isd_group = k
        for q in group.peptides:
            store.peptides[q].isd_group = k
        isd_groups.append(group)

    logger.info(f"✓ Built {len(isd_groups):,} ISD groups")

    return isd_groups


def experimental_mask(store: EntryStore) -> np.ndarray:
    """Nodes taking part in MSD grouping.

    Experimental peptides, and proteins with at least one experimental peptide.
    """
    active = store.new_traversal()
    for peptide in store.peptides:
        if peptide.experimental:
            active[store.peptide_node(peptide.index)] = True
            active[peptide.proteins] = True
    return active


def build_msd_groups(
    store: EntryStore,
    isd_groups: List[ISDGroup],
    adjacency: Optional[Tuple[np.ndarray, np.ndarray]] = None,
) -> List[MSDGroup]:
    """Partition the experimental subgraph of each ISD group into MSD groups.

    Theoretical peptides break the graph: they are never entered. Entries
    without experimental edges are left out (``msd_group`` stays -1). Each
    new group index is appended to its parent's ``msd_groups``.
    """
    indptr, indices = adjacency if adjacency is not None else adjacency_csr(store)

    active = experimental_mask(store)
    traversed = store.new_traversal()

    msd_groups = []
    for isd_group in isd_groups:
        seeds = np.array(sorted(isd_group.proteins), dtype=np.int64)
        order, bounds = traverse_components(indptr, indices, seeds, active, traversed)

        for k in range(len(bounds) - 1):
            group = MSDGroup(index=len(msd_groups), isd_group=isd_group.index)
            _split_members(order[bounds[k]:bounds[k + 1]], store.n_proteins, group)
            for p in group.proteins:
                store.proteins[p].msd_group = group.index
            for q in group.peptides:
                store.peptides[q].msd_group = group.index
            isd_group.msd_groups.append(group.index)
            msd_groups.append(group)

    logger.info(
        f"✓ Built {len(msd_groups):,} MSD groups "
        f"({int(active[:store.n_proteins].sum()):,} proteins with experimental support)"
    )

    return msd_groups


def _split_members(nodes: np.ndarray, n_proteins: int, group) -> None:
    """Append node ids to a group's protein and peptide lists, keeping order."""
    for node in nodes.tolist():
        if node < n_proteins:
            group.proteins.append(node)
        else:
            group.peptides.append(node - n_proteins)
