"""Exceptions raised by the resolver.

Absence of data (no proteins, no evidence, unknown sequences) is never an
error; these exceptions signal broken contracts or corrupted graph state.
"""


class ResolverError(Exception):
    """Base class for resolver failures."""


class OrderingViolationError(ResolverError):
    """Classification was requested without a matching reindexing step."""


class InconsistentAdjacencyError(ResolverError):
    """A protein–peptide edge is only recorded on one side of the graph."""


class EvidenceTypeError(ResolverError, TypeError):
    """Peptide evidence is neither an identification list nor a consensus map."""
