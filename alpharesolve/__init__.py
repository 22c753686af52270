"""AlphaResolve - protein group resolution from peptide evidence.

Groups candidate proteins by the peptides they share: ISD groups over all
in silico peptides, MSD groups over experimentally observed peptides, with
primary/secondary/indistinguishable classification and per-group
target/decoy counts and intensities.
"""

__version__ = "0.1.0"

from alpharesolve import database
from alpharesolve import resolver
from alpharesolve.config import ResolverParams
from alpharesolve.resolver import ProteinResolver, ResolverResult

__all__ = [
    "database",
    "resolver",
    "ResolverParams",
    "ProteinResolver",
    "ResolverResult",
]
