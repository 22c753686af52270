"""Resolver parameters.

Single dataclass holding everything that steers digestion, evidence matching
and target/decoy classification. Mirrors the parameter objects used in the
feature modules: plain defaults, one validation method, and presets via
classmethods.
"""

from dataclasses import dataclass
from typing import Tuple

from .constants import DEFAULT_DECOY_PREFIXES, ENZYME_RULES


@dataclass
class ResolverParams:
    """Parameters for protein/peptide group resolution.

    Attributes
    ----------
    enzyme : str
        Protease used for in silico digestion (see ``ENZYME_RULES``)
    missed_cleavages : int
        Number of missed cleavages allowed during digestion
    min_length : int
        Minimum peptide length kept after digestion
    max_length : int
        Maximum peptide length kept after digestion
    decoy_prefixes : Tuple[str, ...]
        Accession prefixes identifying decoy proteins
    match_undigested : bool
        Link experimental peptides that digestion did not produce to every
        protein whose sequence contains them
    """

    enzyme: str = 'trypsin'
    missed_cleavages: int = 2
    min_length: int = 7
    max_length: int = 35
    decoy_prefixes: Tuple[str, ...] = DEFAULT_DECOY_PREFIXES
    match_undigested: bool = True

    def validate(self) -> None:
        """Raise ValueError if any parameter is out of range."""
        if self.enzyme.lower() not in ENZYME_RULES:
            raise ValueError(
                f"Unknown enzyme: {self.enzyme}. "
                f"Must be one of {sorted(ENZYME_RULES)}"
            )
        if self.missed_cleavages < 0:
            raise ValueError(f"missed_cleavages must be >= 0, got {self.missed_cleavages}")
        if self.min_length < 1:
            raise ValueError(f"min_length must be >= 1, got {self.min_length}")
        if self.max_length < self.min_length:
            raise ValueError(
                f"max_length ({self.max_length}) must be >= min_length ({self.min_length})"
            )

    @classmethod
    def for_enzyme(cls, enzyme: str) -> 'ResolverParams':
        """Create parameters with enzyme-specific defaults.

        Args:
            enzyme: Enzyme name, case-insensitive

        Returns:
            ResolverParams for the enzyme
        """
        enzyme = enzyme.lower()
        if enzyme in ('trypsin', 'trypsin/p'):
            return cls(enzyme=enzyme, missed_cleavages=2)
        elif enzyme in ('lys-c', 'arg-c'):
            # Fewer cleavage sites → longer peptides, fewer missed cleavages
            return cls(enzyme=enzyme, missed_cleavages=1, max_length=50)
        else:
            raise ValueError(f"Unknown enzyme: {enzyme}")
