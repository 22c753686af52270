"""Peptide evidence consumed by the resolver.

Two interchangeable sources exist:
- an identification list: PeptideIdentifications, each holding ranked hits
- a consensus map: quantified features, each holding annotated hits and
  the feature intensity

Peptide entries keep (record index, hit index) pairs pointing back into the
source they were built from; the accessors at the bottom resolve them.
read_peptide_table loads either source from a tab-separated peptide table.
"""

import csv
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Union

logger = logging.getLogger(__name__)


class InputType(Enum):
    """Kind of evidence a ResolverResult was built from."""
    PEPTIDE_IDENT = "peptide_ident"
    CONSENSUS = "consensus"


@dataclass
class PeptideHit:
    """One peptide sequence assigned to a spectrum or feature."""

    sequence: str
    score: float = 0.0
    charge: int = 0


@dataclass
class PeptideIdentification:
    """Peptide hits of one spectrum within an identification run."""

    hits: List[PeptideHit] = field(default_factory=list)
    identifier: str = ''  # run identifier


@dataclass
class ConsensusFeature:
    """Quantified feature annotated with zero or more peptide hits."""

    intensity: float
    hits: List[PeptideHit] = field(default_factory=list)
    mz: float = 0.0
    rt: float = 0.0


@dataclass
class ConsensusMap:
    """Collection of consensus features from one quantification run."""

    features: List[ConsensusFeature] = field(default_factory=list)
    identifier: str = ''


Evidence = Union[Sequence[PeptideIdentification], ConsensusMap]


def get_peptide_identification(evidence: Evidence, peptide) -> Optional[Union[PeptideIdentification, ConsensusFeature]]:
    """Return the identification (or feature) a peptide entry was built from.

    Parameters
    ----------
    evidence : list of PeptideIdentification or ConsensusMap
        The evidence the ResolverResult was built from
    peptide : PeptideEntry
        Entry from that result

    Returns
    -------
    record : PeptideIdentification, ConsensusFeature or None
        None for purely theoretical peptides
    """
    if not peptide.experimental:
        return None
    if isinstance(evidence, ConsensusMap):
        return evidence.features[peptide.peptide_identification]
    return evidence[peptide.peptide_identification]


def get_peptide_hit(evidence: Evidence, peptide) -> Optional[PeptideHit]:
    """Return the peptide hit a peptide entry was built from (None if theoretical)."""
    record = get_peptide_identification(evidence, peptide)
    if record is None:
        return None
    return record.hits[peptide.peptide_hit]


def read_peptide_table(peptide_path: Union[str, Path]) -> Evidence:
    """Read a peptide TSV as a ConsensusMap or an identification list.

    The table needs a 'sequence' column. With an 'intensity' column every
    row becomes a quantified feature (rows with a blank intensity are
    skipped); without, every row becomes one identification. The file stem
    is used as run identifier.
    """
    peptide_path = Path(peptide_path)

    with open(peptide_path, 'r') as f:
        reader = csv.DictReader(f, delimiter='\t')
        fieldnames = reader.fieldnames or []
        if 'sequence' not in fieldnames:
            raise ValueError(f"{peptide_path} has no 'sequence' column")
        rows = list(reader)

    identifier = peptide_path.stem
    if 'intensity' in fieldnames:
        features = []
        n_blank = 0
        for row in rows:
            value = (row['intensity'] or '').strip()
            if not value:
                n_blank += 1
                continue
            features.append(
                ConsensusFeature(intensity=float(value), hits=[PeptideHit(row['sequence'])])
            )
        if n_blank:
            logger.warning(f"Skipped {n_blank:,} rows without intensity in {peptide_path.name}")
        return ConsensusMap(features=features, identifier=identifier)

    return [
        PeptideIdentification(hits=[PeptideHit(row['sequence'])], identifier=identifier)
        for row in rows
    ]
