"""Pytest configuration for AlphaResolve tests.

Graph tests use a lookup-table digestion so that the theoretical peptides of
every protein are spelled out in the test itself instead of depending on
cleavage rules.
"""

import pytest

from alpharesolve.database import ProteinRecord
from alpharesolve.resolver import (
    EntryStore,
    PeptideHit,
    PeptideIdentification,
    build_insilico_graph,
)


def _make_digest(table):
    def digest(sequence):
        return list(table.get(sequence, []))
    return digest


def _make_identifications(sequences, identifier="run1"):
    return [
        PeptideIdentification(hits=[PeptideHit(sequence)], identifier=identifier)
        for sequence in sequences
    ]


@pytest.fixture
def make_digest():
    """Digestion collaborator backed by a {protein sequence: peptides} table."""
    return _make_digest


@pytest.fixture
def make_identifications():
    """One identification with a single hit per sequence."""
    return _make_identifications


@pytest.fixture
def shared_peptide_proteins():
    """Two proteins sharing TAYIAK, each with one peptide of its own.

    A: MKTAYIAKLLGR → TAYIAK, LLGR
    B: MKTAYIAKQR   → TAYIAK, QR
    """
    records = [
        ProteinRecord("A", "MKTAYIAKLLGR"),
        ProteinRecord("B", "MKTAYIAKQR"),
    ]
    table = {
        "MKTAYIAKLLGR": ["TAYIAK", "LLGR"],
        "MKTAYIAKQR": ["TAYIAK", "QR"],
    }
    return records, _make_digest(table)


@pytest.fixture
def mixed_proteins():
    """Five proteins covering every classification outcome.

    P0: unique peptide U0, shares S01 with P1        → primary
    P1: only S01 (shared with P0)                    → secondary
    P2, P3: identical sets {S23, X23}                → primary_indistinguishable
    P4: unrelated, only theoretical peptide T4       → no experimental support
    """
    records = [
        ProteinRecord("P0", "PROTZERO"),
        ProteinRecord("P1", "PROTONE"),
        ProteinRecord("P2", "PROTTWO"),
        ProteinRecord("P3", "PROTTHREE"),
        ProteinRecord("P4", "PROTFOUR"),
    ]
    table = {
        "PROTZERO": ["U0", "S01"],
        "PROTONE": ["S01"],
        "PROTTWO": ["S23", "X23"],
        "PROTTHREE": ["S23", "X23"],
        "PROTFOUR": ["T4"],
    }
    return records, _make_digest(table)


@pytest.fixture
def built_store(mixed_proteins):
    """EntryStore with the in silico graph of ``mixed_proteins``."""
    records, digest = mixed_proteins
    store = EntryStore.from_records(records)
    build_insilico_graph(store, digest)
    return store
