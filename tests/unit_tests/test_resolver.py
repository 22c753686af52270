"""End-to-end tests for ProteinResolver.

Tests cover:
1. Shared-peptide scenario with and without a bridging observation
2. Consensus input: intensities and median per MSD group
3. Target/decoy counts with generated decoys
4. Determinism across runs
5. Result accumulation, clearing and evidence lookups
6. Empty input
"""

import numpy as np
import pytest

from alpharesolve.config import ResolverParams
from alpharesolve.database import ProteinRecord, generate_decoy_records
from alpharesolve.exceptions import EvidenceTypeError
from alpharesolve.resolver import (
    ConsensusFeature,
    ConsensusMap,
    InputType,
    PeptideHit,
    ProteinResolver,
    ProteinType,
)


@pytest.fixture
def shared_resolver(shared_peptide_proteins):
    records, digest = shared_peptide_proteins
    resolver = ProteinResolver(digest=digest)
    resolver.set_protein_data(records)
    return resolver


class TestSharedPeptideScenario:
    """Two proteins sharing one in silico peptide."""

    def test_two_msd_groups_without_bridge(self, shared_resolver, make_identifications):
        result = shared_resolver.resolve(make_identifications(["LLGR", "QR"]))

        assert len(result.isd_groups) == 1
        assert result.isd_groups[0].proteins == [0, 1]
        assert len(result.isd_groups[0].peptides) == 3
        assert len(result.msd_groups) == 2
        assert [p.protein_type for p in result.protein_entries] == [ProteinType.PRIMARY] * 2

    def test_one_msd_group_with_bridge(self, shared_resolver, make_identifications):
        result = shared_resolver.resolve(make_identifications(["LLGR", "QR", "TAYIAK"]))

        assert len(result.msd_groups) == 1
        assert result.msd_groups[0].proteins == [0, 1]
        assert [p.protein_type for p in result.protein_entries] == [ProteinType.PRIMARY] * 2
        assert result.protein_entries[0].number_of_experimental_peptides == 2

    def test_only_shared_peptide_observed(self, shared_resolver, make_identifications):
        result = shared_resolver.resolve(make_identifications(["TAYIAK"]))

        assert len(result.msd_groups) == 1
        types = [p.protein_type for p in result.protein_entries]
        assert types == [ProteinType.PRIMARY_INDISTINGUISHABLE] * 2
        assert result.protein_entries[0].indis == [1]


class TestResolverOutputs:
    """Test statistics and bookkeeping of full runs."""

    def test_consensus_median_intensity(self, make_digest):
        records = [ProteinRecord("A", "SEQA")]
        resolver = ProteinResolver(digest=make_digest({"SEQA": ["PA", "PB", "PC", "PD"]}))
        resolver.set_protein_data(records)
        consensus = ConsensusMap(
            features=[
                ConsensusFeature(intensity=2.0, hits=[PeptideHit("PA")]),
                ConsensusFeature(intensity=6.0, hits=[PeptideHit("PB")]),
                ConsensusFeature(intensity=4.0, hits=[PeptideHit("PC")]),
            ],
            identifier="map1",
        )

        result = resolver.resolve(consensus)

        assert result.input_type == InputType.CONSENSUS
        assert result.identifier == "map1"
        assert result.msd_groups[0].intensity == pytest.approx(4.0)
        assert result.reindexed_peptides.tolist() == [0, 1, 2, 4]

    def test_identification_run_has_zero_intensity(self, shared_resolver, make_identifications):
        result = shared_resolver.resolve(make_identifications(["LLGR"], identifier="search7"))

        assert result.input_type == InputType.PEPTIDE_IDENT
        assert result.identifier == "search7"
        assert result.msd_groups[0].intensity == 0.0

    def test_target_decoy_counts(self, make_identifications):
        targets = [ProteinRecord("T1", "MAAAGGSSLLRK"), ProteinRecord("T2", "MCCCAAAGGSSLLRK")]
        decoys = [ProteinRecord("DECOY_D1", "WAAAGGSSLLRK")]
        resolver = ProteinResolver(ResolverParams(min_length=5))
        resolver.set_protein_data(targets + decoys)

        result = resolver.resolve(make_identifications(["AAAGGSSLLR"]))

        assert len(result.msd_groups) == 1
        group = result.msd_groups[0]
        assert group.number_of_target == 2
        assert group.number_of_decoy == 1
        assert group.number_of_target_plus_decoy == 3

    def test_generated_decoys_are_separate(self, make_identifications):
        targets = [ProteinRecord("T1", "MPEPTIDEKAAGGSSLLR")]
        records = targets + generate_decoy_records(targets)
        resolver = ProteinResolver()
        resolver.set_protein_data(records)

        result = resolver.resolve(make_identifications(["AAGGSSLLR"]))

        assert len(result.isd_groups) == 2
        assert len(result.msd_groups) == 1
        assert result.msd_groups[0].number_of_decoy == 0
        assert result.reindexed_proteins.tolist() == [0, 2]

    def test_weight_and_coverage(self, make_identifications):
        resolver = ProteinResolver()
        resolver.set_protein_data([ProteinRecord("T1", "MPEPTIDEKAAGGSSLLR")])

        result = resolver.resolve(make_identifications(["AAGGSSLLR"]))

        protein = result.protein_entries[0]
        assert protein.coverage == pytest.approx(0.5)
        assert protein.weight > 1000.0

    def test_peptide_lookups(self, shared_resolver, make_identifications):
        identifications = make_identifications(["QR", "LLGR"])
        result = shared_resolver.resolve(identifications)

        entry = result.peptide_entries[2]
        assert entry.sequence == "QR"
        assert result.get_peptide_identification(entry) is identifications[0]
        assert result.get_peptide_hit(entry).sequence == "QR"
        shared = result.peptide_entries[0]
        assert result.get_peptide_hit(shared) is None

    def test_msd_member_accessors(self, shared_resolver, make_identifications):
        result = shared_resolver.resolve(make_identifications(["LLGR", "QR"]))
        assert [p.accession for p in result.msd_proteins(1)] == ["B"]
        assert [q.sequence for q in result.msd_peptides(0)] == ["LLGR"]


class TestResolverLifecycle:
    """Test determinism, accumulation and edge cases."""

    def test_deterministic(self, mixed_proteins, make_identifications):
        records, digest = mixed_proteins
        evidence = make_identifications(["S23", "U0", "X23", "S01"])

        results = []
        for _ in range(2):
            resolver = ProteinResolver(digest=digest)
            resolver.set_protein_data(records)
            results.append(resolver.resolve(evidence))

        first, second = results
        assert [(g.proteins, g.peptides, g.msd_groups) for g in first.isd_groups] == \
            [(g.proteins, g.peptides, g.msd_groups) for g in second.isd_groups]
        assert [(g.proteins, g.peptides) for g in first.msd_groups] == \
            [(g.proteins, g.peptides) for g in second.msd_groups]
        assert [p.protein_type for p in first.protein_entries] == \
            [p.protein_type for p in second.protein_entries]
        assert np.array_equal(first.reindexed_proteins, second.reindexed_proteins)

    def test_partition_properties(self, mixed_proteins, make_identifications):
        records, digest = mixed_proteins
        resolver = ProteinResolver(digest=digest)
        resolver.set_protein_data(records)
        result = resolver.resolve(make_identifications(["U0", "S23"]))

        isd_members = [p for g in result.isd_groups for p in g.proteins]
        assert sorted(isd_members) == list(range(len(result.protein_entries)))

        msd_members = [p for g in result.msd_groups for p in g.proteins]
        assert len(msd_members) == len(set(msd_members))
        supported = [
            p.index for p in result.protein_entries
            if any(result.peptide_entries[q].experimental for q in p.peptides)
        ]
        assert sorted(msd_members) == supported

        sentinel = len(result.reindexed_proteins)
        for protein in result.protein_entries:
            if protein.index not in supported:
                assert result.reindexed_proteins[protein.index] == sentinel

    def test_peptide_partition_properties(self, mixed_proteins, make_identifications):
        records, digest = mixed_proteins
        resolver = ProteinResolver(digest=digest)
        resolver.set_protein_data(records)
        result = resolver.resolve(make_identifications(["U0", "S23"]))

        isd_peptides = [q for g in result.isd_groups for q in g.peptides]
        assert len(isd_peptides) == len(set(isd_peptides))
        assert sorted(isd_peptides) == list(range(len(result.peptide_entries)))

        msd_peptides = [q for g in result.msd_groups for q in g.peptides]
        assert len(msd_peptides) == len(set(msd_peptides))
        experimental = [q.index for q in result.peptide_entries if q.experimental]
        assert sorted(msd_peptides) == experimental
        assert len(experimental) == 2

        for group in result.msd_groups:
            for q in group.peptides:
                assert result.peptide_entries[q].msd_group == group.index

        sentinel = len(result.reindexed_peptides)
        for peptide in result.peptide_entries:
            if peptide.experimental:
                assert result.reindexed_peptides[peptide.index] < sentinel
            else:
                assert result.reindexed_peptides[peptide.index] == sentinel

    def test_results_accumulate_and_clear(self, shared_resolver, make_identifications):
        shared_resolver.resolve(make_identifications(["LLGR"], identifier="a"))
        shared_resolver.resolve(make_identifications(["QR"], identifier="b"))

        assert [r.identifier for r in shared_resolver.get_results()] == ["a", "b"]

        shared_resolver.clear_results()
        assert shared_resolver.get_results() == []

    def test_no_proteins(self, make_identifications):
        resolver = ProteinResolver()
        result = resolver.resolve(make_identifications(["PEPTIDEK"]))

        assert result.isd_groups == []
        assert result.msd_groups == []
        assert len(result.reindexed_proteins) == 0

    def test_no_evidence(self, shared_resolver):
        result = shared_resolver.resolve([])

        assert len(result.isd_groups) == 1
        assert result.msd_groups == []
        assert all(p.protein_type is None for p in result.protein_entries)
        assert result.reindexed_proteins.tolist() == [2, 2]

    def test_invalid_evidence(self, shared_resolver):
        with pytest.raises(EvidenceTypeError):
            shared_resolver.resolve("LLGR")

    def test_invalid_params(self):
        with pytest.raises(ValueError):
            ProteinResolver(ResolverParams(enzyme="pepsin"))
