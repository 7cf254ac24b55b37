"""Tests for descriptive summaries of consolidated tables."""

import numpy as np
import pytest

from phytomon.analysis import (
    species_by_total_abundance,
    occurrence_frequency,
    species_richness,
    summarize_samples,
    community_matrix,
    dissimilarity_matrix,
)
from phytomon.data.records import WIDE_METADATA_COLUMNS
from phytomon.pipeline import consolidate

pytestmark = pytest.mark.unit


@pytest.fixture
def result(sample_observations, site_config):
    return consolidate(sample_observations, site_config)


def test_species_by_total_abundance(result):
    totals = species_by_total_abundance(result.long)

    assert totals.name == "total_abundance"
    # Chaetoceros 5 + 1, Skeletonema 3, Dictyocha 3, Dinophysis 1
    assert totals.index.tolist() == [
        "Chaetoceros spp.",
        "Dictyocha speculum",
        "Skeletonema costatum",
        "Dinophysis acuta",
    ]
    assert totals.tolist() == [6, 3, 3, 1]


def test_occurrence_frequency(result):
    freq = occurrence_frequency(result.wide)

    assert freq.index[0] == "Chaetoceros spp."
    assert freq["Chaetoceros spp."] == pytest.approx(2 / 3)
    assert freq["Dinophysis acuta"] == pytest.approx(1 / 3)


def test_species_richness(result):
    richness = species_richness(result.wide).set_index("site_id")["richness"]
    assert richness.to_dict() == {"SVS": 2, "HOL": 1, "ARE": 2}


def test_summarize_samples_by_region(result):
    summary = summarize_samples(result.long, by=("region",)).set_index("region")

    assert summary.loc["north", "n_samples"] == 2
    assert summary.loc["north", "n_species"] == 3
    assert summary.loc["north", "total_abundance"] == 9
    assert summary.loc["south", "n_samples"] == 1
    assert summary.loc["south", "n_species"] == 2


def test_summarize_samples_by_column_varying_within_sample(result):
    """species_group differs between rows of one sample."""
    summary = summarize_samples(result.long, by=("species_group",)).set_index("species_group")

    # diatom: SVS 2014-06-09 and ARE 2015-01-15
    assert summary.loc["diatom", "n_samples"] == 2
    assert summary.loc["dinoflagellate", "n_samples"] == 1
    assert summary.loc["silicoflagellate", "n_samples"] == 1
    assert summary["n_samples"].notna().all()


def test_summarize_samples_default_grouping(result):
    summary = summarize_samples(result.long)
    assert list(summary.columns[:2]) == ["water_body", "year"]
    assert summary["n_samples"].sum() == 3


def test_summarize_samples_missing_column(result):
    with pytest.raises(KeyError, match="basin"):
        summarize_samples(result.long, by=("basin",))


def test_community_matrix_split(result):
    matrix, groups = community_matrix(result.wide)

    assert list(groups.columns) == WIDE_METADATA_COLUMNS
    assert list(matrix.columns) == result.species
    assert len(matrix) == len(groups) == 3
    assert set(np.unique(matrix.to_numpy())) <= {0, 1}


def test_dissimilarity_matrix(result):
    dist = dissimilarity_matrix(result.wide)

    assert dist.shape == (3, 3)
    assert dist.index.tolist() == ["2014-06-09_SVS", "2014-06-10_HOL", "2015-01-15_ARE"]
    assert np.allclose(np.diag(dist.to_numpy()), 0.0)
    assert np.allclose(dist.to_numpy(), dist.to_numpy().T)
    # SVS {Chaetoceros, Skeletonema} vs ARE {Chaetoceros, Dictyocha}: 1 - 2*1/4
    assert dist.loc["2014-06-09_SVS", "2015-01-15_ARE"] == pytest.approx(0.5)
    # No shared species
    assert dist.loc["2014-06-09_SVS", "2014-06-10_HOL"] == pytest.approx(1.0)


def test_dissimilarity_needs_two_samples(result):
    with pytest.raises(ValueError, match="at least 2"):
        dissimilarity_matrix(result.wide.iloc[:1])
