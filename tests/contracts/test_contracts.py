"""Tests for pipeline contracts.

These tests verify that contracts are enforced at stage boundaries.
They test contract violations directly, without defensive logic downstream.
"""

import pytest
import pandas as pd

pytestmark = pytest.mark.unit

from phytomon.contracts import (
    ContractViolation,
    require,
    PIPELINE_INVARIANTS,
    STAGE_REQUIREMENTS,
    assert_consolidated,
    assert_wide_matrix,
)
from phytomon.data.records import CONSOLIDATED_COLUMNS
from phytomon.pipeline.stages import reshape_wide


def _long(rows):
    """Build a long table from (date, site, species, effort, abundance) tuples."""
    records = []
    for date, site, species, effort, abundance in rows:
        ts = pd.Timestamp(date)
        records.append({
            "date": ts,
            "site_id": site,
            "month": ts.month,
            "year": ts.year,
            "day_of_year": ts.dayofyear,
            "region": "north",
            "water_body": "Sound",
            "species": species,
            "species_group": "diatom",
            "effort": effort,
            "abundance": abundance,
            "mean_abundance": abundance / effort,
            "presence": 1,
        })
    return pd.DataFrame(records, columns=CONSOLIDATED_COLUMNS)


@pytest.fixture
def long():
    return _long([
        ("2014-06-09", "SVS", "Chaetoceros spp.", 2, 5),
        ("2014-06-09", "SVS", "Skeletonema costatum", 2, 3),
        ("2014-06-10", "HOL", "Dinophysis acuta", 1, 1),
    ])


def test_require_raises_with_message():
    with pytest.raises(ContractViolation, match="boom"):
        require(False, "boom")
    require(True, "never raised")


def test_contract_violation_is_runtime_error():
    assert issubclass(ContractViolation, RuntimeError)


class TestConsolidatedContract:
    """Test consolidation stage contract."""

    def test_passes_on_valid_table(self, long):
        assert_consolidated(long, excluded_sites=["FLE"], excluded_years=[2009])

    def test_passes_on_empty_table(self):
        assert_consolidated(pd.DataFrame(columns=CONSOLIDATED_COLUMNS))

    def test_fails_without_column(self, long):
        with pytest.raises(ContractViolation, match="missing required column 'effort'"):
            assert_consolidated(long.drop(columns="effort"))

    def test_fails_on_non_dataframe(self):
        with pytest.raises(ContractViolation, match="expected DataFrame"):
            assert_consolidated([])

    def test_fails_on_duplicate_keys(self, long):
        dup = pd.concat([long, long.iloc[[0]]], ignore_index=True)
        with pytest.raises(ContractViolation, match="duplicate"):
            assert_consolidated(dup)

    def test_fails_on_zero_effort(self, long):
        bad = long.assign(effort=0)
        with pytest.raises(ContractViolation, match="effort must be >= 1"):
            assert_consolidated(bad)

    def test_fails_on_inconsistent_effort(self, long):
        bad = long.copy()
        bad.loc[0, "effort"] = 3
        with pytest.raises(ContractViolation, match="effort differs"):
            assert_consolidated(bad)

    def test_fails_on_zero_presence(self, long):
        with pytest.raises(ContractViolation, match="presence must be 1"):
            assert_consolidated(long.assign(presence=0))

    def test_fails_on_excluded_site(self, long):
        with pytest.raises(ContractViolation, match="excluded sites present"):
            assert_consolidated(long, excluded_sites=["HOL"])

    def test_fails_on_excluded_year(self, long):
        with pytest.raises(ContractViolation, match="excluded years present"):
            assert_consolidated(long, excluded_years=[2014])

    def test_fails_on_leaked_synonym(self, long):
        with pytest.raises(ContractViolation, match="synonym labels present"):
            assert_consolidated(long, aliases=["Skeletonema costatum"])


class TestWideContract:
    """Test presence/absence matrix contract."""

    def test_passes_on_reshaped_table(self, long):
        assert_wide_matrix(reshape_wide(long), long)

    def test_fails_on_missing_sample(self, long):
        wide = reshape_wide(long).iloc[:1]
        with pytest.raises(ContractViolation, match="expected 2 samples"):
            assert_wide_matrix(wide, long)

    def test_fails_on_missing_species_column(self, long):
        wide = reshape_wide(long).drop(columns="Dinophysis acuta")
        with pytest.raises(ContractViolation, match="species columns"):
            assert_wide_matrix(wide, long)

    def test_fails_on_missing_metadata(self, long):
        wide = reshape_wide(long).drop(columns="water_body")
        with pytest.raises(ContractViolation, match="missing metadata column 'water_body'"):
            assert_wide_matrix(wide, long)

    def test_fails_on_non_binary_cell(self, long):
        wide = reshape_wide(long)
        wide.loc[0, "Chaetoceros spp."] = 2
        with pytest.raises(ContractViolation, match="0 or 1"):
            assert_wide_matrix(wide, long)


def test_every_stage_has_requirement_and_invariants():
    assert set(STAGE_REQUIREMENTS) == set(PIPELINE_INVARIANTS)
    assert all(PIPELINE_INVARIANTS[stage] for stage in PIPELINE_INVARIANTS)
    assert STAGE_REQUIREMENTS["season"] == "OPTIONAL"
