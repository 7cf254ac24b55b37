"""Root-level pytest fixtures for phytomon test suite.

Provides shared configuration and observation fixtures following the
Pydantic-based architecture. Tests use these fixtures instead of creating
raw dict configs.
"""

import pytest
from pathlib import Path
import tempfile
import shutil

import pandas as pd

from phytomon.data.records import Observation
from phytomon.schemas import ParamConfig, UserConfig, resolve_config


TEST_REGIONS = {
    "SVS": "north",
    "HOL": "north",
    "ARE": "south",
    "KRI": "south",
}

TEST_WATER_BODIES = {
    "SVS": "Sound",
    "HOL": "Outer Fjord",
    "ARE": "Coast",
    "KRI": "Coast",
}


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults."""
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides, empty site tables)."""
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for test configs with the test site tables.

    Accepts UserConfig field names. Site lookups default to
    TEST_REGIONS / TEST_WATER_BODIES unless overridden.

    Examples
    --------
    >>> def test_exclusion(make_config):
    ...     config = make_config(excluded_sites=["HOL"])
    ...     assert config.sites.excluded == ["HOL"]
    """
    def _make(**user_overrides):
        user_overrides.setdefault("site_regions", TEST_REGIONS)
        user_overrides.setdefault("site_water_bodies", TEST_WATER_BODIES)
        return resolve_config(param_config, UserConfig(**user_overrides), None)

    return _make


@pytest.fixture
def site_config(make_config):
    """Config with test site tables, FLE excluded and 2009 excluded."""
    return make_config(excluded_sites=["FLE"], excluded_years=[2009])


# =============================================================================
# Observation Fixtures
# =============================================================================

@pytest.fixture
def make_observations():
    """Build an observation DataFrame from (date, site, species, abundance[, group]) tuples."""
    def _make(rows):
        records = [
            Observation(*row) if len(row) == 5 else Observation(*row, "diatom")
            for row in rows
        ]
        return pd.DataFrame(records)

    return _make


@pytest.fixture
def sample_observations(make_observations):
    """Small dataset covering duplicate sampling, synonyms, blanks and exclusions.

    Expected after consolidation with ``site_config``:

    - 2014-06-09 SVS: effort 2 (Skeletonema sampled twice)
        Chaetoceros spp. abundance 2+3=5, mean 2.5
        Skeletonema costatum abundance 1+2=3, mean 1.5
    - 2014-06-10 HOL: effort 1, Dinophysis acuta 1 (blank row dropped)
    - 2015-01-15 ARE: effort 1, Chaetoceros spp. 1, Dictyocha speculum 3
    - 2009 and site FLE removed entirely
    """
    return make_observations([
        ("09.06.2014", "SVS", "Chaetoceros socialis", "A"),
        ("09.06.2014", "SVS", "Chaetoceros debilis", "B"),
        ("09.06.2014", "SVS", "Skeletonema costatum", "P"),
        ("09.06.2014", "SVS", "Skeletonema costatum", "A"),
        ("10.06.2014", "HOL", "Dinophysis acuta", "P", "dinoflagellate"),
        ("10.06.2014", "HOL", "Skeletonema costatum", ""),
        ("15.01.2015", "ARE", "Dictyocha speculum", "B", "silicoflagellate"),
        ("15.01.2015", "ARE", "Chaetoceros curvisetus", "P"),
        ("20.07.2009", "SVS", "Skeletonema costatum", "A"),
        ("11.06.2014", "FLE", "Dinophysis acuta", "B", "dinoflagellate"),
    ])


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def output_dirs(temp_dir):
    """Standard phytomon output directory structure."""
    dirs = {
        "base": temp_dir,
        "consolidated": temp_dir / "consolidated",
        "logs": temp_dir / "logs",
    }

    for d in dirs.values():
        d.mkdir(parents=True, exist_ok=True)

    return dirs
