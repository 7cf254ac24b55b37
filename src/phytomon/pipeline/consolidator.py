"""Observation consolidation: raw rows to long table and presence/absence matrix.

The consolidator runs every stage of :mod:`phytomon.pipeline.stages` in
order and enforces the stage contracts on its outputs. The long table and
the wide matrix always come out of the same filter/merge pass, so they can
never disagree about which sites, years or species survived.
"""

import logging
from typing import NamedTuple, TYPE_CHECKING

import pandas as pd

from phytomon.data.records import observations_to_frame, WIDE_METADATA_COLUMNS
from phytomon.pipeline.stages import (
    check_species_labels,
    derive_calendar_fields,
    map_abundance_codes,
    apply_exclusions,
    assign_site_groups,
    compute_effort,
    merge_synonyms,
    aggregate_observations,
    reshape_wide,
)
from phytomon.contracts import assert_consolidated, assert_wide_matrix

if TYPE_CHECKING:
    from phytomon.schemas import InternalConfig

__all__ = ['ObservationConsolidator', 'ConsolidationResult', 'consolidate']

logger = logging.getLogger(__name__)


class ConsolidationResult(NamedTuple):
    """Long table and wide matrix from one consolidation pass.

    Unpacks as ``long, wide = result``. Both frames are treated as
    immutable snapshots by downstream consumers.
    """
    long: pd.DataFrame
    wide: pd.DataFrame

    @property
    def species(self) -> list:
        """Species columns of the wide matrix, in column order."""
        return [c for c in self.wide.columns if c not in WIDE_METADATA_COLUMNS]


class ObservationConsolidator:
    """Consolidate raw phytoplankton observations.

    Turns an unordered collection of raw observation rows into:

    1. **ConsolidatedTable** (long): one row per date x site x canonical
       species, with summed ordinal ``abundance``, ``effort`` (same-day
       resamples), ``mean_abundance = abundance / effort`` and
       ``presence = 1``.

    2. **WideMatrix**: one row per date x site with its metadata columns
       and one 0/1 column per canonical species (alphabetical order),
       ready for distance-matrix based statistics.

    The consolidator holds no state between calls; ``consolidate`` is a
    pure function of its input and the configuration.

    Examples
    --------
    >>> from phytomon.schemas import resolve_config, ParamConfig, UserConfig
    >>> config = resolve_config(ParamConfig(), UserConfig(
    ...     SITE_REGIONS={"SVS": "north"},
    ...     SITE_WATER_BODIES={"SVS": "Sound"},
    ... ))
    >>> long, wide = ObservationConsolidator(config).consolidate(observations)
    """

    def __init__(self, config: "InternalConfig"):
        """Initialize consolidator with validated configuration.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration.
        """
        self.config = config
        self.date_format = config.input.date_format
        self.codes = dict(config.abundance.codes)
        self.excluded_sites = list(config.sites.excluded)
        self.excluded_years = list(config.years.excluded)
        self.regions = dict(config.sites.regions)
        self.water_bodies = dict(config.sites.water_bodies)
        self.alias_map = config.species.alias_map()

        logger.debug(
            "ObservationConsolidator initialized: %d excluded sites, %d excluded years, %d synonyms",
            len(self.excluded_sites), len(self.excluded_years), len(self.alias_map),
        )

    def consolidate(self, observations) -> ConsolidationResult:
        """Run all consolidation stages.

        Parameters
        ----------
        observations : pd.DataFrame or iterable of Observation
            Raw observation rows. Not modified.

        Returns
        -------
        ConsolidationResult
            ``(long, wide)`` from the same filter/merge pass.

        Raises
        ------
        MissingSpeciesError, MalformedDateError, UnknownAbundanceCodeError, UnmappedSiteError
            On the first offending raw row.
        ConfigurationError
            If a site is present in only one of the lookup tables, or a
            species name clashes with a metadata column.
        ContractViolation
            If a stage broke one of its invariants.
        """
        raw = observations_to_frame(observations)
        logger.info("Consolidating %d raw observations", len(raw))

        df = check_species_labels(raw)
        df = derive_calendar_fields(df, self.date_format)
        df = map_abundance_codes(df, self.codes)
        df = apply_exclusions(df, self.excluded_sites, self.excluded_years)
        df = assign_site_groups(df, self.regions, self.water_bodies)
        df = compute_effort(df)
        df = merge_synonyms(df, self.alias_map)

        long = aggregate_observations(df)
        assert_consolidated(
            long,
            excluded_sites=self.excluded_sites,
            excluded_years=self.excluded_years,
            aliases=[a for a, c in self.alias_map.items() if a != c],
        )

        wide = reshape_wide(long)
        assert_wide_matrix(wide, long)

        result = ConsolidationResult(long, wide)
        logger.info(
            "Consolidated: %d records, %d samples, %d species",
            len(long), len(wide), len(result.species),
        )
        return result


def consolidate(observations, config: "InternalConfig") -> ConsolidationResult:
    """Consolidate observations with a one-off ObservationConsolidator."""
    return ObservationConsolidator(config).consolidate(observations)
