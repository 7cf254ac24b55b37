"""Consolidation stages, from raw observation rows to long and wide tables.

Each stage is a pure function: it takes the previous stage's DataFrame
and returns a new one, never mutating its input. The stages must run in
this order, because later steps depend on the cardinality produced by
earlier ones:

a. check_species_labels     every row names a species
   derive_calendar_fields   parse dates, add month/year/day_of_year
b. map_abundance_codes      P/A/B -> 1/2/3, blank -> missing
c. apply_exclusions         drop excluded sites, years, blank abundances
   assign_site_groups       site -> region, water body
d. compute_effort           resamples per (date, site), on raw species labels
e. merge_synonyms           aliases -> canonical species
f. aggregate_observations   one row per (date, site, species)
g. reshape_wide             presence/absence matrix

Effort is computed before the synonym merge on purpose: merging several
Chaetoceros taxa into one label would otherwise look like extra resamples.
"""

import logging
from datetime import date, datetime

import numpy as np
import pandas as pd

from phytomon.data.records import (
    SAMPLE_KEY,
    WIDE_METADATA_COLUMNS,
    CONSOLIDATED_COLUMNS,
)
from phytomon.errors import (
    MalformedDateError,
    MissingSpeciesError,
    UnknownAbundanceCodeError,
    UnmappedSiteError,
    ConfigurationError,
)

__all__ = [
    'check_species_labels',
    'derive_calendar_fields',
    'map_abundance_codes',
    'apply_exclusions',
    'assign_site_groups',
    'compute_effort',
    'merge_synonyms',
    'aggregate_observations',
    'reshape_wide',
]

logger = logging.getLogger(__name__)

AGGREGATION_KEY = [
    "species",
    "site_id",
    "water_body",
    "region",
    "date",
    "month",
    "year",
    "day_of_year",
    "effort",
]


def _row_identity(row) -> dict:
    """(date, site, species) of a raw row, for error messages."""
    return {
        "date": row["sample_date"],
        "site_id": row["site_id"],
        "species": row["species"],
    }


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return bool(pd.isna(value))


def _parse_date(value, date_format: str):
    """Parse one sample date; NaT when it cannot be parsed."""
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return pd.NaT
        try:
            return pd.Timestamp(datetime.strptime(text, date_format)).normalize()
        except ValueError:
            return pd.NaT
    if isinstance(value, (datetime, date, np.datetime64)) and not pd.isna(value):
        return pd.Timestamp(value).normalize()
    return pd.NaT


# =============================================================================
# a. Species labels and calendar fields
# =============================================================================

def check_species_labels(df: pd.DataFrame) -> pd.DataFrame:
    """Reject rows without a species label.

    Effort and aggregation group on the species label, so a blank label
    would drop the row (and possibly its whole sample) without notice.

    Raises
    ------
    MissingSpeciesError
        On the first row whose species is blank or missing
    """
    blank = df["species"].map(_is_blank).astype(bool)
    if blank.any():
        row = df.loc[blank].iloc[0]
        raise MissingSpeciesError("Blank or missing species label", **_row_identity(row))
    return df


def derive_calendar_fields(df: pd.DataFrame, date_format: str) -> pd.DataFrame:
    """Parse sample dates and derive month, year and day-of-year.

    Parameters
    ----------
    df : pd.DataFrame
        Raw observations with a ``sample_date`` column
    date_format : str
        strptime format for string dates (e.g. ``"%d.%m.%Y"``)

    Returns
    -------
    pd.DataFrame
        Copy with ``date``, ``month``, ``year``, ``day_of_year`` added

    Raises
    ------
    MalformedDateError
        On the first row whose date cannot be parsed
    """
    parsed = pd.to_datetime(
        pd.Series(
            [_parse_date(v, date_format) for v in df["sample_date"]],
            index=df.index,
            dtype=object,
        )
    )

    bad = parsed.isna()
    if bad.any():
        row = df.loc[bad].iloc[0]
        raise MalformedDateError(
            f"Unparseable sample date (expected format {date_format!r})",
            **_row_identity(row),
        )

    return df.assign(
        date=parsed,
        month=parsed.dt.month,
        year=parsed.dt.year,
        day_of_year=parsed.dt.dayofyear,
    )


# =============================================================================
# b. Abundance codes
# =============================================================================

def map_abundance_codes(df: pd.DataFrame, codes: dict) -> pd.DataFrame:
    """Map abundance symbols to ordinal codes.

    Symbols are compared after stripping and upper-casing. Blank or missing
    categories map to NaN, marking the row for removal in apply_exclusions().

    Raises
    ------
    UnknownAbundanceCodeError
        On the first non-blank category that is not in ``codes``
    """
    normalized = df["abundance_category"].map(
        lambda v: "" if _is_blank(v) else str(v).strip().upper()
    )

    unknown = (normalized != "") & ~normalized.isin(list(codes))
    if unknown.any():
        row = df.loc[unknown].iloc[0]
        raise UnknownAbundanceCodeError(
            f"Unknown abundance category {row['abundance_category']!r} "
            f"(expected one of {sorted(codes)} or blank)",
            **_row_identity(row),
        )

    code = normalized.map(codes).astype(float)
    logger.debug("Abundance codes mapped: %d blank", int(code.isna().sum()))
    return df.assign(abundance_code=code)


# =============================================================================
# c. Filtering and site groups
# =============================================================================

def apply_exclusions(df: pd.DataFrame, excluded_sites, excluded_years) -> pd.DataFrame:
    """Drop excluded sites, then excluded years, then blank abundances."""
    n_start = len(df)

    out = df[~df["site_id"].isin(list(excluded_sites))]
    n_sites = len(out)
    logger.debug("Excluded sites removed %d rows", n_start - n_sites)

    out = out[~out["year"].isin(list(excluded_years))]
    n_years = len(out)
    logger.debug("Excluded years removed %d rows", n_sites - n_years)

    out = out[out["abundance_code"].notna()]
    logger.debug("Blank abundance removed %d rows", n_years - len(out))

    out = out.assign(abundance_code=out["abundance_code"].astype(int))
    logger.info("Filtering kept %d of %d rows", len(out), n_start)
    return out


def assign_site_groups(df: pd.DataFrame, regions: dict, water_bodies: dict) -> pd.DataFrame:
    """Look up region and water body for every site.

    Raises
    ------
    UnmappedSiteError
        If a site is in neither lookup
    ConfigurationError
        If a site is in one lookup but not the other
    """
    for site in df["site_id"].unique():
        in_regions = site in regions
        in_water_bodies = site in water_bodies
        if not in_regions and not in_water_bodies:
            row = df[df["site_id"] == site].iloc[0]
            raise UnmappedSiteError(
                f"Site {site!r} has no region or water body",
                **_row_identity(row),
            )
        if in_regions != in_water_bodies:
            present, absent = (
                ("region", "water body") if in_regions else ("water body", "region")
            )
            raise ConfigurationError(
                f"Site {site!r} has a {present} entry but no {absent} entry"
            )

    return df.assign(
        region=df["site_id"].map(regions),
        water_body=df["site_id"].map(water_bodies),
    )


# =============================================================================
# d. Effort
# =============================================================================

def compute_effort(df: pd.DataFrame) -> pd.DataFrame:
    """Attach sampling effort to every row.

    Effort of a (date, site) sample is the largest number of raw rows
    recorded for any single raw species label in that sample, i.e. the
    number of same-day resamples. Must run before merge_synonyms().
    """
    if df.empty:
        return df.assign(effort=pd.Series(dtype="int64"))

    counts = df.groupby(SAMPLE_KEY + ["species"]).size()
    effort = (
        counts.groupby(level=SAMPLE_KEY).max()
        .rename("effort")
        .reset_index()
    )
    logger.debug("Effort > 1 in %d of %d samples", int((effort["effort"] > 1).sum()), len(effort))

    out = df.merge(effort, on=SAMPLE_KEY, how="left", validate="many_to_one")
    out.index = df.index
    return out


# =============================================================================
# e. Synonyms
# =============================================================================

def merge_synonyms(df: pd.DataFrame, alias_map: dict) -> pd.DataFrame:
    """Rewrite species aliases to their canonical label."""
    merged = df["species"].map(lambda s: alias_map.get(s, s))
    logger.debug("Synonym merge rewrote %d rows", int((merged != df["species"]).sum()))
    return df.assign(species=merged)


# =============================================================================
# f. Aggregation
# =============================================================================

def aggregate_observations(df: pd.DataFrame) -> pd.DataFrame:
    """Collapse rows to one per (date, site, canonical species).

    Ordinal codes of colliding rows are SUMMED into ``abundance``. This is
    the historical policy for same-day resamples and for merged synonyms
    alike; it differs from taking the maximum and is kept deliberately.
    ``species_group`` takes the first value in input order.

    Returns
    -------
    pd.DataFrame
        Consolidated long table with CONSOLIDATED_COLUMNS, sorted by
        (date, site_id, species)
    """
    if df.empty:
        return pd.DataFrame(columns=CONSOLIDATED_COLUMNS)

    long = (
        df.groupby(AGGREGATION_KEY, sort=False)
        .agg(
            species_group=("species_group", "first"),
            abundance=("abundance_code", "sum"),
        )
        .reset_index()
    )
    long["mean_abundance"] = long["abundance"] / long["effort"]
    long["presence"] = 1

    long = (
        long[CONSOLIDATED_COLUMNS]
        .sort_values(["date", "site_id", "species"])
        .reset_index(drop=True)
    )
    logger.debug("Aggregated %d rows into %d records", len(df), len(long))
    return long


# =============================================================================
# g. Wide matrix
# =============================================================================

def reshape_wide(long: pd.DataFrame) -> pd.DataFrame:
    """Pivot the long table into a presence/absence matrix.

    One row per (date, site) with its metadata columns, followed by one
    0/1 column per canonical species in alphabetical order.

    Raises
    ------
    ConfigurationError
        If a canonical species name equals a metadata column name
    """
    if long.empty:
        return pd.DataFrame(columns=WIDE_METADATA_COLUMNS)

    clashes = sorted(set(long["species"]) & set(WIDE_METADATA_COLUMNS))
    if clashes:
        raise ConfigurationError(
            f"Species names {clashes} clash with presence/absence metadata columns; "
            f"rename them with a synonym group"
        )

    wide = long.pivot_table(
        index=WIDE_METADATA_COLUMNS,
        columns="species",
        values="presence",
        aggfunc="max",
        fill_value=0,
    )
    wide = wide.reindex(columns=sorted(wide.columns)).astype(int)
    wide.columns.name = None

    wide = (
        wide.reset_index()
        .sort_values(SAMPLE_KEY)
        .reset_index(drop=True)
    )
    logger.debug("Wide matrix: %d samples x %d species", len(wide), wide.shape[1] - len(WIDE_METADATA_COLUMNS))
    return wide
