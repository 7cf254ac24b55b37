# src/phytomon/analysis/summary.py
"""Descriptive summaries of consolidated phytoplankton tables.

These helpers produce the numbers behind the report's descriptive layer
(bar and tile plots, species lists) and hand the presence/absence matrix to
external multivariate statistics (ordination, dispersion tests, PERMANOVA,
clustering) in the shape those routines expect: a numeric matrix plus
grouping vectors, or a square dissimilarity matrix.

Nothing here plots or fits models.
"""

import logging
from typing import Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.spatial.distance import pdist, squareform

from phytomon.data.records import WIDE_METADATA_COLUMNS, SAMPLE_KEY

__all__ = [
    'species_by_total_abundance',
    'occurrence_frequency',
    'species_richness',
    'summarize_samples',
    'community_matrix',
    'dissimilarity_matrix',
]

logger = logging.getLogger(__name__)


def _species_columns(wide: pd.DataFrame) -> list:
    return [c for c in wide.columns if c not in WIDE_METADATA_COLUMNS]


def species_by_total_abundance(long: pd.DataFrame) -> pd.Series:
    """Summed abundance per species, largest first.

    This is the presentation order used for bar and tile plots. Ties keep
    alphabetical order.
    """
    totals = long.groupby("species")["abundance"].sum().sort_index()
    return totals.sort_values(ascending=False, kind="stable").rename("total_abundance")


def occurrence_frequency(wide: pd.DataFrame) -> pd.Series:
    """Fraction of samples in which each species was recorded, most frequent first."""
    species = _species_columns(wide)
    if len(wide) == 0:
        return pd.Series(0.0, index=species, name="frequency")
    freq = wide[species].mean(axis=0).sort_index()
    return freq.sort_values(ascending=False, kind="stable").rename("frequency")


def species_richness(wide: pd.DataFrame) -> pd.DataFrame:
    """Number of species recorded per sample.

    Returns
    -------
    pd.DataFrame
        The sample key columns plus ``richness``.
    """
    species = _species_columns(wide)
    out = wide[SAMPLE_KEY].copy()
    out["richness"] = wide[species].sum(axis=1).astype(int) if species else 0
    return out


def summarize_samples(long: pd.DataFrame, by: Sequence[str] = ("water_body", "year")) -> pd.DataFrame:
    """Per-group sample counts, species counts and abundance.

    Parameters
    ----------
    long : pd.DataFrame
        Consolidated long table
    by : sequence of str
        Grouping columns, e.g. ``("region",)``, ``("water_body", "month")``

    Returns
    -------
    pd.DataFrame
        One row per group with:

        - `n_samples` : distinct (date, site) samples
        - `n_species` : distinct canonical species
        - `total_abundance` : sum of abundance
        - `mean_abundance` : mean of per-record mean_abundance
    """
    by = list(by)
    missing = [c for c in by if c not in long.columns]
    if missing:
        raise KeyError(f"Cannot group by missing columns: {missing}")

    # A sample counts once per group it has rows in
    sample_keys = list(dict.fromkeys(by + SAMPLE_KEY))
    samples = long.drop_duplicates(subset=sample_keys).groupby(by).size().rename("n_samples")
    grouped = long.groupby(by)
    summary = pd.concat(
        [
            samples,
            grouped["species"].nunique().rename("n_species"),
            grouped["abundance"].sum().rename("total_abundance"),
            grouped["mean_abundance"].mean().rename("mean_abundance"),
        ],
        axis=1,
    )
    return summary.reset_index()


def community_matrix(wide: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Split the wide matrix into species data and grouping vectors.

    Returns
    -------
    matrix : pd.DataFrame
        0/1 species columns only
    groups : pd.DataFrame
        Metadata columns (date, site_id, month, year, day_of_year, region,
        water_body, effort), row-aligned with ``matrix``
    """
    return wide[_species_columns(wide)].copy(), wide[WIDE_METADATA_COLUMNS].copy()


def dissimilarity_matrix(wide: pd.DataFrame, metric: str = "braycurtis") -> pd.DataFrame:
    """Pairwise dissimilarity between samples.

    Parameters
    ----------
    wide : pd.DataFrame
        Presence/absence matrix from the consolidator
    metric : str
        Any metric accepted by ``scipy.spatial.distance.pdist``. Bray-Curtis
        on 0/1 data is the Sorensen dissimilarity.

    Returns
    -------
    pd.DataFrame
        Square symmetric matrix indexed by ``"{date}_{site_id}"`` labels

    Raises
    ------
    ValueError
        With fewer than two samples
    """
    if len(wide) < 2:
        raise ValueError(f"Need at least 2 samples for a dissimilarity matrix, got {len(wide)}")

    matrix, groups = community_matrix(wide)
    distances = squareform(pdist(matrix.to_numpy(dtype=float), metric=metric))
    labels = (
        pd.to_datetime(groups["date"]).dt.strftime("%Y-%m-%d") + "_" + groups["site_id"].astype(str)
    ).tolist()

    logger.debug("Dissimilarity (%s) over %d samples", metric, len(labels))
    return pd.DataFrame(np.asarray(distances), index=labels, columns=labels)
