"""Consolidation stage contract.

Enforces the guarantee that after aggregation, the long table has one row
per (date, site, canonical species), a positive effort and a presence flag
on every row, and carries no excluded or synonym keys.
"""

import pandas as pd
from phytomon.contracts.base import require
from phytomon.data.records import CONSOLIDATED_COLUMNS


def assert_consolidated(
    df: pd.DataFrame,
    excluded_sites=(),
    excluded_years=(),
    aliases=(),
) -> None:
    """Enforce consolidation stage contract.

    Called after aggregate_observations(). We do NOT validate abundance
    magnitudes, only the structural guarantees downstream consumers
    rely on.

    Parameters
    ----------
    df : pd.DataFrame
        Consolidated long table

    excluded_sites, excluded_years : iterable
        Keys that must not survive filtering

    aliases : iterable
        Synonym labels that must have been rewritten to canonical names

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    require(
        isinstance(df, pd.DataFrame),
        f"Consolidation contract violated: output is {type(df)}, expected DataFrame"
    )

    for col in CONSOLIDATED_COLUMNS:
        require(
            col in df.columns,
            f"Consolidation contract violated: missing required column '{col}'"
        )

    if len(df) == 0:
        return

    require(
        not df.duplicated(subset=["date", "site_id", "species"]).any(),
        "Consolidation contract violated: duplicate (date, site_id, species) rows"
    )
    require(
        (df["effort"] >= 1).all(),
        "Consolidation contract violated: effort must be >= 1 for all rows"
    )
    require(
        (df["presence"] == 1).all(),
        "Consolidation contract violated: presence must be 1 for all rows"
    )
    require(
        df.groupby(["date", "site_id"])["effort"].nunique().max() == 1,
        "Consolidation contract violated: effort differs within a (date, site_id) sample"
    )

    leaked_sites = set(df["site_id"]) & set(excluded_sites)
    require(
        not leaked_sites,
        f"Consolidation contract violated: excluded sites present {sorted(leaked_sites)}"
    )
    leaked_years = set(df["year"]) & set(excluded_years)
    require(
        not leaked_years,
        f"Consolidation contract violated: excluded years present {sorted(leaked_years)}"
    )
    leaked_aliases = set(df["species"]) & set(aliases)
    require(
        not leaked_aliases,
        f"Consolidation contract violated: synonym labels present {sorted(leaked_aliases)}"
    )
