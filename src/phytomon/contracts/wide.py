"""Presence/absence matrix contract.

Enforces the guarantee that the wide matrix describes exactly the samples
and species of the consolidated table it was reshaped from.
"""

import pandas as pd
from phytomon.contracts.base import require
from phytomon.data.records import WIDE_METADATA_COLUMNS, SAMPLE_KEY


def assert_wide_matrix(wide: pd.DataFrame, long: pd.DataFrame) -> None:
    """Enforce wide matrix contract.

    Called after reshape_wide() and after seasonal subsetting.

    Parameters
    ----------
    wide : pd.DataFrame
        Presence/absence matrix (metadata columns + one column per species)

    long : pd.DataFrame
        Consolidated long table the matrix was derived from

    Raises
    ------
    ContractViolation
        If row or column cardinality disagrees with the long table, or a
        species cell is not 0/1
    """
    for col in WIDE_METADATA_COLUMNS:
        require(
            col in wide.columns,
            f"Wide matrix contract violated: missing metadata column '{col}'"
        )

    n_samples = len(long.drop_duplicates(subset=SAMPLE_KEY))
    require(
        len(wide) == n_samples,
        f"Wide matrix contract violated: {len(wide)} rows, expected {n_samples} samples"
    )
    require(
        not wide.duplicated(subset=SAMPLE_KEY).any(),
        "Wide matrix contract violated: duplicate (date, site_id) rows"
    )

    species_cols = [c for c in wide.columns if c not in WIDE_METADATA_COLUMNS]
    expected = set(long["species"])
    require(
        set(species_cols) == expected,
        f"Wide matrix contract violated: {len(species_cols)} species columns, "
        f"expected {len(expected)}"
    )

    if species_cols and len(wide) > 0:
        values = wide[species_cols]
        require(
            values.isin([0, 1]).all().all(),
            "Wide matrix contract violated: species cells must be 0 or 1"
        )
