"""Observation record and table column definitions.

Column name constants are shared by the loader, the consolidation stages,
the contracts and the analysis helpers, so every layer agrees on the shape
of the long and wide tables.
"""

from typing import NamedTuple, Iterable, Union
from datetime import date

import pandas as pd

__all__ = [
    'Observation',
    'OBSERVATION_COLUMNS',
    'SAMPLE_KEY',
    'WIDE_METADATA_COLUMNS',
    'CONSOLIDATED_COLUMNS',
    'observations_to_frame',
]


class Observation(NamedTuple):
    """One raw phytoplankton observation row.

    sample_date is either a string in the configured date format or a
    ``datetime.date``. abundance_category may be blank.
    """
    sample_date: Union[str, date]
    site_id: str
    species: str
    abundance_category: str
    species_group: str


OBSERVATION_COLUMNS = list(Observation._fields)

# One sample = one site visited on one calendar day
SAMPLE_KEY = ["date", "site_id"]

WIDE_METADATA_COLUMNS = [
    "date",
    "site_id",
    "month",
    "year",
    "day_of_year",
    "region",
    "water_body",
    "effort",
]

CONSOLIDATED_COLUMNS = [
    "date",
    "site_id",
    "month",
    "year",
    "day_of_year",
    "region",
    "water_body",
    "species",
    "species_group",
    "effort",
    "abundance",
    "mean_abundance",
    "presence",
]


def observations_to_frame(observations: Union[pd.DataFrame, Iterable]) -> pd.DataFrame:
    """Build a DataFrame of raw observations.

    Parameters
    ----------
    observations : pd.DataFrame or iterable
        A DataFrame with the Observation columns, or an iterable of
        Observation tuples or mappings with the same keys.

    Returns
    -------
    pd.DataFrame
        A new DataFrame with exactly the Observation columns. The input is
        never modified.

    Raises
    ------
    KeyError
        If a DataFrame input lacks one of the Observation columns.
    """
    if isinstance(observations, pd.DataFrame):
        missing = [c for c in OBSERVATION_COLUMNS if c not in observations.columns]
        if missing:
            raise KeyError(f"Observation table missing columns: {missing}")
        return observations[OBSERVATION_COLUMNS].copy()

    rows = [
        row._asdict() if isinstance(row, Observation) else dict(row)
        for row in observations
    ]
    return pd.DataFrame(rows, columns=OBSERVATION_COLUMNS)
