"""Seasonal subsetting of a consolidation result.

Several analyses only look at the growing season. The same month window
must be applied to the long table and the wide matrix, otherwise their
sample counts drift apart.
"""

import logging
from typing import Iterable, Optional, TYPE_CHECKING

from phytomon.data.records import WIDE_METADATA_COLUMNS
from phytomon.contracts import assert_wide_matrix
from phytomon.pipeline.consolidator import ConsolidationResult
from phytomon.schemas.param import SeasonConfig

if TYPE_CHECKING:
    from phytomon.schemas import InternalConfig

__all__ = ['seasonal_subset', 'DEFAULT_SEASON_MONTHS']

logger = logging.getLogger(__name__)

_default = SeasonConfig()
DEFAULT_SEASON_MONTHS = tuple(range(_default.start_month, _default.end_month + 1))


def seasonal_subset(
    result: ConsolidationResult,
    months: Optional[Iterable[int]] = None,
    config: Optional["InternalConfig"] = None,
) -> ConsolidationResult:
    """Keep only samples whose month falls in the season window.

    Parameters
    ----------
    result : ConsolidationResult
        Output of ObservationConsolidator.consolidate()
    months : iterable of int, optional
        Months to keep. Takes precedence over ``config``.
    config : InternalConfig, optional
        Supplies ``season.start_month``..``season.end_month`` when
        ``months`` is not given. Without either, April-September.

    Returns
    -------
    ConsolidationResult
        New long and wide tables. Species columns with no presence left in
        the window are dropped, so the wide matrix still has exactly one
        column per species of the filtered long table.
    """
    if months is None:
        months = config.season.months if config is not None else DEFAULT_SEASON_MONTHS
    months = list(months)

    long = result.long[result.long["month"].isin(months)].reset_index(drop=True)
    wide = result.wide[result.wide["month"].isin(months)]

    kept_species = [c for c in result.species if wide[c].any()]
    wide = wide[WIDE_METADATA_COLUMNS + kept_species].reset_index(drop=True)

    assert_wide_matrix(wide, long)
    logger.info(
        "Season months %s: kept %d of %d samples, %d of %d species",
        months, len(wide), len(result.wide), len(kept_species), len(result.species),
    )
    return ConsolidationResult(long, wide)
