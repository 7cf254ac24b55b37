"""Pipeline modules.

- stages: Pure consolidation stage functions
- consolidator: ObservationConsolidator and consolidate()
- season: Seasonal subsetting of both tables
- writer: Parquet/CSV export
"""

from phytomon.pipeline.consolidator import (
    ObservationConsolidator,
    ConsolidationResult,
    consolidate,
)
from phytomon.pipeline.season import seasonal_subset
from phytomon.pipeline.writer import ConsolidationWriter

__all__ = [
    "ObservationConsolidator",
    "ConsolidationResult",
    "consolidate",
    "seasonal_subset",
    "ConsolidationWriter",
]
