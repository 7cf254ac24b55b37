"""Observation records and file loading.

- records: Observation record, table column constants
- loader: Read observation files into a DataFrame
"""

from phytomon.data.records import Observation, observations_to_frame
from phytomon.data.loader import ObservationLoader

__all__ = [
    "Observation",
    "observations_to_frame",
    "ObservationLoader",
]
