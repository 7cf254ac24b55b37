"""Read raw phytoplankton observation files into a DataFrame.

The monitoring table is a delimited text file, one row per observation,
with locale-formatted dates (e.g. ``09.06.2014``). Column names and the
separator vary between exports, so both come from configuration.

All values are read as strings: date parsing and abundance code mapping
belong to the consolidation stages, where failures are reported with the
offending row.
"""

from pathlib import Path
from typing import Optional, Union, TYPE_CHECKING
import logging

import pandas as pd

from phytomon.data.records import OBSERVATION_COLUMNS
from phytomon.errors import ConfigurationError

if TYPE_CHECKING:
    from phytomon.schemas import InternalConfig

__all__ = ['ObservationLoader']

logger = logging.getLogger(__name__)


class ObservationLoader:
    """Load a raw observation file with configured columns.

    Configuration
    =============
    Reads ``config.input``:

    - `path` : default file to load when none is passed to load()
    - `separator`, `encoding` : passed to ``pandas.read_csv``
    - `columns` : source column name for each Observation field

    Notes
    -----
    - Blank cells stay blank strings (``keep_default_na=False``), so a
      missing abundance category is distinguishable from the text "NA"
    - Surrounding whitespace is stripped from headers and values
    - Extra source columns are dropped

    Examples
    --------
    >>> loader = ObservationLoader(config)
    >>> df = loader.load("data/phytoplankton.csv")
    >>> list(df.columns)
    ['sample_date', 'site_id', 'species', 'abundance_category', 'species_group']
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.separator = config.input.separator
        self.encoding = config.input.encoding
        self.rename_map = config.input.columns.rename_map()

    def load(self, path: Optional[Union[str, Path]] = None) -> pd.DataFrame:
        """Read observations from ``path`` (or the configured input path).

        Raises
        ------
        ConfigurationError
            If no path is given or configured, or required columns are missing.
        FileNotFoundError
            If the file does not exist.
        """
        if path is None:
            path = self.config.input.path
        if path is None:
            raise ConfigurationError("No input file given and input.path is not configured")

        path = Path(path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Observation file not found: {path}")

        df = pd.read_csv(
            path,
            sep=self.separator,
            encoding=self.encoding,
            dtype=str,
            keep_default_na=False,
        )
        df.columns = [str(c).strip() for c in df.columns]

        missing = [source for source in self.rename_map if source not in df.columns]
        if missing:
            raise ConfigurationError(
                f"Observation file {path.name} is missing columns {missing}; "
                f"found {list(df.columns)}"
            )

        df = df.rename(columns=self.rename_map)[OBSERVATION_COLUMNS].copy()
        for col in OBSERVATION_COLUMNS:
            df[col] = df[col].str.strip()

        logger.info("Loaded %d observations from %s", len(df), path.name)
        return df
