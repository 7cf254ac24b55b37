"""Export of consolidated tables to Parquet or CSV."""

import logging
from pathlib import Path
from typing import Dict, TYPE_CHECKING

from phytomon.pipeline.consolidator import ConsolidationResult

if TYPE_CHECKING:
    from phytomon.schemas import InternalConfig

__all__ = ['ConsolidationWriter']

logger = logging.getLogger(__name__)


class ConsolidationWriter:
    """Write the long table and the wide matrix side by side.

    Files land in ``output_dirs['consolidated']``:

    - ``{tag}_consolidated.{ext}``: long table, one row per date x site x species
    - ``{tag}_presence_absence.{ext}``: wide 0/1 matrix

    Parquet uses the pyarrow engine and the configured compression; CSV
    writes dates as ISO ``YYYY-MM-DD``.
    """

    def __init__(self, config: "InternalConfig", output_dirs: Dict[str, Path]):
        self.format = config.output.format
        self.compression = config.output.compression
        self.output_dir = Path(output_dirs["consolidated"])

    def write(self, result: ConsolidationResult, tag: str = "phytoplankton") -> Dict[str, Path]:
        """Write both tables and return their paths keyed by 'long' and 'wide'."""
        self.output_dir.mkdir(parents=True, exist_ok=True)

        paths = {
            "long": self.output_dir / f"{tag}_consolidated.{self.format}",
            "wide": self.output_dir / f"{tag}_presence_absence.{self.format}",
        }
        frames = {"long": result.long, "wide": result.wide}

        for key, path in paths.items():
            try:
                self._write_frame(frames[key], path)
            except Exception:
                logger.exception("Failed to export %s table to %s", key, path)
                raise
            logger.info("Exported %d rows to: %s", len(frames[key]), path)

        return paths

    def _write_frame(self, df, path: Path) -> None:
        if self.format == "parquet":
            compression = None if self.compression == "none" else self.compression
            df.to_parquet(path, engine='pyarrow', compression=compression, index=False)
        else:
            df.to_csv(path, index=False, date_format="%Y-%m-%d")
