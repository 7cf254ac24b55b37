"""CLIConfig: Command-line operational overrides.

Minimal configuration for operational parameters that commonly change
between runs: input file, output directory and format, season subsetting,
verbosity.

This schema handles command-line arguments parsed by argparse.
"""

from typing import Literal, Optional
from phytomon.schemas.base import PhytoBaseModel


class CLIConfig(PhytoBaseModel):
    """Command-line configuration overrides.

    Operational-only settings that override user and param configs.
    Highest priority in config resolution.

    Usage
    -----
        cli_cfg = CLIConfig(
            input_path="data/phytoplankton_2014.csv",
            base_dir="/scratch/phytomon_output",
            season=True,
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    input_path: Optional[str] = None
    base_dir: Optional[str] = None
    output_format: Optional[Literal["parquet", "csv"]] = None
    season: Optional[bool] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.base_dir is not None:
            overrides["base_dir"] = str(self.base_dir)

        if self.input_path is not None:
            overrides["input"] = {"path": str(self.input_path)}

        if self.output_format is not None:
            overrides["output"] = {"format": self.output_format}

        if self.season is not None:
            overrides["season"] = {"apply": self.season}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
