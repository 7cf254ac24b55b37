"""Core consolidation run logic.

This module contains the actual run, separated from argument parsing.
Scripts are thin wrappers; this is the real implementation.
"""

import sys
import json
import logging
import argparse
import importlib.util
from pathlib import Path
from typing import Optional, Dict, Any

from phytomon.setup_directories import setup_output_directories, get_log_path
from phytomon.data.loader import ObservationLoader
from phytomon.pipeline.consolidator import ObservationConsolidator, ConsolidationResult
from phytomon.pipeline.season import seasonal_subset
from phytomon.pipeline.writer import ConsolidationWriter
from phytomon.contracts import ContractViolation
from phytomon.errors import DataIntegrityError, ConfigurationError
from phytomon.schemas import resolve_config, ParamConfig, UserConfig, CLIConfig


logger = logging.getLogger(__name__)


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.

    Returns
    -------
    dict
        Raw user configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("config_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    # Find CONFIG dict
    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def setup_logging(level: str, log_path: Optional[Path] = None) -> None:
    """Configure root logger with console and (optional) file handlers."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Clear existing handlers and add new ones
    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    if log_path is not None:
        fh = logging.FileHandler(log_path)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    logger.info("Logging: level=%s, file=%s", level, log_path)


def run_consolidation(
    user_config_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None,
    verbose: bool = False,
) -> ConsolidationResult:
    """Execute one consolidation run.

    This is the core run function. It:
    1. Loads and resolves configuration (Param < User < CLI)
    2. Sets up output directories and logging
    3. Loads the observation file and consolidates it
    4. Optionally restricts both tables to the season window
    5. Writes the long table and presence/absence matrix

    Parameters
    ----------
    user_config_path : str, optional
        Path to user config file (Python file with CONFIG dict). Without
        it only expert defaults and CLI overrides apply.

    cli_args : dict, optional
        CLI argument overrides. Keys: input_path, base_dir, output_format,
        season, log_level. All optional.

    verbose : bool, optional
        If True, enable DEBUG logging and log the full resolved config.

    Returns
    -------
    ConsolidationResult
        The (possibly season-subset) long table and wide matrix.

    Raises
    ------
    FileNotFoundError
        If the config or input file does not exist.
    ValidationError
        If configuration validation fails.
    DataIntegrityError, ConfigurationError
        If the input rows cannot be consolidated.

    Examples
    --------
    Run with user config only::

        run_consolidation("scripts/user_config.py")

    Run with CLI overrides::

        run_consolidation(
            "scripts/user_config.py",
            cli_args={"input_path": "data/2014.csv", "season": True},
        )
    """
    param_cfg = ParamConfig()  # Expert defaults

    user_cfg_dict = load_user_config_dict(user_config_path) if user_config_path else {}
    user_cfg = UserConfig.model_validate(user_cfg_dict)

    cli_args = dict(cli_args or {})
    if verbose and "log_level" not in cli_args:
        cli_args["log_level"] = "DEBUG"

    # Filter None values
    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    # Resolve to internal config (Param < User < CLI)
    config = resolve_config(param_cfg, user_cfg, cli_cfg)

    output_dirs = setup_output_directories(config.base_dir)
    input_name = Path(config.input.path).stem if config.input.path else None
    setup_logging(config.logging.level, get_log_path(output_dirs, input_name))

    logger.info("Config: %s", user_config_path)
    logger.info("Input:  %s", config.input.path)
    logger.info("Output: %s", output_dirs["base"])
    if verbose:
        logger.debug("Full internal configuration:\n%s", json.dumps(config.model_dump(), indent=2))

    try:
        observations = ObservationLoader(config).load()
        result = ObservationConsolidator(config).consolidate(observations)
    except (DataIntegrityError, ConfigurationError) as e:
        logger.error("Consolidation aborted, fix the input data or config: %s", e)
        raise
    except ContractViolation as e:
        logger.critical("Pipeline contract violated: %s", e)
        logger.critical("This indicates a bug in pipeline logic. Stopping.")
        raise

    tag = input_name or "phytoplankton"
    if config.season.apply:
        result = seasonal_subset(result, config=config)
        tag = f"{tag}_season"

    ConsolidationWriter(config, output_dirs).write(result, tag=tag)
    return result


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Consolidate phytoplankton observations into long and presence/absence tables"
    )
    parser.add_argument("config", nargs="?", help="Path to user config file")
    parser.add_argument("--input", dest="input_path", help="Observation file (overrides config)")
    parser.add_argument("--base-dir", help="Output directory")
    parser.add_argument("--format", dest="output_format", choices=["parquet", "csv"], help="Output format")
    parser.add_argument("--season", action="store_true", default=None,
                        help="Keep only samples inside the season window")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    try:
        run_consolidation(
            args.config,
            cli_args={
                "input_path": args.input_path,
                "base_dir": args.base_dir,
                "output_format": args.output_format,
                "season": args.season,
            },
            verbose=args.verbose,
        )
    except (DataIntegrityError, ConfigurationError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0
