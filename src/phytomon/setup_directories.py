"""
Directory setup for the consolidation pipeline.

Flat structure under one base directory:
- consolidated/  long tables and presence/absence matrices
- logs/          one log file per run, timestamped
"""

from pathlib import Path
from datetime import datetime, timezone


def setup_output_directories(base_output_dir=None):
    """
    Set up the output directory structure.

    Parameters
    ----------
    base_output_dir : str or Path, optional
        Base output directory. If None, uses ./output in the current
        working directory.

    Returns
    -------
    dict
        Dictionary with paths: 'base', 'consolidated', 'logs'
    """
    if base_output_dir is None:
        base_output_dir = Path.cwd() / "output"

    base_output_dir = Path(base_output_dir).expanduser().resolve()

    directories = {
        "base": base_output_dir,
        "consolidated": base_output_dir / "consolidated",
        "logs": base_output_dir / "logs",
    }

    for path in directories.values():
        path.mkdir(parents=True, exist_ok=True)

    return directories


def get_log_path(output_dirs, tag=None):
    """
    Get timestamped log file path.

    Parameters
    ----------
    output_dirs : dict
        Output directories from setup_output_directories()
    tag : str, optional
        Dataset tag used in the file name

    Returns
    -------
    Path
        logs/consolidation_{tag}_{YYYYMMDD_HHMMSS}.log
    """
    log_dir = Path(output_dirs["logs"])
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")

    if tag:
        filename = f"consolidation_{tag}_{timestamp}.log"
    else:
        filename = f"consolidation_{timestamp}.log"

    return log_dir / filename
