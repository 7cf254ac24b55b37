#!/usr/bin/env python3
"""``phytomon`` consolidation runner.

Usage:
    python scripts/run_consolidation.py scripts/user_config.py
    python scripts/run_consolidation.py scripts/user_config.py --input data/2014.csv
    python scripts/run_consolidation.py scripts/user_config.py --season --format csv

Note: User config in scripts/user_config.py, expert defaults in phytomon.schemas.param
"""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from phytomon.cli import main


if __name__ == "__main__":
    sys.exit(main())
