"""phytomon User Configuration.

This is the user-facing configuration file. Modify settings here to describe
a monitoring dataset. Expert defaults are in phytomon.schemas.param.

Usage:
    python scripts/run_consolidation.py scripts/user_config.py
    python scripts/run_consolidation.py scripts/user_config.py --season
"""

CONFIG = {
    # ========================================================================
    # INPUT & OUTPUT
    # ========================================================================
    "INPUT_FILE": "data/phytoplankton_observations.csv",
    "BASE_DIR": "output",              # All outputs go here
    "DATE_FORMAT": "%d.%m.%Y",         # e.g. 09.06.2014
    "SEPARATOR": ";",
    "OUTPUT_FORMAT": "parquet",        # "parquet" or "csv"

    # ========================================================================
    # SITE LOOKUPS
    # Every site in the data needs both a region and a water body.
    # ========================================================================
    "SITE_REGIONS": {
        "SVS": "north",
        "HOL": "north",
        "LYN": "north",
        "ARE": "south",
        "KRI": "south",
        "FLE": "south",
    },
    "SITE_WATER_BODIES": {
        "SVS": "Svalbard Sound",
        "HOL": "Outer Fjord",
        "LYN": "Outer Fjord",
        "ARE": "Skagerrak Coast",
        "KRI": "Skagerrak Coast",
        "FLE": "Inner Fjord",
    },

    # ========================================================================
    # EXCLUSIONS
    # Sites with too few samples or biased sampling windows, and years with
    # unreliable species identification.
    # ========================================================================
    "EXCLUDED_SITES": ["FLE"],
    "EXCLUDED_YEARS": [2009],

    # ========================================================================
    # SEASON
    # ========================================================================
    "SEASON_MONTHS": (4, 9),           # April-September inclusive
    "APPLY_SEASON": False,

    # Note: species synonym groups (Chaetoceros taxa) are configured in
    # phytomon.schemas.param; add groups here with "SPECIES_SYNONYMS".
}
