"""Formal pipeline invariants.

This file documents what each stage MUST produce. This is architecture, not code.
Use this file as a reviewer anchor and system reference.
"""

PIPELINE_INVARIANTS = {
    "ingestion": [
        "Every row carries a non-blank species label",
        "Every sample_date parses with the configured date format",
        "Every abundance category is blank or a configured code",
        "month, year and day_of_year are derived from sample_date only",
    ],

    "filtering": [
        "Excluded sites are dropped before any other filter",
        "Excluded years are dropped after sites, before blank abundances",
        "Blank abundance rows are dropped before effort is computed",
        "Every surviving site maps to exactly one region and one water body",
    ],

    "effort": [
        "Computed on raw (pre-merge) species labels",
        "effort >= 1 for every (date, site) with an observation",
        "Shared by every species row of the same (date, site)",
    ],

    "consolidation": [
        "One row per (date, site_id, canonical species)",
        "abundance is the SUM of ordinal codes over colliding raw rows",
        "mean_abundance == abundance / effort",
        "presence == 1 on every row",
        "No synonym alias survives, only canonical labels",
        "Excluded sites and years never appear",
    ],

    "wide": [
        "One row per distinct (date, site_id) of the consolidated table",
        "One column per distinct canonical species of the consolidated table",
        "Species cells are 0/1 integers, 0 where the species was not recorded",
        "Species columns ordered alphabetically after the metadata columns",
    ],

    "season": [
        "Long and wide tables are filtered with the same month window",
        "Species columns without any presence in the window are dropped",
    ],
}

# Which stages are optional vs required
STAGE_REQUIREMENTS = {
    "ingestion": "REQUIRED",
    "filtering": "REQUIRED",
    "effort": "REQUIRED",
    "consolidation": "REQUIRED",
    "wide": "REQUIRED",
    "season": "OPTIONAL",    # Only when season.apply is set
}
