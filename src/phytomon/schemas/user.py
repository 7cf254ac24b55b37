"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs in a variety of formats, with aliases
for common naming patterns (e.g., EXCLUDED_SITES -> excluded_sites,
INPUT_FILE -> input_file).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults. Validation is lenient: a single site
code is accepted where a list is expected, years may be given as strings,
and region names are case-insensitive.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator, model_validator
from phytomon.schemas.base import PhytoBaseModel


def _as_list(v):
    """Wrap a scalar in a list."""
    if v is None or isinstance(v, (list, tuple, set)):
        return list(v) if v is not None else v
    return [v]


class UserInputConfig(PhytoBaseModel):
    """User-facing reader config."""
    path: Optional[str] = None
    separator: Optional[str] = None
    encoding: Optional[str] = None
    date_format: Optional[str] = None
    columns: Optional[dict[str, str]] = None


class UserSitesConfig(PhytoBaseModel):
    """User-facing site lookups."""
    regions: Optional[dict[str, str]] = None
    water_bodies: Optional[dict[str, str]] = None
    excluded: Optional[list[str]] = None

    @field_validator("excluded", mode="before")
    @classmethod
    def coerce_excluded(cls, v):
        return _as_list(v)


class UserSpeciesConfig(PhytoBaseModel):
    """User-facing synonym groups."""
    synonyms: Optional[dict[str, list[str]]] = None


class UserSeasonConfig(PhytoBaseModel):
    """User-facing season window."""
    start_month: Optional[int] = None
    end_month: Optional[int] = None
    apply: Optional[bool] = None


class UserOutputConfig(PhytoBaseModel):
    """User-facing output config."""
    format: Optional[str] = None
    compression: Optional[str] = None

    @field_validator("format", "compression", mode="before")
    @classmethod
    def normalize_names(cls, v):
        """Normalize format names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v


class UserConfig(PhytoBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Users only specify
    what they want to override from ParamConfig defaults.

    This config is converted to internal overrides during resolution.

    Usage
    -----
        user_cfg = UserConfig(
            INPUT_FILE="data/phytoplankton.csv",
            EXCLUDED_SITES=["HAV"],
            EXCLUDED_YEARS=[2009],
            SITE_REGIONS={"SVS": "north"},
            SITE_WATER_BODIES={"SVS": "Sound"},
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    # Top-level operational settings
    input_file: Optional[str] = Field(None, alias="INPUT_FILE")
    base_dir: Optional[str] = Field(None, alias="BASE_DIR")
    date_format: Optional[str] = Field(None, alias="DATE_FORMAT")
    separator: Optional[str] = Field(None, alias="SEPARATOR")

    # Exclusions (flat aliases)
    excluded_sites: Optional[list[str]] = Field(None, alias="EXCLUDED_SITES")
    excluded_years: Optional[list[int]] = Field(None, alias="EXCLUDED_YEARS")

    # Lookup tables (flat aliases)
    site_regions: Optional[dict[str, str]] = Field(None, alias="SITE_REGIONS")
    site_water_bodies: Optional[dict[str, str]] = Field(None, alias="SITE_WATER_BODIES")
    species_synonyms: Optional[dict[str, list[str]]] = Field(None, alias="SPECIES_SYNONYMS")

    # Season and output (flat aliases)
    season_months: Optional[tuple[int, int]] = Field(None, alias="SEASON_MONTHS")
    apply_season: Optional[bool] = Field(None, alias="APPLY_SEASON")
    output_format: Optional[Literal["parquet", "csv"]] = Field(None, alias="OUTPUT_FORMAT")
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(
        None, alias="LOG_LEVEL"
    )

    # Nested overrides (advanced users)
    input: Optional[UserInputConfig] = None
    sites: Optional[UserSitesConfig] = None
    species: Optional[UserSpeciesConfig] = None
    season: Optional[UserSeasonConfig] = None
    output: Optional[UserOutputConfig] = None

    model_config = PhytoBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("excluded_sites", "excluded_years", mode="before")
    @classmethod
    def coerce_lists(cls, v):
        """Accept a single value where a list is expected."""
        return _as_list(v)

    @field_validator("output_format", "log_level", mode="before")
    @classmethod
    def normalize_case(cls, v, info):
        """Output formats are lowercase, log levels uppercase."""
        if not isinstance(v, str):
            return v
        v = v.strip()
        return v.lower() if info.field_name == "output_format" else v.upper()

    @model_validator(mode="after")
    def check_season_months(self):
        """SEASON_MONTHS is an inclusive (start, end) month pair."""
        if self.season_months is not None:
            start, end = self.season_months
            if not (1 <= start <= end <= 12):
                raise ValueError(f"SEASON_MONTHS must satisfy 1 <= start <= end <= 12, got {self.season_months}")
        return self

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Nested sections win over flat aliases when both are given.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.base_dir is not None:
            overrides["base_dir"] = str(self.base_dir)

        # Input section
        input_ = {}
        if self.input_file is not None:
            input_["path"] = self.input_file
        if self.date_format is not None:
            input_["date_format"] = self.date_format
        if self.separator is not None:
            input_["separator"] = self.separator
        if self.input is not None:
            input_.update(self.input.model_dump(exclude_none=True))
        if input_:
            overrides["input"] = input_

        # Sites section
        sites = {}
        if self.site_regions is not None:
            sites["regions"] = self.site_regions
        if self.site_water_bodies is not None:
            sites["water_bodies"] = self.site_water_bodies
        if self.excluded_sites is not None:
            sites["excluded"] = self.excluded_sites
        if self.sites is not None:
            sites.update(self.sites.model_dump(exclude_none=True))
        if sites:
            overrides["sites"] = sites

        if self.excluded_years is not None:
            overrides["years"] = {"excluded": self.excluded_years}

        # Species section
        species = {}
        if self.species_synonyms is not None:
            species["synonyms"] = self.species_synonyms
        if self.species is not None:
            species.update(self.species.model_dump(exclude_none=True))
        if species:
            overrides["species"] = species

        # Season section
        season = {}
        if self.season_months is not None:
            season["start_month"], season["end_month"] = self.season_months
        if self.apply_season is not None:
            season["apply"] = self.apply_season
        if self.season is not None:
            season.update(self.season.model_dump(exclude_none=True))
        if season:
            overrides["season"] = season

        # Output section
        output = {}
        if self.output_format is not None:
            output["format"] = self.output_format
        if self.output is not None:
            output.update(self.output.model_dump(exclude_none=True))
        if output:
            overrides["output"] = output

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
