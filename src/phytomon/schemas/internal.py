"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and contains NO optional fields that processing code depends on.

All .get() calls, fallback defaults, and validation logic are FORBIDDEN in
runtime code - everything is explicit here.
"""

from typing import Literal, Optional
from pydantic import Field, ConfigDict, field_validator, model_validator
from phytomon.schemas.base import PhytoBaseModel
from phytomon.schemas.param import (
    normalize_abundance_codes,
    check_synonym_groups,
    normalize_regions,
)


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalInputColumnsConfig(PhytoBaseModel):
    """Runtime source column names."""
    sample_date: str
    site_id: str
    species: str
    abundance_category: str
    species_group: str

    def rename_map(self) -> dict:
        """Source column name -> observation field name."""
        return {source: field for field, source in self.model_dump().items()}


class InternalInputConfig(PhytoBaseModel):
    """Runtime reader configuration.

    Note: path may be None while configs are merged; it is validated when
    the CLI loads the input file.
    """
    path: Optional[str]
    separator: str
    encoding: str
    date_format: str
    columns: InternalInputColumnsConfig


class InternalAbundanceConfig(PhytoBaseModel):
    """Runtime abundance code table."""
    codes: dict[str, int]

    @field_validator("codes")
    @classmethod
    def validate_codes(cls, v):
        return normalize_abundance_codes(v)


class InternalSitesConfig(PhytoBaseModel):
    """Runtime site lookups and exclusions."""
    regions: dict[str, Literal["north", "south"]]
    water_bodies: dict[str, str]
    excluded: list[str]

    @field_validator("regions", mode="before")
    @classmethod
    def lowercase_regions(cls, v):
        if isinstance(v, dict):
            return normalize_regions(v)
        return v


class InternalYearsConfig(PhytoBaseModel):
    """Runtime year exclusions."""
    excluded: list[int]


class InternalSpeciesConfig(PhytoBaseModel):
    """Runtime species synonym groups."""
    synonyms: dict[str, list[str]]

    @field_validator("synonyms")
    @classmethod
    def validate_synonyms(cls, v):
        return check_synonym_groups(v)

    def alias_map(self) -> dict:
        """Flatten synonym groups to alias -> canonical name."""
        return {
            alias: canonical
            for canonical, aliases in self.synonyms.items()
            for alias in aliases
        }


class InternalSeasonConfig(PhytoBaseModel):
    """Runtime season window."""
    start_month: int = Field(ge=1, le=12)
    end_month: int = Field(ge=1, le=12)
    apply: bool

    @model_validator(mode="after")
    def check_window(self):
        if self.start_month > self.end_month:
            raise ValueError(
                f"Season start_month ({self.start_month}) after end_month ({self.end_month})"
            )
        return self

    @property
    def months(self) -> tuple:
        return tuple(range(self.start_month, self.end_month + 1))


class InternalOutputConfig(PhytoBaseModel):
    """Runtime output configuration."""
    format: Literal["parquet", "csv"]
    compression: Literal["snappy", "gzip", "lz4", "none"]


class InternalLoggingConfig(PhytoBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(PhytoBaseModel):
    """Authoritative runtime configuration.

    This is the ONLY configuration schema that processing code sees.
    It is fully validated, immutable, and contains explicit values for
    all parameters (no None for fields that runtime depends on).

    Usage
    -----
    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.excluded_sites = config.sites.excluded  # NOT .get()
            self.date_format = config.input.date_format

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO type checking
    - NO validation

    All of that happens during config resolution, not in runtime code.
    """

    base_dir: Optional[str]
    input: InternalInputConfig
    abundance: InternalAbundanceConfig
    sites: InternalSitesConfig
    years: InternalYearsConfig
    species: InternalSpeciesConfig
    season: InternalSeasonConfig
    output: InternalOutputConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
