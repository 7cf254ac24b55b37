"""ParamConfig: Expert defaults for the consolidation pipeline.

This module defines the complete default configuration. ALL pipeline
parameters must have defaults here. No runtime code should define fallback
values - this is the single source of truth for defaults.

Dataset-specific judgments (which sites and years to exclude, which site
belongs to which water body) default to empty and are supplied by the user
config for a given monitoring programme.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator, model_validator
from phytomon.schemas.base import PhytoBaseModel


# =============================================================================
# Shared validation helpers (also used by InternalConfig)
# =============================================================================

def normalize_abundance_codes(codes: dict) -> dict:
    """Upper-case and strip code symbols, check ordinals are distinct and >= 1."""
    normalized = {}
    for symbol, ordinal in codes.items():
        key = str(symbol).strip().upper()
        if not key:
            raise ValueError("Abundance code symbols must not be blank")
        if key in normalized:
            raise ValueError(f"Abundance code {key!r} defined twice")
        normalized[key] = ordinal
    ordinals = list(normalized.values())
    if any(o < 1 for o in ordinals):
        raise ValueError(f"Abundance ordinals must be >= 1, got {ordinals}")
    if len(set(ordinals)) != len(ordinals):
        raise ValueError(f"Abundance ordinals must be distinct, got {ordinals}")
    return normalized


def check_synonym_groups(synonyms: dict) -> dict:
    """Reject aliases shared between canonical groups.

    An alias may repeat its own canonical name, but it may not belong to two
    groups, nor be the canonical name of another group.
    """
    owner = {}
    for canonical, aliases in synonyms.items():
        for alias in aliases:
            if alias in owner and owner[alias] != canonical:
                raise ValueError(
                    f"Species alias {alias!r} belongs to both "
                    f"{owner[alias]!r} and {canonical!r}"
                )
            if alias != canonical and alias in synonyms:
                raise ValueError(
                    f"Species alias {alias!r} of {canonical!r} is itself a canonical name"
                )
            owner[alias] = canonical
    return synonyms


def normalize_regions(regions: dict) -> dict:
    """Lower-case region names so 'North' and 'north' are the same region."""
    return {str(site).strip(): str(region).strip().lower() for site, region in regions.items()}


# =============================================================================
# Nested Configuration Models
# =============================================================================

class InputColumnsConfig(PhytoBaseModel):
    """Source column names in the observation file."""
    sample_date: str = "date"
    site_id: str = "station"
    species: str = "species"
    abundance_category: str = "abundance"
    species_group: str = "group"


class InputConfig(PhytoBaseModel):
    """Observation file reader configuration."""
    path: Optional[str] = None
    separator: str = ","
    encoding: str = "utf-8"
    date_format: str = Field("%d.%m.%Y", description="strptime format of sample dates")
    columns: InputColumnsConfig = Field(default_factory=InputColumnsConfig)


class AbundanceConfig(PhytoBaseModel):
    """Abundance category symbols and their ordinal codes."""
    codes: dict[str, int] = Field(
        default_factory=lambda: {
            "P": 1,  # present
            "A": 2,  # abundant
            "B": 3,  # bloom
        }
    )

    @field_validator("codes")
    @classmethod
    def validate_codes(cls, v):
        """Normalize symbols and check the ordinal scale."""
        return normalize_abundance_codes(v)


class SitesConfig(PhytoBaseModel):
    """Site lookup tables and exclusions."""
    regions: dict[str, Literal["north", "south"]] = Field(default_factory=dict)
    water_bodies: dict[str, str] = Field(default_factory=dict)
    excluded: list[str] = Field(default_factory=list)

    @field_validator("regions", mode="before")
    @classmethod
    def lowercase_regions(cls, v):
        """Accept 'North'/'SOUTH' spellings."""
        if isinstance(v, dict):
            return normalize_regions(v)
        return v


class YearsConfig(PhytoBaseModel):
    """Year exclusions (unreliable species identification)."""
    excluded: list[int] = Field(default_factory=list)


class SpeciesConfig(PhytoBaseModel):
    """Species synonym groups, canonical name -> aliases."""
    synonyms: dict[str, list[str]] = Field(
        default_factory=lambda: {
            "Chaetoceros spp.": [
                "Chaetoceros socialis",
                "Chaetoceros debilis",
                "Chaetoceros curvisetus",
                "Chaetoceros decipiens",
                "Chaetoceros danicus",
                "Chaetoceros convolutus",
                "Chaetoceros sp.",
            ],
        }
    )

    @field_validator("synonyms")
    @classmethod
    def validate_synonyms(cls, v):
        """Aliases must be unique across canonical groups."""
        return check_synonym_groups(v)


class SeasonConfig(PhytoBaseModel):
    """Growing season window used by seasonal subsetting."""
    start_month: int = Field(4, ge=1, le=12)
    end_month: int = Field(9, ge=1, le=12)
    apply: bool = False

    @model_validator(mode="after")
    def check_window(self):
        """Season window must not wrap around the year."""
        if self.start_month > self.end_month:
            raise ValueError(
                f"Season start_month ({self.start_month}) after end_month ({self.end_month})"
            )
        return self


class OutputConfig(PhytoBaseModel):
    """Output file configuration."""
    format: Literal["parquet", "csv"] = "parquet"
    compression: Literal["snappy", "gzip", "lz4", "none"] = "snappy"


class LoggingConfig(PhytoBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(PhytoBaseModel):
    """Complete expert configuration with all defaults.

    This is the single source of truth for all pipeline parameters.
    Every tunable parameter MUST have a default here.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)

    Runtime code only sees InternalConfig.
    """

    base_dir: Optional[str] = None
    input: InputConfig = Field(default_factory=InputConfig)
    abundance: AbundanceConfig = Field(default_factory=AbundanceConfig)
    sites: SitesConfig = Field(default_factory=SitesConfig)
    years: YearsConfig = Field(default_factory=YearsConfig)
    species: SpeciesConfig = Field(default_factory=SpeciesConfig)
    season: SeasonConfig = Field(default_factory=SeasonConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
