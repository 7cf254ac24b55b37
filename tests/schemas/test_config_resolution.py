"""Test config resolution and validation with Pydantic."""

import pytest
from pydantic import ValidationError

from phytomon.schemas import ParamConfig, UserConfig, CLIConfig, InternalConfig
from phytomon.schemas.resolve import resolve_config, deep_merge

pytestmark = pytest.mark.unit


class TestConfigResolution:
    """Test resolve_config() precedence and merging."""

    def test_resolve_config_all_defaults(self):
        """Resolving with no user/CLI overrides uses all ParamConfig defaults."""
        config = resolve_config(ParamConfig(), None, None)

        assert isinstance(config, InternalConfig)
        assert config.abundance.codes == {"P": 1, "A": 2, "B": 3}
        assert config.input.date_format == "%d.%m.%Y"
        assert config.sites.excluded == []
        assert config.years.excluded == []
        assert config.season.months == (4, 5, 6, 7, 8, 9)
        assert config.output.format == "parquet"
        assert config.input.path is None  # No default input file

    def test_default_synonym_group(self):
        config = resolve_config(ParamConfig(), None, None)
        aliases = config.species.alias_map()

        assert aliases["Chaetoceros socialis"] == "Chaetoceros spp."
        assert aliases["Chaetoceros sp."] == "Chaetoceros spp."
        assert "Skeletonema costatum" not in aliases

    def test_user_config_overrides_param_config(self):
        """UserConfig values override ParamConfig defaults."""
        user = UserConfig(EXCLUDED_SITES=["FLE"], EXCLUDED_YEARS=[2009])
        config = resolve_config(ParamConfig(), user, None)

        assert config.sites.excluded == ["FLE"]
        assert config.years.excluded == [2009]

    def test_user_synonyms_extend_defaults(self):
        """Synonym groups merge key by key."""
        user = UserConfig(SPECIES_SYNONYMS={"Pseudo-nitzschia spp.": ["Pseudo-nitzschia seriata"]})
        config = resolve_config(ParamConfig(), user, None)

        assert set(config.species.synonyms) == {"Chaetoceros spp.", "Pseudo-nitzschia spp."}

    def test_empty_user_config_uses_all_param_defaults(self):
        """Empty UserConfig() doesn't override anything."""
        config = resolve_config(ParamConfig(), UserConfig(), None)
        assert config == resolve_config(ParamConfig(), None, None)

    def test_dict_inputs_are_validated(self):
        config = resolve_config({}, {"EXCLUDED_SITES": "FLE"}, {"season": True})

        assert config.sites.excluded == ["FLE"]
        assert config.season.apply is True

    def test_internal_config_is_frozen(self, internal_config):
        with pytest.raises(ValidationError):
            internal_config.base_dir = "/tmp"


class TestLookupTables:
    """Test site lookup validation."""

    def test_regions_are_lowercased(self):
        user = UserConfig(SITE_REGIONS={"SVS": "North", "ARE": " SOUTH "})
        config = resolve_config(ParamConfig(), user, None)

        assert config.sites.regions == {"SVS": "north", "ARE": "south"}

    def test_unknown_region_rejected(self):
        user = UserConfig(SITE_REGIONS={"SVS": "east"})
        with pytest.raises(ValidationError):
            resolve_config(ParamConfig(), user, None)

    def test_alias_in_two_groups_rejected(self):
        user = UserConfig(SPECIES_SYNONYMS={"Other spp.": ["Chaetoceros socialis"]})
        with pytest.raises(ValidationError, match="belongs to both"):
            resolve_config(ParamConfig(), user, None)

    def test_alias_that_is_canonical_rejected(self):
        with pytest.raises(ValidationError, match="itself a canonical name"):
            ParamConfig(species={"synonyms": {"A spp.": ["B spp."], "B spp.": ["b"]}})

    def test_self_alias_allowed(self):
        cfg = ParamConfig(species={"synonyms": {"A spp.": ["A spp.", "A x"]}})
        assert cfg.species.synonyms["A spp."] == ["A spp.", "A x"]


class TestAbundanceCodes:

    def test_symbols_normalized(self):
        cfg = ParamConfig(abundance={"codes": {"p": 1, " a ": 2}})
        assert cfg.abundance.codes == {"P": 1, "A": 2}

    def test_duplicate_ordinals_rejected(self):
        with pytest.raises(ValidationError, match="distinct"):
            ParamConfig(abundance={"codes": {"P": 1, "A": 1}})

    def test_ordinals_must_be_positive(self):
        with pytest.raises(ValidationError, match=">= 1"):
            ParamConfig(abundance={"codes": {"P": 0}})


class TestSeason:

    def test_season_months_alias(self):
        user = UserConfig(SEASON_MONTHS=(5, 8), APPLY_SEASON=True)
        config = resolve_config(ParamConfig(), user, None)

        assert config.season.months == (5, 6, 7, 8)
        assert config.season.apply is True

    def test_wrapping_window_rejected(self):
        with pytest.raises(ValidationError):
            UserConfig(SEASON_MONTHS=(10, 3))

    def test_nested_season_wins_over_flat(self):
        user = UserConfig(SEASON_MONTHS=(5, 8), season={"start_month": 6})
        config = resolve_config(ParamConfig(), user, None)

        assert config.season.start_month == 6
        assert config.season.end_month == 8


class TestDeepMerge:

    def test_nested_dicts_merge(self):
        base = {"a": 1, "b": {"c": 2, "d": 3}}
        override = {"b": {"d": 4, "e": 5}, "f": 6}
        assert deep_merge(base, override) == {"a": 1, "b": {"c": 2, "d": 4, "e": 5}, "f": 6}

    def test_lists_are_replaced(self):
        assert deep_merge({"x": [1, 2]}, {"x": [3]}) == {"x": [3]}

    def test_base_not_mutated(self):
        base = {"b": {"c": 2}}
        deep_merge(base, {"b": {"c": 3}})
        assert base == {"b": {"c": 2}}
