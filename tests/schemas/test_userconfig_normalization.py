"""UserConfig accepts forgiving input and normalizes it."""

import pytest
from pydantic import ValidationError

from phytomon.schemas.user import UserConfig

pytestmark = pytest.mark.unit


def test_uppercase_aliases_and_field_names_are_equivalent():
    by_alias = UserConfig.model_validate({"EXCLUDED_SITES": ["FLE"], "INPUT_FILE": "obs.csv"})
    by_name = UserConfig(excluded_sites=["FLE"], input_file="obs.csv")

    assert by_alias.to_internal_overrides() == by_name.to_internal_overrides()


def test_single_site_becomes_list():
    user = UserConfig(EXCLUDED_SITES="FLE")
    assert user.excluded_sites == ["FLE"]


def test_years_as_strings_are_coerced():
    user = UserConfig(EXCLUDED_YEARS=["2009", 2010])
    assert user.excluded_years == [2009, 2010]


def test_output_format_and_log_level_case():
    user = UserConfig(OUTPUT_FORMAT=" CSV ", LOG_LEVEL="debug")
    assert user.output_format == "csv"
    assert user.log_level == "DEBUG"


def test_unknown_keys_are_ignored():
    user = UserConfig.model_validate({"LEGACY_OPTION": 1, "SEPARATOR": ";"})
    assert user.to_internal_overrides() == {"input": {"separator": ";"}}


def test_invalid_output_format_rejected():
    with pytest.raises(ValidationError):
        UserConfig(OUTPUT_FORMAT="xlsx")


def test_overrides_are_nested():
    user = UserConfig(
        INPUT_FILE="obs.csv",
        DATE_FORMAT="%Y-%m-%d",
        SITE_REGIONS={"SVS": "north"},
        SITE_WATER_BODIES={"SVS": "Sound"},
        EXCLUDED_YEARS=[2009],
        OUTPUT_FORMAT="csv",
    )
    overrides = user.to_internal_overrides()

    assert overrides["input"] == {"path": "obs.csv", "date_format": "%Y-%m-%d"}
    assert overrides["sites"] == {"regions": {"SVS": "north"}, "water_bodies": {"SVS": "Sound"}}
    assert overrides["years"] == {"excluded": [2009]}
    assert overrides["output"] == {"format": "csv"}


def test_nested_section_wins_over_flat_alias():
    user = UserConfig(INPUT_FILE="flat.csv", input={"path": "nested.csv", "separator": ";"})
    assert user.to_internal_overrides()["input"] == {"path": "nested.csv", "separator": ";"}


def test_nested_sections_reject_unknown_fields():
    with pytest.raises(ValidationError):
        UserConfig(sites={"regions": {}, "lakes": {}})


def test_empty_user_config_has_no_overrides():
    assert UserConfig().to_internal_overrides() == {}
