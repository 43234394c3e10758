from pathlib import Path

import pytest

from postcode_finder.common.config_loader import load_all_configs
from postcode_finder.search.regions import RegionClassifier

EXPECTED_TABLE = {
    "Elmbridge": "Surrey Downs",
    "Epsom and Ewell": "Surrey Downs",
    "Kingston upon Thames": "Kingston upon Thames",
    "Mole Valley": "Surrey Downs",
    "Reigate and Banstead": "Surrey Downs",
    "Richmond upon Thames": "Richmond upon Thames",
    "Runnymede": "North West Surrey",
    "Spelthorne": "North West Surrey",
}


@pytest.fixture()
def classifier() -> RegionClassifier:
    return RegionClassifier.from_config(load_all_configs(Path("config")).regions)


def test_repo_table_matches_known_areas(classifier):
    for area, region in EXPECTED_TABLE.items():
        assert classifier.classify(area) == region
    assert dict(classifier.table) == EXPECTED_TABLE


def test_scenario_richmond_and_westminster(classifier):
    assert classifier.classify("Richmond upon Thames") == "Richmond upon Thames"
    assert classifier.classify("Westminster") == "Outside"


@pytest.mark.parametrize("area", ["richmond upon thames", "Richmond Upon Thames", " Elmbridge", "", None])
def test_naming_mismatch_classifies_outside(classifier, area):
    assert classifier.classify(area) == "Outside"


def test_classification_carries_area(classifier):
    result = classifier.classification("Spelthorne")
    assert result.administrative_area == "Spelthorne"
    assert result.region == "North West Surrey"


def test_regions_are_distinct_in_table_order(classifier):
    assert classifier.regions == ["Surrey Downs", "Kingston upon Thames", "Richmond upon Thames", "North West Surrey"]


def test_table_is_read_only(classifier):
    with pytest.raises(TypeError):
        classifier.table["Westminster"] = "Surrey Downs"


def test_injected_table_is_copied():
    areas = {"Elmbridge": "Surrey Downs"}
    classifier = RegionClassifier(areas)
    areas["Westminster"] = "Surrey Downs"
    assert classifier.classify("Westminster") == "Outside"


def test_colour_for_falls_back_to_grey(classifier):
    assert classifier.colour_for("Surrey Downs") == "#F39C12"
    assert classifier.colour_for("Outside") == "#999999"
