"""Shared test fixtures and path setup."""
import sys
from pathlib import Path
from unittest.mock import MagicMock

# Add src/ to sys.path so tests can import glance.* without installing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
import requests

from glance.models import MetricDescriptor


def make_response(status=200, json_data=None, text=""):
    """Build a fake ``requests.Response``."""
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = json_data
    resp.text = text
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status}")
    else:
        resp.raise_for_status.return_value = None
    return resp


# --- World Bank fixtures ---

@pytest.fixture
def wb_page_1():
    """Page 1 of 2 for an indicator across all countries."""
    return [
        {"page": 1, "pages": 2, "per_page": 20000, "total": 5},
        [
            {"indicator": {"id": "SP.POP.TOTL", "value": "Population, total"}, "country": {"id": "FR", "value": "France"}, "countryiso3code": "FRA", "date": "2018", "value": None},
            {"indicator": {"id": "SP.POP.TOTL", "value": "Population, total"}, "country": {"id": "FR", "value": "France"}, "countryiso3code": "FRA", "date": "2017", "value": 5},
            {"indicator": {"id": "SP.POP.TOTL", "value": "Population, total"}, "country": {"id": "1W", "value": "World"}, "countryiso3code": "", "date": "2023", "value": 8000000000},
        ],
    ]


@pytest.fixture
def wb_page_2():
    """Page 2 of 2."""
    return [
        {"page": 2, "pages": 2, "per_page": 20000, "total": 5},
        [
            {"indicator": {"id": "SP.POP.TOTL", "value": "Population, total"}, "country": {"id": "JP", "value": "Japan"}, "countryiso3code": "JPN", "date": "2022", "value": 125124989},
            {"indicator": {"id": "SP.POP.TOTL", "value": "Population, total"}, "country": {"id": "JP", "value": "Japan"}, "countryiso3code": "JPN", "date": "2023", "value": 124516650},
        ],
    ]


# --- OWID fixtures ---

@pytest.fixture
def owid_csv():
    """Trimmed OWID CO2 CSV: a country, an aggregate, gaps and bad cells."""
    return (
        "country,year,iso_code,population,co2,co2_per_capita\n"
        "United States,2019,USA,329000000,10,30.1\n"
        "United States,2021,USA,332000000,12,\n"
        "United States,2020,USA,331000000,11,33.2\n"
        "World,2021,OWID_WRL,7900000000,37000,4.7\n"
        "Africa,2021,,1370000000,1400,1.0\n"
        "Germany,2021,DEU,83000000,n/a,8.1\n"
        "Germany,2020,DEU,83000000,644,7.7\n"
        "\n"
        "Kosovo,year?,KOS,1800000,9,5.0\n"
    )


@pytest.fixture
def owid_dataset(owid_csv):
    from glance.extractors.owid import parse_csv
    return parse_csv(owid_csv)


# --- Catalog / geo fixtures ---

@pytest.fixture
def small_catalog():
    return [
        MetricDescriptor("SP.POP.TOTL", "Population", "people", "worldbank"),
        MetricDescriptor("co2", "CO₂ (total)", "million tonnes", "owid"),
        MetricDescriptor("co2_per_capita", "CO₂ per capita", "tonnes/person", "owid"),
    ]


@pytest.fixture
def geojson():
    return {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "properties": {"ISO_A3": "FRA", "ADMIN": "France"}, "geometry": None},
            {"type": "Feature", "properties": {"iso_a3": "JPN", "name": "Japan"}, "geometry": None},
            {"type": "Feature", "properties": {"ISO_A3": "ATA"}, "geometry": None},
        ],
    }
