"""Tests for the data model, metric catalog and boundary file helpers."""

import os
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from conftest import make_response
from glance.catalog import METRICS, by_source, get_metric
from glance.exceptions import SourceFetchError
from glance.geo import country_names, ensure_geojson
from glance.models import (
    LatestValue,
    Manifest,
    MetricArtifact,
    MetricDescriptor,
    utc_timestamp,
)


class TestModels:

    def test_descriptor_rejects_unknown_source(self):
        with pytest.raises(ValueError, match="unknown source"):
            MetricDescriptor("x", "X", "", "imf")

    def test_descriptor_is_immutable(self):
        m = METRICS[0]
        with pytest.raises(AttributeError):
            m.id = "other"

    def test_artifact_shape(self):
        artifact = MetricArtifact("co2", "2024-01-01T00:00:00.000Z", {"USA": LatestValue(2021, 12.0)})
        assert artifact.to_dict() == {
            "metricId": "co2",
            "updatedAt": "2024-01-01T00:00:00.000Z",
            "values": {"USA": {"year": 2021, "value": 12.0}},
        }
        assert MetricArtifact.from_dict(artifact.to_dict()) == artifact

    def test_manifest_shape(self):
        manifest = Manifest("2024-01-01T00:00:00.000Z", METRICS[:1], notes="n")
        assert manifest.to_dict() == {
            "updatedAt": "2024-01-01T00:00:00.000Z",
            "metrics": [{"id": "SP.POP.TOTL", "name": "Population", "unit": "people", "source": "worldbank"}],
            "notes": "n",
        }

    def test_utc_timestamp(self):
        when = datetime(2024, 3, 5, 6, 7, 8, 912345, tzinfo=timezone.utc)
        assert utc_timestamp(when) == "2024-03-05T06:07:08.912Z"


class TestCatalog:

    def test_ids_unique(self):
        ids = [m.id for m in METRICS]
        assert len(ids) == len(set(ids)) == 27

    def test_by_source(self):
        owid = by_source("owid")
        assert [m.id for m in owid] == [
            "co2_per_capita", "co2", "energy_per_capita",
            "co2_per_unit_energy", "consumption_co2_per_capita",
        ]
        assert len(by_source("worldbank")) == 22

    def test_get_metric(self):
        assert get_metric("SP.DYN.LE00.IN").name == "Life expectancy"
        with pytest.raises(KeyError, match="not in the catalog"):
            get_metric("NOPE")


class TestGeo:

    def test_existing_file_kept(self, tmp_path):
        path = tmp_path / "geo" / "countries.geojson"
        path.parent.mkdir()
        path.write_text("x" * 2000, encoding="utf-8")
        session = MagicMock()
        assert ensure_geojson(str(path), "https://geo.example.com", session=session) is False
        session.get.assert_not_called()

    def test_small_file_redownloaded(self, tmp_path):
        path = tmp_path / "geo" / "countries.geojson"
        path.parent.mkdir()
        path.write_text("{}", encoding="utf-8")
        session = MagicMock()
        session.get.return_value = make_response(text='{"type": "FeatureCollection"}')
        assert ensure_geojson(str(path), "https://geo.example.com", session=session) is True
        assert path.read_text(encoding="utf-8") == '{"type": "FeatureCollection"}'

    def test_download_creates_directories(self, tmp_path):
        path = tmp_path / "public" / "geo" / "countries.geojson"
        session = MagicMock()
        session.get.return_value = make_response(text="{}")
        ensure_geojson(str(path), "https://geo.example.com", session=session)
        assert os.path.exists(path)

    def test_download_failure(self, tmp_path):
        session = MagicMock()
        session.get.return_value = make_response(404)
        with pytest.raises(SourceFetchError, match="geo download failed"):
            ensure_geojson(str(tmp_path / "g.geojson"), "https://geo.example.com", session=session)

    def test_connection_failure(self, tmp_path):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("offline")
        with pytest.raises(SourceFetchError):
            ensure_geojson(str(tmp_path / "g.geojson"), "https://geo.example.com", session=session)

    def test_country_names(self, geojson):
        assert country_names(geojson) == {"FRA": "France", "JPN": "Japan"}
