"""
JSON artifact writer.

Lays out the static data tree the map grid fetches::

    <output_dir>/meta.json
    <output_dir>/latest/<metricId>.json
"""

import json
import logging
import os
from typing import Any, Dict

from ..models import Manifest, MetricArtifact

LATEST_DIR = "latest"
MANIFEST_FILE = "meta.json"


class ArtifactWriter:
    """Write pretty-printed JSON artifacts, overwriting previous runs."""

    def __init__(self, output_dir: str):
        self.output_dir = output_dir
        self.latest_dir = os.path.join(output_dir, LATEST_DIR)
        self.logger = logging.getLogger(self.__class__.__name__)

    def prepare(self) -> None:
        """Create the output directories."""
        os.makedirs(self.latest_dir, exist_ok=True)

    def artifact_path(self, metric_id: str) -> str:
        return os.path.join(self.latest_dir, f"{metric_id}.json")

    @property
    def manifest_path(self) -> str:
        return os.path.join(self.output_dir, MANIFEST_FILE)

    def write_artifact(self, artifact: MetricArtifact) -> str:
        path = self.artifact_path(artifact.metric_id)
        write_json(path, artifact.to_dict())
        self.logger.debug("wrote %s (%d countries)", path, artifact.country_count)
        return path

    def write_manifest(self, manifest: Manifest) -> str:
        path = self.manifest_path
        write_json(path, manifest.to_dict())
        self.logger.debug("wrote %s (%d metrics)", path, len(manifest.metrics))
        return path

    def read_artifact(self, metric_id: str) -> MetricArtifact:
        return MetricArtifact.from_dict(read_json(self.artifact_path(metric_id)))

    def read_manifest(self) -> Manifest:
        return Manifest.from_dict(read_json(self.manifest_path))


def write_json(path: str, obj: Dict[str, Any]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)


def read_json(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
