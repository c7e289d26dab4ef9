"""
Terminal preview of one built metric.

Reads meta.json and latest/<id>.json from a finished build and prints
the legend, the dominant data year and the top and bottom countries,
the same reductions the map tiles use.

    python examples/preview_metric.py NY.GDP.PCAP.CD
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from glance import config
from glance.catalog import get_metric
from glance.geo import country_names, load_geojson
from glance.pipeline.writer import ArtifactWriter
from glance.presentation.breaks import (
    classify,
    legend_labels,
    metric_breaks,
    ranked_values,
    year_label,
)
from glance.presentation.formatting import format_number


def main():
    metric_id = sys.argv[1] if len(sys.argv) > 1 else "NY.GDP.PCAP.CD"
    writer = ArtifactWriter(config.OUTPUT_DIR)

    manifest = writer.read_manifest()
    metric = get_metric(metric_id, manifest.metrics)
    artifact = writer.read_artifact(metric_id)

    names = {}
    if Path(config.GEO_PATH).exists():
        names = country_names(load_geojson(config.GEO_PATH))

    fmt = lambda x: format_number(x, metric.unit)
    breaks = metric_breaks(artifact.values)

    print("=" * 60)
    print(f"{metric.name} ({metric.unit}), {year_label(artifact.values)}")
    print("=" * 60)
    print(f"Built:      {manifest.updated_at}")
    print(f"Countries:  {artifact.country_count}")
    print(f"Legend:     {' | '.join(legend_labels(breaks, fmt))}")
    print()

    rows = ranked_values(artifact.values)

    print("--- Top 10 ---")
    for iso3, year, value in rows[:10]:
        name = names.get(iso3, iso3)
        print(f"  {name:28s}  {fmt(value):>10s}  ({year})  class {classify(value, breaks)}")
    print()

    print("--- Bottom 5 ---")
    for iso3, year, value in rows[-5:]:
        name = names.get(iso3, iso3)
        print(f"  {name:28s}  {fmt(value):>10s}  ({year})  class {classify(value, breaks)}")


if __name__ == "__main__":
    main()
