"""
Metric catalog.

The static list of indicators the build fetches and the map grid shows,
in display order. World Bank ids are indicator codes; OWID ids are
column names in the CO2 dataset.
"""

from typing import Dict, List

from .models import MetricDescriptor

METRICS: List[MetricDescriptor] = [
    # Demographics
    MetricDescriptor("SP.POP.TOTL", "Population", "people", "worldbank"),
    MetricDescriptor("SP.POP.GROW", "Population growth", "%", "worldbank"),
    MetricDescriptor("SP.URB.TOTL.IN.ZS", "Urban population", "%", "worldbank"),
    MetricDescriptor("SP.DYN.LE00.IN", "Life expectancy", "years", "worldbank"),
    MetricDescriptor("SP.DYN.TFRT.IN", "Fertility rate", "births/woman", "worldbank"),

    # Economy
    MetricDescriptor("NY.GDP.MKTP.CD", "GDP", "current US$", "worldbank"),
    MetricDescriptor("NY.GDP.PCAP.CD", "GDP per capita", "current US$", "worldbank"),
    MetricDescriptor("NY.GDP.MKTP.KD.ZG", "GDP growth", "%", "worldbank"),
    MetricDescriptor("FP.CPI.TOTL.ZG", "Inflation (CPI)", "%", "worldbank"),
    MetricDescriptor("SL.UEM.TOTL.ZS", "Unemployment", "%", "worldbank"),
    MetricDescriptor("NE.EXP.GNFS.ZS", "Exports", "% of GDP", "worldbank"),
    MetricDescriptor("NE.IMP.GNFS.ZS", "Imports", "% of GDP", "worldbank"),
    MetricDescriptor("NE.CON.GOVT.ZS", "Gov. final consumption", "% of GDP", "worldbank"),

    # Health / development
    MetricDescriptor("SH.DYN.MORT", "Under-5 mortality", "per 1,000", "worldbank"),
    MetricDescriptor("SH.STA.MMRT", "Maternal mortality", "per 100,000", "worldbank"),
    MetricDescriptor("SH.MED.PHYS.ZS", "Physicians", "per 1,000", "worldbank"),
    MetricDescriptor("SH.MED.BEDS.ZS", "Hospital beds", "per 1,000", "worldbank"),
    MetricDescriptor("EG.ELC.ACCS.ZS", "Access to electricity", "%", "worldbank"),
    MetricDescriptor("IT.NET.USER.ZS", "Internet users", "%", "worldbank"),

    # Education
    MetricDescriptor("SE.ADT.LITR.ZS", "Adult literacy", "%", "worldbank"),
    MetricDescriptor("SE.SEC.ENRR", "Secondary enrollment", "%", "worldbank"),
    MetricDescriptor("SE.TER.ENRR", "Tertiary enrollment", "%", "worldbank"),

    # Our World in Data
    MetricDescriptor("co2_per_capita", "CO₂ per capita", "tonnes/person", "owid"),
    MetricDescriptor("co2", "CO₂ (total)", "million tonnes", "owid"),
    MetricDescriptor("energy_per_capita", "Energy per capita", "kWh/person", "owid"),
    MetricDescriptor("co2_per_unit_energy", "CO₂ per unit energy", "kg per kWh (approx)", "owid"),
    MetricDescriptor(
        "consumption_co2_per_capita", "Consumption CO₂ per capita", "tonnes/person", "owid"
    ),
]


def by_source(source: str, metrics: List[MetricDescriptor] = None) -> List[MetricDescriptor]:
    """Return the metrics served by one source, in catalog order."""
    return [m for m in (metrics if metrics is not None else METRICS) if m.source == source]


def get_metric(metric_id: str, metrics: List[MetricDescriptor] = None) -> MetricDescriptor:
    """Look up a metric by id.

    Raises:
        KeyError: If no metric has that id.
    """
    index: Dict[str, MetricDescriptor] = {
        m.id: m for m in (metrics if metrics is not None else METRICS)
    }
    if metric_id not in index:
        raise KeyError(f"Metric '{metric_id}' is not in the catalog")
    return index[metric_id]
