"""
zvlib.inventory — Human-readable Excel companion to a backup document.

Writes a workbook with a Zones summary sheet and a Records detail sheet so a
backup can be reviewed without reading JSON. The restorer never reads it.
"""

import contextlib
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import IllegalCharacterError

from zvlib.document import ZoneExport

logger = logging.getLogger(__name__)

MAX_COLUMN_WIDTH = 50

ZONE_COLUMNS = ["Zone Name", "Zone ID", "Record Sets", "Record Types"]
RECORD_COLUMNS = [
    "Zone Name",
    "Record Name",
    "Type",
    "Routing Policy",
    "TTL",
    "Values/Alias Target",
    "Set Identifier",
]


def describe_routing_policy(rrs: Dict[str, Any]) -> str:
    """Summarize the routing policy of a ResourceRecordSet."""
    if "Weight" in rrs:
        return f"Weighted (Weight: {rrs['Weight']})"
    if rrs.get("Region"):
        return f"Latency ({rrs['Region']})"
    if rrs.get("Failover"):
        return f"Failover ({rrs['Failover']})"
    geo = rrs.get("GeoLocation")
    if geo:
        geo_str = geo.get("ContinentCode") or geo.get("CountryCode") or geo.get("SubdivisionCode")
        return f"Geolocation ({geo_str or 'Geolocation'})"
    if rrs.get("MultiValueAnswer"):
        return "Multivalue Answer"
    return "Simple"


def describe_values(rrs: Dict[str, Any]) -> str:
    alias = rrs.get("AliasTarget")
    if alias:
        return (
            f"ALIAS: {alias.get('DNSName', '')} (Zone: {alias.get('HostedZoneId', '')}, "
            f"EvaluateHealth: {alias.get('EvaluateTargetHealth', False)})"
        )
    values = [r.get("Value", "") for r in rrs.get("ResourceRecords", [])]
    return ", ".join(values) if values else "N/A"


def zones_to_frames(zones: List[ZoneExport]) -> Dict[str, pd.DataFrame]:
    """Flatten zone exports into {sheet name: DataFrame}."""
    zone_rows = []
    record_rows = []

    for zone in zones:
        types = []
        for change in zone.changes:
            rrs = change["ResourceRecordSet"]
            if rrs["Type"] not in types:
                types.append(rrs["Type"])
            record_rows.append({
                "Zone Name": zone.zone_name,
                "Record Name": rrs["Name"],
                "Type": rrs["Type"],
                "Routing Policy": describe_routing_policy(rrs),
                "TTL": rrs.get("TTL", "N/A"),
                "Values/Alias Target": describe_values(rrs),
                "Set Identifier": rrs.get("SetIdentifier", "N/A"),
            })

        zone_rows.append({
            "Zone Name": zone.zone_name,
            "Zone ID": zone.zone_id,
            "Record Sets": len(zone.changes),
            "Record Types": ", ".join(types) if types else "N/A",
        })

    return {
        "Zones": pd.DataFrame(zone_rows, columns=ZONE_COLUMNS),
        "Records": pd.DataFrame(record_rows, columns=RECORD_COLUMNS),
    }


def write_inventory(zones: List[ZoneExport], path: Path) -> Optional[Path]:
    """
    Save the inventory workbook.

    Returns:
        Path to the workbook, or None if it could not be written
    """
    frames = zones_to_frames(zones)
    try:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet_name, df in frames.items():
                df.to_excel(writer, sheet_name=sheet_name, index=False)

                if df.empty:
                    continue
                worksheet = writer.sheets[sheet_name]
                for i, column in enumerate(df.columns):
                    width = max(df[column].astype(str).map(len).max(), len(column)) + 2
                    worksheet.column_dimensions[get_column_letter(i + 1)].width = min(
                        width, MAX_COLUMN_WIDTH
                    )
    except (OSError, ValueError, IllegalCharacterError) as e:
        logger.warning("Could not write inventory workbook %s: %s", path, e)
        with contextlib.suppress(OSError):
            Path(path).unlink()
        return None

    logger.info("Inventory workbook written to %s", path)
    return Path(path)
