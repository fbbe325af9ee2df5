"""
zvlib.exporter — Route 53 hosted zone export.

Lists every hosted zone visible to the caller, collects its record sets and
writes them as one JSON backup document. The apex NS record set and the SOA
record set are skipped: Route 53 creates both automatically with a new zone
and rejects UPSERTs that try to replace them wholesale.
"""

import logging
from typing import Any, Dict, List, Tuple

from zvlib.document import UPSERT, ZoneExport, dump_backup
from zvlib.errors import AwsOperationError, aws_operation
from zvlib.results import Outcome, StageResult
from zvlib.session import BackupSession

logger = logging.getLogger(__name__)

# Routing-policy fields carried through so sets sharing a name and type
# remain distinct on restore
ROUTING_FIELDS = (
    "SetIdentifier",
    "Weight",
    "Region",
    "Failover",
    "GeoLocation",
    "GeoProximityLocation",
    "CidrRoutingConfig",
    "MultiValueAnswer",
    "HealthCheckId",
)


def strip_zone_id(raw_id: str) -> str:
    """'/hostedzone/Z123' -> 'Z123'."""
    return raw_id.split("/")[-1]


def strip_root_dot(name: str) -> str:
    """'example.com.' -> 'example.com'."""
    return name[:-1] if name.endswith(".") else name


def is_portable(record_set: Dict[str, Any], zone_name: str) -> bool:
    """
    Return False for record sets Route 53 manages itself.

    Args:
        record_set: ResourceRecordSet as returned by list_resource_record_sets
        zone_name: Zone name without the trailing dot

    Returns:
        bool: True if the record set belongs in a backup
    """
    record_type = record_set.get("Type")
    if record_type == "SOA":
        return False
    if record_type == "NS" and record_set.get("Name") == f"{zone_name}.":
        return False
    return True


def build_change(record_set: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build an UPSERT change entry for one record set.

    TTL and ResourceRecords are only written when Route 53 returned them;
    alias records carry AliasTarget instead.
    """
    rrs: Dict[str, Any] = {
        "Name": record_set["Name"],
        "Type": record_set["Type"],
    }

    for key in ROUTING_FIELDS:
        if key in record_set:
            rrs[key] = record_set[key]

    if "TTL" in record_set:
        rrs["TTL"] = record_set["TTL"]

    resource_records = record_set.get("ResourceRecords")
    if resource_records:
        rrs["ResourceRecords"] = [{"Value": r["Value"]} for r in resource_records]

    alias_target = record_set.get("AliasTarget")
    if alias_target:
        rrs["AliasTarget"] = dict(alias_target)

    return {"Action": UPSERT, "ResourceRecordSet": rrs}


def list_hosted_zones(route53) -> List[Tuple[str, str]]:
    """
    List every hosted zone as (bare zone id, zone name without trailing dot).

    Raises:
        AwsOperationError: listing failed
    """
    zones = []
    with aws_operation("Listing Route 53 hosted zones"):
        paginator = route53.get_paginator("list_hosted_zones")
        for page in paginator.paginate():
            for zone in page.get("HostedZones", []):
                zones.append((strip_zone_id(zone["Id"]), strip_root_dot(zone["Name"])))
    return zones


def collect_zone_changes(route53, zone_id: str, zone_name: str) -> List[Dict[str, Any]]:
    """
    Collect the portable record sets of one zone, in listing order.

    Raises:
        AwsOperationError: record listing failed
    """
    changes = []
    skipped = 0
    with aws_operation(f"Listing record sets for {zone_name}"):
        paginator = route53.get_paginator("list_resource_record_sets")
        for page in paginator.paginate(HostedZoneId=zone_id):
            for record_set in page.get("ResourceRecordSets", []):
                if not is_portable(record_set, zone_name):
                    skipped += 1
                    continue
                changes.append(build_change(record_set))

    logger.debug("%s: %d record set(s) kept, %d skipped", zone_name, len(changes), skipped)
    return changes


def collect_zone_exports(route53, session: BackupSession) -> List[ZoneExport]:
    """
    Build a ZoneExport for every hosted zone.

    Raises:
        AwsOperationError: zone listing, or record listing for any zone, failed
    """
    exports = []
    for zone_id, zone_name in list_hosted_zones(route53):
        logger.info("Processing hosted zone: %s (%s)", zone_name, zone_id)
        changes = collect_zone_changes(route53, zone_id, zone_name)
        exports.append(
            ZoneExport(
                zone_name=zone_name,
                zone_id=zone_id,
                comment=f"Restore of {zone_name} from ZoneVault backup {session.timestamp}",
                changes=changes,
            )
        )
    return exports


def export_zones(session: BackupSession, route53) -> StageResult:
    """
    Export all hosted zones to the session's JSON backup file.

    A failure listing zones, or listing any one zone's records, aborts the
    whole export and leaves no file behind.

    Args:
        session: Current backup session
        route53: boto3 Route 53 client

    Returns:
        StageResult: OK with ``path`` set to the JSON file, or the failure outcome
    """
    try:
        exports = collect_zone_exports(route53, session)
    except AwsOperationError as e:
        return StageResult(e.outcome, f"Export aborted, no backup written. {e}")

    try:
        session.ensure_work_dir()
        dump_backup(session.json_path, exports)
    except OSError as e:
        logger.error("Failed to write backup file %s: %s", session.json_path, e)
        return StageResult(Outcome.IO_FAILED, f"Could not write backup file: {e}")

    record_count = sum(len(z.changes) for z in exports)
    logger.info(
        "Exported %d zone(s), %d record set(s) to %s",
        len(exports),
        record_count,
        session.json_path,
    )
    return StageResult(
        Outcome.OK,
        f"Exported {len(exports)} zone(s) with {record_count} record set(s).",
        path=session.json_path,
        details={
            "zone_count": len(exports),
            "record_count": record_count,
            "zones": exports,
        },
    )
