"""
zvlib.restorer — Replay a backup document into Route 53.

For each selected zone the restorer finds the live hosted zone by name (or
creates it), writes the zone's change batch to a temporary file and submits
it with change_resource_record_sets. All changes are UPSERTs, so restoring
the same document twice leaves the zone unchanged the second time.

Zones are processed independently: a failure on one zone is reported and the
loop moves on. There is no rollback of zones already restored.
"""

import contextlib
import datetime
import hashlib
import json
import logging
import re
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

from zvlib.document import BackupDocumentError, ZoneExport, read_backup, write_json
from zvlib.errors import AwsOperationError, aws_operation
from zvlib.exporter import strip_zone_id
from zvlib.results import Outcome, RestoreReport, StageResult, ZoneRestoreResult
from zvlib.session import BackupSession

logger = logging.getLogger(__name__)

MAX_CALLER_REFERENCE = 128


class RestoreMode(Enum):
    ALL = "all"
    SUBSET = "subset"


_MODE_ALIASES = {
    "1": RestoreMode.ALL,
    "all": RestoreMode.ALL,
    "2": RestoreMode.SUBSET,
    "subset": RestoreMode.SUBSET,
}


# ---------------------------------------------------------------------------
# Loading and selection
# ---------------------------------------------------------------------------


def clean_path_input(raw: str) -> Path:
    """Trim whitespace and the quotes shells/file managers wrap around paths."""
    return Path(raw.strip().strip("'\"").strip())


def load_backup(path: Union[str, Path]) -> Tuple[StageResult, List[ZoneExport]]:
    """
    Load a backup document for restoring.

    Returns:
        tuple: (StageResult, zones). zones is empty unless the result is OK.
    """
    path = Path(path)
    if not str(path).strip() or not path.is_file():
        return (
            StageResult(Outcome.PRECONDITION_FAILED, f"Backup file not found: {path}"),
            [],
        )

    try:
        zones = read_backup(path)
    except BackupDocumentError as e:
        return StageResult(Outcome.INVALID_INPUT, f"{path.name} is not a valid backup: {e}"), []
    except OSError as e:
        return StageResult(Outcome.PRECONDITION_FAILED, f"Could not read {path}: {e}"), []

    logger.info("Loaded %d zone(s) from %s", len(zones), path)
    return StageResult(Outcome.OK, f"Loaded {len(zones)} zone(s).", path=path), zones


def parse_restore_mode(text: str) -> Optional[RestoreMode]:
    """Map menu input ('1'/'all', '2'/'subset') to a RestoreMode, or None."""
    return _MODE_ALIASES.get((text or "").strip().lower())


def parse_zone_names(names_csv: str) -> List[str]:
    """Split a comma-separated list into trimmed, lower-cased, non-empty names."""
    return [n.strip().lower() for n in (names_csv or "").split(",") if n.strip()]


def select_zones(
    zones: List[ZoneExport],
    mode: RestoreMode,
    names_csv: str = "",
) -> List[ZoneExport]:
    """
    Choose which zones to restore.

    SUBSET matches names case-insensitively against ZoneName and keeps the
    document's order. An empty list means nothing matched.
    """
    if mode is RestoreMode.ALL:
        return list(zones)

    wanted = set(parse_zone_names(names_csv))
    return [z for z in zones if z.zone_name.lower() in wanted]


def choose_zones(
    zones: List[ZoneExport],
    mode_text: str,
    names_csv: str = "",
) -> Tuple[Optional[StageResult], List[ZoneExport]]:
    """
    Apply the user's restore option and zone list.

    Returns:
        tuple: (None, selected zones), or (INVALID_INPUT / NO_OP result, [])
        when the restore should stop before any AWS call
    """
    mode = parse_restore_mode(mode_text)
    if mode is None:
        return (
            StageResult(
                Outcome.INVALID_INPUT,
                f"Invalid restore option '{(mode_text or '').strip()}'. "
                "Restore aborted, no changes made.",
            ),
            [],
        )

    selected = select_zones(zones, mode, names_csv)
    if not selected:
        return (
            StageResult(
                Outcome.NO_OP,
                "No zones in the backup matched the given names. Nothing restored.",
            ),
            [],
        )
    return None, selected


# ---------------------------------------------------------------------------
# Per-zone restore
# ---------------------------------------------------------------------------


def make_caller_reference(zone_name: str, now: Optional[datetime.datetime] = None) -> str:
    """
    Unique create_hosted_zone token derived from the current time (second precision).

    Route 53 caps CallerReference at 128 characters. Longer names are cut and
    a short digest of the full name keeps the token distinct.
    """
    now = now or datetime.datetime.now()
    stamp = f"{now:%Y%m%d%H%M%S}"
    reference = f"{zone_name}-{stamp}"
    if len(reference) <= MAX_CALLER_REFERENCE:
        return reference

    digest = hashlib.sha1(zone_name.encode("utf-8")).hexdigest()[:12]
    keep = MAX_CALLER_REFERENCE - len(stamp) - len(digest) - 2
    return f"{zone_name[:keep]}-{digest}-{stamp}"


def find_hosted_zone_id(route53, zone_name: str) -> Optional[str]:
    """
    Return the bare id of the live zone whose name is exactly ``zone_name + '.'``.

    Raises:
        AwsOperationError: zone listing failed
    """
    target = f"{zone_name}."
    with aws_operation("Listing Route 53 hosted zones"):
        paginator = route53.get_paginator("list_hosted_zones")
        for page in paginator.paginate():
            for zone in page.get("HostedZones", []):
                if zone["Name"] == target:
                    return strip_zone_id(zone["Id"])
    return None


def resolve_zone(route53, zone_name: str, caller_reference: str) -> Tuple[str, bool]:
    """
    Find the live zone by name, creating it if it doesn't exist.

    Returns:
        tuple: (bare zone id, created)

    Raises:
        AwsOperationError: listing or creation failed
    """
    zone_id = find_hosted_zone_id(route53, zone_name)
    if zone_id:
        logger.info("Found existing hosted zone %s (%s)", zone_name, zone_id)
        return zone_id, False

    if zone_name != zone_name.lower():
        logger.warning(
            "No hosted zone named exactly '%s.'; zone lookup is case-sensitive, "
            "a new zone will be created",
            zone_name,
        )

    with aws_operation(f"Creating hosted zone {zone_name}"):
        response = route53.create_hosted_zone(Name=zone_name, CallerReference=caller_reference)
    zone_id = strip_zone_id(response["HostedZone"]["Id"])
    logger.info("Created hosted zone %s (%s)", zone_name, zone_id)
    return zone_id, True


def _batch_file_path(work_dir: Path, zone_name: str, timestamp: str) -> Path:
    safe_name = re.sub(r"[^A-Za-z0-9._-]", "_", zone_name)
    return work_dir / f"change-batch-{safe_name}-{timestamp}.json"


def submit_change_batch(route53, zone_id: str, zone: ZoneExport, batch_path: Path) -> str:
    """
    Write the zone's change batch to ``batch_path`` and submit that file's contents.

    The file is always removed afterwards; failing to remove it is ignored.

    Returns:
        str: Route 53 change id

    Raises:
        AwsOperationError: the change was rejected or could not be sent
        OSError: the batch file could not be written or read
    """
    try:
        write_json(batch_path, zone.change_batch())
        with open(batch_path, "r", encoding="utf-8") as f:
            change_batch = json.load(f)

        with aws_operation(f"Submitting {len(zone.changes)} change(s) to {zone.zone_name}"):
            response = route53.change_resource_record_sets(
                HostedZoneId=zone_id,
                ChangeBatch=change_batch,
            )
        return response["ChangeInfo"]["Id"]
    finally:
        with contextlib.suppress(OSError):
            batch_path.unlink()


def restore_zone(
    route53,
    zone: ZoneExport,
    session: BackupSession,
    now: Optional[datetime.datetime] = None,
) -> ZoneRestoreResult:
    """Resolve one zone and replay its changes. Never raises."""
    now = now or datetime.datetime.now()
    zone_id = None
    created = False

    try:
        zone_id, created = resolve_zone(
            route53, zone.zone_name, make_caller_reference(zone.zone_name, now)
        )

        if not zone.changes:
            return ZoneRestoreResult(
                zone.zone_name,
                Outcome.OK,
                "No record changes to apply.",
                zone_id=zone_id,
                created=created,
            )

        session.ensure_work_dir()
        batch_path = _batch_file_path(
            session.work_dir, zone.zone_name, now.strftime("%Y%m%d%H%M%S")
        )
        change_id = submit_change_batch(route53, zone_id, zone, batch_path)

    except AwsOperationError as e:
        return ZoneRestoreResult(
            zone.zone_name, e.outcome, e.message, zone_id=zone_id, created=created
        )
    except OSError as e:
        logger.error("Could not stage change batch for %s: %s", zone.zone_name, e)
        return ZoneRestoreResult(
            zone.zone_name,
            Outcome.IO_FAILED,
            f"Could not stage change batch: {e}",
            zone_id=zone_id,
            created=created,
        )

    logger.info("Restored %s: %d change(s) submitted (%s)", zone.zone_name, len(zone.changes), change_id)
    return ZoneRestoreResult(
        zone.zone_name,
        Outcome.OK,
        f"Submitted {len(zone.changes)} change(s).",
        zone_id=zone_id,
        created=created,
        change_id=change_id,
        change_count=len(zone.changes),
    )


def restore_zones(
    route53,
    zones: List[ZoneExport],
    session: BackupSession,
    now: Optional[datetime.datetime] = None,
) -> RestoreReport:
    """Restore each zone in turn, isolating failures to the zone that raised them."""
    report = RestoreReport()
    for zone in zones:
        result = restore_zone(route53, zone, session, now=now)
        if result.ok:
            logger.info("SUCCESS: %s - %s", zone.zone_name, result.message)
        else:
            logger.error("FAILED: %s - %s", zone.zone_name, result.message)
        report.zones.append(result)
    return report


def restore_backup(
    route53,
    session: BackupSession,
    path: Union[str, Path],
    mode_text: str,
    names_csv: str = "",
) -> StageResult:
    """
    Non-interactive restore: load, select and replay in one call.

    Args:
        route53: boto3 Route 53 client
        session: Current backup session (its working directory holds the temp batch files)
        path: Backup document path
        mode_text: '1'/'all' or '2'/'subset'
        names_csv: Comma-separated zone names for subset mode

    Returns:
        StageResult: collapsed RestoreReport, or the load/selection failure
    """
    loaded, zones = load_backup(path)
    if not loaded.ok:
        return loaded

    rejected, selected = choose_zones(zones, mode_text, names_csv)
    if rejected:
        return rejected

    return restore_zones(route53, selected, session).to_stage_result()
