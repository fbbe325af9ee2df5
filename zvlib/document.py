"""
zvlib.document — Backup document model and JSON persistence.

A backup document is a JSON array of zone exports. Key names follow Route 53's
own change-batch shape so the restorer can replay ``Comment``/``Changes``
without translating them:

    [
      {
        "ZoneName": "example.com",
        "ZoneId": "Z0123456789ABC",
        "Comment": "Restore of example.com from ZoneVault backup 2026-10-18_09-30-00",
        "Changes": [
          {"Action": "UPSERT",
           "ResourceRecordSet": {"Name": "www.example.com.", "Type": "A", "TTL": 300,
                                 "ResourceRecords": [{"Value": "192.0.2.10"}]}}
        ]
      }
    ]
"""

import contextlib
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

UPSERT = "UPSERT"


class BackupDocumentError(ValueError):
    """The file is not a readable ZoneVault backup document."""


@dataclass
class ZoneExport:
    """One hosted zone's exported state."""

    zone_name: str
    zone_id: str
    comment: str
    changes: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ZoneName": self.zone_name,
            "ZoneId": self.zone_id,
            "Comment": self.comment,
            "Changes": self.changes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ZoneExport":
        if not isinstance(data, dict):
            raise BackupDocumentError(f"Zone entry must be an object, got {type(data).__name__}")
        try:
            zone_name = data["ZoneName"]
            changes = data["Changes"]
        except KeyError as e:
            raise BackupDocumentError(f"Zone entry is missing required field {e}") from e
        if not isinstance(zone_name, str) or not zone_name:
            raise BackupDocumentError("ZoneName must be a non-empty string")
        if not isinstance(changes, list):
            raise BackupDocumentError(f"Changes for {zone_name} must be a list")
        return cls(
            zone_name=zone_name,
            zone_id=data.get("ZoneId", ""),
            comment=data.get("Comment", ""),
            changes=changes,
        )

    def change_batch(self) -> Dict[str, Any]:
        """The change batch exactly as persisted."""
        return {"Comment": self.comment, "Changes": self.changes}


def write_json(path: Path, payload: Any) -> Path:
    """
    Write ``payload`` as UTF-8 JSON (no byte-order mark).

    Serializes to a sibling .tmp file and moves it into place, so readers never
    see a partially written file.
    """
    path = Path(path)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp_path.unlink()
        raise
    return path


def dump_backup(path: Path, zones: List[ZoneExport]) -> Path:
    """Persist a backup document."""
    return write_json(path, [zone.to_dict() for zone in zones])


def parse_backup(data: Union[List[Any], Any]) -> List[ZoneExport]:
    """Validate the decoded JSON and build ZoneExport objects."""
    if not isinstance(data, list):
        raise BackupDocumentError("Backup document must be a JSON array of zones")
    return [ZoneExport.from_dict(entry) for entry in data]


def read_backup(path: Path) -> List[ZoneExport]:
    """
    Read a backup document from disk.

    Raises:
        FileNotFoundError: path does not exist
        BackupDocumentError: the file is not valid JSON or not a backup document
    """
    # utf-8-sig tolerates documents saved by editors that add a BOM
    with open(path, "r", encoding="utf-8-sig") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise BackupDocumentError(f"Invalid JSON in backup file: {e}") from e
    return parse_backup(data)
