"""
zvlib.session — Per-run backup session.

A BackupSession fixes the run timestamp once and derives every path the
stages share from it: the working directory, the JSON backup, the archive,
the inventory workbook and the S3 object key.
"""

import datetime
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from zvlib.config import DEFAULT_BACKUP_ROOT, DEFAULT_FILE_PREFIX, config_value, get_base_dir

TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


@dataclass(frozen=True)
class BackupSession:
    """Paths and timestamp shared by every stage of one run."""

    timestamp: str
    base_dir: Path
    backup_root: str = DEFAULT_BACKUP_ROOT
    file_prefix: str = DEFAULT_FILE_PREFIX

    @classmethod
    def start(
        cls,
        now: Optional[datetime.datetime] = None,
        base_dir: Optional[Path] = None,
    ) -> "BackupSession":
        """
        Create a session stamped with ``now`` (default: the current local time).

        Args:
            now: Timestamp for the run
            base_dir: Directory to create the backup root under (default: from config)

        Returns:
            BackupSession: New session
        """
        now = now or datetime.datetime.now()
        return cls(
            timestamp=now.strftime(TIMESTAMP_FORMAT),
            base_dir=Path(base_dir) if base_dir is not None else get_base_dir(),
            backup_root=config_value("backup_root", DEFAULT_BACKUP_ROOT),
            file_prefix=config_value("file_prefix", DEFAULT_FILE_PREFIX),
        )

    @property
    def backup_folder(self) -> str:
        """Date-stamped folder name, also used as the S3 key prefix."""
        return f"{self.backup_root}/{self.timestamp}"

    @property
    def work_dir(self) -> Path:
        return self.base_dir / self.backup_root / self.timestamp

    @property
    def file_stem(self) -> str:
        return f"{self.file_prefix}-{self.timestamp}"

    @property
    def json_path(self) -> Path:
        return self.work_dir / f"{self.file_stem}.json"

    @property
    def archive_path(self) -> Path:
        return self.work_dir / f"{self.file_stem}.zip"

    @property
    def inventory_path(self) -> Path:
        return self.work_dir / f"{self.file_stem}-inventory.xlsx"

    @property
    def object_key(self) -> str:
        return f"{self.backup_folder}/{self.archive_path.name}"

    def ensure_work_dir(self) -> Path:
        """Create the working directory if it doesn't exist."""
        self.work_dir.mkdir(parents=True, exist_ok=True)
        return self.work_dir
