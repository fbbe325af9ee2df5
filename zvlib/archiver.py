"""
zvlib.archiver — Compress the JSON backup into a single-entry zip.
"""

import logging
import zipfile

from zvlib.results import Outcome, StageResult
from zvlib.session import BackupSession

logger = logging.getLogger(__name__)


def archive_backup(session: BackupSession) -> StageResult:
    """
    Zip the session's JSON backup to a sibling .zip, replacing any existing archive.

    Args:
        session: Current backup session

    Returns:
        StageResult: OK with ``path`` set to the archive, PRECONDITION_FAILED
        when there is no JSON backup yet, or IO_FAILED if the zip cannot be written
    """
    json_path = session.json_path
    if not json_path.is_file():
        logger.warning("Backup file not found: %s", json_path)
        return StageResult(
            Outcome.PRECONDITION_FAILED,
            f"Backup file {json_path.name} not found. Run export first.",
        )

    zip_path = session.archive_path
    try:
        # Mode 'w' truncates any archive left by an earlier run
        with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as zipf:
            zipf.write(json_path, arcname=json_path.name)
        size = zip_path.stat().st_size
    except OSError as e:
        logger.error("Failed to create archive %s: %s", zip_path, e)
        return StageResult(Outcome.IO_FAILED, f"Could not create archive: {e}")

    logger.info("Archive created: %s (%d bytes)", zip_path, size)
    return StageResult(
        Outcome.OK,
        f"Archive created: {zip_path.name}",
        path=zip_path,
        details={"size_bytes": size},
    )
