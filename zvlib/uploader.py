"""
zvlib.uploader — Upload the backup archive to S3.
"""

import logging

from zvlib.errors import AwsOperationError, aws_operation
from zvlib.results import Outcome, StageResult
from zvlib.session import BackupSession

logger = logging.getLogger(__name__)


def verify_bucket(s3, bucket_name: str) -> None:
    """
    Check that the bucket exists and is reachable with the current credentials.

    Raises:
        AwsOperationError: head_bucket failed
    """
    with aws_operation(f"Checking S3 bucket {bucket_name}"):
        s3.head_bucket(Bucket=bucket_name)


def upload_backup(session: BackupSession, s3, bucket_name: str) -> StageResult:
    """
    Upload the session archive to ``s3://<bucket>/<backup_folder>/<archive name>``.

    Never raises: every failure is returned as a StageResult.

    Args:
        session: Current backup session
        s3: boto3 S3 client
        bucket_name: Destination bucket (surrounding whitespace ignored)

    Returns:
        StageResult: OK with details["key"] set, or the failure outcome
    """
    bucket_name = (bucket_name or "").strip()
    if not bucket_name:
        return StageResult(Outcome.INVALID_INPUT, "Bucket name cannot be empty. Nothing uploaded.")

    archive_path = session.archive_path
    if not archive_path.is_file():
        return StageResult(
            Outcome.PRECONDITION_FAILED,
            f"Archive {archive_path.name} not found. Run export and zip first.",
        )

    try:
        verify_bucket(s3, bucket_name)
    except AwsOperationError as e:
        return StageResult(
            e.outcome,
            f"Bucket '{bucket_name}' does not exist or is not accessible ({e.message}). "
            "Nothing uploaded.",
        )

    key = session.object_key
    try:
        with aws_operation(f"Uploading {archive_path.name} to s3://{bucket_name}/{key}"):
            s3.upload_file(str(archive_path), bucket_name, key)
    except AwsOperationError as e:
        return StageResult(e.outcome, f"Upload failed: {e.message}")
    except OSError as e:
        logger.error("Could not read archive %s: %s", archive_path, e)
        return StageResult(Outcome.IO_FAILED, f"Upload failed, archive could not be read: {e}")

    logger.info("Uploaded %s to s3://%s/%s", archive_path, bucket_name, key)
    return StageResult(
        Outcome.OK,
        f"Uploaded to s3://{bucket_name}/{key}",
        path=archive_path,
        details={"bucket": bucket_name, "key": key},
    )
