"""
Moto-based tests for zvlib.uploader.
"""

from unittest.mock import MagicMock

import boto3
import pytest
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import NoCredentialsError
from moto import mock_aws

from zvlib.results import Outcome
from zvlib.uploader import upload_backup

BUCKET = "zonevault-backups-test"


@pytest.fixture
def archive(session):
    session.ensure_work_dir()
    session.archive_path.write_bytes(b"PK\x05\x06" + b"\x00" * 18)
    return session.archive_path


class TestUploadBackup:
    @pytest.mark.parametrize("bucket_name", ["", "   ", "\t\n"])
    def test_blank_bucket_name_rejected_without_calls(self, session, archive, bucket_name):
        s3 = MagicMock()

        result = upload_backup(session, s3, bucket_name)

        assert result.outcome is Outcome.INVALID_INPUT
        s3.head_bucket.assert_not_called()
        s3.upload_file.assert_not_called()

    def test_missing_archive_is_precondition_failure(self, session):
        s3 = MagicMock()

        result = upload_backup(session, s3, BUCKET)

        assert result.outcome is Outcome.PRECONDITION_FAILED
        assert "export and zip first" in result.message
        s3.upload_file.assert_not_called()

    @mock_aws
    def test_upload_under_dated_key(self, session, archive):
        s3 = boto3.client("s3", region_name="us-east-1")
        s3.create_bucket(Bucket=BUCKET)

        result = upload_backup(session, s3, f"  {BUCKET} ")

        assert result.ok
        expected_key = f"{session.backup_root}/{session.timestamp}/{archive.name}"
        assert result.details == {"bucket": BUCKET, "key": expected_key}
        body = s3.get_object(Bucket=BUCKET, Key=expected_key)["Body"].read()
        assert body == archive.read_bytes()

    @mock_aws
    def test_missing_bucket_aborts_before_upload(self, session, archive):
        s3 = boto3.client("s3", region_name="us-east-1")

        result = upload_backup(session, s3, "no-such-bucket-zonevault")

        assert result.outcome is Outcome.CALL_FAILED
        assert "does not exist or is not accessible" in result.message

    def test_unreachable_bucket_check(self, session, archive):
        s3 = MagicMock()
        s3.head_bucket.side_effect = NoCredentialsError()

        result = upload_backup(session, s3, BUCKET)

        assert result.outcome is Outcome.UNREACHABLE
        s3.upload_file.assert_not_called()

    def test_transfer_failure_reported(self, session, archive):
        s3 = MagicMock()
        s3.upload_file.side_effect = S3UploadFailedError("Failed to upload: AccessDenied")

        result = upload_backup(session, s3, BUCKET)

        assert result.outcome is Outcome.CALL_FAILED
        assert result.message.startswith("Upload failed")

    def test_archive_vanishing_before_transfer_is_reported(self, session, archive):
        s3 = MagicMock()
        s3.upload_file.side_effect = FileNotFoundError(2, "No such file", str(archive))

        result = upload_backup(session, s3, BUCKET)

        assert result.outcome is Outcome.IO_FAILED
        assert result.message.startswith("Upload failed")
