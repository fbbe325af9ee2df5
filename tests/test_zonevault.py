#!/usr/bin/env python3
"""
Tests for the zonevault.py menu: command dispatch and the interactive flows
for export, archive, upload and restore.
"""

import json
from unittest.mock import MagicMock

import boto3
from moto import mock_aws

import zonevault
from zonevault import COMMANDS, MenuContext, dispatch, run_menu
from zvlib.document import ZoneExport, dump_backup
from zvlib.results import Outcome


def _scripted(*answers):
    """Prompt stand-in that returns the given answers in order."""
    iterator = iter(answers)
    return lambda _text: next(iterator)


def _failing_factory():
    raise AssertionError("client should not have been created")


def _ctx(session, *answers, route53=None, s3=None):
    return MenuContext(
        session=session,
        prompt=_scripted(*answers),
        route53_factory=(lambda: route53) if route53 is not None else _failing_factory,
        s3_factory=(lambda: s3) if s3 is not None else _failing_factory,
    )


def _backup(tmp_path, *names):
    zones = [
        ZoneExport(name, "ZOLD", f"Restore of {name}", [
            {"Action": "UPSERT", "ResourceRecordSet": {
                "Name": f"{name}.", "Type": "A", "TTL": 300,
                "ResourceRecords": [{"Value": "192.0.2.1"}]}},
        ])
        for name in names
    ]
    return dump_backup(tmp_path / "backup.json", zones)


class TestCommandTable:
    def test_five_numbered_options(self):
        assert list(COMMANDS) == ["1", "2", "3", "4", "5"]
        assert COMMANDS["5"].handler is None

    def test_exit_returns_none(self, session):
        assert dispatch(_ctx(session), "5") is None

    def test_invalid_selection(self, session):
        result = dispatch(_ctx(session), "9")
        assert result.outcome is Outcome.INVALID_INPUT

    def test_unexpected_handler_error_is_reported(self, session, monkeypatch):
        def boom(_ctx):
            raise RuntimeError("profile not found")

        monkeypatch.setitem(COMMANDS, "1", zonevault.Command("Export hosted zones to JSON", boom))

        result = dispatch(_ctx(session), "1")

        assert result.outcome is Outcome.UNREACHABLE
        assert "profile not found" in result.message


class TestRunMenu:
    def test_loops_until_exit(self, session, capsys):
        run_menu(_ctx(session, "2", "9", "5"))

        out = capsys.readouterr().out
        assert "Run export first" in out
        assert "Invalid selection" in out
        assert "Exiting ZoneVault." in out

    def test_archive_before_export_creates_nothing(self, session):
        run_menu(_ctx(session, "2", "5"))
        assert not session.archive_path.exists()


class TestExportAndArchive:
    @mock_aws
    def test_export_then_zip(self, session):
        route53 = boto3.client("route53", region_name="us-east-1")
        zone = route53.create_hosted_zone(Name="example.com", CallerReference="ref")
        route53.change_resource_record_sets(
            HostedZoneId=zone["HostedZone"]["Id"],
            ChangeBatch={"Changes": [{"Action": "CREATE", "ResourceRecordSet": {
                "Name": "www.example.com.", "Type": "A", "TTL": 60,
                "ResourceRecords": [{"Value": "192.0.2.7"}]}}]},
        )
        ctx = _ctx(session, route53=route53)

        exported = dispatch(ctx, "1")
        archived = dispatch(ctx, "2")

        assert exported.ok
        assert archived.ok
        assert session.inventory_path.exists()
        assert session.archive_path.exists()

    def test_inventory_can_be_disabled(self, session, isolated_config):
        isolated_config.write_text(json.dumps({"write_inventory": False}), encoding="utf-8")
        route53 = MagicMock()
        route53.get_paginator.return_value.paginate.return_value = [{"HostedZones": []}]

        result = dispatch(_ctx(session, route53=route53), "1")

        assert result.ok
        assert not session.inventory_path.exists()


class TestUploadFlow:
    def test_requires_archive_before_prompting(self, session):
        result = dispatch(_ctx(session), "3")

        assert result.outcome is Outcome.PRECONDITION_FAILED
        assert "export and zip first" in result.message

    def test_whitespace_bucket_rejected_without_upload(self, session):
        session.ensure_work_dir()
        session.archive_path.write_bytes(b"zip")
        s3 = MagicMock()

        result = dispatch(_ctx(session, "   ", s3=s3), "3")

        assert result.outcome is Outcome.INVALID_INPUT
        s3.head_bucket.assert_not_called()
        s3.upload_file.assert_not_called()

    def test_upload_uses_prompted_bucket(self, session):
        session.ensure_work_dir()
        session.archive_path.write_bytes(b"zip")
        s3 = MagicMock()

        result = dispatch(_ctx(session, " my-bucket ", s3=s3), "3")

        assert result.ok
        s3.head_bucket.assert_called_once_with(Bucket="my-bucket")
        s3.upload_file.assert_called_once_with(
            str(session.archive_path), "my-bucket", session.object_key
        )


class TestRestoreFlow:
    def test_missing_file(self, session, tmp_path):
        result = dispatch(_ctx(session, str(tmp_path / "missing.json")), "4")
        assert result.outcome is Outcome.PRECONDITION_FAILED

    def test_invalid_mode_aborts(self, session, tmp_path):
        path = _backup(tmp_path, "a.com")

        result = dispatch(_ctx(session, str(path), "x"), "4")

        assert result.outcome is Outcome.INVALID_INPUT

    def test_subset_without_matches_is_no_op(self, session, tmp_path):
        path = _backup(tmp_path, "a.com", "b.com")

        result = dispatch(_ctx(session, str(path), "2", "nothing.net"), "4")

        assert result.outcome is Outcome.NO_OP

    def test_subset_restores_only_selected_zone(self, session, tmp_path, capsys):
        path = _backup(tmp_path, "a.com", "b.com")
        route53 = MagicMock()
        route53.get_paginator.return_value.paginate.return_value = [{"HostedZones": [
            {"Id": "/hostedzone/ZA", "Name": "a.com."},
            {"Id": "/hostedzone/ZB", "Name": "b.com."},
        ]}]
        route53.change_resource_record_sets.return_value = {"ChangeInfo": {"Id": "/change/C1"}}

        result = dispatch(_ctx(session, f'"{path}"', "2", "B.COM", route53=route53), "4")

        assert result.ok
        route53.change_resource_record_sets.assert_called_once()
        assert route53.change_resource_record_sets.call_args[1]["HostedZoneId"] == "ZB"
        out = capsys.readouterr().out
        assert "a.com" in out  # zone listing shows everything in the file
        assert "[OK] b.com" in out

    @mock_aws
    def test_restore_all_with_moto(self, session, tmp_path):
        path = _backup(tmp_path, "a.com", "b.com")
        route53 = boto3.client("route53", region_name="us-east-1")

        result = dispatch(_ctx(session, str(path), "1", route53=route53), "4")

        assert result.ok
        names = sorted(z["Name"] for z in route53.list_hosted_zones()["HostedZones"])
        assert names == ["a.com.", "b.com."]


class TestMain:
    def test_main_runs_menu_and_exits(self, monkeypatch, tmp_path):
        monkeypatch.setattr(zonevault.utils, "get_logs_dir", lambda: tmp_path / "logs")
        monkeypatch.setenv("ZONEVAULT_BASE_DIR", str(tmp_path))
        monkeypatch.setattr(
            zonevault.aws_client, "validate_aws_credentials", lambda: (True, "123456789012", None)
        )
        monkeypatch.setattr("builtins.input", lambda _text: "5")

        zonevault.main()

        assert list((tmp_path / "logs").glob("logs-zonevault-*.log"))

    def test_main_handles_ctrl_c(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setattr(zonevault.utils, "get_logs_dir", lambda: tmp_path / "logs")
        monkeypatch.setenv("ZONEVAULT_BASE_DIR", str(tmp_path))
        monkeypatch.setattr(
            zonevault.aws_client, "validate_aws_credentials", lambda: (False, None, "no creds")
        )

        def interrupt(_text):
            raise KeyboardInterrupt

        monkeypatch.setattr("builtins.input", interrupt)

        zonevault.main()

        assert "Operation cancelled by user." in capsys.readouterr().out


class TestExportInventoryFailure:
    def test_inventory_failure_keeps_export_successful(self, session, monkeypatch):
        route53 = MagicMock()
        route53.get_paginator.return_value.paginate.return_value = [{"HostedZones": []}]
        monkeypatch.setattr(zonevault, "write_inventory", lambda zones, path: None)

        result = dispatch(_ctx(session, route53=route53), "1")

        assert result.ok
        assert session.json_path.exists()
