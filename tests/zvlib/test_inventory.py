"""
Tests for zvlib.inventory — Excel companion workbook.
"""

import pandas as pd

from zvlib.document import ZoneExport
from zvlib.inventory import (
    describe_routing_policy,
    describe_values,
    write_inventory,
    zones_to_frames,
)


def _zones():
    return [
        ZoneExport("example.com", "Z1", "c", [
            {"Action": "UPSERT", "ResourceRecordSet": {
                "Name": "www.example.com.", "Type": "A", "TTL": 300,
                "ResourceRecords": [{"Value": "192.0.2.1"}, {"Value": "192.0.2.2"}]}},
            {"Action": "UPSERT", "ResourceRecordSet": {
                "Name": "cdn.example.com.", "Type": "A",
                "AliasTarget": {"HostedZoneId": "Z2FDTNDATAQYW2",
                                "DNSName": "d111.cloudfront.net.",
                                "EvaluateTargetHealth": False}}},
        ]),
        ZoneExport("empty.org", "Z2", "c", []),
    ]


class TestDescribe:
    def test_routing_policies(self):
        assert describe_routing_policy({"Weight": 10}) == "Weighted (Weight: 10)"
        assert describe_routing_policy({"Region": "eu-west-1"}) == "Latency (eu-west-1)"
        assert describe_routing_policy({"Failover": "PRIMARY"}) == "Failover (PRIMARY)"
        assert describe_routing_policy({"GeoLocation": {"CountryCode": "DE"}}) == "Geolocation (DE)"
        assert describe_routing_policy({"MultiValueAnswer": True}) == "Multivalue Answer"
        assert describe_routing_policy({}) == "Simple"

    def test_values(self):
        assert describe_values({"ResourceRecords": [{"Value": "a"}, {"Value": "b"}]}) == "a, b"
        assert describe_values({}) == "N/A"
        assert describe_values({"AliasTarget": {"DNSName": "x."}}).startswith("ALIAS: x.")


class TestZonesToFrames:
    def test_frames(self):
        frames = zones_to_frames(_zones())

        zones = frames["Zones"]
        assert list(zones["Zone Name"]) == ["example.com", "empty.org"]
        assert list(zones["Record Sets"]) == [2, 0]
        assert len(frames["Records"]) == 2


class TestWriteInventory:
    def test_workbook_round_trip(self, tmp_path):
        path = write_inventory(_zones(), tmp_path / "inventory.xlsx")

        assert path == tmp_path / "inventory.xlsx"
        sheets = pd.read_excel(path, sheet_name=None)
        assert set(sheets) == {"Zones", "Records"}
        assert list(sheets["Records"]["Record Name"]) == ["www.example.com.", "cdn.example.com."]

    def test_unwritable_path_returns_none(self, tmp_path):
        assert write_inventory(_zones(), tmp_path / "missing-dir" / "inventory.xlsx") is None

    def test_control_characters_skip_workbook(self, tmp_path):
        zones = [
            ZoneExport("example.com", "Z1", "c", [
                {"Action": "UPSERT", "ResourceRecordSet": {
                    "Name": "bell.example.com.", "Type": "TXT", "TTL": 300,
                    "ResourceRecords": [{"Value": '"ring\x07"'}]}},
            ]),
        ]

        assert write_inventory(zones, tmp_path / "inventory.xlsx") is None
        assert not (tmp_path / "inventory.xlsx").exists()
