"""Tests for the static zone directory."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ClusterPlanner.placement import NotFoundError, StaticZoneDirectory, load_zone_directory


def test_load_zone_directory_yaml(zone_directory_file: Path) -> None:
    directory = load_zone_directory(zone_directory_file)

    zones = directory.azs_for_region("r1")
    assert [zone.id for zone in zones] == ["r1-a", "r1-b", "r1-c"]
    assert zones[0].cloud_name == "aws"
    assert zones[0].region_code == "us-west-2"
    assert zones[0].subnet_id == "subnet-r1-a"
    assert "empty" in directory.regions()
    assert directory.azs_for_region("empty") == []


def test_load_zone_directory_json(tmp_path: Path) -> None:
    path = tmp_path / "zones.json"
    path.write_text(
        json.dumps(
            {
                "clouds": [
                    {
                        "id": "gcp-1",
                        "name": "gcp",
                        "regions": [{"id": "g1", "code": "us-central1", "zones": [{"id": "g1-a", "subnet_id": "s1"}]}],
                    }
                ]
            }
        ),
        encoding="utf-8",
    )
    directory = load_zone_directory(path)

    zone = directory.zone("g1-a")
    assert zone.region_id == "g1"
    assert zone.cloud_id == "gcp-1"
    assert zone.subnet_id == "s1"
    assert zone.name == "g1-a"


def test_load_zone_directory_rejects_unknown_format(tmp_path: Path) -> None:
    path = tmp_path / "zones.txt"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ValueError):
        load_zone_directory(path)


def test_unknown_region_and_zone_raise_not_found(zone_directory: StaticZoneDirectory) -> None:
    with pytest.raises(NotFoundError):
        zone_directory.azs_for_region("nowhere")
    with pytest.raises(NotFoundError):
        zone_directory.zone("nowhere-a")


def test_duplicate_zone_ids_are_rejected(zone_factory) -> None:
    directory = StaticZoneDirectory([zone_factory("a", "r", "s")])
    with pytest.raises(ValueError):
        directory.add(zone_factory("a", "r", "s2"))


def test_load_zone_directory_rejects_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "zones.yaml"
    path.write_text("clouds: [unclosed", encoding="utf-8")
    with pytest.raises(ValueError):
        load_zone_directory(path)


def test_region_without_id_is_a_value_error(tmp_path: Path) -> None:
    path = tmp_path / "zones.yaml"
    path.write_text(
        "clouds:\n  - id: c1\n    regions:\n      - code: us-west-2\n        zones: []\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="Missing 'id' in region of cloud 'c1'"):
        load_zone_directory(path)


def test_top_level_list_is_a_value_error(tmp_path: Path) -> None:
    path = tmp_path / "zones.yaml"
    path.write_text("- id: c1\n", encoding="utf-8")
    with pytest.raises(ValueError, match="must be a mapping"):
        load_zone_directory(path)


def test_zones_must_be_a_list_of_mappings() -> None:
    data = {"clouds": [{"id": "c1", "regions": [{"id": "r1", "zones": ["r1-a"]}]}]}
    with pytest.raises(ValueError, match="'zones' of region 'r1'"):
        StaticZoneDirectory.from_mapping(data)
