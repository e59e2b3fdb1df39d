"""Zone directory protocol and a static, file-backed implementation."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Protocol, Sequence

import yaml

from .exceptions import NotFoundError
from .models import AvailabilityZoneInfo

logger = logging.getLogger(__name__)


def _entries(parent: Mapping[str, Any], key: str, where: str) -> List[Mapping[str, Any]]:
    value = parent.get(key) or []
    if not isinstance(value, list) or not all(isinstance(item, Mapping) for item in value):
        raise ValueError(f"'{key}' of {where} must be a list of mappings")
    return value


def _require_id(entry: Mapping[str, Any], where: str) -> str:
    if "id" not in entry:
        raise ValueError(f"Missing 'id' in {where}")
    return str(entry["id"])


class ZoneDirectory(Protocol):
    """Read-only lookups of availability zones and their ancestry."""

    def azs_for_region(self, region_id: str) -> Sequence[AvailabilityZoneInfo]:
        ...

    def zone(self, az_id: str) -> AvailabilityZoneInfo:
        ...


class StaticZoneDirectory:
    """In-memory zone directory keyed by region and AZ identifiers."""

    def __init__(self, zones: Sequence[AvailabilityZoneInfo] = ()) -> None:
        self._zones: Dict[str, AvailabilityZoneInfo] = {}
        self._regions: Dict[str, List[str]] = {}
        for zone in zones:
            self.add(zone)

    def add(self, zone: AvailabilityZoneInfo) -> None:
        if zone.id in self._zones:
            raise ValueError(f"Duplicate availability zone id '{zone.id}'")
        self._zones[zone.id] = zone
        self._regions.setdefault(zone.region_id, []).append(zone.id)

    def register_region(self, region_id: str) -> None:
        """Declare a region that currently has no zones."""

        self._regions.setdefault(region_id, [])

    def regions(self) -> List[str]:
        return list(self._regions)

    def azs_for_region(self, region_id: str) -> List[AvailabilityZoneInfo]:
        if region_id not in self._regions:
            raise NotFoundError(f"Unknown region: {region_id}")
        return [self._zones[az_id] for az_id in self._regions[region_id]]

    def zone(self, az_id: str) -> AvailabilityZoneInfo:
        try:
            return self._zones[az_id]
        except KeyError:
            raise NotFoundError(f"Unknown availability zone: {az_id}") from None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "StaticZoneDirectory":
        """Build a directory from a nested ``clouds -> regions -> zones`` mapping.

        Malformed entries raise ``ValueError`` naming the offending section.
        """

        if not isinstance(data, Mapping):
            raise ValueError("Zone directory must be a mapping with a 'clouds' list")
        directory = cls()
        for cloud in _entries(data, "clouds", "zone directory"):
            cloud_id = _require_id(cloud, "cloud")
            cloud_name = str(cloud.get("name", cloud_id))
            for region in _entries(cloud, "regions", f"cloud '{cloud_id}'"):
                region_id = _require_id(region, f"region of cloud '{cloud_id}'")
                directory.register_region(region_id)
                for zone in _entries(region, "zones", f"region '{region_id}'"):
                    zone_id = _require_id(zone, f"zone of region '{region_id}'")
                    directory.add(
                        AvailabilityZoneInfo(
                            id=zone_id,
                            name=str(zone.get("name", zone_id)),
                            subnet_id=str(zone.get("subnet", zone.get("subnet_id", ""))),
                            region_id=region_id,
                            cloud_id=cloud_id,
                            cloud_name=cloud_name,
                            region_code=str(region.get("code", region_id)),
                            region_name=str(region.get("name", region_id)),
                        )
                    )
        return directory


def load_zone_directory(path: Path) -> StaticZoneDirectory:
    """Load a zone directory from a YAML or JSON file."""

    suffix = path.suffix.lower()
    content = path.read_text(encoding="utf-8")
    if suffix == ".json":
        data = json.loads(content)
    elif suffix in {".yaml", ".yml"}:
        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid zone directory {path}: {exc}") from exc
    else:
        raise ValueError(f"Unsupported zone directory format: {path.suffix}")
    directory = StaticZoneDirectory.from_mapping(data)
    logger.debug("Loaded zone directory %s with %s regions", path, len(directory.regions()))
    return directory
