from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402

from ClusterPlanner.placement import AvailabilityZoneInfo, StaticZoneDirectory  # noqa: E402

ZONE_DIRECTORY_YAML = """
clouds:
  - id: cloud-aws
    name: aws
    regions:
      - id: r1
        code: us-west-2
        name: US West
        zones:
          - {id: r1-a, name: us-west-2a, subnet: subnet-r1-a}
          - {id: r1-b, name: us-west-2b, subnet: subnet-r1-b}
          - {id: r1-c, name: us-west-2c, subnet: subnet-r1-c}
      - id: r2
        code: us-east-1
        name: US East
        zones:
          - {id: r2-a, name: us-east-1a, subnet: subnet-r2-a}
          - {id: r2-b, name: us-east-1b, subnet: subnet-r2-b}
      - id: r3
        code: eu-west-1
        name: EU West
        zones:
          - {id: r3-a, name: eu-west-1a, subnet: subnet-r3-a}
      - id: r4
        code: ap-south-1
        name: Asia Pacific
        zones:
          - {id: r4-a, name: ap-south-1a, subnet: subnet-r4-a}
      - id: empty
        code: sa-east-1
        name: South America
        zones: []
"""


def make_zone(zone_id: str, region_id: str, subnet: str, cloud_id: str = "cloud-aws", cloud_name: str = "aws") -> AvailabilityZoneInfo:
    return AvailabilityZoneInfo(
        id=zone_id,
        name=zone_id,
        subnet_id=subnet,
        region_id=region_id,
        cloud_id=cloud_id,
        cloud_name=cloud_name,
        region_code=f"code-{region_id}",
        region_name=f"Region {region_id}",
    )


@pytest.fixture
def zone_directory_file(tmp_path: Path) -> Path:
    path = tmp_path / "zones.yaml"
    path.write_text(ZONE_DIRECTORY_YAML, encoding="utf-8")
    return path


@pytest.fixture
def zone_directory() -> StaticZoneDirectory:
    import yaml

    return StaticZoneDirectory.from_mapping(yaml.safe_load(ZONE_DIRECTORY_YAML))


@pytest.fixture
def zone_factory():
    return make_zone
