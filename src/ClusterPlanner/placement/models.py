"""Data models for cluster placement planning."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .exceptions import ConfigurationError


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


class NodeState(str, Enum):
    """Lifecycle states of a planned node."""

    TO_BE_ADDED = "ToBeAdded"
    PROVISIONED = "Provisioned"
    RUNNING = "Running"
    TO_BE_REMOVED = "ToBeRemoved"


@dataclass(frozen=True)
class UserIntent:
    """Validated user request describing where a cluster should live."""

    is_multi_az: bool
    region_list: Tuple[str, ...]
    replication_factor: int = 3
    preferred_region: Optional[str] = None
    instance_type: str = ""

    def validate(self) -> None:
        if not self.region_list:
            raise ConfigurationError("region_list must contain at least one region")
        if self.preferred_region is not None and self.preferred_region not in self.region_list:
            msg = f"Preferred region {self.preferred_region} not in user region list"
            raise ConfigurationError(msg)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "UserIntent":
        """Build an intent from a request payload using camelCase or snake_case keys.

        Snake_case keys win when both spellings are present. Boolean strings
        such as ``"false"`` or ``"0"`` are parsed, not truth-tested.
        """

        if not isinstance(data, Mapping):
            raise ValueError("User intent must be a mapping")

        def _pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in data:
                    return data[key]
            return default

        regions = _pick("region_list", "regionList", default=())
        if isinstance(regions, str):
            regions = (regions,)
        preferred = _pick("preferred_region", "preferredRegion")
        return cls(
            is_multi_az=_parse_bool(_pick("is_multi_az", "isMultiAZ", default=False)),
            region_list=tuple(str(region) for region in regions),
            replication_factor=int(_pick("replication_factor", "replicationFactor", default=3)),
            preferred_region=str(preferred) if preferred is not None else None,
            instance_type=str(_pick("instance_type", "instanceType", default="")),
        )


@dataclass(frozen=True)
class AvailabilityZoneInfo:
    """Zone directory descriptor with the AZ's full region and cloud ancestry."""

    id: str
    name: str
    subnet_id: str
    region_id: str
    cloud_id: str
    cloud_name: str
    region_code: str
    region_name: str


@dataclass
class PlacementAZ:
    id: str
    name: str
    subnet_id: str
    replica_count: int = 0


@dataclass
class PlacementRegion:
    id: str
    code: str
    name: str
    zones: List[PlacementAZ] = field(default_factory=list)


@dataclass
class PlacementCloud:
    id: str
    name: str
    regions: List[PlacementRegion] = field(default_factory=list)


@dataclass
class PlacementTree:
    """Cloud -> region -> AZ hierarchy annotated with per-AZ replica counts."""

    clouds: List[PlacementCloud] = field(default_factory=list)

    def leaves(self) -> Iterator[Tuple[PlacementCloud, PlacementRegion, PlacementAZ]]:
        """Yield (cloud, region, AZ) triples in insertion order."""

        for cloud in self.clouds:
            for region in cloud.regions:
                for zone in region.zones:
                    yield cloud, region, zone

    def zone_count(self) -> int:
        return sum(1 for _ in self.leaves())

    def region_count(self) -> int:
        return sum(len(cloud.regions) for cloud in self.clouds)

    def total_replicas(self) -> int:
        return sum(zone.replica_count for _, _, zone in self.leaves())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clouds": [
                {
                    "id": cloud.id,
                    "name": cloud.name,
                    "regions": [
                        {
                            "id": region.id,
                            "code": region.code,
                            "name": region.name,
                            "zones": [
                                {
                                    "id": zone.id,
                                    "name": zone.name,
                                    "subnet_id": zone.subnet_id,
                                    "replica_count": zone.replica_count,
                                }
                                for zone in region.zones
                            ],
                        }
                        for region in cloud.regions
                    ],
                }
                for cloud in self.clouds
            ]
        }


@dataclass
class NodePlan:
    """Provisioning-ready description of one node before it exists."""

    tentative_name: str
    index: int
    az_id: str
    az_name: str
    cloud_name: str
    region_code: str
    subnet_id: str
    is_consensus_member: bool = False
    is_data_node: bool = True
    state: NodeState = NodeState.TO_BE_ADDED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tentative_name": self.tentative_name,
            "index": self.index,
            "az_id": self.az_id,
            "az_name": self.az_name,
            "cloud_name": self.cloud_name,
            "region_code": self.region_code,
            "subnet_id": self.subnet_id,
            "is_consensus_member": self.is_consensus_member,
            "is_data_node": self.is_data_node,
            "state": self.state.value,
        }


@dataclass(frozen=True)
class ExistingClusterView:
    """Read-only view of the nodes already part of a cluster being edited."""

    nodes: Sequence[NodePlan] = field(default_factory=tuple)
    version: int = 0

    def next_node_index(self) -> int:
        """Return the first free node index, 1 for an empty cluster."""

        return max((node.index for node in self.nodes), default=0) + 1


@dataclass
class PlacementPlan:
    """Result of one planning call."""

    tree: PlacementTree
    nodes: Sequence[NodePlan]

    def consensus_members(self) -> List[NodePlan]:
        return [node for node in self.nodes if node.is_consensus_member]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "placement": self.tree.to_dict(),
            "nodes": [node.to_dict() for node in self.nodes],
        }


@dataclass
class ClusterDefinition:
    """Everything the task layer needs to create or edit a cluster."""

    node_prefix: str
    num_nodes: int
    user_intent: UserIntent
    placement: PlacementTree
    nodes: Sequence[NodePlan]
    expected_version: int
    server_package: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node_prefix": self.node_prefix,
            "num_nodes": self.num_nodes,
            "user_intent": {
                "is_multi_az": self.user_intent.is_multi_az,
                "preferred_region": self.user_intent.preferred_region,
                "region_list": list(self.user_intent.region_list),
                "instance_type": self.user_intent.instance_type,
                "replication_factor": self.user_intent.replication_factor,
            },
            "placement": self.placement.to_dict(),
            "nodes": [node.to_dict() for node in self.nodes],
            "expected_version": self.expected_version,
            "server_package": self.server_package,
        }
