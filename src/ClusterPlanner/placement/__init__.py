"""Placement planning for cluster nodes."""

from .builder import SUPPORTED_REPLICATION_FACTOR, PlacementTreeBuilder, build_placement
from .consensus import MAX_MASTER_SUBNETS, ConsensusSelector, select_consensus_members
from .directory import StaticZoneDirectory, ZoneDirectory, load_zone_directory
from .exceptions import ConfigurationError, NotFoundError, PlacementError
from .models import (
    AvailabilityZoneInfo,
    ClusterDefinition,
    ExistingClusterView,
    NodePlan,
    NodeState,
    PlacementAZ,
    PlacementCloud,
    PlacementPlan,
    PlacementRegion,
    PlacementTree,
    UserIntent,
)
from .nodes import configure_nodes
from .planner import ClusterPlanner, PlannerConfig, compose_node_prefix, plan
from .tree import add_replica

__all__ = [
    "AvailabilityZoneInfo",
    "ClusterDefinition",
    "ClusterPlanner",
    "ConfigurationError",
    "ConsensusSelector",
    "ExistingClusterView",
    "MAX_MASTER_SUBNETS",
    "NodePlan",
    "NodeState",
    "NotFoundError",
    "PlacementAZ",
    "PlacementCloud",
    "PlacementError",
    "PlacementPlan",
    "PlacementRegion",
    "PlacementTree",
    "PlacementTreeBuilder",
    "PlannerConfig",
    "SUPPORTED_REPLICATION_FACTOR",
    "StaticZoneDirectory",
    "UserIntent",
    "ZoneDirectory",
    "add_replica",
    "build_placement",
    "compose_node_prefix",
    "configure_nodes",
    "load_zone_directory",
    "plan",
    "select_consensus_members",
]
