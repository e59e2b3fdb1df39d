"""Planner facade tying tree building, node configuration and consensus selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from random import Random
from typing import Optional

from .builder import PlacementTreeBuilder
from .consensus import MAX_MASTER_SUBNETS, ConsensusSelector
from .directory import ZoneDirectory
from .models import ClusterDefinition, ExistingClusterView, PlacementPlan, UserIntent
from .nodes import configure_nodes

logger = logging.getLogger(__name__)


@dataclass
class PlannerConfig:
    """Configuration options for the cluster planner."""

    consensus_subnet_threshold: int = MAX_MASTER_SUBNETS
    seed: Optional[int] = None

    def validate(self) -> None:
        if self.consensus_subnet_threshold < 1:
            raise ValueError("consensus_subnet_threshold must be positive")


def compose_node_prefix(customer_id: object, cluster_name: str) -> str:
    """Unique node name prefix for a customer's cluster."""

    return f"{customer_id}-{cluster_name}"


class ClusterPlanner:
    """Plans placement and identities for the new nodes of a create/edit operation."""

    def __init__(
        self,
        zone_directory: ZoneDirectory,
        config: Optional[PlannerConfig] = None,
        rng: Optional[Random] = None,
    ) -> None:
        self.config = config or PlannerConfig()
        self.config.validate()
        self.zone_directory = zone_directory
        self.rng = rng or Random(self.config.seed)
        self.selector = ConsensusSelector(subnet_threshold=self.config.consensus_subnet_threshold)

    def plan(
        self,
        intent: UserIntent,
        existing_cluster: Optional[ExistingClusterView] = None,
        name_prefix: str = "",
        *,
        node_count: Optional[int] = None,
        consensus_target: Optional[int] = None,
    ) -> PlacementPlan:
        """Build the placement tree and the new node set for ``intent``.

        Node count and consensus target default to the replication factor; the
        first node index follows the highest index of ``existing_cluster``.
        """

        tree = PlacementTreeBuilder(self.zone_directory, rng=self.rng).build(intent)
        start_index = (existing_cluster or ExistingClusterView()).next_node_index()
        nodes = configure_nodes(
            name_prefix,
            start_index,
            node_count if node_count is not None else intent.replication_factor,
            consensus_target if consensus_target is not None else intent.replication_factor,
            tree,
            selector=self.selector,
        )
        logger.info(
            "Planned %s nodes across %s zones for prefix %s starting at index %s",
            len(nodes),
            tree.zone_count(),
            name_prefix,
            start_index,
        )
        return PlacementPlan(tree=tree, nodes=nodes)

    def build_definition(
        self,
        intent: UserIntent,
        *,
        customer_id: object,
        cluster_name: str,
        existing_cluster: Optional[ExistingClusterView] = None,
        server_package: Optional[str] = None,
        node_count: Optional[int] = None,
        consensus_target: Optional[int] = None,
    ) -> ClusterDefinition:
        """Assemble the definition handed to the task layer for a create or edit."""

        logger.info("Initializing definition for cluster %s of customer %s", cluster_name, customer_id)
        node_prefix = compose_node_prefix(customer_id, cluster_name)
        result = self.plan(
            intent,
            existing_cluster,
            node_prefix,
            node_count=node_count,
            consensus_target=consensus_target,
        )
        return ClusterDefinition(
            node_prefix=node_prefix,
            num_nodes=len(result.nodes),
            user_intent=intent,
            placement=result.tree,
            nodes=result.nodes,
            expected_version=existing_cluster.version if existing_cluster else 0,
            server_package=server_package,
        )


def plan(
    intent: UserIntent,
    existing_cluster: Optional[ExistingClusterView],
    name_prefix: str,
    zone_directory: ZoneDirectory,
    *,
    rng: Optional[Random] = None,
) -> PlacementPlan:
    """Plan with a default-configured planner."""

    return ClusterPlanner(zone_directory, rng=rng).plan(intent, existing_cluster, name_prefix)
