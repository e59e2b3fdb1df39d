"""Round-robin configuration of new nodes over a placement tree."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .consensus import ConsensusSelector
from .exceptions import ConfigurationError
from .models import NodePlan, NodeState, PlacementTree

logger = logging.getLogger(__name__)


def tentative_node_name(name_prefix: str, index: int) -> str:
    """Placeholder name, fixed once the node is actually created."""

    return f"{name_prefix}-fake-n{index}"


def configure_nodes(
    name_prefix: str,
    start_index: int,
    node_count: int,
    consensus_target: int,
    tree: PlacementTree,
    selector: Optional[ConsensusSelector] = None,
) -> List[NodePlan]:
    """Place ``node_count`` new nodes round-robin over the tree's AZs.

    The cursor walks AZs, then regions, then clouds, wrapping each index
    modulo its list length. Assignment ignores each AZ's replica count, so
    when ``node_count`` differs from the tree's replica total the per-AZ node
    counts will not match the tree. Consensus members are selected last.
    """

    if start_index < 1:
        raise ConfigurationError("start_index must be at least 1")
    if node_count <= 0:
        raise ConfigurationError("node_count must be positive")
    if tree.zone_count() == 0:
        raise ConfigurationError("Placement tree has no availability zones to place nodes in")
    if any(not cloud.regions or any(not region.zones for region in cloud.regions) for cloud in tree.clouds):
        raise ConfigurationError("Placement tree contains a cloud or region without zones")
    if node_count != tree.total_replicas():
        logger.warning(
            "Placing %s nodes over a tree holding %s replicas; round-robin ignores per-AZ replica counts",
            node_count,
            tree.total_replicas(),
        )

    nodes: Dict[str, NodePlan] = {}
    cloud_idx = region_idx = az_idx = 0
    for index in range(start_index, start_index + node_count):
        cloud = tree.clouds[cloud_idx]
        region = cloud.regions[region_idx]
        zone = region.zones[az_idx]
        node = NodePlan(
            tentative_name=tentative_node_name(name_prefix, index),
            index=index,
            az_id=zone.id,
            az_name=zone.name,
            cloud_name=cloud.name,
            region_code=region.code,
            subnet_id=zone.subnet_id,
            is_data_node=True,
            state=NodeState.TO_BE_ADDED,
        )
        nodes[node.tentative_name] = node
        logger.debug(
            "Placed new node %s at cloud:%s, region:%s, az:%s.",
            node.tentative_name,
            cloud_idx,
            region_idx,
            az_idx,
        )

        az_idx = (az_idx + 1) % len(region.zones)
        region_idx = (region_idx + (1 if az_idx == 0 else 0)) % len(cloud.regions)
        cloud_idx = (cloud_idx + (1 if az_idx == 0 and region_idx == 0 else 0)) % len(tree.clouds)

    (selector or ConsensusSelector()).select(nodes, consensus_target)
    return sorted(nodes.values(), key=lambda node: node.index)
