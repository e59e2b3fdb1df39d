"""Consensus-member (master) selection across subnets."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping

from .exceptions import ConfigurationError
from .models import NodePlan

logger = logging.getLogger(__name__)

# Maximum number of subnets masters are spread across; odd so consensus cannot tie.
MAX_MASTER_SUBNETS = 3


@dataclass
class ConsensusSelector:
    """Marks consensus members, one per subnet when enough subnets exist."""

    subnet_threshold: int = MAX_MASTER_SUBNETS

    def select(self, nodes: Mapping[str, NodePlan], target: int) -> None:
        if target < 0:
            raise ConfigurationError("Consensus target cannot be negative")

        subnets: Dict[str, List[str]] = {}
        for name, node in nodes.items():
            subnets.setdefault(node.subnet_id, []).append(name)
        logger.info(
            "Subnet map has %s, nodes map has %s, need %s masters.",
            len(subnets),
            len(nodes),
            target,
        )
        if target > len(nodes):
            logger.warning("Requested %s masters but only %s nodes are available", target, len(nodes))

        chosen = 0
        if len(subnets) >= self.subnet_threshold:
            for subnet_id in sorted(subnets):
                if chosen >= target:
                    break
                name = min(subnets[subnet_id])
                nodes[name].is_consensus_member = True
                logger.info("Chose node %s as a master from subnet %s.", name, subnet_id)
                chosen += 1
        else:
            for node in sorted(nodes.values(), key=lambda item: item.index):
                if chosen >= target:
                    break
                node.is_consensus_member = True
                logger.info("Chose node %s as a master from subnet %s.", node.tentative_name, node.subnet_id)
                chosen += 1


def select_consensus_members(
    nodes: Mapping[str, NodePlan],
    target: int,
    subnet_threshold: int = MAX_MASTER_SUBNETS,
) -> None:
    ConsensusSelector(subnet_threshold=subnet_threshold).select(nodes, target)
