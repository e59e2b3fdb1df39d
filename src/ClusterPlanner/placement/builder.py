"""Placement tree construction from a user intent."""

from __future__ import annotations

import logging
from random import Random
from typing import Optional

from .directory import ZoneDirectory
from .exceptions import ConfigurationError
from .models import PlacementTree, UserIntent
from .tree import add_replica

logger = logging.getLogger(__name__)

SUPPORTED_REPLICATION_FACTOR = 3


class PlacementTreeBuilder:
    """Chooses AZs for every replica and aggregates them into a placement tree.

    AZ choice is a uniform draw without replacement, so repeated calls spread
    replicas across zones. Inject a seeded ``Random`` for reproducible trees.
    """

    def __init__(
        self,
        zone_directory: ZoneDirectory,
        rng: Optional[Random] = None,
        replication_factor: int = SUPPORTED_REPLICATION_FACTOR,
    ) -> None:
        self.zone_directory = zone_directory
        self.rng = rng or Random()
        self.replication_factor = replication_factor

    def build(self, intent: UserIntent) -> PlacementTree:
        if intent.replication_factor != self.replication_factor:
            raise ConfigurationError(f"Replication factor must be {self.replication_factor}")
        intent.validate()

        tree = PlacementTree()
        regions = intent.region_list

        if not intent.is_multi_az:
            self._place_single_az(regions[0], intent.replication_factor, tree)
            return tree

        if len(regions) == 1:
            self._select_and_add_zones(regions[0], tree, 3)
        elif len(regions) == 2:
            preferred = intent.preferred_region or self._preferred_of_two(regions[0], regions[1])
            other = regions[1] if regions[0] == preferred else regions[0]
            self._select_and_add_zones(preferred, tree, 2)
            self._select_and_add_zones(other, tree, 1)
        elif len(regions) == 3:
            for region_id in regions:
                self._select_and_add_zones(region_id, tree, 1)
        else:
            msg = (
                "Unsupported placement: more regions than replication factor allows "
                f"({len(regions)} regions, replication factor {intent.replication_factor})"
            )
            raise ConfigurationError(msg)
        return tree

    def _place_single_az(self, region_id: str, replicas: int, tree: PlacementTree) -> None:
        zones = self.zone_directory.azs_for_region(region_id)
        if not zones:
            raise ConfigurationError(f"No AZ found for region: {region_id}")
        chosen = self.rng.choice(list(zones))
        logger.info("Using AZ %s out of %s", chosen.id, len(zones))
        for _ in range(replicas):
            add_replica(chosen.id, tree, self.zone_directory)

    def _preferred_of_two(self, first: str, second: str) -> str:
        if len(self.zone_directory.azs_for_region(first)) >= 2:
            return first
        return second

    def _select_and_add_zones(self, region_id: str, tree: PlacementTree, count: int) -> None:
        zones = list(self.zone_directory.azs_for_region(region_id))
        logger.debug("Selecting and adding %s zones in region %s", count, region_id)
        if len(zones) < count:
            msg = f"Need at least {count} zones but found only {len(zones)} for region {region_id}"
            raise ConfigurationError(msg)
        for zone in self.rng.sample(zones, count):
            add_replica(zone.id, tree, self.zone_directory)


def build_placement(
    intent: UserIntent,
    zone_directory: ZoneDirectory,
    rng: Optional[Random] = None,
) -> PlacementTree:
    """Build a placement tree for ``intent`` using a one-off builder."""

    return PlacementTreeBuilder(zone_directory, rng=rng).build(intent)
