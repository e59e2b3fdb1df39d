"""Merge-or-insert aggregation of replicas into a placement tree."""

from __future__ import annotations

import logging

from .directory import ZoneDirectory
from .models import PlacementAZ, PlacementCloud, PlacementRegion, PlacementTree

logger = logging.getLogger(__name__)


def add_replica(az_id: str, tree: PlacementTree, zone_directory: ZoneDirectory) -> None:
    """Add one replica for ``az_id``, creating cloud/region/AZ entries as needed.

    Entries are matched by identifier, so repeated calls for the same AZ only
    bump its replica count.
    """

    zone = zone_directory.zone(az_id)

    cloud = next((c for c in tree.clouds if c.id == zone.cloud_id), None)
    if cloud is None:
        logger.debug("Adding cloud %s", zone.cloud_name)
        cloud = PlacementCloud(id=zone.cloud_id, name=zone.cloud_name)
        tree.clouds.append(cloud)

    region = next((r for r in cloud.regions if r.id == zone.region_id), None)
    if region is None:
        logger.debug("Adding region %s", zone.region_name)
        region = PlacementRegion(id=zone.region_id, code=zone.region_code, name=zone.region_name)
        cloud.regions.append(region)

    placement_az = next((z for z in region.zones if z.id == zone.id), None)
    if placement_az is None:
        logger.debug("Adding az %s", zone.name)
        placement_az = PlacementAZ(id=zone.id, name=zone.name, subnet_id=zone.subnet_id)
        region.zones.append(placement_az)

    placement_az.replica_count += 1
    logger.debug("Setting az %s replica count = %s", zone.name, placement_az.replica_count)
