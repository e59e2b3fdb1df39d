"""Tests for round-robin node configuration."""

from __future__ import annotations

import pytest

from ClusterPlanner.placement import (
    ConfigurationError,
    NodeState,
    PlacementTree,
    StaticZoneDirectory,
    add_replica,
    configure_nodes,
)


@pytest.fixture
def three_zone_tree(zone_directory: StaticZoneDirectory) -> PlacementTree:
    tree = PlacementTree()
    for az_id in ("r1-a", "r2-a", "r2-b"):
        add_replica(az_id, tree, zone_directory)
    return tree


def test_configure_nodes_assigns_contiguous_indices(three_zone_tree: PlacementTree) -> None:
    nodes = configure_nodes("c1-demo", 4, 5, 3, three_zone_tree)

    assert len(nodes) == 5
    assert [node.index for node in nodes] == [4, 5, 6, 7, 8]
    assert [node.tentative_name for node in nodes] == [f"c1-demo-fake-n{i}" for i in range(4, 9)]
    assert all(node.is_data_node for node in nodes)
    assert all(node.state is NodeState.TO_BE_ADDED for node in nodes)


def test_round_robin_visits_leaves_in_order(three_zone_tree: PlacementTree) -> None:
    nodes = configure_nodes("p", 1, 3, 0, three_zone_tree)

    assert [node.az_id for node in nodes] == ["r1-a", "r2-a", "r2-b"]
    assert [node.region_code for node in nodes] == ["us-west-2", "us-east-1", "us-east-1"]
    assert [node.subnet_id for node in nodes] == ["subnet-r1-a", "subnet-r2-a", "subnet-r2-b"]
    assert all(node.cloud_name == "aws" for node in nodes)


def test_round_robin_wraps_and_ignores_replica_counts(zone_directory: StaticZoneDirectory) -> None:
    tree = PlacementTree()
    add_replica("r1-a", tree, zone_directory)
    add_replica("r1-a", tree, zone_directory)
    add_replica("r2-a", tree, zone_directory)

    nodes = configure_nodes("p", 1, 5, 0, tree)

    assert [node.az_id for node in nodes] == ["r1-a", "r2-a", "r1-a", "r2-a", "r1-a"]


def test_round_robin_across_clouds(zone_factory) -> None:
    directory = StaticZoneDirectory(
        [
            zone_factory("a1", "ra", "s1", cloud_id="c-aws", cloud_name="aws"),
            zone_factory("a2", "ra", "s2", cloud_id="c-aws", cloud_name="aws"),
            zone_factory("g1", "rg", "s3", cloud_id="c-gcp", cloud_name="gcp"),
        ]
    )
    tree = PlacementTree()
    for az_id in ("a1", "a2", "g1"):
        add_replica(az_id, tree, directory)

    nodes = configure_nodes("p", 1, 4, 0, tree)

    assert [(node.cloud_name, node.az_id) for node in nodes] == [
        ("aws", "a1"),
        ("aws", "a2"),
        ("gcp", "g1"),
        ("aws", "a1"),
    ]


def test_single_zone_tree_places_all_nodes_there(zone_directory: StaticZoneDirectory) -> None:
    tree = PlacementTree()
    for _ in range(3):
        add_replica("r3-a", tree, zone_directory)

    nodes = configure_nodes("p", 1, 3, 3, tree)

    assert {node.az_id for node in nodes} == {"r3-a"}
    assert sum(node.is_consensus_member for node in nodes) == 3


def test_configure_nodes_selects_consensus_members(three_zone_tree: PlacementTree) -> None:
    nodes = configure_nodes("p", 1, 3, 3, three_zone_tree)

    members = [node for node in nodes if node.is_consensus_member]
    assert len(members) == 3
    assert len({node.subnet_id for node in members}) == 3


def test_empty_tree_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        configure_nodes("p", 1, 3, 3, PlacementTree())


@pytest.mark.parametrize("start_index,node_count", [(0, 3), (1, 0), (2, -1)])
def test_invalid_counts_are_rejected(three_zone_tree: PlacementTree, start_index: int, node_count: int) -> None:
    with pytest.raises(ConfigurationError):
        configure_nodes("p", start_index, node_count, 1, three_zone_tree)
