"""Shared test fixtures for the dcfabric test suite."""

from __future__ import annotations

import pytest
from fabrics import (
    block_mesh_graph,
    fat_tree_graph,
    leaf_spine_graph,
    pod_mesh_graph,
    two_cluster_graph,
)

from dcfabric.graph import build_adjacency
from dcfabric.models import AdjacencyMap, Graph


@pytest.fixture
def fat_tree() -> Graph:
    """Mirrored fat-tree, k=2, d=2.

    Topology:
        roots S1, S2
        top edge S3 (M1, M2), S4 (M3, M4)
        bottom edge S5 (M5, M6), S6 (M7, M8)
        every edge switch wired to both roots
    """
    return fat_tree_graph(k=2, depth=2)


@pytest.fixture
def leaf_spine() -> Graph:
    """Spines S1, S2; leaves S3..S6 with two hosts each (M1..M8)."""
    return leaf_spine_graph(num_spine=2, num_leaf=4, hosts_per_leaf=2)


@pytest.fixture
def leaf_spine_adj(leaf_spine: Graph) -> AdjacencyMap:
    return build_adjacency(leaf_spine)


@pytest.fixture
def block_mesh() -> Graph:
    """Two blocks behind OCS S1, S2.

    Block 0: aggs S3, S4; tors S5 (M1, M2), S6 (M3, M4).
    Block 1: aggs S7, S8; tors S9 (M5, M6), S10 (M7, M8).
    """
    return block_mesh_graph()


@pytest.fixture
def pod_mesh() -> Graph:
    """Two pods behind spines S1, S2.

    Pod 0: fabric S3, S4; tors S5 (M1, M2), S6 (M3, M4).
    Pod 1: fabric S7, S8; tors S9 (M5, M6), S10 (M7, M8).
    """
    return pod_mesh_graph()


@pytest.fixture
def two_clusters() -> Graph:
    return two_cluster_graph()
