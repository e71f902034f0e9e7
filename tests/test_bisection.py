"""Tests for dcfabric.bisection module."""

from __future__ import annotations

import dataclasses
from itertools import combinations, product

import numpy as np
import pytest
from fabrics import fat_tree_graph, leaf_spine_graph

from dcfabric.bisection import (
    assign_switch_sides,
    balanced_masks,
    compute_bisection_bandwidth,
    count_cut_links,
    general_bisection,
    group_hosts_by_parent,
    spatial_bisection,
)
from dcfabric.graph import build_adjacency
from dcfabric.models import (
    AnalysisCancelled,
    AnalysisConfig,
    BisectionMethod,
    Graph,
)


def brute_force_bisection(graph: Graph) -> int:
    """Exact min cut over whole-rack host splits and every switch placement."""
    switch_ids = [s.id for s in graph.switches]
    racks: dict[str, list[str]] = {}
    for host in graph.hosts:
        parent = next(
            e.other(host.id) for e in graph.edges if host.id in (e.source, e.target)
        )
        racks.setdefault(parent, []).append(host.id)
    groups = list(racks.values())
    half = len(graph.hosts) // 2

    best = None
    for r in range(1, len(groups)):
        for chosen in combinations(range(len(groups)), r):
            if sum(len(groups[i]) for i in chosen) != half:
                continue
            left = {h for i in chosen for h in groups[i]}
            for placement in product((True, False), repeat=len(switch_ids)):
                side = {h.id: h.id in left for h in graph.hosts}
                side.update(zip(switch_ids, placement, strict=True))
                cut = sum(side[e.source] != side[e.target] for e in graph.edges)
                best = cut if best is None else min(best, cut)
    assert best is not None
    return best


class TestClosedForm:
    def test_fat_tree_k_pow_d(self, fat_tree: Graph):
        result = compute_bisection_bandwidth(fat_tree)
        assert result.links == 4
        assert result.method is BisectionMethod.CLOSED_FORM
        assert not result.approximate

    def test_larger_fat_tree(self):
        g = fat_tree_graph(k=2, depth=3)
        assert compute_bisection_bandwidth(g).links == 8

    def test_closed_form_matches_exact_search(self, fat_tree: Graph):
        exact = general_bisection(fat_tree)
        assert exact.method is BisectionMethod.EXACT_SEARCH
        assert exact.links == compute_bisection_bandwidth(fat_tree).links
        assert exact.links == brute_force_bisection(fat_tree)

    def test_fat_tree_without_shape_uses_search(self, fat_tree: Graph):
        g = dataclasses.replace(fat_tree, metadata={"type": "fattree"})
        result = compute_bisection_bandwidth(g)
        assert result.method is BisectionMethod.EXACT_SEARCH
        assert result.links == 4


class TestExactSearch:
    def test_leaf_spine_matches_brute_force(self, leaf_spine: Graph):
        result = compute_bisection_bandwidth(leaf_spine)
        assert result.method is BisectionMethod.EXACT_SEARCH
        assert result.links == brute_force_bisection(leaf_spine) == 4

    def test_leaf_spine_candidates(self, leaf_spine: Graph):
        result = general_bisection(leaf_spine)
        assert result.groups == 4
        # choose 2 of 4 racks
        assert result.candidates == 6

    def test_block_mesh_matches_brute_force(self, block_mesh: Graph):
        assert general_bisection(block_mesh).links == brute_force_bisection(block_mesh)

    def test_switch_placement_is_heuristic(self):
        # Three single-host leaves: cutting one host link is optimal, but
        # label propagation pulls every switch to the left side.
        g = leaf_spine_graph(num_spine=2, num_leaf=3, hosts_per_leaf=1)
        result = general_bisection(g)
        assert result.candidates == 3
        assert result.links == 2
        assert brute_force_bisection(g) == 1

    def test_no_hosts(self, two_clusters: Graph):
        result = general_bisection(two_clusters)
        assert result.links == 0
        assert result.candidates == 0

    def test_accepts_prebuilt_adjacency(self, leaf_spine: Graph, leaf_spine_adj):
        assert general_bisection(leaf_spine, leaf_spine_adj) == general_bisection(leaf_spine)

    def test_cancel(self, leaf_spine: Graph):
        with pytest.raises(AnalysisCancelled):
            general_bisection(leaf_spine, cancel=lambda: True)

    def test_idempotent(self, block_mesh: Graph):
        assert general_bisection(block_mesh) == general_bisection(block_mesh)


class TestHelpers:
    def test_group_keys_sorted(self, block_mesh: Graph):
        groups = group_hosts_by_parent(block_mesh, build_adjacency(block_mesh))
        assert list(groups) == ["S10", "S5", "S6", "S9"]
        assert groups["S5"] == ["M1", "M2"]

    def test_orphan_host_is_own_group(self):
        g = Graph.from_dict(
            {"nodes": [{"id": "M1", "type": "host"}], "edges": []}
        )
        assert group_hosts_by_parent(g, build_adjacency(g)) == {"M1": ["M1"]}

    def test_balanced_masks(self):
        masks = balanced_masks([2, 2, 2, 2], 4)
        assert sorted(masks.tolist()) == [0b0011, 0b0101, 0b0110, 0b1001, 0b1010, 0b1100]

    def test_balanced_masks_excludes_empty_and_full(self):
        assert balanced_masks([0, 3], 0).tolist() == [0b01]
        assert balanced_masks([4], 2).size == 0
        assert isinstance(balanced_masks([1, 1], 1), np.ndarray)

    def test_assign_switch_sides_ties_go_left(self, leaf_spine: Graph, leaf_spine_adj):
        side = assign_switch_sides(leaf_spine, leaf_spine_adj, {"M1", "M2", "M3", "M4"})
        assert all(side[s.id] for s in leaf_spine.switches)
        assert count_cut_links(leaf_spine, side) == 4

    def test_assign_switch_sides_pass_cap(self, leaf_spine: Graph, leaf_spine_adj):
        side = assign_switch_sides(leaf_spine, leaf_spine_adj, {"M1", "M2"}, max_passes=1)
        assert set(side) == {n.id for n in leaf_spine.nodes}


class TestSpatialFallback:
    def test_too_many_groups(self):
        g = leaf_spine_graph(num_spine=1, num_leaf=21, hosts_per_leaf=1)
        result = general_bisection(g)
        assert result.method is BisectionMethod.SPATIAL
        assert result.approximate
        assert result.groups == 21
        # leaves 10..20 sit right of the split and keep their spine link
        assert result.links == 11

    def test_forced_by_config(self, leaf_spine: Graph):
        result = general_bisection(leaf_spine, config=AnalysisConfig(max_exact_groups=2))
        assert result.method is BisectionMethod.SPATIAL
        assert result.links == 4

    def test_fallback_is_logged(self, leaf_spine: Graph, caplog):
        with caplog.at_level("INFO", logger="dcfabric.bisection"):
            general_bisection(leaf_spine, config=AnalysisConfig(max_exact_groups=2))
        assert "spatial bisection" in caplog.text

    def test_two_clusters(self, two_clusters: Graph):
        result = spatial_bisection(two_clusters)
        assert result.links == 1
        assert result.approximate

    def test_missing_coordinates_sort_as_zero(self):
        g = Graph.from_dict(
            {
                "nodes": [
                    {"id": "A", "type": "switch", "x": 5.0},
                    {"id": "B", "type": "switch"},
                    {"id": "C", "type": "switch", "x": -5.0},
                    {"id": "D", "type": "switch", "x": 9.0},
                ],
                "edges": [{"from": "A", "to": "B"}, {"from": "C", "to": "D"}],
            }
        )
        # order C, B | A, D
        assert spatial_bisection(g).links == 2
