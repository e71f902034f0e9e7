"""All-pairs host distance statistics and cost-efficiency ratios.

Both functions run one BFS per unordered host pair, O(H^2 (V+E)). Callers
are expected to skip them above ``AnalysisConfig.max_hosts_for_full_analysis``.
"""

from __future__ import annotations

from itertools import combinations

import numpy as np

from dcfabric.bisection import compute_bisection_bandwidth
from dcfabric.graph import count_shortest_paths
from dcfabric.models import (
    AdjacencyMap,
    AllPairsStats,
    AnalysisConfig,
    CancelHook,
    CostEfficiency,
    Graph,
    PathResult,
    check_cancel,
)


def _connected_host_pairs(
    graph: Graph,
    adj: AdjacencyMap,
    cancel: CancelHook | None,
) -> list[PathResult]:
    """Path results for every unordered host pair at distance > 0."""
    results: list[PathResult] = []
    for a, b in combinations(graph.hosts, 2):
        check_cancel(cancel)
        r = count_shortest_paths(adj, a.id, b.id)
        if r.dist > 0:
            results.append(r)
    return results


def all_pairs_stats(
    graph: Graph,
    adj: AdjacencyMap,
    *,
    cancel: CancelHook | None = None,
) -> AllPairsStats:
    """Diameter, min/mean distance and mean path count over host pairs.

    Unreachable pairs are excluded from every aggregate.
    """
    results = _connected_host_pairs(graph, adj, cancel)
    if not results:
        return AllPairsStats(diameter=0, min_dist=0, avg_dist=0.0, avg_paths=0.0, total_pairs=0)

    dists = np.array([r.dist for r in results])
    counts = np.array([r.count for r in results], dtype=float)
    return AllPairsStats(
        diameter=int(dists.max()),
        min_dist=int(dists.min()),
        avg_dist=float(dists.mean()),
        avg_paths=float(counts.mean()),
        total_pairs=len(results),
    )


def cost_efficiency(
    graph: Graph,
    adj: AdjacencyMap,
    *,
    config: AnalysisConfig | None = None,
    cancel: CancelHook | None = None,
) -> CostEfficiency:
    """Mean path count per switch and bisection links per link."""
    results = _connected_host_pairs(graph, adj, cancel)
    avg_paths = float(np.mean([r.count for r in results])) if results else 0.0
    bisection = compute_bisection_bandwidth(graph, adj, config=config, cancel=cancel)

    n_switches = len(graph.switches)
    n_links = len(graph.edges)
    return CostEfficiency(
        paths_per_switch=avg_paths / n_switches if n_switches else 0.0,
        bw_per_link=bisection.links / n_links if n_links else 0.0,
        total_switches=n_switches,
        total_links=n_links,
        bisection_bw=bisection.links,
        avg_paths=avg_paths,
        bisection_approximate=bisection.approximate,
    )
