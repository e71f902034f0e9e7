"""Bisection bandwidth: fat-tree closed form, exact group search, spatial fallback.

The exact search splits hosts by whole rack groups: every subset of
groups holding exactly half the hosts is a candidate. Switch placement
for a candidate is settled by label propagation, which is a heuristic
(graph partitioning is NP-hard), so only the host split is exhaustive.
"""

from __future__ import annotations

import logging

import numpy as np

from dcfabric.graph import build_adjacency, parent_switch
from dcfabric.models import (
    AdjacencyMap,
    AnalysisConfig,
    BisectionMethod,
    BisectionResult,
    CancelHook,
    Graph,
    check_cancel,
)
from dcfabric.profiles import get_profile

logger = logging.getLogger(__name__)


def compute_bisection_bandwidth(
    graph: Graph,
    adj: AdjacencyMap | None = None,
    *,
    config: AnalysisConfig | None = None,
    cancel: CancelHook | None = None,
) -> BisectionResult:
    """Minimum links cut to split the hosts into two equal halves.

    Regular fat-trees use the closed form k^d; everything else goes
    through :func:`general_bisection`.
    """
    closed_form = get_profile(graph).closed_form_bisection()
    if closed_form is not None:
        return BisectionResult(links=closed_form, method=BisectionMethod.CLOSED_FORM)
    return general_bisection(graph, adj, config=config, cancel=cancel)


def group_hosts_by_parent(graph: Graph, adj: AdjacencyMap) -> dict[str, list[str]]:
    """Host ids keyed by parent switch id, sorted by key.

    A host without a switch neighbor forms a group keyed by its own id.
    """
    groups: dict[str, list[str]] = {}
    for host in graph.hosts:
        parent = parent_switch(graph, adj, host.id)
        key = parent.id if parent is not None else host.id
        groups.setdefault(key, []).append(host.id)
    return {key: groups[key] for key in sorted(groups)}


def balanced_masks(group_sizes: list[int], target: int) -> np.ndarray:
    """Proper, non-empty group subsets (as bitmasks) holding ``target`` hosts."""
    n = len(group_sizes)
    if n < 2:
        return np.empty(0, dtype=np.int64)
    masks = np.arange(1, (1 << n) - 1, dtype=np.int64)
    totals = np.zeros_like(masks)
    for g, size in enumerate(group_sizes):
        totals += ((masks >> g) & 1) * size
    return masks[totals == target]


def assign_switch_sides(
    graph: Graph,
    adj: AdjacencyMap,
    left_hosts: set[str],
    max_passes: int = 10,
) -> dict[str, bool]:
    """Place every switch on the side holding most of its assigned neighbors.

    Hosts are fixed (True = left). Switches are swept in declaration order;
    ties go left and unassigned neighbors are ignored. Sweeps stop once a
    pass changes nothing or after ``max_passes``.
    """
    side: dict[str, bool] = {h.id: h.id in left_hosts for h in graph.hosts}
    switches = graph.switches

    for _ in range(max_passes):
        changed = False
        for sw in switches:
            left_n = right_n = 0
            for nb in adj.get(sw.id, []):
                nb_side = side.get(nb)
                if nb_side is True:
                    left_n += 1
                elif nb_side is False:
                    right_n += 1
            new_side = left_n >= right_n
            if side.get(sw.id) != new_side:
                side[sw.id] = new_side
                changed = True
        if not changed:
            break
    return side


def count_cut_links(graph: Graph, side: dict[str, bool]) -> int:
    """Edges whose endpoints sit on different sides."""
    return sum(1 for e in graph.edges if side.get(e.source) != side.get(e.target))


def general_bisection(
    graph: Graph,
    adj: AdjacencyMap | None = None,
    *,
    config: AnalysisConfig | None = None,
    cancel: CancelHook | None = None,
) -> BisectionResult:
    """Exact host-group bisection search, or the spatial fallback.

    Falls back to :func:`spatial_bisection` when there are more than
    ``config.max_exact_groups`` host groups; the result is then marked
    approximate.
    """
    config = config or AnalysisConfig()
    if adj is None:
        adj = build_adjacency(graph)

    groups = group_hosts_by_parent(graph, adj)
    n_groups = len(groups)
    if n_groups > config.max_exact_groups:
        logger.info(
            "%d host groups exceed exact-search limit of %d; "
            "using spatial bisection (approximate)",
            n_groups, config.max_exact_groups,
        )
        result = spatial_bisection(graph)
        return BisectionResult(
            links=result.links, method=BisectionMethod.SPATIAL, groups=n_groups
        )

    members = list(groups.values())
    half_hosts = len(graph.hosts) // 2
    candidates = balanced_masks([len(m) for m in members], half_hosts)
    logger.debug(
        "Bisection search: %d groups, %d balanced candidates",
        n_groups, len(candidates),
    )

    best: int | None = None
    for mask in candidates.tolist():
        check_cancel(cancel)
        left_hosts = {
            host
            for g, hosts in enumerate(members)
            if mask >> g & 1
            for host in hosts
        }
        side = assign_switch_sides(
            graph, adj, left_hosts, config.max_propagation_passes
        )
        cut = count_cut_links(graph, side)
        if best is None or cut < best:
            best = cut

    return BisectionResult(
        links=best if best is not None else 0,
        method=BisectionMethod.EXACT_SEARCH,
        groups=n_groups,
        candidates=len(candidates),
    )


def spatial_bisection(graph: Graph) -> BisectionResult:
    """Split all nodes at the median x coordinate and count crossing links.

    Nodes without a coordinate sort as x = 0. This is an approximation.
    """
    ordered = sorted(graph.nodes, key=lambda n: n.x if n.x is not None else 0.0)
    left = {n.id for n in ordered[: len(ordered) // 2]}
    crossing = sum(1 for e in graph.edges if (e.source in left) != (e.target in left))
    return BisectionResult(links=crossing, method=BisectionMethod.SPATIAL)
