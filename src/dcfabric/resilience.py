"""Single-switch fault tolerance and progressive root-failure cascades.

Both analyses compare shortest-path counts between sampled host pairs
before and after removing switches. Sampling keeps them tractable on
large fabrics while still covering every pod/block/rack group.
"""

from __future__ import annotations

import logging
from itertools import combinations

from dcfabric.graph import count_shortest_paths, find_root_switches, without_nodes
from dcfabric.models import (
    AdjacencyMap,
    AnalysisConfig,
    CancelHook,
    CascadeStep,
    FaultToleranceResult,
    Graph,
    Node,
    PathResult,
    check_cancel,
)
from dcfabric.sampling import sample_hosts_across_groups

logger = logging.getLogger(__name__)


def compute_oversubscription(graph: Graph, adj: AdjacencyMap) -> float | None:
    """Edge-layer ratio of host-facing links to uplinks.

    Only switches with at least one host neighbor contribute. Returns
    None when those switches have no uplinks at all.
    """
    total_down = total_up = 0
    for sw in graph.switches:
        down = up = 0
        for nb in adj.get(sw.id, []):
            if not graph.has_node(nb):
                continue
            if graph.node(nb).is_host:
                down += 1
            else:
                up += 1
        if down > 0:
            total_down += down
            total_up += up
    if total_up == 0:
        return None
    return total_down / total_up


def _sampled_pairs(hosts: list[Node]) -> list[tuple[str, str]]:
    return [(a.id, b.id) for a, b in combinations(hosts, 2)]


def _switch_type(switch: Node) -> str:
    return switch.subtype or f"level-{switch.level or 0}"


def analyze_fault_tolerance(
    graph: Graph,
    adj: AdjacencyMap,
    *,
    config: AnalysisConfig | None = None,
    cancel: CancelHook | None = None,
) -> FaultToleranceResult | None:
    """Measure the impact of losing the first root switch.

    Falls back to the first switch when the topology has no root tier.

    Args:
        graph: Fabric graph.
        adj: Adjacency map built from ``graph``.
        config: Sampling bounds.
        cancel: Optional hook polled between host pairs.

    Returns:
        FaultToleranceResult, or None with fewer than two hosts or no switches.
    """
    config = config or AnalysisConfig()
    if len(graph.hosts) < 2 or not graph.switches:
        return None

    oversubscription = compute_oversubscription(graph, adj)
    roots = find_root_switches(graph)
    target = roots[0] if roots else graph.switches[0]
    reduced_adj = without_nodes(adj, [target.id])

    sampled = sample_hosts_across_groups(graph, adj, config.samples_per_group)
    total_pairs = disconnected = connected = 0
    total_reduction = 0.0

    for h1, h2 in _sampled_pairs(sampled):
        check_cancel(cancel)
        orig = count_shortest_paths(adj, h1, h2)
        reduced = count_shortest_paths(reduced_adj, h1, h2)
        total_pairs += 1
        if orig.count == 0:
            continue
        if reduced.count == 0:
            disconnected += 1
        else:
            connected += 1
            total_reduction += (1 - reduced.count / orig.count) * 100

    logger.debug(
        "Removed %s: %d/%d sampled pairs disconnected",
        target.id, disconnected, total_pairs,
    )
    return FaultToleranceResult(
        switch_id=target.id,
        switch_type=_switch_type(target),
        disconnected_pairs=disconnected,
        total_pairs=total_pairs,
        avg_path_reduction=total_reduction / connected if connected else 0.0,
        oversubscription=oversubscription,
    )


def multi_failure_cascade(
    graph: Graph,
    adj: AdjacencyMap,
    *,
    config: AnalysisConfig | None = None,
    cancel: CancelHook | None = None,
) -> list[CascadeStep]:
    """Remove the first 1..N root switches in turn and track path survival.

    The baseline path counts are taken once on the intact graph. Results
    are reported as computed: degradation is expected to worsen as more
    roots fail, but nothing here forces it to.
    """
    config = config or AnalysisConfig()
    roots = find_root_switches(graph)
    if not roots:
        return []

    pairs = _sampled_pairs(sample_hosts_across_groups(graph, adj, config.samples_per_group))
    baseline: list[PathResult] = []
    for h1, h2 in pairs:
        check_cancel(cancel)
        baseline.append(count_shortest_paths(adj, h1, h2))

    steps: list[CascadeStep] = []
    for n_fail in range(1, len(roots) + 1):
        reduced_adj = without_nodes(adj, (r.id for r in roots[:n_fail]))
        disconnected = connected = 0
        total_survival = 0.0

        for (h1, h2), orig in zip(pairs, baseline, strict=True):
            check_cancel(cancel)
            if orig.count == 0:
                continue
            reduced = count_shortest_paths(reduced_adj, h1, h2)
            if reduced.count == 0:
                disconnected += 1
            else:
                connected += 1
                total_survival += reduced.count / orig.count * 100

        steps.append(
            CascadeStep(
                removed=n_fail,
                total_roots=len(roots),
                avg_path_survival=total_survival / connected if connected else 0.0,
                disconnected_pairs=disconnected,
                total_pairs=len(pairs),
            )
        )
    return steps
