"""Stratified host sampling across pods, blocks and racks."""

from __future__ import annotations

import logging

from dcfabric.graph import parent_switch
from dcfabric.models import AdjacencyMap, Graph, Node
from dcfabric.profiles import get_profile

logger = logging.getLogger(__name__)


def host_groups(graph: Graph, adj: AdjacencyMap) -> dict[str, list[Node]]:
    """Group hosts by the block/pod of their parent switch, else by rack.

    Keys are ``b<block>``, ``p<pod>``, ``tor_<switch id>``, or ``default``
    for hosts with no switch neighbor. A topology profile may override
    the grouping entirely (fat-trees group by derived pod index).
    """
    override = get_profile(graph).sampling_groups()
    if override is not None:
        return override

    groups: dict[str, list[Node]] = {}
    for host in graph.hosts:
        parent = parent_switch(graph, adj, host.id)
        key = "default"
        if parent is not None:
            if parent.block is not None:
                key = f"b{parent.block}"
            elif parent.pod is not None:
                key = f"p{parent.pod}"
            else:
                key = f"tor_{parent.id}"
        groups.setdefault(key, []).append(host)
    return groups


def sample_hosts_across_groups(
    graph: Graph,
    adj: AdjacencyMap,
    max_per_group: int = 3,
) -> list[Node]:
    """Take the first ``max_per_group`` hosts of every group.

    Groups are visited in first-seen order, so the sample is stable for a
    given graph and always contains inter-group pairs when there is more
    than one group.
    """
    if max_per_group < 1:
        raise ValueError(f"max_per_group must be >= 1, got {max_per_group}")

    groups = host_groups(graph, adj)
    sampled: list[Node] = []
    for members in groups.values():
        sampled.extend(members[:max_per_group])
    logger.debug(
        "Sampled %d hosts from %d groups (max %d per group)",
        len(sampled), len(groups), max_per_group,
    )
    return sampled
