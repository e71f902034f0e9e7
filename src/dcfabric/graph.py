"""Adjacency construction, shortest-path counting, and failure-reduced views."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from dcfabric.models import UNREACHABLE, AdjacencyMap, Graph, Node, PathResult
from dcfabric.profiles import get_profile


def build_adjacency(graph: Graph) -> AdjacencyMap:
    """Undirected adjacency map; parallel edges appear once per link."""
    adj: AdjacencyMap = {node.id: [] for node in graph.nodes}
    for edge in graph.edges:
        for endpoint in (edge.source, edge.target):
            adj.setdefault(endpoint, []).append(edge.other(endpoint))
    return adj


def without_nodes(adj: AdjacencyMap, removed: Iterable[str]) -> AdjacencyMap:
    """Copy of ``adj`` with ``removed`` nodes and all their links dropped."""
    gone = set(removed)
    return {
        node: [nb for nb in neighbors if nb not in gone]
        for node, neighbors in adj.items()
        if node not in gone
    }


def count_shortest_paths(adj: AdjacencyMap, src: str, dst: str) -> PathResult:
    """Number and length of minimum-hop paths from src to dst via BFS.

    Each node is enqueued once, on first discovery. A node reached again
    at the same depth adds the parent's path count to its own.
    """
    dist: dict[str, int] = {src: 0}
    count: dict[str, int] = {src: 1}
    queue: deque[str] = deque([src])

    while queue:
        node = queue.popleft()
        next_dist = dist[node] + 1
        for nb in adj.get(node, []):
            seen = dist.get(nb)
            if seen is None:
                dist[nb] = next_dist
                count[nb] = count[node]
                queue.append(nb)
            elif seen == next_dist:
                count[nb] += count[node]

    if dst not in dist:
        return UNREACHABLE
    return PathResult(count=count[dst], dist=dist[dst])


def count_paths_through_node(adj: AdjacencyMap, src: str, dst: str, via: str) -> int:
    """Number of shortest src->dst paths that pass through ``via``.

    Zero unless ``via`` lies on some shortest path, i.e.
    dist(src, via) + dist(via, dst) == dist(src, dst).
    """
    src_to_dst = count_shortest_paths(adj, src, dst)
    src_to_via = count_shortest_paths(adj, src, via)
    via_to_dst = count_shortest_paths(adj, via, dst)

    if not (src_to_dst.reachable and src_to_via.reachable and via_to_dst.reachable):
        return 0
    if src_to_via.dist + via_to_dst.dist == src_to_dst.dist:
        return src_to_via.count * via_to_dst.count
    return 0


def parent_switch(graph: Graph, adj: AdjacencyMap, host_id: str) -> Node | None:
    """First switch among the host's neighbors."""
    for nb in adj.get(host_id, []):
        if graph.has_node(nb):
            node = graph.node(nb)
            if node.is_switch:
                return node
    return None


def find_root_switches(graph: Graph) -> list[Node]:
    """Top-tier switches as defined by the graph's topology kind."""
    return get_profile(graph).root_switches()


def find_inter_group_host(graph: Graph, adj: AdjacencyMap, src_id: str) -> str | None:
    """First host outside ``src_id``'s block/pod (or rack, without either).

    Used to pick a host pair whose shortest paths cross the upper tiers.
    """
    src_parent = parent_switch(graph, adj, src_id)
    if src_parent is None:
        return None
    src_group = src_parent.group_attr

    for host in graph.hosts:
        if host.id == src_id:
            continue
        parent = parent_switch(graph, adj, host.id)
        if parent is None:
            continue
        if src_group is not None:
            group = parent.group_attr
            if group is not None and group != src_group:
                return host.id
        elif parent.id != src_parent.id:
            return host.id
    return None
