"""Regular fat-tree: k-ary Clos tree of identical switch blocks.

Level 0 holds the roots. Every switch below the roots has k uplinks, so
a host has k^(d-1) shortest paths up to the root tier and the root tier
carries k^d links to each half of the hosts.
"""

from __future__ import annotations

from dcfabric.models import Node
from dcfabric.profiles.base import TopologyProfile


class FatTreeProfile(TopologyProfile):
    """Profile for graphs with ``metadata = {"type": "fattree", "k", "depth"}``."""

    display_name = "Fat Tree"

    @property
    def k(self) -> int | None:
        return self.graph.metadata.get("k")

    @property
    def depth(self) -> int | None:
        return self.graph.metadata.get("depth")

    def is_root(self, switch: Node) -> bool:
        return switch.level == 0

    def sampling_groups(self) -> dict[str, list[Node]] | None:
        """Group hosts into pods of k^2 consecutive hosts.

        Pod membership is not stored per host in a fat-tree graph, so it
        is derived from the host's declaration index.
        """
        k = self.k
        if not k:
            return None
        groups: dict[str, list[Node]] = {}
        for i, host in enumerate(self.graph.hosts):
            groups.setdefault(f"pod{i // (k * k)}", []).append(host)
        return groups

    def closed_form_bisection(self) -> int | None:
        if self.k is None or self.depth is None:
            return None
        return self.k**self.depth

    def expected_root_paths(self) -> int | None:
        """Shortest paths from one host to the root tier, summed over roots."""
        if self.k is None or not self.depth:
            return None
        return self.k ** (self.depth - 1)
