"""Abstract base for per-topology-kind rules (roots, sampling, closed forms)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from dcfabric.models import Graph, Node


class TopologyProfile(ABC):
    """Rules that depend on which kind of fabric a graph describes.

    The engine itself is shape-agnostic; a profile supplies the few
    topology-specific answers it needs: which switches are roots, whether
    hosts should be grouped differently for sampling, and any closed-form
    results that replace a graph search.

    Args:
        graph: The graph this profile answers for.
    """

    display_name: str = "Unknown"

    def __init__(self, graph: Graph) -> None:
        self.graph = graph

    @abstractmethod
    def is_root(self, switch: Node) -> bool:
        """Whether a switch belongs to the top-level (root) tier."""

    def root_switches(self) -> list[Node]:
        """Root switches in declaration order."""
        return [sw for sw in self.graph.switches if self.is_root(sw)]

    def sampling_groups(self) -> dict[str, list[Node]] | None:
        """Host groups overriding the parent-switch grouping, if any."""
        return None

    def closed_form_bisection(self) -> int | None:
        """Exact bisection bandwidth when the shape admits a formula."""
        return None

    def expected_root_paths(self) -> int | None:
        """Shortest-path count from a host to the root tier, when known."""
        return None


class GenericProfile(TopologyProfile):
    """Fallback for unrecognised topology kinds: no root tier."""

    def __init__(self, graph: Graph) -> None:
        super().__init__(graph)
        self.display_name = graph.topology_type or "Unknown"

    def is_root(self, switch: Node) -> bool:
        return False
