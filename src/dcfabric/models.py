"""Data models for fabric topologies and analysis results."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class TopologyValidationError(ValueError):
    """Raised when a graph violates the node/edge invariants."""


class AnalysisCancelled(Exception):
    """Raised when a caller-supplied cancel hook requests a stop."""


class NodeKind(Enum):
    HOST = "host"
    SWITCH = "switch"


# Type aliases
AdjacencyMap = dict[str, list[str]]
CancelHook = Callable[[], bool]


def check_cancel(cancel: CancelHook | None) -> None:
    """Raise AnalysisCancelled if the hook asks for it."""
    if cancel is not None and cancel():
        raise AnalysisCancelled("analysis cancelled by caller")


@dataclass(frozen=True)
class Node:
    """A host or switch in the fabric.

    Attributes:
        id: Globally unique identifier (e.g. ``"S1"``, ``"M4"``).
        kind: Host or switch.
        level: Tree depth for fat-tree switches (0 = root).
        subtype: Switch role such as spine, leaf, tor, agg, fabric, ocs.
        pod: Pod index for pod-organised fabrics.
        block: Aggregation block index for block-organised fabrics.
        x: Horizontal layout coordinate, used by the spatial bisection.
    """

    id: str
    kind: NodeKind
    level: int | None = None
    subtype: str | None = None
    pod: int | None = None
    block: int | None = None
    x: float | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise TopologyValidationError(
                f"node id must be a non-empty string, got {self.id!r}"
            )
        if not isinstance(self.kind, NodeKind):
            raise TopologyValidationError(
                f"node {self.id!r} has invalid kind {self.kind!r}"
            )
        for name in ("level", "pod", "block"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise TopologyValidationError(
                    f"node {self.id!r} has negative {name} {value}"
                )

    @property
    def is_host(self) -> bool:
        return self.kind is NodeKind.HOST

    @property
    def is_switch(self) -> bool:
        return self.kind is NodeKind.SWITCH

    @property
    def group_attr(self) -> int | None:
        """Block index if set, else pod index."""
        return self.block if self.block is not None else self.pod

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Node:
        try:
            node_id = data["id"]
            kind = NodeKind(data["type"])
        except KeyError as exc:
            raise TopologyValidationError(f"node is missing field {exc}") from exc
        except ValueError as exc:
            raise TopologyValidationError(
                f"node {data.get('id')!r} has unknown type {data['type']!r}"
            ) from exc
        return cls(
            id=node_id,
            kind=kind,
            level=data.get("level"),
            subtype=data.get("subtype"),
            pod=data.get("pod"),
            block=data.get("block"),
            x=data.get("x"),
        )


@dataclass(frozen=True)
class Edge:
    """Undirected link between two nodes. Each edge is one link-unit."""

    source: str
    target: str

    def __post_init__(self) -> None:
        if self.source == self.target:
            raise TopologyValidationError(f"self-loop on node {self.source!r}")

    def other(self, node_id: str) -> str:
        return self.target if node_id == self.source else self.source


@dataclass(frozen=True)
class Graph:
    """Immutable fabric graph handed to the analysis engine.

    Attributes:
        nodes: All hosts and switches, in declaration order.
        edges: Undirected links; parallel links are allowed.
        metadata: Topology kind under ``"type"`` plus shape parameters
            such as ``"k"`` and ``"depth"``. Stored as a read-only copy.
    """

    nodes: tuple[Node, ...]
    edges: tuple[Edge, ...]
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

        index: dict[str, Node] = {}
        for node in self.nodes:
            if node.id in index:
                raise TopologyValidationError(f"duplicate node id {node.id!r}")
            index[node.id] = node
        for edge in self.edges:
            for endpoint in (edge.source, edge.target):
                if endpoint not in index:
                    raise TopologyValidationError(
                        f"edge {edge.source!r}-{edge.target!r} references "
                        f"unknown node {endpoint!r}"
                    )
        for key in ("k", "depth"):
            value = self.metadata.get(key)
            if value is None:
                continue
            if not isinstance(value, int) or isinstance(value, bool):
                raise TopologyValidationError(
                    f"{key} must be an integer, got {value!r}"
                )
            if value < 0:
                raise TopologyValidationError(f"{key} must be >= 0, got {value}")
        object.__setattr__(self, "_index", index)

    @property
    def hosts(self) -> list[Node]:
        return [n for n in self.nodes if n.is_host]

    @property
    def switches(self) -> list[Node]:
        return [n for n in self.nodes if n.is_switch]

    @property
    def topology_type(self) -> str | None:
        return self.metadata.get("type")

    def node(self, node_id: str) -> Node:
        return self._index[node_id]  # type: ignore[attr-defined]

    def has_node(self, node_id: str) -> bool:
        return node_id in self._index  # type: ignore[attr-defined]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Graph:
        """Build a graph from the ``{"nodes", "edges", "metadata"}`` wire shape."""
        nodes = [Node.from_dict(n) for n in data.get("nodes", [])]
        try:
            edges = [Edge(source=e["from"], target=e["to"]) for e in data.get("edges", [])]
        except KeyError as exc:
            raise TopologyValidationError(f"edge is missing field {exc}") from exc
        return cls(nodes=tuple(nodes), edges=tuple(edges), metadata=dict(data.get("metadata", {})))


@dataclass(frozen=True)
class AnalysisConfig:
    """Tunable bounds for the analysis engine."""

    max_hosts_for_full_analysis: int = 100
    max_exact_groups: int = 20
    max_propagation_passes: int = 10
    samples_per_group: int = 3

    def __post_init__(self) -> None:
        for name in (
            "max_hosts_for_full_analysis",
            "max_exact_groups",
            "max_propagation_passes",
            "samples_per_group",
        ):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be >= 1, got {value}")


@dataclass(frozen=True)
class PathResult:
    """Shortest-path query result. ``dist == -1`` means unreachable."""

    count: int
    dist: int

    @property
    def reachable(self) -> bool:
        return self.dist >= 0


UNREACHABLE = PathResult(count=0, dist=-1)


class BisectionMethod(Enum):
    CLOSED_FORM = "closed_form"
    EXACT_SEARCH = "exact_search"
    SPATIAL = "spatial"


@dataclass(frozen=True)
class BisectionResult:
    """Bisection bandwidth in link-units and how it was obtained.

    Attributes:
        links: Minimum number of links cut to halve the hosts.
        method: Closed form, exact group search, or spatial heuristic.
        groups: Number of host groups seen (0 for the closed form).
        candidates: Balanced group subsets evaluated by the exact search.
    """

    links: int
    method: BisectionMethod
    groups: int = 0
    candidates: int = 0

    @property
    def approximate(self) -> bool:
        return self.method is BisectionMethod.SPATIAL

    def to_dict(self) -> dict:
        return {
            "links": self.links,
            "method": self.method.value,
            "groups": self.groups,
            "candidates": self.candidates,
            "approximate": self.approximate,
        }


@dataclass(frozen=True)
class FaultToleranceResult:
    """Impact of removing the highest-impact switch.

    Attributes:
        switch_id: Id of the removed switch.
        switch_type: Switch subtype, or ``level-<n>`` for fat-tree switches.
        disconnected_pairs: Sampled pairs that lost every shortest path.
        total_pairs: Sampled host pairs examined.
        avg_path_reduction: Mean percentage drop in shortest-path count
            over pairs that stayed connected.
        oversubscription: Edge-layer down/up link ratio, None without uplinks.
    """

    switch_id: str
    switch_type: str
    disconnected_pairs: int
    total_pairs: int
    avg_path_reduction: float
    oversubscription: float | None

    @property
    def oversubscription_label(self) -> str:
        if self.oversubscription is None:
            return "N/A"
        if self.oversubscription == 1:
            return "1:1 (non-oversubscribed)"
        return f"{self.oversubscription:.2f}:1"

    def to_dict(self) -> dict:
        data = asdict(self)
        data["oversubscription_label"] = self.oversubscription_label
        return data


@dataclass(frozen=True)
class CascadeStep:
    """One step of a progressive root-switch failure."""

    removed: int
    total_roots: int
    avg_path_survival: float
    disconnected_pairs: int
    total_pairs: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AllPairsStats:
    """Distance and path-count aggregates over connected host pairs."""

    diameter: int
    min_dist: int
    avg_dist: float
    avg_paths: float
    total_pairs: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CostEfficiency:
    """Path diversity per switch and bisection bandwidth per link."""

    paths_per_switch: float
    bw_per_link: float
    total_switches: int
    total_links: int
    bisection_bw: int
    avg_paths: float
    bisection_approximate: bool = False

    def to_dict(self) -> dict:
        return asdict(self)
