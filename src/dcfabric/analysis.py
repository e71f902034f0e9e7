"""Full per-topology analysis run and multi-topology batch runner.

Sequences the engine components over one graph, applies the host-count
ceiling for the O(H^2) analyses, and collects everything into a single
pure-data report.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

from dcfabric.bisection import compute_bisection_bandwidth
from dcfabric.graph import (
    build_adjacency,
    count_paths_through_node,
    count_shortest_paths,
    find_inter_group_host,
)
from dcfabric.models import (
    AllPairsStats,
    AnalysisConfig,
    BisectionResult,
    CancelHook,
    CascadeStep,
    CostEfficiency,
    FaultToleranceResult,
    Graph,
    PathResult,
)
from dcfabric.profiles import get_profile
from dcfabric.resilience import analyze_fault_tolerance, multi_failure_cascade
from dcfabric.stats import all_pairs_stats, cost_efficiency

logger = logging.getLogger(__name__)

# 0-based host indices probed from the first host, and the switch index
# used as the "through" node for via-counts.
PROBE_TARGETS = (1, 2, 4)
VIA_SWITCH_INDEX = 1


@dataclass(frozen=True)
class RootPathSample:
    """Shortest paths from a host to one root switch."""

    host: str
    root: str
    paths: PathResult


@dataclass(frozen=True)
class HostPairSample:
    """Shortest paths between two hosts, optionally through a given switch.

    Attributes:
        src: Source host id.
        dst: Destination host id.
        paths: Count and length of the src->dst shortest paths.
        via: Switch the via-count refers to, if any.
        via_paths: Shortest paths that traverse ``via``.
        inter_group: Whether dst was chosen from a different pod/block/rack.
    """

    src: str
    dst: str
    paths: PathResult
    via: str | None = None
    via_paths: int | None = None
    inter_group: bool = False


@dataclass
class AnalysisReport:
    """Everything the engine computes for one topology.

    Sections above the host ceiling are left as None/empty and listed in
    ``skipped`` with the reason.
    """

    topology_type: str | None
    display_name: str
    num_hosts: int
    num_switches: int
    num_links: int
    root_ids: list[str] = field(default_factory=list)
    root_paths: list[RootPathSample] = field(default_factory=list)
    expected_root_paths: int | None = None
    host_pairs: list[HostPairSample] = field(default_factory=list)
    bisection: BisectionResult | None = None
    fault_tolerance: FaultToleranceResult | None = None
    cascade: list[CascadeStep] = field(default_factory=list)
    stats: AllPairsStats | None = None
    cost: CostEfficiency | None = None
    skipped: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        def pair(p: HostPairSample) -> dict:
            return {
                "src": p.src,
                "dst": p.dst,
                "count": p.paths.count,
                "dist": p.paths.dist,
                "via": p.via,
                "via_paths": p.via_paths,
                "inter_group": p.inter_group,
            }

        return {
            "topology_type": self.topology_type,
            "display_name": self.display_name,
            "num_hosts": self.num_hosts,
            "num_switches": self.num_switches,
            "num_links": self.num_links,
            "root_ids": list(self.root_ids),
            "root_paths": [
                {"host": r.host, "root": r.root, "count": r.paths.count, "dist": r.paths.dist}
                for r in self.root_paths
            ],
            "expected_root_paths": self.expected_root_paths,
            "host_pairs": [pair(p) for p in self.host_pairs],
            "bisection": self.bisection.to_dict() if self.bisection else None,
            "fault_tolerance": self.fault_tolerance.to_dict() if self.fault_tolerance else None,
            "cascade": [c.to_dict() for c in self.cascade],
            "stats": self.stats.to_dict() if self.stats else None,
            "cost": self.cost.to_dict() if self.cost else None,
            "skipped": dict(self.skipped),
        }


class TopologyAnalyzer:
    """Runs every analysis over one graph.

    The adjacency map is built once in the constructor and shared by all
    components; the analyzer keeps no other state, so ``run`` can be
    called repeatedly with identical results.

    Args:
        graph: Fabric graph to analyze.
        config: Engine bounds (host ceiling, exact-search limit, sampling).
        cancel: Optional hook polled inside long loops.
    """

    def __init__(
        self,
        graph: Graph,
        config: AnalysisConfig | None = None,
        cancel: CancelHook | None = None,
    ) -> None:
        self.graph = graph
        self.config = config or AnalysisConfig()
        self.cancel = cancel
        self.adj = build_adjacency(graph)
        self.profile = get_profile(graph)

    def root_path_samples(self) -> list[RootPathSample]:
        """Shortest paths from the first host to every root switch."""
        hosts = self.graph.hosts
        if not hosts:
            return []
        src = hosts[0].id
        return [
            RootPathSample(host=src, root=root.id, paths=count_shortest_paths(self.adj, src, root.id))
            for root in self.profile.root_switches()
        ]

    def host_pair_samples(self) -> list[HostPairSample]:
        """Probe pairs from the first host, plus one inter-group pair.

        Targets are the hosts at :data:`PROBE_TARGETS`; via-counts use the
        switch at :data:`VIA_SWITCH_INDEX` when it exists.
        """
        hosts = self.graph.hosts
        switches = self.graph.switches
        if len(hosts) < 2:
            return []
        src = hosts[0].id
        via = switches[VIA_SWITCH_INDEX].id if len(switches) > VIA_SWITCH_INDEX else None

        def sample(dst: str, inter_group: bool = False) -> HostPairSample:
            return HostPairSample(
                src=src,
                dst=dst,
                paths=count_shortest_paths(self.adj, src, dst),
                via=via,
                via_paths=count_paths_through_node(self.adj, src, dst, via) if via else None,
                inter_group=inter_group,
            )

        samples = [sample(hosts[i].id) for i in PROBE_TARGETS if i < len(hosts)]
        inter_dst = find_inter_group_host(self.graph, self.adj, src)
        if inter_dst is not None:
            samples.append(sample(inter_dst, inter_group=True))
        return samples

    def run(self) -> AnalysisReport:
        """Run all analyses and return the report."""
        graph = self.graph
        report = AnalysisReport(
            topology_type=graph.topology_type,
            display_name=self.profile.display_name,
            num_hosts=len(graph.hosts),
            num_switches=len(graph.switches),
            num_links=len(graph.edges),
            root_ids=[r.id for r in self.profile.root_switches()],
            expected_root_paths=self.profile.expected_root_paths(),
        )
        if not graph.nodes:
            report.skipped["all"] = "no topology loaded"
            return report

        report.root_paths = self.root_path_samples()
        report.host_pairs = self.host_pair_samples()
        report.bisection = compute_bisection_bandwidth(
            graph, self.adj, config=self.config, cancel=self.cancel
        )
        report.fault_tolerance = analyze_fault_tolerance(
            graph, self.adj, config=self.config, cancel=self.cancel
        )

        ceiling = self.config.max_hosts_for_full_analysis
        if len(graph.hosts) > ceiling:
            reason = f"more than {ceiling} hosts"
            for section in ("cascade", "stats", "cost"):
                report.skipped[section] = reason
            logger.info(
                "Skipping cascade, stats and cost for %s: %d hosts > %d",
                report.display_name, len(graph.hosts), ceiling,
            )
            return report

        report.cascade = multi_failure_cascade(
            graph, self.adj, config=self.config, cancel=self.cancel
        )
        report.stats = all_pairs_stats(graph, self.adj, cancel=self.cancel)
        report.cost = cost_efficiency(graph, self.adj, config=self.config, cancel=self.cancel)
        return report


def run_all(
    graphs: Mapping[str, Graph] | Iterable[tuple[str, Graph]],
    config: AnalysisConfig | None = None,
    cancel: CancelHook | None = None,
) -> Iterator[tuple[str, AnalysisReport]]:
    """Analyze several topologies, yielding after each one.

    Each ``next()`` runs exactly one topology, which lets a cooperative
    caller (an event loop, a progress display) regain control in between.
    Topologies are independent; no state carries over.
    """
    items = graphs.items() if isinstance(graphs, Mapping) else graphs
    for name, graph in items:
        logger.debug("Analyzing %s", name)
        yield name, TopologyAnalyzer(graph, config=config, cancel=cancel).run()
