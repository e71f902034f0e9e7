#!/usr/bin/env python3
"""Quick start example: analyzing a small leaf-spine fabric.

Demonstrates the core workflow:
  1. Describe a fabric in the nodes/edges wire format
  2. Count shortest paths between hosts
  3. Compute bisection bandwidth and single-switch fault tolerance
  4. Run the full analysis and print the report
"""

import logging

from dcfabric.analysis import TopologyAnalyzer
from dcfabric.bisection import compute_bisection_bandwidth
from dcfabric.graph import build_adjacency, count_paths_through_node, count_shortest_paths
from dcfabric.models import Graph
from dcfabric.resilience import analyze_fault_tolerance

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

# --- 1. Describe the fabric ---
#   spines:  S1        S2
#            | \      / |
#   leaves:  S3  S4  S5  (full mesh to both spines)
#            |   |   |
#   hosts:  M1  M2  M3  M4  M5  M6 (two per leaf)
nodes = [
    {"id": "S1", "type": "switch", "subtype": "spine", "x": 10.0},
    {"id": "S2", "type": "switch", "subtype": "spine", "x": 30.0},
]
edges = []
for i, leaf in enumerate(["S3", "S4", "S5"]):
    nodes.append({"id": leaf, "type": "switch", "subtype": "leaf", "x": 20.0 * i})
    edges += [{"from": leaf, "to": "S1"}, {"from": leaf, "to": "S2"}]
    for j in range(2):
        host = f"M{2 * i + j + 1}"
        nodes.append({"id": host, "type": "host", "x": 20.0 * i + j})
        edges.append({"from": leaf, "to": host})

graph = Graph.from_dict({"nodes": nodes, "edges": edges, "metadata": {"type": "amazon"}})
adj = build_adjacency(graph)
print(f"{len(graph.hosts)} hosts, {len(graph.switches)} switches, {len(graph.edges)} links")

# --- 2. Shortest paths ---
for dst in ("M2", "M3"):
    paths = count_shortest_paths(adj, "M1", dst)
    via = count_paths_through_node(adj, "M1", dst, "S1")
    print(f"  M1 -> {dst}: {paths.count} paths of {paths.dist} hops, {via} through S1")

# --- 3. Bisection and fault tolerance ---
bisection = compute_bisection_bandwidth(graph, adj)
print(f"\nBisection bandwidth: {bisection.links} links ({bisection.method.value})")

ft = analyze_fault_tolerance(graph, adj)
assert ft is not None
print(f"Removing {ft.switch_id} ({ft.switch_type}):")
print(f"  Disconnected pairs: {ft.disconnected_pairs}/{ft.total_pairs}")
print(f"  Avg path reduction: {ft.avg_path_reduction:.1f}%")
print(f"  Oversubscription:   {ft.oversubscription_label}")

# --- 4. Full report ---
report = TopologyAnalyzer(graph).run()
print(f"\n{report.display_name}")
for step in report.cascade:
    print(
        f"  {step.removed}/{step.total_roots} spines down: "
        f"{step.avg_path_survival:.1f}% paths survive, "
        f"{step.disconnected_pairs} pairs cut"
    )
assert report.stats is not None and report.cost is not None
print(f"  Diameter: {report.stats.diameter}, avg distance: {report.stats.avg_dist:.2f}")
print(f"  Paths per switch: {report.cost.paths_per_switch:.3f}")
print(f"  Bisection per link: {report.cost.bw_per_link:.3f}")
