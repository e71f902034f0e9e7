"""Data-center fabric analysis (dcfabric).

Structural analysis of fat-tree and Clos-style fabrics: shortest-path
multiplicity, bisection bandwidth, fault tolerance under switch loss,
cascading root failures, and cost-efficiency ratios.
"""

__version__ = "0.1.0"
