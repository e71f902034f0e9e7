#!/usr/bin/env python3
"""Batch example: comparing several fabrics loaded from JSON files.

Each file holds one graph in the ``{"nodes", "edges", "metadata"}``
shape. Reports are streamed one topology at a time and written as JSON.

Usage:
    python examples/run_all.py fattree.json jupiter.json > reports.json
"""

import json
import logging
import sys
import time
from pathlib import Path

from dcfabric.analysis import run_all
from dcfabric.models import AnalysisConfig, Graph

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

paths = [Path(p) for p in sys.argv[1:]]
if not paths:
    sys.exit(__doc__)

graphs = {p.stem: Graph.from_dict(json.loads(p.read_text())) for p in paths}
config = AnalysisConfig(max_hosts_for_full_analysis=200)

reports = {}
t0 = time.perf_counter()
for name, report in run_all(graphs, config=config):
    elapsed = time.perf_counter() - t0
    bisection = report.bisection.links if report.bisection else "-"
    print(
        f"{name:<20} {report.display_name:<20} hosts={report.num_hosts:<5} "
        f"bisection={bisection:<6} ({elapsed:.2f}s)",
        file=sys.stderr,
    )
    reports[name] = report.to_dict()

json.dump(reports, sys.stdout, indent=2)
