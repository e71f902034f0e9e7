"""Multi-tier Clos fabrics whose root tier is identified by switch subtype."""

from __future__ import annotations

from dcfabric.models import Node
from dcfabric.profiles.base import TopologyProfile


class SubtypeRootProfile(TopologyProfile):
    """Profile whose roots are the switches with a given subtype."""

    root_subtype: str = ""

    def is_root(self, switch: Node) -> bool:
        return switch.subtype == self.root_subtype


class LeafSpineProfile(SubtypeRootProfile):
    """Two-tier leaf-spine full mesh (every leaf wired to every spine)."""

    display_name = "Amazon Leaf-Spine"
    root_subtype = "spine"


class BlockMeshProfile(SubtypeRootProfile):
    """Aggregation blocks (ToR + agg) meshed through optical circuit switches."""

    display_name = "Google Jupiter"
    root_subtype = "ocs"


class PodMeshProfile(SubtypeRootProfile):
    """Server pods (rack + fabric switches) meshed through spine planes."""

    display_name = "Meta 3-Level Clos"
    root_subtype = "spine"
