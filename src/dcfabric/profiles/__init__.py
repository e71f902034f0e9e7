"""Per-topology-kind profiles and lookup."""

from dcfabric.models import Graph
from dcfabric.profiles.base import GenericProfile, TopologyProfile
from dcfabric.profiles.clos import (
    BlockMeshProfile,
    LeafSpineProfile,
    PodMeshProfile,
    SubtypeRootProfile,
)
from dcfabric.profiles.fattree import FatTreeProfile

PROFILES: dict[str, type[TopologyProfile]] = {
    "fattree": FatTreeProfile,
    "jupiter": BlockMeshProfile,
    "amazon": LeafSpineProfile,
    "meta": PodMeshProfile,
}


def get_profile(graph: Graph) -> TopologyProfile:
    """Return the profile matching ``graph.metadata["type"]``."""
    profile_cls = PROFILES.get(graph.topology_type or "", GenericProfile)
    return profile_cls(graph)


__all__ = [
    "PROFILES",
    "BlockMeshProfile",
    "FatTreeProfile",
    "GenericProfile",
    "LeafSpineProfile",
    "PodMeshProfile",
    "SubtypeRootProfile",
    "TopologyProfile",
    "get_profile",
]
