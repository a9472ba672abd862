"""Scene graph model, transforms and world-space point collection."""

from .collector import MeshRef, iter_world_points, mesh_refs, world_points
from .graph import Node, SceneGraph, ancestor_chain
from .transform import TRS, apply, compose

__all__ = [
    "MeshRef",
    "iter_world_points",
    "mesh_refs",
    "world_points",
    "Node",
    "SceneGraph",
    "ancestor_chain",
    "TRS",
    "apply",
    "compose",
]
