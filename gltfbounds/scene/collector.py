"""Collect world-space vertex positions for every mesh in a scene graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator

import numpy as np
from numpy.typing import NDArray

from ..mesh.positions import PositionSource, as_position_source
from .graph import SceneGraph, ancestor_chain
from .transform import apply_to_points, compose_all, stack_points, to_homogeneous

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeshRef:
    """One occurrence of a mesh under its owning node."""

    mesh_id: str
    node_name: str


def mesh_refs(graph: SceneGraph) -> list[MeshRef]:
    """List (mesh, node) pairs in node order, then per-node mesh order."""
    return [
        MeshRef(mesh_id=mesh_id, node_name=name)
        for name, node in graph.iter_mesh_nodes()
        for mesh_id in node.meshes
    ]


def world_matrix(
    node_name: str,
    graph: SceneGraph,
    parents: dict[str, str] | None = None,
) -> NDArray[np.float64]:
    """Compose a node's ancestry chain into its world matrix."""
    return compose_all(ancestor_chain(node_name, graph, parents))


def iter_world_points(
    graph: SceneGraph,
    source: PositionSource | Any,
    index_parents: bool = True,
) -> Iterator[tuple[MeshRef, NDArray[np.float64]]]:
    """Yield each mesh occurrence with its Nx4 world-space points.

    Args:
        graph: Scene graph
        source: Position source, or a mapping / callable accepted by
            :func:`~gltfbounds.mesh.positions.as_position_source`
        index_parents: Build a child -> parent index once instead of
            scanning the graph at every ancestry step

    Raises:
        GraphIntegrityError: If the graph has dangling children or cycles
        MeshDataError: If a mesh's positions cannot be loaded
    """
    source = as_position_source(source)
    if index_parents:
        parents = graph.parent_index()
    else:
        graph.check_integrity()
        parents = None

    refs = mesh_refs(graph)
    logger.debug(f"Collecting {len(refs)} mesh occurrences from {len(graph)} nodes")

    matrices: dict[str, NDArray[np.float64]] = {}
    for ref in refs:
        if ref.node_name not in matrices:
            matrices[ref.node_name] = world_matrix(ref.node_name, graph, parents)

        local = to_homogeneous(source.load(ref.mesh_id))
        points = apply_to_points(local, matrices[ref.node_name])
        logger.debug(
            f"Mesh {ref.mesh_id!r} on node {ref.node_name!r}: {len(points)} points"
        )
        yield ref, points


def world_points(
    graph: SceneGraph,
    source: PositionSource | Any,
    index_parents: bool = True,
) -> NDArray[np.float64]:
    """Return all world-space points of the scene as one Nx4 array."""
    chunks = [points for _, points in iter_world_points(graph, source, index_parents)]
    return stack_points(chunks)
