"""Scene graph data model and ancestry resolution.

A scene graph maps node names to :class:`Node` records. Parents are not
stored; a node's parent is whichever node lists it in ``children``.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Mapping

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, Field, field_validator

from ..core.errors import GraphIntegrityError
from .transform import TRS, as_matrix, identity

logger = logging.getLogger(__name__)


class Node(BaseModel):
    """A glTF 1.0 node.

    Attributes:
        matrix: Local transform as 16 numbers (row-major in the row-vector
            convention, i.e. the glTF column-major array as-is)
        translation: Optional XYZ translation, used when matrix is absent
        rotation: Optional (x, y, z, w) quaternion, used when matrix is absent
        scale: Optional XYZ scale, used when matrix is absent
        meshes: Ordered mesh ids owned by this node
        children: Names of child nodes
    """

    matrix: list[float] | None = Field(default=None, description="4x4 local matrix")
    translation: tuple[float, float, float] | None = None
    rotation: tuple[float, float, float, float] | None = None
    scale: tuple[float, float, float] | None = None
    meshes: list[str] = Field(default_factory=list, description="Owned mesh ids")
    children: list[str] = Field(default_factory=list, description="Child node names")

    model_config = {"extra": "ignore"}

    @field_validator("matrix")
    @classmethod
    def _check_matrix(cls, value: list[float] | None) -> list[float] | None:
        if value is not None and len(value) != 16:
            raise ValueError(f"matrix must have 16 elements, got {len(value)}")
        return value

    @field_validator("meshes", "children", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def has_trs(self) -> bool:
        return any(
            prop is not None
            for prop in (self.translation, self.rotation, self.scale)
        )

    def local_matrix(self) -> NDArray[np.float64]:
        """Return the node's local 4x4 matrix.

        ``matrix`` wins when present, then TRS properties, then identity.
        """
        if self.matrix is not None:
            return as_matrix(self.matrix)
        if self.has_trs:
            trs = TRS(
                translation=self.translation or (0.0, 0.0, 0.0),
                rotation=self.rotation or (0.0, 0.0, 0.0, 1.0),
                scale=self.scale or (1.0, 1.0, 1.0),
            )
            return trs.to_matrix()
        return identity()


class SceneGraph(BaseModel):
    """Mapping of node name to :class:`Node`.

    Iteration order is the insertion order of ``nodes``; it decides which
    parent wins when several nodes claim the same child.
    """

    nodes: dict[str, Node] = Field(default_factory=dict)

    @classmethod
    def from_gltf(cls, gltf: Mapping[str, Any]) -> SceneGraph:
        """Build a graph from a parsed glTF 1.0 document (its ``nodes`` table)."""
        return cls.model_validate({"nodes": gltf.get("nodes") or {}})

    @classmethod
    def from_nodes(cls, nodes: Mapping[str, Node | Mapping[str, Any]]) -> SceneGraph:
        """Build a graph from a name -> node (or node dict) mapping."""
        return cls.model_validate({"nodes": dict(nodes)})

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, name: object) -> bool:
        return name in self.nodes

    def __getitem__(self, name: str) -> Node:
        try:
            return self.nodes[name]
        except KeyError:
            raise GraphIntegrityError(f"Unknown node: {name!r}") from None

    def iter_mesh_nodes(self) -> Iterator[tuple[str, Node]]:
        """Yield (name, node) for every node owning at least one mesh."""
        for name, node in self.nodes.items():
            if node.meshes:
                yield name, node

    def check_integrity(self) -> None:
        """Verify every child reference names an existing node.

        Raises:
            GraphIntegrityError: On a dangling child reference
        """
        for name, node in self.nodes.items():
            for child in node.children:
                if child not in self.nodes:
                    raise GraphIntegrityError(
                        f"Node {name!r} lists unknown child {child!r}"
                    )

    def find_parent(self, name: str) -> str | None:
        """Linear scan for the first node listing ``name`` as a child."""
        for candidate, node in self.nodes.items():
            if name in node.children:
                return candidate
        return None

    def parent_index(self) -> dict[str, str]:
        """Build a child -> parent map in one pass.

        The first claiming node in iteration order wins, matching
        :meth:`find_parent`.

        Raises:
            GraphIntegrityError: On a dangling child reference
        """
        self.check_integrity()
        parents: dict[str, str] = {}
        for name, node in self.nodes.items():
            for child in node.children:
                parents.setdefault(child, name)
        return parents


def ancestor_chain(
    node_name: str,
    graph: SceneGraph,
    parents: Mapping[str, str] | None = None,
) -> list[NDArray[np.float64]]:
    """Collect local matrices from ``node_name`` up to its root.

    The result is ordered nearest first, root last, so that
    ``point @ compose(*chain)`` maps node-local coordinates to world space
    under the row-vector convention.

    Args:
        node_name: Node to start from
        graph: Scene graph to climb
        parents: Optional precomputed child -> parent index; when omitted
            each step scans the graph

    Returns:
        List of 4x4 matrices [own, parent, ..., root]

    Raises:
        GraphIntegrityError: If the node is unknown or the ancestry loops
    """
    chain: list[NDArray[np.float64]] = []
    visited: set[str] = set()
    current: str | None = node_name

    while current is not None:
        if current in visited:
            raise GraphIntegrityError(
                f"Cycle in ancestry of {node_name!r} at node {current!r}"
            )
        visited.add(current)
        chain.append(graph[current].local_matrix())

        if parents is not None:
            current = parents.get(current)
        else:
            current = graph.find_parent(current)

    logger.debug(f"Ancestry of {node_name!r} has depth {len(chain)}")
    return chain
