"""Exception types raised while computing scene bounds."""

from __future__ import annotations


class GltfBoundsError(Exception):
    """Base class for all gltfbounds errors."""


class GraphIntegrityError(GltfBoundsError, ValueError):
    """The node graph is malformed.

    Raised for a ``children`` entry naming a node that does not exist, a
    lookup of an unknown node, or a cycle found while climbing ancestry.
    """


class MeshDataError(GltfBoundsError, ValueError):
    """Vertex positions for a mesh are missing or malformed."""

    def __init__(self, message: str, mesh_id: str | None = None):
        super().__init__(message)
        self.mesh_id = mesh_id
