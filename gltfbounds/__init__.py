"""gltfbounds - Bounding boxes of glTF 1.0 scene graphs.

Walks node ancestry to build each mesh's world transform, applies it to the
mesh's vertex positions and reduces the result to an axis-aligned box.
"""

__version__ = "0.1.0"

from .core.bounds import BoundingBox, Center, Dimensions, compute_bounding_box
from .core.config import BoundingConfig
from .core.errors import GltfBoundsError, GraphIntegrityError, MeshDataError
from .mesh.positions import (
    CallablePositionSource,
    MappingPositionSource,
    PositionSource,
    TrimeshPositionSource,
)
from .scene.graph import Node, SceneGraph

__all__ = [
    "BoundingBox",
    "Center",
    "Dimensions",
    "compute_bounding_box",
    "BoundingConfig",
    "GltfBoundsError",
    "GraphIntegrityError",
    "MeshDataError",
    "PositionSource",
    "MappingPositionSource",
    "CallablePositionSource",
    "TrimeshPositionSource",
    "Node",
    "SceneGraph",
]
