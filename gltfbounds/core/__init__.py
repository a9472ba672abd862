"""Core modules for gltfbounds."""

from .bounds import BoundingBox, BoundsAccumulator, compute_bounding_box, reduce_points
from .config import BoundingConfig
from .errors import GltfBoundsError, GraphIntegrityError, MeshDataError
from .rounding import round_value

__all__ = [
    "BoundingBox",
    "BoundsAccumulator",
    "compute_bounding_box",
    "reduce_points",
    "BoundingConfig",
    "GltfBoundsError",
    "GraphIntegrityError",
    "MeshDataError",
    "round_value",
]
