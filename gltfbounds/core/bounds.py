"""Bounding box reduction and the public entry point.

Axes: X (index 0) is width, Y (index 1) is height/up, Z (index 2) is depth.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable

import numpy as np
from numpy.typing import ArrayLike, NDArray
from pydantic import BaseModel, Field

from .config import BoundingConfig
from .errors import MeshDataError
from .rounding import round_value

if TYPE_CHECKING:
    from ..mesh.positions import PositionSource
    from ..scene.graph import SceneGraph

logger = logging.getLogger(__name__)


@dataclass
class BoundsAccumulator:
    """Running per-axis minimum and maximum.

    Starts at +inf / -inf and only ever grows.
    """

    min: NDArray[np.float64] = field(
        default_factory=lambda: np.full(3, np.inf, dtype=np.float64)
    )
    max: NDArray[np.float64] = field(
        default_factory=lambda: np.full(3, -np.inf, dtype=np.float64)
    )

    @property
    def is_empty(self) -> bool:
        """True while no point has been folded in."""
        return bool(np.any(self.min > self.max))

    def update(self, points: ArrayLike) -> BoundsAccumulator:
        """Fold Nx3 or Nx4 points in (the homogeneous w is ignored)."""
        arr = np.asarray(points, dtype=np.float64)
        if arr.size == 0:
            return self
        xyz = arr.reshape(-1, arr.shape[-1])[:, :3]
        np.minimum(self.min, xyz.min(axis=0), out=self.min)
        np.maximum(self.max, xyz.max(axis=0), out=self.max)
        return self

    def merge(self, other: BoundsAccumulator) -> BoundsAccumulator:
        """Combine with another accumulator in place."""
        np.minimum(self.min, other.min, out=self.min)
        np.maximum(self.max, other.max, out=self.max)
        return self

    @property
    def size(self) -> NDArray[np.float64]:
        return self.max - self.min

    @property
    def center(self) -> NDArray[np.float64]:
        return (self.max + self.min) / 2


def reduce_points(points: ArrayLike | Iterable[ArrayLike]) -> BoundsAccumulator:
    """Reduce points (one array, or an iterable of point chunks) to extrema.

    Empty input leaves the accumulator at +inf / -inf.
    """
    acc = BoundsAccumulator()
    if isinstance(points, np.ndarray):
        return acc.update(points)
    for chunk in points:
        acc.update(chunk)
    return acc


class Dimensions(BaseModel):
    """Extent of the box along each axis."""

    width: float = Field(description="X extent")
    height: float = Field(description="Y (up) extent")
    depth: float = Field(description="Z extent")


class Center(BaseModel):
    """Midpoint of the box."""

    x: float
    y: float
    z: float


class BoundingBox(BaseModel):
    """Bounding box of a scene.

    ``empty`` marks a scene without any vertex; its dimensions and center
    are all zero and ``min``/``max`` are None.
    """

    dimensions: Dimensions
    center: Center
    min: tuple[float, float, float] | None = None
    max: tuple[float, float, float] | None = None
    empty: bool = False

    @classmethod
    def from_accumulator(
        cls,
        acc: BoundsAccumulator,
        precision: int | None = None,
    ) -> BoundingBox:
        """Derive dimensions and center, rounding each of the six values.

        Raises:
            MeshDataError: If the extent or center is not finite
        """
        if acc.is_empty:
            return cls.empty_box()

        with np.errstate(over="ignore", invalid="ignore"):
            size = acc.size
            center = acc.center
        if not (np.isfinite(size).all() and np.isfinite(center).all()):
            raise MeshDataError(
                f"Scene bounds are not finite: min={acc.min.tolist()} max={acc.max.tolist()}"
            )

        return cls(
            dimensions=Dimensions(
                width=round_value(size[0], precision),
                height=round_value(size[1], precision),
                depth=round_value(size[2], precision),
            ),
            center=Center(
                x=round_value(center[0], precision),
                y=round_value(center[1], precision),
                z=round_value(center[2], precision),
            ),
            min=tuple(acc.min.tolist()),
            max=tuple(acc.max.tolist()),
        )

    @classmethod
    def empty_box(cls) -> BoundingBox:
        """Result for a scene with no geometry."""
        return cls(
            dimensions=Dimensions(width=0.0, height=0.0, depth=0.0),
            center=Center(x=0.0, y=0.0, z=0.0),
            empty=True,
        )

    def to_dict(self) -> dict[str, dict[str, float]]:
        """Return ``{"dimensions": {...}, "center": {...}}``."""
        return self.model_dump(include={"dimensions", "center"})


def compute_bounding_box(
    graph: SceneGraph | dict[str, Any],
    positions: PositionSource | Any,
    precision: int | None = None,
    *,
    config: BoundingConfig | None = None,
) -> BoundingBox:
    """Compute the world-space bounding box of every mesh in a scene.

    Args:
        graph: SceneGraph, or a plain name -> node-dict mapping
        positions: Position source, mapping of mesh id to positions, or a
            ``positions(mesh_id)`` callable
        precision: Decimal digits to keep (overrides ``config.precision``);
            None leaves values unrounded
        config: Optional BoundingConfig

    Returns:
        BoundingBox; ``empty=True`` when the scene has no vertices

    Raises:
        GraphIntegrityError: On dangling child references or cycles
        MeshDataError: If any mesh's positions cannot be loaded
    """
    from ..scene.collector import iter_world_points
    from ..scene.graph import SceneGraph

    config = config or BoundingConfig.default()
    if precision is None:
        precision = config.precision
    elif precision < 0:
        raise ValueError(f"Precision must be >= 0, got {precision}")

    if not isinstance(graph, SceneGraph):
        graph = SceneGraph.from_nodes(graph)

    chunks = (
        points
        for _, points in iter_world_points(graph, positions, config.index_parents)
    )
    acc = reduce_points(chunks)

    if acc.is_empty:
        logger.debug("Scene has no geometry")
        return BoundingBox.empty_box()

    box = BoundingBox.from_accumulator(acc, precision)
    logger.debug(f"Bounds min={box.min} max={box.max}")
    return box
