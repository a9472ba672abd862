"""4x4 transform utilities for scene-graph evaluation.

Matrices follow the row-vector convention: a point is a 1x4 homogeneous
row vector multiplied on the left (``point @ matrix``), so translation lives
in the last row. Flat 16-element sequences are read row-major, which is
exactly how a glTF column-major ``matrix`` array lands in this convention.
"""

from __future__ import annotations

from functools import reduce
from typing import Iterable, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray
from pydantic import BaseModel, Field
from scipy.spatial.transform import Rotation

IDENTITY_FLAT: tuple[float, ...] = (
    1.0, 0.0, 0.0, 0.0,
    0.0, 1.0, 0.0, 0.0,
    0.0, 0.0, 1.0, 0.0,
    0.0, 0.0, 0.0, 1.0,
)


def identity() -> NDArray[np.float64]:
    """Return a fresh 4x4 identity matrix."""
    return np.array(IDENTITY_FLAT, dtype=np.float64).reshape(4, 4)


def as_matrix(values: ArrayLike | None) -> NDArray[np.float64]:
    """Coerce a flat 16-sequence or 4x4 array into a 4x4 float matrix.

    ``None`` stands for a missing matrix and yields the identity.

    Raises:
        ValueError: If the input does not hold exactly 16 values
    """
    if values is None:
        return identity()
    matrix = np.asarray(values, dtype=np.float64)
    if matrix.size != 16:
        raise ValueError(f"Matrix must have 16 elements, got {matrix.size}")
    return matrix.reshape(4, 4)


def compose(*matrices: ArrayLike) -> NDArray[np.float64]:
    """Multiply matrices left to right: ``compose(A, B, C) == A @ B @ C``.

    Folds pairwise so any number of operands works. With no operands the
    identity is returned.
    """
    return compose_all(matrices)


def compose_all(matrices: Iterable[ArrayLike]) -> NDArray[np.float64]:
    """Same as :func:`compose` but takes an iterable of matrices."""
    return reduce(
        lambda acc, m: acc @ as_matrix(m),
        matrices,
        identity(),
    )


def apply(point: ArrayLike, matrix: ArrayLike) -> NDArray[np.float64]:
    """Multiply a 1x4 row vector by a 4x4 matrix, returning a new row vector."""
    row = np.asarray(point, dtype=np.float64).reshape(4)
    return row @ as_matrix(matrix)


def to_homogeneous(positions: ArrayLike) -> NDArray[np.float64]:
    """Group a flat xyz sequence (or Nx3 array) into Nx4 rows with w = 1.

    Raises:
        ValueError: If the number of values is not a multiple of 3
    """
    flat = np.asarray(positions, dtype=np.float64).reshape(-1)
    if flat.size % 3 != 0:
        raise ValueError(
            f"Position count must be a multiple of 3, got {flat.size}"
        )
    points = flat.reshape(-1, 3)
    ones = np.ones((len(points), 1), dtype=np.float64)
    return np.hstack([points, ones])


def apply_to_points(points: ArrayLike, matrix: ArrayLike) -> NDArray[np.float64]:
    """Transform Nx4 homogeneous row vectors by a 4x4 matrix."""
    rows = np.asarray(points, dtype=np.float64).reshape(-1, 4)
    return rows @ as_matrix(matrix)


class TRS(BaseModel):
    """glTF node translation / rotation / scale properties.

    Attributes:
        translation: XYZ translation
        rotation: Unit quaternion in glTF order (x, y, z, w)
        scale: Per-axis scale factors
    """

    translation: tuple[float, float, float] = Field(
        default=(0.0, 0.0, 0.0),
        description="XYZ translation"
    )
    rotation: tuple[float, float, float, float] = Field(
        default=(0.0, 0.0, 0.0, 1.0),
        description="Quaternion (x, y, z, w)"
    )
    scale: tuple[float, float, float] = Field(
        default=(1.0, 1.0, 1.0),
        description="Per-axis scale"
    )

    def to_matrix(self) -> NDArray[np.float64]:
        """Convert to a 4x4 matrix in row-vector form.

        Built as T @ R @ S for column vectors, then transposed so that
        ``point @ matrix`` scales, rotates, then translates.
        """
        s = np.diag([*self.scale, 1.0])

        # scipy uses the same scalar-last (x, y, z, w) layout as glTF
        r = np.eye(4, dtype=np.float64)
        r[:3, :3] = Rotation.from_quat(self.rotation).as_matrix()

        t = np.eye(4, dtype=np.float64)
        t[:3, 3] = self.translation

        return (t @ r @ s).T


def translation(x: float, y: float, z: float) -> NDArray[np.float64]:
    """Row-vector translation matrix."""
    return TRS(translation=(x, y, z)).to_matrix()


def scaling(sx: float, sy: float | None = None, sz: float | None = None) -> NDArray[np.float64]:
    """Row-vector scale matrix; a single factor scales uniformly."""
    sy = sx if sy is None else sy
    sz = sx if sz is None else sz
    return np.diag([sx, sy, sz, 1.0])


def stack_points(chunks: Sequence[NDArray[np.float64]]) -> NDArray[np.float64]:
    """Concatenate Nx4 chunks in one pass (empty input gives a 0x4 array)."""
    if not chunks:
        return np.empty((0, 4), dtype=np.float64)
    return np.concatenate(chunks, axis=0)
