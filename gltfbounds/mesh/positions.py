"""Vertex position sources.

A position source returns the raw, untransformed vertex positions of a mesh
as a flat xyz sequence (or an Nx3 array). Decoding glTF buffers is left to
the caller; these adapters cover in-memory data, plain callables and meshes
loaded through trimesh.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Mapping

import numpy as np
import trimesh
from numpy.typing import ArrayLike, NDArray

from ..core.errors import MeshDataError


class PositionSource(ABC):
    """Abstract base class for mesh position sources."""

    @abstractmethod
    def positions(self, mesh_id: str) -> ArrayLike:
        """Return raw positions for a mesh.

        Args:
            mesh_id: Mesh identifier as listed in a node's ``meshes``

        Returns:
            Flat xyz sequence or Nx3 array in mesh-local space

        Raises:
            MeshDataError: If the mesh cannot be resolved
        """
        pass

    def load(self, mesh_id: str) -> NDArray[np.float64]:
        """Return validated positions for a mesh as an Nx3 float array.

        Raises:
            MeshDataError: If the data is missing, non-numeric, non-finite,
                or its length is not a multiple of 3
        """
        raw = self.positions(mesh_id)
        try:
            flat = np.asarray(raw, dtype=np.float64).reshape(-1)
        except (TypeError, ValueError) as e:
            raise MeshDataError(
                f"Mesh {mesh_id!r} has non-numeric positions: {e}", mesh_id
            ) from e

        if flat.size % 3 != 0:
            raise MeshDataError(
                f"Mesh {mesh_id!r} has {flat.size} position values, "
                "not a multiple of 3",
                mesh_id,
            )
        if not np.isfinite(flat).all():
            raise MeshDataError(
                f"Mesh {mesh_id!r} has non-finite positions", mesh_id
            )
        return flat.reshape(-1, 3)


class MappingPositionSource(PositionSource):
    """Positions held in memory, keyed by mesh id."""

    def __init__(self, data: Mapping[str, ArrayLike]):
        self._data = data

    def positions(self, mesh_id: str) -> ArrayLike:
        try:
            return self._data[mesh_id]
        except KeyError:
            raise MeshDataError(f"Unknown mesh: {mesh_id!r}", mesh_id) from None


class CallablePositionSource(PositionSource):
    """Wrap a ``positions(mesh_id)`` function.

    Lookup errors raised by the function are reported as MeshDataError.
    """

    def __init__(self, func: Callable[[str], ArrayLike]):
        self._func = func

    def positions(self, mesh_id: str) -> ArrayLike:
        try:
            return self._func(mesh_id)
        except MeshDataError:
            raise
        except LookupError as e:
            raise MeshDataError(
                f"Could not resolve mesh {mesh_id!r}: {e}", mesh_id
            ) from e


class TrimeshPositionSource(PositionSource):
    """Positions read from trimesh meshes or mesh files.

    Values may be ``trimesh.Trimesh`` objects or paths; paths are loaded
    lazily on first use and cached. Multi-geometry files are concatenated
    the same way as single meshes.
    """

    def __init__(self, meshes: Mapping[str, trimesh.Trimesh | str | Path]):
        self._meshes = dict(meshes)
        self._cache: dict[str, trimesh.Trimesh] = {}

    def mesh(self, mesh_id: str) -> trimesh.Trimesh:
        """Return the trimesh for a mesh id, loading it if needed."""
        if mesh_id in self._cache:
            return self._cache[mesh_id]
        if mesh_id not in self._meshes:
            raise MeshDataError(f"Unknown mesh: {mesh_id!r}", mesh_id)

        entry = self._meshes[mesh_id]
        if isinstance(entry, trimesh.Trimesh):
            mesh = entry
        else:
            mesh = self._load_file(mesh_id, Path(entry))

        self._cache[mesh_id] = mesh
        return mesh

    @staticmethod
    def _load_file(mesh_id: str, path: Path) -> trimesh.Trimesh:
        if not path.exists():
            raise MeshDataError(f"Mesh file not found: {path}", mesh_id)

        loaded = trimesh.load_mesh(str(path))

        # Handle scenes (multiple meshes) by concatenating
        if isinstance(loaded, trimesh.Scene):
            meshes = [
                geom for geom in loaded.geometry.values()
                if isinstance(geom, trimesh.Trimesh)
            ]
            if not meshes:
                raise MeshDataError(f"No valid meshes found in {path}", mesh_id)
            loaded = trimesh.util.concatenate(meshes)
        return loaded

    def positions(self, mesh_id: str) -> ArrayLike:
        return self.mesh(mesh_id).vertices


def as_position_source(source: Any) -> PositionSource:
    """Coerce a mapping or callable into a PositionSource.

    Raises:
        TypeError: If the object cannot act as a position source
    """
    if isinstance(source, PositionSource):
        return source
    if isinstance(source, Mapping):
        return MappingPositionSource(source)
    if callable(source):
        return CallablePositionSource(source)
    raise TypeError(f"Unsupported position source: {type(source).__name__}")
