"""Mesh position sources for gltfbounds."""

from .positions import (
    CallablePositionSource,
    MappingPositionSource,
    PositionSource,
    TrimeshPositionSource,
    as_position_source,
)

__all__ = [
    "PositionSource",
    "MappingPositionSource",
    "CallablePositionSource",
    "TrimeshPositionSource",
    "as_position_source",
]
