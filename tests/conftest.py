"""Shared fixtures for gltfbounds tests."""

import pytest

from gltfbounds.scene.transform import translation


def translate_flat(x: float, y: float, z: float) -> list[float]:
    """Flat 16-list of a translation matrix, as stored in a glTF node."""
    return translation(x, y, z).reshape(16).tolist()


def scale_flat(s: float) -> list[float]:
    """Flat 16-list of a uniform scale matrix."""
    return [s, 0, 0, 0, 0, s, 0, 0, 0, 0, s, 0, 0, 0, 0, 1]


@pytest.fixture
def unit_cube() -> list[float]:
    """Flat positions of the eight corners of the unit cube."""
    corners = []
    for x in (0.0, 1.0):
        for y in (0.0, 1.0):
            for z in (0.0, 1.0):
                corners.extend([x, y, z])
    return corners


@pytest.fixture
def chain_nodes() -> dict:
    """root -> child -> grandchild, each a pure translation."""
    return {
        "root": {"matrix": translate_flat(1.0, 0.0, 0.0), "children": ["child"]},
        "child": {"matrix": translate_flat(0.0, 2.0, 0.0), "children": ["grandchild"]},
        "grandchild": {"matrix": translate_flat(0.0, 0.0, 3.0), "meshes": ["m"]},
    }
