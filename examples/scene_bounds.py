#!/usr/bin/env python3
"""Example: Bounding box of a small glTF 1.0 scene.

Builds a table-like scene: a root node scaled to centimetres, a tabletop
and four legs sharing one box mesh, each placed by its own node transform.

Run with: python examples/scene_bounds.py
"""

import trimesh
from rich.console import Console
from rich.table import Table

from gltfbounds import SceneGraph, TrimeshPositionSource, compute_bounding_box
from gltfbounds.log import setup_logging


def build_gltf() -> dict:
    """Return a glTF 1.0 document fragment with the scene's nodes."""
    legs = {
        f"leg_{i}": {
            "meshes": ["leg"],
            "translation": [x, 0.35, z],
        }
        for i, (x, z) in enumerate([(-0.7, -0.35), (0.7, -0.35), (-0.7, 0.35), (0.7, 0.35)])
    }
    return {
        "asset": {"version": "1.0"},
        "nodes": {
            "root": {
                "matrix": [100, 0, 0, 0, 0, 100, 0, 0, 0, 0, 100, 0, 0, 0, 0, 1],
                "children": ["table"],
            },
            "table": {"children": ["top", *legs]},
            "top": {"meshes": ["top"], "translation": [0.0, 0.72, 0.0]},
            **legs,
        },
    }


def main():
    setup_logging(verbose=True)
    console = Console()

    graph = SceneGraph.from_gltf(build_gltf())
    source = TrimeshPositionSource({
        "top": trimesh.creation.box(extents=[1.6, 0.04, 0.8]),
        "leg": trimesh.creation.box(extents=[0.05, 0.7, 0.05]),
    })

    box = compute_bounding_box(graph, source, precision=2)

    table = Table(title="Scene bounds (cm)")
    table.add_column("Axis")
    table.add_column("Size", justify="right")
    table.add_column("Center", justify="right")
    table.add_row("X (width)", str(box.dimensions.width), str(box.center.x))
    table.add_row("Y (height)", str(box.dimensions.height), str(box.center.y))
    table.add_row("Z (depth)", str(box.dimensions.depth), str(box.center.z))
    console.print(table)


if __name__ == "__main__":
    main()
