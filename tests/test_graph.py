"""Tests for the scene graph model and ancestry resolution."""

import numpy as np
import pytest
from pydantic import ValidationError

from gltfbounds.core.errors import GraphIntegrityError
from gltfbounds.scene.graph import Node, SceneGraph, ancestor_chain
from gltfbounds.scene.transform import apply, compose, scaling, translation

from .conftest import scale_flat, translate_flat


class TestNode:
    """Test Node parsing and local matrices."""

    def test_defaults(self):
        """Test a bare node has identity transform and no meshes."""
        node = Node()
        assert node.meshes == []
        assert node.children == []
        np.testing.assert_array_equal(node.local_matrix(), np.eye(4))

    def test_matrix(self):
        """Test an explicit matrix is used as-is."""
        node = Node(matrix=translate_flat(1.0, 2.0, 3.0))
        np.testing.assert_array_almost_equal(node.local_matrix()[3], [1.0, 2.0, 3.0, 1.0])

    def test_bad_matrix_length(self):
        """Test a matrix without 16 values fails validation."""
        with pytest.raises(ValidationError):
            Node(matrix=[1.0, 0.0, 0.0])

    def test_trs(self):
        """Test translation/scale properties build the local matrix."""
        node = Node(translation=(5.0, 0.0, 0.0), scale=(2.0, 2.0, 2.0))
        result = apply([1.0, 1.0, 1.0, 1.0], node.local_matrix())
        np.testing.assert_array_almost_equal(result[:3], [7.0, 2.0, 2.0])

    def test_matrix_wins_over_trs(self):
        """Test matrix takes precedence when both are present."""
        node = Node(matrix=translate_flat(1.0, 0.0, 0.0), translation=(9.0, 9.0, 9.0))
        np.testing.assert_array_almost_equal(node.local_matrix()[3], [1.0, 0.0, 0.0, 1.0])

    def test_ignores_unrelated_gltf_keys(self):
        """Test extra glTF properties such as name or camera are ignored."""
        node = Node.model_validate({"name": "Camera", "camera": "cam0", "children": None})
        assert node.children == []


class TestSceneGraph:
    """Test graph construction and parent lookup."""

    def test_from_gltf(self, chain_nodes):
        """Test building from a glTF document's nodes table."""
        graph = SceneGraph.from_gltf({"asset": {"version": "1.0"}, "nodes": chain_nodes})
        assert len(graph) == 3
        assert "grandchild" in graph

    def test_from_gltf_without_nodes(self):
        assert len(SceneGraph.from_gltf({})) == 0

    def test_unknown_node_raises(self):
        graph = SceneGraph.from_nodes({"a": {}})
        with pytest.raises(GraphIntegrityError):
            graph["b"]

    def test_find_parent(self, chain_nodes):
        graph = SceneGraph.from_nodes(chain_nodes)
        assert graph.find_parent("grandchild") == "child"
        assert graph.find_parent("root") is None

    def test_parent_index_matches_scan(self, chain_nodes):
        """Test the index agrees with the linear scan for every node."""
        graph = SceneGraph.from_nodes(chain_nodes)
        index = graph.parent_index()
        for name in chain_nodes:
            assert index.get(name) == graph.find_parent(name)

    def test_first_parent_wins(self):
        """Test that a child claimed twice resolves to the first claimant."""
        graph = SceneGraph.from_nodes({
            "p1": {"children": ["c"]},
            "p2": {"children": ["c"]},
            "c": {},
        })
        assert graph.find_parent("c") == "p1"
        assert graph.parent_index()["c"] == "p1"

    def test_dangling_child(self):
        """Test a child reference to a missing node is an integrity error."""
        graph = SceneGraph.from_nodes({"root": {"children": ["ghost"]}})
        with pytest.raises(GraphIntegrityError, match="ghost"):
            graph.check_integrity()
        with pytest.raises(GraphIntegrityError):
            graph.parent_index()

    def test_iter_mesh_nodes(self, chain_nodes):
        graph = SceneGraph.from_nodes(chain_nodes)
        assert [name for name, _ in graph.iter_mesh_nodes()] == ["grandchild"]


class TestAncestorChain:
    """Test ancestry ordering: own matrix first, root last."""

    @pytest.mark.parametrize("indexed", [True, False])
    def test_order(self, chain_nodes, indexed):
        """Test the chain runs from the node up to the root."""
        graph = SceneGraph.from_nodes(chain_nodes)
        parents = graph.parent_index() if indexed else None
        chain = ancestor_chain("grandchild", graph, parents)

        assert len(chain) == 3
        np.testing.assert_array_almost_equal(chain[0][3, :3], [0.0, 0.0, 3.0])
        np.testing.assert_array_almost_equal(chain[1][3, :3], [0.0, 2.0, 0.0])
        np.testing.assert_array_almost_equal(chain[2][3, :3], [1.0, 0.0, 0.0])

    def test_root_has_single_matrix(self, chain_nodes):
        graph = SceneGraph.from_nodes(chain_nodes)
        assert len(ancestor_chain("root", graph)) == 1

    def test_missing_matrix_is_identity(self):
        graph = SceneGraph.from_nodes({"root": {"children": ["a"]}, "a": {}})
        for m in ancestor_chain("a", graph):
            np.testing.assert_array_equal(m, np.eye(4))

    def test_order_is_not_reversible(self):
        """Test composition order: a parent scale applies after the child offset.

        Child translates by 1 on X, root scales by 2. The child origin must
        land at x = 2; the reversed order would give x = 1.
        """
        graph = SceneGraph.from_nodes({
            "root": {"matrix": scale_flat(2.0), "children": ["child"]},
            "child": {"matrix": translate_flat(1.0, 0.0, 0.0)},
        })
        chain = ancestor_chain("child", graph)
        origin = [0.0, 0.0, 0.0, 1.0]

        correct = apply(origin, compose(*chain))
        reversed_ = apply(origin, compose(*reversed(chain)))

        assert correct[0] == pytest.approx(2.0)
        assert reversed_[0] == pytest.approx(1.0)

    @pytest.mark.parametrize("indexed", [True, False])
    def test_cycle_raises(self, indexed):
        """Test a cyclic ancestry is rejected instead of looping forever."""
        graph = SceneGraph.from_nodes({
            "a": {"children": ["b"]},
            "b": {"children": ["a"]},
        })
        parents = graph.parent_index() if indexed else None
        with pytest.raises(GraphIntegrityError, match="Cycle"):
            ancestor_chain("a", graph, parents)

    def test_unknown_start_node(self):
        graph = SceneGraph.from_nodes({"a": {}})
        with pytest.raises(GraphIntegrityError):
            ancestor_chain("nope", graph)

    def test_deep_chain(self):
        """Test a chain deeper than the recursion limit resolves."""
        depth = 3000
        nodes = {
            f"n{i}": {"matrix": translate_flat(1.0, 0.0, 0.0), "children": [f"n{i + 1}"]}
            for i in range(depth - 1)
        }
        nodes[f"n{depth - 1}"] = {"matrix": translate_flat(1.0, 0.0, 0.0)}
        graph = SceneGraph.from_nodes(nodes)

        chain = ancestor_chain(f"n{depth - 1}", graph, graph.parent_index())
        assert len(chain) == depth
        assert compose(*chain)[3, 0] == pytest.approx(float(depth))
