"""Tests for core return models."""
import numpy as np
import pytest
from pydantic import ValidationError


class TestMesh:
    def test_valid_line_mesh(self):
        from topo_globe.core.models import Mesh
        m = Mesh(vertices=[[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]], primitive="lines")
        assert m.vertex_count == 2
        assert m.vertices.shape == (2, 3)

    def test_vertex_must_have_3_components(self):
        from topo_globe.core.models import Mesh
        with pytest.raises(ValidationError):
            Mesh(vertices=[[0.0, 0.0], [1.0, 1.0]], primitive="lines")

    def test_line_mesh_needs_even_vertex_count(self):
        from topo_globe.core.models import Mesh
        with pytest.raises(ValidationError):
            Mesh(vertices=[[0.0, 0.0, 0.0]], primitive="lines")

    def test_point_mesh_allows_odd_count(self):
        from topo_globe.core.models import Mesh
        m = Mesh(vertices=[[0.0, 0.0, 0.0]], primitive="points")
        assert m.vertex_count == 1

    def test_triangle_mesh_needs_multiple_of_3(self):
        from topo_globe.core.models import Mesh
        with pytest.raises(ValidationError):
            Mesh(vertices=[[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]], primitive="triangles")

    def test_unknown_primitive(self):
        from topo_globe.core.models import Mesh
        with pytest.raises(ValidationError):
            Mesh(vertices=[], primitive="quads")

    def test_empty_mesh_is_valid(self):
        from topo_globe.core.models import Mesh
        m = Mesh(vertices=[])
        assert m.is_empty
        assert m.vertices.shape == (0, 3)
        assert m.index_buffer().size == 0

    def test_vertices_read_only(self):
        from topo_globe.core.models import Mesh
        m = Mesh(vertices=[[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
        with pytest.raises(ValueError):
            m.vertices[0, 0] = 5.0

    def test_vertex_buffer_is_flat_float32(self):
        from topo_globe.core.models import Mesh
        m = Mesh(vertices=[[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        buf = m.vertex_buffer()
        assert buf.dtype == np.float32
        assert buf.tolist() == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]

    def test_index_buffer_sequential(self):
        from topo_globe.core.models import Mesh
        m = Mesh(vertices=np.zeros((4, 3)))
        idx = m.index_buffer()
        assert idx.dtype == np.uint32
        assert idx.tolist() == [0, 1, 2, 3]

    def test_indexed_deduplicates_in_first_occurrence_order(self):
        from topo_globe.core.models import Mesh
        a, b, c = [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]
        m = Mesh(vertices=[b, a, a, c, c, b])
        unique, indices = m.indexed()
        assert unique.tolist() == [b, a, c]
        assert indices.tolist() == [0, 1, 1, 2, 2, 0]
        np.testing.assert_array_equal(unique[indices], m.vertices)

    def test_indexed_empty(self):
        from topo_globe.core.models import Mesh
        unique, indices = Mesh(vertices=[]).indexed()
        assert unique.shape == (0, 3)
        assert indices.size == 0


class TestMergeMeshes:
    def test_concatenates_in_order(self):
        from topo_globe.core.models import Mesh, merge_meshes
        a = Mesh(vertices=[[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
        b = Mesh(vertices=[[2.0, 0.0, 0.0], [3.0, 0.0, 0.0]])
        m = merge_meshes([a, b], name="both")
        assert m.vertices[:, 0].tolist() == [0.0, 1.0, 2.0, 3.0]
        assert m.name == "both"

    def test_mixed_primitives_rejected(self):
        from topo_globe.core.models import Mesh, merge_meshes
        a = Mesh(vertices=[[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]], primitive="lines")
        b = Mesh(vertices=[[2.0, 0.0, 0.0]], primitive="points")
        with pytest.raises(ValueError):
            merge_meshes([a, b])

    def test_empty_list(self):
        from topo_globe.core.models import merge_meshes
        assert merge_meshes([]).is_empty


class TestGlobeResult:
    def test_meshes_and_lookup(self):
        from topo_globe.core.models import GlobeResult, LayerResult, Mesh
        r = GlobeResult(layers={"countries": LayerResult(mesh=Mesh(vertices=[]))})
        assert list(r.meshes) == ["countries"]
        assert r.mesh("states") is None
        assert r.mesh("countries").is_empty
