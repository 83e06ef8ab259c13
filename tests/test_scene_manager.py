"""Tests for the SceneManager scene builder."""

import pytest


def _light():
    from whitted.scene.lights import Light

    return Light((1.0, 2.0, 3.0, 1.0), (0.1,) * 3, (1.0,) * 3, (0.5,) * 3, (1.0, 0.1, 0.0))


class TestSceneBuilding:
    """Tests for adding objects and lights."""

    def test_objects_keep_insertion_order(self, white_material):
        """Test that spheres and triangles share one ordered object table."""
        from whitted.scene.intersection import ObjectKind, get_object_kind
        from whitted.scene.manager import SceneManager, SphereInfo, TriangleInfo

        scene = SceneManager()
        assert scene.add_sphere((0.0, 0.0, -1.0), 0.5, white_material) == 0
        assert scene.add_triangle((0, 0, 0), (1, 0, 0), (0, 1, 0), white_material) == 1
        assert scene.add_sphere((2.0, 0.0, -1.0), 0.25, white_material) == 2

        assert scene.get_object_count() == 3
        assert isinstance(scene.get_object_info(0), SphereInfo)
        assert isinstance(scene.get_object_info(1), TriangleInfo)
        assert scene.get_object_info(1).kind == ObjectKind.TRIANGLE
        assert get_object_kind(2) == ObjectKind.SPHERE
        assert scene.get_object_info(3) is None

    def test_lights(self):
        """Test that lights are stored in order."""
        from whitted.scene.manager import SceneManager

        scene = SceneManager()
        assert scene.add_light(_light()) == 0
        assert scene.add_light(_light()) == 1
        assert scene.get_light_count() == 2
        assert len(scene.lights) == 2

    @pytest.mark.parametrize("radius", [0.0, -1.0, float("inf"), float("nan")])
    def test_invalid_radius(self, white_material, radius):
        """Test that non-positive or non-finite radii are rejected."""
        from whitted.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="radius must be positive"):
            scene.add_sphere((0.0, 0.0, 0.0), radius, white_material)
        assert scene.get_object_count() == 0

    def test_degenerate_triangle(self, white_material):
        """Test that collinear vertices are rejected."""
        from whitted.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="Degenerate triangle"):
            scene.add_triangle((0, 0, 0), (1, 1, 1), (2, 2, 2), white_material)
        assert scene.get_object_count() == 0

    def test_bad_point(self, white_material):
        """Test that points need three components."""
        from whitted.scene.manager import SceneManager

        with pytest.raises(ValueError, match="3 components"):
            SceneManager().add_sphere((0.0, 0.0), 1.0, white_material)

    def test_clear(self, white_material):
        """Test that clear empties objects, materials and lights."""
        from whitted.materials.phong import get_phong_material_count
        from whitted.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere((0.0, 0.0, 0.0), 1.0, white_material)
        scene.add_light(_light())
        scene.clear()

        assert scene.get_object_count() == 0
        assert scene.get_light_count() == 0
        assert get_phong_material_count() == 0
        assert scene.objects == []

    def test_capacity_limits(self):
        """Test the reported capacities."""
        from whitted.scene.manager import SceneManager

        assert SceneManager.get_max_objects() == 2048
        assert SceneManager.get_max_materials() == 2048
        assert SceneManager.get_max_lights() == 64


class TestSerialization:
    """Tests for dictionary export and import."""

    def _build(self, white_material):
        from whitted.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere((0.0, 0.0, -1.0), 0.5, white_material)
        scene.add_triangle((0, 0, 0), (1, 0, 0), (0, 1, 0), white_material)
        scene.add_light(_light())
        return scene

    def test_to_dict_format(self, white_material):
        """Test the exported dictionary layout."""
        data = self._build(white_material).to_dict()

        assert [obj["type"] for obj in data["objects"]] == ["sphere", "triangle"]
        assert data["objects"][0]["center"] == [0.0, 0.0, -1.0]
        assert data["objects"][0]["radius"] == 0.5
        assert data["objects"][1]["vertices"][1] == [1.0, 0.0, 0.0]
        assert data["objects"][1]["material"]["diffuse"] == [1.0, 1.0, 1.0]
        assert data["lights"][0]["position"] == [1.0, 2.0, 3.0, 1.0]

    def test_from_dict_rebuilds_scene(self, white_material):
        """Test that importing an export reproduces the scene."""
        from whitted.scene.manager import SceneManager

        data = self._build(white_material).to_dict()
        scene = SceneManager()
        scene.from_dict(data)

        assert scene.get_object_count() == 2
        assert scene.get_light_count() == 1
        assert scene.to_dict() == data

    def test_from_dict_replaces_contents(self, white_material):
        """Test that importing clears what was there before."""
        from whitted.scene.manager import SceneManager

        scene = SceneManager()
        for i in range(5):
            scene.add_sphere((float(i), 0.0, 0.0), 0.1, white_material)
        scene.from_dict({"objects": [], "lights": []})

        assert scene.get_object_count() == 0

    def test_unknown_object_type(self):
        """Test that unknown object types raise ValueError."""
        from whitted.scene.manager import SceneManager

        with pytest.raises(ValueError, match="Unknown object type"):
            SceneManager().from_dict({"objects": [{"type": "cube"}]})

    def test_triangle_vertex_count(self):
        """Test that triangles need exactly three vertices."""
        from whitted.scene.manager import SceneManager

        with pytest.raises(ValueError, match="3 vertices"):
            SceneManager().from_dict(
                {"objects": [{"type": "triangle", "vertices": [[0, 0, 0], [1, 0, 0]]}]}
            )
