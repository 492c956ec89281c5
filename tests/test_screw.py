import math
import numpy as np
import pytest

from smg.screws import Axis, Screw, TransformUtil, Twist


class TestScrewConstruction:
    def test_negative_magnitude_raises(self):
        with pytest.raises(RuntimeError, match="Cannot construct screw - magnitude -0.1 is negative"):
            Screw(Axis([0, 0, 0], [0, 0, 1]), 0.0, -0.1)

    def test_nan_magnitude_raises(self):
        with pytest.raises(RuntimeError, match="magnitude is NaN"):
            Screw(Axis([0, 0, 0], [0, 0, 1]), 0.5, math.nan)

    def test_classification(self, translation_screw, rotation_screw, coil_screw):
        assert translation_screw.is_pure_translation and translation_screw.is_pure
        assert not translation_screw.is_pure_rotation
        assert rotation_screw.is_pure_rotation and rotation_screw.is_pure
        assert not rotation_screw.is_pure_translation
        assert not coil_screw.is_pure

    def test_unit_twist(self, translation_screw, coil_screw):
        np.testing.assert_allclose(translation_screw.unit_twist.coordinates, [0, 0, 1, 0, 0, 0])

        # The linear part is pitch * w - w x q.
        np.testing.assert_allclose(coil_screw.unit_twist.linear, [0.5, -0.5, 0.5])
        np.testing.assert_allclose(coil_screw.unit_twist.angular, [0, 0, 1])


class TestScrewEquality:
    def test_reflexive(self, coil_screw):
        assert coil_screw.values_equal_to(coil_screw)

    def test_collinear_axes(self):
        screw1 = Screw(Axis([0.5, 0.5, 0], [0, 0, 1]), 0.5, 1.0)
        screw2 = Screw(Axis([0.5, 0.5, 7], [0, 0, 2]), 0.5, 1.0)
        assert screw1.values_equal_to(screw2)

    def test_infinite_pitches(self, translation_screw):
        assert translation_screw.values_equal_to(Screw(Axis([0, 0, 0], [0, 0, 1]), math.inf, 1.0))

    def test_different_values(self, coil_screw):
        assert not coil_screw.values_equal_to(Screw(coil_screw.axis, 0.6, 1.0))
        assert not coil_screw.values_equal_to(Screw(coil_screw.axis, 0.5, 1.1))
        assert not coil_screw.values_equal_to(Screw(Axis([0.5, 0.4, 0], [0, 0, 1]), 0.5, 1.0))
        assert not coil_screw.values_equal_to(Screw(coil_screw.axis, math.inf, 1.0))


class TestScrewTransforms:
    def test_pure_translation(self, translation_screw):
        np.testing.assert_allclose(
            translation_screw.get_transform(),
            TransformUtil.transform_from_rotation_translation(np.eye(3), [0, 0, 1])
        )

    def test_pure_rotation(self, rotation_screw):
        expected = TransformUtil.transform_from_rotation_translation(
            TransformUtil.rotation_from_axis_angle([0, 0, 1], 1.0), [0, 0, 0]
        )
        np.testing.assert_allclose(rotation_screw.get_transform(), expected, atol=1e-12)

    def test_coil(self, coil_screw):
        # The origin rotates by one radian about the axis through (0.5,0.5,0) and rises by the pitch.
        transform = coil_screw.get_transform()
        centre = np.array([0.5, 0.5, 0.0])
        expected = centre + TransformUtil.rotation_from_axis_angle([0, 0, 1], 1.0) @ -centre + [0, 0, 0.5]
        np.testing.assert_allclose(transform[0:3, 3], expected, atol=1e-12)

    def test_points_on_the_axis_stay_on_the_axis(self, coil_screw):
        transform = coil_screw.get_transform_at_magnitude(0.7)
        p = np.array([0.5, 0.5, 2.0, 1.0])
        np.testing.assert_allclose(transform @ p, [0.5, 0.5, 2.35, 1.0], atol=1e-12)

    def test_zero_magnitude_gives_identity(self, coil_screw):
        np.testing.assert_allclose(coil_screw.get_transform_at_magnitude(0.0), np.eye(4), atol=1e-15)

    def test_magnitude_out_of_range_raises(self, coil_screw):
        with pytest.raises(RuntimeError, match="cannot be negative"):
            coil_screw.get_transform_at_magnitude(-0.1)
        with pytest.raises(RuntimeError, match="cannot be greater"):
            coil_screw.get_transform_at_magnitude(1.1)

    def test_twist_at_magnitude(self, coil_screw):
        np.testing.assert_allclose(coil_screw.get_twist_at_magnitude(2.0).coordinates, [1, -1, 1, 0, 0, 2])
        with pytest.raises(RuntimeError, match="is negative"):
            coil_screw.get_twist_at_magnitude(-1.0)

    def test_transform_at_trajectory_time(self, coil_screw):
        np.testing.assert_allclose(
            coil_screw.get_transform_at_trajectory_time(0.5, 1.0), coil_screw.get_transform_at_magnitude(0.5)
        )
        with pytest.raises(RuntimeError, match="not positive"):
            coil_screw.get_transform_at_trajectory_time(0.0, 1.0)
        with pytest.raises(RuntimeError, match="cannot be negative"):
            coil_screw.get_transform_at_trajectory_time(1.0, -1.0)


class TestScrewConversions:
    def test_zero_twist(self):
        screw = Screw.from_twist(Twist([0, 0, 0], [0, 0, 0]))
        assert screw.magnitude == 0.0
        assert screw.is_pure_translation
        np.testing.assert_array_equal(screw.get_transform(), np.eye(4))

    def test_translation_twist(self):
        screw = Screw.from_twist(Twist([0, 3, 4], [0, 0, 0]))
        assert screw.is_pure_translation
        assert screw.magnitude == pytest.approx(5.0)
        np.testing.assert_allclose(screw.axis.direction, [0, 0.6, 0.8])

    def test_coil_twist(self, coil_screw):
        screw = Screw.from_twist(coil_screw.get_twist())
        assert screw.values_equal_to(coil_screw)

    @pytest.mark.parametrize("axis, angle, t", [
        ([0, 0, 1], 0.0, [0.231, -4.312, 0.063]),
        ([0, 1, 0], 0.1, [0, 0, 0]),
        ([2.012, 1.044, -0.569], -0.513, [0.231, -4.312, 0.063])
    ])
    def test_transform_round_trip(self, axis, angle, t):
        transform = TransformUtil.transform_from_rotation_translation(
            TransformUtil.rotation_from_axis_angle(axis, angle), t
        )
        np.testing.assert_allclose(Screw.from_transform(transform).get_transform(), transform, atol=1e-9)

    @pytest.mark.parametrize("epsilon", [1e-6, 1.5e-6, 1e-5])
    def test_transform_round_trip_near_half_turn(self, epsilon):
        transform = TransformUtil.transform_from_rotation_translation(
            TransformUtil.rotation_from_axis_angle([0.2, -0.7, 0.4], math.pi - epsilon), [1.5, -0.25, 2.0]
        )
        np.testing.assert_allclose(Screw.from_transform(transform).get_transform(), transform, atol=1e-9)

    def test_screw_round_trip(self, translation_screw, rotation_screw, coil_screw):
        for screw in [translation_screw, rotation_screw, coil_screw]:
            assert Screw.from_transform(screw.get_transform()).values_equal_to(screw, tolerance=1e-8)


class TestScrewViz:
    def test_axis_half_length(self, translation_screw, rotation_screw, coil_screw):
        assert rotation_screw.get_axis_half_length() == pytest.approx(5.0)
        assert translation_screw.get_axis_half_length() == pytest.approx(1.1)
        assert coil_screw.get_axis_half_length() == pytest.approx(0.55)

    def test_distance_travelled(self, translation_screw, coil_screw):
        assert translation_screw.get_distance_travelled([4, 5, 6]) == pytest.approx(1.0)
        assert coil_screw.get_distance_travelled([0, 0, 0]) == pytest.approx(math.sqrt(0.75))
        assert coil_screw.get_distance_travelled([0, 0, 0], 2.0) == pytest.approx(2 * math.sqrt(0.75))

    def test_helix_radius(self, coil_screw, rotation_screw):
        assert coil_screw.get_helix_radius() == pytest.approx(math.sqrt(0.5))
        assert rotation_screw.get_helix_radius() == pytest.approx(0.0)

    def test_viz_transform_through_origin(self, translation_screw):
        np.testing.assert_allclose(translation_screw.get_viz_transform(), np.eye(4), atol=1e-12)

    def test_viz_transform_along_x(self):
        screw = Screw(Axis([3, 0, 0], [1, 0, 0]), 0.0, 1.0)
        viz_transform = screw.get_viz_transform()
        np.testing.assert_allclose(viz_transform[0:3, 2], [1, 0, 0])
        np.testing.assert_allclose(viz_transform[0:3, 3], [0, 0, 0], atol=1e-12)
        assert np.linalg.det(viz_transform[0:3, 0:3]) == pytest.approx(1.0)

    def test_viz_transform_diagonal_axis(self):
        screw = Screw(Axis([1, 1, 1], [1, 1, 1]), 0.0, 1.0)
        viz_transform = screw.get_viz_transform()
        rot = viz_transform[0:3, 0:3]
        np.testing.assert_allclose(rot @ rot.T, np.eye(3), atol=1e-12)
        np.testing.assert_allclose(viz_transform[0:3, 2], np.ones(3) / math.sqrt(3))

    def test_viz_transform_off_centre(self, coil_screw):
        viz_transform = coil_screw.get_viz_transform()
        np.testing.assert_allclose(viz_transform[0:3, 3], [0.5, 0.5, 0])
        np.testing.assert_allclose(viz_transform[0:3, 0], -np.array([1, 1, 0]) / math.sqrt(2))
        np.testing.assert_allclose(viz_transform[0:3, 2], [0, 0, 1])

        # The origin is at (radius, 0, 0) in the viz frame.
        origin_in_viz = np.linalg.inv(viz_transform) @ [0, 0, 0, 1]
        np.testing.assert_allclose(origin_in_viz[0:3], [coil_screw.get_helix_radius(), 0, 0], atol=1e-12)

    def test_viz_params(self, coil_screw):
        axis_params = coil_screw.make_axis_viz_params()
        assert axis_params.half_length == pytest.approx(0.55)

        helix_params = coil_screw.make_helix_viz_params(0.1)
        assert helix_params.pitch == 0.5
        assert helix_params.magnitude == 1.0
        assert helix_params.angular_step == 0.1
        np.testing.assert_allclose(helix_params.viz_transform, coil_screw.get_viz_transform())

    def test_helix_starts_at_origin(self, coil_screw):
        points = coil_screw.get_helix_points(0.1)
        viz_transform = coil_screw.get_viz_transform()
        middle = points[len(points) // 2]
        np.testing.assert_allclose(viz_transform @ np.append(middle, 1.0), [0, 0, 0, 1], atol=1e-12)
