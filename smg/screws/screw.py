import math
import numpy as np
import vg

from typing import Optional

from .axis import Axis
from .screw_viz_util import AxisVizParams, HelixVizParams, ScrewVizUtil
from .twist import Twist


class Screw:
    """
    A rigid-body motion in screw form, i.e. a rotation about an axis combined with a translation along it.

    .. note::
        An infinite pitch denotes a pure translation along the axis direction, and a zero pitch denotes a pure
        rotation about the axis.

    See Murray, Li and Sastry, "A Mathematical Introduction to Robotic Manipulation", Section 2.3.
    """

    # CONSTRUCTOR

    def __init__(self, axis: Axis, pitch: float, magnitude: float):
        """
        Construct a screw.

        :param axis:            The screw axis.
        :param pitch:           The screw pitch (may be math.inf).
        :param magnitude:       The screw magnitude.
        :raises RuntimeError:   If the magnitude is negative or NaN.
        """
        if math.isnan(magnitude):
            raise RuntimeError("Cannot construct screw - magnitude is NaN")

        if magnitude < 0:
            raise RuntimeError("Cannot construct screw - magnitude {} is negative".format(magnitude))

        self.__axis = axis                    # type: Axis
        self.__pitch = float(pitch)           # type: float
        self.__magnitude = float(magnitude)   # type: float

        # Compute the unit twist corresponding to the screw once, so that transform queries don't need to.
        # See Murray, Li and Sastry, Proposition 2.10.
        if self.is_pure_translation:
            linear = axis.direction     # type: np.ndarray
            angular = np.zeros(3)       # type: np.ndarray
        else:
            angular = axis.direction
            linear = axis.direction * self.__pitch - np.cross(axis.direction, axis.point)

        self.__unit_twist = Twist(linear, angular)  # type: Twist

    # SPECIAL METHODS

    def __repr__(self) -> str:
        """
        Get the formal string representation of the screw.

        :return:    The formal string representation of the screw.
        """
        return "Screw({}, {}, {})".format(repr(self.__axis), self.__pitch, self.__magnitude)

    def __str__(self) -> str:
        """
        Get the informal string representation of the screw.

        :return:    The informal string representation of the screw.
        """
        return "Screw({}, {}, {})".format(self.__axis, self.__pitch, self.__magnitude)

    # PROPERTIES

    @property
    def axis(self) -> Axis:
        """
        Get the screw axis.

        :return:    The screw axis.
        """
        return self.__axis

    @property
    def is_pure(self) -> bool:
        """
        Determine whether or not the screw is either a pure rotation or a pure translation.

        :return:    True, if the screw is a pure rotation or a pure translation, or False otherwise.
        """
        return self.is_pure_rotation or self.is_pure_translation

    @property
    def is_pure_rotation(self) -> bool:
        """
        Determine whether or not the screw is a pure rotation (i.e. has zero pitch).

        :return:    True, if the screw is a pure rotation, or False otherwise.
        """
        return self.__pitch == 0.0

    @property
    def is_pure_translation(self) -> bool:
        """
        Determine whether or not the screw is a pure translation (i.e. has infinite pitch).

        :return:    True, if the screw is a pure translation, or False otherwise.
        """
        return self.__pitch == math.inf

    @property
    def magnitude(self) -> float:
        """
        Get the screw magnitude.

        :return:    The screw magnitude.
        """
        return self.__magnitude

    @property
    def pitch(self) -> float:
        """
        Get the screw pitch.

        :return:    The screw pitch.
        """
        return self.__pitch

    @property
    def unit_twist(self) -> Twist:
        """
        Get the unit twist corresponding to the screw.

        :return:    The unit twist corresponding to the screw.
        """
        return self.__unit_twist

    # PUBLIC STATIC METHODS

    @staticmethod
    def from_transform(transform: np.ndarray) -> "Screw":
        """
        Construct the screw that realises the specified rigid-body transform.

        :param transform:   The 4x4 rigid-body transform.
        :return:            The screw.
        """
        return Screw.from_twist(Twist.log(transform))

    @staticmethod
    def from_twist(twist: Twist) -> "Screw":
        """
        Construct the screw corresponding to the specified twist.

        .. note::
            See Murray, Li and Sastry, Eqs. 2.42-2.44.
        .. note::
            The zero twist has no well-defined axis, so by convention it maps to a zero-magnitude translation
            along the z axis through the origin.

        :param twist:   The twist.
        :return:        The screw.
        """
        # The twist norm takes pure translations into account, and is also the screw magnitude.
        twist_norm = twist.norm()  # type: float

        if twist_norm == 0.0:
            pitch = math.inf                    # type: float
            point = np.zeros(3)                 # type: np.ndarray
            direction = np.array([0.0, 0.0, 1.0])  # type: np.ndarray
        elif twist.is_pure_translation:
            pitch = math.inf
            point = np.zeros(3)
            direction = vg.normalize(twist.linear)
        else:
            twist_norm_sq = twist_norm ** 2  # type: float
            pitch = np.dot(twist.angular, twist.linear) / twist_norm_sq
            point = np.cross(twist.angular, twist.linear) / twist_norm_sq
            direction = vg.normalize(twist.angular)

        return Screw(Axis(point, direction), pitch, twist_norm)

    # PUBLIC METHODS

    def get_axis_half_length(self) -> float:
        """
        Get the half-length of the line that should be drawn to visualise the screw axis.

        .. note::
            A pure rotation gets a fixed-length axis. Otherwise, the axis covers the translation of the motion
            in both directions, plus some padding.

        :return:    The half-length of the axis line.
        """
        if self.is_pure_rotation:
            return 5.0
        elif self.is_pure_translation:
            return 1.1 * self.__magnitude
        else:
            return 1.1 * abs(self.__pitch) * self.__magnitude

    def get_distance_travelled(self, point, magnitude: Optional[float] = None) -> float:
        """
        Get the length of the path traced out by a point under the screw motion.

        :param point:           The point to which the screw motion is applied.
        :param magnitude:       The magnitude up to which to apply the motion (defaults to the screw magnitude).
        :return:                The distance travelled by the point.
        :raises RuntimeError:   If the magnitude is negative.
        """
        if magnitude is None:
            magnitude = self.__magnitude

        if magnitude < 0:
            raise RuntimeError("Magnitude {} is negative".format(magnitude))

        if self.is_pure_translation:
            return magnitude

        radius = self.__axis.distance_to_point(point)  # type: float
        return math.hypot(radius, self.__pitch) * magnitude

    def get_helix_points(self, angular_step: float) -> np.ndarray:
        """
        Sample the helix traced out by the origin under the screw motion, in the viz frame.

        :param angular_step:    The angular step between consecutive samples.
        :return:                An nx3 array of helix points.
        """
        return ScrewVizUtil.make_helix_points(self.__pitch, self.get_helix_radius(), self.__magnitude, angular_step)

    def get_helix_radius(self) -> float:
        """
        Get the radius of the helix traced out by the origin under the screw motion.

        :return:    The distance from the origin to the screw axis.
        """
        return float(np.linalg.norm(self.__axis.get_closest_point_to_origin()))

    def get_transform(self) -> np.ndarray:
        """
        Get the rigid-body transform that represents the entire screw motion.

        :return:    The 4x4 rigid-body transform.
        """
        return self.get_transform_at_magnitude(self.__magnitude)

    def get_transform_at_magnitude(self, magnitude: float) -> np.ndarray:
        """
        Get the rigid-body transform that represents the screw motion up to the specified magnitude.

        :param magnitude:       The magnitude, in [0, screw magnitude].
        :return:                The 4x4 rigid-body transform.
        :raises RuntimeError:   If the magnitude is outside the valid range.
        """
        if magnitude < 0:
            raise RuntimeError("Magnitude cannot be negative, received: {}".format(magnitude))

        if magnitude > self.__magnitude:
            raise RuntimeError("Magnitude {} cannot be greater than screw magnitude {}".format(
                magnitude, self.__magnitude
            ))

        return self.get_twist_at_magnitude(magnitude).exp()

    def get_transform_at_trajectory_time(self, velocity: float, time: float) -> np.ndarray:
        """
        Get the rigid-body transform reached at a particular time along a constant-velocity screw trajectory.

        :param velocity:        The rate at which the magnitude changes (must be positive).
        :param time:            The time along the trajectory (must be non-negative).
        :return:                The 4x4 rigid-body transform.
        :raises RuntimeError:   If the velocity is not positive, or the time is negative.
        """
        if velocity <= 0:
            raise RuntimeError("Velocity {} is not positive".format(velocity))

        if time < 0:
            raise RuntimeError("Time {} cannot be negative".format(time))

        return self.get_transform_at_magnitude(velocity * time)

    def get_twist(self) -> Twist:
        """
        Get the twist that represents the entire screw motion.

        :return:    The twist.
        """
        return self.get_twist_at_magnitude(self.__magnitude)

    def get_twist_at_magnitude(self, magnitude: float) -> Twist:
        """
        Get the twist that represents the screw motion up to the specified magnitude.

        :param magnitude:       The (non-negative) magnitude.
        :return:                The twist.
        :raises RuntimeError:   If the magnitude is negative.
        """
        if magnitude < 0:
            raise RuntimeError("Magnitude {} is negative".format(magnitude))

        return self.__unit_twist.multiply(magnitude)

    def get_viz_transform(self) -> np.ndarray:
        """
        Get the frame in which to place the visualisation of the screw.

        .. note::
            The frame is anchored at the point on the axis closest to the origin, with its z axis along the screw
            axis and its x axis pointing towards the origin. If the axis passes through the origin, any x axis
            will do: we use the world x axis, or the world y axis if the screw axis is along x.

        :return:    The 4x4 transform from the viz frame to world space.
        """
        direction = self.__axis.direction                            # type: np.ndarray
        translation = self.__axis.get_closest_point_to_origin()      # type: np.ndarray

        if np.linalg.norm(translation) <= 1e-9:
            x_unprojected = np.array([1.0, 0.0, 0.0])  # type: np.ndarray
            if math.isclose(abs(np.dot(x_unprojected, direction)), 1.0):
                x_unprojected = np.array([0.0, 1.0, 0.0])
        else:
            x_unprojected = -translation

        x = vg.normalize(vg.reject(x_unprojected, direction))  # type: np.ndarray
        y = np.cross(direction, x)                             # type: np.ndarray

        transform = np.eye(4)  # type: np.ndarray
        transform[0:3, 0] = x
        transform[0:3, 1] = y
        transform[0:3, 2] = direction
        transform[0:3, 3] = translation
        return transform

    def make_axis_viz_params(self) -> AxisVizParams:
        """
        Make the parameters a renderer needs to draw the screw axis.

        :return:    The axis visualisation parameters.
        """
        return AxisVizParams(half_length=self.get_axis_half_length(), viz_transform=self.get_viz_transform())

    def make_helix_viz_params(self, angular_step: float) -> HelixVizParams:
        """
        Make the parameters a renderer needs to draw the helix traced out by the origin.

        :param angular_step:    The angular step the renderer should use when sampling the helix.
        :return:                The helix visualisation parameters.
        """
        return HelixVizParams(
            pitch=self.__pitch, radius=self.get_helix_radius(), magnitude=self.__magnitude,
            angular_step=angular_step, viz_transform=self.get_viz_transform()
        )

    def values_equal_to(self, other: "Screw", *, tolerance: float = 1e-9) -> bool:
        """
        Determine whether or not this screw has the same values as another one.

        .. note::
            This compares the screw parameters rather than the transforms they produce. Axes are compared
            geometrically, so two screws whose axes have different points on the same line are equal.

        :param other:       The other screw.
        :param tolerance:   The tolerance value.
        :return:            True, if the two screws have the same values, or False otherwise.
        """
        return \
            self.__axis.equal_to(other.axis, tolerance=tolerance) and \
            math.isclose(self.__magnitude, other.magnitude, rel_tol=tolerance, abs_tol=tolerance) and \
            math.isclose(self.__pitch, other.pitch, rel_tol=tolerance, abs_tol=tolerance)
