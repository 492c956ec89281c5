import numpy as np
import vg


class Axis:
    """A line in 3D space, specified by a point on it and a (unit) direction."""

    # CONSTRUCTOR

    def __init__(self, point, direction):
        """
        Construct an axis.

        :param point:           A point through which the axis passes.
        :param direction:       The direction of the axis (will be normalised).
        :raises RuntimeError:   If the direction has zero norm.
        """
        direction = np.array(direction, dtype=float)  # type: np.ndarray
        if np.linalg.norm(direction) == 0.0:
            raise RuntimeError("Cannot construct axis - direction {} has zero norm".format(direction))

        self.__point = np.array(point, dtype=float)   # type: np.ndarray
        self.__direction = vg.normalize(direction)    # type: np.ndarray

        # Axes are immutable, so make sure nobody can modify the arrays we hand out.
        self.__point.flags.writeable = False
        self.__direction.flags.writeable = False

    # SPECIAL METHODS

    def __repr__(self) -> str:
        """
        Get the formal string representation of the axis.

        :return:    The formal string representation of the axis.
        """
        return "Axis({}, {})".format(repr(self.__point), repr(self.__direction))

    def __str__(self) -> str:
        """
        Get the informal string representation of the axis.

        :return:    The informal string representation of the axis.
        """
        return "Axis({}, {})".format(self.__point, self.__direction)

    # PROPERTIES

    @property
    def direction(self) -> np.ndarray:
        """
        Get the (unit) direction of the axis.

        :return:    The direction of the axis.
        """
        return self.__direction

    @property
    def point(self) -> np.ndarray:
        """
        Get the point through which the axis was specified to pass.

        :return:    The point through which the axis was specified to pass.
        """
        return self.__point

    # PUBLIC METHODS

    def contains_point(self, p, *, tolerance: float = 1e-9) -> bool:
        """
        Determine whether or not the specified point lies on the axis.

        :param p:           The point.
        :param tolerance:   The distance below which the point is considered to be on the axis.
        :return:            True, if the point lies on the axis, or False otherwise.
        """
        return self.distance_to_point(p) <= tolerance

    def distance_to_point(self, p) -> float:
        """
        Compute the perpendicular distance from the specified point to the axis.

        :param p:   The point.
        :return:    The distance from the point to the axis.
        """
        offset = np.array(p, dtype=float) - self.__point  # type: np.ndarray
        return float(np.linalg.norm(vg.reject(offset, self.__direction)))

    def equal_to(self, other: "Axis", *, tolerance: float = 1e-9) -> bool:
        """
        Determine whether or not this axis is equal to another one.

        .. note::
            Two axes are equal if they have the same direction and the point of the other axis lies on this one.
            The points themselves need not be the same.

        :param other:       The other axis.
        :param tolerance:   The tolerance value.
        :return:            True, if the two axes are equal, or False otherwise.
        """
        if not np.allclose(self.__direction, other.direction, rtol=0.0, atol=tolerance):
            return False

        return self.contains_point(other.point, tolerance=tolerance)

    def get_closest_point_to_origin(self) -> np.ndarray:
        """
        Get the point on the axis that is closest to the origin.

        :return:    The point on the axis that is closest to the origin.
        """
        lam = -np.dot(self.__point, self.__direction)  # type: float
        return self.__point + lam * self.__direction

    def passes_through_origin(self, *, tolerance: float = 1e-9) -> bool:
        """
        Determine whether or not the axis passes through the origin.

        :param tolerance:   The distance below which the origin is considered to be on the axis.
        :return:            True, if the axis passes through the origin, or False otherwise.
        """
        return self.contains_point(np.zeros(3), tolerance=tolerance)
