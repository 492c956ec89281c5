import numpy as np

from .transform_util import TransformUtil


class Twist:
    """
    A twist, i.e. an element of se(3), the Lie algebra of rigid-body motions.

    See Murray, Li and Sastry, "A Mathematical Introduction to Robotic Manipulation", Chapter 2.
    """

    # CONSTRUCTOR

    def __init__(self, linear, angular):
        """
        Construct a twist.

        :param linear:  The linear component of the twist.
        :param angular: The angular component of the twist.
        """
        self.__linear = np.array(linear, dtype=float)    # type: np.ndarray
        self.__angular = np.array(angular, dtype=float)  # type: np.ndarray
        self.__linear.flags.writeable = False
        self.__angular.flags.writeable = False

    # SPECIAL METHODS

    def __repr__(self) -> str:
        """
        Get the formal string representation of the twist.

        :return:    The formal string representation of the twist.
        """
        return "Twist({}, {})".format(repr(self.__linear), repr(self.__angular))

    def __str__(self) -> str:
        """
        Get the informal string representation of the twist.

        :return:    The informal string representation of the twist.
        """
        return "Twist({}, {})".format(self.__linear, self.__angular)

    # PROPERTIES

    @property
    def angular(self) -> np.ndarray:
        """
        Get the angular component of the twist.

        :return:    The angular component of the twist.
        """
        return self.__angular

    @property
    def coordinates(self) -> np.ndarray:
        """
        Get the twist coordinates, i.e. the linear component followed by the angular one.

        :return:    The 6D twist coordinates.
        """
        return np.concatenate([self.__linear, self.__angular])

    @property
    def is_pure_rotation(self) -> bool:
        """
        Determine whether or not the twist is a pure rotation (i.e. has a zero linear component).

        :return:    True, if the twist is a pure rotation, or False otherwise.
        """
        return bool(np.linalg.norm(self.__linear) <= 1e-12)

    @property
    def is_pure_translation(self) -> bool:
        """
        Determine whether or not the twist is a pure translation (i.e. has a zero angular component).

        :return:    True, if the twist is a pure translation, or False otherwise.
        """
        return bool(np.linalg.norm(self.__angular) <= 1e-12)

    @property
    def linear(self) -> np.ndarray:
        """
        Get the linear component of the twist.

        :return:    The linear component of the twist.
        """
        return self.__linear

    # PUBLIC STATIC METHODS

    @staticmethod
    def log(transform: np.ndarray) -> "Twist":
        """
        Compute the twist whose exponential is the specified rigid-body transform (the logarithm map).

        .. note::
            See Murray, Li and Sastry, Proposition 2.9. The magnitude of the motion is embedded in the twist.

        :param transform:   The 4x4 rigid-body transform.
        :return:            The twist.
        """
        t = TransformUtil.translation_from_transform(transform)  # type: np.ndarray

        if TransformUtil.has_identity_rotation(transform):
            return Twist(t, np.zeros(3))

        rot = TransformUtil.rotation_from_transform(transform)      # type: np.ndarray
        axis_angle = TransformUtil.axis_angle_from_rotation(rot)    # type: np.ndarray
        theta = np.linalg.norm(axis_angle)                          # type: float
        w = axis_angle / theta                                      # type: np.ndarray

        if np.linalg.norm(t) <= 1e-12:
            return Twist(np.zeros(3), axis_angle)

        # Solve (I - R)[w]x v + w w^T theta v = t for the velocity v.
        a = (np.eye(3) - rot) @ TransformUtil.vector_hat(w) + np.outer(w, w) * theta  # type: np.ndarray
        v = np.linalg.solve(a, t)  # type: np.ndarray

        return Twist(v * theta, axis_angle)

    # PUBLIC METHODS

    def exp(self) -> np.ndarray:
        """
        Compute the rigid-body transform generated by the twist (the exponential map).

        .. note::
            See Murray, Li and Sastry, Eq. 2.36.

        :return:    The 4x4 rigid-body transform.
        """
        if self.is_pure_translation:
            return TransformUtil.transform_from_rotation_translation(np.eye(3), self.__linear)

        theta = self.norm()    # type: float
        unit = self.unit()     # type: Twist
        rot = TransformUtil.rotation_from_axis_angle(unit.angular, theta)  # type: np.ndarray

        if self.is_pure_rotation:
            return TransformUtil.transform_from_rotation_translation(rot, np.zeros(3))

        # The translation splits into a part due to the axis being offset from the origin and a part due to the pitch.
        offset_translation = (np.eye(3) - rot) @ np.cross(unit.angular, unit.linear)   # type: np.ndarray
        pitch_translation = np.outer(unit.angular, unit.angular) @ unit.linear * theta  # type: np.ndarray

        return TransformUtil.transform_from_rotation_translation(rot, offset_translation + pitch_translation)

    def hat(self) -> np.ndarray:
        """
        Get the 4x4 matrix form of the twist.

        :return:    The 4x4 matrix form of the twist.
        """
        result = np.zeros((4, 4))  # type: np.ndarray
        result[0:3, 0:3] = TransformUtil.vector_hat(self.__angular)
        result[0:3, 3] = self.__linear
        return result

    def multiply(self, factor: float) -> "Twist":
        """
        Scale the twist by the specified factor.

        :param factor:  The scaling factor.
        :return:        A scaled copy of the twist.
        """
        return Twist(self.__linear * factor, self.__angular * factor)

    def norm(self) -> float:
        """
        Get the norm of the twist, i.e. the magnitude of the motion it represents.

        .. note::
            This is the norm of the angular component, unless the twist is a pure translation, in which case
            it is the norm of the linear component.

        :return:    The norm of the twist.
        """
        if self.is_pure_translation:
            return float(np.linalg.norm(self.__linear))

        return float(np.linalg.norm(self.__angular))

    def unit(self) -> "Twist":
        """
        Get the unit twist in the same direction as this one.

        :return:    The unit twist.
        """
        return self.multiply(1.0 / self.norm())
