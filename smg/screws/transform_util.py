import math
import numpy as np
import vg

from scipy.spatial.transform import Rotation
from typing import Tuple


class TransformUtil:
    """Utility functions related to rotations and rigid-body transforms."""

    # PUBLIC STATIC METHODS

    @staticmethod
    def axis_angle_from_rotation(rot: np.ndarray, *, tolerance: float = 1e-9) -> np.ndarray:
        """
        Convert a rotation matrix to axis-angle form (the logarithm map of SO(3)).

        .. note::
            The result is a 3D vector whose direction is the rotation axis and whose norm is the rotation angle.
            See Murray, Li and Sastry, "A Mathematical Introduction to Robotic Manipulation", Proposition 2.5.
        .. note::
            The usual formula divides by sin(theta), which is ill-conditioned as theta approaches pi. For obtuse
            angles, the axis is instead recovered from the symmetric part of the rotation matrix.

        :param rot:         The rotation matrix.
        :param tolerance:   The tolerance used to decide whether the rotation is the identity.
        :return:            The axis-angle vector.
        """
        rot = np.array(rot, dtype=float)  # type: np.ndarray
        if np.allclose(rot, np.eye(3), rtol=0.0, atol=tolerance):
            return np.zeros(3)

        cos_angle = float(np.clip((np.trace(rot) - 1.0) * 0.5, -1.0, 1.0))  # type: float
        skew = np.array([
            rot[2, 1] - rot[1, 2],
            rot[0, 2] - rot[2, 0],
            rot[1, 0] - rot[0, 1]
        ])  # type: np.ndarray

        # The skew part of R is 2 sin(theta) [w]x. Taking the angle from both sine and cosine via atan2 keeps it
        # accurate at both ends of [0, pi], where acos alone loses precision.
        sin_angle = float(np.linalg.norm(skew)) * 0.5    # type: float
        angle = math.atan2(sin_angle, cos_angle)          # type: float

        if cos_angle > 0.0:
            # angle / sin(angle) tends to 1 as the angle tends to 0.
            return skew * (0.5 if sin_angle == 0.0 else angle / (2.0 * sin_angle))

        # For obtuse angles, sin(theta) is small near pi, so dividing the skew part by it is ill-conditioned.
        # Instead, note that the symmetric part of R is cos(theta) I + (1 - cos(theta)) w w^T, and the column
        # of w w^T with the largest diagonal entry gives the axis up to sign.
        wwt = ((rot + rot.T) * 0.5 - cos_angle * np.eye(3)) / (1.0 - cos_angle)  # type: np.ndarray
        i = int(np.argmax(np.diag(wwt)))  # type: int
        axis = wwt[:, i] / math.sqrt(max(wwt[i, i], 1e-12))  # type: np.ndarray
        if np.dot(axis, skew) < 0.0:
            axis = -axis

        return vg.normalize(axis) * angle

    @staticmethod
    def axis_angle_to_rotate_vector(v1, v2) -> np.ndarray:
        """
        Compute the axis-angle vector of the rotation that takes the direction of one vector onto that of another.

        :param v1:  The first vector.
        :param v2:  The second vector.
        :return:    The axis-angle vector (zero if the two vectors are parallel).
        """
        u1 = TransformUtil.normalise_vector(v1)    # type: np.ndarray
        u2 = TransformUtil.normalise_vector(v2)    # type: np.ndarray
        cross = np.cross(u1, u2)                   # type: np.ndarray
        cross_norm = np.linalg.norm(cross)         # type: float
        if cross_norm == 0.0:
            return np.zeros(3)

        angle = math.atan2(cross_norm, np.dot(u1, u2))  # type: float
        return cross / cross_norm * angle

    @staticmethod
    def close(lhs: np.ndarray, rhs: np.ndarray, tolerance: float = 1e-9) -> bool:
        """
        Check whether two matrices (or vectors) are approximately equal, element-wise, up to a tolerance.

        :param lhs:         The first matrix.
        :param rhs:         The second matrix.
        :param tolerance:   The tolerance value.
        :return:            True, if the two matrices are approximately equal, or False otherwise.
        """
        return bool(np.allclose(lhs, rhs, rtol=0.0, atol=tolerance))

    @staticmethod
    def has_identity_rotation(transform: np.ndarray, *, tolerance: float = 1e-9) -> bool:
        """
        Determine whether or not the rotation part of a rigid-body transform is the identity.

        :param transform:   The 4x4 rigid-body transform.
        :param tolerance:   The tolerance value.
        :return:            True, if the rotation part of the transform is the identity, or False otherwise.
        """
        return TransformUtil.close(TransformUtil.rotation_from_transform(transform), np.eye(3), tolerance)

    @staticmethod
    def normalise_vector(v) -> np.ndarray:
        """
        Normalise a vector, leaving it unchanged if it is the zero vector.

        :param v:   The vector.
        :return:    The normalised vector.
        """
        v = np.array(v, dtype=float)  # type: np.ndarray
        if np.linalg.norm(v) == 0.0:
            return v
        return vg.normalize(v)

    @staticmethod
    def position_quaternion_from_transform(transform: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Decompose a rigid-body transform into a position and a (canonical) quaternion.

        :param transform:   The 4x4 rigid-body transform.
        :return:            The position and the quaternion (in x, y, z, w order), as a tuple.
        """
        return \
            TransformUtil.translation_from_transform(transform), \
            TransformUtil.quaternion_from_rotation(TransformUtil.rotation_from_transform(transform))

    @staticmethod
    def quaternion_from_rotation(rot: np.ndarray) -> np.ndarray:
        """
        Convert a rotation matrix to a unit quaternion.

        .. note::
            The quaternion is put into canonical form, i.e. with a non-negative w component.

        :param rot: The rotation matrix.
        :return:    The quaternion, in x, y, z, w order.
        """
        q = Rotation.from_matrix(rot).as_quat()  # type: np.ndarray
        if q[3] < 0.0:
            q = -q
        return q

    @staticmethod
    def rotation_from_axis_angle(axis, angle: float) -> np.ndarray:
        """
        Make a rotation matrix from an axis and an angle, using Rodrigues' formula.

        .. note::
            See Murray, Li and Sastry, "A Mathematical Introduction to Robotic Manipulation", Eq. 2.14.

        :param axis:            The rotation axis (will be normalised).
        :param angle:           The rotation angle (in radians).
        :return:                The 3x3 rotation matrix.
        :raises RuntimeError:   If the rotation axis has zero norm.
        """
        axis = np.array(axis, dtype=float)  # type: np.ndarray
        if np.linalg.norm(axis) == 0.0:
            raise RuntimeError("Cannot make rotation matrix - rotation axis {} has zero norm".format(axis))

        if angle == 0.0:
            return np.eye(3)

        axis_hat = TransformUtil.vector_hat(vg.normalize(axis))  # type: np.ndarray
        return np.eye(3) + math.sin(angle) * axis_hat + (1.0 - math.cos(angle)) * (axis_hat @ axis_hat)

    @staticmethod
    def rotation_from_quaternion(q) -> np.ndarray:
        """
        Convert a quaternion to a rotation matrix.

        :param q:   The quaternion, in x, y, z, w order (it will be normalised).
        :return:    The 3x3 rotation matrix.
        """
        return Rotation.from_quat(q).as_matrix()

    @staticmethod
    def rotation_from_transform(transform: np.ndarray) -> np.ndarray:
        """
        Get the rotation part of a rigid-body transform.

        :param transform:   The 4x4 rigid-body transform.
        :return:            A copy of its 3x3 rotation part.
        """
        return np.array(transform[0:3, 0:3], dtype=float)

    @staticmethod
    def transform_from_position_quaternion(position, q) -> np.ndarray:
        """
        Make a rigid-body transform from a position and a quaternion.

        :param position:    The position.
        :param q:           The quaternion, in x, y, z, w order.
        :return:            The 4x4 rigid-body transform.
        """
        return TransformUtil.transform_from_rotation_translation(TransformUtil.rotation_from_quaternion(q), position)

    @staticmethod
    def transform_from_rotation_translation(rot: np.ndarray, t) -> np.ndarray:
        """
        Make a rigid-body transform from a rotation matrix and a translation.

        :param rot: The 3x3 rotation matrix.
        :param t:   The translation.
        :return:    The 4x4 rigid-body transform.
        """
        transform = np.eye(4)  # type: np.ndarray
        transform[0:3, 0:3] = rot
        transform[0:3, 3] = t
        return transform

    @staticmethod
    def translation_from_transform(transform: np.ndarray) -> np.ndarray:
        """
        Get the translation part of a rigid-body transform.

        :param transform:   The 4x4 rigid-body transform.
        :return:            A copy of its translation part.
        """
        return np.array(transform[0:3, 3], dtype=float)

    @staticmethod
    def vector_hat(v) -> np.ndarray:
        """
        Make the skew-symmetric matrix [v]x such that [v]x @ u = v x u for any u.

        :param v:   The vector.
        :return:    The 3x3 skew-symmetric matrix.
        """
        return np.array([
            [0.0, -v[2], v[1]],
            [v[2], 0.0, -v[0]],
            [-v[1], v[0], 0.0]
        ])
