import math
import numpy as np

from typing import List, NamedTuple


# HELPER TYPES

class AxisVizParams(NamedTuple):
    """The parameters a renderer needs to draw a screw axis."""

    # The half-length of the axis line, which extends along the local z axis of the viz frame.
    half_length: float

    # The 4x4 transform from the viz frame to world space.
    viz_transform: np.ndarray


class HelixVizParams(NamedTuple):
    """The parameters a renderer needs to draw the helix traced by the origin under a screw motion."""

    pitch: float
    radius: float
    magnitude: float
    angular_step: float

    # The 4x4 transform from the viz frame to world space.
    viz_transform: np.ndarray


# MAIN CLASS

class ScrewVizUtil:
    """Utility functions that compute the geometry needed to visualise screw motions."""

    # PUBLIC STATIC METHODS

    @staticmethod
    def make_axis_endpoints(half_length: float) -> np.ndarray:
        """
        Make the endpoints of an axis line of the specified half-length, in the viz frame.

        :param half_length: The half-length of the axis line.
        :return:            A 2x3 array containing the two endpoints.
        """
        return np.array([
            [0.0, 0.0, -half_length],
            [0.0, 0.0, half_length]
        ])

    @staticmethod
    def make_helix_points(pitch: float, radius: float, magnitude: float, delta: float) -> np.ndarray:
        """
        Sample points on a helix around the local z axis, in the viz frame.

        .. note::
            The helix starts at (radius, 0, 0) and is extended symmetrically in both directions until the
            accumulated angle reaches the magnitude. The points are ordered by increasing angle.

        :param pitch:           The helix pitch (translation per radian).
        :param radius:          The helix radius.
        :param magnitude:       The angle up to which to extend the helix in each direction.
        :param delta:           The angular step between consecutive samples.
        :return:                An nx3 array of helix points.
        :raises RuntimeError:   If the angular step is not positive.
        """
        if delta <= 0.0:
            raise RuntimeError("Cannot make helix points - angular step {} is not positive".format(delta))

        # : List[List[float]]
        negative_points = []
        # : List[List[float]]
        positive_points = [[radius, 0.0, 0.0]]

        angle = 0.0  # type: float
        while angle < magnitude:
            angle += delta
            positive_points.append([radius * math.cos(angle), radius * math.sin(angle), pitch * angle])
            negative_points.append([radius * math.cos(-angle), radius * math.sin(-angle), -pitch * angle])

        points = list(reversed(negative_points)) + positive_points  # type: List[List[float]]
        return np.array(points)
