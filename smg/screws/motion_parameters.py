import json
import logging
import math
import os

from typing import Any, Dict, Optional

from .screw import Screw


logger = logging.getLogger(__name__)


class MotionParameters:
    """The timing policy used when animating a reference frame along a screw motion."""

    # CONSTANTS

    # : Dict[str, float]
    DEFAULTS = {
        # The angular step used when sampling the helix traced out by the origin.
        "helix_angular_step": 0.1,
        # The longest a single move may take (in seconds).
        "max_time": 6.0,
        # The shortest a single move may take (in seconds).
        "min_time": 1.0,
        # The nominal speed (in radians per second) of a pure rotation.
        "nominal_angular_speed": math.radians(30.0),
        # The nominal speed (in units per second) of any other motion, measured along the path of the origin.
        "nominal_linear_speed": 1.0
    }

    # CONSTRUCTOR

    def __init__(self, **kwargs):
        """
        Construct a set of motion parameters, starting from the defaults.

        :param kwargs:          Any parameter values that should override the defaults.
        :raises RuntimeError:   If an unknown parameter is specified.
        """
        self.__data = dict(MotionParameters.DEFAULTS)  # type: Dict[str, float]
        for key, value in kwargs.items():
            self.__set_value(key, value)
        self.__check_time_window()

    # SPECIAL METHODS

    def __repr__(self) -> str:
        """
        Get the formal string representation of the motion parameters.

        :return:    The formal string representation of the motion parameters.
        """
        return "MotionParameters(**{})".format(repr(self.__data))

    # PROPERTIES

    @property
    def helix_angular_step(self) -> float:
        """
        Get the angular step used when sampling the helix traced out by the origin.

        :return:    The angular step used when sampling the helix traced out by the origin.
        """
        return self.__data["helix_angular_step"]

    @property
    def max_time(self) -> float:
        """
        Get the longest a single move may take.

        :return:    The longest a single move may take (in seconds).
        """
        return self.__data["max_time"]

    @property
    def min_time(self) -> float:
        """
        Get the shortest a single move may take.

        :return:    The shortest a single move may take (in seconds).
        """
        return self.__data["min_time"]

    @property
    def nominal_angular_speed(self) -> float:
        """
        Get the nominal speed of a pure rotation.

        :return:    The nominal speed of a pure rotation (in radians per second).
        """
        return self.__data["nominal_angular_speed"]

    @property
    def nominal_linear_speed(self) -> float:
        """
        Get the nominal speed of any motion that isn't a pure rotation.

        :return:    The nominal speed of the origin along its path (in units per second).
        """
        return self.__data["nominal_linear_speed"]

    # PUBLIC STATIC METHODS

    # noinspection PyUnresolvedReferences
    @staticmethod
    def try_load(filename: str) -> Optional["MotionParameters"]:
        """
        Try to load a set of motion parameters from a JSON file.

        .. note::
            Any parameters not present in the file keep their default values.

        :param filename:    The name of the file.
        :return:            The loaded motion parameters, if loading was successful, or None otherwise.
        """
        return MotionParameters().__try_load(filename)

    # PUBLIC METHODS

    def compute_speed(self, screw: Screw) -> float:
        """
        Compute the rate at which the magnitude of the specified screw should advance during a move.

        .. note::
            The time a move takes is its (angular or linear) distance divided by the corresponding nominal speed,
            clamped to [min_time, max_time]. The linear distance is that travelled by the origin, which is where
            the moving reference frame starts.

        :param screw:   The screw.
        :return:        The rate at which the screw magnitude should advance (per second).
        """
        if screw.is_pure_rotation:
            distance = screw.magnitude                                      # type: float
            nominal_speed = self.nominal_angular_speed                      # type: float
        else:
            distance = screw.get_distance_travelled([0.0, 0.0, 0.0], screw.magnitude)
            nominal_speed = self.nominal_linear_speed

        time = min(max(self.min_time, distance / nominal_speed), self.max_time)  # type: float
        return screw.magnitude / time

    def get(self, key: str) -> float:
        """
        Get the value of the specified parameter.

        :param key:             The name of the parameter.
        :return:                The value of the parameter.
        :raises RuntimeError:   If the parameter is unknown.
        """
        if key not in MotionParameters.DEFAULTS:
            raise RuntimeError("Cannot get unknown motion parameter '{}'".format(key))

        return self.__data[key]

    def save(self, filename: str) -> None:
        """
        Save the motion parameters to a JSON file.

        :param filename:    The name of the file.
        """
        with open(filename, "w") as f:
            json.dump(self.__data, f, indent=4)

    def set(self, key: str, value: float) -> None:
        """
        Set the value of the specified parameter.

        :param key:             The name of the parameter.
        :param value:           The new value of the parameter.
        :raises RuntimeError:   If the parameter is unknown or invalid, or the time window would become invalid.
        """
        old_value = self.__data.get(key)  # type: Optional[float]
        self.__set_value(key, value)
        try:
            self.__check_time_window()
        except RuntimeError:
            self.__data[key] = old_value
            raise

    # PRIVATE METHODS

    def __check_time_window(self) -> None:
        """Check that the minimum move time does not exceed the maximum move time, and raise if it does."""
        if self.__data["min_time"] > self.__data["max_time"]:
            raise RuntimeError("Minimum move time {} cannot exceed maximum move time {}".format(
                self.__data["min_time"], self.__data["max_time"]
            ))

    def __set_value(self, key: str, value: float) -> None:
        """
        Set the value of the specified parameter, without checking the time window.

        :param key:             The name of the parameter.
        :param value:           The new value of the parameter.
        :raises RuntimeError:   If the parameter is unknown, or its value is not positive.
        """
        if key not in MotionParameters.DEFAULTS:
            raise RuntimeError("Cannot set unknown motion parameter '{}'".format(key))

        if value <= 0:
            raise RuntimeError("Motion parameter '{}' must be positive, received: {}".format(key, value))

        self.__data[key] = float(value)

    # noinspection PyUnresolvedReferences
    def __try_load(self, filename: str) -> Optional["MotionParameters"]:
        """
        Try to load a set of motion parameters from a JSON file.

        :param filename:    The name of the file.
        :return:            The current object, if loading was successful, or None otherwise.
        """
        if os.path.exists(filename):
            with open(filename, "r") as f:
                data = json.load(f)  # type: Dict[str, Any]

            for key, value in data.items():
                self.__set_value(key, value)
            self.__check_time_window()

            logger.debug("Loaded motion parameters from '%s': %s", filename, self.__data)
            return self
        else:
            return None
