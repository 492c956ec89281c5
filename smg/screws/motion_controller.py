import logging
import numpy as np

from typing import Optional

from .motion_parameters import MotionParameters
from .screw import Screw
from .screw_viz_util import AxisVizParams, HelixVizParams


logger = logging.getLogger(__name__)


class MotionListener:
    """
    Receives the pose updates and visualisation signals emitted by a motion controller.

    .. note::
        All of the hooks do nothing by default. A renderer (or input layer) overrides the ones it cares about,
        and owns any geometry it creates in response to them.
    """

    # PUBLIC METHODS

    def on_axis_viz_added(self, params: AxisVizParams) -> None:
        """
        Called when the screw axis visualisation should be (re)created.

        :param params:  The parameters needed to draw the axis.
        """
        pass

    def on_axis_viz_removed(self) -> None:
        """Called when any existing screw axis visualisation should be removed."""
        pass

    def on_helix_viz_added(self, params: HelixVizParams) -> None:
        """
        Called when the helix visualisation should be (re)created.

        :param params:  The parameters needed to draw the helix.
        """
        pass

    def on_helix_viz_removed(self) -> None:
        """Called when any existing helix visualisation should be removed."""
        pass

    def on_inputs_enabled(self, flag: bool) -> None:
        """
        Called when the inputs that edit the screw should be enabled or disabled.

        :param flag:    Whether the inputs should be enabled.
        """
        pass

    def on_pose_changed(self, pose: np.ndarray) -> None:
        """
        Called whenever the pose of the moving reference frame changes.

        :param pose:    The new pose of the reference frame, as a 4x4 rigid-body transform.
        """
        pass

    def on_view_reset(self) -> None:
        """Called when the view of the scene should be reset."""
        pass


class MotionContext:
    """The collaborators and settings with which a motion controller is constructed."""

    # CONSTRUCTOR

    def __init__(self, default_screw: Screw, *, parameters: Optional[MotionParameters] = None,
                 listener: Optional[MotionListener] = None):
        """
        Construct a motion context.

        :param default_screw:   The screw the controller starts with, and to which it returns on a reset.
        :param parameters:      The motion timing parameters (if None, the defaults will be used).
        :param listener:        The listener to notify of pose updates and visualisation signals (if None, the
                                signals will simply be discarded).
        """
        self.default_screw = default_screw                                                   # type: Screw
        self.parameters = parameters if parameters is not None else MotionParameters()       # type: MotionParameters
        self.listener = listener if listener is not None else MotionListener()               # type: MotionListener


class MotionController:
    """
    Moves a single reference frame along a screw motion over time.

    .. note::
        The controller is driven by an external clock: move(), reset() and update_screw() only record the request,
        and animate() (called once per tick) is where moves are triggered and progressed. Several commands issued
        between two ticks are therefore coalesced into a single transition.
    """

    # CONSTRUCTOR

    def __init__(self, context: MotionContext):
        """
        Construct a motion controller.

        :param context: The context containing the default screw, motion parameters and listener.
        """
        self.__default_screw = context.default_screw    # type: Screw
        self.__listener = context.listener              # type: MotionListener
        self.__parameters = context.parameters          # type: MotionParameters

        self.__axis_viz = None                          # type: Optional[AxisVizParams]
        self.__current_screw = self.__default_screw     # type: Screw
        self.__done = True                              # type: bool
        self.__helix_viz = None                         # type: Optional[HelixVizParams]
        self.__move_start_time = None                   # type: Optional[float]
        self.__pose = np.eye(4)                         # type: np.ndarray
        self.__requested = False                        # type: bool
        self.__speed = self.__parameters.compute_speed(self.__current_screw)  # type: float

        # The screw for which the visualisation was last generated. This lets us avoid regenerating it when a move
        # is requested again for the same screw.
        self.__previous_screw = self.__default_screw    # type: Screw

        self.__set_pose(self.__default_screw.get_transform())

    # PROPERTIES

    @property
    def axis_viz(self) -> Optional[AxisVizParams]:
        """
        Get the parameters of the current axis visualisation (if any).

        :return:    The parameters of the current axis visualisation, if there is one, or None otherwise.
        """
        return self.__axis_viz

    @property
    def current_screw(self) -> Screw:
        """
        Get the screw along which the next (or current) move will take place.

        :return:    The current screw.
        """
        return self.__current_screw

    @property
    def default_screw(self) -> Screw:
        """
        Get the default screw.

        :return:    The default screw.
        """
        return self.__default_screw

    @property
    def done(self) -> bool:
        """
        Get whether or not the controller is idle (i.e. no move is in progress).

        :return:    True, if no move is in progress, or False otherwise.
        """
        return self.__done

    @property
    def helix_viz(self) -> Optional[HelixVizParams]:
        """
        Get the parameters of the current helix visualisation (if any).

        :return:    The parameters of the current helix visualisation, if there is one, or None otherwise.
        """
        return self.__helix_viz

    @property
    def move_start_time(self) -> Optional[float]:
        """
        Get the time at which the current move started (if any).

        :return:    The time at which the current move started, or None if there has not been one since a reset.
        """
        return self.__move_start_time

    @property
    def parameters(self) -> MotionParameters:
        """
        Get the motion timing parameters.

        :return:    The motion timing parameters.
        """
        return self.__parameters

    @property
    def pose(self) -> np.ndarray:
        """
        Get the current pose of the moving reference frame.

        :return:    A copy of the current pose, as a 4x4 rigid-body transform.
        """
        return self.__pose.copy()

    @property
    def previous_screw(self) -> Screw:
        """
        Get the screw for which the visualisation was last generated.

        :return:    The screw for which the visualisation was last generated.
        """
        return self.__previous_screw

    @property
    def requested(self) -> bool:
        """
        Get whether or not a move has been requested but not yet picked up by animate().

        :return:    True, if a move is pending, or False otherwise.
        """
        return self.__requested

    @property
    def speed(self) -> float:
        """
        Get the rate at which the magnitude of the current screw advances during a move.

        :return:    The rate at which the magnitude advances (per unit time).
        """
        return self.__speed

    # PUBLIC METHODS

    def animate(self, time: float) -> None:
        """
        Update the controller for the current tick.

        .. note::
            This should be called once per tick of the external clock, with non-decreasing times.

        :param time:    The current time.
        """
        if self.__requested:
            self.__start_move(time)
        elif not self.__done:
            self.__continue_move(time)

    def move(self) -> None:
        """Request a move along the current screw, to be started on the next call to animate()."""
        self.__requested = True

    def reset(self) -> None:
        """Return to the default screw and pose, abandoning any move in progress and removing any visualisation."""
        self.__current_screw = self.__default_screw
        self.__previous_screw = self.__default_screw
        self.__requested = False
        self.__done = True
        self.__move_start_time = None
        self.__speed = self.__parameters.compute_speed(self.__default_screw)

        self.__set_pose(self.__default_screw.get_transform())
        self.__listener.on_view_reset()
        self.__remove_viz()

        logger.debug("Motion controller reset")

    def update_screw(self, screw: Screw) -> None:
        """
        Set the screw along which the next move will take place.

        .. note::
            The reference frame is moved to the start of the new screw motion straight away, without starting a move.

        :param screw:   The new screw.
        """
        self.__current_screw = screw
        self.__speed = self.__parameters.compute_speed(screw)
        self.__set_pose(screw.get_transform_at_magnitude(0.0))

    # PRIVATE METHODS

    def __continue_move(self, time: float) -> None:
        """
        Advance the move in progress to the specified time.

        :param time:    The current time.
        """
        magnitude = self.__speed * (time - self.__move_start_time)  # type: float
        if magnitude >= self.__current_screw.magnitude:
            self.__done = True
            self.__set_pose(self.__current_screw.get_transform())
            self.__listener.on_inputs_enabled(True)
            logger.debug("Move completed at time %s", time)
        else:
            self.__set_pose(self.__current_screw.get_transform_at_magnitude(magnitude))

    def __remove_viz(self) -> None:
        """Remove any existing axis and helix visualisations."""
        if self.__axis_viz is not None:
            self.__axis_viz = None
            self.__listener.on_axis_viz_removed()

        if self.__helix_viz is not None:
            self.__helix_viz = None
            self.__listener.on_helix_viz_removed()

    def __set_pose(self, pose: np.ndarray) -> None:
        """
        Set the pose of the moving reference frame, and notify the listener.

        :param pose:    The new pose, as a 4x4 rigid-body transform.
        """
        self.__pose = pose
        self.__listener.on_pose_changed(pose.copy())

    def __start_move(self, time: float) -> None:
        """
        Start the requested move.

        :param time:    The current time, which becomes the start time of the move.
        """
        self.__requested = False
        self.__done = False

        # The reference frame always starts a move from the default screw's initial pose.
        self.__set_pose(self.__default_screw.get_transform_at_magnitude(0.0))

        screw = self.__current_screw  # type: Screw
        is_new_screw = not self.__previous_screw.values_equal_to(screw)  # type: bool
        is_zero_screw = screw.magnitude == 0.0                           # type: bool

        if is_new_screw and not is_zero_screw:
            self.__remove_viz()

            self.__axis_viz = screw.make_axis_viz_params()
            self.__listener.on_axis_viz_added(self.__axis_viz)

            # The helix is only interesting if the reference frame (which starts at the origin) is off the axis.
            if not screw.axis.passes_through_origin():
                self.__helix_viz = screw.make_helix_viz_params(self.__parameters.helix_angular_step)
                self.__listener.on_helix_viz_added(self.__helix_viz)

            logger.debug("Regenerated visualisation for %s", screw)

        self.__previous_screw = screw
        self.__move_start_time = time

        logger.debug("Move started at time %s along %s", time, screw)
