"""Shared fixtures for the smg.screws tests."""

import math
import numpy as np
import pytest

from typing import Any, List, Tuple

from smg.screws import Axis, MotionContext, MotionController, MotionListener, Screw


class RecordingListener(MotionListener):
    """A motion listener that records every signal it receives, in order."""

    def __init__(self):
        self.events = []  # type: List[Tuple[str, Any]]

    def count(self, name: str) -> int:
        return sum(1 for event_name, _ in self.events if event_name == name)

    def names(self) -> List[str]:
        return [event_name for event_name, _ in self.events]

    def on_axis_viz_added(self, params) -> None:
        self.events.append(("axis_viz_added", params))

    def on_axis_viz_removed(self) -> None:
        self.events.append(("axis_viz_removed", None))

    def on_helix_viz_added(self, params) -> None:
        self.events.append(("helix_viz_added", params))

    def on_helix_viz_removed(self) -> None:
        self.events.append(("helix_viz_removed", None))

    def on_inputs_enabled(self, flag: bool) -> None:
        self.events.append(("inputs_enabled", flag))

    def on_pose_changed(self, pose: np.ndarray) -> None:
        self.events.append(("pose_changed", pose))

    def on_view_reset(self) -> None:
        self.events.append(("view_reset", None))


@pytest.fixture
def default_screw() -> Screw:
    return Screw(Axis([0, 0, 0], [0, 0, 1]), math.inf, 0.0)


@pytest.fixture
def translation_screw() -> Screw:
    # A simple translation along z.
    return Screw(Axis([0, 0, 0], [0, 0, 1]), math.inf, 1.0)


@pytest.fixture
def rotation_screw() -> Screw:
    # A simple rotation about z.
    return Screw(Axis([0, 0, 0], [0, 0, 1]), 0.0, 1.0)


@pytest.fixture
def coil_screw() -> Screw:
    # A rotation plus translation about an axis that is offset from the origin.
    return Screw(Axis([0.5, 0.5, 0], [0, 0, 1]), 0.5, 1.0)


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def controller(default_screw, listener) -> MotionController:
    return MotionController(MotionContext(default_screw, listener=listener))
