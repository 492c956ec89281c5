import math
import numpy as np

from smg.screws import Axis, MotionContext, MotionController, MotionListener, RepresentationModel, Screw
from smg.screws.screw_viz_util import AxisVizParams, HelixVizParams


class PrintingListener(MotionListener):
    """A listener that just prints what the motion controller asks for."""

    def __init__(self):
        self.model = None

    def on_axis_viz_added(self, params: AxisVizParams) -> None:
        print("Add axis: half-length {:.3f}".format(params.half_length))

    def on_helix_viz_added(self, params: HelixVizParams) -> None:
        print("Add helix: pitch {:.3f}, radius {:.3f}".format(params.pitch, params.radius))

    def on_inputs_enabled(self, flag: bool) -> None:
        if self.model is not None:
            self.model.enable_all_fields(flag)

    def on_pose_changed(self, pose: np.ndarray) -> None:
        print("Pose: {}".format(np.round(pose[0:3, 3], 3)))


def main():
    np.set_printoptions(suppress=True)

    default_screw = Screw(Axis([0, 0, 0], [0, 0, 1]), math.inf, 0)
    listener = PrintingListener()
    controller = MotionController(MotionContext(default_screw, listener=listener))

    model = RepresentationModel(
        default_screw, input_callback=controller.update_screw, move_callback=controller.move,
        reset_callback=controller.reset
    )
    model.attach()
    listener.model = model

    # Edit the screw representation to get a coil around an axis that is offset from the origin.
    model.edit("screw_axis_point_x", 0.5)
    model.edit("screw_axis_point_y", 0.5)
    model.edit("screw_pitch", 0.5)
    model.edit("screw_magnitude", 1.0)
    print("Transform position: {}".format([model.get_field("transform_position_" + dim) for dim in "xyz"]))

    model.move()
    t = 0.0
    controller.animate(t)
    while not controller.done:
        t += 0.25
        controller.animate(t)

    model.reset()


if __name__ == "__main__":
    main()
