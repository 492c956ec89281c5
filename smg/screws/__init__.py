from .axis import Axis
from .motion_controller import MotionContext, MotionController, MotionListener
from .motion_parameters import MotionParameters
from .representation_model import RepresentationModel
from .screw import Screw
from .screw_viz_util import AxisVizParams, HelixVizParams, ScrewVizUtil
from .transform_util import TransformUtil
from .twist import Twist
