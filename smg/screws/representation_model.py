import logging
import math
import numpy as np

from typing import Any, Callable, Dict, List, Optional

from .axis import Axis
from .screw import Screw
from .transform_util import TransformUtil
from .twist import Twist


logger = logging.getLogger(__name__)


class RepresentationModel:
    """
    The state behind the input fields for the transform, twist and screw representations of a rigid-body motion.

    .. note::
        The three representations are kept consistent with each other: editing a field of one representation
        converts it to a screw, which is then used to update the fields of the other two. Binding the fields to
        actual widgets is left to the caller.
    """

    # CONSTANTS

    # The names of the representations, in display order.
    REPRESENTATIONS = ["transform", "twist", "screw"]  # type: List[str]

    # The components of each representation, as trees whose leaves are marked with True.
    # : Dict[str, Any]
    COMPONENT_TREE = {
        "transform": {
            "position": {"x": True, "y": True, "z": True},
            "quaternion": {"x": True, "y": True, "z": True, "w": True}
        },
        "twist": {
            "linear": {"x": True, "y": True, "z": True},
            "angular": {"x": True, "y": True, "z": True}
        },
        "screw": {
            "axis": {
                "point": {"x": True, "y": True, "z": True},
                "direction": {"x": True, "y": True, "z": True}
            },
            "pitch": True,
            "magnitude": True
        }
    }

    DIMS = ["x", "y", "z"]  # type: List[str]

    # CONSTRUCTOR

    def __init__(self, default_screw: Screw, *, input_callback: Optional[Callable[[Screw], None]] = None,
                 move_callback: Optional[Callable[[], None]] = None,
                 reset_callback: Optional[Callable[[], None]] = None,
                 reset_view_callback: Optional[Callable[[], None]] = None):
        """
        Construct a representation model.

        :param default_screw:       The screw used to initialise the fields, and to which they return on a reset.
        :param input_callback:      An optional function to call with the new screw whenever a field is edited.
        :param move_callback:       An optional function to call when a move is requested.
        :param reset_callback:      An optional function to call when a reset is requested.
        :param reset_view_callback: An optional function to call when a view reset is requested.
        """
        self.__default_screw = default_screw                # type: Screw
        self.__input_callback = input_callback              # type: Optional[Callable[[Screw], None]]
        self.__move_callback = move_callback                # type: Optional[Callable[[], None]]
        self.__reset_callback = reset_callback              # type: Optional[Callable[[], None]]
        self.__reset_view_callback = reset_view_callback    # type: Optional[Callable[[], None]]

        # Map each field name to the representation it belongs to.
        self.__field_representations = {}  # type: Dict[str, str]
        for path in RepresentationModel.get_leaf_node_paths(RepresentationModel.COMPONENT_TREE):
            self.__field_representations[RepresentationModel.join_tokens(*path)] = path[0]

        self.__fields = {}  # type: Dict[str, float]
        self.set_all_representations_from_screw(default_screw)

        # The enabled flags of the fields, which only exist once the model has been attached to some inputs.
        self.__enabled = None  # type: Optional[Dict[str, bool]]

    # PROPERTIES

    @property
    def attached(self) -> bool:
        """
        Get whether or not the model has been attached to some inputs.

        :return:    True, if the model has been attached to some inputs, or False otherwise.
        """
        return self.__enabled is not None

    @property
    def field_names(self) -> List[str]:
        """
        Get the names of all of the fields, in display order.

        :return:    The names of all of the fields.
        """
        return list(self.__field_representations.keys())

    # PUBLIC STATIC METHODS

    @staticmethod
    def clean_quaternion(qx: float, qy: float, qz: float, qw: float) -> np.ndarray:
        """
        Turn raw user input into a valid unit quaternion.

        .. note::
            The w component is kept as is (it is assumed to be in [-1, 1]), and the vector part is rescaled so that
            the quaternion has unit norm. If |w| >= 1, or the vector part is zero, the identity is returned.

        :param qx:  The x component of the input.
        :param qy:  The y component of the input.
        :param qz:  The z component of the input.
        :param qw:  The w component of the input.
        :return:    The cleaned quaternion, in x, y, z, w order.
        """
        input_vector_norm = math.sqrt(qx ** 2 + qy ** 2 + qz ** 2)  # type: float

        if abs(qw) >= 1.0 or math.isclose(abs(qw), 1.0) or input_vector_norm == 0.0:
            return np.array([0.0, 0.0, 0.0, 1.0])

        vector_norm = math.sqrt(1.0 - qw ** 2)  # type: float
        if math.isclose(input_vector_norm, vector_norm):
            return np.array([qx, qy, qz, qw], dtype=float)

        scale = vector_norm / input_vector_norm  # type: float
        return np.array([qx * scale, qy * scale, qz * scale, qw])

    @staticmethod
    def get_leaf_node_paths(tree: Dict[str, Any]) -> List[List[str]]:
        """
        Get the paths to all of the leaves of a component tree, in depth-first order.

        :param tree:    The component tree (a nested dictionary whose leaves are marked with True).
        :return:        The list of paths, each of which is a list of keys.
        """
        # : List[List[str]]
        paths = []

        def visit(subtree: Dict[str, Any], key: str, path: List[str]) -> None:
            path = path + [key]
            if subtree[key] is True:
                paths.append(path)
            else:
                for subkey in subtree[key]:
                    visit(subtree[key], subkey, path)

        for k in tree:
            visit(tree, k, [])

        return paths

    @staticmethod
    def join_tokens(*tokens: str) -> str:
        """
        Join a list of path tokens to make a field name.

        :param tokens:  The tokens.
        :return:        The field name.
        """
        return "_".join(tokens)

    # PUBLIC METHODS

    def attach(self) -> None:
        """
        Attach the model to some inputs, so that the fields can be enabled and disabled.

        :raises RuntimeError:   If the model has already been attached.
        """
        if self.__enabled is not None:
            raise RuntimeError("Cannot attach representation model more than once")

        self.__enabled = {name: True for name in self.__field_representations}

    def edit(self, field_name: str, value: float) -> Screw:
        """
        Edit a field, and update the other representations to match.

        :param field_name:      The name of the field.
        :param value:           The new value of the field.
        :return:                The screw corresponding to the edited representation.
        :raises RuntimeError:   If the field is unknown or currently disabled, or the edited representation does not
                                describe a valid screw (in which case the field keeps its old value).
        """
        if not self.is_field_enabled(field_name):
            raise RuntimeError("Cannot edit disabled field '{}'".format(field_name))

        old_value = self.__fields[field_name]  # type: float
        self.set_field(field_name, value)

        representation = self.__field_representations[field_name]  # type: str
        try:
            screw = self.representation_to_screw(representation)   # type: Screw
        except RuntimeError:
            self.__fields[field_name] = old_value
            raise
        for other in RepresentationModel.REPRESENTATIONS:
            if other != representation:
                self.set_representation_from_screw(other, screw)

        logger.debug("Edited '%s', new screw: %s", field_name, screw)

        if self.__input_callback is not None:
            self.__input_callback(screw)

        return screw

    def enable_all_fields(self, flag: bool) -> None:
        """
        Enable or disable all of the fields.

        .. note::
            Before the model has been attached to some inputs, this does nothing.

        :param flag:    Whether to enable the fields.
        """
        if self.__enabled is None:
            return

        for name in self.__enabled:
            self.__enabled[name] = flag

    def get_field(self, field_name: str) -> float:
        """
        Get the value of a field.

        :param field_name:      The name of the field.
        :return:                The value of the field.
        :raises RuntimeError:   If the field is unknown.
        """
        self.__check_field(field_name)
        return self.__fields[field_name]

    def is_field_enabled(self, field_name: str) -> bool:
        """
        Get whether or not a field is enabled.

        :param field_name:      The name of the field.
        :return:                True, if the field is enabled (or the model is not attached), or False otherwise.
        :raises RuntimeError:   If the field is unknown.
        """
        self.__check_field(field_name)
        return self.__enabled is None or self.__enabled[field_name]

    def move(self) -> None:
        """Disable the fields and request a move."""
        self.enable_all_fields(False)

        if self.__move_callback is not None:
            self.__move_callback()

    def representation_to_screw(self, representation: str) -> Screw:
        """
        Make a screw from the fields of the specified representation.

        :param representation:  The name of the representation.
        :return:                The screw.
        :raises RuntimeError:   If the representation is unknown.
        """
        if representation == "transform":
            return self.__transform_to_screw()
        elif representation == "twist":
            return self.__twist_to_screw()
        elif representation == "screw":
            return self.__screw_to_screw()
        else:
            raise RuntimeError("Unknown representation: {}".format(representation))

    def reset(self) -> None:
        """Re-enable the fields, reset them to the default screw and request a reset."""
        self.enable_all_fields(True)
        self.set_all_representations_from_screw(self.__default_screw)

        if self.__reset_callback is not None:
            self.__reset_callback()

    def reset_view(self) -> None:
        """Request a view reset."""
        if self.__reset_view_callback is not None:
            self.__reset_view_callback()

    def set_all_representations_from_screw(self, screw: Screw, magnitude: Optional[float] = None) -> None:
        """
        Set the fields of all of the representations from a screw.

        :param screw:       The screw.
        :param magnitude:   The magnitude at which to evaluate the screw (defaults to the screw magnitude).
        """
        for representation in RepresentationModel.REPRESENTATIONS:
            self.set_representation_from_screw(representation, screw, magnitude)

    def set_field(self, field_name: str, value: float) -> None:
        """
        Set the value of a field, without updating the other representations.

        .. note::
            The quaternion fields are clamped to [-1, 1].

        :param field_name:      The name of the field.
        :param value:           The new value of the field.
        :raises RuntimeError:   If the field is unknown.
        """
        self.__check_field(field_name)

        value = float(value)
        if field_name.startswith("transform_quaternion_"):
            value = min(max(value, -1.0), 1.0)

        self.__fields[field_name] = value

    def set_representation_from_screw(self, representation: str, screw: Screw,
                                      magnitude: Optional[float] = None) -> None:
        """
        Set the fields of the specified representation from a screw.

        :param representation:  The name of the representation.
        :param screw:           The screw.
        :param magnitude:       The magnitude at which to evaluate the screw (defaults to the screw magnitude).
        :raises RuntimeError:   If the representation is unknown.
        """
        if magnitude is None:
            magnitude = screw.magnitude

        if representation == "transform":
            position, q = TransformUtil.position_quaternion_from_transform(screw.get_transform_at_magnitude(magnitude))
            self.__set_vector("transform_position", position)
            self.__set_vector("transform_quaternion", q[0:3])
            self.__fields["transform_quaternion_w"] = float(q[3])
        elif representation == "twist":
            twist = screw.get_twist_at_magnitude(magnitude)  # type: Twist
            self.__set_vector("twist_linear", twist.linear)
            self.__set_vector("twist_angular", twist.angular)
        elif representation == "screw":
            self.__set_vector("screw_axis_point", screw.axis.point)
            self.__set_vector("screw_axis_direction", screw.axis.direction)
            self.__fields["screw_pitch"] = screw.pitch
            self.__fields["screw_magnitude"] = float(magnitude)
        else:
            raise RuntimeError("Unknown representation: {}".format(representation))

    # PRIVATE METHODS

    def __check_field(self, field_name: str) -> None:
        """
        Check that the specified field exists, and raise an exception if it doesn't.

        :param field_name:      The name of the field.
        :raises RuntimeError:   If the field is unknown.
        """
        if field_name not in self.__field_representations:
            raise RuntimeError("Unknown field: {}".format(field_name))

    def __get_vector(self, prefix: str) -> np.ndarray:
        """
        Get the x, y and z fields with the specified prefix as a 3D vector.

        :param prefix:  The field name prefix, e.g. "twist_linear".
        :return:        The 3D vector.
        """
        return np.array([
            self.__fields[RepresentationModel.join_tokens(prefix, dim)] for dim in RepresentationModel.DIMS
        ])

    def __screw_to_screw(self) -> Screw:
        """
        Make a screw from the screw fields.

        :return:    The screw.
        """
        return Screw(
            Axis(self.__get_vector("screw_axis_point"), self.__get_vector("screw_axis_direction")),
            self.__fields["screw_pitch"],
            # Negative magnitudes from user input are clamped to zero.
            max(0.0, self.__fields["screw_magnitude"])
        )

    def __set_vector(self, prefix: str, v) -> None:
        """
        Set the x, y and z fields with the specified prefix from a 3D vector.

        :param prefix:  The field name prefix, e.g. "twist_linear".
        :param v:       The 3D vector.
        """
        for i, dim in enumerate(RepresentationModel.DIMS):
            self.__fields[RepresentationModel.join_tokens(prefix, dim)] = float(v[i])

    def __transform_to_screw(self) -> Screw:
        """
        Make a screw from the transform fields.

        :return:    The screw.
        """
        q = RepresentationModel.clean_quaternion(
            *[self.__fields[RepresentationModel.join_tokens("transform_quaternion", k)] for k in ["x", "y", "z", "w"]]
        )  # type: np.ndarray
        transform = TransformUtil.transform_from_position_quaternion(
            self.__get_vector("transform_position"), q
        )  # type: np.ndarray
        return Screw.from_transform(transform)

    def __twist_to_screw(self) -> Screw:
        """
        Make a screw from the twist fields.

        :return:    The screw.
        """
        return Screw.from_twist(Twist(self.__get_vector("twist_linear"), self.__get_vector("twist_angular")))
