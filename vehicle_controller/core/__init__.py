"""核心模块"""
from .enums import PdProfileType, TraversalDirection
from .data_types import (
    Header, Point3D, Vector3, Quaternion, Twist, PdOutput, SmoothedPath,
)
from .interfaces import ILifecycleComponent, IPathSmoother, IDriveController
from .constants import (
    EPSILON, EPSILON_SMALL, MIN_SEGMENT_LENGTH, MIN_PATH_LENGTH,
    SMOOTHED_PATH_DISCRETIZATION, PATH_SMOOTHNESS, REVERSE_PATH_MAX_LENGTH,
    LOCAL_ROBOT_DIRECTION,
)
from .geometry import (
    accumulated_distances, quaternion_from_two_vectors, rotate_vector,
    normalized, as_position_array, as_quaternion,
)
from .exceptions import (
    VehicleControllerError, ConfigurationError, ConfigValidationError,
    UnknownProfileError, ControllerRuntimeError, InvalidInputError,
    DegenerateGeometryError,
)
