"""Error taxonomy for forward/inverse kinematics."""

from enum import Enum


class KinematicsError(Exception):
    """Base class for all kinematics errors."""


class InputShapeError(KinematicsError, ValueError):
    """Joint-angle or pose vector has the wrong length."""


class MalformedPoseError(KinematicsError, ValueError):
    """Input contains non-finite values."""


class UnreachablePoseError(KinematicsError):
    """IK could not reach the target within the iteration budget."""


class DegenerateOrientationError(KinematicsError):
    """Rotation is at the RPY singularity (gimbal lock)."""


class FailureReason(Enum):
    """Why a forward or inverse computation failed."""

    INPUT_SHAPE = "input_shape"
    MALFORMED_POSE = "malformed_pose"
    UNREACHABLE = "unreachable"

    @property
    def error_type(self) -> type[KinematicsError]:
        return _ERROR_TYPES[self]


_ERROR_TYPES = {
    FailureReason.INPUT_SHAPE: InputShapeError,
    FailureReason.MALFORMED_POSE: MalformedPoseError,
    FailureReason.UNREACHABLE: UnreachablePoseError,
}
