"""TCP pose representation and conversion to/from rotation matrices."""

from dataclasses import dataclass
from logging import getLogger
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from .errors import DegenerateOrientationError, InputShapeError
from .transforms import is_rotation_matrix, rpy_matrix

logger = getLogger(__name__)

# cos(pitch) below this value is treated as gimbal lock
GIMBAL_LOCK_TOLERANCE = 1e-9


@dataclass(frozen=True)
class Pose:
    """6-DOF TCP pose in the base frame.

    Attributes:
        x: TCP X position in meters.
        y: TCP Y position in meters.
        z: TCP Z position in meters.
        roll: Rotation about the base X-axis in radians.
        pitch: Rotation about the base Y-axis in radians.
        yaw: Rotation about the base Z-axis in radians.

    The rotation is ``R = Rz(yaw) @ Ry(pitch) @ Rx(roll)``.
    """

    x: float
    y: float
    z: float
    roll: float
    pitch: float
    yaw: float

    @property
    def position(self) -> NDArray[np.float64]:
        return np.array([self.x, self.y, self.z])

    @property
    def angles(self) -> NDArray[np.float64]:
        return np.array([self.roll, self.pitch, self.yaw])

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.to_array())))

    def to_array(self) -> NDArray[np.float64]:
        """Return (6,) numpy array [x, y, z, roll, pitch, yaw]."""
        return np.array([self.x, self.y, self.z, self.roll, self.pitch, self.yaw])

    @classmethod
    def from_array(cls, arr) -> "Pose":
        """Construct from a (6,) array."""
        if len(arr) != 6:
            raise InputShapeError(f"Expected 6 elements, got {len(arr)}")
        return cls(
            x=float(arr[0]),
            y=float(arr[1]),
            z=float(arr[2]),
            roll=float(arr[3]),
            pitch=float(arr[4]),
            yaw=float(arr[5]),
        )


def pose_to_matrix(pose: Pose) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Split a pose into its (3,) position and 3x3 rotation matrix."""
    return pose.position, rpy_matrix(pose.roll, pose.pitch, pose.yaw)


def matrix_to_pose(
    position: NDArray[np.float64],
    rotation: NDArray[np.float64],
    strict: bool = False,
) -> Tuple[Pose, bool]:
    """Build a pose from a position and a rotation matrix.

    Returns the pose and a flag telling whether the rotation was at gimbal
    lock (pitch = +-pi/2). There only ``roll - yaw`` (pitch = +pi/2) or
    ``roll + yaw`` (pitch = -pi/2) is defined; the returned angles then use
    ``yaw = 0`` and put the whole rotation into ``roll``. With ``strict=True``
    a :class:`DegenerateOrientationError` is raised instead.

    Raises:
        ValueError: If ``rotation`` is not a proper rotation matrix.
    """
    R = np.asarray(rotation, dtype=np.float64)
    if not is_rotation_matrix(R):
        raise ValueError("rotation is not an orthonormal 3x3 matrix with det +1")
    x, y, z = (float(v) for v in np.asarray(position, dtype=np.float64)[:3])

    cos_pitch = float(np.hypot(R[0, 0], R[1, 0]))
    if cos_pitch < GIMBAL_LOCK_TOLERANCE:
        if strict:
            raise DegenerateOrientationError(
                f"pitch is at +-pi/2 (cos(pitch) = {cos_pitch:.3e})"
            )
        sin_pitch = 1.0 if -R[2, 0] >= 0.0 else -1.0
        pitch = sin_pitch * np.pi / 2
        roll = float(np.arctan2(sin_pitch * R[0, 1], R[1, 1]))
        logger.debug("Gimbal lock resolved with yaw=0, pitch=%.4f, roll=%.4f", pitch, roll)
        return Pose(x, y, z, roll, pitch, 0.0), True

    pitch = float(np.arctan2(-R[2, 0], cos_pitch))
    roll = float(np.arctan2(R[2, 1], R[2, 2]))
    yaw = float(np.arctan2(R[1, 0], R[0, 0]))
    return Pose(x, y, z, roll, pitch, yaw), False


def pose_to_transform(pose: Pose) -> NDArray[np.float64]:
    """4x4 homogeneous transform of a pose."""
    position, R = pose_to_matrix(pose)
    T = np.eye(4)
    T[:3, :3] = R
    T[:3, 3] = position
    return T


def pose_from_transform(T: NDArray[np.float64]) -> Pose:
    """Pose of a 4x4 homogeneous transform (gimbal lock resolved, not raised)."""
    pose, _ = matrix_to_pose(T[:3, 3], T[:3, :3])
    return pose
