"""Error metrics between two TCP poses, used as the IK cost signal."""

import numpy as np

from .pose import Pose
from .transforms import wrap_angle


def position_distance(a: Pose, b: Pose) -> float:
    """Euclidean distance between the two TCP positions (meters)."""
    return float(np.linalg.norm(a.position - b.position))


def orientation_error(a: Pose, b: Pose) -> float:
    """Sum of absolute roll, pitch and yaw differences (radians).

    Each difference is wrapped into [-pi, pi) first, so yaw = pi and
    yaw = -pi compare equal. This is an angle-wise approximation, not a
    rotational distance: near pitch = +-pi/2 two close rotations can still
    report a large error because roll and yaw trade off there.
    """
    return float(np.sum(np.abs(wrap_angle(a.angles - b.angles))))
