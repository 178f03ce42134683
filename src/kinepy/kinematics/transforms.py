"""Homogeneous transformation utilities using only numpy."""

import numpy as np
from numpy.typing import NDArray


def rot_x(theta: float) -> NDArray[np.float64]:
    """4x4 rotation matrix about X-axis. theta in radians."""
    c, s = np.cos(theta), np.sin(theta)
    return np.array([
        [1.0, 0.0, 0.0, 0.0],
        [0.0, c, -s, 0.0],
        [0.0, s, c, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])


def rot_y(theta: float) -> NDArray[np.float64]:
    """4x4 rotation matrix about Y-axis. theta in radians."""
    c, s = np.cos(theta), np.sin(theta)
    return np.array([
        [c, 0.0, s, 0.0],
        [0.0, 1.0, 0.0, 0.0],
        [-s, 0.0, c, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])


def rot_z(theta: float) -> NDArray[np.float64]:
    """4x4 rotation matrix about Z-axis. theta in radians."""
    c, s = np.cos(theta), np.sin(theta)
    return np.array([
        [c, -s, 0.0, 0.0],
        [s, c, 0.0, 0.0],
        [0.0, 0.0, 1.0, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])


def translation(x: float, y: float, z: float) -> NDArray[np.float64]:
    """4x4 pure translation matrix."""
    T = np.eye(4)
    T[0, 3] = x
    T[1, 3] = y
    T[2, 3] = z
    return T


def dh_transform(theta: float, d: float, alpha: float, r: float) -> NDArray[np.float64]:
    """Transform between two consecutive link frames (classic DH).

    The order is fixed: rotate by ``theta`` about Z, translate ``d`` along Z,
    rotate by ``alpha`` about the new X, translate ``r`` along that X::

        T = Rz(theta) @ Tz(d) @ Rx(alpha) @ Tx(r)
    """
    return rot_z(theta) @ translation(0.0, 0.0, d) @ rot_x(alpha) @ translation(r, 0.0, 0.0)


def rpy_matrix(roll: float, pitch: float, yaw: float) -> NDArray[np.float64]:
    """3x3 rotation ``Rz(yaw) @ Ry(pitch) @ Rx(roll)``.

    Roll, pitch and yaw are applied about the fixed base X, Y and Z axes
    in that order (extrinsic X-Y-Z, same as URDF ``rpy``).
    """
    return (rot_z(yaw) @ rot_y(pitch) @ rot_x(roll))[:3, :3]


def is_rotation_matrix(R: NDArray[np.float64], tol: float = 1e-6) -> bool:
    """True if R is 3x3, orthonormal and has determinant +1 within tol."""
    R = np.asarray(R, dtype=np.float64)
    if R.shape != (3, 3) or not np.all(np.isfinite(R)):
        return False
    if not np.allclose(R @ R.T, np.eye(3), atol=tol):
        return False
    return abs(np.linalg.det(R) - 1.0) < tol


def wrap_angle(angle):
    """Wrap angle(s) into [-pi, pi)."""
    return (np.asarray(angle) + np.pi) % (2 * np.pi) - np.pi


def rotation_vector(R: NDArray[np.float64]) -> NDArray[np.float64]:
    """Axis-angle vector (axis * angle) of a 3x3 rotation matrix."""
    cos_angle = np.clip((np.trace(R) - 1.0) / 2.0, -1.0, 1.0)
    angle = float(np.arccos(cos_angle))
    skew = np.array([R[2, 1] - R[1, 2], R[0, 2] - R[2, 0], R[1, 0] - R[0, 1]])

    if angle < 1e-9:
        return 0.5 * skew
    if np.pi - angle < 1e-6:
        # sin(angle) ~ 0: recover the axis from the symmetric part instead
        B = (R + np.eye(3)) / 2.0
        k = int(np.argmax(np.diag(B)))
        axis = B[:, k] / np.sqrt(B[k, k])
        return angle * axis / np.linalg.norm(axis)
    return angle / (2.0 * np.sin(angle)) * skew


def rotation_error(
    R_target: NDArray[np.float64], R_current: NDArray[np.float64]
) -> NDArray[np.float64]:
    """Rotation vector taking R_current to R_target, expressed in the base frame."""
    return rotation_vector(R_target @ R_current.T)
