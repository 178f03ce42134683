"""Kinematic chain with DH forward kinematics and numerical Jacobian."""

from dataclasses import dataclass
from typing import List

import numpy as np
from numpy.typing import NDArray

from .errors import InputShapeError
from .pose import Pose, pose_from_transform
from .transforms import dh_transform, rotation_error


@dataclass(frozen=True)
class LinkParameters:
    """DH parameters from one joint frame to the next.

    Attributes:
        theta_offset: Added to the joint angle before the Z rotation (rad).
        d: Offset along the joint Z-axis (m).
        alpha: Twist about the new X-axis (rad).
        r: Link length along the new X-axis (m).
    """

    theta_offset: float
    d: float
    alpha: float
    r: float

    def transform(self, angle_rad: float) -> NDArray[np.float64]:
        """Link transform with the joint angle substituted into theta."""
        return dh_transform(angle_rad + self.theta_offset, self.d, self.alpha, self.r)


@dataclass(frozen=True)
class RevoluteJoint:
    """A single revolute joint in the kinematic chain.

    Attributes:
        name: Joint name (e.g., "shoulder_pan").
        link: DH parameters from this joint's frame to the next one.
        lower_limit_rad: Minimum joint angle in radians.
        upper_limit_rad: Maximum joint angle in radians.
    """

    name: str
    link: LinkParameters
    lower_limit_rad: float
    upper_limit_rad: float

    def __post_init__(self) -> None:
        if self.lower_limit_rad > self.upper_limit_rad:
            raise ValueError(
                f"Joint '{self.name}': lower limit {self.lower_limit_rad} "
                f"exceeds upper limit {self.upper_limit_rad}"
            )


class KinematicChain:
    """Forward kinematics and numerical Jacobian for a serial revolute chain.

    The chain is a sequence of :class:`RevoluteJoint` objects followed by an
    optional fixed transform from the last link frame to the TCP.
    """

    def __init__(
        self,
        joints: List[RevoluteJoint],
        tcp_transform: NDArray[np.float64] | None = None,
    ) -> None:
        self._joints = tuple(joints)
        self._tcp = np.eye(4) if tcp_transform is None else np.array(tcp_transform, dtype=np.float64)
        self._tcp.setflags(write=False)
        self._n_joints = len(self._joints)

    @property
    def n_joints(self) -> int:
        return self._n_joints

    @property
    def joints(self) -> tuple[RevoluteJoint, ...]:
        return self._joints

    @property
    def joint_names(self) -> List[str]:
        return [j.name for j in self._joints]

    @property
    def links(self) -> List[LinkParameters]:
        return [j.link for j in self._joints]

    @property
    def tcp_transform(self) -> NDArray[np.float64]:
        return self._tcp

    @property
    def lower_limits_rad(self) -> NDArray[np.float64]:
        return np.array([j.lower_limit_rad for j in self._joints])

    @property
    def upper_limits_rad(self) -> NDArray[np.float64]:
        return np.array([j.upper_limit_rad for j in self._joints])

    @property
    def max_reach(self) -> float:
        """Upper bound on the TCP distance from the base origin."""
        reach = sum(abs(j.link.d) + abs(j.link.r) for j in self._joints)
        return float(reach + np.linalg.norm(self._tcp[:3, 3]))

    def _check_shape(self, joint_angles_rad) -> NDArray[np.float64]:
        q = np.asarray(joint_angles_rad, dtype=np.float64)
        if q.ndim != 1 or len(q) != self._n_joints:
            raise InputShapeError(
                f"Expected {self._n_joints} joint angles, got shape {q.shape}"
            )
        return q

    def joint_frames(self, joint_angles_rad) -> List[NDArray[np.float64]]:
        """Base-frame transforms of every link frame, T0_1 ... T0_n."""
        q = self._check_shape(joint_angles_rad)
        frames = []
        T = np.eye(4)
        for joint, angle in zip(self._joints, q):
            T = T @ joint.link.transform(float(angle))
            frames.append(T)
        return frames

    def forward_kinematics_matrix(self, joint_angles_rad) -> NDArray[np.float64]:
        """Compute the 4x4 homogeneous transform from base to TCP.

        Args:
            joint_angles_rad: (n_joints,) array of joint angles in radians.

        Returns:
            4x4 homogeneous transformation matrix.

        Raises:
            InputShapeError: If the number of angles does not match the chain.
        """
        q = self._check_shape(joint_angles_rad)
        T = np.eye(4)
        for joint, angle in zip(self._joints, q):
            T = T @ joint.link.transform(float(angle))
        return T @ self._tcp

    def forward_kinematics(self, joint_angles_rad) -> Pose:
        """Compute the TCP pose for the given joint angles."""
        return pose_from_transform(self.forward_kinematics_matrix(joint_angles_rad))

    def jacobian(
        self, joint_angles_rad: NDArray[np.float64], delta: float = 1e-6
    ) -> NDArray[np.float64]:
        """Numerical Jacobian of the TCP position and orientation.

        Uses central finite differences for O(delta^2) accuracy. The
        orientation rows are rotation-vector rates in the base frame, so
        they stay well defined at the RPY singularity.

        Returns:
            (6, n_joints) Jacobian matrix.
        """
        q = self._check_shape(joint_angles_rad)
        J = np.zeros((6, self._n_joints))

        for i in range(self._n_joints):
            q_plus = q.copy()
            q_minus = q.copy()
            q_plus[i] += delta
            q_minus[i] -= delta

            T_plus = self.forward_kinematics_matrix(q_plus)
            T_minus = self.forward_kinematics_matrix(q_minus)

            J[:3, i] = (T_plus[:3, 3] - T_minus[:3, 3]) / (2 * delta)
            J[3:, i] = rotation_error(T_plus[:3, :3], T_minus[:3, :3]) / (2 * delta)

        return J

    def within_limits(self, joint_angles_rad, tol: float = 1e-9) -> bool:
        q = self._check_shape(joint_angles_rad)
        return bool(
            np.all(q >= self.lower_limits_rad - tol) and np.all(q <= self.upper_limits_rad + tol)
        )

    def clamp_to_limits(
        self, joint_angles_rad: NDArray[np.float64], margin_rad: float = 0.0
    ) -> NDArray[np.float64]:
        """Clamp joint angles to their limits, optionally staying margin_rad inside."""
        return np.clip(
            joint_angles_rad,
            self.lower_limits_rad + margin_rad,
            self.upper_limits_rad - margin_rad,
        )
