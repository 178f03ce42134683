"""Forward/inverse transformation entry points for a configured arm."""

from dataclasses import dataclass
from logging import getLogger
from typing import Sequence

import numpy as np

from kinepy.config.robot_config.youbot_config import YOUBOT_ARM_CONFIG, ArmConfig

from .errors import FailureReason
from .geometric import GeometricSolver
from .ik_solver import IKConfig, IKResult, IKSolver
from .pose import Pose, matrix_to_pose
from .robot_chains import chain_from_config

logger = getLogger(__name__)


@dataclass(frozen=True)
class FKResult:
    """Result of a forward transformation.

    Attributes:
        pose: TCP pose, or None if the input was rejected.
        success: Whether a pose was computed.
        failure: Why the input was rejected, None on success.
        degenerate_orientation: The TCP rotation was at gimbal lock and
            the RPY angles follow the yaw = 0 convention.
    """

    pose: Pose | None
    success: bool
    failure: FailureReason | None = None
    degenerate_orientation: bool = False

    def unwrap(self) -> Pose:
        """Return the pose or raise the error matching ``failure``."""
        if self.success and self.pose is not None:
            return self.pose
        reason = self.failure or FailureReason.INPUT_SHAPE
        raise reason.error_type(f"Forward transformation failed ({reason.value})")


class KinematicsSolver:
    """Forward and inverse kinematics of one arm.

    Both the arm geometry and the IK tuning are injected; the default is
    the KUKA youBot with :class:`IKConfig` defaults. Instances are
    immutable after construction.
    """

    def __init__(
        self,
        arm_config: ArmConfig = YOUBOT_ARM_CONFIG,
        ik_config: IKConfig | None = None,
    ) -> None:
        self._arm_config = arm_config
        self._chain = chain_from_config(arm_config)
        geometric = GeometricSolver(self._chain) if self._chain.n_joints == 5 else None
        self._ik = IKSolver(
            self._chain,
            config=ik_config,
            rest_angles_rad=arm_config.rest_angles_rad,
            geometric=geometric,
        )

    @property
    def arm_config(self) -> ArmConfig:
        return self._arm_config

    @property
    def ik_config(self) -> IKConfig:
        return self._ik.config

    @property
    def dof(self) -> int:
        return self._chain.n_joints

    def forward_transformation(self, angles: Sequence[float]) -> FKResult:
        """TCP pose for the given joint angles (radians)."""
        try:
            q = np.asarray(angles, dtype=np.float64)
        except (TypeError, ValueError) as e:
            logger.debug("Forward transformation rejected: %s", e)
            return FKResult(pose=None, success=False, failure=FailureReason.INPUT_SHAPE)
        if q.shape != (self._chain.n_joints,):
            logger.debug("Forward transformation rejected: shape %s", q.shape)
            return FKResult(pose=None, success=False, failure=FailureReason.INPUT_SHAPE)
        if not np.all(np.isfinite(q)):
            return FKResult(pose=None, success=False, failure=FailureReason.MALFORMED_POSE)

        T = self._chain.forward_kinematics_matrix(q)
        pose, degenerate = matrix_to_pose(T[:3, 3], T[:3, :3])
        return FKResult(pose=pose, success=True, degenerate_orientation=degenerate)

    def inverse_transformation(
        self,
        target: Pose | Sequence[float],
        initial_angles: Sequence[float] | None = None,
    ) -> IKResult:
        """Joint angles reaching the target TCP pose.

        Check ``result.success`` before using ``result.joint_angles_rad``.
        """
        return self._ik.solve(target, initial_angles)
