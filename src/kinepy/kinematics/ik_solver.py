"""Damped least-squares inverse kinematics solver (numpy only)."""

from dataclasses import dataclass
from enum import Enum
from logging import getLogger
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from .chain import KinematicChain
from .errors import FailureReason, InputShapeError
from .geometric import GeometricSolver
from .metrics import orientation_error, position_distance
from .pose import Pose, matrix_to_pose, pose_from_transform, pose_to_matrix
from .transforms import rotation_error

logger = getLogger(__name__)


class InitialGuess(Enum):
    """Where the numeric refinement starts when no seed is given."""

    GEOMETRIC = "geometric"  # closed-form candidate, rest configuration as fallback
    REST = "rest"


class SolverState(Enum):
    SEARCHING = "searching"
    CONVERGED = "converged"
    FAILED = "failed"


@dataclass(frozen=True)
class IKConfig:
    """Configuration for the IK solver.

    Attributes:
        max_iterations: Maximum solver iterations.
        position_tolerance: Convergence threshold for position error (meters).
        orientation_tolerance: Convergence threshold for the summed roll, pitch
            and yaw error (radians).
        damping: Initial damping factor lambda for DLS.
        min_damping: Lower bound for the adaptive damping.
        max_damping: Upper bound for the adaptive damping.
        step_scale: Scale factor for each iteration step (0 < step_scale <= 1).
        position_weight: Weight for position (x, y, z) components in the error.
        orientation_weight: Weight for orientation components.
        joint_limit_margin_rad: Stay this far inside joint limits.
        initial_guess: Seed policy when the caller gives no initial angles.
    """

    max_iterations: int = 300
    position_tolerance: float = 1e-4  # 0.1 mm
    orientation_tolerance: float = 1e-3  # ~0.06 degrees
    damping: float = 0.05
    min_damping: float = 1e-4
    max_damping: float = 10.0
    step_scale: float = 1.0
    position_weight: float = 1.0
    orientation_weight: float = 0.2
    joint_limit_margin_rad: float = 0.0
    initial_guess: InitialGuess = InitialGuess.GEOMETRIC

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        if self.position_tolerance <= 0 or self.orientation_tolerance <= 0:
            raise ValueError("tolerances must be positive")
        if not 0 < self.min_damping <= self.damping <= self.max_damping:
            raise ValueError("damping must satisfy 0 < min_damping <= damping <= max_damping")
        if not 0 < self.step_scale <= 1:
            raise ValueError("step_scale must be in (0, 1]")
        if self.joint_limit_margin_rad < 0:
            raise ValueError("joint_limit_margin_rad must be non-negative")


@dataclass(frozen=True)
class IKResult:
    """Result from the IK solver.

    Attributes:
        joint_angles_rad: (n_joints,) solution joint angles in radians, or
            None if the solver failed.
        success: Whether the solver converged within tolerance.
        state: Final solver state (CONVERGED or FAILED).
        failure: Why the solver failed, None on success.
        iterations: Number of iterations used.
        position_error: Final Euclidean position error in meters.
        orientation_error: Final summed RPY error in radians.
        used_geometric_seed: Whether the refinement started from the
            closed-form solution.
    """

    joint_angles_rad: NDArray[np.float64] | None
    success: bool
    state: SolverState
    failure: FailureReason | None
    iterations: int
    position_error: float
    orientation_error: float
    used_geometric_seed: bool = False

    def unwrap(self) -> NDArray[np.float64]:
        """Return the joint angles or raise the error matching ``failure``."""
        if self.success and self.joint_angles_rad is not None:
            return self.joint_angles_rad
        reason = self.failure or FailureReason.UNREACHABLE
        raise reason.error_type(
            f"IK failed ({reason.value}) after {self.iterations} iterations: "
            f"position error {self.position_error:.6f} m, "
            f"orientation error {self.orientation_error:.6f} rad"
        )


def _failed(
    reason: FailureReason,
    iterations: int = 0,
    position_error: float = float("nan"),
    orientation_error: float = float("nan"),
    used_geometric_seed: bool = False,
) -> IKResult:
    return IKResult(
        joint_angles_rad=None,
        success=False,
        state=SolverState.FAILED,
        failure=reason,
        iterations=iterations,
        position_error=position_error,
        orientation_error=orientation_error,
        used_geometric_seed=used_geometric_seed,
    )


class IKSolver:
    """Two-phase IK: closed-form seed, then damped least-squares refinement.

    The refinement uses the formulation::

        dq = J_w^T (J_w J_w^T + lambda^2 I)^{-1} e_w

    where *J_w* is the weighted Jacobian and *e_w* is the weighted
    position and rotation-vector error. Lambda adapts Levenberg-Marquardt
    style: a step that raises the error is rejected and lambda doubles, an
    accepted step halves it. Convergence is judged with
    :func:`position_distance` and :func:`orientation_error`.

    The solver holds no per-call state, so one instance can serve
    concurrent callers.
    """

    def __init__(
        self,
        chain: KinematicChain,
        config: IKConfig | None = None,
        rest_angles_rad: Sequence[float] | None = None,
        geometric: GeometricSolver | None = None,
    ) -> None:
        self._chain = chain
        self._config = config or IKConfig()
        if rest_angles_rad is None:
            rest = np.zeros(chain.n_joints)
        else:
            rest = np.array(rest_angles_rad, dtype=np.float64)
            if rest.shape != (chain.n_joints,):
                raise InputShapeError(
                    f"Expected {chain.n_joints} rest angles, got shape {rest.shape}"
                )
        rest.setflags(write=False)
        self._rest = rest
        margin = self._config.joint_limit_margin_rad
        if np.any(chain.lower_limits_rad + margin > chain.upper_limits_rad - margin):
            raise ValueError("joint_limit_margin_rad is larger than half a joint range")
        self._geometric = geometric

    @property
    def config(self) -> IKConfig:
        return self._config

    @property
    def chain(self) -> KinematicChain:
        return self._chain

    def solve(
        self,
        target_pose: Pose | Sequence[float],
        initial_angles_rad: Sequence[float] | None = None,
    ) -> IKResult:
        """Solve IK for a target TCP pose.

        Args:
            target_pose: Pose, or 6 values [x, y, z, roll, pitch, yaw].
            initial_angles_rad: Optional (n_joints,) seed in radians. Overrides
                the configured initial-guess policy.

        Returns:
            IKResult with solution and convergence information.
        """
        if isinstance(target_pose, Pose):
            target = target_pose
        else:
            try:
                target = Pose.from_array(np.asarray(target_pose, dtype=np.float64).ravel())
            except InputShapeError:
                return _failed(FailureReason.INPUT_SHAPE)

        if not target.is_finite():
            return _failed(FailureReason.MALFORMED_POSE)
        # Score against the same RPY branch that FK reports
        target, _ = matrix_to_pose(*pose_to_matrix(target))

        reach = float(np.linalg.norm(target.position))
        if reach > self._chain.max_reach:
            logger.debug(
                "Target %.4f m from the base is beyond the reach of %.4f m",
                reach,
                self._chain.max_reach,
            )
            return _failed(FailureReason.UNREACHABLE)

        used_geometric = False
        if initial_angles_rad is not None:
            try:
                seed = np.asarray(initial_angles_rad, dtype=np.float64)
            except (TypeError, ValueError):
                return _failed(FailureReason.INPUT_SHAPE)
            if seed.shape != (self._chain.n_joints,):
                return _failed(FailureReason.INPUT_SHAPE)
            if not np.all(np.isfinite(seed)):
                return _failed(FailureReason.MALFORMED_POSE)
        else:
            seed = self._rest
            if (
                self._config.initial_guess is InitialGuess.GEOMETRIC
                and self._geometric is not None
            ):
                candidate = self._geometric.solve(target)
                if candidate is not None:
                    seed = candidate
                    used_geometric = True

        return self._refine(target, seed, used_geometric)

    def _weighted_error(
        self,
        T: NDArray[np.float64],
        target_position: NDArray[np.float64],
        target_rotation: NDArray[np.float64],
        weights: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        error = np.concatenate([
            target_position - T[:3, 3],
            rotation_error(target_rotation, T[:3, :3]),
        ])
        return weights * error

    def _refine(
        self, target: Pose, seed: NDArray[np.float64], used_geometric: bool
    ) -> IKResult:
        cfg = self._config
        chain = self._chain
        target_position, target_rotation = pose_to_matrix(target)

        weights = np.array([cfg.position_weight] * 3 + [cfg.orientation_weight] * 3)

        margin = cfg.joint_limit_margin_rad
        q = chain.clamp_to_limits(seed, margin)
        T = chain.forward_kinematics_matrix(q)
        e_w = self._weighted_error(T, target_position, target_rotation, weights)
        cost = float(e_w @ e_w)
        damping = cfg.damping

        for iteration in range(cfg.max_iterations):
            current = pose_from_transform(T)
            pos_err = position_distance(current, target)
            ori_err = orientation_error(current, target)

            if pos_err <= cfg.position_tolerance and ori_err <= cfg.orientation_tolerance:
                return IKResult(
                    joint_angles_rad=q,
                    success=True,
                    state=SolverState.CONVERGED,
                    failure=None,
                    iterations=iteration + 1,
                    position_error=pos_err,
                    orientation_error=ori_err,
                    used_geometric_seed=used_geometric,
                )

            J_w = weights[:, None] * chain.jacobian(q)  # (6, n_joints)

            # DLS: dq = J_w^T (J_w J_w^T + lambda^2 I)^{-1} e_w
            JJT = J_w @ J_w.T
            damped = JJT + (damping**2) * np.eye(6)
            y = np.linalg.solve(damped, e_w)
            dq = J_w.T @ y

            q_new = chain.clamp_to_limits(q + cfg.step_scale * dq, margin)
            T_new = chain.forward_kinematics_matrix(q_new)
            e_new = self._weighted_error(T_new, target_position, target_rotation, weights)
            cost_new = float(e_new @ e_new)

            if cost_new < cost:
                q, T, e_w, cost = q_new, T_new, e_new, cost_new
                damping = max(damping / 2.0, cfg.min_damping)
            else:
                damping = min(damping * 2.0, cfg.max_damping)

        current = pose_from_transform(T)
        pos_err = position_distance(current, target)
        ori_err = orientation_error(current, target)
        logger.debug(
            "IK did not converge after %d iterations. "
            "Position error: %.6f m, Orientation error: %.6f rad",
            cfg.max_iterations,
            pos_err,
            ori_err,
        )
        return _failed(
            FailureReason.UNREACHABLE,
            iterations=cfg.max_iterations,
            position_error=pos_err,
            orientation_error=ori_err,
            used_geometric_seed=used_geometric,
        )
