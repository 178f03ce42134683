"""Tests for kinepy.kinematics.ik_solver."""

import numpy as np
import pytest

from kinepy.kinematics.chain import KinematicChain, LinkParameters, RevoluteJoint
from kinepy.kinematics.errors import (
    FailureReason,
    InputShapeError,
    MalformedPoseError,
    UnreachablePoseError,
)
from kinepy.kinematics.geometric import GeometricSolver
from kinepy.kinematics.ik_solver import (
    IKConfig,
    IKResult,
    IKSolver,
    InitialGuess,
    SolverState,
)
from kinepy.kinematics.metrics import orientation_error, position_distance
from kinepy.kinematics.pose import Pose, matrix_to_pose, pose_to_transform
from kinepy.kinematics.robot_chains import youbot_chain

REST = [0.0, -0.3, -0.7, -0.5, 0.0]


def _youbot_solver(config: IKConfig | None = None) -> IKSolver:
    chain = youbot_chain()
    return IKSolver(chain, config, rest_angles_rad=REST, geometric=GeometricSolver(chain))


class TestIKConfig:
    def test_defaults_valid(self):
        cfg = IKConfig()
        assert cfg.initial_guess is InitialGuess.GEOMETRIC

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_iterations": 0},
            {"position_tolerance": 0.0},
            {"orientation_tolerance": -1.0},
            {"damping": 0.0},
            {"min_damping": 1.0, "damping": 0.5},
            {"step_scale": 1.5},
            {"joint_limit_margin_rad": -0.1},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            IKConfig(**kwargs)

    def test_immutable(self):
        with pytest.raises(AttributeError):
            IKConfig().max_iterations = 5


class TestIKSolverYouBot:
    def test_solve_at_home(self):
        solver = _youbot_solver()
        home = solver.chain.forward_kinematics(np.zeros(5))
        result = solver.solve(home)
        assert result.success
        assert result.state is SolverState.CONVERGED
        assert result.failure is None
        assert result.used_geometric_seed
        assert result.position_error < 1e-4

    @pytest.mark.parametrize(
        "q_true",
        [
            [0.3, -0.4, -0.7, -0.6, 0.5],
            [-0.8, 0.3, -1.2, 0.4, -1.0],
            [1.5, -0.2, -0.5, -1.0, 2.0],
            [0.0, 0.5, 0.8, 0.7, 0.0],
        ],
    )
    def test_roundtrip(self, q_true):
        """FK → IK → FK should recover the original pose."""
        solver = _youbot_solver()
        chain = solver.chain
        target = chain.forward_kinematics(np.array(q_true))

        result = solver.solve(target)
        assert result.success

        recovered = chain.forward_kinematics(result.joint_angles_rad)
        assert position_distance(recovered, target) <= solver.config.position_tolerance
        assert orientation_error(recovered, target) <= solver.config.orientation_tolerance

    def test_accepts_array_target(self):
        solver = _youbot_solver()
        target = solver.chain.forward_kinematics(np.array([0.3, -0.4, -0.7, -0.6, 0.5]))
        result = solver.solve(target.to_array())
        assert result.success

    def test_numeric_refinement_from_rest(self):
        solver = _youbot_solver(IKConfig(initial_guess=InitialGuess.REST))
        chain = solver.chain
        target = chain.forward_kinematics(np.array([0.2, -0.4, -0.6, -0.4, 0.2]))

        result = solver.solve(target)
        assert result.success
        assert not result.used_geometric_seed
        assert result.iterations > 1
        recovered = chain.forward_kinematics(result.joint_angles_rad)
        assert position_distance(recovered, target) <= 1e-4

    def test_explicit_seed(self):
        solver = _youbot_solver()
        chain = solver.chain
        q_true = np.array([-0.5, 0.2, -0.9, 0.3, 0.4])
        target = chain.forward_kinematics(q_true)

        result = solver.solve(target, q_true + 0.05)
        assert result.success
        assert not result.used_geometric_seed
        recovered = chain.forward_kinematics(result.joint_angles_rad)
        assert position_distance(recovered, target) <= 1e-4

    def test_joint_limits_respected(self):
        config = IKConfig(joint_limit_margin_rad=0.02, initial_guess=InitialGuess.REST)
        solver = _youbot_solver(config)
        chain = solver.chain
        target = chain.forward_kinematics(np.array([0.2, -0.4, -0.6, -0.4, 0.2]))

        result = solver.solve(target)
        assert result.success
        lower = chain.lower_limits_rad + config.joint_limit_margin_rad
        upper = chain.upper_limits_rad - config.joint_limit_margin_rad
        assert np.all(result.joint_angles_rad >= lower - 1e-10)
        assert np.all(result.joint_angles_rad <= upper + 1e-10)

    def test_deterministic(self):
        solver = _youbot_solver(IKConfig(initial_guess=InitialGuess.REST))
        target = solver.chain.forward_kinematics(np.array([0.2, -0.4, -0.6, -0.4, 0.2]))
        a = solver.solve(target)
        b = solver.solve(target)
        assert a.iterations == b.iterations
        np.testing.assert_array_equal(a.joint_angles_rad, b.joint_angles_rad)

    def test_result_fields(self):
        solver = _youbot_solver()
        result = solver.solve(solver.chain.forward_kinematics(np.zeros(5)))
        assert isinstance(result, IKResult)
        assert isinstance(result.success, bool)
        assert isinstance(result.iterations, int)
        assert result.iterations >= 1


class TestIKSolverFailures:
    def test_target_beyond_reach(self):
        solver = _youbot_solver()
        result = solver.solve(Pose(2.0, 0.0, 0.5, 0.0, 0.0, 0.0))
        assert not result.success
        assert result.state is SolverState.FAILED
        assert result.failure is FailureReason.UNREACHABLE
        assert result.joint_angles_rad is None
        assert result.iterations == 0

    def test_unreachable_within_budget(self):
        """Inside the reach sphere but not reachable: fails after the budget."""
        solver = _youbot_solver(IKConfig(max_iterations=50))
        result = solver.solve(Pose(0.6, 0.0, 0.147, np.pi, 0.0, 0.0))
        assert not result.success
        assert result.failure is FailureReason.UNREACHABLE
        assert result.iterations == 50
        assert result.joint_angles_rad is None
        assert result.position_error > solver.config.position_tolerance

    def test_orientation_out_of_arm_plane(self):
        """A 5-DOF arm cannot point the tool sideways out of its own plane."""
        solver = _youbot_solver(IKConfig(max_iterations=50))
        result = solver.solve(Pose(0.3, 0.0, 0.2, np.pi / 2, 0.0, 0.0))
        assert not result.success
        assert result.joint_angles_rad is None

    def test_non_finite_target(self):
        solver = _youbot_solver()
        result = solver.solve(Pose(0.1, np.nan, 0.3, 0.0, 0.0, 0.0))
        assert result.failure is FailureReason.MALFORMED_POSE
        assert result.joint_angles_rad is None

    def test_wrong_target_length(self):
        solver = _youbot_solver()
        result = solver.solve([0.1, 0.2, 0.3])
        assert result.failure is FailureReason.INPUT_SHAPE

    def test_wrong_seed_length(self):
        solver = _youbot_solver()
        home = solver.chain.forward_kinematics(np.zeros(5))
        result = solver.solve(home, [0.0, 0.0])
        assert result.failure is FailureReason.INPUT_SHAPE

    def test_ragged_seed(self):
        solver = _youbot_solver()
        home = solver.chain.forward_kinematics(np.zeros(5))
        result = solver.solve(home, [0.0, [0.1, 0.2], 0.0, 0.0, 0.0])
        assert result.failure is FailureReason.INPUT_SHAPE

    def test_non_finite_seed(self):
        solver = _youbot_solver()
        home = solver.chain.forward_kinematics(np.zeros(5))
        result = solver.solve(home, [0.0, np.inf, 0.0, 0.0, 0.0])
        assert result.failure is FailureReason.MALFORMED_POSE

    def test_rest_angles_shape_checked(self):
        with pytest.raises(InputShapeError):
            IKSolver(youbot_chain(), rest_angles_rad=[0.0, 0.0])


class TestIKResultUnwrap:
    def test_success(self):
        solver = _youbot_solver()
        result = solver.solve(solver.chain.forward_kinematics(np.zeros(5)))
        np.testing.assert_allclose(result.unwrap(), result.joint_angles_rad)

    def test_unreachable_raises(self):
        result = _youbot_solver().solve(Pose(2.0, 0.0, 0.0, 0.0, 0.0, 0.0))
        with pytest.raises(UnreachablePoseError):
            result.unwrap()

    def test_malformed_raises(self):
        result = _youbot_solver().solve(Pose(np.inf, 0.0, 0.0, 0.0, 0.0, 0.0))
        with pytest.raises(MalformedPoseError):
            result.unwrap()


def _simple_3dof_chain() -> KinematicChain:
    """Base yaw plus two pitch joints — enough to reach 3D positions."""
    joints = [
        RevoluteJoint("j0", LinkParameters(0.0, 0.05, np.pi / 2, 0.0), -np.pi, np.pi),
        RevoluteJoint("j1", LinkParameters(0.0, 0.0, 0.0, 0.15), -np.pi / 2, np.pi / 2),
        RevoluteJoint("j2", LinkParameters(0.0, 0.0, 0.0, 0.1), -np.pi / 2, np.pi / 2),
    ]
    return KinematicChain(joints)


class TestIKSolverGenericChain:
    """The numeric phase works on chains without a geometric solver."""

    def test_position_only_roundtrip(self):
        chain = _simple_3dof_chain()
        config = IKConfig(orientation_weight=0.0, orientation_tolerance=10.0)
        solver = IKSolver(chain, config)
        q_true = np.array([0.4, 0.3, -0.5])
        target = chain.forward_kinematics(q_true)

        result = solver.solve(target, q_true + 0.1)
        assert result.success
        recovered = chain.forward_kinematics(result.joint_angles_rad)
        np.testing.assert_allclose(recovered.position, target.position, atol=1e-4)


# q2 + q3 + q4 = -pi/2 puts the tool horizontal: pitch = +pi/2
GIMBAL_LOCK_Q = [0.4, -1.0, -0.3, -np.pi / 2 + 1.3, 0.0]


class TestIKSolverGimbalLock:
    def test_target_is_degenerate(self):
        chain = youbot_chain()
        T = chain.forward_kinematics_matrix(np.array(GIMBAL_LOCK_Q))
        pose, degenerate = matrix_to_pose(T[:3, 3], T[:3, :3])
        assert degenerate
        assert pose.pitch == pytest.approx(np.pi / 2)

    def test_roundtrip(self):
        solver = _youbot_solver()
        chain = solver.chain
        target = chain.forward_kinematics(np.array(GIMBAL_LOCK_Q))

        result = solver.solve(target)
        assert result.success
        T = chain.forward_kinematics_matrix(result.joint_angles_rad)
        np.testing.assert_allclose(T, pose_to_transform(target), atol=1e-6)

    def test_equivalent_roll_yaw_split(self):
        """At pitch = +pi/2 adding the same angle to roll and yaw is the same rotation."""
        solver = _youbot_solver()
        chain = solver.chain
        fk = chain.forward_kinematics(np.array(GIMBAL_LOCK_Q))
        target = Pose(fk.x, fk.y, fk.z, fk.roll + 0.3, np.pi / 2, fk.yaw + 0.3)

        result = solver.solve(target)
        assert result.success
        assert result.position_error <= solver.config.position_tolerance
        T = chain.forward_kinematics_matrix(result.joint_angles_rad)
        np.testing.assert_allclose(T, pose_to_transform(target), atol=1e-6)

    def test_alternative_rpy_branch(self):
        """(roll + pi, pi - pitch, yaw + pi) spells the same rotation."""
        solver = _youbot_solver()
        chain = solver.chain
        fk = chain.forward_kinematics(np.array([0.3, -0.4, -0.7, -0.6, 0.5]))
        target = Pose(fk.x, fk.y, fk.z, fk.roll + np.pi, np.pi - fk.pitch, fk.yaw + np.pi)
        np.testing.assert_allclose(pose_to_transform(target), pose_to_transform(fk), atol=1e-12)

        result = solver.solve(target)
        assert result.success
        recovered = chain.forward_kinematics(result.joint_angles_rad)
        assert orientation_error(recovered, fk) <= solver.config.orientation_tolerance


class TestIKSolverLimitMargin:
    def test_margin_larger_than_range_rejected_at_construction(self):
        with pytest.raises(ValueError):
            IKSolver(youbot_chain(), IKConfig(joint_limit_margin_rad=1.5))
