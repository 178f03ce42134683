"""Kinematics module for kinepy: FK and IK for 5-DOF robot arms."""

from .chain import KinematicChain, LinkParameters, RevoluteJoint
from .errors import (
    DegenerateOrientationError,
    FailureReason,
    InputShapeError,
    KinematicsError,
    MalformedPoseError,
    UnreachablePoseError,
)
from .geometric import GeometricSolver
from .ik_solver import IKConfig, IKResult, IKSolver, InitialGuess, SolverState
from .metrics import orientation_error, position_distance
from .pose import Pose, matrix_to_pose, pose_to_matrix
from .robot_chains import chain_from_config, youbot_chain
from .solver import FKResult, KinematicsSolver

__all__ = [
    "DegenerateOrientationError",
    "FKResult",
    "FailureReason",
    "GeometricSolver",
    "IKConfig",
    "IKResult",
    "IKSolver",
    "InitialGuess",
    "InputShapeError",
    "KinematicChain",
    "KinematicsError",
    "KinematicsSolver",
    "LinkParameters",
    "MalformedPoseError",
    "Pose",
    "RevoluteJoint",
    "SolverState",
    "UnreachablePoseError",
    "chain_from_config",
    "matrix_to_pose",
    "orientation_error",
    "pose_to_matrix",
    "position_distance",
    "youbot_chain",
]
