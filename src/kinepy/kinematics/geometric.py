"""Closed-form inverse kinematics for youBot-style 5-DOF arms.

The arm decouples into a base rotation (joint 1), a planar three-link
chain with parallel axes (joints 2-4) and a wrist roll (joint 5) about
the approach axis. Given a target TCP pose:

1. the wrist point is found by stepping back along the approach axis,
2. joint 1 turns the arm plane towards the wrist point (or away from it,
   reaching over the back),
3. joints 2 and 3 place the wrist point with the two-link law of cosines,
4. joint 4 aligns the approach axis within the arm plane,
5. joint 5 takes up the remaining rotation about the approach axis.

Approach axes with a component normal to the arm plane cannot be reached
by a 5-DOF arm; the candidate then ignores that component and the numeric
refinement decides whether it is good enough.
"""

from logging import getLogger
from typing import List

import numpy as np
from numpy.typing import NDArray

from .chain import KinematicChain
from .pose import Pose, pose_to_matrix
from .transforms import wrap_angle

logger = getLogger(__name__)

_EPS = 1e-9


class GeometricSolver:
    """Geometric IK for a chain with the youBot joint layout."""

    def __init__(self, chain: KinematicChain) -> None:
        if chain.n_joints != 5:
            raise ValueError(f"GeometricSolver needs a 5-joint chain, got {chain.n_joints}")
        links = chain.links
        self._chain = chain
        self._base_height = links[0].d
        self._shoulder_offset = links[0].r
        self._upper_arm = links[1].r
        self._forearm = links[2].r
        self._wrist_length = links[4].d

    def _wrist_point(self, pose: Pose) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Wrist centre and approach axis of the last link frame."""
        position, R = pose_to_matrix(pose)
        tcp = self._chain.tcp_transform
        R_link = R @ tcp[:3, :3].T
        p_link = position - R_link @ tcp[:3, 3]
        approach = R_link[:, 2]
        return p_link - self._wrist_length * approach, approach

    def candidates(self, pose: Pose) -> List[NDArray[np.float64]]:
        """All closed-form solutions in deterministic order, ignoring joint limits."""
        wrist, approach = self._wrist_point(pose)

        if np.hypot(wrist[0], wrist[1]) > _EPS:
            base = float(np.arctan2(wrist[1], wrist[0]))
        elif np.hypot(approach[0], approach[1]) > _EPS:
            base = float(np.arctan2(approach[1], approach[0]))
        else:
            base = 0.0

        L2, L3 = self._upper_arm, self._forearm
        solutions = []
        for q1 in (base, float(wrap_angle(base + np.pi))):
            e_r = np.array([np.cos(q1), np.sin(q1), 0.0])
            radial = float(wrist @ e_r) - self._shoulder_offset
            height = float(wrist[2]) - self._base_height

            cos_elbow = (radial**2 + height**2 - L2**2 - L3**2) / (2 * L2 * L3)
            if abs(cos_elbow) > 1.0 + _EPS:
                continue
            cos_elbow = float(np.clip(cos_elbow, -1.0, 1.0))
            # Angles measured from vertical towards the radial direction
            tool_angle = float(np.arctan2(approach @ e_r, approach[2]))

            for sign in (1.0, -1.0):
                elbow = float(np.arctan2(sign * np.sqrt(1.0 - cos_elbow**2), cos_elbow))
                shoulder = float(
                    np.arctan2(radial, height)
                    - np.arctan2(L3 * np.sin(elbow), L2 + L3 * np.cos(elbow))
                )
                q2 = -shoulder
                q3 = -elbow
                q4 = -tool_angle - q2 - q3
                q = np.array([q1, q2, q3, q4, 0.0])
                q[4] = self._wrist_roll(q, pose)
                solutions.append(wrap_angle(q))
        return solutions

    def _wrist_roll(self, q: NDArray[np.float64], pose: Pose) -> float:
        _, R = pose_to_matrix(pose)
        R_zero = self._chain.joint_frames(q)[-1][:3, :3]
        M = R_zero.T @ R @ self._chain.tcp_transform[:3, :3].T
        return float(np.arctan2(M[1, 0], M[0, 0]))

    def solve(self, pose: Pose) -> NDArray[np.float64] | None:
        """First closed-form solution within joint limits, or None if not applicable."""
        for q in self.candidates(pose):
            if self._chain.within_limits(q):
                return q
        logger.debug("No geometric IK solution within joint limits for %s", pose)
        return None
