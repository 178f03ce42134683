#!/usr/bin/env python3
"""Demo script for youBot forward and inverse kinematics.

Computes the TCP pose for a joint configuration, solves IK back from it
and tries an unreachable target.

Usage:
    python examples/kinematics/youbot_fk_ik.py
"""

from __future__ import annotations

import logging

from rich.console import Console

from kinepy.kinematics import KinematicsSolver, Pose
from kinepy.utils import fk_result_table, ik_result_table


def main() -> None:
    """Run the FK/IK demo."""
    logging.basicConfig(level=logging.DEBUG)
    console = Console()
    solver = KinematicsSolver()
    names = [j.name for j in solver.arm_config.joints]

    angles = [0.4, -0.5, -0.8, -0.6, 0.3]
    fk = solver.forward_transformation(angles)
    console.print(fk_result_table(fk, title=f"FK of {angles}"))

    ik = solver.inverse_transformation(fk.unwrap())
    console.print(ik_result_table(ik, joint_names=names, title="IK of that pose"))

    far = Pose(x=2.0, y=0.0, z=0.5, roll=0.0, pitch=0.0, yaw=0.0)
    console.print(ik_result_table(solver.inverse_transformation(far), title="Unreachable target"))


if __name__ == "__main__":
    main()
