import math
from dataclasses import dataclass, field
from typing import Tuple

_HALF_PI = math.pi / 2


@dataclass(frozen=True)
class JointConfig:
    """Geometry and limits of one revolute joint.

    The four DH values describe the transform from this joint's frame to
    the next one: ``Rz(angle + theta_offset) @ Tz(d) @ Rx(alpha) @ Tx(r)``.
    Lengths in meters, angles in radians.
    """

    name: str
    theta_offset: float
    d: float
    alpha: float
    r: float
    lower_limit_rad: float
    upper_limit_rad: float

    def __post_init__(self) -> None:
        if self.lower_limit_rad > self.upper_limit_rad:
            raise ValueError(
                f"Joint '{self.name}': lower limit must not exceed upper limit"
            )


@dataclass(frozen=True)
class ArmConfig:
    """Configuration of a serial arm for the kinematics solver.

    Attributes:
        name: Arm model name.
        joints: Per-joint DH parameters and limits, ordered base to TCP.
        tcp_offset: Fixed (x, y, z) offset from the last link frame to the TCP.
        rest_angles_rad: Default IK seed when no geometric solution is available.
    """

    name: str
    joints: Tuple[JointConfig, ...]
    rest_angles_rad: Tuple[float, ...]
    tcp_offset: Tuple[float, float, float] = field(default=(0.0, 0.0, 0.0))

    def __post_init__(self) -> None:
        if len(self.rest_angles_rad) != len(self.joints):
            raise ValueError(
                f"rest_angles_rad has {len(self.rest_angles_rad)} values "
                f"for {len(self.joints)} joints"
            )
        for joint, angle in zip(self.joints, self.rest_angles_rad):
            if not joint.lower_limit_rad <= angle <= joint.upper_limit_rad:
                raise ValueError(f"Rest angle {angle} of '{joint.name}' is outside its limits")

    @property
    def dof(self) -> int:
        return len(self.joints)


# KUKA youBot arm. Zero angles are the upright "candle" configuration.
# Limits from the youBot manual, relative to candle.
YOUBOT_ARM_CONFIG = ArmConfig(
    name="youbot",
    joints=(
        JointConfig(
            name="arm_joint_1",
            theta_offset=0.0,
            d=0.147,
            alpha=_HALF_PI,
            r=0.033,
            lower_limit_rad=-2.9496,  # -169 deg
            upper_limit_rad=2.9496,  # +169 deg
        ),
        JointConfig(
            name="arm_joint_2",
            theta_offset=_HALF_PI,
            d=0.0,
            alpha=0.0,
            r=0.155,
            lower_limit_rad=-1.1345,  # -65 deg
            upper_limit_rad=1.5708,  # +90 deg
        ),
        JointConfig(
            name="arm_joint_3",
            theta_offset=0.0,
            d=0.0,
            alpha=0.0,
            r=0.135,
            lower_limit_rad=-2.5482,  # -146 deg
            upper_limit_rad=2.6354,  # +151 deg
        ),
        JointConfig(
            name="arm_joint_4",
            theta_offset=_HALF_PI,
            d=0.0,
            alpha=_HALF_PI,
            r=0.0,
            lower_limit_rad=-1.7890,  # -102.5 deg
            upper_limit_rad=1.7890,  # +102.5 deg
        ),
        JointConfig(
            name="arm_joint_5",
            theta_offset=math.pi,
            d=0.2175,
            alpha=0.0,
            r=0.0,
            lower_limit_rad=-2.9234,  # -167.5 deg
            upper_limit_rad=2.9234,  # +167.5 deg
        ),
    ),
    rest_angles_rad=(0.0, -0.3, -0.7, -0.5, 0.0),
)

# TCP pose (x, y, z, roll, pitch, yaw) of YOUBOT_ARM_CONFIG at zero angles.
YOUBOT_HOME_POSE = (0.033, 0.0, 0.6545, 0.0, 0.0, 0.0)
