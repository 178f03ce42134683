"""Factory functions creating KinematicChain for each supported robot."""

from kinepy.config.robot_config.youbot_config import YOUBOT_ARM_CONFIG, ArmConfig

from .chain import KinematicChain, LinkParameters, RevoluteJoint
from .transforms import translation


def chain_from_config(config: ArmConfig) -> KinematicChain:
    """Build a kinematic chain from an arm configuration."""
    joints = [
        RevoluteJoint(
            name=j.name,
            link=LinkParameters(
                theta_offset=j.theta_offset,
                d=j.d,
                alpha=j.alpha,
                r=j.r,
            ),
            lower_limit_rad=j.lower_limit_rad,
            upper_limit_rad=j.upper_limit_rad,
        )
        for j in config.joints
    ]
    return KinematicChain(joints=joints, tcp_transform=translation(*config.tcp_offset))


def youbot_chain() -> KinematicChain:
    """Create the kinematic chain for the KUKA youBot arm (5-DOF, excluding gripper).

    Zero angles are the upright "candle" configuration with the TCP
    at :data:`~kinepy.config.robot_config.youbot_config.YOUBOT_HOME_POSE`.
    """
    return chain_from_config(YOUBOT_ARM_CONFIG)
