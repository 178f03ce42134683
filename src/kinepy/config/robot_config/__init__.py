"""Robot configuration modules."""

from .youbot_config import YOUBOT_ARM_CONFIG, YOUBOT_HOME_POSE, ArmConfig, JointConfig

__all__ = ["ArmConfig", "JointConfig", "YOUBOT_ARM_CONFIG", "YOUBOT_HOME_POSE"]
