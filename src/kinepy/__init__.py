from .kinematics import FKResult, IKConfig, IKResult, KinematicsSolver, Pose

__all__ = ["FKResult", "IKConfig", "IKResult", "KinematicsSolver", "Pose"]
