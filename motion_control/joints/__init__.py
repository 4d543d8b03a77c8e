"""
Joint loading module.

Resolves one ``[JOINT_<n>]`` section into typed parameters and applies
them to a controller, activating the joint last.
"""

from motion_control.joints.loader import (
    configure_all_joints,
    configure_joint,
    ini_joint,
    load_joint,
)
from motion_control.joints.params import HomingParams, JointParameters

__all__ = [
    "HomingParams",
    "JointParameters",
    "configure_all_joints",
    "configure_joint",
    "ini_joint",
    "load_joint",
]
