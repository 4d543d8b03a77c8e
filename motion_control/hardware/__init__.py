"""
Controller module.

Provides the setter interface the joint loader drives, an in-memory
controller implementing it, and the compensation-table reader.
"""

from motion_control.hardware.compensation import CompTable, load_comp_table
from motion_control.hardware.controller import (
    InMemoryJointController,
    JointController,
    JointState,
)

__all__ = [
    "CompTable",
    "InMemoryJointController",
    "JointController",
    "JointState",
    "load_comp_table",
]
