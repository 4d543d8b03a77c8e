"""Resolved joint parameters.

Frozen dataclasses holding the values one joint load applied to the
controller.  Built step by step by the loader and returned on success;
the controller, not these objects, owns persistent joint state.
"""

from __future__ import annotations

from dataclasses import dataclass

from motion_control.configs.units import JointType

MIN_LIMIT_DEFAULT = -1e99
MAX_LIMIT_DEFAULT = 1e99

HOME_VEL_RAPID = -1.0
NO_HOME_SEQUENCE = -1


@dataclass(frozen=True)
class HomingParams:
    """Homing parameters, applied in a single controller call.

    ``home_vel == -1`` means "rapid"; the controller decides what that
    speed is.  ``sequence == -1`` means the joint is not part of a
    homing sequence.
    """

    home: float = 0.0
    offset: float = 0.0
    home_vel: float = HOME_VEL_RAPID
    search_vel: float = 0.0
    latch_vel: float = 0.0
    use_index: bool = False
    ignore_limits: bool = False
    is_shared: bool = False
    sequence: int = NO_HOME_SEQUENCE
    volatile_home: int = 0


@dataclass(frozen=True)
class JointParameters:
    """Everything a successful joint load applied, in application order."""

    joint: int
    joint_type: JointType
    units: float
    backlash: float
    min_limit: float
    max_limit: float
    ferror: float
    min_ferror: float
    homing: HomingParams
    max_velocity: float
    max_acceleration: float
    comp_file_type: int = 0
    comp_file: str | None = None

    @property
    def section(self) -> str:
        return joint_section(self.joint)


def joint_section(joint: int) -> str:
    """Section name holding joint *joint*'s keys (``JOINT_0``...)."""
    return f"JOINT_{joint}"
