"""Joint controller interface and an in-memory implementation.

The joint loader pushes every resolved value into a controller through
the narrow setter contract of :class:`JointController`.  Each setter
takes the joint index first and returns ``True`` on success; a falsy
result aborts the load.

:class:`InMemoryJointController` is the reference sink: it keeps a
:class:`JointState` per joint, records every call in order, and applies
the same argument checks a motion controller would (index range,
positive units, non-negative velocity caps).  It backs the
``configure_joint`` script and the test suite.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Protocol, runtime_checkable

from motion_control.configs.units import JointType
from motion_control.hardware.compensation import (
    CompFileError,
    CompTable,
    load_comp_table,
)
from motion_control.utils.fs import resolve_path

logger = logging.getLogger(__name__)

MAX_JOINTS = 16


# ---------------------------------------------------------------------------
# Interface
# ---------------------------------------------------------------------------


@runtime_checkable
class JointController(Protocol):
    """Setter contract the joint loader depends on."""

    def set_joint_type(self, joint: int, joint_type: JointType) -> bool: ...

    def set_units(self, joint: int, units: float) -> bool: ...

    def set_backlash(self, joint: int, backlash: float) -> bool: ...

    def set_min_position_limit(self, joint: int, limit: float) -> bool: ...

    def set_max_position_limit(self, joint: int, limit: float) -> bool: ...

    def set_ferror(self, joint: int, ferror: float) -> bool: ...

    def set_min_ferror(self, joint: int, ferror: float) -> bool: ...

    def set_homing_params(
        self,
        joint: int,
        home: float,
        offset: float,
        home_vel: float,
        search_vel: float,
        latch_vel: float,
        use_index: bool,
        ignore_limits: bool,
        is_shared: bool,
        sequence: int,
        volatile_home: int,
    ) -> bool: ...

    def set_max_velocity(self, joint: int, vel: float) -> bool: ...

    def set_max_acceleration(self, joint: int, acc: float) -> bool: ...

    def load_compensation(self, joint: int, path: str, file_type: int) -> bool: ...

    def activate(self, joint: int) -> bool: ...


# ---------------------------------------------------------------------------
# In-memory controller
# ---------------------------------------------------------------------------


@dataclass
class JointState:
    """Values held by the controller for one joint."""

    joint_type: JointType | None = None
    units: float | None = None
    backlash: float | None = None
    min_limit: float | None = None
    max_limit: float | None = None
    ferror: float | None = None
    min_ferror: float | None = None
    homing: dict[str, Any] = field(default_factory=dict)
    max_velocity: float | None = None
    max_acceleration: float | None = None
    comp_table: CompTable | None = None
    active: bool = False


class InMemoryJointController:
    """Controller that stores joint state in memory.

    Parameters
    ----------
    max_joints : int
        Number of joint slots; setters for other indices fail.
    comp_dir : str | Path | None
        Directory relative compensation paths are resolved against
        (usually the machine file's directory).
    reject : Iterable[str]
        Setter names that always report failure.

    Examples
    --------
    >>> ctrl = InMemoryJointController()
    >>> ctrl.set_units(0, 1.0)
    True
    >>> ctrl.joints[0].units
    1.0
    """

    def __init__(
        self,
        max_joints: int = MAX_JOINTS,
        comp_dir: str | Path | None = None,
        reject: Iterable[str] = (),
    ) -> None:
        self.max_joints = max_joints
        self.comp_dir = comp_dir
        self.reject = set(reject)
        self.joints: dict[int, JointState] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def __repr__(self) -> str:
        return (
            f"InMemoryJointController(max_joints={self.max_joints}, "
            f"joints={sorted(self.joints)})"
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _state(self, setter: str, joint: int, *args: Any) -> JointState | None:
        """Record the call and return the joint's state, or ``None`` to fail."""
        self.calls.append((setter, (joint, *args)))
        if setter in self.reject:
            logger.warning("%s rejected for joint %d", setter, joint)
            return None
        if not 0 <= joint < self.max_joints:
            logger.warning(
                "%s: joint %d outside [0, %d)", setter, joint, self.max_joints,
            )
            return None
        return self.joints.setdefault(joint, JointState())

    def call_names(self) -> list[str]:
        """Setter names in call order."""
        return [name for name, _ in self.calls]

    def is_active(self, joint: int) -> bool:
        state = self.joints.get(joint)
        return state is not None and state.active

    # ------------------------------------------------------------------
    # JointController
    # ------------------------------------------------------------------

    def set_joint_type(self, joint: int, joint_type: JointType) -> bool:
        state = self._state("set_joint_type", joint, joint_type)
        if state is None:
            return False
        state.joint_type = joint_type
        return True

    def set_units(self, joint: int, units: float) -> bool:
        state = self._state("set_units", joint, units)
        if state is None:
            return False
        if units <= 0.0:
            logger.warning("set_units: joint %d units %g not positive", joint, units)
            return False
        state.units = units
        return True

    def set_backlash(self, joint: int, backlash: float) -> bool:
        state = self._state("set_backlash", joint, backlash)
        if state is None:
            return False
        state.backlash = backlash
        return True

    def set_min_position_limit(self, joint: int, limit: float) -> bool:
        state = self._state("set_min_position_limit", joint, limit)
        if state is None:
            return False
        state.min_limit = limit
        return True

    def set_max_position_limit(self, joint: int, limit: float) -> bool:
        state = self._state("set_max_position_limit", joint, limit)
        if state is None:
            return False
        state.max_limit = limit
        return True

    def set_ferror(self, joint: int, ferror: float) -> bool:
        state = self._state("set_ferror", joint, ferror)
        if state is None:
            return False
        state.ferror = ferror
        return True

    def set_min_ferror(self, joint: int, ferror: float) -> bool:
        state = self._state("set_min_ferror", joint, ferror)
        if state is None:
            return False
        state.min_ferror = ferror
        return True

    def set_homing_params(
        self,
        joint: int,
        home: float,
        offset: float,
        home_vel: float,
        search_vel: float,
        latch_vel: float,
        use_index: bool,
        ignore_limits: bool,
        is_shared: bool,
        sequence: int,
        volatile_home: int,
    ) -> bool:
        state = self._state(
            "set_homing_params", joint, home, offset, home_vel, search_vel,
            latch_vel, use_index, ignore_limits, is_shared, sequence,
            volatile_home,
        )
        if state is None:
            return False
        state.homing = {
            "home": home,
            "offset": offset,
            "home_vel": home_vel,
            "search_vel": search_vel,
            "latch_vel": latch_vel,
            "use_index": use_index,
            "ignore_limits": ignore_limits,
            "is_shared": is_shared,
            "sequence": sequence,
            "volatile_home": volatile_home,
        }
        return True

    def set_max_velocity(self, joint: int, vel: float) -> bool:
        state = self._state("set_max_velocity", joint, vel)
        if state is None:
            return False
        state.max_velocity = max(vel, 0.0)
        return True

    def set_max_acceleration(self, joint: int, acc: float) -> bool:
        state = self._state("set_max_acceleration", joint, acc)
        if state is None:
            return False
        state.max_acceleration = max(acc, 0.0)
        return True

    def load_compensation(self, joint: int, path: str, file_type: int) -> bool:
        state = self._state("load_compensation", joint, path, file_type)
        if state is None:
            return False
        try:
            state.comp_table = load_comp_table(
                resolve_path(path, self.comp_dir), file_type,
            )
        except CompFileError as exc:
            logger.error("Joint %d compensation: %s", joint, exc)
            return False
        return True

    def activate(self, joint: int) -> bool:
        state = self._state("activate", joint)
        if state is None:
            return False
        state.active = True
        return True

    def deactivate(self, joint: int) -> bool:
        state = self._state("deactivate", joint)
        if state is None:
            return False
        state.active = False
        return True
