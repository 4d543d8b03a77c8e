"""Joint configuration loader.

Resolves the ``[JOINT_<n>]`` section of a machine document into typed
values and applies them to a :class:`JointController` in a fixed order:

    type → units → backlash → min/max limit → ferror → min ferror →
    homing params → max velocity → max acceleration → compensation →
    activate

Every value has a default, so a missing key is never an error; a
present value that does not convert raises
:class:`~motion_control.configs.errors.ConversionError`.  A setter that
reports failure raises
:class:`~motion_control.configs.errors.ControllerRejection`.  Either
aborts the load immediately: later setters are not called, setters
already applied are not rolled back, and the joint is never activated.
Activation is always the last call of a successful load.

Usage::

    from motion_control.joints.loader import configure_joint
    params = configure_joint(0, "machine.ini", controller)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from motion_control.configs.defaults import TRAJ_SECTION, LoaderDefaults
from motion_control.configs.errors import (
    ControllerRejection,
    JointConfigError,
    JointRangeError,
)
from motion_control.configs.source import ConfigSource, open_config_source
from motion_control.configs.units import JointType
from motion_control.hardware.controller import JointController
from motion_control.joints.params import (
    HOME_VEL_RAPID,
    MAX_LIMIT_DEFAULT,
    MIN_LIMIT_DEFAULT,
    NO_HOME_SEQUENCE,
    HomingParams,
    JointParameters,
    joint_section,
)
from motion_control.utils.logging_config import log_context

logger = logging.getLogger(__name__)

AXES_KEY = "AXES"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _apply(controller: JointController, setter: str, joint: int, *args: Any) -> None:
    """Call ``controller.<setter>(joint, *args)``; raise on a falsy result."""
    if not getattr(controller, setter)(joint, *args):
        logger.error("Bad return from %s", setter)
        raise ControllerRejection(joint, setter)
    logger.debug("%s%r", setter, args)


def _resolve_homing(source: ConfigSource, section: str) -> HomingParams:
    return HomingParams(
        home=source.find_float("HOME", section, 0.0),
        offset=source.find_float("HOME_OFFSET", section, 0.0),
        home_vel=source.find_float("HOME_VEL", section, HOME_VEL_RAPID),
        search_vel=source.find_float("HOME_SEARCH_VEL", section, 0.0),
        latch_vel=source.find_float("HOME_LATCH_VEL", section, 0.0),
        use_index=source.find_bool("HOME_USE_INDEX", section, False),
        ignore_limits=source.find_bool("HOME_IGNORE_LIMITS", section, False),
        is_shared=source.find_bool("HOME_IS_SHARED", section, False),
        sequence=source.find_int("HOME_SEQUENCE", section, NO_HOME_SEQUENCE),
        volatile_home=source.find_int("VOLATILE_HOME", section, 0),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_joint(
    joint: int,
    source: ConfigSource,
    controller: JointController,
    defaults: LoaderDefaults | None = None,
) -> JointParameters:
    """Resolve joint *joint* from *source* and apply it to *controller*.

    Parameters
    ----------
    joint : int
        Zero-based joint index (section ``JOINT_<joint>``).
    source : ConfigSource
        Open machine document.
    controller : JointController
        Sink for the resolved values.
    defaults : LoaderDefaults | None
        Trajectory units and velocity / acceleration fallbacks.
        ``None`` uses :class:`LoaderDefaults` built-ins.

    Returns
    -------
    JointParameters
        The values applied, after the joint was activated.

    Raises
    ------
    ConversionError
        A present value could not be converted.
    ControllerRejection
        A controller setter reported failure.
    """
    defaults = defaults or LoaderDefaults()
    section = joint_section(joint)

    with log_context(joint=joint):
        logger.debug("Loading [%s]", section)

        # -- type -----------------------------------------------------------
        joint_type = source.find_joint_type("TYPE", section, JointType.LINEAR)
        _apply(controller, "set_joint_type", joint, joint_type)

        # -- units (default depends on type) --------------------------------
        if joint_type is JointType.LINEAR:
            units = source.find_linear_units(
                "UNITS", section, defaults.linear_units,
            )
        else:
            units = source.find_angular_units(
                "UNITS", section, defaults.angular_units,
            )
        _apply(controller, "set_units", joint, units)

        # -- backlash -------------------------------------------------------
        backlash = source.find_float("BACKLASH", section, 0.0)
        _apply(controller, "set_backlash", joint, backlash)

        # -- soft limits ----------------------------------------------------
        min_limit = source.find_float("MIN_LIMIT", section, MIN_LIMIT_DEFAULT)
        _apply(controller, "set_min_position_limit", joint, min_limit)

        max_limit = source.find_float("MAX_LIMIT", section, MAX_LIMIT_DEFAULT)
        _apply(controller, "set_max_position_limit", joint, max_limit)

        # -- following error (MIN_FERROR falls back to FERROR) --------------
        ferror = source.find_float("FERROR", section, 1.0)
        _apply(controller, "set_ferror", joint, ferror)

        min_ferror = source.find_float("MIN_FERROR", section, ferror)
        _apply(controller, "set_min_ferror", joint, min_ferror)

        # -- homing ---------------------------------------------------------
        homing = _resolve_homing(source, section)
        _apply(
            controller, "set_homing_params", joint,
            homing.home, homing.offset, homing.home_vel,
            homing.search_vel, homing.latch_vel,
            homing.use_index, homing.ignore_limits, homing.is_shared,
            homing.sequence, homing.volatile_home,
        )

        # -- velocity / acceleration caps -----------------------------------
        max_velocity = source.find_float(
            "MAX_VELOCITY", section, defaults.max_velocity,
        )
        _apply(controller, "set_max_velocity", joint, max_velocity)

        max_acceleration = source.find_float(
            "MAX_ACCELERATION", section, defaults.max_acceleration,
        )
        _apply(controller, "set_max_acceleration", joint, max_acceleration)

        # -- compensation (optional) ----------------------------------------
        comp_file_type = source.find_int("COMP_FILE_TYPE", section, 0)
        comp_file = source.find("COMP_FILE", section)
        if comp_file:
            _apply(controller, "load_compensation", joint, comp_file, comp_file_type)

        # -- activate last so a half-configured joint is never live ---------
        _apply(controller, "activate", joint)
        logger.info("Joint %d configured (%s)", joint, joint_type.value)

    return JointParameters(
        joint=joint,
        joint_type=joint_type,
        units=units,
        backlash=backlash,
        min_limit=min_limit,
        max_limit=max_limit,
        ferror=ferror,
        min_ferror=min_ferror,
        homing=homing,
        max_velocity=max_velocity,
        max_acceleration=max_acceleration,
        comp_file_type=comp_file_type,
        comp_file=comp_file,
    )


def read_axes(source: ConfigSource) -> int:
    """Return the mandatory ``[TRAJ] AXES`` joint count."""
    return source.require_int(AXES_KEY, TRAJ_SECTION)


def configure_joint(
    joint: int,
    path: str | Path,
    controller: JointController,
    defaults: LoaderDefaults | None = None,
) -> JointParameters:
    """Open *path*, bounds-check *joint* and load it.

    ``[TRAJ] LINEAR_UNITS`` / ``ANGULAR_UNITS`` from the document
    override the unit fallbacks in *defaults*.

    Raises
    ------
    SourceOpenError
        The document cannot be opened.
    MissingKeyError
        ``[TRAJ] AXES`` is absent.
    JointRangeError
        *joint* is outside ``[0, AXES)``; no setter is called.
    ConversionError, ControllerRejection
        Propagated from :func:`load_joint`.
    """
    source = open_config_source(path)
    axes = read_axes(source)
    if not 0 <= joint < axes:
        logger.error("Joint %d exceeds machine size (%d joints)", joint, axes)
        raise JointRangeError(joint, axes)

    defaults = LoaderDefaults.from_source(source, defaults)
    return load_joint(joint, source, controller, defaults)


def configure_all_joints(
    path: str | Path,
    controller: JointController,
    defaults: LoaderDefaults | None = None,
) -> list[JointParameters]:
    """Load joints ``0 .. AXES-1`` in order, stopping at the first failure."""
    source = open_config_source(path)
    axes = read_axes(source)
    defaults = LoaderDefaults.from_source(source, defaults)

    logger.info("Configuring %d joint(s) from %s", axes, path)
    return [load_joint(joint, source, controller, defaults) for joint in range(axes)]


def ini_joint(
    joint: int,
    path: str | Path,
    controller: JointController,
    defaults: LoaderDefaults | None = None,
) -> int:
    """Return-code wrapper around :func:`configure_joint`.

    Returns
    -------
    int
        ``0`` on success, ``-1`` on any configuration error (logged).
    """
    try:
        configure_joint(joint, path, controller, defaults)
    except JointConfigError as exc:
        logger.error("Joint %d not configured: %s", joint, exc)
        return -1
    return 0
