"""Loader defaults injected into every joint load.

The fallback values that do not come from a joint's own section --
trajectory units and the machine-wide velocity / acceleration caps --
are carried by a :class:`LoaderDefaults` model instead of process-wide
constants.  They can be validated from a YAML file and refined from the
``[TRAJ]`` section of the machine document being loaded.

Usage::

    from motion_control.configs.defaults import load_defaults
    defaults = load_defaults()                    # shipped defaults.yaml
    defaults = LoaderDefaults.from_source(src, defaults)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from motion_control.configs.errors import JointConfigError
from motion_control.configs.source import ConfigSource
from motion_control.utils.fs import load_yaml

logger = logging.getLogger(__name__)

TRAJ_SECTION = "TRAJ"

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"


class LoaderDefaults(BaseModel):
    """Fallbacks for values a joint section does not set.

    Units are *machine units per mm* (linear) and *per degree* (angular).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    linear_units: float = Field(1.0, gt=0.0, description="Trajectory linear units")
    angular_units: float = Field(1.0, gt=0.0, description="Trajectory angular units")
    max_velocity: float = Field(1.0, gt=0.0, description="Joint max velocity fallback")
    max_acceleration: float = Field(1.0, gt=0.0, description="Joint max acceleration fallback")

    @classmethod
    def from_source(
        cls,
        source: ConfigSource,
        base: Optional[LoaderDefaults] = None,
    ) -> LoaderDefaults:
        """Overlay ``[TRAJ] LINEAR_UNITS`` / ``ANGULAR_UNITS`` on *base*.

        Raises
        ------
        ConversionError
            If either unit value is present but malformed.
        JointConfigError
            If a unit value is not strictly positive.
        """
        base = base or cls()
        linear = source.find_linear_units(
            "LINEAR_UNITS", TRAJ_SECTION, base.linear_units,
        )
        angular = source.find_angular_units(
            "ANGULAR_UNITS", TRAJ_SECTION, base.angular_units,
        )
        try:
            return cls.model_validate(
                base.model_dump()
                | {"linear_units": linear, "angular_units": angular}
            )
        except ValidationError as exc:
            raise JointConfigError(
                f"Invalid [{TRAJ_SECTION}] units: {exc}"
            ) from exc


def load_defaults(path: str | Path | None = None) -> LoaderDefaults:
    """Load and validate loader defaults from YAML.

    Parameters
    ----------
    path : str | Path | None
        Defaults file.  ``None`` loads ``defaults.yaml`` shipped
        alongside this module.

    Raises
    ------
    JointConfigError
        If the file is missing, unparsable, or fails validation.
    """
    path = DEFAULTS_PATH if path is None else Path(path)
    logger.info("Loading loader defaults from %s", path)

    try:
        data = load_yaml(path)
    except (OSError, yaml.YAMLError) as exc:
        raise JointConfigError(f"Cannot read defaults {path}: {exc}") from exc

    try:
        return LoaderDefaults.model_validate(data)
    except ValidationError as exc:
        raise JointConfigError(f"Invalid defaults in {path}: {exc}") from exc
