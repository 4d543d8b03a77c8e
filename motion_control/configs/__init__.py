"""Machine document access, value conversion, and loader defaults."""

from motion_control.configs.defaults import LoaderDefaults, load_defaults
from motion_control.configs.errors import (
    ControllerRejection,
    ConversionError,
    JointConfigError,
    JointRangeError,
    MissingKeyError,
    SourceOpenError,
)
from motion_control.configs.source import (
    ConfigSource,
    IniConfigSource,
    YamlConfigSource,
    open_config_source,
)
from motion_control.configs.units import JointType

__all__ = [
    "ConfigSource",
    "ControllerRejection",
    "ConversionError",
    "IniConfigSource",
    "JointConfigError",
    "JointRangeError",
    "JointType",
    "LoaderDefaults",
    "MissingKeyError",
    "SourceOpenError",
    "YamlConfigSource",
    "load_defaults",
    "open_config_source",
]
