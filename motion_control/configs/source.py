"""Section-keyed configuration sources.

A :class:`ConfigSource` answers ``key`` + ``section`` lookups over a
parsed machine document.  Two document formats are supported:

* INI -- the native ``[SECTION]`` / ``KEY = value`` machine files, read
  with :mod:`configparser`.
* YAML -- a mapping of section names to key/value mappings, read with
  PyYAML.

Lookups distinguish *absent* from *malformed*: ``find_*`` methods return
their default when the key is missing and raise
:class:`~motion_control.configs.errors.ConversionError` when a value is
present but cannot be converted.

Usage::

    from motion_control.configs.source import open_config_source
    src = open_config_source("machine.ini")
    axes = src.require_int("AXES", "TRAJ")
    vel = src.find_float("MAX_VELOCITY", "JOINT_0", default=1.0)
"""

from __future__ import annotations

import configparser
import logging
from pathlib import Path
from typing import Any, Callable, Mapping, TypeVar

import yaml

from motion_control.configs.errors import (
    ConversionError,
    MissingKeyError,
    SourceOpenError,
)
from motion_control.configs.units import (
    JointType,
    to_angular_units,
    to_bool,
    to_float,
    to_int,
    to_joint_type,
    to_linear_units,
)
from motion_control.utils.fs import load_yaml

logger = logging.getLogger(__name__)

T = TypeVar("T")

YAML_SUFFIXES = (".yaml", ".yml")


# ---------------------------------------------------------------------------
# Base source
# ---------------------------------------------------------------------------


class ConfigSource:
    """Lookup interface over ``{section: {key: raw_value}}``.

    Parameters
    ----------
    sections : Mapping[str, Mapping[str, Any]]
        Parsed document.  Section and key names are case-sensitive.
    path : Path | None
        Where the document was read from, for diagnostics.
    """

    def __init__(
        self,
        sections: Mapping[str, Mapping[str, Any]],
        path: Path | None = None,
    ) -> None:
        self._sections = {
            str(name): dict(values) for name, values in sections.items()
        }
        self.path = path

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(path={self.path}, "
            f"sections={list(self._sections)})"
        )

    # ------------------------------------------------------------------
    # Raw access
    # ------------------------------------------------------------------

    def sections(self) -> list[str]:
        """Section names in document order."""
        return list(self._sections)

    def has_section(self, section: str) -> bool:
        return section in self._sections

    def get(self, key: str, section: str) -> Any | None:
        """Return the raw value, or ``None`` when absent."""
        return self._sections.get(section, {}).get(key)

    def find(self, key: str, section: str) -> str | None:
        """Return the value as a string, or ``None`` when absent."""
        raw = self.get(key, section)
        if raw is None:
            return None
        return str(raw).strip()

    # ------------------------------------------------------------------
    # Typed access
    # ------------------------------------------------------------------

    def _convert(
        self,
        key: str,
        section: str,
        default: T,
        convert: Callable[[Any], T],
        expected: str,
    ) -> T:
        raw = self.get(key, section)
        if raw is None:
            return default
        try:
            return convert(raw)
        except ValueError as exc:
            logger.error(
                "Bad value for [%s]%s in %s: %s",
                section, key, self.path or "<memory>", exc,
            )
            raise ConversionError(key, section, raw, expected) from exc

    def find_float(self, key: str, section: str, default: float) -> float:
        return self._convert(key, section, default, to_float, "float")

    def find_int(self, key: str, section: str, default: int) -> int:
        return self._convert(key, section, default, to_int, "integer")

    def find_bool(self, key: str, section: str, default: bool) -> bool:
        return self._convert(key, section, default, to_bool, "boolean")

    def find_joint_type(
        self, key: str, section: str, default: JointType,
    ) -> JointType:
        return self._convert(
            key, section, default, to_joint_type, "joint type",
        )

    def find_linear_units(
        self, key: str, section: str, default: float,
    ) -> float:
        """Numeric value or linear unit name (``mm``, ``inch``...)."""
        return self._convert(
            key, section, default, to_linear_units, "linear unit",
        )

    def find_angular_units(
        self, key: str, section: str, default: float,
    ) -> float:
        """Numeric value or angular unit name (``deg``, ``rad``...)."""
        return self._convert(
            key, section, default, to_angular_units, "angular unit",
        )

    def require_int(self, key: str, section: str) -> int:
        """Mandatory integer lookup; absence raises ``MissingKeyError``."""
        if self.get(key, section) is None:
            logger.error(
                "Required key [%s]%s missing in %s",
                section, key, self.path or "<memory>",
            )
            raise MissingKeyError(key, section)
        return self.find_int(key, section, 0)


# ---------------------------------------------------------------------------
# Concrete sources
# ---------------------------------------------------------------------------


class IniConfigSource(ConfigSource):
    """Source backed by an INI machine file."""

    @classmethod
    def from_string(
        cls, text: str, path: Path | None = None,
    ) -> IniConfigSource:
        parser = configparser.ConfigParser(
            interpolation=None,
            strict=False,
            comment_prefixes=("#", ";"),
            default_section="\x00",
        )
        parser.optionxform = str  # keys are case-sensitive
        try:
            parser.read_string(text, source=str(path or "<string>"))
        except configparser.Error as exc:
            raise SourceOpenError(str(path or "<string>"), str(exc)) from exc
        sections = {name: dict(parser.items(name)) for name in parser.sections()}
        return cls(sections, path)

    @classmethod
    def from_file(cls, path: str | Path) -> IniConfigSource:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceOpenError(str(path), str(exc)) from exc
        return cls.from_string(text, path)


class YamlConfigSource(ConfigSource):
    """Source backed by a YAML document of section mappings."""

    @classmethod
    def from_file(cls, path: str | Path) -> YamlConfigSource:
        path = Path(path)
        try:
            data = load_yaml(path)
        except (OSError, yaml.YAMLError) as exc:
            raise SourceOpenError(str(path), str(exc)) from exc

        for name, values in data.items():
            if values is None:
                data[name] = {}  # bare "JOINT_0:" is an empty section
            elif not isinstance(values, dict):
                raise SourceOpenError(
                    str(path),
                    f"section '{name}' must be a mapping, "
                    f"got {type(values).__name__}",
                )
        return cls(data, path)


def open_config_source(path: str | Path) -> ConfigSource:
    """Open a machine document, choosing the reader by file suffix.

    Raises
    ------
    SourceOpenError
        If the file does not exist or cannot be parsed.
    """
    path = Path(path)
    if not path.is_file():
        raise SourceOpenError(str(path), "file not found")

    logger.info("Reading machine configuration from %s", path)
    if path.suffix.lower() in YAML_SUFFIXES:
        return YamlConfigSource.from_file(path)
    return IniConfigSource.from_file(path)
