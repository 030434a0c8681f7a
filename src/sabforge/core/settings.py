"""
Loader settings.

Settings come from keyword arguments, a JSON/YAML file, or the
environment (``SABFORGE_DATA``, ``SABFORGE_TOLERANCE``,
``SABFORGE_LOG_LEVEL``). The CLI layers them in that order of precedence:
command line, settings file, environment, defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from sabforge.core.constants import DEFAULT_TEMPERATURE_TOLERANCE
from sabforge.io.artifacts import read_artifact

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class LoaderSettings:
    """Options applied when loading thermal scattering tables.

    Attributes
    ----------
    temperature_tolerance : float
        Maximum distance in K between a requested and a stored temperature
    data_path : Path or None
        Default HDF5 library file (or directory of files)
    log_level : str
        Logging level name used by the command-line tool
    warn_missing_elastic : bool
        Emit a MissingOptionalSectionWarning when a temperature has no
        elastic data
    """

    temperature_tolerance: float = DEFAULT_TEMPERATURE_TOLERANCE
    data_path: Optional[Path] = None
    log_level: str = "WARNING"
    warn_missing_elastic: bool = True

    def __post_init__(self):
        if self.temperature_tolerance < 0:
            raise ValueError(
                f"temperature_tolerance must be non-negative, got {self.temperature_tolerance}"
            )
        if not isinstance(self.log_level, str) or self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level '{self.log_level}'")
        object.__setattr__(self, "log_level", self.log_level.upper())
        if self.data_path is not None and not isinstance(self.data_path, (str, os.PathLike)):
            raise ValueError(f"data_path must be a path, got {self.data_path!r}")
        if self.data_path is not None and not isinstance(self.data_path, Path):
            object.__setattr__(self, "data_path", Path(self.data_path))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "LoaderSettings":
        """Build settings from a mapping, rejecting unknown keys.

        Keys with a None value (an empty entry in a YAML file) keep their
        default.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(unknown)}")
        kwargs: Dict[str, Any] = {k: v for k, v in values.items() if v is not None}
        if "temperature_tolerance" in kwargs:
            try:
                kwargs["temperature_tolerance"] = float(kwargs["temperature_tolerance"])
            except (TypeError, ValueError):
                raise ValueError(
                    f"temperature_tolerance must be a number, got {kwargs['temperature_tolerance']!r}"
                ) from None
        if "warn_missing_elastic" in kwargs:
            kwargs["warn_missing_elastic"] = bool(kwargs["warn_missing_elastic"])
        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "LoaderSettings":
        """Read settings from a JSON or YAML file."""
        return cls.from_mapping(read_artifact(Path(path)))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LoaderSettings":
        """Read settings from SABFORGE_* environment variables."""
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        if env.get("SABFORGE_DATA"):
            values["data_path"] = Path(env["SABFORGE_DATA"])
        if env.get("SABFORGE_TOLERANCE"):
            values["temperature_tolerance"] = float(env["SABFORGE_TOLERANCE"])
        if env.get("SABFORGE_LOG_LEVEL"):
            values["log_level"] = env["SABFORGE_LOG_LEVEL"]
        return cls.from_mapping(values)

    def merged(self, **overrides: Any) -> "LoaderSettings":
        """Return a copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)
