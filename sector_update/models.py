"""Domain models for the sector updater."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePath, PurePosixPath
from typing import Any, Mapping

from .exceptions import ConfigurationError

_REQUIRED_FIELDS = ("fir", "package_name", "es_path", "asr_path", "navdata_path", "prf_prefix")


@dataclass(slots=True, frozen=True)
class ConfigEntry:
    """One FIR to update: where to find its package and where to install it."""

    fir: str
    package_name: str
    es_path: Path
    asr_path: str
    navdata_path: str
    prf_prefix: str

    def __post_init__(self) -> None:
        for name in ("fir", "package_name", "prf_prefix"):
            if not str(getattr(self, name)).strip():
                raise ConfigurationError(f"'{name}' cannot be empty", config_key=name)
        for name in ("asr_path", "navdata_path"):
            value = getattr(self, name)
            if PurePath(value).anchor:
                raise ConfigurationError(
                    f"'{name}' must be relative, got '{value}'", config_key=name
                )
            if ".." in PurePosixPath(value.replace("\\", "/")).parts:
                raise ConfigurationError(
                    f"'{name}' must stay inside its folder, got '{value}'",
                    config_key=name,
                )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ConfigEntry":
        """Build an entry from one object of the entries file."""
        missing = [key for key in _REQUIRED_FIELDS if key not in data]
        if missing:
            raise ConfigurationError(
                f"Entry is missing field(s): {', '.join(missing)}",
                config_key=missing[0],
            )
        if not str(data["es_path"]).strip():
            raise ConfigurationError("'es_path' cannot be empty", config_key="es_path")
        return cls(
            fir=str(data["fir"]),
            package_name=str(data["package_name"]),
            es_path=Path(str(data["es_path"])),
            asr_path=str(data["asr_path"]),
            navdata_path=str(data["navdata_path"]),
            prf_prefix=str(data["prf_prefix"]),
        )

    @property
    def asr_dir(self) -> Path:
        """Folder holding this FIR's radar-screen files."""
        return self.es_path / self.asr_path / self.fir


__all__ = ["ConfigEntry"]
