"""Configuration management for wasm-manager."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".wasm-manager.yaml"

_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})


def parse_bool(value: Any, default: bool) -> bool:
    """Interpret a YAML scalar as a boolean.

    Args:
        value: Raw value from the config file.
        default: Returned when value is None.

    Returns:
        Parsed boolean.

    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    return str(value).strip().lower() in _TRUE_STRINGS


def parse_patterns(value: Any) -> list[str]:
    """Interpret a YAML value as a list of glob patterns.

    A single string is one pattern. Empty entries and the ``.``/``..``
    directory names are dropped.

    Args:
        value: Raw value from the config file.

    Returns:
        Glob patterns in file order.

    Raises:
        ConfigError: If the value is neither a string nor a list.

    """
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    elif not isinstance(value, (list, tuple)):
        raise ConfigError(f"extra_patterns must be a string or a list, not {type(value).__name__}")

    patterns: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ConfigError(f"extra_patterns entries must be strings, not {type(item).__name__}")
        pattern = item.strip()
        if pattern and pattern not in (".", ".."):
            patterns.append(pattern)
    return patterns


@dataclass(frozen=True)
class CleanConfig:
    """Settings for a single clean operation."""

    include_temp: bool = False
    include_cache: bool = False
    verbose: bool = False
    # Extra glob patterns appended to the built-in artifact set
    extra_patterns: tuple[str, ...] = ()

    @property
    def extended(self) -> bool:
        """Whether temp files and build caches are also removed."""
        return self.include_temp or self.include_cache


@dataclass(frozen=True)
class InstallConfig:
    """Settings for a single install-tools run."""

    check_only: bool = False
    binaryen_only: bool = False
    wabt_only: bool = False
    force: bool = False
    verbose: bool = False
    use_sudo: bool = True


@dataclass
class ManagerConfig:
    """Persistent wasm-manager settings read from YAML."""

    # Directory that holds the module directories
    root: Path = field(default_factory=lambda: Path("."))
    verbose: bool = False

    # Clean settings
    extra_patterns: list[str] = field(default_factory=list)

    # Install settings
    use_sudo: bool = True

    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the configuration file path.

        A file in the working directory takes precedence over the one in the
        home directory. When neither exists the working-directory path is
        returned so that ``config --init`` creates it there.

        """
        local = Path.cwd() / CONFIG_FILENAME
        if local.exists():
            return local

        home = Path.home() / CONFIG_FILENAME
        if home.exists():
            return home

        return local

    @classmethod
    def load(cls, config_path: Path | None = None) -> ManagerConfig:
        """Load configuration from YAML file.

        Args:
            config_path: Path to config file. Uses default if None.

        Returns:
            Loaded configuration.

        """
        if config_path is None:
            config_path = cls.get_config_path()

        if not config_path.exists():
            return cls()

        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> ManagerConfig:
        """Create config from dictionary."""
        config = cls()

        if "root" in data:
            config.root = Path(os.path.expanduser(str(data["root"])))
        config.verbose = parse_bool(data.get("verbose"), config.verbose)

        clean = data.get("clean") or {}
        if "extra_patterns" in clean:
            config.extra_patterns = parse_patterns(clean["extra_patterns"])

        install = data.get("install") or {}
        config.use_sudo = parse_bool(install.get("use_sudo"), config.use_sudo)

        logging_cfg = data.get("logging") or {}
        if "level" in logging_cfg:
            config.log_level = str(logging_cfg["level"]).upper()
        if logging_cfg.get("file"):
            config.log_file = Path(os.path.expanduser(str(logging_cfg["file"])))

        return config

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path to save config. Uses default if None.

        """
        if config_path is None:
            config_path = self.get_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        logging_cfg: dict[str, Any] = {"level": self.log_level}
        if self.log_file is not None:
            logging_cfg["file"] = str(self.log_file)

        data = {
            "root": str(self.root),
            "verbose": self.verbose,
            "clean": {
                "extra_patterns": list(self.extra_patterns),
            },
            "install": {
                "use_sudo": self.use_sudo,
            },
            "logging": logging_cfg,
        }

        with config_path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def clean_config(self, *, include_all: bool = False, cache: bool = False, verbose: bool = False) -> CleanConfig:
        """Build the settings for one clean run from CLI flags and file values."""
        return CleanConfig(
            include_temp=include_all,
            include_cache=include_all or cache,
            verbose=verbose or self.verbose,
            extra_patterns=tuple(self.extra_patterns),
        )

    def install_config(
        self,
        *,
        check_only: bool = False,
        binaryen_only: bool = False,
        wabt_only: bool = False,
        force: bool = False,
        verbose: bool = False,
        no_sudo: bool = False,
    ) -> InstallConfig:
        """Build the settings for one install-tools run from CLI flags and file values."""
        return InstallConfig(
            check_only=check_only,
            binaryen_only=binaryen_only,
            wabt_only=wabt_only,
            force=force,
            verbose=verbose or self.verbose,
            use_sudo=self.use_sudo and not no_sudo,
        )
