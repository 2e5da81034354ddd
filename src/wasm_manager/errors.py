"""Exception hierarchy for wasm-manager."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class WasmManagerError(Exception):
    """Base class for all wasm-manager errors."""


class DiscoveryError(WasmManagerError):
    """The scan root could not be read while discovering modules."""

    def __init__(self, root: Path, reason: str) -> None:
        self.root = root
        self.reason = reason
        super().__init__(f"Failed to discover modules in {root}: {reason}")


class ModuleDirectoryNotFoundError(WasmManagerError):
    """A named module has no directory under the scan root."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Module directory {path} not found")


class ArtifactDeletionError(WasmManagerError):
    """A matched artifact could not be removed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to remove {path}: {reason}")


class DependencyMissingError(WasmManagerError):
    """A package manager required on this platform is not on PATH."""


class InstallCommandError(WasmManagerError):
    """A package-manager command exited with a non-zero status."""

    def __init__(self, argv: Sequence[str], returncode: int, detail: str | None = None) -> None:
        self.argv = tuple(argv)
        self.returncode = returncode
        self.detail = detail
        message = f"Command failed with exit code {returncode}: {' '.join(self.argv)}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ConfigError(WasmManagerError):
    """The configuration file holds a value of the wrong shape."""
