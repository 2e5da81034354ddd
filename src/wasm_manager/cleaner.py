"""Removal of generated build artifacts from module directories."""

from __future__ import annotations

import errno
import logging
import shutil
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import ArtifactDeletionError, ModuleDirectoryNotFoundError
from .modules import discover_modules

if TYPE_CHECKING:
    from .config import CleanConfig


# Compiled binaries, compressed variants, integrity manifests and backups
BASE_PATTERNS: tuple[str, ...] = (
    "*.wasm",
    "*.wasm.gz",
    "*.wasm.br",
    "*.wasm.integrity",
    "*.backup",
)

# Temp files and the build cache directory
EXTENDED_PATTERNS: tuple[str, ...] = (
    "*.tmp",
    "*.temp",
    ".build",
)

# Directories removed with their contents; other matched directories are kept
CACHE_DIRECTORIES = frozenset({".build"})


@dataclass
class ModuleCleanResult:
    """Outcome of cleaning a single module."""

    module: str
    path: Path
    found: bool
    removed: list[Path] = field(default_factory=list)
    failed: list[ArtifactDeletionError] = field(default_factory=list)
    error: ModuleDirectoryNotFoundError | None = None


class ArtifactCleaner:
    """Deletes build artifacts across module directories, best-effort."""

    def __init__(self, config: CleanConfig, logger: logging.Logger, root: Path | None = None) -> None:
        """Initialize the cleaner.

        Args:
            config: Clean configuration.
            logger: Logger instance.
            root: Directory holding the modules. Defaults to the working directory.

        """
        self.config = config
        self.logger = logger
        self.root = root if root is not None else Path(".")

    @property
    def patterns(self) -> tuple[str, ...]:
        """Glob patterns matched inside each module directory."""
        patterns = BASE_PATTERNS
        if self.config.extended:
            patterns += EXTENDED_PATTERNS
        return patterns + tuple(self.config.extra_patterns)

    def _report(self, message: str, *args: object) -> None:
        level = logging.INFO if self.config.verbose else logging.DEBUG
        self.logger.log(level, message, *args)

    def clean(self, module_names: Sequence[str] = ()) -> int:
        """Clean the named modules, or every discovered module if none are named.

        Args:
            module_names: Module directory names relative to the root.

        Returns:
            Number of modules whose directory was found and processed.

        Raises:
            DiscoveryError: If no names were given and the root cannot be read.

        """
        names = list(module_names)
        if not names:
            names = [module.name for module in discover_modules(self.root)]
            self.logger.debug("Discovered %d modules in %s", len(names), self.root)

        cleaned = 0
        for name in names:
            result = self.clean_module(name)
            if result.found:
                cleaned += 1
                self._report("Cleaned %s", name)
            else:
                self._report("Failed to clean %s: %s", name, result.error)

        return cleaned

    def clean_module(self, name: str) -> ModuleCleanResult:
        """Remove every artifact matching the active patterns from one module.

        Args:
            name: Module directory name relative to the root.

        Returns:
            ModuleCleanResult with removed paths and per-file failures.

        """
        module_path = self.root / name

        if not module_path.is_dir():
            return ModuleCleanResult(
                module=name,
                path=module_path,
                found=False,
                error=ModuleDirectoryNotFoundError(module_path),
            )

        result = ModuleCleanResult(module=name, path=module_path, found=True)

        for pattern in self.patterns:
            for match in sorted(module_path.glob(pattern)):
                try:
                    self._remove(match)
                except OSError as e:
                    failure = ArtifactDeletionError(match, e.strerror or str(e))
                    result.failed.append(failure)
                    self._report("%s", failure)
                    continue

                result.removed.append(match)
                self._report("Removed %s", match)

        return result

    @staticmethod
    def _remove(path: Path) -> None:
        """Delete a file or symlink, or the build cache directory.

        Raises:
            IsADirectoryError: If the path is any other directory.

        """
        if path.is_dir() and not path.is_symlink():
            if path.name not in CACHE_DIRECTORIES:
                raise IsADirectoryError(errno.EISDIR, "Is a directory", str(path))
            shutil.rmtree(path)
        else:
            path.unlink()
