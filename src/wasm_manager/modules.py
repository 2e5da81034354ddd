"""Discovery of WebAssembly module directories."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .errors import DiscoveryError

# Marker files that identify a module directory
ENTRY_POINT_FILENAME = "main.go"
MANIFEST_FILENAME = "go.mod"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModuleDescriptor:
    """A directory under the scan root that builds one WASM module."""

    name: str
    path: Path


def is_module_dir(path: Path) -> bool:
    """Check whether a directory directly contains both marker files.

    Args:
        path: Directory to check.

    Returns:
        True if the directory qualifies as a module.

    """
    if not path.is_dir():
        return False
    return (path / ENTRY_POINT_FILENAME).is_file() and (path / MANIFEST_FILENAME).is_file()


def discover_modules(root: Path) -> list[ModuleDescriptor]:
    """List module directories that are immediate children of root.

    Args:
        root: Scan root.

    Returns:
        Descriptors sorted by directory name.

    Raises:
        DiscoveryError: If root cannot be listed.

    """
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise DiscoveryError(root, e.strerror or str(e)) from e

    modules: list[ModuleDescriptor] = []
    for entry in entries:
        try:
            qualifies = is_module_dir(entry)
        except PermissionError:
            logger.debug("Permission denied checking: %s", entry)
            continue
        if qualifies:
            modules.append(ModuleDescriptor(name=entry.name, path=entry))

    return modules
