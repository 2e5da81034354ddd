"""Host operating system detection."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

# Linux package managers in lookup order
_LINUX_MANAGERS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("apt-get",), "ubuntu"),
    (("yum", "dnf"), "rhel"),
    (("pacman",), "arch"),
)

_WINDOWS_PREFIXES = ("windows", "cygwin", "msys", "mingw")


class OSProfile(Enum):
    """Operating system category used to select package-manager commands."""

    UBUNTU = "ubuntu"  # Debian family, apt
    RHEL = "rhel"  # RHEL/CentOS/Fedora, dnf or yum
    ARCH = "arch"  # pacman
    MACOS = "macos"  # Homebrew
    WINDOWS = "windows"
    LINUX = "linux"  # Linux without a recognised package manager
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


def detect_os_profile(system: str, which: Callable[[str], str | None]) -> OSProfile:
    """Map a host identifier and the executables on PATH to a profile.

    Args:
        system: Host OS identifier as reported by ``platform.system()``.
        which: PATH lookup returning the executable path or None.

    Returns:
        Detected OS profile.

    """
    name = system.strip().lower()

    if name == "linux":
        for commands, profile in _LINUX_MANAGERS:
            if any(which(command) for command in commands):
                return OSProfile(profile)
        return OSProfile.LINUX

    if name == "darwin":
        return OSProfile.MACOS

    if name.startswith(_WINDOWS_PREFIXES):
        return OSProfile.WINDOWS

    return OSProfile.UNKNOWN
