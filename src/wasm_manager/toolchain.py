"""Static tables of toolchain tools and per-platform install commands.

Dispatch is table-driven: each (package, OS profile) pair maps to one or more
alternative install commands, and the first alternative whose package manager
is on PATH is used.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .errors import DependencyMissingError
from .osdetect import OSProfile


@dataclass(frozen=True)
class ToolSpec:
    """An external executable reported by the installation check."""

    display_name: str
    command: str
    version_args: tuple[str, ...] = ("--version",)

    @property
    def argv(self) -> tuple[str, ...]:
        """Command line that prints the tool's version."""
        return (self.command, *self.version_args)


TOOL_SPECS: tuple[ToolSpec, ...] = (
    ToolSpec("wasm-opt", "wasm-opt"),
    ToolSpec("wasm2wat", "wasm2wat"),
    ToolSpec("wat2wasm", "wat2wasm"),
    ToolSpec("gzip", "gzip"),
    ToolSpec("brotli", "brotli"),
    ToolSpec("base64", "base64"),
)


@dataclass(frozen=True)
class Component:
    """A toolchain piece installed from a single package."""

    package: str
    title: str
    provides: tuple[str, ...]
    manual_url: str | None = None


OPTIMIZER = Component(
    package="binaryen",
    title="Binaryen (wasm-opt)",
    provides=("wasm-opt",),
    manual_url="https://github.com/WebAssembly/binaryen/releases",
)
BINARY_TOOLKIT = Component(
    package="wabt",
    title="WABT (WebAssembly Binary Toolkit)",
    provides=("wasm2wat", "wat2wasm"),
    manual_url="https://github.com/WebAssembly/wabt/releases",
)
COMPRESSION_TOOLS: tuple[Component, ...] = (
    Component(package="gzip", title="gzip", provides=("gzip",)),
    Component(
        package="brotli",
        title="brotli",
        provides=("brotli",),
        manual_url="https://github.com/google/brotli/releases",
    ),
)


@dataclass(frozen=True)
class InstallCommand:
    """One package-manager invocation, optionally preceded by an index refresh."""

    manager: str
    args: tuple[str, ...]
    privileged: bool = True
    refresh: tuple[str, ...] | None = None

    def _prefixed(self, argv: tuple[str, ...], use_sudo: bool) -> tuple[str, ...]:
        if self.privileged and use_sudo:
            return ("sudo", *argv)
        return argv

    def argv(self, *, use_sudo: bool = True) -> tuple[str, ...]:
        """Full install command line."""
        return self._prefixed((self.manager, *self.args), use_sudo)

    def refresh_argv(self, *, use_sudo: bool = True) -> tuple[str, ...] | None:
        """Index refresh command line, if this manager needs one first."""
        if self.refresh is None:
            return None
        return self._prefixed((self.manager, *self.refresh), use_sudo)


def _apt(package: str, *, refresh: bool = False) -> tuple[InstallCommand, ...]:
    # apt-get is the fallback on hosts that ship only the low-level frontend
    update = ("update",) if refresh else None
    return (
        InstallCommand("apt", ("install", "-y", package), refresh=update),
        InstallCommand("apt-get", ("install", "-y", package), refresh=update),
    )


def _dnf_or_yum(package: str) -> tuple[InstallCommand, ...]:
    return (
        InstallCommand("dnf", ("install", "-y", package)),
        InstallCommand("yum", ("install", "-y", package)),
    )


def _pacman(package: str) -> InstallCommand:
    return InstallCommand("pacman", ("-S", "--noconfirm", package))


def _brew(package: str) -> InstallCommand:
    return InstallCommand("brew", ("install", package), privileged=False)


INSTALL_RECIPES: dict[tuple[str, OSProfile], tuple[InstallCommand, ...]] = {
    ("binaryen", OSProfile.UBUNTU): _apt("binaryen", refresh=True),
    ("binaryen", OSProfile.RHEL): _dnf_or_yum("binaryen"),
    ("binaryen", OSProfile.ARCH): (_pacman("binaryen"),),
    ("binaryen", OSProfile.MACOS): (_brew("binaryen"),),
    ("wabt", OSProfile.UBUNTU): _apt("wabt"),
    ("wabt", OSProfile.MACOS): (_brew("wabt"),),
    ("gzip", OSProfile.UBUNTU): _apt("gzip"),
    ("gzip", OSProfile.RHEL): _dnf_or_yum("gzip"),
    ("brotli", OSProfile.UBUNTU): _apt("brotli"),
    ("brotli", OSProfile.RHEL): _dnf_or_yum("brotli"),
    ("brotli", OSProfile.MACOS): (_brew("brotli"),),
}

_MANAGER_NAMES = {
    "apt": "apt",
    "apt-get": "apt-get",
    "dnf": "dnf",
    "yum": "yum",
    "pacman": "pacman",
    "brew": "Homebrew",
}

_PROFILE_NAMES = {
    OSProfile.UBUNTU: "Ubuntu/Debian",
    OSProfile.RHEL: "RHEL/CentOS/Fedora",
    OSProfile.ARCH: "Arch Linux",
    OSProfile.MACOS: "macOS",
}


def select_install_command(
    package: str,
    profile: OSProfile,
    which: Callable[[str], str | None],
) -> InstallCommand | None:
    """Pick the install command for a package on a platform.

    Args:
        package: Package name, e.g. ``"binaryen"``.
        profile: Detected OS profile.
        which: PATH lookup used to check for package managers.

    Returns:
        The first alternative whose manager is on PATH, or None if the
        platform has no recipe for this package.

    Raises:
        DependencyMissingError: If recipes exist but none of their package
            managers is installed.

    """
    alternatives = INSTALL_RECIPES.get((package, profile))
    if not alternatives:
        return None

    for command in alternatives:
        if which(command.manager):
            return command

    managers = " or ".join(_MANAGER_NAMES.get(c.manager, c.manager) for c in alternatives)
    platform_name = _PROFILE_NAMES.get(profile, str(profile))
    raise DependencyMissingError(
        f"{managers} is required for {platform_name} installation of {package}. Please install it first"
    )
