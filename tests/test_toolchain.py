"""Tests for the tool table and install command dispatch."""

from __future__ import annotations

import pytest

from wasm_manager.errors import DependencyMissingError
from wasm_manager.osdetect import OSProfile
from wasm_manager.toolchain import (
    INSTALL_RECIPES,
    TOOL_SPECS,
    InstallCommand,
    select_install_command,
)


def _which_from(*names: str):
    available = set(names)
    return lambda name: f"/usr/bin/{name}" if name in available else None


class TestToolSpecs:
    """Tests for the static tool table."""

    def test_six_known_tools(self) -> None:
        """The check covers exactly the six toolchain tools, in order."""
        assert [spec.display_name for spec in TOOL_SPECS] == [
            "wasm-opt",
            "wasm2wat",
            "wat2wasm",
            "gzip",
            "brotli",
            "base64",
        ]

    def test_version_argv(self) -> None:
        """Every tool is checked with --version."""
        for spec in TOOL_SPECS:
            assert spec.argv == (spec.command, "--version")


class TestInstallCommand:
    """Tests for InstallCommand argv construction."""

    def test_privileged_uses_sudo(self) -> None:
        """Privileged commands are prefixed with sudo."""
        command = InstallCommand("apt", ("install", "-y", "wabt"))
        assert command.argv() == ("sudo", "apt", "install", "-y", "wabt")

    def test_sudo_disabled(self) -> None:
        """use_sudo=False drops the prefix."""
        command = InstallCommand("apt", ("install", "-y", "wabt"))
        assert command.argv(use_sudo=False) == ("apt", "install", "-y", "wabt")

    def test_brew_never_uses_sudo(self) -> None:
        """Homebrew runs unprivileged."""
        command = select_install_command("binaryen", OSProfile.MACOS, _which_from("brew"))
        assert command is not None
        assert command.argv() == ("brew", "install", "binaryen")

    def test_refresh_argv(self) -> None:
        """The Ubuntu optimizer recipe refreshes the package index first."""
        command = select_install_command("binaryen", OSProfile.UBUNTU, _which_from("apt"))
        assert command is not None
        assert command.refresh_argv() == ("sudo", "apt", "update")
        assert command.argv() == ("sudo", "apt", "install", "-y", "binaryen")

    def test_refresh_argv_apt_get_fallback(self) -> None:
        """Without apt, the optimizer recipe refreshes and installs with apt-get."""
        command = select_install_command("binaryen", OSProfile.UBUNTU, _which_from("apt-get"))
        assert command is not None
        assert command.refresh_argv() == ("sudo", "apt-get", "update")
        assert command.argv() == ("sudo", "apt-get", "install", "-y", "binaryen")

    def test_no_refresh(self) -> None:
        """Most recipes have no refresh step."""
        assert InstallCommand("pacman", ("-S", "--noconfirm", "binaryen")).refresh_argv() is None


class TestSelectInstallCommand:
    """Tests for select_install_command."""

    @pytest.mark.parametrize(
        "package,profile,managers,expected",
        [
            ("binaryen", OSProfile.RHEL, ("dnf", "yum"), ("sudo", "dnf", "install", "-y", "binaryen")),
            ("binaryen", OSProfile.RHEL, ("yum",), ("sudo", "yum", "install", "-y", "binaryen")),
            ("binaryen", OSProfile.ARCH, ("pacman",), ("sudo", "pacman", "-S", "--noconfirm", "binaryen")),
            ("wabt", OSProfile.UBUNTU, ("apt",), ("sudo", "apt", "install", "-y", "wabt")),
            ("wabt", OSProfile.UBUNTU, ("apt-get",), ("sudo", "apt-get", "install", "-y", "wabt")),
            ("gzip", OSProfile.UBUNTU, ("apt-get", "apt"), ("sudo", "apt", "install", "-y", "gzip")),
            ("wabt", OSProfile.MACOS, ("brew",), ("brew", "install", "wabt")),
            ("brotli", OSProfile.MACOS, ("brew",), ("brew", "install", "brotli")),
            ("gzip", OSProfile.RHEL, ("dnf",), ("sudo", "dnf", "install", "-y", "gzip")),
        ],
    )
    def test_dispatch(
        self,
        package: str,
        profile: OSProfile,
        managers: tuple[str, ...],
        expected: tuple[str, ...],
    ) -> None:
        """Each (package, profile) resolves to its canonical command."""
        command = select_install_command(package, profile, _which_from(*managers))
        assert command is not None
        assert command.argv() == expected

    @pytest.mark.parametrize(
        "package,profile",
        [
            ("binaryen", OSProfile.WINDOWS),
            ("binaryen", OSProfile.LINUX),
            ("binaryen", OSProfile.UNKNOWN),
            ("wabt", OSProfile.RHEL),
            ("wabt", OSProfile.ARCH),
            ("gzip", OSProfile.MACOS),
        ],
    )
    def test_unsupported_returns_none(self, package: str, profile: OSProfile) -> None:
        """Profiles without a recipe yield None rather than an error."""
        assert select_install_command(package, profile, _which_from()) is None

    def test_missing_homebrew(self) -> None:
        """macOS without brew is a hard error."""
        with pytest.raises(DependencyMissingError, match="Homebrew is required"):
            select_install_command("binaryen", OSProfile.MACOS, _which_from())

    def test_missing_rhel_managers(self) -> None:
        """The error names every acceptable manager."""
        with pytest.raises(DependencyMissingError, match="dnf or yum"):
            select_install_command("binaryen", OSProfile.RHEL, _which_from())

    def test_missing_ubuntu_managers(self) -> None:
        """Ubuntu without apt or apt-get names both."""
        with pytest.raises(DependencyMissingError, match="apt or apt-get is required"):
            select_install_command("wabt", OSProfile.UBUNTU, _which_from())

    def test_recipes_reference_known_profiles(self) -> None:
        """Every recipe has at least one alternative."""
        for (package, profile), alternatives in INSTALL_RECIPES.items():
            assert alternatives, (package, profile)
            assert isinstance(profile, OSProfile)
