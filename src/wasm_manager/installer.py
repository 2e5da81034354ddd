"""Detection and installation of the WASM optimization toolchain."""

from __future__ import annotations

import logging
import platform
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import InstallCommandError
from .osdetect import OSProfile, detect_os_profile
from .runner import CommandRunner, SubprocessRunner
from .toolchain import (
    BINARY_TOOLKIT,
    COMPRESSION_TOOLS,
    OPTIMIZER,
    TOOL_SPECS,
    Component,
    ToolSpec,
    select_install_command,
)

if TYPE_CHECKING:
    from .config import InstallConfig


@dataclass
class ToolStatus:
    """Presence and version of one toolchain tool."""

    spec: ToolSpec
    installed: bool
    version: str | None = None


class ToolInstaller:
    """Installs missing toolchain tools with the host's package manager."""

    def __init__(
        self,
        config: InstallConfig,
        logger: logging.Logger,
        runner: CommandRunner | None = None,
        system: str | None = None,
    ) -> None:
        """Initialize the installer.

        Args:
            config: Install configuration.
            logger: Logger instance.
            runner: Command runner. Defaults to real subprocesses.
            system: Host OS identifier. Defaults to ``platform.system()``.

        """
        self.config = config
        self.logger = logger
        self.runner = runner if runner is not None else SubprocessRunner()
        self.system = system if system is not None else platform.system()
        self._profile: OSProfile | None = None

    def detect_os(self) -> OSProfile:
        """Detect the OS profile once and reuse it for the rest of the run."""
        if self._profile is None:
            self._profile = detect_os_profile(self.system, self.runner.which)
        return self._profile

    def check_installations(self) -> list[ToolStatus]:
        """Report which toolchain tools are installed.

        This is a reporting operation: missing tools are logged, never raised.

        Returns:
            One ToolStatus per known tool, in table order.

        """
        self.logger.info("Checking tool installations...")

        statuses = [self._check_tool(spec) for spec in TOOL_SPECS]
        for status in statuses:
            label = f"{status.spec.display_name}:"
            if status.installed:
                self.logger.info("%-10s %s", label, status.version)
            else:
                self.logger.warning("%-10s not installed", label)

        if all(status.installed for status in statuses):
            self.logger.info("All tools are installed")
        else:
            self.logger.warning("Some tools are missing. Run without --check to install them.")

        return statuses

    def _check_tool(self, spec: ToolSpec) -> ToolStatus:
        try:
            result = self.runner.run(spec.argv, capture=True)
        except (subprocess.SubprocessError, OSError):
            return ToolStatus(spec=spec, installed=False)

        if not result.ok:
            return ToolStatus(spec=spec, installed=False)

        lines = result.stdout.strip().splitlines()
        version = lines[0].strip() if lines else "unknown"
        return ToolStatus(spec=spec, installed=True, version=version)

    def install_tools(self) -> list[ToolStatus]:
        """Install the optimizer, binary toolkit and compression tools.

        Phases run in that fixed order and stop at the first failure.

        Returns:
            Final installation report.

        Raises:
            DependencyMissingError: If a required package manager is absent.
            InstallCommandError: If a package-manager command fails.

        """
        if self.config.check_only:
            return self.check_installations()

        profile = self.detect_os()
        self.logger.info("Installing WASM optimization tools...")
        self.logger.info("Detected OS: %s", profile)

        phases: list[Callable[[OSProfile], None]] = []
        if not self.config.wabt_only:
            phases.append(self.install_optimizer)
        if not self.config.binaryen_only:
            phases.append(self.install_binary_toolkit)
        phases.append(self.install_compression_tools)

        for phase in phases:
            phase(profile)

        self.logger.info("Installation completed")
        return self.check_installations()

    def install_optimizer(self, profile: OSProfile) -> None:
        """Install Binaryen, which provides wasm-opt."""
        self._install_component(OPTIMIZER, profile, force=self.config.force)

    def install_binary_toolkit(self, profile: OSProfile) -> None:
        """Install WABT, which provides wasm2wat and wat2wasm."""
        self._install_component(BINARY_TOOLKIT, profile, force=self.config.force)

    def install_compression_tools(self, profile: OSProfile) -> None:
        """Install gzip and brotli when they are not already on PATH."""
        self.logger.info("Checking compression tools...")
        for component in COMPRESSION_TOOLS:
            self._install_component(component, profile, force=False)

    def _install_component(self, component: Component, profile: OSProfile, *, force: bool) -> None:
        if not force and all(self.runner.which(tool) for tool in component.provides):
            self._report("%s is already installed", component.title)
            return

        self.logger.info("Installing %s...", component.title)

        command = select_install_command(component.package, profile, self.runner.which)
        if command is None:
            self.logger.warning("Automatic installation of %s is not supported on %s.", component.title, profile)
            if component.manual_url:
                self.logger.warning("Please install it manually from: %s", component.manual_url)
            else:
                self.logger.warning("Please install %s with your system package manager.", component.package)
            return

        refresh = command.refresh_argv(use_sudo=self.config.use_sudo)
        if refresh is not None:
            self._run(refresh)
        self._run(command.argv(use_sudo=self.config.use_sudo))

    def _run(self, argv: Sequence[str]) -> None:
        self._report("Running: %s", " ".join(argv))

        try:
            result = self.runner.run(argv, capture=not self.config.verbose)
        except (subprocess.SubprocessError, OSError) as e:
            raise InstallCommandError(argv, 127, getattr(e, "strerror", None) or str(e)) from e

        if not result.ok:
            detail = result.stderr.strip().splitlines()[-1] if result.stderr.strip() else None
            raise InstallCommandError(argv, result.returncode, detail)

    def _report(self, message: str, *args: object) -> None:
        level = logging.INFO if self.config.verbose else logging.DEBUG
        self.logger.log(level, message, *args)
