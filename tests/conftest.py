"""Shared fixtures for wasm-manager tests."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

import pytest

from wasm_manager.runner import CommandResult


class FakeRunner:
    """In-memory CommandRunner that records every invocation."""

    def __init__(
        self,
        executables: set[str] | None = None,
        outputs: dict[str, str] | None = None,
        failures: dict[tuple[str, ...], int] | None = None,
    ) -> None:
        self.executables = set(executables or ())
        self.outputs = dict(outputs or {})
        self.failures = dict(failures or {})
        self.calls: list[tuple[str, ...]] = []

    def which(self, name: str) -> str | None:
        return f"/usr/bin/{name}" if name in self.executables else None

    def run(self, argv: Sequence[str], *, capture: bool = False) -> CommandResult:
        argv = tuple(argv)
        self.calls.append(argv)

        if argv in self.failures:
            return CommandResult(argv=argv, returncode=self.failures[argv], stderr="E: failed\n")

        executable = argv[1] if argv[0] == "sudo" else argv[0]
        if executable not in self.executables:
            raise FileNotFoundError(2, "No such file or directory", executable)

        return CommandResult(argv=argv, returncode=0, stdout=self.outputs.get(argv[0], ""))

    def install_calls(self) -> list[tuple[str, ...]]:
        """Calls other than version checks."""
        return [call for call in self.calls if "--version" not in call]


@pytest.fixture
def logger() -> logging.Logger:
    """Create a test logger."""
    return logging.getLogger("test-wasm-manager")


def _make_module(root: Path, name: str, *, entry_point: bool = True, manifest: bool = True) -> Path:
    module = root / name
    module.mkdir(parents=True, exist_ok=True)
    if entry_point:
        (module / "main.go").write_text("package main\n")
    if manifest:
        (module / "go.mod").write_text(f"module {name}\n")
    return module


@pytest.fixture
def make_module():
    """Factory that creates a module directory with the requested marker files."""
    return _make_module


@pytest.fixture
def make_runner():
    """Factory for FakeRunner instances."""
    return FakeRunner
