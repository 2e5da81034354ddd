"""Artifact cleanup and toolchain installation for multi-module WASM workspaces."""

__version__ = "2.0.0"
