"""Main entry point for wasm-manager."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .cleaner import ArtifactCleaner
from .config import ManagerConfig
from .errors import WasmManagerError
from .installer import ToolInstaller, ToolStatus

LOGGER_NAME = "wasm-manager"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse. Uses ``sys.argv`` if None.

    Returns:
        Parsed arguments.

    """
    parser = argparse.ArgumentParser(
        prog="wasm-manager",
        description="Manage build artifacts and the toolchain of WASM modules",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    clean_parser = subparsers.add_parser("clean", help="Clean build artifacts")
    clean_parser.add_argument(
        "modules",
        nargs="*",
        help="Modules to clean (default: every discovered module)",
    )
    clean_parser.add_argument(
        "--all",
        action="store_true",
        dest="clean_all",
        help="Clean all artifacts including temp files and caches",
    )
    clean_parser.add_argument(
        "--cache",
        action="store_true",
        help="Also clean build caches",
    )

    install_parser = subparsers.add_parser("install-tools", help="Install WASM optimization tools")
    install_parser.add_argument(
        "--check",
        action="store_true",
        help="Check existing installations",
    )
    install_parser.add_argument(
        "--binaryen",
        action="store_true",
        help="Install only Binaryen",
    )
    install_parser.add_argument(
        "--wabt",
        action="store_true",
        help="Install only WABT",
    )
    install_parser.add_argument(
        "--force",
        action="store_true",
        help="Force reinstallation",
    )
    install_parser.add_argument(
        "--no-sudo",
        action="store_true",
        help="Run package managers without sudo",
    )

    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_parser.add_argument(
        "--init",
        action="store_true",
        help="Create default configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        help="Show current configuration",
    )

    return parser.parse_args(argv)


def setup_logging(config: ManagerConfig, console: Console) -> logging.Logger:
    """Set up the wasm-manager logger.

    Returns:
        Configured logger instance.

    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, config.log_level, logging.INFO))

    # Clear existing handlers to avoid duplicates when main() runs twice
    if logger.handlers:
        logger.handlers.clear()

    console_handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
    )
    logger.addHandler(console_handler)

    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def cmd_clean(config: ManagerConfig, args: argparse.Namespace, console: Console, logger: logging.Logger) -> int:
    """Execute clean command.

    Returns:
        Exit code.

    """
    clean_config = config.clean_config(
        include_all=args.clean_all,
        cache=args.cache,
        verbose=args.verbose,
    )
    cleaner = ArtifactCleaner(clean_config, logger, root=config.root)
    cleaned = cleaner.clean(args.modules)

    console.print(f"[green]Cleaned {cleaned} modules[/green]")
    return 0


def render_statuses(statuses: list[ToolStatus], console: Console) -> None:
    """Print an installation report as a table."""
    table = Table(title="Tool installations")
    table.add_column("Tool", style="cyan")
    table.add_column("Status")
    table.add_column("Version", style="dim")

    for status in statuses:
        if status.installed:
            table.add_row(status.spec.display_name, "[green]installed[/green]", status.version or "")
        else:
            table.add_row(status.spec.display_name, "[red]missing[/red]", "")

    console.print(table)


def cmd_install(config: ManagerConfig, args: argparse.Namespace, console: Console, logger: logging.Logger) -> int:
    """Execute install-tools command.

    Returns:
        Exit code.

    """
    install_config = config.install_config(
        check_only=args.check,
        binaryen_only=args.binaryen,
        wabt_only=args.wabt,
        force=args.force,
        verbose=args.verbose,
        no_sudo=args.no_sudo,
    )
    installer = ToolInstaller(install_config, logger)

    if install_config.check_only:
        statuses = installer.check_installations()
    else:
        statuses = installer.install_tools()

    render_statuses(statuses, console)
    return 0


def cmd_config(config: ManagerConfig, args: argparse.Namespace, console: Console) -> int:
    """Execute config command.

    Returns:
        Exit code.

    """
    if args.init:
        config_path = args.config or ManagerConfig.get_config_path()
        if config_path.exists():
            console.print(f"[yellow]Config already exists: {config_path}[/yellow]")
            return 1
        config.save(config_path)
        console.print(f"[green]Created config: {config_path}[/green]")
        return 0

    if args.show:
        table = Table(title="Current Configuration")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Root", str(config.root))
        table.add_row("Verbose", str(config.verbose))
        table.add_row("Extra clean patterns", "\n".join(config.extra_patterns) or "-")
        table.add_row("Use sudo", str(config.use_sudo))
        table.add_row("Log level", config.log_level)
        table.add_row("Log file", str(config.log_file) if config.log_file else "-")

        console.print(table)
        return 0

    console.print("[yellow]Use --init or --show[/yellow]")
    return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code.

    """
    args = parse_args(argv)
    console = Console()

    try:
        config = ManagerConfig.load(args.config)
    except WasmManagerError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    logger = setup_logging(config, console)

    command = args.command
    if command is None:
        console.print("[yellow]Use one of: clean, install-tools, config[/yellow]")
        return 1

    try:
        if command == "clean":
            return cmd_clean(config, args, console, logger)
        elif command == "install-tools":
            return cmd_install(config, args, console, logger)
        elif command == "config":
            return cmd_config(config, args, console)
    except WasmManagerError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    console.print(f"Unknown command: {command}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
