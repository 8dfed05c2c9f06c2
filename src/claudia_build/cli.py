"""
Command-line interface for claudia-build.

This module provides the `claudia-build` CLI tool for building Claudia
release binaries, installer bundles and archives.
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from . import __version__
from .build import ReleasePipeline
from .cli_utils import ErrorFormatter, PathValidator
from .config import load_project_config, parse_timeout
from .errors import ClaudiaBuildError, ConfigError
from .log_utils import setup_logging
from .packages.platform_matrix import COMMAND_ALIASES

PIPELINE_COMMANDS = set(COMMAND_ALIASES) | {"all", "bundles", "clean"}
HELP_COMMANDS = {"help"}

USAGE_EPILOG = """\
Commands:
  linux            Build for Linux x86_64
  windows          Build for Windows x86_64
  macos            Build for macOS x86_64
  macos-arm        Build for macOS ARM64
  macos-universal  Build universal macOS binary (Intel + ARM)
  all              Build for all platforms the host can target
  bundles          Build installer bundles for the host platform
  clean            Remove previous build output
  help             Show this help message

Examples:
  claudia-build linux                   # Build Linux binary
  claudia-build all                     # Build all platform binaries
  claudia-build bundles                 # Build with installer bundles
  claudia-build clean && claudia-build all
"""


@dataclass
class PipelineArgs:
    """Arguments shared by the pipeline commands."""

    command: str
    project_dir: Path
    config: Optional[Path] = None
    timeout: Optional[float] = None
    log_file: Optional[Path] = None
    progress: bool = True
    verbose: bool = False


def timeout_argument(value: str) -> Optional[float]:
    """argparse type for --timeout: a positive number of seconds."""
    try:
        return parse_timeout(value, "--timeout")
    except ConfigError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="claudia-build",
        description="claudia-build - Cross-platform release builds for Claudia",
        epilog=USAGE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"claudia-build {__version__}",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default=None,
        help="Command to run (see below)",
    )
    parser.add_argument(
        "-C",
        "--project-dir",
        type=Path,
        default=Path.cwd(),
        help="Project root directory (default: current directory)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Configuration file (default: <project>/claudia-build.ini if present)",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=timeout_argument,
        default=None,
        help="Timeout in seconds for each external command (default: no timeout)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a detailed log to this file",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress bars",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output (including external command lines)",
    )
    return parser


def run_pipeline_command(args: PipelineArgs) -> int:
    """Run one pipeline command.

    Returns:
        Process exit code
    """
    print(f"claudia-build v{__version__}")
    print()

    try:
        config = load_project_config(args.project_dir, args.config)
        if args.timeout is not None:
            config.command_timeout = args.timeout

        pipeline = ReleasePipeline(config, show_progress=args.progress)

        if args.command == "clean":
            pipeline.clean()
        elif args.command == "all":
            pipeline.build_all()
        elif args.command == "bundles":
            pipeline.build_bundles()
        else:
            platform_name = COMMAND_ALIASES[args.command]
            archive = pipeline.build_platform(platform_name)
            logging.info(f"Release archive: {archive.archive_path}")
        return 0

    except ClaudiaBuildError as e:
        return ErrorFormatter.handle_pipeline_error(e)
    except KeyboardInterrupt:
        return ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        return ErrorFormatter.handle_unexpected_error(e, args.verbose)


def main(argv: Optional[List[str]] = None) -> None:
    """claudia-build - Cross-platform release builds for Claudia."""
    parser = build_parser()
    parsed_args = parser.parse_args(argv)

    command = parsed_args.command
    if command is None or command in HELP_COMMANDS:
        parser.print_help()
        sys.exit(0)

    if command not in PIPELINE_COMMANDS:
        print(f"[ERROR] Unknown command: {command}")
        print()
        parser.print_help()
        sys.exit(1)

    PathValidator.validate_project_dir(parsed_args.project_dir)

    setup_logging(verbose=parsed_args.verbose, log_file=parsed_args.log_file)

    pipeline_args = PipelineArgs(
        command=command,
        project_dir=parsed_args.project_dir,
        config=parsed_args.config,
        timeout=parsed_args.timeout,
        log_file=parsed_args.log_file,
        progress=not parsed_args.no_progress and sys.stdout.isatty(),
        verbose=parsed_args.verbose,
    )
    sys.exit(run_pipeline_command(pipeline_args))


if __name__ == "__main__":
    main()
