"""CLI utility functions for claudia-build.

This module provides common utilities used by the CLI including:
- Naming the pipeline stage an error came from
- Error reporting through leveled log output
- Project directory validation
"""

import logging
import sys
import traceback
from pathlib import Path

from .errors import (
    ArtifactNotFoundError,
    ConfigError,
    ExternalToolError,
    FileOperationError,
    MissingDependencyError,
    NotFoundError,
    PrerequisiteMissingError,
    UnknownPlatformError,
    ValidationError,
)

STAGE_NAMES = (
    (MissingDependencyError, "Dependency check"),
    (ValidationError, "Icon validation"),
    (NotFoundError, "Icon validation"),
    (ConfigError, "Configuration"),
    (UnknownPlatformError, "Target resolution"),
    (ArtifactNotFoundError, "Build"),
    (PrerequisiteMissingError, "Archive"),
    (FileOperationError, "File operation"),
    (ExternalToolError, "External command"),
)


def stage_name(error: BaseException) -> str:
    """Name the pipeline stage an error belongs to."""
    for error_type, name in STAGE_NAMES:
        if isinstance(error, error_type):
            return name
    return "Build"


class ErrorFormatter:
    """Reports failures as [ERROR] log lines and picks exit codes."""

    @staticmethod
    def report_error(title: str, message: str) -> None:
        """Log a multi-line error; the first line carries the title.

        Args:
            title: Error title (e.g. "Icon validation failed")
            message: Error details, possibly spanning several lines
        """
        lines = message.splitlines() or [""]
        logging.error(f"{title}: {lines[0]}" if lines[0] else title)
        for line in lines[1:]:
            logging.error(line)

    @staticmethod
    def handle_pipeline_error(error: Exception) -> int:
        """Report a pipeline error.

        Returns:
            Exit code 1
        """
        ErrorFormatter.report_error(f"{stage_name(error)} failed", str(error))
        return 1

    @staticmethod
    def handle_keyboard_interrupt() -> int:
        """Report an interrupted run.

        Returns:
            Exit code 130 (standard exit code for SIGINT)
        """
        logging.warning("Build interrupted; run 'claudia-build clean' to remove partial output")
        return 130

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> int:
        """Report an unexpected error, with traceback in verbose mode.

        Returns:
            Exit code 1
        """
        ErrorFormatter.report_error("Unexpected error", f"{type(error).__name__}: {error}")
        if verbose:
            logging.error("Traceback:\n" + traceback.format_exc())
        return 1


class PathValidator:
    """Validates project paths and directories."""

    @staticmethod
    def validate_project_dir(project_dir: Path) -> None:
        """Validate that project directory exists and is a directory.

        Args:
            project_dir: Path to validate

        Raises:
            SystemExit: If path doesn't exist or isn't a directory
        """
        if not project_dir.exists():
            print(f"[ERROR] Path does not exist: {project_dir}", file=sys.stderr)
            sys.exit(1)
        if not project_dir.is_dir():
            print(f"[ERROR] Path is not a directory: {project_dir}", file=sys.stderr)
            sys.exit(1)
