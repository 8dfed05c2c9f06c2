"""Exception types raised by the release pipeline.

Errors are split by who is allowed to recover from them:

- Setup errors (MissingDependencyError, ValidationError, NotFoundError,
  ConfigError) abort the whole invocation.
- Target errors (UnknownPlatformError, ExternalToolError,
  ArtifactNotFoundError, PrerequisiteMissingError,
  FileOperationError) abort one target.
- MetadataQueryError is always recovered inside the archiver.
"""

from pathlib import Path
from typing import Optional, Sequence


class ClaudiaBuildError(Exception):
    """Base exception for all release pipeline errors."""

    pass


class ConfigError(ClaudiaBuildError):
    """Raised when the project configuration is invalid."""

    pass


class MissingDependencyError(ClaudiaBuildError):
    """Raised when a required external tool is not on the search path."""

    def __init__(self, tool_name: str, install_url: Optional[str] = None):
        self.tool_name = tool_name
        self.install_url = install_url
        message = f"{tool_name} is not installed"
        if install_url:
            message += f". Please install it: {install_url}"
        super().__init__(message)


class UnknownPlatformError(ClaudiaBuildError):
    """Raised when a platform name is not part of the target matrix."""

    def __init__(self, name: str, available: Sequence[str] = ()):
        self.name = name
        message = f"Unknown platform: {name}"
        if available:
            message += f" (available: {', '.join(available)})"
        super().__init__(message)


class ValidationError(ClaudiaBuildError):
    """Raised when a resource file fails signature validation."""

    pass


class NotFoundError(ClaudiaBuildError, FileNotFoundError):
    """Raised when a file to validate does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"File not found: {path}")

    def __str__(self) -> str:
        return f"File not found: {self.path}"


class ExternalToolError(ClaudiaBuildError):
    """Raised when an external command fails or cannot be started."""

    def __init__(self, command: Sequence[str], returncode: Optional[int], detail: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.detail = detail
        tool = self.command[0] if self.command else "<empty>"
        if returncode is None:
            message = f"{tool} failed: {detail}" if detail else f"{tool} failed"
        else:
            message = f"{tool} exited with code {returncode}"
            if detail:
                message += f": {detail}"
        super().__init__(message)


class ArtifactNotFoundError(ClaudiaBuildError):
    """Raised when a build reports success but its output is missing."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Binary not found: {path}")


class FileOperationError(ClaudiaBuildError):
    """Raised when staging or archiving a target hits a filesystem error."""

    def __init__(self, operation: str, error: OSError):
        self.operation = operation
        self.os_error = error
        super().__init__(f"{operation} failed: {error}")


class PrerequisiteMissingError(ClaudiaBuildError):
    """Raised when archiving is attempted without its inputs."""

    pass


class MetadataQueryError(ClaudiaBuildError):
    """Raised when a version-control metadata query fails."""

    pass
