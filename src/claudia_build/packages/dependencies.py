"""External Tool Dependency Checks.

This module verifies that the command-line tools the pipeline drives are
installed before any build work begins.
"""

import logging
import shutil
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from ..errors import MissingDependencyError
from ..log_utils import log_success

INSTALL_URLS: Dict[str, str] = {
    "cargo": "https://rustup.rs/",
    "rustup": "https://rustup.rs/",
    "bun": "https://bun.sh/",
    "git": "https://git-scm.com/downloads",
    "lipo": "https://developer.apple.com/xcode/resources/",
}


class ToolProbe(ABC):
    """Interface for answering 'is this tool available?'."""

    @abstractmethod
    def is_available(self, tool_name: str) -> bool:
        """Check whether a tool can be executed.

        Args:
            tool_name: Executable name (e.g. 'cargo')

        Returns:
            True if the tool is available
        """
        pass


class PathToolProbe(ToolProbe):
    """Looks tools up on the executable search path.

    Each tool is looked up once; later queries reuse the answer.
    """

    def __init__(self, path: Optional[str] = None):
        """Initialize probe.

        Args:
            path: Search path override (default: PATH environment variable)
        """
        self.path = path
        self._cache: Dict[str, bool] = {}

    def is_available(self, tool_name: str) -> bool:
        if tool_name not in self._cache:
            self._cache[tool_name] = shutil.which(tool_name, path=self.path) is not None
        return self._cache[tool_name]


class DependencyChecker:
    """Fail-fast check for required external tools."""

    def __init__(self, probe: ToolProbe):
        self.probe = probe

    def check_dependencies(self, required: Iterable[str]) -> None:
        """Check tools in order, stopping at the first missing one.

        Args:
            required: Ordered tool names

        Raises:
            MissingDependencyError: For the first tool that is not available
        """
        logging.info("Checking dependencies...")
        for tool_name in required:
            if not self.probe.is_available(tool_name):
                raise MissingDependencyError(tool_name, INSTALL_URLS.get(tool_name))
            logging.debug(f"Found {tool_name}")
        log_success("All dependencies are available")
