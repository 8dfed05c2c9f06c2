"""Rust target component management.

This module makes sure the standard library for a compilation target triple
is installed before cargo is asked to build for it.
"""

import logging
from typing import Optional, Set

from ..process_runner import CommandRunner


class ToolchainManager:
    """Installs rustup target components on demand.

    The installed-target registry is read once from rustup and then kept in
    memory, so repeated checks for the same triple never reinstall it.

    Example usage:
        manager = ToolchainManager(CommandRunner())
        manager.ensure_toolchain_installed("x86_64-pc-windows-msvc")
    """

    def __init__(self, runner: CommandRunner, rustup: str = "rustup"):
        """Initialize toolchain manager.

        Args:
            runner: Command runner used for rustup invocations
            rustup: rustup executable name or path
        """
        self.runner = runner
        self.rustup = rustup
        self._installed: Optional[Set[str]] = None

    def installed_targets(self) -> Set[str]:
        """Targets currently installed (queried from rustup on first use)."""
        if self._installed is None:
            result = self.runner.run(
                [self.rustup, "target", "list", "--installed"],
                capture_output=True,
            )
            self._installed = {line.strip() for line in result.stdout.splitlines() if line.strip()}
            logging.debug(f"Installed targets: {', '.join(sorted(self._installed)) or 'none'}")
        return self._installed

    def is_installed(self, triple: str) -> bool:
        return triple in self.installed_targets()

    def ensure_toolchain_installed(self, triple: str) -> bool:
        """Install a target component if it is not installed yet.

        Args:
            triple: Target triple (e.g. 'aarch64-apple-darwin')

        Returns:
            True if an install was performed, False if already present

        Raises:
            ExternalToolError: If rustup fails
        """
        if self.is_installed(triple):
            logging.info(f"Target {triple} is already installed")
            return False

        logging.info(f"Installing Rust target: {triple}")
        self.runner.run([self.rustup, "target", "add", triple])
        self.installed_targets().add(triple)
        return True
