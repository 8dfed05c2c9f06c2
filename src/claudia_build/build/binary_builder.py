"""Release Binary Builder.

This module compiles the native crate for one platform target and stages the
resulting executable under dist/binaries.

Design:
    - Target components are installed through ToolchainManager first
    - cargo runs inside the native crate directory via working_directory()
    - A successful compile without an output binary is still a failure
    - Binaries are copied, never moved, out of cargo's target tree
    - Universal macOS binaries are built per component and merged with lipo
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..config import ProjectConfig
from ..errors import (
    ArtifactNotFoundError,
    ClaudiaBuildError,
    FileOperationError,
    MissingDependencyError,
)
from ..log_utils import log_success
from ..packages.dependencies import INSTALL_URLS, ToolProbe
from ..packages.platform_matrix import PlatformTarget, resolve
from ..packages.toolchain import ToolchainManager
from ..process_runner import CommandRunner, working_directory


@dataclass(frozen=True)
class BuildResult:
    """Outcome of building one platform target.

    ``binary_path`` is set iff ``success``; ``error`` is set iff not.
    """

    target: PlatformTarget
    success: bool
    binary_path: Optional[Path] = None
    error: Optional[ClaudiaBuildError] = None

    def __post_init__(self) -> None:
        if self.success and (self.binary_path is None or self.error is not None):
            raise ValueError("A successful BuildResult needs a binary_path and no error")
        if not self.success and (self.error is None or self.binary_path is not None):
            raise ValueError("A failed BuildResult needs an error and no binary_path")

    @classmethod
    def succeeded(cls, target: PlatformTarget, binary_path: Path) -> "BuildResult":
        return cls(target=target, success=True, binary_path=binary_path)

    @classmethod
    def failed(cls, target: PlatformTarget, error: ClaudiaBuildError) -> "BuildResult":
        return cls(target=target, success=False, error=error)


class BinaryBuilder:
    """Builds release binaries with cargo.

    Example usage:
        builder = BinaryBuilder(config, runner, toolchain, probe)
        result = builder.build(resolve("linux-x86_64"))
        if result.success:
            print(f"Binary: {result.binary_path}")
    """

    def __init__(
        self,
        config: ProjectConfig,
        runner: CommandRunner,
        toolchain: ToolchainManager,
        probe: ToolProbe,
    ):
        """Initialize binary builder.

        Args:
            config: Project configuration
            runner: Command runner for cargo and lipo
            toolchain: Target component manager
            probe: Tool probe (used to find lipo)
        """
        self.config = config
        self.runner = runner
        self.toolchain = toolchain
        self.probe = probe

    def build(self, target: PlatformTarget) -> BuildResult:
        """Build and stage the binary for a target.

        Failures, including filesystem errors, are returned in the BuildResult
        rather than raised.

        Args:
            target: Platform target to build

        Returns:
            BuildResult describing the staged binary or the failure
        """
        logging.info(f"Building binary for {target.name} ({target.triple})...")
        try:
            if target.is_universal:
                binary_path = self._build_universal(target)
            else:
                binary_path = self._build_single(target)
        except ClaudiaBuildError as e:
            return BuildResult.failed(target, e)
        except OSError as e:
            return BuildResult.failed(target, FileOperationError(f"Building {target.name}", e))
        return BuildResult.succeeded(target, binary_path)

    def cargo_output_path(self, target: PlatformTarget) -> Path:
        """Where cargo writes the release binary for a target."""
        return (
            self.config.native_target_dir
            / target.triple
            / "release"
            / f"{self.config.binary_name}{target.binary_suffix}"
        )

    def staged_binary_path(self, target: PlatformTarget) -> Path:
        """Where the binary for a target is staged (dist/binaries/claudia-<platform><suffix>)."""
        return self.config.binaries_dir / (
            f"{self.config.binary_name}-{target.name}{target.binary_suffix}"
        )

    def _build_single(self, target: PlatformTarget) -> Path:
        self.toolchain.ensure_toolchain_installed(target.triple)

        with working_directory(self.config.native_path):
            self.runner.run(["cargo", "build", "--release", "--target", target.triple])

        produced = self.cargo_output_path(target)
        if not produced.is_file():
            raise ArtifactNotFoundError(produced)

        return self._stage(produced, target)

    def _build_universal(self, target: PlatformTarget) -> Path:
        if not self.probe.is_available("lipo"):
            raise MissingDependencyError("lipo", INSTALL_URLS.get("lipo"))

        component_binaries: List[Path] = []
        for component_name in target.components:
            result = self.build(resolve(component_name))
            if result.error is not None:
                raise result.error
            component_binaries.append(result.binary_path)

        logging.info("Creating universal binary...")
        output = self.staged_binary_path(target)
        output.parent.mkdir(parents=True, exist_ok=True)
        cmd = ["lipo", "-create"]
        cmd.extend(str(path) for path in component_binaries)
        cmd.extend(["-output", str(output)])
        self.runner.run(cmd)

        if not output.is_file():
            raise ArtifactNotFoundError(output)

        log_success(f"Universal binary created: {self._display(output)}")
        return output

    def _stage(self, produced: Path, target: PlatformTarget) -> Path:
        staged = self.staged_binary_path(target)
        staged.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(produced, staged)

        size = staged.stat().st_size
        log_success(f"Binary built: {self._display(staged)} ({size / 1024 / 1024:.2f} MB)")
        return staged

    def _display(self, path: Path) -> str:
        try:
            return str(path.relative_to(self.config.project_root))
        except ValueError:
            return str(path)
