"""
Release pipeline orchestration for claudia-build.

This module sequences every stage of a release:

1. Check required external tools
2. Validate icon files
3. Build the frontend assets
4. Resolve the platform target(s)
5. Build the release binary (or installer bundles)
6. Package the release archive

Setup stages (1-3) fail fast for every command. The all-platforms command
then attempts each host target in turn; a failing target becomes a
TargetOutcome with an error and the loop moves on, because cross-compiling
toward a non-native target is best-effort.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..config import ProjectConfig
from ..errors import ClaudiaBuildError, FileOperationError
from ..log_utils import log_success
from ..packages.dependencies import DependencyChecker, PathToolProbe, ToolProbe
from ..packages.platform_matrix import (
    FALLBACK_PLATFORM,
    PlatformTarget,
    all_targets_for_host,
    detect_host_os,
    is_known_host,
    native_target_for_host,
    resolve,
)
from ..packages.toolchain import ToolchainManager
from ..process_runner import CommandRunner
from ..validation.icon_validator import IconValidator
from .archive_creator import ArchiveCreator, ReleaseArchive
from .binary_builder import BinaryBuilder
from .bundle_builder import BundleBuilder
from .frontend import FrontendBuilder
from .version_info import VersionInfoProvider


@dataclass(frozen=True)
class TargetOutcome:
    """Result of one target in the all-platforms run.

    Exactly one of ``archive`` and ``error`` is set.
    """

    platform_name: str
    archive: Optional[ReleaseArchive] = None
    error: Optional[ClaudiaBuildError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class RunSummary:
    """Per-target outcomes of an all-platforms run, in attempt order."""

    outcomes: List[TargetOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[TargetOutcome]:
        return [outcome for outcome in self.outcomes if outcome.succeeded]

    @property
    def failed(self) -> List[TargetOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]

    def format_report(self) -> str:
        lines = [f"Build summary: {len(self.succeeded)} succeeded, {len(self.failed)} failed"]
        for outcome in self.outcomes:
            if outcome.archive is not None:
                lines.append(f"  ✓ {outcome.platform_name}: {outcome.archive.archive_path.name}")
            else:
                lines.append(f"  ✗ {outcome.platform_name}: {outcome.error}")
        return "\n".join(lines)


class ReleasePipeline:
    """
    Drives the release commands (single platform, all platforms, bundles, clean).

    Example usage:
        pipeline = ReleasePipeline(load_project_config(Path(".")))
        archive = pipeline.build_platform("linux-x86_64")
        print(f"Archive: {archive.archive_path}")
    """

    def __init__(
        self,
        config: ProjectConfig,
        runner: Optional[CommandRunner] = None,
        probe: Optional[ToolProbe] = None,
        host_os: Optional[str] = None,
        show_progress: bool = False,
    ):
        """
        Initialize release pipeline.

        Args:
            config: Project configuration
            runner: Command runner (default: real subprocesses with config timeout)
            probe: Tool probe (default: executable search path)
            host_os: Host OS tag (default: detected)
            show_progress: Show progress bars while archiving
        """
        self.config = config
        self.runner = runner or CommandRunner(timeout=config.command_timeout)
        self.probe = probe or PathToolProbe()
        self.host_os = host_os or detect_host_os()

        self.toolchain = ToolchainManager(self.runner)
        self.dependency_checker = DependencyChecker(self.probe)
        self.icon_validator = IconValidator()
        self.frontend = FrontendBuilder(config, self.runner)
        self.binary_builder = BinaryBuilder(config, self.runner, self.toolchain, self.probe)
        self.bundle_builder = BundleBuilder(config, self.runner, self.toolchain)
        self.archive_creator = ArchiveCreator(
            config,
            VersionInfoProvider(self.runner, config.project_root),
            self.probe,
            show_progress=show_progress,
        )

    def prepare(self) -> None:
        """Run the fail-fast setup stages shared by every build command."""
        self.dependency_checker.check_dependencies(self.config.required_tools)
        self.icon_validator.validate_icons(self.config.icon_paths)
        self.frontend.build()

    def build_platform(self, platform_name: str) -> ReleaseArchive:
        """Build and archive a single platform.

        Raises:
            ClaudiaBuildError: From any failing stage
        """
        self.prepare()
        target = resolve(platform_name)
        return self._build_and_archive(target)

    def build_all(self) -> RunSummary:
        """Build every default target for the host, tolerating per-target failures.

        Raises:
            ClaudiaBuildError: Only from the setup stages
        """
        self.prepare()

        if not is_known_host(self.host_os):
            logging.warning(f"Unknown platform '{self.host_os}', attempting {FALLBACK_PLATFORM} build...")
        targets = all_targets_for_host(self.host_os)
        logging.info(f"Building for all platforms: {', '.join(t.name for t in targets)}")

        summary = RunSummary()
        for target in targets:
            summary.outcomes.append(self._attempt(target))

        if summary.failed:
            logging.warning(f"{len(summary.failed)} of {len(summary.outcomes)} targets failed")
        else:
            log_success("All builds completed!")
        for line in summary.format_report().splitlines():
            logging.info(line)
        self._report_outputs()
        return summary

    def build_bundles(self) -> List[Path]:
        """Build installer bundles for the host's native target."""
        self.prepare()

        if not is_known_host(self.host_os):
            logging.warning(f"Unknown platform '{self.host_os}', attempting {FALLBACK_PLATFORM} bundles...")
        target = native_target_for_host(self.host_os)
        logging.info("Building bundles for current platform...")
        return self.bundle_builder.build_bundles(target, target.bundle_formats)

    def clean(self) -> List[Path]:
        """Remove staged binaries, releases and packager bundle output.

        Missing directories are skipped.

        Returns:
            Directories that were removed
        """
        logging.info("Cleaning previous builds...")
        candidates = [self.config.binaries_dir, self.config.releases_dir]
        if self.config.native_target_dir.is_dir():
            candidates.extend(sorted(self.config.native_target_dir.glob("*/release/bundle")))

        removed = []
        for directory in candidates:
            if directory.is_dir():
                shutil.rmtree(directory)
                removed.append(directory)
                logging.debug(f"Removed {directory}")

        log_success("Clean completed")
        return removed

    def _build_and_archive(self, target: PlatformTarget) -> ReleaseArchive:
        logging.info(f"Building for {target.name}...")
        result = self.binary_builder.build(target)
        if result.error is not None:
            raise result.error
        return self.archive_creator.create_archive(result, target.name)

    def _attempt(self, target: PlatformTarget) -> TargetOutcome:
        try:
            archive = self._build_and_archive(target)
        except ClaudiaBuildError as e:
            logging.warning(f"Build for {target.name} failed: {e}")
            return TargetOutcome(platform_name=target.name, error=e)
        except OSError as e:
            error = FileOperationError(f"Releasing {target.name}", e)
            logging.warning(f"Build for {target.name} failed: {error}")
            return TargetOutcome(platform_name=target.name, error=error)
        return TargetOutcome(platform_name=target.name, archive=archive)

    def _report_outputs(self) -> None:
        binaries = sorted(p for p in self.config.binaries_dir.glob("*") if p.is_file())
        archives = sorted(
            p
            for p in self.config.releases_dir.glob("*")
            if p.is_file() and p.name.endswith((".tar.gz", ".zip"))
        )
        if binaries:
            logging.info("Generated binaries:")
            for path in binaries:
                logging.info(f"  {path.name} ({path.stat().st_size / 1024 / 1024:.2f} MB)")
        if archives:
            logging.info("Generated archives:")
            for path in archives:
                logging.info(f"  {path.name} ({path.stat().st_size / 1024 / 1024:.2f} MB)")
