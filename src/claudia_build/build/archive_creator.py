"""Release Archive Creator.

This module packages a successfully built binary into a release archive.

Design:
    - Refuses to run for failed builds, before touching the filesystem
    - Stages files in a fresh dist/releases/<platform>/ directory per platform
    - Writes a VERSION manifest next to the binary, README.md and LICENSE
    - Each target declares its archive format (.zip for Windows, .tar.gz otherwise)
    - Hosts without a tar utility fall back to .zip
    - Filesystem errors while staging or writing become FileOperationError
"""

import logging
import shutil
import tarfile
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from tqdm import tqdm

from ..config import ProjectConfig
from ..errors import FileOperationError, PrerequisiteMissingError
from ..log_utils import log_success
from ..packages.dependencies import ToolProbe
from ..packages.platform_matrix import PlatformTarget
from .binary_builder import BuildResult
from .version_info import VersionInfoProvider, VersionManifest

ADDITIONAL_FILES = ("README.md", "LICENSE")
VERSION_FILE = "VERSION"


@dataclass(frozen=True)
class ReleaseArchive:
    """One packaged release unit."""

    platform_name: str
    archive_path: Path
    contents: Tuple[str, ...]
    version: str
    commit: str
    build_timestamp: str


class ArchiveCreator:
    """Creates release archives from build results.

    Example usage:
        creator = ArchiveCreator(config, VersionInfoProvider(runner, root), probe)
        archive = creator.create_archive(result, "linux-x86_64")
        print(archive.archive_path)  # dist/releases/claudia-linux-x86_64.tar.gz
    """

    def __init__(
        self,
        config: ProjectConfig,
        version_info: VersionInfoProvider,
        probe: ToolProbe,
        show_progress: bool = False,
    ):
        """Initialize archive creator.

        Args:
            config: Project configuration
            version_info: Source of VERSION manifest metadata
            probe: Tool probe (used to check for tar)
            show_progress: Whether to show a progress bar while archiving
        """
        self.config = config
        self.version_info = version_info
        self.probe = probe
        self.show_progress = show_progress

    def archive_format(self, target: PlatformTarget) -> str:
        """Pick 'zip' or 'tar.gz' for a target.

        The target's own format is used unless it calls for tar.gz and the
        host has no tar utility, in which case zip is used instead.
        """
        if target.archive_format == "zip" or "windows" in target.name:
            return "zip"
        if not self.probe.is_available("tar"):
            logging.warning(
                f"tar command not found, creating zip archive for {target.name} "
                + "(archive name differs from the usual .tar.gz)"
            )
            return "zip"
        return target.archive_format

    def create_archive(self, result: BuildResult, platform_name: str) -> ReleaseArchive:
        """Stage and compress the release for one platform.

        Args:
            result: Successful build result
            platform_name: Logical platform name used for naming

        Returns:
            ReleaseArchive describing the written archive

        Raises:
            PrerequisiteMissingError: If the build failed or inputs are missing
            FileOperationError: If staging or writing the archive fails
        """
        if not result.success or result.binary_path is None:
            raise PrerequisiteMissingError(
                f"Cannot archive {platform_name}: build did not succeed"
            )

        sources = [(result.binary_path, f"{self.config.binary_name}{result.target.binary_suffix}")]
        sources.extend((self.config.project_root / name, name) for name in ADDITIONAL_FILES)
        for source, _ in sources:
            if not source.is_file():
                raise PrerequisiteMissingError(f"Cannot archive {platform_name}: {source} not found")

        logging.info(f"Creating release archive for {platform_name}...")
        manifest = self.version_info.build_manifest(platform_name, self.config.product_name)
        archive_format = self.archive_format(result.target)
        archive_path = self.config.releases_dir / f"{self.config.binary_name}-{platform_name}.{archive_format}"

        try:
            contents = self._stage(sources, manifest, platform_name)
            if archive_path.exists():
                archive_path.unlink()
            staging_dir = self.config.releases_dir / platform_name
            if archive_format == "zip":
                self._write_zip(staging_dir, contents, archive_path, platform_name)
            else:
                self._write_tar_gz(staging_dir, contents, archive_path, platform_name)
        except OSError as e:
            raise FileOperationError(f"Archiving {platform_name}", e) from e

        log_success(f"Archive created: {archive_path}")
        return ReleaseArchive(
            platform_name=platform_name,
            archive_path=archive_path,
            contents=tuple(contents),
            version=manifest.version,
            commit=manifest.commit,
            build_timestamp=manifest.build_timestamp,
        )

    def _stage(self, sources: List[Tuple[Path, str]], manifest: VersionManifest, platform_name: str) -> List[str]:
        staging_dir = self.config.releases_dir / platform_name
        if staging_dir.exists():
            shutil.rmtree(staging_dir)
        staging_dir.mkdir(parents=True)

        contents: List[str] = []
        for source, name in sources:
            shutil.copy2(source, staging_dir / name)
            contents.append(name)

        (staging_dir / VERSION_FILE).write_text(manifest.render(), encoding="utf-8")
        contents.append(VERSION_FILE)
        return contents

    def _progress(self, contents: List[str], archive_path: Path) -> tqdm:
        return tqdm(
            contents,
            desc=f"Archiving {archive_path.name}",
            unit="file",
            disable=not self.show_progress,
        )

    def _write_tar_gz(self, staging_dir: Path, contents: List[str], archive_path: Path, prefix: str) -> None:
        with tarfile.open(archive_path, "w:gz") as tar:
            for name in self._progress(contents, archive_path):
                tar.add(staging_dir / name, arcname=f"{prefix}/{name}")

    def _write_zip(self, staging_dir: Path, contents: List[str], archive_path: Path, prefix: str) -> None:
        with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for name in self._progress(contents, archive_path):
                zf.write(staging_dir / name, arcname=f"{prefix}/{name}")
