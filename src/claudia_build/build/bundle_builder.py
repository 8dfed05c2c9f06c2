"""Installer Bundle Builder.

This module runs the Tauri packager to produce platform installers (deb,
AppImage, dmg, msi) instead of a raw binary.
"""

import logging
from pathlib import Path
from typing import Iterable, List

from ..config import ProjectConfig
from ..log_utils import log_success
from ..packages.platform_matrix import PlatformTarget, resolve
from ..packages.toolchain import ToolchainManager
from ..process_runner import CommandRunner

# Installer files looked for in the bundle output tree (compared lowercase)
BUNDLE_EXTENSIONS = (".deb", ".appimage", ".dmg", ".msi", ".exe")


class BundleBuilder:
    """Builds installer bundles with ``bun run tauri build``."""

    def __init__(self, config: ProjectConfig, runner: CommandRunner, toolchain: ToolchainManager):
        """Initialize bundle builder.

        Args:
            config: Project configuration
            runner: Command runner for the packager
            toolchain: Target component manager
        """
        self.config = config
        self.runner = runner
        self.toolchain = toolchain

    def bundle_dir(self, target: PlatformTarget) -> Path:
        """Packager output directory for a target."""
        return self.config.native_target_dir / target.triple / "release" / "bundle"

    def build_bundles(self, target: PlatformTarget, bundle_formats: Iterable[str]) -> List[Path]:
        """Build installer bundles for a target.

        Args:
            target: Platform target to package
            bundle_formats: Installer format tags (e.g. {'deb', 'appimage'})

        Returns:
            Sorted installer files found after packaging (may be empty)

        Raises:
            ValueError: If no bundle formats are requested
            ExternalToolError: If rustup or the packager fails
        """
        formats = sorted(bundle_formats)
        if not formats:
            raise ValueError(f"No bundle formats requested for {target.name}")

        logging.info(f"Building bundles for {target.name} ({','.join(formats)})...")

        # Universal bundles need the component targets, not the pseudo-triple
        triples = [resolve(name).triple for name in target.components] or [target.triple]
        for triple in triples:
            self.toolchain.ensure_toolchain_installed(triple)

        self.runner.run(
            [
                "bun", "run", "tauri", "build",
                "--bundles", ",".join(formats),
                "--target", target.triple,
            ],
            cwd=self.config.project_root,
        )

        bundles = self.find_bundles(target)
        if bundles:
            log_success(f"Bundles created in {self.bundle_dir(target)}")
            for bundle in bundles:
                logging.info(f"  {bundle.name} ({bundle.stat().st_size / 1024 / 1024:.2f} MB)")
        else:
            logging.warning(f"No installer files found in {self.bundle_dir(target)}")
        return bundles

    def find_bundles(self, target: PlatformTarget) -> List[Path]:
        """List installer files in the target's bundle directory."""
        bundle_dir = self.bundle_dir(target)
        if not bundle_dir.is_dir():
            return []
        return sorted(
            path
            for path in bundle_dir.rglob("*")
            if path.is_file() and path.suffix.lower() in BUNDLE_EXTENSIONS
        )
