"""
Build and packaging stages for claudia-build.

This module provides the release pipeline implementation including:
- Frontend asset build (bun)
- Release binaries per target (cargo, lipo)
- Installer bundles (tauri)
- Release archives with VERSION manifests
- Pipeline orchestration
"""

from .archive_creator import ArchiveCreator, ReleaseArchive
from .binary_builder import BinaryBuilder, BuildResult
from .bundle_builder import BundleBuilder
from .frontend import FrontendBuilder
from .orchestrator import ReleasePipeline, RunSummary, TargetOutcome
from .version_info import VersionInfoProvider, VersionManifest

__all__ = [
    "ArchiveCreator",
    "ReleaseArchive",
    "BinaryBuilder",
    "BuildResult",
    "BundleBuilder",
    "FrontendBuilder",
    "ReleasePipeline",
    "RunSummary",
    "TargetOutcome",
    "VersionInfoProvider",
    "VersionManifest",
]
