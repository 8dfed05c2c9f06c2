"""Release version metadata.

This module builds the VERSION manifest packed into every release archive.
Version-control lookups never fail an archive: a repository without tags
reports version 'dev', and a failed commit lookup leaves the hash empty.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from ..errors import ExternalToolError, MetadataQueryError
from ..process_runner import CommandRunner

FALLBACK_VERSION = "dev"
FALLBACK_COMMIT = ""
TIMESTAMP_FORMAT = "%a %b %d %H:%M:%S %Z %Y"


@dataclass(frozen=True)
class VersionManifest:
    """Contents of the VERSION file."""

    product_name: str
    version: str
    build_timestamp: str
    platform_name: str
    commit: str

    def render(self) -> str:
        return (
            f"{self.product_name} {self.version}\n"
            f"Built on: {self.build_timestamp}\n"
            f"Platform: {self.platform_name}\n"
            f"Commit: {self.commit}\n"
        )


def _local_now() -> datetime:
    return datetime.now().astimezone()


class VersionInfoProvider:
    """Queries git for release metadata, degrading to placeholders."""

    def __init__(
        self,
        runner: CommandRunner,
        repo_dir: Path,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize provider.

        Args:
            runner: Command runner for git
            repo_dir: Repository to query
            clock: Source of the build timestamp (default: local time)
        """
        self.runner = runner
        self.repo_dir = repo_dir
        self.clock = clock or _local_now

    def describe_version(self) -> str:
        """Most recent tag (with -dirty marker), or 'dev' without tags."""
        try:
            return self._query(["git", "describe", "--tags", "--dirty"])
        except MetadataQueryError as e:
            logging.warning(f"Could not determine version from tags ({e}); using '{FALLBACK_VERSION}'")
            return FALLBACK_VERSION

    def commit_hash(self) -> str:
        """Full HEAD commit hash, or an empty string if unavailable."""
        try:
            return self._query(["git", "rev-parse", "HEAD"])
        except MetadataQueryError as e:
            logging.warning(f"Could not determine commit hash ({e})")
            return FALLBACK_COMMIT

    def build_timestamp(self) -> str:
        return self.clock().strftime(TIMESTAMP_FORMAT).strip()

    def build_manifest(self, platform_name: str, product_name: str) -> VersionManifest:
        return VersionManifest(
            product_name=product_name,
            version=self.describe_version(),
            build_timestamp=self.build_timestamp(),
            platform_name=platform_name,
            commit=self.commit_hash(),
        )

    def _query(self, command: List[str]) -> str:
        try:
            result = self.runner.run(command, cwd=self.repo_dir, capture_output=True)
        except ExternalToolError as e:
            raise MetadataQueryError(str(e)) from e
        value = result.stdout.strip()
        if not value:
            raise MetadataQueryError(f"{' '.join(command)} returned no output")
        return value
