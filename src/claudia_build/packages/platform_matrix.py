"""Platform Target Matrix.

This module defines the static set of release targets and the host-dependent
default fan-out used by the all-platforms build.

Supported targets:
    - linux-x86_64:    x86_64-unknown-linux-gnu
    - windows-x86_64:  x86_64-pc-windows-msvc
    - macos-x86_64:    x86_64-apple-darwin
    - macos-arm64:     aarch64-apple-darwin
    - macos-universal: lipo merge of macos-x86_64 + macos-arm64
"""

import platform
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Tuple

from ..errors import UnknownPlatformError

HostOS = str


@dataclass(frozen=True)
class PlatformTarget:
    """One release target.

    Attributes:
        name: Logical platform name, unique within the matrix
        triple: Toolchain target triple
        binary_suffix: Executable suffix ("" or ".exe")
        archive_format: "tar.gz" or "zip"
        bundle_formats: Installer formats the packager can produce
        components: Platforms merged into a universal binary (empty otherwise)
    """

    name: str
    triple: str
    binary_suffix: str = ""
    archive_format: str = "tar.gz"
    bundle_formats: FrozenSet[str] = field(default_factory=frozenset)
    components: Tuple[str, ...] = ()

    @property
    def is_universal(self) -> bool:
        return bool(self.components)


TARGETS: Dict[str, PlatformTarget] = {
    target.name: target
    for target in (
        PlatformTarget(
            name="linux-x86_64",
            triple="x86_64-unknown-linux-gnu",
            bundle_formats=frozenset({"deb", "appimage"}),
        ),
        PlatformTarget(
            name="windows-x86_64",
            triple="x86_64-pc-windows-msvc",
            binary_suffix=".exe",
            archive_format="zip",
            bundle_formats=frozenset({"msi"}),
        ),
        PlatformTarget(
            name="macos-x86_64",
            triple="x86_64-apple-darwin",
            bundle_formats=frozenset({"dmg"}),
        ),
        PlatformTarget(
            name="macos-arm64",
            triple="aarch64-apple-darwin",
            bundle_formats=frozenset({"dmg"}),
        ),
        PlatformTarget(
            name="macos-universal",
            triple="universal-apple-darwin",
            bundle_formats=frozenset({"dmg"}),
            components=("macos-x86_64", "macos-arm64"),
        ),
    )
}

# Short names accepted on the command line
COMMAND_ALIASES: Dict[str, str] = {
    "linux": "linux-x86_64",
    "windows": "windows-x86_64",
    "macos": "macos-x86_64",
    "macos-arm": "macos-arm64",
    "macos-universal": "macos-universal",
}

# Host OS -> ordered targets for the all-platforms build.
# Entries after the first are best-effort cross-compiles.
HOST_FAN_OUT: Dict[HostOS, Tuple[str, ...]] = {
    "linux": ("linux-x86_64", "windows-x86_64"),
    "darwin": ("macos-x86_64", "macos-arm64", "macos-universal"),
    "windows": ("windows-x86_64", "linux-x86_64", "macos-x86_64"),
}

HOST_NATIVE: Dict[HostOS, str] = {
    "linux": "linux-x86_64",
    "darwin": "macos-x86_64",
    "windows": "windows-x86_64",
}

FALLBACK_PLATFORM = "linux-x86_64"


def resolve(name: str) -> PlatformTarget:
    """Look up a target by logical name.

    Raises:
        UnknownPlatformError: If the name is not in the matrix
    """
    try:
        return TARGETS[name]
    except KeyError:
        raise UnknownPlatformError(name, sorted(TARGETS)) from None


def is_known_host(host_os: HostOS) -> bool:
    return host_os in HOST_FAN_OUT


def all_targets_for_host(host_os: HostOS) -> List[PlatformTarget]:
    """Ordered targets attempted by the all-platforms build on a host.

    Unknown hosts get a single best-effort Linux attempt.
    """
    names = HOST_FAN_OUT.get(host_os, (FALLBACK_PLATFORM,))
    return [TARGETS[name] for name in names]


def native_target_for_host(host_os: HostOS) -> PlatformTarget:
    """The target built natively on a host (used for installer bundles)."""
    return TARGETS[HOST_NATIVE.get(host_os, FALLBACK_PLATFORM)]


def detect_host_os() -> HostOS:
    """Detect the current host OS as 'linux', 'darwin', 'windows' or the raw name."""
    system = platform.system().lower()
    if system.startswith(("msys", "mingw", "cygwin")):
        return "windows"
    return system
