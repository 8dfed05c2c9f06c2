"""Target resolution and host tooling for claudia-build.

This module covers everything the pipeline needs to know about the machine
it runs on: the platform target matrix, required external tools and the
installed Rust target components.
"""

from .dependencies import DependencyChecker, PathToolProbe, ToolProbe
from .platform_matrix import (
    COMMAND_ALIASES,
    TARGETS,
    PlatformTarget,
    all_targets_for_host,
    detect_host_os,
    native_target_for_host,
    resolve,
)
from .toolchain import ToolchainManager

__all__ = [
    "COMMAND_ALIASES",
    "TARGETS",
    "PlatformTarget",
    "resolve",
    "all_targets_for_host",
    "native_target_for_host",
    "detect_host_os",
    "ToolProbe",
    "PathToolProbe",
    "DependencyChecker",
    "ToolchainManager",
]
