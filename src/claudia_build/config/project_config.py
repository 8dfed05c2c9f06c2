"""
Project configuration for claudia-build.

Settings come from three layers, later ones winning:

1. Built-in defaults matching the Claudia repository layout
2. An optional ``claudia-build.ini`` file at the project root
3. Environment variables (CLAUDIA_DIST_DIR, CLAUDIA_COMMAND_TIMEOUT)

Example claudia-build.ini:
    [release]
    product_name = Claudia
    binary_name = claudia
    native_dir = src-tauri
    icon_files =
        src-tauri/icons/icon.ico
    required_tools = cargo, bun
    command_timeout = 1800
"""

import configparser
import os
import shlex
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import ConfigError

CONFIG_FILE_NAME = "claudia-build.ini"
CONFIG_SECTION = "release"


@dataclass
class ProjectConfig:
    """Resolved settings for one pipeline run.

    Relative paths are interpreted against ``project_root``.
    """

    project_root: Path
    product_name: str = "Claudia"
    binary_name: str = "claudia"
    native_dir: str = "src-tauri"
    dist_dir: str = "dist"
    icon_files: List[str] = field(default_factory=lambda: ["src-tauri/icons/icon.ico"])
    required_tools: List[str] = field(default_factory=lambda: ["cargo", "bun"])
    frontend_install: List[str] = field(
        default_factory=lambda: ["bun", "install", "--frozen-lockfile"]
    )
    frontend_build: List[str] = field(default_factory=lambda: ["bun", "run", "build"])
    command_timeout: Optional[float] = None

    @property
    def native_path(self) -> Path:
        """Native (cargo) crate directory."""
        return self.project_root / self.native_dir

    @property
    def native_target_dir(self) -> Path:
        """Cargo build output tree."""
        return self.native_path / "target"

    @property
    def dist_path(self) -> Path:
        dist = Path(self.dist_dir)
        return dist if dist.is_absolute() else self.project_root / dist

    @property
    def binaries_dir(self) -> Path:
        """Directory for raw per-platform binaries."""
        return self.dist_path / "binaries"

    @property
    def releases_dir(self) -> Path:
        """Directory for staged release contents and final archives."""
        return self.dist_path / "releases"

    @property
    def icon_paths(self) -> List[Path]:
        return [self.project_root / icon for icon in self.icon_files]


_LIST_FIELDS = {"icon_files", "required_tools"}
_COMMAND_FIELDS = {"frontend_install", "frontend_build"}
_FLOAT_FIELDS = {"command_timeout"}


def _split_list(value: str) -> List[str]:
    items = []
    for line in value.replace(",", "\n").splitlines():
        item = line.strip()
        if item:
            items.append(item)
    return items


def parse_timeout(value: str, source: str) -> Optional[float]:
    """Parse a command timeout in seconds; blank or 'none' means no timeout.

    Raises:
        ConfigError: If the value is not a positive number
    """
    value = value.strip()
    if not value or value.lower() == "none":
        return None
    try:
        timeout = float(value)
    except ValueError as e:
        raise ConfigError(f"Invalid command_timeout in {source}: {value!r}") from e
    if not timeout > 0:
        raise ConfigError(f"command_timeout must be positive in {source}: {value!r}")
    return timeout


def _read_config_file(config_path: Path) -> Dict[str, object]:
    parser = configparser.ConfigParser(interpolation=None)
    try:
        parser.read(config_path, encoding="utf-8")
    except configparser.Error as e:
        raise ConfigError(f"Failed to parse {config_path}: {e}") from e

    if CONFIG_SECTION not in parser:
        return {}

    known = {f.name for f in fields(ProjectConfig)} - {"project_root"}
    overrides: Dict[str, object] = {}
    for key, value in parser[CONFIG_SECTION].items():
        if key not in known:
            raise ConfigError(
                f"Unknown setting '{key}' in [{CONFIG_SECTION}] of {config_path}. "
                + f"Known settings: {', '.join(sorted(known))}"
            )
        if key in _LIST_FIELDS:
            overrides[key] = _split_list(value)
        elif key in _COMMAND_FIELDS:
            overrides[key] = shlex.split(value)
        elif key in _FLOAT_FIELDS:
            overrides[key] = parse_timeout(value, str(config_path))
        else:
            overrides[key] = value.strip()
    return overrides


def load_project_config(project_root: Path, config_path: Optional[Path] = None) -> ProjectConfig:
    """Load configuration for a project.

    Args:
        project_root: Project root directory
        config_path: Explicit config file (default: <root>/claudia-build.ini if present)

    Returns:
        Resolved ProjectConfig

    Raises:
        ConfigError: If the config file is missing (when explicit) or invalid
    """
    project_root = Path(project_root).resolve()

    overrides: Dict[str, object] = {}
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")
        overrides.update(_read_config_file(config_path))
    else:
        default_path = project_root / CONFIG_FILE_NAME
        if default_path.exists():
            overrides.update(_read_config_file(default_path))

    # Environment variable overrides
    dist_env = os.environ.get("CLAUDIA_DIST_DIR")
    if dist_env:
        overrides["dist_dir"] = dist_env
    timeout_env = os.environ.get("CLAUDIA_COMMAND_TIMEOUT")
    if timeout_env:
        overrides["command_timeout"] = parse_timeout(timeout_env, "CLAUDIA_COMMAND_TIMEOUT")

    return ProjectConfig(project_root=project_root, **overrides)  # type: ignore[arg-type]
