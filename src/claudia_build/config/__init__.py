"""Configuration loading for claudia-build."""

from .project_config import CONFIG_FILE_NAME, ProjectConfig, load_project_config, parse_timeout

__all__ = [
    "CONFIG_FILE_NAME",
    "ProjectConfig",
    "load_project_config",
    "parse_timeout",
]
