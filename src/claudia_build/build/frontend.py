"""Frontend asset build step."""

import logging

from ..config import ProjectConfig
from ..log_utils import log_success
from ..process_runner import CommandRunner


class FrontendBuilder:
    """Installs frontend dependencies and bundles the web assets."""

    def __init__(self, config: ProjectConfig, runner: CommandRunner):
        self.config = config
        self.runner = runner

    def build(self) -> None:
        """Run the configured install and build commands from the project root.

        Raises:
            ExternalToolError: If either command fails
        """
        logging.info("Building frontend...")
        self.runner.run(self.config.frontend_install, cwd=self.config.project_root)
        self.runner.run(self.config.frontend_build, cwd=self.config.project_root)
        log_success("Frontend built successfully")
