"""
Environment lifecycle orchestration for lila-docker.

Sequences the collaborators behind each subcommand:
- first-time setup (configure, clone, materialize config, build, start, seed)
- resume, stop, restart and full teardown
- image refresh and code formatting

Every step blocks until the external tool finishes; the first failing step
aborts the sequence with the tool's own exit status.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

from .compose import ComposeClient
from .config import (
    EnvironmentSettings,
    LilaDockerConfig,
    ensure_settings_file,
    load_environment_settings,
)
from .formatting import Formatter
from .materializer import ConfigMaterializer
from .models import ConfigurationError, FormatResult, LilaDockerError, StartOutcome
from .readiness import RetryPolicy
from .repositories import RepositoryManager
from .runner import CommandRunner
from .seeding import DatabaseSeeder
from .setup_wizard import run_setup_wizard

logger = logging.getLogger(__name__)

UI_SERVICE = "ui"
UI_BUILD_COMMAND = ["/lila/ui/build"]


class EnvironmentOrchestrator:
    """Runs the lila-docker subcommands against one project directory."""

    def __init__(
        self,
        config: LilaDockerConfig,
        runner: Optional[CommandRunner] = None,
        configure: Callable[[Path], object] = run_setup_wizard,
        seeder: Optional[DatabaseSeeder] = None,
    ):
        self.config = config
        self.runner = runner or CommandRunner(config)
        self.configure = configure
        self.compose = ComposeClient(config, self.runner)
        self.repositories = RepositoryManager(config, self.runner)
        self.materializer = ConfigMaterializer(config, self.runner)
        self.formatter = Formatter(config, self.compose)
        self.seeder = seeder or DatabaseSeeder(self.compose, RetryPolicy.from_config(config))

    def start(self) -> StartOutcome:
        """
        Set up the environment on first use, otherwise resume stopped services.

        Returns:
            StartOutcome describing what was done
        """
        if not self.compose.services():
            logger.info("No services found, running first-time setup")
            self.setup()
            return StartOutcome.SETUP

        stopped = self.compose.stopped_services()
        if stopped:
            logger.info(f"Resuming stopped services: {', '.join(stopped)}")
            self.compose.start()
            return StartOutcome.RESUMED

        logger.info("There are no stopped services to resume")
        return StartOutcome.NOTHING_TO_RESUME

    def stop(self) -> None:
        # Services gated by inactive profiles are only stopped if named
        self.compose.stop(profiles=self.compose.all_profiles())

    def restart(self) -> StartOutcome:
        self.stop()
        return self.start()

    def down(self) -> None:
        """Remove every container and volume. Destroys the database."""
        self.compose.down(profiles=self.compose.all_profiles(), volumes=True)

    def build(self) -> None:
        profiles = self.compose.all_profiles()
        self.compose.pull(profiles=profiles)
        self.compose.build(profiles=profiles)

    def format(self) -> List[FormatResult]:
        return self.formatter.format_all()

    def setup(self) -> EnvironmentSettings:
        """First-time setup of a new environment."""
        settings_path = self.config.settings_path
        ensure_settings_file(settings_path)
        self.configure(settings_path)
        settings = load_environment_settings(settings_path)

        self.create_directories(settings)

        self.repositories.clone_all(settings.repo_list)
        self.repositories.update_submodules()

        self.materializer.materialize(settings)

        self.compose.build(profiles=settings.profile_list)
        # the secondary profile's build inputs are not picked up by the first pass
        self.compose.build(profiles=[self.config.secondary_build_profile])

        self.compose.up(profiles=settings.profile_list)

        logger.info("Compiling js/css...")
        self.compose.run(UI_SERVICE, UI_BUILD_COMMAND, operation="ui_build")

        if settings.setup_database:
            try:
                self.seeder.seed(settings)
            except LilaDockerError:
                logger.error(
                    "Database seeding failed, the database may be partially seeded. "
                    "Run 'lila-docker down' and then 'lila-docker start' to start over."
                )
                raise

        return settings

    def create_directories(self, settings: EnvironmentSettings) -> None:
        """
        Pre-create bind-mounted directories as the invoking user.

        Docker would otherwise create missing ones owned by root.
        """
        for directory in settings.dir_list:
            path = self.config.project_root / directory
            logger.debug(f"Creating directory {path}")
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ConfigurationError(f"Cannot create directory {path}: {e}") from e
