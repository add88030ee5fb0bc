"""
Docker Compose client.

Docker Compose is the source of truth for lifecycle state: which services
exist and which are stopped is asked on every call and never cached here.
"""

import logging
from typing import List, Optional, Sequence

from .commands import compose_command, compose_exec_command, compose_run_command
from .config import LilaDockerConfig
from .models import CommandResult
from .runner import CommandRunner

logger = logging.getLogger(__name__)


class ComposeClient:
    """Thin wrapper over `docker compose` subcommands."""

    def __init__(self, config: LilaDockerConfig, runner: CommandRunner):
        self.config = config
        self.runner = runner
        self.docker = config.docker_binary

    def _run(
        self,
        *args: str,
        profiles: Optional[Sequence[str]] = None,
        capture: bool = False,
        check: bool = True,
    ) -> CommandResult:
        command = compose_command(self.docker, *args, profiles=profiles)
        return self.runner.run(command, operation="compose", capture=capture, check=check)

    def services(self, status: Optional[str] = None) -> List[str]:
        """
        Names of services that have containers, optionally filtered by state.

        Args:
            status: Compose container state such as 'exited' or 'running'
        """
        args = ["ps", "-a", "--services"]
        if status:
            args.extend(["--status", status])
        return self._run(*args, capture=True).lines()

    def stopped_services(self) -> List[str]:
        return self.services(status="exited")

    def all_profiles(self) -> List[str]:
        """Every profile defined in the compose file, active or not."""
        return self._run("config", "--profiles", capture=True).lines()

    def build(self, profiles: Optional[Sequence[str]] = None) -> CommandResult:
        logger.info(f"Building images (profiles: {', '.join(profiles or []) or 'default'})")
        return self._run("build", profiles=profiles)

    def pull(self, profiles: Optional[Sequence[str]] = None) -> CommandResult:
        logger.info("Pulling images")
        return self._run("pull", profiles=profiles)

    def up(self, profiles: Optional[Sequence[str]] = None) -> CommandResult:
        logger.info("Starting services")
        return self._run("up", "-d", profiles=profiles)

    def start(self) -> CommandResult:
        logger.info("Resuming stopped services")
        return self._run("start")

    def stop(self, profiles: Optional[Sequence[str]] = None) -> CommandResult:
        logger.info("Stopping services")
        return self._run("stop", profiles=profiles)

    def down(
        self,
        profiles: Optional[Sequence[str]] = None,
        volumes: bool = True,
    ) -> CommandResult:
        logger.info(f"Removing services{' and volumes' if volumes else ''}")
        args = ["down", "-v"] if volumes else ["down"]
        return self._run(*args, profiles=profiles)

    def run(
        self,
        service: str,
        command: Sequence[str] = (),
        workdir: Optional[str] = None,
        entrypoint: Optional[str] = None,
        operation: str = "compose",
    ) -> CommandResult:
        """Run a one-off container that is removed afterwards."""
        return self.runner.run(
            compose_run_command(
                self.docker, service, command, workdir=workdir, entrypoint=entrypoint
            ),
            operation=operation,
        )

    def exec(
        self,
        service: str,
        command: Sequence[str],
        capture: bool = True,
        check: bool = True,
    ) -> CommandResult:
        """Run a command inside a running service container."""
        return self.runner.run(
            compose_exec_command(self.docker, service, command),
            operation="compose",
            capture=capture,
            check=check,
        )
