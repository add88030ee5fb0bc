"""
Cloning of the lichess source repositories.
"""

import logging
from typing import List

from .commands import clone_url, git_clone_command, git_submodule_command, parse_repository
from .config import LilaDockerConfig
from .models import CloneResult, CommandResult, RepositorySpec
from .runner import CommandRunner

logger = logging.getLogger(__name__)


class RepositoryManager:
    """Shallow-clones configured repositories under the repos directory."""

    def __init__(self, config: LilaDockerConfig, runner: CommandRunner):
        self.config = config
        self.runner = runner

    def resolve(self, entries: List[str]) -> List[RepositorySpec]:
        """Parse every entry up front so a typo fails before anything is cloned."""
        return [parse_repository(entry, self.config.default_org) for entry in entries]

    def is_cloned(self, name: str) -> bool:
        return (self.config.repo_path(name) / ".git").exists()

    def clone(self, repository: RepositorySpec) -> CloneResult:
        target = self.config.repo_path(repository.name)

        if self.is_cloned(repository.name):
            logger.info(f"Skipping {repository.slug}: already cloned at {target}")
            return CloneResult(repository, target, cloned=False, message="already cloned")

        url = clone_url(repository, self.config.git_host)
        logger.info(f"Cloning {url} into {target}")
        self.config.repos_path.mkdir(parents=True, exist_ok=True)
        self.runner.run(
            git_clone_command(
                self.config.git_binary,
                url,
                target,
                depth=self.config.clone_depth,
                origin=self.config.git_remote_name,
            ),
            operation="git",
        )
        return CloneResult(repository, target, cloned=True, message=url)

    def clone_all(self, entries: List[str]) -> List[CloneResult]:
        return [self.clone(repository) for repository in self.resolve(entries)]

    def update_submodules(self) -> CommandResult:
        """Initialize submodules of the primary repository only."""
        repo_dir = self.config.repo_path(self.config.primary_repo)
        logger.info(f"Updating submodules of {repo_dir}")
        return self.runner.run(
            git_submodule_command(self.config.git_binary, repo_dir),
            operation="git",
        )
