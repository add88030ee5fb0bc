"""
Tests for the external command builders.
"""

from pathlib import Path

import pytest

from lila_docker.commands import (
    clone_url,
    compose_command,
    compose_exec_command,
    compose_run_command,
    git_clone_command,
    git_submodule_command,
    parse_repository,
    workspace_url_command,
)
from lila_docker.models import ConfigurationError, RepositorySpec


class TestParseRepository:
    """Test resolution of repository entries."""

    def test_bare_name_uses_default_org(self):
        repository = parse_repository("lila", "lichess-org")

        assert repository == RepositorySpec(org="lichess-org", name="lila")

    def test_org_and_name(self):
        repository = parse_repository("my-fork/lila-ws", "lichess-org")

        assert repository.org == "my-fork"
        assert repository.name == "lila-ws"
        assert repository.slug == "my-fork/lila-ws"

    def test_surrounding_whitespace_is_ignored(self):
        assert parse_repository("  lila-gif ", "lichess-org").name == "lila-gif"

    @pytest.mark.parametrize(
        "entry",
        ["", "a/b/c", "/lila", "org/", "-rf", "lila ws", "../lila", "org/..", "lila;rm"],
    )
    def test_invalid_entries(self, entry):
        with pytest.raises(ConfigurationError, match="Invalid repository entry"):
            parse_repository(entry, "lichess-org")


class TestGitCommands:
    """Test git argument lists."""

    def test_clone_url(self):
        repository = RepositorySpec(org="lichess-org", name="lila")

        assert clone_url(repository, "https://github.com/") == "https://github.com/lichess-org/lila"

    def test_clone_url_uses_org(self):
        repository = parse_repository("someone/lila", "lichess-org")

        assert clone_url(repository, "https://github.com") == "https://github.com/someone/lila"

    def test_git_clone_command(self):
        command = git_clone_command(
            "git", "https://github.com/lichess-org/lila", Path("repos/lila")
        )

        assert command == [
            "git", "clone", "--depth", "1", "--origin", "upstream",
            "https://github.com/lichess-org/lila", "repos/lila",
        ]

    def test_git_submodule_command(self):
        assert git_submodule_command("git", Path("repos/lila")) == [
            "git", "-C", "repos/lila", "submodule", "update", "--init",
        ]


class TestComposeCommands:
    """Test docker compose argument lists."""

    def test_plain_compose_command(self):
        assert compose_command("docker", "up", "-d") == ["docker", "compose", "up", "-d"]

    def test_profiles_precede_subcommand(self):
        command = compose_command("docker", "stop", profiles=["search", "utils"])

        assert command == [
            "docker", "compose", "--profile", "search", "--profile", "utils", "stop",
        ]

    def test_run_command(self):
        command = compose_run_command("docker", "ui", ["/lila/ui/build"])

        assert command == ["docker", "compose", "run", "--rm", "ui", "/lila/ui/build"]

    def test_run_command_with_workdir_and_entrypoint(self):
        command = compose_run_command(
            "docker", "lila", workdir="/lila", entrypoint="sbt scalafmtAll"
        )

        assert command == [
            "docker", "compose", "run", "--rm", "-w", "/lila",
            "--entrypoint", "sbt scalafmtAll", "lila",
        ]

    def test_password_stays_a_single_argument(self):
        command = compose_run_command("docker", "python", ["--password=a b;$(x)"])

        assert command[-1] == "--password=a b;$(x)"

    def test_exec_command(self):
        command = compose_exec_command("docker", "mongodb", ["mongo", "--eval", "1"])

        assert command == ["docker", "compose", "exec", "-T", "mongodb", "mongo", "--eval", "1"]

    def test_workspace_url_command(self):
        assert workspace_url_command("gp", 8080) == ["gp", "url", "8080"]
