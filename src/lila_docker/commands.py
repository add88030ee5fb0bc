"""
Argument-list builders for the external tools lila-docker drives.

Every builder returns a list suitable for subprocess without a shell, so
repository names, profiles and passwords are never interpolated into a
command string.
"""

import re
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .models import ConfigurationError, RepositorySpec

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_.][A-Za-z0-9_.-]*$")


def parse_repository(entry: str, default_org: str) -> RepositorySpec:
    """
    Resolve a repository entry of the form `name` or `org/name`.

    Raises:
        ConfigurationError: If the entry is empty or malformed
    """
    entry = entry.strip()
    parts = entry.split("/")
    if len(parts) == 1:
        org, name = default_org, parts[0]
    elif len(parts) == 2:
        org, name = parts
    else:
        raise ConfigurationError(f"Invalid repository entry: '{entry}'")

    for part in (org, name):
        if not _NAME_PATTERN.match(part) or part in (".", ".."):
            raise ConfigurationError(f"Invalid repository entry: '{entry}'")

    return RepositorySpec(org=org, name=name)


def clone_url(repository: RepositorySpec, git_host: str) -> str:
    return f"{git_host.rstrip('/')}/{repository.org}/{repository.name}"


def git_clone_command(
    git: str,
    url: str,
    target: Path,
    depth: int = 1,
    origin: str = "upstream",
) -> List[str]:
    return [git, "clone", "--depth", str(depth), "--origin", origin, url, str(target)]


def git_submodule_command(git: str, repo_dir: Path) -> List[str]:
    return [git, "-C", str(repo_dir), "submodule", "update", "--init"]


def compose_command(
    docker: str,
    *args: str,
    profiles: Optional[Iterable[str]] = None,
) -> List[str]:
    """
    Build a `docker compose` invocation.

    Profiles become `--profile` flags ahead of the subcommand.
    """
    command = [docker, "compose"]
    for profile in profiles or ():
        command.extend(["--profile", profile])
    command.extend(args)
    return command


def compose_run_command(
    docker: str,
    service: str,
    command: Sequence[str] = (),
    workdir: Optional[str] = None,
    entrypoint: Optional[str] = None,
    profiles: Optional[Iterable[str]] = None,
) -> List[str]:
    """Build `docker compose run --rm` for a one-off container."""
    args = ["run", "--rm"]
    if workdir:
        args.extend(["-w", workdir])
    if entrypoint:
        args.extend(["--entrypoint", entrypoint])
    args.append(service)
    args.extend(command)
    return compose_command(docker, *args, profiles=profiles)


def compose_exec_command(
    docker: str,
    service: str,
    command: Sequence[str],
) -> List[str]:
    """Build `docker compose exec -T`; no TTY so it works from scripts."""
    return compose_command(docker, "exec", "-T", service, *command)


def workspace_url_command(binary: str, port: int) -> List[str]:
    return [binary, "url", str(port)]
