"""
Interactive configuration of a new environment.

Asks which optional services to run and whether to seed the database, then
writes the answers to the settings file read by every other command.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import click

from .config import load_environment_settings, read_settings_file, write_settings_file

logger = logging.getLogger(__name__)

CORE_REPOS: Tuple[str, ...] = ("lila", "lila-ws")
SEED_REPO = "lila-db-seed"


@dataclass(frozen=True)
class OptionalService:
    """A compose profile the user can opt into and the repos it mounts."""

    description: str
    profile: str
    repos: Tuple[str, ...] = ()


OPTIONAL_SERVICES: Tuple[OptionalService, ...] = (
    OptionalService("Stockfish Play (play vs computer)", "stockfish-play", ("lila-fishnet",)),
    OptionalService("Stockfish Analysis (server-side analysis)", "stockfish-analysis", ("lila-fishnet",)),
    OptionalService("Search (games, forum, studies, teams)", "search", ("lila-search",)),
    OptionalService("Email (capture outgoing mail)", "email"),
    OptionalService("GIF generation", "gifs", ("lila-gif",)),
    OptionalService("Thumbnail generation", "thumbnails"),
    OptionalService("API docs", "api-docs", ("api",)),
    OptionalService("Chessground (board UI library)", "chessground", ("chessground",)),
    OptionalService("PGN Viewer", "pgn-viewer", ("pgn-viewer",)),
    OptionalService("External engine", "external-engine", ("lila-engine",)),
)


def known_repos() -> List[str]:
    """Every repository any configuration can mount, in a stable order."""
    repos = list(CORE_REPOS) + [SEED_REPO]
    for service in OPTIONAL_SERVICES:
        repos.extend(repo for repo in service.repos if repo not in repos)
    return repos


def build_settings(
    setup_database: bool,
    su_password: str,
    password: str,
    services: Sequence[OptionalService],
) -> Dict[str, str]:
    """
    Turn wizard answers into settings file values.

    DIRS lists every known repository directory, selected or not: compose
    bind-mounts them regardless of profile, and a directory the daemon
    creates itself ends up owned by root.
    """
    repos = list(CORE_REPOS)
    if setup_database:
        repos.append(SEED_REPO)
    for service in services:
        repos.extend(repo for repo in service.repos if repo not in repos)

    return {
        "COMPOSE_PROFILES": ",".join(service.profile for service in services),
        "SETUP_DATABASE": "true" if setup_database else "false",
        "SU_PASSWORD": su_password,
        "PASSWORD": password,
        "REPOS": ",".join(repos),
        "DIRS": ",".join(f"repos/{repo}" for repo in known_repos()),
    }


def parse_selection(text: str) -> List[OptionalService]:
    """Parse a comma-separated list of 1-based service numbers."""
    selected = []
    for item in text.split(","):
        item = item.strip()
        if not item:
            continue
        if not item.isdigit() or not 1 <= int(item) <= len(OPTIONAL_SERVICES):
            raise click.BadParameter(
                f"'{item}' is not a number between 1 and {len(OPTIONAL_SERVICES)}"
            )
        service = OPTIONAL_SERVICES[int(item) - 1]
        if service not in selected:
            selected.append(service)
    return selected


def run_setup_wizard(settings_path: Path) -> Dict[str, str]:
    """
    Prompt for the environment configuration and save it.

    Current values in the settings file are offered as defaults.
    """
    current = load_environment_settings(settings_path)
    existing = read_settings_file(settings_path)

    click.echo("🛠️  Configuring your lila-docker environment\n")

    setup_database = click.confirm(
        "Seed the database with test users, games, etc.?",
        default=current.setup_database if "SETUP_DATABASE" in existing else True,
    )
    su_password = current.su_password
    password = current.password
    if setup_database:
        su_password = click.prompt("Password for the admin user", default=su_password)
        password = click.prompt("Password for all other users", default=password)

    click.echo("\nOptional services:")
    for number, service in enumerate(OPTIONAL_SERVICES, start=1):
        click.echo(f"  {number:>2}. {service.description}")

    active_profiles = set(current.profile_list)
    default_selection = ",".join(
        str(number)
        for number, service in enumerate(OPTIONAL_SERVICES, start=1)
        if service.profile in active_profiles
    )
    services = click.prompt(
        "Services to include (comma-separated numbers, blank for none)",
        default=default_selection,
        value_proc=parse_selection,
    )
    values = build_settings(setup_database, su_password, password, services)
    write_settings_file(settings_path, values)
    logger.info(f"Environment configured: profiles={values['COMPOSE_PROFILES'] or 'none'}")
    return values
