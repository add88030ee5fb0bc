"""
Code formatting for the cloned repositories.

Each formatter runs in a throwaway container; repositories that were not
cloned (optional services left out in the wizard) are skipped.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .compose import ComposeClient
from .config import LilaDockerConfig
from .models import FormatResult

logger = logging.getLogger(__name__)

PNPM_FORMAT = ("bash", "-c", "pnpm install && pnpm run format")


@dataclass(frozen=True)
class FormatTarget:
    """One formatter run against one repository."""

    name: str
    repo: str
    service: str
    workdir: str
    command: Tuple[str, ...] = ()
    entrypoint: Optional[str] = None


FORMAT_TARGETS: Tuple[FormatTarget, ...] = (
    FormatTarget("lila ui", "lila", "ui", "/lila", command=PNPM_FORMAT),
    FormatTarget("lila", "lila", "lila", "/lila", entrypoint="sbt scalafmtAll"),
    FormatTarget("lila-ws", "lila-ws", "lila_ws", "/lila-ws", entrypoint="sbt scalafmtAll"),
    FormatTarget("chessground", "chessground", "ui", "/chessground", command=PNPM_FORMAT),
    FormatTarget("pgn-viewer", "pgn-viewer", "ui", "/pgn-viewer", command=PNPM_FORMAT),
)


class Formatter:
    def __init__(
        self,
        config: LilaDockerConfig,
        compose: ComposeClient,
        targets: Sequence[FormatTarget] = FORMAT_TARGETS,
    ):
        self.config = config
        self.compose = compose
        self.targets = targets

    def format_target(self, target: FormatTarget) -> FormatResult:
        repo_dir = self.config.repo_path(target.repo)
        if not repo_dir.is_dir():
            logger.info(f"Skipping {target.name}: {repo_dir} not found")
            return FormatResult(target.name, ran=False, message=f"{repo_dir} not found")

        logger.info(f"Formatting {target.name}")
        result = self.compose.run(
            target.service,
            target.command,
            workdir=target.workdir,
            entrypoint=target.entrypoint,
            operation="format",
        )
        return FormatResult(target.name, ran=True, details=result)

    def format_all(self) -> List[FormatResult]:
        return [self.format_target(target) for target in self.targets]
