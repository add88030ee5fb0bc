"""
Data models for lila-docker operations

Defines result classes for external commands, repository cloning and
formatting runs, plus the error hierarchy shared by every collaborator.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .logging_config import mask_sensitive_data


class LilaDockerError(Exception):
    """Base class for lila-docker errors."""


class ConfigurationError(LilaDockerError):
    """Invalid settings or repository entries."""


class CommandError(LilaDockerError):
    """An external command exited with a non-zero status."""

    def __init__(self, command: List[str], returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            f"Command failed with exit code {returncode}: "
            f"{mask_sensitive_data(' '.join(command))}"
        )


class ReadinessTimeoutError(LilaDockerError):
    """A dependency did not become ready within the retry policy."""

    def __init__(self, description: str, attempts: int, elapsed: float):
        self.description = description
        self.attempts = attempts
        self.elapsed = elapsed
        super().__init__(
            f"{description} not ready after {attempts} attempts ({elapsed:.1f}s)"
        )


class StartOutcome(Enum):
    """What `start` ended up doing."""

    SETUP = "setup"
    RESUMED = "resumed"
    NOTHING_TO_RESUME = "nothing_to_resume"


@dataclass
class CommandResult:
    """Result of an external command."""

    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    duration: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def lines(self) -> List[str]:
        """Non-empty stdout lines, stripped."""
        return [line.strip() for line in self.stdout.splitlines() if line.strip()]

    def get_summary(self) -> str:
        status = "✅ SUCCESS" if self.success else "❌ FAILED"
        timing = f" ({self.duration:.1f}s)" if self.duration > 0 else ""
        return f"{status}: {' '.join(self.command)}{timing}"


@dataclass(frozen=True)
class RepositorySpec:
    """A repository to clone, resolved from a `name` or `org/name` entry."""

    org: str
    name: str

    @property
    def slug(self) -> str:
        return f"{self.org}/{self.name}"


@dataclass
class CloneResult:
    """Outcome of cloning one repository."""

    repository: RepositorySpec
    target: Path
    cloned: bool
    message: str = ""


@dataclass
class FormatResult:
    """Outcome of one formatter target."""

    target: str
    ran: bool
    message: str = ""
    details: Optional[CommandResult] = None
