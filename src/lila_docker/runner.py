"""
Runs external commands for lila-docker.

Every collaborator (git, docker compose, the workspace URL helper) goes
through CommandRunner, which logs the command, times it and turns a
non-zero exit status into a CommandError carrying that status.
"""

import logging
import subprocess
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .config import LilaDockerConfig
from .logging_config import SubprocessLogHandler, mask_sensitive_data
from .models import CommandError, CommandResult

logger = logging.getLogger(__name__)


class CommandRunner:
    """
    Executes argument lists with subprocess.

    Output is streamed straight to the terminal unless `capture` is set, so
    long builds show their progress the way the underlying tool prints it.
    """

    def __init__(self, config: LilaDockerConfig):
        self.config = config
        self._log_handlers: Dict[str, SubprocessLogHandler] = {}

    def _log_handler(self, operation: str) -> SubprocessLogHandler:
        if operation not in self._log_handlers:
            self._log_handlers[operation] = SubprocessLogHandler(
                operation, self.config.log_dir
            )
        return self._log_handlers[operation]

    def run(
        self,
        command: List[str],
        operation: str = "command",
        capture: bool = False,
        check: bool = True,
        cwd: Optional[Path] = None,
    ) -> CommandResult:
        """
        Run a command and wait for it to finish.

        Args:
            command: Argument list, first element is the executable
            operation: Name used for the dedicated log file
            capture: Capture stdout/stderr instead of streaming them
            check: Raise CommandError on a non-zero exit status
            cwd: Working directory (defaults to the project directory)

        Returns:
            CommandResult with exit status and captured output

        Raises:
            CommandError: If check is set and the command fails
        """
        cwd = cwd or self.config.project_root
        log_handler = self._log_handler(operation)
        log_handler.log_command(command)
        logger.debug(f"Running: {mask_sensitive_data(' '.join(command))} (cwd={cwd})")

        start_time = time.time()
        returncode, stdout, stderr = self._execute(command, cwd, capture)
        duration = time.time() - start_time

        if stdout:
            log_handler.log_output(stdout)
        if stderr:
            log_handler.log_output(stderr, logging.WARNING)
        log_handler.log_completion(returncode, duration)

        result = CommandResult(
            command=command,
            returncode=returncode,
            stdout=stdout,
            stderr=stderr,
            duration=duration,
        )
        logger.debug(mask_sensitive_data(result.get_summary()))

        if check and not result.success:
            logger.error(
                f"{operation} failed (exit code {returncode}), see {log_handler.get_log_file_path()}"
            )
            raise CommandError(command, returncode, stderr)

        return result

    def _execute(
        self,
        command: List[str],
        cwd: Path,
        capture: bool,
    ) -> Tuple[int, str, str]:
        try:
            process = subprocess.run(
                command,
                cwd=cwd,
                capture_output=capture,
                text=True,
            )
        except FileNotFoundError:
            message = f"Executable not found: {command[0]}"
            logger.error(message)
            return 127, "", message

        return process.returncode, process.stdout or "", process.stderr or ""
