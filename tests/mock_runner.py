"""
Mock command execution for testing

Provides runners that record the commands lila-docker issues and answer
them without spawning any process.
"""

from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from lila_docker.runner import CommandRunner

Response = Tuple[int, str, str]


def contains(command: Sequence[str], fragment: Sequence[str]) -> bool:
    """Whether `fragment` appears as a contiguous run inside `command`."""
    size = len(fragment)
    return any(
        list(command[i:i + size]) == list(fragment)
        for i in range(len(command) - size + 1)
    )


class MockCommandRunner(CommandRunner):
    """Records commands and replies with scripted results."""

    def __init__(self, config):
        super().__init__(config)
        self.commands: List[List[str]] = []
        self._responses: List[Tuple[Tuple[str, ...], List[Response]]] = []

    def respond(self, *fragment: str, stdout: str = "", returncode: int = 0, stderr: str = ""):
        """Answer commands containing `fragment`. Later registrations win."""
        self._responses.append((fragment, [(returncode, stdout, stderr)]))

    def respond_sequence(self, *fragment: str, returncodes: Sequence[int]):
        """Answer successive matching commands with the given exit codes; the last one repeats."""
        self._responses.append((fragment, [(code, "", "") for code in returncodes]))

    def ran(self, *fragment: str) -> bool:
        return bool(self.find(*fragment))

    def find(self, *fragment: str) -> List[List[str]]:
        return [command for command in self.commands if contains(command, fragment)]

    def _execute(self, command, cwd, capture) -> Response:
        self.commands.append(list(command))
        for fragment, queue in reversed(self._responses):
            if contains(command, fragment):
                return queue.pop(0) if len(queue) > 1 else queue[0]
        return self.default_response(command, cwd)

    def default_response(self, command: List[str], cwd: Path) -> Response:
        return 0, "", ""


class FakeDockerEnvironment(MockCommandRunner):
    """
    Simulates a Docker Compose project and git clones.

    Tracks which services exist and whether they run, so lifecycle
    commands can be chained the way a developer would run them.
    """

    def __init__(
        self,
        config,
        services: Sequence[str] = ("mongodb", "redis", "lila", "lila_ws", "nginx"),
        profiles: Sequence[str] = ("search", "utils"),
    ):
        super().__init__(config)
        self.defined_services = list(services)
        self.profiles = list(profiles)
        self.state: Dict[str, str] = {}
        self.volumes_removed = False

    def _services(self, command: List[str]) -> List[str]:
        if "--status" in command:
            wanted = command[command.index("--status") + 1]
            return [name for name, state in self.state.items() if state == wanted]
        return list(self.state)

    def default_response(self, command, cwd) -> Response:
        if contains(command, ["git", "clone"]):
            (Path(command[-1]) / ".git").mkdir(parents=True, exist_ok=True)
        elif contains(command, ["ps", "-a", "--services"]):
            return 0, "".join(f"{name}\n" for name in self._services(command)), ""
        elif contains(command, ["config", "--profiles"]):
            return 0, "\n".join(self.profiles) + "\n", ""
        elif contains(command, ["up", "-d"]):
            self.state = {name: "running" for name in self.defined_services}
            self.volumes_removed = False
        elif command[-1] == "stop":
            self.state = {name: "exited" for name in self.state}
        elif command[-1] == "start":
            self.state = {name: "running" for name in self.state}
        elif contains(command, ["down", "-v"]):
            self.state = {}
            self.volumes_removed = True
        return 0, "", ""

    def running_services(self) -> List[str]:
        return sorted(name for name, state in self.state.items() if state == "running")
