"""
Generates the active lila and lila-ws configuration files from their
checked-in templates, rewriting localhost URLs when running in a Gitpod
workspace.
"""

import logging
import shutil
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from .commands import workspace_url_command
from .config import EnvironmentSettings, LilaDockerConfig
from .models import ConfigurationError
from .runner import CommandRunner

logger = logging.getLogger(__name__)

TEMPLATE_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("conf/lila.original.conf", "conf/lila.conf"),
    ("conf/lila-ws.original.conf", "conf/lila-ws.conf"),
)

# nginx front (8080) and the picfit image server (8212)
WORKSPACE_PORTS: Tuple[int, ...] = (8080, 8212)


def strip_scheme(url: str) -> str:
    return url.split("://", 1)[1] if "://" in url else url


def rewrite_localhost_urls(text: str, resolved: Dict[int, str]) -> str:
    """
    Replace localhost URLs with their workspace equivalents.

    For each port, `http://localhost:<port>` becomes the full resolved URL and
    any remaining bare `localhost:<port>` becomes the resolved host. The
    replacement is literal, so slashes and other separators in the resolved
    URL are kept as they are.
    """
    for port, url in resolved.items():
        url = url.rstrip("/")
        local = f"localhost:{port}"
        text = text.replace(f"http://{local}", url)
        text = text.replace(local, strip_scheme(url))
    return text


class WorkspaceUrlResolver:
    """Asks the Gitpod CLI for the public URL of a forwarded port."""

    def __init__(self, config: LilaDockerConfig, runner: CommandRunner):
        self.config = config
        self.runner = runner

    def resolve(self, port: int) -> str:
        result = self.runner.run(
            workspace_url_command(self.config.workspace_url_binary, port),
            operation="workspace_url",
            capture=True,
        )
        return result.stdout.strip()


class ConfigMaterializer:
    """Copies template/active config pairs and applies workspace rewrites."""

    def __init__(
        self,
        config: LilaDockerConfig,
        runner: CommandRunner,
        template_pairs: Sequence[Tuple[str, str]] = TEMPLATE_PAIRS,
        workspace_ports: Sequence[int] = WORKSPACE_PORTS,
    ):
        self.config = config
        self.template_pairs = template_pairs
        self.workspace_ports = workspace_ports
        self.url_resolver = WorkspaceUrlResolver(config, runner)

    def materialize(self, settings: EnvironmentSettings) -> List[Path]:
        """
        Regenerate every active config file.

        Returns:
            Paths of the files written
        """
        written = []
        root = self.config.project_root
        for template, active in self.template_pairs:
            source, target = root / template, root / active
            logger.info(f"Copying {source} to {target}")
            try:
                shutil.copyfile(source, target)
            except OSError as e:
                raise ConfigurationError(f"Cannot create {target} from {source}: {e}") from e
            written.append(target)

        if settings.is_gitpod:
            self.rewrite_for_workspace(written)

        return written

    def rewrite_for_workspace(self, paths: List[Path]) -> None:
        resolved = {port: self.url_resolver.resolve(port) for port in self.workspace_ports}
        for port, url in resolved.items():
            logger.info(f"Rewriting localhost:{port} to {url}")

        for path in paths:
            path.write_text(rewrite_localhost_urls(path.read_text(), resolved))
