"""
Pytest configuration and fixtures for lila-docker tests.

Provides common fixtures and test utilities across all test modules.
"""

import os
import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from lila_docker.config import LilaDockerConfig

from .mock_runner import FakeDockerEnvironment, MockCommandRunner

SETTINGS_KEYS = [
    "COMPOSE_PROFILES",
    "REPOS",
    "DIRS",
    "SETUP_DATABASE",
    "SU_PASSWORD",
    "PASSWORD",
    "GITPOD_WORKSPACE_ID",
]

LILA_TEMPLATE = """\
net.domain = "localhost:8080"
net.socket.domains = [ "localhost:8080" ]
net.base_url = "http://localhost:8080"
memo.picfitUrl = "http://localhost:8212"
"""

LILA_WS_TEMPLATE = """\
csrf.origin = "http://localhost:8080"
"""


@pytest.fixture
def isolated_test_env(tmp_path: Path) -> Generator[dict[str, str], None, None]:
    """
    Create isolated test environment with clean environment variables.

    Yields:
        Dictionary of original environment variables
    """
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith("LILA_DOCKER_") or key in SETTINGS_KEYS:
            del os.environ[key]

    os.environ["LILA_DOCKER_LOG_DIR"] = str(tmp_path / "logs")

    yield original_env

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def temp_workspace(isolated_test_env) -> Generator[Path, None, None]:
    """
    Create a project directory holding the config templates.

    Yields:
        Path to temporary workspace
    """
    temp_dir = tempfile.mkdtemp(prefix="lila_docker_workspace_")
    workspace = Path(temp_dir)
    (workspace / "conf").mkdir()
    (workspace / "conf" / "lila.original.conf").write_text(LILA_TEMPLATE)
    (workspace / "conf" / "lila-ws.original.conf").write_text(LILA_WS_TEMPLATE)

    yield workspace

    shutil.rmtree(temp_dir)


@pytest.fixture
def test_config(temp_workspace: Path) -> LilaDockerConfig:
    """
    Create test configuration rooted in the temporary workspace.

    Returns:
        Test configuration instance
    """
    return LilaDockerConfig(
        log_level="DEBUG",
        verbose=True,
        log_dir=str(temp_workspace / "logs"),
        project_dir=str(temp_workspace),
        db_wait_max_attempts=5,
        db_wait_interval=0.01,
    )


@pytest.fixture
def mock_runner(test_config: LilaDockerConfig) -> MockCommandRunner:
    """Runner that records commands instead of executing them."""
    return MockCommandRunner(test_config)


@pytest.fixture
def docker_env(test_config: LilaDockerConfig) -> FakeDockerEnvironment:
    """Runner simulating git and a Docker Compose project."""
    return FakeDockerEnvironment(test_config)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
