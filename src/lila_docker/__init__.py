"""
lila-docker: local lichess development environment

Clones the lichess repositories and drives Docker Compose to build and run
them locally.
"""

__version__ = "0.1.0"
__author__ = "lila-docker Contributors"

from .config import EnvironmentSettings, LilaDockerConfig
from .logging_config import setup_logging

__all__ = [
    "EnvironmentSettings",
    "LilaDockerConfig",
    "setup_logging",
]
