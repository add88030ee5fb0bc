"""
Database seeding for a freshly started environment.

Waits for MongoDB to answer, then applies the lila indexes, generates test
data with lila-db-seed and creates the well-known test users. Any failing
step aborts the sequence; whatever was already written stays in the
database.
"""

import logging
import time
from typing import Callable, List

from .compose import ComposeClient
from .config import EnvironmentSettings
from .models import CommandResult
from .readiness import RetryPolicy, wait_until

logger = logging.getLogger(__name__)

MONGO_SERVICE = "mongodb"
SEED_SERVICE = "python"
DATABASE = "lichess"
SEARCH_HOST = "elasticsearch:9200"

PING_COMMAND = ["mongo", "--quiet", "--eval", "db.adminCommand('ping')"]


class DatabaseSeeder:
    """Runs the seeding scripts inside one-off containers."""

    def __init__(
        self,
        compose: ComposeClient,
        policy: RetryPolicy,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.compose = compose
        self.policy = policy
        self.clock = clock
        self.sleep = sleep

    def is_database_ready(self) -> bool:
        result = self.compose.exec(MONGO_SERVICE, PING_COMMAND, check=False)
        return result.success

    def wait_for_database(self) -> int:
        return wait_until(
            self.is_database_ready,
            self.policy,
            description="mongodb",
            clock=self.clock,
            sleep=self.sleep,
        )

    def apply_indexes(self) -> CommandResult:
        logger.info("Creating database indexes")
        return self.compose.run(
            MONGO_SERVICE,
            ["mongo", "--host", MONGO_SERVICE, DATABASE, "/lila/bin/mongodb/indexes.js"],
            operation="seed",
        )

    def seed_data(self, settings: EnvironmentSettings) -> CommandResult:
        logger.info("Seeding database with test data")
        return self.compose.run(
            SEED_SERVICE,
            [
                "python",
                "/lila-db-seed/spamdb/spamdb.py",
                f"--uri=mongodb://{MONGO_SERVICE}/{DATABASE}",
                f"--password={settings.password}",
                f"--su-password={settings.su_password}",
                "--es",
                f"--es-host={SEARCH_HOST}",
            ],
            operation="seed",
        )

    def seed_users(self) -> CommandResult:
        logger.info("Creating test users")
        return self.compose.run(
            MONGO_SERVICE,
            ["mongo", "--quiet", "--host", MONGO_SERVICE, DATABASE, "/scripts/mongodb/users.js"],
            operation="seed",
        )

    def seed(self, settings: EnvironmentSettings) -> List[CommandResult]:
        """Wait for the database, then run every seeding step in order."""
        self.wait_for_database()
        return [
            self.apply_indexes(),
            self.seed_data(settings),
            self.seed_users(),
        ]
