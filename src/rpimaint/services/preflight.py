"""Fatal precondition checks that run before any mutating step."""

import os
import shutil
from typing import Iterable

from rpimaint.constants import REQUIRED_COMMANDS, SYSTEM_PATH
from rpimaint.errors import PreflightError
from rpimaint.errors_catalog import actionable_error


class PreflightService:
    """Root, dependency, connectivity and disk space checks."""

    def __init__(self, command_runner, logger, disk_usage=shutil.disk_usage, geteuid=None):
        self.command_runner = command_runner
        self.logger = logger
        self.disk_usage = disk_usage
        self.geteuid = geteuid or os.geteuid

    def check_root(self):
        if self.geteuid() != 0:
            raise PreflightError(actionable_error("not_root"))

    def check_dependencies(self, commands: Iterable[str] = REQUIRED_COMMANDS):
        os.environ["PATH"] = SYSTEM_PATH
        for command in commands:
            if not self.command_runner.which(command):
                raise PreflightError(actionable_error("missing_dependency", command=command))

    def check_connectivity(self, host: str):
        self.logger.info("Checking internet connectivity...")
        if not self.command_runner.succeeds(["ping", "-c", "1", host]):
            raise PreflightError(actionable_error("no_connectivity", host=host))

    def check_disk_space(self, min_free_kb: int, path: str = "/"):
        self.logger.info("Checking disk space...")
        available_kb = self.disk_usage(path).free // 1024
        if available_kb < min_free_kb:
            raise PreflightError(
                actionable_error(
                    "insufficient_disk",
                    available_mb=available_kb // 1024,
                    required_mb=min_free_kb // 1024,
                )
            )
        self.logger.debug("Disk space OK: %sMB available.", available_kb // 1024)
