"""Pi-hole backup and update steps."""

import os
from datetime import date
from typing import Callable

from rpimaint.constants import BACKUP_PREFIX, BACKUP_RETENTION, BACKUP_SUFFIX
from rpimaint.models import StepOutcome, StepResult

BACKUP_STEP = "pihole_backup"
UPDATE_STEP = "pihole"


class PiholeService:
    """Teleporter backup with retention, then core and gravity updates."""

    def __init__(
        self,
        command_runner,
        filesystem_service,
        logger,
        backup_dir: str,
        retention: int = BACKUP_RETENTION,
        today: Callable[[], date] = date.today,
    ):
        self.command_runner = command_runner
        self.filesystem_service = filesystem_service
        self.logger = logger
        self.backup_dir = backup_dir
        self.retention = retention
        self.today = today

    def is_installed(self) -> bool:
        return self.command_runner.which("pihole") is not None

    def backup_path(self) -> str:
        stamp = self.today().strftime("%Y%m%d")
        return os.path.join(self.backup_dir, f"{BACKUP_PREFIX}{stamp}{BACKUP_SUFFIX}")

    def backup(self) -> StepResult:
        if not self.is_installed():
            self.logger.info("Pi-hole not installed; no backup taken.")
            return StepResult(BACKUP_STEP, StepOutcome.SKIPPED)

        self.logger.info("Creating Teleporter Backup...")
        try:
            os.makedirs(self.backup_dir, exist_ok=True)
        except OSError as exc:
            self.logger.warning("Could not create backup directory %s: %s", self.backup_dir, exc)
            return StepResult(BACKUP_STEP, StepOutcome.FAILED, detail=str(exc))

        if not self.command_runner.succeeds(["pihole", "-a", "-t", self.backup_path()]):
            self.logger.warning("Pi-hole backup failed.")
            return StepResult(BACKUP_STEP, StepOutcome.FAILED)

        removed = self.filesystem_service.prune_files(
            self.backup_dir,
            BACKUP_PREFIX,
            BACKUP_SUFFIX,
            keep=self.retention,
        )
        if removed:
            self.logger.info("Removed %s old backup(s).", len(removed))
        return StepResult(BACKUP_STEP, StepOutcome.SUCCESS)

    def update(self) -> StepResult:
        if not self.is_installed():
            self.logger.warning("Pi-hole not found, skipping.")
            return StepResult(UPDATE_STEP, StepOutcome.NOT_INSTALLED)

        if not self.command_runner.succeeds(["pihole", "-up"]):
            self.logger.error("Pi-hole core update failed.")
            return StepResult(UPDATE_STEP, StepOutcome.FAILED)

        self.logger.info("Updating Gravity (Blocklists)...")
        if self.command_runner.succeeds(["pihole", "-g"]):
            return StepResult(UPDATE_STEP, StepOutcome.SUCCESS, label="Success (Core & Gravity)")

        self.logger.warning("Gravity update failed.")
        return StepResult(
            UPDATE_STEP,
            StepOutcome.PARTIAL_SUCCESS,
            label="Success (Core) / Failed (Gravity)",
        )
