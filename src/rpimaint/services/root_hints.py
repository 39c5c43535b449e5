"""Unbound root hints refresh step."""

import os

from rpimaint.errors import DownloadError
from rpimaint.models import StepOutcome, StepResult

STEP_NAME = "unbound"


class RootHintsService:
    """Downloads root hints beside the live file and swaps them in when changed."""

    def __init__(self, command_runner, download_service, filesystem_service, logger, hints_path: str, hints_url: str):
        self.command_runner = command_runner
        self.download_service = download_service
        self.filesystem_service = filesystem_service
        self.logger = logger
        self.hints_path = hints_path
        self.hints_url = hints_url

    def run(self) -> StepResult:
        if not os.path.isdir(os.path.dirname(self.hints_path)):
            self.logger.warning("Unbound directory not found, skipping.")
            return StepResult(STEP_NAME, StepOutcome.NOT_INSTALLED)

        candidate = f"{self.hints_path}.new"
        try:
            size = self.download_service.download_file(
                self.hints_url,
                candidate,
                description="Downloading root hints...",
            )
        except DownloadError as exc:
            self.logger.error("Root hints download failed: %s", exc)
            self.filesystem_service.remove_quietly(candidate)
            return StepResult(STEP_NAME, StepOutcome.FAILED, label="Failed (Connection Error)")

        if size == 0:
            self.logger.error("Downloaded root hints empty.")
            self.filesystem_service.remove_quietly(candidate)
            return StepResult(STEP_NAME, StepOutcome.FAILED, label="Failed (Empty Download)")

        if self.filesystem_service.files_identical(self.hints_path, candidate):
            self.filesystem_service.remove_quietly(candidate)
            self.logger.info("Root hints already up to date.")
            return StepResult(STEP_NAME, StepOutcome.SUCCESS, label="Up to Date")

        self.filesystem_service.replace_atomically(candidate, self.hints_path)
        self.logger.info("Root hints updated.")

        if self.command_runner.succeeds(["systemctl", "restart", "unbound"]):
            return StepResult(STEP_NAME, StepOutcome.SUCCESS, label="Updated & Restarted")

        self.logger.error("Unbound restart failed.")
        return StepResult(STEP_NAME, StepOutcome.PARTIAL_SUCCESS, label="Updated but Restart Failed")
