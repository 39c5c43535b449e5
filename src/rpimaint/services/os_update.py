"""OS package update step."""

from rpimaint.models import StepOutcome, StepResult
from rpimaint.services.output_parsing import parse_upgrade_summary

STEP_NAME = "os_update"


class OsUpdateService:
    """Refreshes apt metadata and applies a dist-upgrade."""

    def __init__(self, command_runner, logger):
        self.command_runner = command_runner
        self.logger = logger

    def run(self) -> StepResult:
        if not self.command_runner.succeeds(["apt-get", "update"]):
            self.logger.error("apt-get update failed; skipping upgrade.")
            return StepResult(STEP_NAME, StepOutcome.FAILED, label="Failed (Update)")

        preview = self.command_runner.run(["apt-get", "dist-upgrade", "-s"])
        summary = parse_upgrade_summary(preview.stdout) or ""
        if summary:
            self.logger.info("Pending changes: %s", summary)

        if self.command_runner.succeeds(["apt-get", "dist-upgrade", "-y"]):
            return StepResult(STEP_NAME, StepOutcome.SUCCESS, detail=summary)

        self.logger.error("apt-get dist-upgrade failed.")
        return StepResult(STEP_NAME, StepOutcome.FAILED, detail=summary, label="Failed (Upgrade)")
