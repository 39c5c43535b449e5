"""Package and journal cleanup step."""

from rpimaint.constants import JOURNAL_RETENTION
from rpimaint.models import StepOutcome, StepResult
from rpimaint.services.output_parsing import count_removed_packages

STEP_NAME = "cleanup"


class CleanupService:
    def __init__(self, command_runner, logger, journal_retention: str = JOURNAL_RETENTION):
        self.command_runner = command_runner
        self.logger = logger
        self.journal_retention = journal_retention

    def run(self) -> StepResult:
        succeeded = True

        autoremove = self.command_runner.run(["apt-get", "autoremove", "--purge", "-y"])
        if autoremove.returncode != 0:
            self.logger.error("apt-get autoremove failed.")
            succeeded = False

        # apt-get clean does not affect the cleanup status
        self.command_runner.run(["apt-get", "clean"])

        self.logger.info("Vacuuming systemd journal (keeping %s)...", self.journal_retention)
        if not self.command_runner.succeeds(["journalctl", f"--vacuum-time={self.journal_retention}"]):
            self.logger.error("Journal vacuum failed.")
            succeeded = False

        if not succeeded:
            return StepResult(STEP_NAME, StepOutcome.FAILED)

        removed = count_removed_packages(autoremove.stdout)
        return StepResult(STEP_NAME, StepOutcome.SUCCESS, detail=f"{removed} packages removed")
