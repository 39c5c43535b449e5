"""RPi-Monitor update step."""

import os

from rpimaint.constants import RPIMONITOR_PACKAGE, RPIMONITOR_SCRIPT
from rpimaint.models import StepOutcome, StepResult

STEP_NAME = "rpimonitor"


class MonitorService:
    def __init__(self, command_runner, logger, script_path: str = RPIMONITOR_SCRIPT):
        self.command_runner = command_runner
        self.logger = logger
        self.script_path = script_path

    def run(self) -> StepResult:
        if not self.command_runner.succeeds(["dpkg", "-s", RPIMONITOR_PACKAGE]):
            self.logger.info("RPi-Monitor not installed.")
            return StepResult(STEP_NAME, StepOutcome.NOT_INSTALLED)

        if self.command_runner.which("rpimonitor"):
            return self._run_update(["rpimonitor", "-u"], "Command")

        if os.path.isfile(self.script_path) and os.access(self.script_path, os.X_OK):
            return self._run_update([self.script_path], "Script")

        self.logger.warning("RPi-Monitor installed but update command not found.")
        return StepResult(STEP_NAME, StepOutcome.SKIPPED, label="Installed (Update Cmd Missing)")

    def _run_update(self, cmd, method: str) -> StepResult:
        if self.command_runner.succeeds(cmd):
            return StepResult(STEP_NAME, StepOutcome.SUCCESS, label=f"Success ({method})")
        return StepResult(STEP_NAME, StepOutcome.FAILED, label=f"Failed ({method})")
