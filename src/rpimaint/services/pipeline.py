"""Ordered, failure-isolated execution of maintenance steps."""

import time
from typing import Callable, List, Tuple

from rpimaint.models import StepOutcome, StepResult

SECTION_RULE = "=" * 51


class StepPipeline:
    """Runs registered steps in order and collects one result per step.

    A step that raises is recorded as failed; later steps still run.
    """

    def __init__(self, logger):
        self.logger = logger
        self.steps: List[Tuple[str, str, Callable[[], StepResult]]] = []
        self.results: List[StepResult] = []

    def add(self, name: str, title: str, callback: Callable[[], StepResult]) -> "StepPipeline":
        self.steps.append((name, title, callback))
        return self

    def run(self) -> List[StepResult]:
        for index, (name, title, callback) in enumerate(self.steps, start=1):
            self.log_section(f"{index}. {title}")
            self.results.append(self._run_step(name, callback))
        return self.results

    def log_section(self, title: str):
        self.logger.info("")
        self.logger.info(SECTION_RULE)
        self.logger.info(" %s", title)
        self.logger.info(SECTION_RULE)

    def _run_step(self, name: str, callback: Callable[[], StepResult]) -> StepResult:
        started = time.monotonic()
        try:
            result = callback()
        except Exception as exc:
            self.logger.exception("Step '%s' raised an unexpected error", name)
            result = StepResult(name, StepOutcome.FAILED, detail=str(exc))

        if result.name != name:
            result = StepResult(name, result.outcome, result.detail, result.label)

        self.logger.debug(
            "Step '%s' finished in %.1fs: %s",
            name,
            time.monotonic() - started,
            result.status,
        )
        return result
