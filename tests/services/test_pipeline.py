import pytest

from rpimaint.models import StepOutcome, StepResult
from rpimaint.services.pipeline import StepPipeline


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None

    def info(self, *_args, **_kwargs):
        return None

    def exception(self, *_args, **_kwargs):
        return None


def _step(name, outcome):
    def callback():
        return StepResult(name, outcome)

    return callback


def _raising_step():
    raise RuntimeError("disk on fire")


@pytest.mark.parametrize(
    "outcomes",
    [
        [StepOutcome.FAILED, StepOutcome.SUCCESS, StepOutcome.NOT_INSTALLED],
        [StepOutcome.SKIPPED, StepOutcome.FAILED, StepOutcome.FAILED],
        [StepOutcome.SUCCESS, StepOutcome.PARTIAL_SUCCESS, StepOutcome.SUCCESS],
    ],
)
def test_pipeline_runs_every_step_in_order(outcomes):
    pipeline = StepPipeline(DummyLogger())
    for index, outcome in enumerate(outcomes):
        pipeline.add(f"step{index}", f"Step {index}", _step(f"step{index}", outcome))

    results = pipeline.run()

    assert [result.name for result in results] == [f"step{i}" for i in range(len(outcomes))]
    assert [result.outcome for result in results] == outcomes


def test_raising_step_is_recorded_as_failed_and_pipeline_continues():
    ran = []
    pipeline = (
        StepPipeline(DummyLogger())
        .add("first", "First", _raising_step)
        .add("second", "Second", lambda: ran.append("second") or StepResult("second", StepOutcome.SUCCESS))
    )

    results = pipeline.run()

    assert results[0] == StepResult("first", StepOutcome.FAILED, detail="disk on fire")
    assert results[1].outcome is StepOutcome.SUCCESS
    assert ran == ["second"]


def test_result_name_is_bound_to_registered_step():
    pipeline = StepPipeline(DummyLogger()).add(
        "registered",
        "Registered",
        lambda: StepResult("other", StepOutcome.SUCCESS, label="Up to Date"),
    )

    (result,) = pipeline.run()

    assert result.name == "registered"
    assert result.status == "Up to Date"
