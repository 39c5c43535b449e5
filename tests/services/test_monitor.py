from rpimaint.models import StepOutcome
from rpimaint.services.monitor import MonitorService


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


def test_package_absent_is_not_installed(tmp_path, fake_runner):
    runner = fake_runner({("dpkg", "-s", "rpimonitor"): (1, "not installed")}, available={"rpimonitor"})

    result = MonitorService(runner, DummyLogger(), script_path=str(tmp_path / "x.pl")).run()

    assert result.outcome is StepOutcome.NOT_INSTALLED
    assert not runner.ran("rpimonitor")


def test_update_command_is_preferred(tmp_path, fake_runner):
    runner = fake_runner(available={"rpimonitor"})

    result = MonitorService(runner, DummyLogger(), script_path=str(tmp_path / "x.pl")).run()

    assert result.status == "Success (Command)"
    assert ["rpimonitor", "-u"] in runner.calls


def test_falls_back_to_update_script(tmp_path, fake_runner):
    script = tmp_path / "update_packages_status.pl"
    script.write_text("#!/usr/bin/perl\n", encoding="utf-8")
    script.chmod(0o755)
    runner = fake_runner({(str(script),): (2, "")})

    result = MonitorService(runner, DummyLogger(), script_path=str(script)).run()

    assert result.status == "Failed (Script)"
    assert [str(script)] in runner.calls


def test_missing_update_command_is_a_warning_not_a_failure(tmp_path, fake_runner):
    runner = fake_runner()

    result = MonitorService(runner, DummyLogger(), script_path=str(tmp_path / "missing.pl")).run()

    assert result.outcome is StepOutcome.SKIPPED
    assert result.status == "Installed (Update Cmd Missing)"
