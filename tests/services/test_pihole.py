import os
from datetime import date

from rpimaint.models import StepOutcome
from rpimaint.services.filesystem import FileSystemService
from rpimaint.services.pihole import PiholeService


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None

    def info(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None

    def error(self, *_args, **_kwargs):
        return None


def _service(runner, backup_dir):
    return PiholeService(
        runner,
        FileSystemService(logger=DummyLogger()),
        DummyLogger(),
        backup_dir=str(backup_dir),
        today=lambda: date(2025, 11, 25),
    )


def test_missing_pihole_reports_not_installed_and_skips_backup(tmp_path, fake_runner):
    runner = fake_runner(available=())
    service = _service(runner, tmp_path / "backups")

    backup = service.backup()
    update = service.update()

    assert backup.outcome is StepOutcome.SKIPPED
    assert update.status == "Not Installed"
    assert runner.calls == []
    assert not (tmp_path / "backups").exists()


def test_backup_names_file_by_date(tmp_path, fake_runner):
    runner = fake_runner(available={"pihole"})
    service = _service(runner, tmp_path / "backups")

    result = service.backup()

    assert result.outcome is StepOutcome.SUCCESS
    expected = os.path.join(str(tmp_path / "backups"), "pihole-backup-20251125.tar.gz")
    assert ["pihole", "-a", "-t", expected] in runner.calls


def test_backup_retention_keeps_five_newest(tmp_path, fake_runner):
    backup_dir = tmp_path / "backups"
    backup_dir.mkdir()
    for index in range(9):
        path = backup_dir / f"pihole-backup-2025010{index}.tar.gz"
        path.write_text("x", encoding="utf-8")
        os.utime(path, (1000 + index, 1000 + index))
    (backup_dir / "unrelated.txt").write_text("keep me", encoding="utf-8")

    _service(fake_runner(available={"pihole"}), backup_dir).backup()

    remaining = sorted(name for name in os.listdir(backup_dir) if name.startswith("pihole-backup-"))
    assert remaining == [f"pihole-backup-2025010{index}.tar.gz" for index in range(4, 9)]
    assert (backup_dir / "unrelated.txt").exists()


def test_backup_failure_does_not_block_update(tmp_path, fake_runner):
    runner = fake_runner({("pihole", "-a"): (1, "teleporter error")}, available={"pihole"})
    service = _service(runner, tmp_path / "backups")

    backup = service.backup()
    update = service.update()

    assert backup.outcome is StepOutcome.FAILED
    assert update.status == "Success (Core & Gravity)"


def test_gravity_failure_is_partial_success(tmp_path, fake_runner):
    runner = fake_runner({("pihole", "-g"): (1, "")}, available={"pihole"})

    result = _service(runner, tmp_path).update()

    assert result.outcome is StepOutcome.PARTIAL_SUCCESS
    assert result.status == "Success (Core) / Failed (Gravity)"


def test_core_failure_skips_gravity(tmp_path, fake_runner):
    runner = fake_runner({("pihole", "-up"): (1, "")}, available={"pihole"})

    result = _service(runner, tmp_path).update()

    assert result.status == "Failed"
    assert not runner.ran("pihole", "-g")
