from datetime import date

from rpimaint.models import (
    DnsMethod,
    HealthStatus,
    SelfUpdateResult,
    SelfUpdateStatus,
    StepOutcome,
    StepResult,
)
from rpimaint.services.report import ReportBuilder

RESULTS = [
    StepResult("os_update", StepOutcome.SUCCESS, detail="3 upgraded, 1 newly installed, 0 to remove"),
    StepResult("pihole_backup", StepOutcome.SUCCESS),
    StepResult("pihole", StepOutcome.PARTIAL_SUCCESS, label="Success (Core) / Failed (Gravity)"),
    StepResult("unbound", StepOutcome.SUCCESS, label="Up to Date"),
    StepResult("rpimonitor", StepOutcome.NOT_INSTALLED),
    StepResult("cleanup", StepOutcome.FAILED),
]

HEALTH = HealthStatus(
    services_ok=False,
    failed_services=frozenset({"rpimonitor"}),
    dns_ok=True,
    dns_method=DnsMethod.DIG,
)

EXPECTED = """
###################################################
                  SESSION SUMMARY                  
###################################################
Self-Update:    Up to Date (2025112504)
OS Update:      Success
  Details:      3 upgraded, 1 newly installed, 0 to remove
Pi-hole:        Success (Core) / Failed (Gravity)
  Backup:       Success
Unbound:        Up to Date
RPi-Monitor:    Not Installed
Cleanup:        Failed
  Details:      No cleanup needed
---------------------------------------------------
Health Checks:
  Services:     Failed: rpimonitor
  DNS:          OK (Resolved via Localhost)
###################################################"""


def test_render_matches_snapshot():
    self_update = SelfUpdateResult(SelfUpdateStatus.UP_TO_DATE, "2025112504", "2025112504")

    report = ReportBuilder().render(RESULTS, HEALTH, self_update)

    assert report == EXPECTED


def test_render_is_stable_for_same_results():
    builder = ReportBuilder()

    assert builder.render(RESULTS, HEALTH) == builder.render(list(RESULTS), HEALTH)


def test_render_has_one_entry_per_step_in_order():
    results = [
        StepResult("cleanup", StepOutcome.SUCCESS, detail="4 packages removed"),
        StepResult("custom_step", StepOutcome.SKIPPED),
        StepResult("os_update", StepOutcome.FAILED, label="Failed (Update)"),
    ]

    lines = ReportBuilder().render(results, None).splitlines()

    assert lines[4:9] == [
        "Cleanup:        Success",
        "  Details:      4 packages removed",
        "custom_step:    Skipped",
        "OS Update:      Failed (Update)",
        "  Details:      No changes detected",
    ]
    assert "  Services:     Skipped" in lines


def test_subject_includes_date_and_os_status():
    subject = ReportBuilder().subject("Failed (Upgrade)", date(2025, 11, 25))

    assert subject == "RPi Maintenance Report - 2025-11-25 - Failed (Upgrade)"


def test_backup_status_is_nested_under_pihole():
    results = [
        StepResult("pihole_backup", StepOutcome.SKIPPED),
        StepResult("pihole", StepOutcome.NOT_INSTALLED),
        StepResult("unbound", StepOutcome.NOT_INSTALLED),
    ]

    lines = ReportBuilder().render(results, None).splitlines()

    assert lines[4:7] == [
        "Pi-hole:        Not Installed",
        "  Backup:       Skipped",
        "Unbound:        Not Installed",
    ]


def test_backup_without_pihole_result_is_still_reported():
    lines = ReportBuilder().render([StepResult("pihole_backup", StepOutcome.FAILED)], None).splitlines()

    assert lines[4] == "pihole_backup:  Failed"
