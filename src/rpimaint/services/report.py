"""Session summary rendering."""

from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from rpimaint.models import HealthStatus, SelfUpdateResult, StepResult

BANNER = "#" * 51
RULE = "-" * 51
LABEL_WIDTH = 16

# step name -> (title, detail shown when the step reported none)
STEP_TITLES: Dict[str, Tuple[str, Optional[str]]] = {
    "os_update": ("OS Update", "No changes detected"),
    "pihole": ("Pi-hole", None),
    "unbound": ("Unbound", None),
    "rpimonitor": ("RPi-Monitor", None),
    "cleanup": ("Cleanup", "No cleanup needed"),
}

# steps reported as an indented line under another step
NESTED_STEPS: Dict[str, Tuple[str, str]] = {
    "pihole_backup": ("pihole", "Backup"),
}


def _line(label: str, value: str, indent: int = 0) -> str:
    prefix = " " * indent + f"{label}:"
    return f"{prefix.ljust(LABEL_WIDTH)}{value}"


class ReportBuilder:
    """Renders step results and health into a stable plain-text summary."""

    def render(
        self,
        results: Iterable[StepResult],
        health: Optional[HealthStatus],
        self_update: Optional[SelfUpdateResult] = None,
    ) -> str:
        lines = [
            "",
            BANNER,
            "                  SESSION SUMMARY                  ",
            BANNER,
        ]

        if self_update is not None:
            lines.append(_line("Self-Update", self_update.label))

        results = list(results)
        present = {result.name for result in results}
        nested: Dict[str, List[Tuple[str, StepResult]]] = {}
        for result in results:
            parent, label = NESTED_STEPS.get(result.name, (None, None))
            if parent in present:
                nested.setdefault(parent, []).append((label, result))

        for result in results:
            if NESTED_STEPS.get(result.name, (None,))[0] in present:
                continue
            title, empty_detail = STEP_TITLES.get(result.name, (result.name, None))
            lines.append(_line(title, result.status))
            for label, child in nested.get(result.name, ()):
                lines.append(_line(label, child.status, indent=2))
            detail = result.detail or empty_detail
            if detail:
                lines.append(_line("Details", detail, indent=2))

        lines.append(RULE)
        lines.append("Health Checks:")
        if health is None:
            lines.append(_line("Services", "Skipped", indent=2))
            lines.append(_line("DNS", "Skipped", indent=2))
        else:
            lines.append(_line("Services", health.services_summary, indent=2))
            lines.append(_line("DNS", health.dns_summary, indent=2))
        lines.append(BANNER)
        return "\n".join(lines)

    def subject(self, os_status: str, today: date) -> str:
        return f"RPi Maintenance Report - {today:%Y-%m-%d} - {os_status}"
