"""Shared domain models for rpi-maintenance."""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from . import constants


@dataclass
class RunContext:
    """Process identity, configuration and run flags for one execution."""

    local_version: str
    program_path: str
    argv: Tuple[str, ...] = ()
    pid: int = field(default_factory=os.getpid)
    log_file: str = constants.LOG_FILE
    lock_file: str = constants.LOCK_FILE
    email_to: str = constants.EMAIL_TO
    update_url: str = constants.UPDATE_URL
    backup_dir: str = constants.BACKUP_DIR
    root_hints_path: str = constants.ROOT_HINTS_PATH
    root_hints_url: str = constants.ROOT_HINTS_URL
    connectivity_host: str = constants.CONNECTIVITY_HOST
    min_free_kb: int = constants.MIN_FREE_KB
    services: Tuple[str, ...] = constants.HEALTH_SERVICES
    verbose: bool = False
    skip_reboot: bool = False
    update_only: bool = False


class StepOutcome(Enum):
    SUCCESS = "Success"
    PARTIAL_SUCCESS = "Partial Success"
    FAILED = "Failed"
    SKIPPED = "Skipped"
    NOT_INSTALLED = "Not Installed"


@dataclass(frozen=True)
class StepResult:
    """Outcome of one maintenance step.

    ``label`` is the human-readable status shown in the report; when omitted
    the outcome's display value is used. ``detail`` carries supplementary,
    best-effort information such as the upgrade summary.
    """

    name: str
    outcome: StepOutcome
    detail: str = ""
    label: Optional[str] = None

    @property
    def status(self) -> str:
        return self.label or self.outcome.value


class DnsMethod(Enum):
    DIG = "dig"
    NSLOOKUP = "nslookup"
    NONE = "none"


@dataclass(frozen=True)
class HealthStatus:
    services_ok: bool
    failed_services: FrozenSet[str]
    dns_ok: Optional[bool]
    dns_method: DnsMethod

    @property
    def services_summary(self) -> str:
        if self.services_ok:
            return "All OK"
        return "Failed: " + " ".join(sorted(self.failed_services))

    @property
    def dns_summary(self) -> str:
        if self.dns_method is DnsMethod.NONE:
            return "Skipped (No DNS tools found)"
        if self.dns_ok:
            return "OK (Resolved via Localhost)"
        return f"Failed ({self.dns_method.value.capitalize()} Resolution Error)"


class SelfUpdateStatus(Enum):
    SKIPPED = "Skipped"
    UP_TO_DATE = "Up to Date"
    UPDATED = "Updated"
    FAILED = "Failed"


@dataclass(frozen=True)
class SelfUpdateResult:
    status: SelfUpdateStatus
    local_version: str
    remote_version: Optional[str] = None
    reason: Optional[str] = None

    @property
    def label(self) -> str:
        if self.status is SelfUpdateStatus.UP_TO_DATE:
            return f"Up to Date ({self.local_version})"
        if self.status is SelfUpdateStatus.UPDATED:
            return f"Updated ({self.local_version} -> {self.remote_version}) & Restarted"
        if self.status is SelfUpdateStatus.FAILED:
            return f"Failed ({self.reason})"
        return self.status.value


class RebootDecision(Enum):
    SKIP = "skip"
    CANCEL = "cancel"
    REBOOT = "reboot"
