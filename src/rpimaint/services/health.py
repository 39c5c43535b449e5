"""Post-maintenance service and DNS health checks."""

from typing import Iterable

from rpimaint.constants import DNS_PROBE_HOST, DNS_PROBE_SERVER
from rpimaint.models import DnsMethod, HealthStatus


class HealthService:
    """Observes service and resolver state; never remediates."""

    def __init__(self, command_runner, logger):
        self.command_runner = command_runner
        self.logger = logger

    def check(self, services: Iterable[str]) -> HealthStatus:
        failed = set()
        for service in services:
            if self.command_runner.succeeds(["systemctl", "is-active", "--quiet", service]):
                self.logger.info("Service '%s': OK", service)
            else:
                self.logger.error("Service '%s': FAILED", service)
                failed.add(service)

        dns_method, dns_ok = self.check_dns()
        status = HealthStatus(
            services_ok=not failed,
            failed_services=frozenset(failed),
            dns_ok=dns_ok,
            dns_method=dns_method,
        )
        self.logger.info("DNS Check: %s", status.dns_summary)
        return status

    def check_dns(self):
        if self.command_runner.which("dig"):
            ok = self.command_runner.succeeds(
                ["dig", f"@{DNS_PROBE_SERVER}", DNS_PROBE_HOST, "+short", "+time=2"]
            )
            return DnsMethod.DIG, ok

        if self.command_runner.which("nslookup"):
            ok = self.command_runner.succeeds(["nslookup", DNS_PROBE_HOST, DNS_PROBE_SERVER])
            return DnsMethod.NSLOOKUP, ok

        return DnsMethod.NONE, None
