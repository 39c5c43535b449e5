import logging
import os
import signal
import time
from datetime import date, datetime
from typing import List, Optional

import requests
from rich.console import Console

from .errors import MaintenanceError, PreflightError
from .models import (
    HealthStatus,
    RebootDecision,
    RunContext,
    SelfUpdateResult,
    SelfUpdateStatus,
    StepResult,
)
from .services.cleanup import CleanupService
from .services.command_runner import CommandRunner
from .services.download import DownloadService
from .services.filesystem import FileSystemService
from .services.health import HealthService
from .services.lock import LockManager
from .services.monitor import MonitorService
from .services.notifier import MailNotifier
from .services.os_update import OsUpdateService
from .services.pihole import PiholeService
from .services.pipeline import StepPipeline
from .services.preflight import PreflightService
from .services.reboot import RebootGate
from .services.report import ReportBuilder
from .services.root_hints import RootHintsService
from .services.self_update import SelfUpdateService, read_installed_version
from .services.session_log import SessionLog

console = Console()
logger = logging.getLogger("rpimaint")

LOG_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
RELEASE_SIGNALS = (signal.SIGTERM, signal.SIGHUP)


class MaintenanceOrchestrator:
    def __init__(
        self,
        context: RunContext,
        command_runner: Optional[CommandRunner] = None,
        requests_module=requests,
        exec_fn=os.execv,
        stdin=None,
        sleep=time.sleep,
    ):
        self.context = context
        self.self_update_result: Optional[SelfUpdateResult] = None
        self.results: List[StepResult] = []
        self.health: Optional[HealthStatus] = None
        self.log_file_handler: Optional[logging.Handler] = None

        self.command_runner = command_runner or CommandRunner(logger=logger)
        self.filesystem_service = FileSystemService(logger=logger)
        self.download_service = DownloadService(
            logger=logger,
            console=console,
            requests_module=requests_module,
            show_progress=context.verbose,
        )
        self.preflight_service = PreflightService(command_runner=self.command_runner, logger=logger)
        self.self_update_service = SelfUpdateService(
            download_service=self.download_service,
            filesystem_service=self.filesystem_service,
            logger=logger,
            exec_fn=exec_fn,
        )
        self.lock_manager = LockManager(context.lock_file, logger=logger, pid=context.pid)
        self.session_log = SessionLog(logger)

        self.os_update_service = OsUpdateService(self.command_runner, logger)
        self.pihole_service = PiholeService(
            self.command_runner,
            self.filesystem_service,
            logger,
            backup_dir=context.backup_dir,
        )
        self.root_hints_service = RootHintsService(
            self.command_runner,
            self.download_service,
            self.filesystem_service,
            logger,
            hints_path=context.root_hints_path,
            hints_url=context.root_hints_url,
        )
        self.monitor_service = MonitorService(self.command_runner, logger)
        self.cleanup_service = CleanupService(self.command_runner, logger)
        self.health_service = HealthService(self.command_runner, logger)
        self.report_builder = ReportBuilder()
        self.notifier = MailNotifier(self.command_runner, logger)
        self.reboot_gate = RebootGate(
            self.command_runner,
            logger,
            console,
            skip_reboot=context.skip_reboot,
            stdin=stdin,
            sleep=sleep,
        )
        self.pipeline = self._build_pipeline()

    def _build_pipeline(self) -> StepPipeline:
        return (
            StepPipeline(logger)
            .add("os_update", "Updating OS Packages", self.os_update_service.run)
            .add("pihole_backup", "Backing up Pi-hole", self.pihole_service.backup)
            .add("pihole", "Updating Pi-hole", self.pihole_service.update)
            .add("unbound", "Updating Unbound Root Hints", self.root_hints_service.run)
            .add("rpimonitor", "Updating RPi-Monitor", self.monitor_service.run)
            .add("cleanup", "Cleaning up", self.cleanup_service.run)
        )

    def run_preflight(self):
        self.preflight_service.check_root()
        self.preflight_service.check_dependencies()
        self.preflight_service.check_connectivity(self.context.connectivity_host)

    def self_update(self) -> SelfUpdateResult:
        try:
            return self.self_update_service.check_and_apply(
                update_url=self.context.update_url,
                local_version=self.context.local_version,
                program_path=self.context.program_path,
                argv=self.context.argv,
            )
        except (MaintenanceError, OSError) as exc:
            logger.warning("Self-update failed: %s", exc)
            return SelfUpdateResult(SelfUpdateStatus.FAILED, self.context.local_version, reason=str(exc))

    def start_logging(self):
        logger.setLevel(logging.DEBUG)
        try:
            self.filesystem_service.rotate_log(self.context.log_file)
        except OSError as exc:
            logger.warning("Could not rotate %s: %s", self.context.log_file, exc)

        try:
            handler = logging.FileHandler(self.context.log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not open log file %s: %s", self.context.log_file, exc)
        else:
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT))
            logger.addHandler(handler)
            self.log_file_handler = handler

        self.session_log.open()

    def stop_logging(self):
        self.session_log.close()
        if self.log_file_handler:
            logger.removeHandler(self.log_file_handler)
            self.log_file_handler.close()
            self.log_file_handler = None

    def run_health_checks(self) -> HealthStatus:
        self.pipeline.log_section(f"{len(self.pipeline.steps) + 1}. Post-Update Health Checks")
        return self.health_service.check(self.context.services)

    def os_status(self) -> str:
        for result in self.results:
            if result.name == "os_update":
                return result.status
        return "Skipped"

    def send_report(self) -> bool:
        self.pipeline.log_section("Generating Report")
        summary = self.report_builder.render(self.results, self.health, self.self_update_result)
        for line in summary.splitlines():
            logger.info(line)

        subject = self.report_builder.subject(self.os_status(), date.today())
        return self.notifier.send(subject, self.session_log.read_text(), self.context.email_to)

    def reboot(self) -> int:
        decision = self.reboot_gate.decide()
        if decision is RebootDecision.REBOOT:
            self.reboot_gate.reboot()
        return 0

    def _install_signal_handlers(self):
        previous = {}
        for signum in RELEASE_SIGNALS:
            previous[signum] = signal.signal(signum, self._handle_signal)
        return previous

    @staticmethod
    def _handle_signal(signum, _frame):
        raise SystemExit(128 + signum)

    @staticmethod
    def _restore_signal_handlers(previous):
        for signum, handler in previous.items():
            signal.signal(signum, handler)

    def run(self) -> int:
        exit_code = 1
        lock_acquired = False
        previous_handlers = self._install_signal_handlers()

        try:
            self.context.local_version = read_installed_version(
                self.context.program_path,
                self.context.local_version,
            )
            logger.info("Starting rpi-maintenance v%s", self.context.local_version)
            self.run_preflight()

            self.self_update_result = self.self_update()
            if self.context.update_only:
                logger.info("Update-only mode requested. Script is up to date. Exiting.")
                exit_code = 0
                return exit_code

            self.preflight_service.check_disk_space(self.context.min_free_kb)

            self.lock_manager.acquire()
            lock_acquired = True
            os.environ["DEBIAN_FRONTEND"] = "noninteractive"

            self.start_logging()
            self.pipeline.log_section(f"RPi Maintenance Started: {datetime.now():%c}")

            self.results = self.pipeline.run()
            self.health = self.run_health_checks()
            self.send_report()

            exit_code = self.reboot()
            return exit_code

        except PreflightError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            exit_code = 1
            return exit_code
        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            exit_code = 1
            return exit_code
        except MaintenanceError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            exit_code = 1
            return exit_code
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            exit_code = 1
            return exit_code
        finally:
            if lock_acquired:
                self.lock_manager.release()
            self.stop_logging()
            self._restore_signal_handlers(previous_handlers)
