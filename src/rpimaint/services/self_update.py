"""Self-update service: fetch, compare, replace and re-exec the running program."""

import os
import re
import sys
import tempfile
from typing import Callable, Optional, Sequence

from packaging import version

from rpimaint.constants import UPDATE_URL_PLACEHOLDER
from rpimaint.errors import DownloadError
from rpimaint.models import SelfUpdateResult, SelfUpdateStatus

VERSION_TAG_PATTERN = re.compile(r"""^__version__\s*=\s*["']([^"']+)["']""", re.MULTILINE)


def extract_version_tag(content: str) -> Optional[str]:
    match = VERSION_TAG_PATTERN.search(content)
    if not match:
        return None
    return match.group(1).strip() or None


def is_update_source_configured(update_url: Optional[str]) -> bool:
    return bool(update_url) and UPDATE_URL_PLACEHOLDER not in update_url


def read_installed_version(program_path: str, fallback: str) -> str:
    """Returns the version tag declared by the program file that self-update replaces.

    The package version is only used while the file carries no tag of its
    own, for example a console-script wrapper that has never been updated.
    """
    try:
        with open(program_path, "r", encoding="utf-8", errors="replace") as file_obj:
            tag = extract_version_tag(file_obj.read())
    except OSError:
        return fallback
    return tag or fallback


class SelfUpdateService:
    """Replaces the on-disk program with a newer published build.

    A candidate that does not declare its own version is never installed.
    When a newer build is installed the current process image is replaced
    with the same program path and arguments, so the remainder of the run
    executes under the new code and keeps the same PID.
    """

    def __init__(
        self,
        download_service,
        filesystem_service,
        logger,
        exec_fn: Callable[[str, Sequence[str]], None] = os.execv,
    ):
        self.download_service = download_service
        self.filesystem_service = filesystem_service
        self.logger = logger
        self.exec_fn = exec_fn

    def check_and_apply(
        self,
        update_url: str,
        local_version: str,
        program_path: str,
        argv: Sequence[str] = (),
    ) -> SelfUpdateResult:
        if not is_update_source_configured(update_url):
            self.logger.debug("Update source not configured; skipping self-update.")
            return SelfUpdateResult(SelfUpdateStatus.SKIPPED, local_version)

        self.logger.info("Checking for script updates...")
        candidate_path = self._make_candidate_path(program_path)

        try:
            try:
                size = self.download_service.download_file(
                    update_url,
                    candidate_path,
                    description="Downloading update...",
                )
            except DownloadError as exc:
                self.logger.warning("Failed to check for updates: %s", exc)
                return self._failed(local_version, "Connection Error")

            if size == 0 or os.path.getsize(candidate_path) == 0:
                self.logger.warning("Downloaded update file is empty.")
                return self._failed(local_version, "Empty Download")

            with open(candidate_path, "r", encoding="utf-8", errors="replace") as file_obj:
                remote_tag = extract_version_tag(file_obj.read())

            if remote_tag is None:
                self.logger.warning("No version found in remote script. Skipping update.")
                return self._failed(local_version, "No Version Tag")

            self.logger.info("Local Version:  %s", local_version)
            self.logger.info("Remote Version: %s", remote_tag)

            try:
                is_newer = version.parse(remote_tag) > version.parse(local_version)
            except version.InvalidVersion:
                self.logger.warning("Unparseable version tag '%s'. Skipping update.", remote_tag)
                return self._failed(local_version, "Invalid Version Tag", remote_tag)

            if not is_newer:
                self.logger.info("Script is up to date.")
                return SelfUpdateResult(SelfUpdateStatus.UP_TO_DATE, local_version, remote_tag)

            self.logger.info("New version found! Installing...")
            self.filesystem_service.replace_atomically(
                candidate_path,
                program_path,
                copy_mode_from=program_path,
            )
        finally:
            self.filesystem_service.remove_quietly(candidate_path)

        result = SelfUpdateResult(SelfUpdateStatus.UPDATED, local_version, remote_tag)
        self.logger.info("Restarting script...")
        self.restart(program_path, argv)
        return result

    def restart(self, program_path: str, argv: Sequence[str]):
        for handler in getattr(self.logger, "handlers", ()):
            handler.flush()

        if os.access(program_path, os.X_OK):
            self.exec_fn(program_path, [program_path, *argv])
        else:
            self.exec_fn(sys.executable, [sys.executable, program_path, *argv])

    def _make_candidate_path(self, program_path: str) -> str:
        directory = os.path.dirname(os.path.abspath(program_path))
        fd, temp_path = tempfile.mkstemp(prefix=".rpimaint-update-", dir=directory)
        os.close(fd)
        return temp_path

    def _failed(self, local_version: str, reason: str, remote_tag: Optional[str] = None) -> SelfUpdateResult:
        return SelfUpdateResult(SelfUpdateStatus.FAILED, local_version, remote_tag, reason)
