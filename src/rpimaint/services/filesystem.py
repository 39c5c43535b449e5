"""Filesystem helpers for rpi-maintenance."""

import filecmp
import logging
import os
import shutil
from typing import List, Optional

from rpimaint.constants import LOG_FILE_MODE, LOG_MAX_BYTES


class FileSystemService:
    """Encapsulates file side effects shared by several steps."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def set_permissions(self, path: str, mode: int):
        try:
            os.chmod(path, mode)
        except OSError as exc:
            self.logger.warning("Could not set permissions on %s: %s", path, exc)

    def rotate_log(self, path: str, max_bytes: int = LOG_MAX_BYTES) -> bool:
        """Moves ``path`` aside to ``<path>.old`` once it reaches ``max_bytes``."""
        try:
            size = os.path.getsize(path)
        except OSError:
            return False

        if size < max_bytes:
            return False

        self.logger.info("Log file too large (%s bytes). Rotating...", size)
        os.replace(path, f"{path}.old")
        with open(path, "a", encoding="utf-8"):
            pass
        self.set_permissions(path, LOG_FILE_MODE)
        return True

    def files_identical(self, first: str, second: str) -> bool:
        if not (os.path.isfile(first) and os.path.isfile(second)):
            return False
        return filecmp.cmp(first, second, shallow=False)

    def replace_atomically(self, source: str, destination: str, copy_mode_from: Optional[str] = None):
        if copy_mode_from and os.path.exists(copy_mode_from):
            shutil.copymode(copy_mode_from, source)
        os.replace(source, destination)

    def remove_quietly(self, path: str):
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            self.logger.warning("Could not remove %s: %s", path, exc)

    def prune_files(self, directory: str, prefix: str, suffix: str, keep: int) -> List[str]:
        """Deletes all but the ``keep`` newest matching files; returns removed paths."""
        try:
            names = os.listdir(directory)
        except OSError as exc:
            self.logger.warning("Could not list %s: %s", directory, exc)
            return []

        candidates = [
            os.path.join(directory, name)
            for name in names
            if name.startswith(prefix) and name.endswith(suffix)
        ]
        candidates.sort(key=lambda path: (os.path.getmtime(path), path), reverse=True)

        removed = []
        for path in candidates[keep:]:
            self.remove_quietly(path)
            removed.append(path)
            self.logger.debug("Pruned old backup: %s", path)
        return removed
