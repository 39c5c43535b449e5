"""PID-validated run lock for rpi-maintenance."""

import os
from typing import Optional

from rpimaint.errors import AlreadyRunningError, MaintenanceError
from rpimaint.errors_catalog import actionable_error

LOCK_FILE_MODE = 0o644


def is_process_alive(pid: int) -> bool:
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    except OSError:
        return False
    return True


class LockManager:
    """Holds an exclusive lock file whose sole content is the owner's PID.

    A record naming a process that is no longer running is stale and is
    reclaimed. A record naming the current PID is accepted as already owned,
    which is the situation after the program re-executes itself in place.
    """

    def __init__(self, lock_path: str, logger, pid: Optional[int] = None):
        self.lock_path = lock_path
        self.logger = logger
        self.pid = pid if pid is not None else os.getpid()

    def read_owner(self) -> Optional[int]:
        try:
            with open(self.lock_path, "r", encoding="utf-8") as file_obj:
                content = file_obj.read().strip()
        except FileNotFoundError:
            return None
        except OSError as exc:
            self.logger.warning("Could not read lock file %s: %s", self.lock_path, exc)
            return None

        try:
            return int(content)
        except ValueError:
            return None

    def acquire(self):
        os.makedirs(os.path.dirname(self.lock_path) or ".", exist_ok=True)

        for attempt in range(2):
            try:
                fd = os.open(self.lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, LOCK_FILE_MODE)
            except FileExistsError:
                owner = self.read_owner()

                if owner == self.pid:
                    self.logger.debug("Lock %s already held by this process (PID %s).", self.lock_path, self.pid)
                    return

                if owner is not None and is_process_alive(owner):
                    raise AlreadyRunningError(
                        owner,
                        actionable_error("already_running", pid=owner, path=self.lock_path),
                    )

                if attempt:
                    raise MaintenanceError(
                        f"Could not acquire lock file '{self.lock_path}': it was recreated while reclaiming it."
                    )

                self.logger.warning("Found stale lockfile. Removing...")
                self._remove()
                continue
            except OSError as exc:
                raise MaintenanceError(f"Could not create lock file '{self.lock_path}': {exc}") from exc

            try:
                with os.fdopen(fd, "w", encoding="utf-8") as file_obj:
                    file_obj.write(f"{self.pid}\n")
            except OSError as exc:
                self._remove()
                raise MaintenanceError(f"Could not write lock file '{self.lock_path}': {exc}") from exc

            self.logger.debug("Acquired lock %s (PID %s).", self.lock_path, self.pid)
            return

    def release(self) -> bool:
        if self.read_owner() != self.pid:
            return False

        self._remove()
        self.logger.debug("Released lock %s.", self.lock_path)
        return True

    def _remove(self):
        try:
            os.remove(self.lock_path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise MaintenanceError(f"Could not remove lock file '{self.lock_path}': {exc}") from exc

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False
