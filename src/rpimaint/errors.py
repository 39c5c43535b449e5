"""Domain errors for rpi-maintenance."""


class MaintenanceError(RuntimeError):
    """Raised when a maintenance operation cannot continue."""


class PreflightError(MaintenanceError):
    """Raised when a fatal precondition is not met before any mutating step."""


class AlreadyRunningError(PreflightError):
    """Raised when another live instance holds the run lock."""

    def __init__(self, pid: int, message: str):
        super().__init__(message)
        self.pid = pid


class DownloadError(MaintenanceError):
    """Raised when a remote artifact cannot be transferred."""
