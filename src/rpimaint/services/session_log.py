"""Process-scoped session transcript used as the email report body."""

import logging
import os
import tempfile
from typing import Optional

TRANSCRIPT_FORMAT = "%(message)s"


class SessionLog:
    """Temporary file that receives every log record emitted during one run.

    The file is removed on ``close`` whatever the outcome of the run.
    """

    def __init__(self, logger: logging.Logger, level: int = logging.DEBUG):
        self.logger = logger
        self.level = level
        self.path: Optional[str] = None
        self.handler: Optional[logging.FileHandler] = None

    def open(self) -> "SessionLog":
        fd, self.path = tempfile.mkstemp(prefix="rpimaint-session-", suffix=".log")
        os.close(fd)

        self.handler = logging.FileHandler(self.path, mode="a", encoding="utf-8")
        self.handler.setLevel(self.level)
        self.handler.setFormatter(logging.Formatter(TRANSCRIPT_FORMAT))
        self.logger.addHandler(self.handler)
        return self

    def read_text(self) -> str:
        if not self.path:
            return ""
        if self.handler:
            self.handler.flush()
        try:
            with open(self.path, "r", encoding="utf-8", errors="replace") as file_obj:
                return file_obj.read()
        except OSError:
            return ""

    def close(self):
        if self.handler:
            self.logger.removeHandler(self.handler)
            self.handler.close()
            self.handler = None

        if self.path:
            try:
                os.remove(self.path)
            except FileNotFoundError:
                pass
            self.path = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
