"""Subprocess execution service for rpi-maintenance."""

import shutil
import subprocess
from typing import List, Optional

COMMAND_NOT_FOUND = 127
COMMAND_TIMED_OUT = 124


class CommandRunner:
    """Runs external commands and always returns a result.

    stdout and stderr are merged so the captured text matches what an
    operator would see on a terminal. Launch failures and timeouts are folded
    into a non-zero return code instead of being raised.
    """

    def __init__(self, logger, default_timeout: Optional[float] = None):
        self.logger = logger
        self.default_timeout = default_timeout

    def run(
        self,
        cmd: List[str],
        timeout: Optional[float] = None,
        input_text: Optional[str] = None,
    ) -> subprocess.CompletedProcess:
        cmd_str = " ".join(cmd)
        self.logger.debug("Executing: %s", cmd_str)

        effective_timeout = timeout if timeout is not None else self.default_timeout

        try:
            result = subprocess.run(
                cmd,
                text=True,
                input=input_text,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=effective_timeout,
            )
        except FileNotFoundError:
            message = f"Command not found: {cmd[0]}"
            self.logger.warning(message)
            return subprocess.CompletedProcess(cmd, COMMAND_NOT_FOUND, stdout=message)
        except subprocess.TimeoutExpired as exc:
            output = exc.output or ""
            if isinstance(output, bytes):
                output = output.decode("utf-8", errors="replace")
            self.logger.warning("Command timed out after %ss: %s", effective_timeout, cmd_str)
            return subprocess.CompletedProcess(cmd, COMMAND_TIMED_OUT, stdout=output)
        except OSError as exc:
            message = f"Failed to execute command: {cmd_str}. {exc}"
            self.logger.warning(message)
            return subprocess.CompletedProcess(cmd, COMMAND_NOT_FOUND, stdout=message)

        if result.stdout:
            self.logger.debug("Command output: %s", result.stdout.strip())

        if result.returncode != 0:
            self.logger.debug("Command failed (%s): %s", result.returncode, cmd_str)

        return result

    def succeeds(self, cmd: List[str], timeout: Optional[float] = None) -> bool:
        return self.run(cmd, timeout=timeout).returncode == 0

    def which(self, command: str) -> Optional[str]:
        return shutil.which(command)
