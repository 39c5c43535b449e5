"""Reboot gate: skip, interactive cancellation window, or unattended reboot."""

import select
import sys
import termios
import time
import tty
from typing import Callable

from rpimaint.constants import REBOOT_CANCEL_WINDOW_SECONDS, UNATTENDED_REBOOT_DELAY_SECONDS
from rpimaint.models import RebootDecision


def wait_for_keypress(stream, timeout: float) -> bool:
    """Returns True if a key was pressed on ``stream`` within ``timeout`` seconds."""
    fd = stream.fileno()
    previous = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        ready, _, _ = select.select([stream], [], [], timeout)
        if ready:
            stream.read(1)
            return True
        return False
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, previous)


class RebootGate:
    def __init__(
        self,
        command_runner,
        logger,
        console,
        skip_reboot: bool = False,
        stdin=None,
        cancel_window: float = REBOOT_CANCEL_WINDOW_SECONDS,
        unattended_delay: float = UNATTENDED_REBOOT_DELAY_SECONDS,
        key_waiter: Callable[[object, float], bool] = wait_for_keypress,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.command_runner = command_runner
        self.logger = logger
        self.console = console
        self.skip_reboot = skip_reboot
        self.stdin = stdin if stdin is not None else sys.stdin
        self.cancel_window = cancel_window
        self.unattended_delay = unattended_delay
        self.key_waiter = key_waiter
        self.sleep = sleep

    def is_interactive(self) -> bool:
        try:
            return self.stdin.isatty()
        except (AttributeError, ValueError):
            return False

    def decide(self) -> RebootDecision:
        if self.skip_reboot:
            self.logger.info("Skipping reboot as requested.")
            return RebootDecision.SKIP

        if self.is_interactive():
            self.logger.warning("!!! INTERACTIVE SESSION DETECTED !!!")
            self.console.print(
                f"[bold yellow]System will reboot in {self.cancel_window:g} seconds. "
                "Press ANY KEY to CANCEL reboot...[/bold yellow]"
            )
            if self._key_pressed():
                self.logger.info("Reboot canceled by user.")
                return RebootDecision.CANCEL
            self.logger.info("Timeout reached. Rebooting...")
            return RebootDecision.REBOOT

        self.logger.info(
            "Running non-interactively. Auto-rebooting in %g seconds...",
            self.unattended_delay,
        )
        self.sleep(self.unattended_delay)
        return RebootDecision.REBOOT

    def reboot(self):
        self.command_runner.run(["sync"])
        result = self.command_runner.run(["shutdown", "-r", "now"])
        if result.returncode != 0:
            self.logger.error("Reboot command failed (exit %s).", result.returncode)

    def _key_pressed(self) -> bool:
        try:
            return self.key_waiter(self.stdin, self.cancel_window)
        except (termios.error, OSError, ValueError) as exc:
            self.logger.warning("Could not read from terminal: %s", exc)
            return False
