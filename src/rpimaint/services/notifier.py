"""Email delivery through the local mail submission command."""


class MailNotifier:
    def __init__(self, command_runner, logger):
        self.command_runner = command_runner
        self.logger = logger

    def send(self, subject: str, body: str, recipient: str) -> bool:
        """Sends ``body`` to ``recipient``; failures are logged, never raised."""
        result = self.command_runner.run(["mail", "-s", subject, recipient], input_text=body)
        if result.returncode != 0:
            self.logger.error(
                "Failed to send email report to %s (exit %s): %s",
                recipient,
                result.returncode,
                (result.stdout or "").strip(),
            )
            return False

        self.logger.info("Email report sent to %s", recipient)
        return True
