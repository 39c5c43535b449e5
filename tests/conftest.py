import subprocess

import pytest


class FakeRunner:
    """Stands in for CommandRunner; answers by exact command or longest prefix."""

    def __init__(self, responses=None, available=()):
        self.responses = {tuple(key): value for key, value in (responses or {}).items()}
        self.available = set(available)
        self.calls = []
        self.inputs = []

    def run(self, cmd, timeout=None, input_text=None):
        self.calls.append(list(cmd))
        self.inputs.append(input_text)
        returncode, output = self._lookup(tuple(cmd))
        return subprocess.CompletedProcess(cmd, returncode, stdout=output)

    def succeeds(self, cmd, timeout=None):
        return self.run(cmd, timeout=timeout).returncode == 0

    def which(self, command):
        return f"/usr/bin/{command}" if command in self.available else None

    def ran(self, *prefix):
        return any(tuple(call[: len(prefix)]) == prefix for call in self.calls)

    def _lookup(self, cmd):
        for size in range(len(cmd), 0, -1):
            if cmd[:size] in self.responses:
                return self.responses[cmd[:size]]
        return 0, ""


@pytest.fixture
def fake_runner():
    return FakeRunner
