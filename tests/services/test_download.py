import pytest
from rich.console import Console

from rpimaint.errors import DownloadError
from rpimaint.services.download import DownloadService


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None

    def info(self, *_args, **_kwargs):
        return None


class FakeResponse:
    def __init__(self, payload: bytes):
        self.payload = payload
        self.headers = {"Content-Length": str(len(payload))}

    def raise_for_status(self):
        return None

    def iter_content(self, chunk_size=8192):
        if self.payload:
            yield self.payload

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class FakeRequestsModule:
    class RequestException(Exception):
        pass

    def __init__(self, payload: bytes = b"", fail: bool = False):
        self.payload = payload
        self.fail = fail

    def get(self, *_args, **_kwargs):
        if self.fail:
            raise self.RequestException("connection refused")
        return FakeResponse(self.payload)


def _service(requests_module):
    return DownloadService(
        logger=DummyLogger(),
        console=Console(record=True),
        requests_module=requests_module,
    )


def test_download_file_writes_payload_and_returns_size(tmp_path):
    dest = tmp_path / "nested" / "named.root"

    written = _service(FakeRequestsModule(b"root hints")).download_file("https://example.com/named.root", str(dest))

    assert written == len(b"root hints")
    assert dest.read_bytes() == b"root hints"


def test_download_file_reports_empty_payload_as_zero(tmp_path):
    dest = tmp_path / "empty"

    assert _service(FakeRequestsModule(b"")).download_file("https://example.com/x", str(dest)) == 0


def test_download_file_wraps_request_errors(tmp_path):
    with pytest.raises(DownloadError, match="connection refused"):
        _service(FakeRequestsModule(fail=True)).download_file("https://example.com/x", str(tmp_path / "x"))
