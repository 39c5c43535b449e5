"""Download service with optional progress reporting."""

import os

from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from rpimaint.constants import DOWNLOAD_TIMEOUT_SECONDS
from rpimaint.errors import DownloadError


class DownloadService:
    """Streams remote artifacts to local files."""

    def __init__(
        self,
        logger,
        console,
        requests_module,
        timeout: float = DOWNLOAD_TIMEOUT_SECONDS,
        show_progress: bool = False,
    ):
        self.logger = logger
        self.console = console
        self.requests = requests_module
        self.timeout = timeout
        self.show_progress = show_progress

    def download_file(self, url: str, dest_path: str, description: str = "Downloading...") -> int:
        """Writes ``url`` to ``dest_path`` and returns the number of bytes written."""
        self.logger.info("Downloading %s to %s", url, dest_path)
        written = 0

        try:
            with self.requests.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                total_size = int(response.headers.get("Content-Length", 0))

                os.makedirs(os.path.dirname(dest_path) or ".", exist_ok=True)

                with Progress(
                    SpinnerColumn(),
                    TextColumn("[progress.description]{task.description}"),
                    BarColumn(),
                    TaskProgressColumn(),
                    "•",
                    TimeElapsedColumn(),
                    console=self.console,
                    transient=True,
                    disable=not self.show_progress,
                ) as progress:
                    task = progress.add_task(f"[cyan]{description}", total=total_size or None)
                    with open(dest_path, "wb") as file_obj:
                        for chunk in response.iter_content(chunk_size=8192):
                            if not chunk:
                                continue
                            file_obj.write(chunk)
                            written += len(chunk)
                            progress.update(task, advance=len(chunk))

        except self.requests.RequestException as exc:
            raise DownloadError(f"Download failed for {description}: {exc}") from exc
        except OSError as exc:
            raise DownloadError(f"Could not write {dest_path}: {exc}") from exc

        self.logger.debug("Downloaded %s bytes from %s", written, url)
        return written
