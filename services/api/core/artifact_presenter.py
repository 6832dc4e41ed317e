# services/api/core/artifact_presenter.py
from __future__ import annotations

import logging
import tempfile
import threading
import webbrowser
from pathlib import Path
from typing import Any, Optional

from core.errors import PresentationError
from settings import Settings

logger = logging.getLogger(__name__)

PDF_SIGNATURE = b"%PDF"


def ensure_pdf_filename(filename: str) -> str:
    """Append .pdf unless the name already ends with it."""
    if not filename.endswith(".pdf"):
        filename += ".pdf"
    return filename


def _check_pdf_bytes(pdf_bytes: Any) -> bytes:
    if not isinstance(pdf_bytes, (bytes, bytearray, memoryview)):
        raise PresentationError(f"Expected PDF bytes, got {type(pdf_bytes).__name__}")
    data = bytes(pdf_bytes)
    if not data.startswith(PDF_SIGNATURE):
        raise PresentationError("Packet is empty or not a PDF")
    return data


class ArtifactPresenter:
    """
    Shows a finished packet on the local machine:
      - preview(): temp file opened in the browser, released after a delay
      - download(): saved into the download directory
    """

    def __init__(
        self,
        download_dir: str,
        browser: Any = webbrowser,
        release_seconds: float = 5.0,
    ):
        self.download_dir = Path(download_dir).expanduser()
        self.browser = browser
        self.release_seconds = release_seconds

    @classmethod
    def from_settings(cls, settings: Settings, browser: Any = webbrowser) -> "ArtifactPresenter":
        return cls(
            settings.download_dir,
            browser=browser,
            release_seconds=settings.preview_release_seconds,
        )

    def _release_later(self, path: Path) -> Optional[threading.Timer]:
        def _release():
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Could not release preview file {path}: {e}")

        if self.release_seconds <= 0:
            _release()
            return None
        timer = threading.Timer(self.release_seconds, _release)
        timer.daemon = True
        timer.start()
        return timer

    def preview(self, pdf_bytes: bytes) -> Path:
        """
        Open the packet in a new browser tab; fall back to the current
        window when no new tab can be opened.

        Returns:
            Path of the temporary file (removed after release_seconds).
        """
        data = _check_pdf_bytes(pdf_bytes)
        try:
            with tempfile.NamedTemporaryFile(
                prefix="packet-", suffix=".pdf", delete=False
            ) as f:
                f.write(data)
                path = Path(f.name)
        except OSError as e:
            logger.error(f"Error previewing PDF: {e}")
            raise PresentationError(
                "Failed to preview PDF. Please try again or download the file instead."
            ) from e

        uri = path.as_uri()
        try:
            opened = self.browser.open_new_tab(uri)
            if not opened:
                logger.info("New tab blocked, opening preview in current window")
                opened = self.browser.open(uri, new=0)
            if not opened:
                logger.warning(f"No browser context could open {uri}")
                raise PresentationError(
                    "Could not open the PDF preview. Please download the file instead."
                )
        except webbrowser.Error as e:
            logger.error(f"Error previewing PDF: {e}")
            raise PresentationError(
                "Failed to preview PDF. Please try again or download the file instead."
            ) from e
        finally:
            self._release_later(path)
        return path

    def download(self, pdf_bytes: bytes, filename: str) -> Path:
        """
        Save the packet as `filename` (.pdf appended when missing).

        Returns:
            Path of the saved file.
        """
        data = _check_pdf_bytes(pdf_bytes)
        # Directory parts are dropped; the file always lands in download_dir
        name = Path(filename or "").name
        if name in ("", ".", ".."):
            raise PresentationError(f"Invalid download filename: {filename!r}")
        target = self.download_dir / ensure_pdf_filename(name)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as f:
                f.write(data)
        except OSError as e:
            logger.error(f"Error downloading PDF: {e}")
            raise PresentationError("Failed to download PDF. Please try again.") from e

        logger.info(f"Saved packet to {target} ({len(data)} bytes)")
        return target
