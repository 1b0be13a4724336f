"""HTTP lane operations against the /download and /upload endpoints."""

from __future__ import annotations

import logging
from typing import Callable, Optional

import requests

from .models import Direction, TransferResult, TransferSpec

LOGGER = logging.getLogger(__name__)

UPLOAD_FILL_BYTE = b"A"


class HttpTransferClient:
    """
    Performs single transfers for the runner's lanes.

    Failures never raise: connection errors and non-200 responses are logged
    and returned as failed ``TransferResult`` values. No retries are made.
    """

    CHUNK_SIZE = 65536

    def __init__(self, base_url: str, timeout: Optional[float] = None, chunk_size: Optional[int] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.chunk_size = chunk_size or self.CHUNK_SIZE

    @property
    def download_url(self) -> str:
        return f"{self.base_url}/download"

    @property
    def upload_url(self) -> str:
        return f"{self.base_url}/upload"

    def prepare(self, spec: TransferSpec) -> Callable[[], TransferResult]:
        """Return the lane operation for one round of ``spec``."""
        if spec.direction is Direction.DOWNLOAD:
            return self.download

        # Built once per round and only read by the lanes.
        payload = UPLOAD_FILL_BYTE * spec.payload_size_bytes
        return lambda: self.upload(payload)

    def download(self) -> TransferResult:
        received = 0
        try:
            with requests.get(self.download_url, stream=True, timeout=self.timeout) as response:
                if response.status_code != requests.codes.ok:
                    LOGGER.error("Download failed: HTTP status %s", response.status_code)
                    return TransferResult.failed(f"HTTP status {response.status_code}")
                for chunk in response.iter_content(chunk_size=self.chunk_size):
                    received += len(chunk)
        except requests.RequestException as exc:
            LOGGER.error("Download error: %s", exc)
            return TransferResult.failed(str(exc), bytes_transferred=received)

        LOGGER.debug("Downloaded %d bytes", received)
        return TransferResult(success=True, bytes_transferred=received)

    def upload(self, payload: bytes) -> TransferResult:
        try:
            response = requests.post(
                self.upload_url,
                data=payload,
                headers={"Content-Type": "application/octet-stream"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            LOGGER.error("Upload error: %s", exc)
            return TransferResult.failed(str(exc))

        with response:
            if response.status_code != requests.codes.ok:
                LOGGER.error("Upload failed: HTTP status %s", response.status_code)
                return TransferResult.failed(f"HTTP status {response.status_code}")

        LOGGER.debug("Uploaded %d bytes", len(payload))
        return TransferResult(success=True, bytes_transferred=len(payload))
