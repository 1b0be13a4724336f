"""Flask application factory for the download/upload endpoint pair."""

from __future__ import annotations

import logging
import os
import re

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import ClientDisconnected

from ..config import AppConfig

LOGGER = logging.getLogger(__name__)

CHUNK_SIZE = 65536
# Plain ASCII decimal only; int() alone would take "1_0", " 12 " or non-ASCII digits.
CONTENT_LENGTH_PATTERN = re.compile(r"[0-9]+")


def create_server_app(config: AppConfig) -> Flask:
    app = Flask(__name__)
    payload_size = config.transfer.payload_size_bytes
    max_upload = config.server.max_upload_bytes

    @app.get("/download")
    def download():
        def generate():
            sent = 0
            while sent < payload_size:
                chunk_size = min(CHUNK_SIZE, payload_size - sent)
                yield os.urandom(chunk_size)
                sent += chunk_size
            LOGGER.info("Sent %d bytes of data to client", sent)

        return Response(
            generate(),
            status=200,
            mimetype="application/octet-stream",
            headers={"Content-Length": str(payload_size)},
        )

    @app.post("/upload")
    def upload():
        raw_length = request.headers.get("Content-Length")
        if raw_length is None or raw_length == "":
            return _error("Content-Length header is missing", 400)

        if not CONTENT_LENGTH_PATTERN.fullmatch(raw_length):
            return _error("Invalid Content-Length header", 400)
        content_length = int(raw_length)

        if content_length > max_upload:
            LOGGER.warning("Rejected upload of %d bytes (limit %d)", content_length, max_upload)
            return _error("File size exceeds the maximum limit", 413)

        received = 0
        try:
            while received < content_length:
                chunk = request.stream.read(min(CHUNK_SIZE, content_length - received))
                if not chunk:
                    break
                received += len(chunk)
        except (ClientDisconnected, OSError) as exc:
            LOGGER.error("Failed to read upload body after %d bytes: %s", received, exc)
            return _error("Failed to read data", 500)

        if received < content_length:
            LOGGER.error("Upload body ended after %d of %d bytes", received, content_length)
            return _error("Failed to read data", 500)

        LOGGER.info("Received %d bytes from client", received)
        return Response(status=200)

    @app.get("/health")
    def health():
        return jsonify(
            {
                "status": "ok",
                "payload_size_bytes": payload_size,
                "max_upload_bytes": max_upload,
                "parallelism": config.transfer.parallelism,
                "rounds": config.transfer.rounds,
            }
        )

    return app


def _error(message: str, status: int) -> Response:
    return Response(f"{message}\n", status=status, mimetype="text/plain")
