from __future__ import annotations

import threading

import pytest
from werkzeug.serving import make_server

from bulkspeed.config import default_config
from bulkspeed.db import init_db
from bulkspeed.measurements.models import TransferResult
from bulkspeed.web.app import create_server_app


class FakeTransport:
    """Hands the runner a fixed lane operation and records each prepared spec."""

    def __init__(self, operation=None):
        self.operation = operation or (lambda: TransferResult(success=True, bytes_transferred=0))
        self.prepared = []

    def prepare(self, spec):
        self.prepared.append(spec)
        return self.operation


class StepClock:
    """Returns the given readings in order."""

    def __init__(self, *readings):
        self.readings = list(readings)
        self.calls = 0

    def __call__(self):
        value = self.readings[self.calls % len(self.readings)]
        self.calls += 1
        return value


@pytest.fixture
def config(tmp_path):
    cfg = default_config(tmp_path)
    cfg.transfer.payload_size_mb = 0.25
    cfg.transfer.parallelism = 3
    cfg.transfer.rounds = 2
    cfg.server.max_upload_mb = 1
    return cfg


@pytest.fixture
def session_factory(tmp_path):
    return init_db(tmp_path)


@pytest.fixture
def serve():
    """Start a real HTTP server for a config; returns its base URL."""
    servers = []

    def _serve(cfg):
        server = make_server("127.0.0.1", 0, create_server_app(cfg), threaded=True)
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        servers.append((server, thread))
        return f"http://127.0.0.1:{server.server_address[1]}"

    yield _serve

    for server, thread in servers:
        server.shutdown()
        thread.join(timeout=5)
