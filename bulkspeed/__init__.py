"""Application bootstrap helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .config import AppConfig, load_config
from .db import init_db
from .exporter import CSVExporter
from .logging_setup import configure_logging
from .measurements.manager import MeasurementManager
from .measurements.transport import HttpTransferClient
from .report import ReportPresenter
from .scheduler import SchedulerService
from .web.app import create_server_app


class ApplicationContext:
    """Holds shared singletons for the client and server commands."""

    def __init__(self, config: AppConfig):
        self.config = config
        configure_logging(config)
        self.Session = init_db(config.paths.data_dir)
        self.transport = HttpTransferClient(config.client.base_url, timeout=config.client.timeout_seconds)
        self.presenter = ReportPresenter()
        self.measurements = MeasurementManager(
            config,
            self.Session,
            transport=self.transport,
            presenter=self.presenter,
        )
        self.exporter = CSVExporter(config, self.Session)
        self.scheduler = SchedulerService(config, self.measurements, self.exporter)

    def create_server(self):
        return create_server_app(self.config)


def bootstrap(config_path: Optional[str] = None, base_url: Optional[str] = None) -> ApplicationContext:
    """Load configuration and wire dependencies."""

    config_file = Path(config_path).resolve() if config_path else None
    config = load_config(str(config_file)) if config_file else load_config()
    if base_url:
        config.client.base_url = base_url
    return ApplicationContext(config)
