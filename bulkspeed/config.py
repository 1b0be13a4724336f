"""Configuration loading helpers for the parallel throughput tester."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

MEGABYTE = 1024 * 1024


@dataclass
class PathsConfig:
    data_dir: Path
    logs_dir: Path


@dataclass
class TransferConfig:
    payload_size_mb: float = 10
    parallelism: int = 4
    rounds: int = 5

    @property
    def payload_size_bytes(self) -> int:
        return int(self.payload_size_mb * MEGABYTE)


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8080
    max_upload_mb: float = 100

    @property
    def max_upload_bytes(self) -> int:
        return int(self.max_upload_mb * MEGABYTE)


@dataclass
class ClientConfig:
    base_url: str = "http://localhost:8080"
    # None keeps transfers unbounded
    timeout_seconds: Optional[float] = None


@dataclass
class SchedulerConfig:
    enabled: bool = False
    interval_minutes: int = 60


@dataclass
class ExportConfig:
    csv_name: str = "results.csv"


@dataclass
class LoggingConfig:
    level: str = "INFO"
    library_level: str = "WARNING"
    file_name: str = "app.log"


@dataclass
class AppConfig:
    root_dir: Path
    paths: PathsConfig
    transfer: TransferConfig = field(default_factory=TransferConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _as_path(base: Path, maybe_path: Optional[str]) -> Path:
    if not maybe_path:
        raise ValueError("Path configuration entries cannot be empty")
    path = (base / maybe_path).resolve()
    path.mkdir(parents=True, exist_ok=True)
    return path


def _validate(config: AppConfig) -> AppConfig:
    if config.transfer.payload_size_bytes <= 0:
        raise ValueError("transfer.payload_size_mb must be positive")
    if config.transfer.parallelism <= 0:
        raise ValueError("transfer.parallelism must be positive")
    if config.transfer.rounds < 0:
        raise ValueError("transfer.rounds cannot be negative")
    if config.server.max_upload_bytes <= 0:
        raise ValueError("server.max_upload_mb must be positive")
    return config


def _build_config(root_dir: Path, data: dict) -> AppConfig:
    paths_data = data.get("paths", {})
    paths = PathsConfig(
        data_dir=_as_path(root_dir, paths_data.get("data_dir", "data")),
        logs_dir=_as_path(root_dir, paths_data.get("logs_dir", "logs")),
    )

    config = AppConfig(
        root_dir=root_dir,
        paths=paths,
        transfer=TransferConfig(**data.get("transfer", {})),
        server=ServerConfig(**data.get("server", {})),
        client=ClientConfig(**data.get("client", {})),
        scheduler=SchedulerConfig(**data.get("scheduler", {})),
        export=ExportConfig(**data.get("export", {})),
        logging=LoggingConfig(**data.get("logging", {})),
    )
    return _validate(config)


def default_config(root_dir: Optional[Path] = None) -> AppConfig:
    """Reference configuration: 10 MB payloads, 4 lanes, 5 rounds, port 8080."""

    return _build_config(Path(root_dir or Path.cwd()).resolve(), {})


def load_config(path: Optional[str] = None) -> AppConfig:
    """Load application configuration from YAML file."""

    root_dir = Path(path).resolve().parent if path else Path.cwd()
    source_path = Path(path) if path else root_dir / "config.yaml"
    if not source_path.exists():
        raise FileNotFoundError(f"Missing configuration file at {source_path}")

    with source_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    return _build_config(root_dir, data)
