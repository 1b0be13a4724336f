"""Shared dataclasses for throughput measurements."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple


class Direction(enum.Enum):
    DOWNLOAD = "download"
    UPLOAD = "upload"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class TransferSpec:
    direction: Direction
    payload_size_bytes: int
    parallelism: int

    def __post_init__(self) -> None:
        if self.payload_size_bytes <= 0:
            raise ValueError("payload_size_bytes must be positive")
        if self.parallelism <= 0:
            raise ValueError("parallelism must be positive")

    @property
    def nominal_bytes(self) -> int:
        """Bytes the whole batch intends to move, whatever the lanes achieve."""
        return self.payload_size_bytes * self.parallelism


@dataclass(frozen=True)
class TransferResult:
    success: bool
    bytes_transferred: int
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str, bytes_transferred: int = 0) -> "TransferResult":
        return cls(success=False, bytes_transferred=bytes_transferred, error=error)


@dataclass(frozen=True)
class AggregateStats:
    average: float
    median: float


@dataclass(frozen=True)
class RoundOutcome:
    sample: float
    elapsed_seconds: float
    results: Tuple[TransferResult, ...]

    @property
    def failed_lanes(self) -> int:
        return sum(1 for result in self.results if not result.success)


@dataclass
class DirectionReport:
    direction: Direction
    spec: TransferSpec
    samples: List[float]
    stats: AggregateStats


@dataclass
class SpeedtestReport:
    timestamp: datetime
    server: str
    directions: List[DirectionReport] = field(default_factory=list)

    def for_direction(self, direction: Direction) -> Optional[DirectionReport]:
        for report in self.directions:
            if report.direction is direction:
                return report
        return None
