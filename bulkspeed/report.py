"""Console presentation of measurement progress and results."""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from .measurements.models import Direction, DirectionReport


class ReportPresenter:
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def _write(self, text: str = "") -> None:
        print(text, file=self.stream, flush=True)

    def start(self, direction: Direction) -> None:
        # Upload follows the download summary block; download opens the run.
        prefix = "\n" if direction is Direction.UPLOAD else ""
        self._write(f"{prefix}Measuring {direction.value} speed...")

    def sample(self, index: int, value: float) -> None:
        self._write(f"Measurement {index}: {value:.2f} Mbps")

    def summary(self, report: DirectionReport) -> None:
        header = f"===== {report.direction.label} Speed Test Results ====="
        self._write(f"\n{header}")
        for index, value in enumerate(report.samples, start=1):
            self._write(f"Measurement {index}: {value:.2f} Mbps")
        self._write(f"\nAverage Speed: {report.stats.average:.2f} Mbps")
        self._write(f"Median Speed: {report.stats.median:.2f} Mbps")
        self._write("=" * len(header))
