"""Background scheduler for repeated speed tests (monitor mode)."""

from __future__ import annotations

import logging
from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .config import AppConfig
from .exporter import CSVExporter
from .measurements.manager import MeasurementManager

LOGGER = logging.getLogger(__name__)

JOB_ID = "scheduled-speedtest"


class SchedulerService:
    def __init__(
        self,
        config: AppConfig,
        measurement_manager: MeasurementManager,
        exporter: CSVExporter,
    ) -> None:
        self.config = config
        self.measurements = measurement_manager
        self.exporter = exporter
        self.scheduler = BackgroundScheduler(timezone="UTC")
        self.started = False

    def start(self, run_immediately: bool = False) -> bool:
        if self.started:
            LOGGER.warning("Scheduler already started, ignoring duplicate start request")
            return True

        if not self.config.scheduler.enabled:
            LOGGER.warning("Scheduler is disabled in configuration (scheduler.enabled)")
            return False

        interval = self.config.scheduler.interval_minutes
        trigger = IntervalTrigger(minutes=interval)
        kwargs = {"next_run_time": datetime.now(self.scheduler.timezone)} if run_immediately else {}
        # Rounds must never overlap, so at most one cycle runs at a time.
        self.scheduler.add_job(
            self._run_cycle,
            trigger=trigger,
            id=JOB_ID,
            max_instances=1,
            coalesce=True,
            **kwargs,
        )
        self.scheduler.start()
        self.started = True
        LOGGER.info("Scheduler started with interval %s minutes", interval)
        return True

    def shutdown(self) -> None:
        if self.started:
            self.scheduler.shutdown(wait=False)
            self.started = False

    def _run_cycle(self) -> None:
        LOGGER.info("Starting scheduled speed test at %s", datetime.utcnow().isoformat())
        try:
            self.measurements.run_speedtest()
            self.exporter.write_snapshot()
        except Exception as exc:  # pylint: disable=broad-except
            LOGGER.exception("Scheduled speed test failed: %s", exc)
