"""Measurement orchestration and persistence layer."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import sessionmaker

from ..config import AppConfig
from ..db import Campaign, Sample, get_session
from .campaign import MeasurementCampaign
from .models import Direction, DirectionReport, SpeedtestReport, TransferSpec
from .runner import ParallelTransferRunner
from .stats import aggregate
from .transport import HttpTransferClient

LOGGER = logging.getLogger(__name__)


def _finite_or_none(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


class MeasurementManager:
    def __init__(
        self,
        config: AppConfig,
        session_factory: Optional[sessionmaker] = None,
        transport=None,
        presenter=None,
        runner: Optional[ParallelTransferRunner] = None,
    ):
        self.config = config
        self.Session = session_factory
        self.transport = transport or HttpTransferClient(
            config.client.base_url, timeout=config.client.timeout_seconds
        )
        self.presenter = presenter
        self.runner = runner or ParallelTransferRunner(self.transport)
        self.campaign = MeasurementCampaign(self.runner, presenter)

    def _spec(self, direction: Direction) -> TransferSpec:
        return TransferSpec(
            direction=direction,
            payload_size_bytes=self.config.transfer.payload_size_bytes,
            parallelism=self.config.transfer.parallelism,
        )

    def measure(self, direction: Direction) -> DirectionReport:
        spec = self._spec(direction)
        samples = self.campaign.collect(direction, self.config.transfer.rounds, spec)
        report = DirectionReport(direction=direction, spec=spec, samples=samples, stats=aggregate(samples))
        if self.presenter is not None:
            self.presenter.summary(report)
        return report

    def run_speedtest(self) -> SpeedtestReport:
        LOGGER.info(
            "Starting speed test against %s (%d lanes x %d bytes, %d rounds)",
            self.config.client.base_url,
            self.config.transfer.parallelism,
            self.config.transfer.payload_size_bytes,
            self.config.transfer.rounds,
        )
        report = SpeedtestReport(timestamp=datetime.utcnow(), server=self.config.client.base_url)
        for direction in (Direction.DOWNLOAD, Direction.UPLOAD):
            report.directions.append(self.measure(direction))

        if self.Session is not None:
            self._persist(report)
        return report

    def _persist(self, report: SpeedtestReport) -> List[Campaign]:
        records = []
        with get_session(self.Session) as session:
            for result in report.directions:
                record = Campaign(
                    timestamp=report.timestamp,
                    server=report.server,
                    direction=result.direction.value,
                    rounds=len(result.samples),
                    parallelism=result.spec.parallelism,
                    payload_size_bytes=result.spec.payload_size_bytes,
                    average_mbps=_finite_or_none(result.stats.average),
                    median_mbps=_finite_or_none(result.stats.median),
                    samples=[
                        Sample(round_index=index, mbps=_finite_or_none(value))
                        for index, value in enumerate(result.samples, start=1)
                    ],
                )
                session.add(record)
                records.append(record)
            session.flush()
            for result in report.directions:
                LOGGER.info(
                    "Stored %s campaign at %s (avg %.2f Mbps / median %.2f Mbps)",
                    result.direction.value,
                    report.timestamp.isoformat(),
                    result.stats.average,
                    result.stats.median,
                )
        return records

    def get_campaigns(
        self,
        limit: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        direction: Optional[Direction] = None,
    ) -> List[Campaign]:
        """Stored campaigns, oldest first; ``limit`` keeps the most recent ones."""
        if self.Session is None:
            return []
        with get_session(self.Session) as session:
            query = session.query(Campaign).order_by(desc(Campaign.timestamp), desc(Campaign.id))
            if direction:
                query = query.filter(Campaign.direction == direction.value)
            if start:
                query = query.filter(Campaign.timestamp >= start)
            if end:
                query = query.filter(Campaign.timestamp <= end)
            if limit:
                query = query.limit(limit)
            rows = query.all()
            return list(reversed(rows))

    def to_dict(self, campaign: Campaign) -> dict:
        return {
            "id": campaign.id,
            "timestamp": campaign.timestamp.isoformat(),
            "server": campaign.server,
            "direction": campaign.direction,
            "rounds": campaign.rounds,
            "parallelism": campaign.parallelism,
            "payload_size_bytes": campaign.payload_size_bytes,
            "average_mbps": campaign.average_mbps,
            "median_mbps": campaign.median_mbps,
            "samples": [sample.mbps for sample in campaign.samples],
        }
