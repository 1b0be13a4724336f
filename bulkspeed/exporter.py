"""CSV export helpers for stored throughput samples."""

from __future__ import annotations

import csv
import io
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import AppConfig
from .db import Campaign, get_session


class CSVExporter:
    def __init__(self, config: AppConfig, session_factory):
        self.config = config
        self.Session = session_factory

    def build_csv(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> io.StringIO:
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(self._header())

        for row in self._iter_rows(start, end):
            writer.writerow(row)

        buffer.seek(0)
        return buffer

    def _header(self) -> list:
        return [
            "timestamp",
            "direction",
            "server",
            "round",
            "mbps",
            "parallelism",
            "payload_size_bytes",
            "campaign_average_mbps",
            "campaign_median_mbps",
        ]

    def _iter_rows(self, start: Optional[datetime], end: Optional[datetime]):
        with get_session(self.Session) as session:
            query = session.query(Campaign).order_by(Campaign.timestamp, Campaign.id)
            if start:
                query = query.filter(Campaign.timestamp >= start)
            if end:
                query = query.filter(Campaign.timestamp <= end)
            for campaign in query.all():
                for sample in campaign.samples:
                    yield self._row_for_sample(campaign, sample)

    @staticmethod
    def _row_for_sample(campaign: Campaign, sample) -> list:
        return [
            campaign.timestamp.isoformat(),
            campaign.direction,
            campaign.server,
            sample.round_index,
            CSVExporter._blank_if_none(sample.mbps),
            campaign.parallelism,
            campaign.payload_size_bytes,
            CSVExporter._blank_if_none(campaign.average_mbps),
            CSVExporter._blank_if_none(campaign.median_mbps),
        ]

    @staticmethod
    def _blank_if_none(value):
        return "" if value is None else value

    def write_snapshot(self) -> Path:
        buffer = self.build_csv()
        target = self.config.paths.data_dir / self.config.export.csv_name
        target.write_text(buffer.getvalue(), encoding="utf-8")
        return target
