"""Sequential measurement rounds for one transfer direction."""

from __future__ import annotations

import dataclasses
import logging
from typing import List

from .models import Direction, TransferSpec
from .runner import ParallelTransferRunner

LOGGER = logging.getLogger(__name__)


class MeasurementCampaign:
    def __init__(self, runner: ParallelTransferRunner, presenter=None):
        self.runner = runner
        self.presenter = presenter

    def collect(self, direction: Direction, rounds: int, spec: TransferSpec) -> List[float]:
        """Run ``rounds`` batches one after another and return their samples in order."""
        if rounds < 0:
            raise ValueError("rounds cannot be negative")

        spec = dataclasses.replace(spec, direction=direction)
        if self.presenter is not None:
            self.presenter.start(direction)

        samples: List[float] = []
        for index in range(1, rounds + 1):
            sample = self.runner.run(spec)
            samples.append(sample)
            LOGGER.info("%s measurement %d/%d: %.2f Mbps", direction.label, index, rounds, sample)
            if self.presenter is not None:
                self.presenter.sample(index, sample)
        return samples
