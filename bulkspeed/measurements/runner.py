"""Synchronized parallel transfer runner.

One round ("batch") launches ``parallelism`` lane threads. Every lane parks on
a barrier shared with the caller, so the caller knows all lanes exist before
it opens the start gate. The gate is a one-shot ``threading.Event``: setting
it wakes every parked lane at once. The wall clock runs from the moment the
gate opens until the last lane has been joined.

Throughput is computed from the *nominal* batch volume
(``payload * 8 * parallelism``) whether or not every lane succeeded, so a
failed lane shows up as a lower figure rather than an error.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable, List, Optional

from .models import RoundOutcome, TransferResult, TransferSpec

LOGGER = logging.getLogger(__name__)

BITS_PER_BYTE = 8
MEGABIT = 1024 * 1024

LaneOperation = Callable[[], TransferResult]


def throughput_mbps(payload_size_bytes: int, parallelism: int, elapsed_seconds: float) -> float:
    """Convert one batch into megabits per second.

    A batch that took no measurable time yields ``math.inf``.
    """
    total_bits = payload_size_bytes * BITS_PER_BYTE * parallelism
    if elapsed_seconds <= 0:
        return math.inf
    return total_bits / (elapsed_seconds * MEGABIT)


class ParallelTransferRunner:
    """Run ``spec.parallelism`` transfers at once and time the whole batch.

    ``transport`` must provide ``prepare(spec)`` returning a zero-argument
    callable that performs one lane's transfer. ``clock`` is read exactly
    twice per round. ``on_lane_ready`` is called from each lane thread, with
    the lane index, right before the lane parks.
    """

    def __init__(
        self,
        transport,
        clock: Callable[[], float] = time.perf_counter,
        on_lane_ready: Optional[Callable[[int], None]] = None,
    ):
        self.transport = transport
        self.clock = clock
        self.on_lane_ready = on_lane_ready

    def run(self, spec: TransferSpec) -> float:
        return self.run_round(spec).sample

    def run_round(self, spec: TransferSpec) -> RoundOutcome:
        operation = self.transport.prepare(spec)
        lanes = spec.parallelism
        results: List[Optional[TransferResult]] = [None] * lanes
        ready = threading.Barrier(lanes + 1)
        start_gate = threading.Event()

        threads = [
            threading.Thread(
                target=self._run_lane,
                args=(index, operation, ready, start_gate, results),
                name=f"{spec.direction.value}-lane-{index}",
                daemon=True,
            )
            for index in range(lanes)
        ]
        for thread in threads:
            thread.start()

        try:
            ready.wait()
        except threading.BrokenBarrierError:
            LOGGER.error("%s round: a lane failed before the start gate", spec.direction.label)
        started = self.clock()
        start_gate.set()
        for thread in threads:
            thread.join()
        elapsed = self.clock() - started

        outcome = RoundOutcome(
            sample=throughput_mbps(spec.payload_size_bytes, lanes, elapsed),
            elapsed_seconds=elapsed,
            results=tuple(
                result if result is not None else TransferResult.failed("lane produced no result")
                for result in results
            ),
        )
        if outcome.failed_lanes:
            LOGGER.warning(
                "%s round finished with %d of %d lanes failed; throughput still uses nominal volume",
                spec.direction.label,
                outcome.failed_lanes,
                lanes,
            )
        LOGGER.debug(
            "%s round: %d bytes nominal in %.3fs (%.2f Mbps)",
            spec.direction.label,
            spec.nominal_bytes,
            elapsed,
            outcome.sample,
        )
        return outcome

    def _run_lane(
        self,
        index: int,
        operation: LaneOperation,
        ready: threading.Barrier,
        start_gate: threading.Event,
        results: List[Optional[TransferResult]],
    ) -> None:
        try:
            if self.on_lane_ready is not None:
                self.on_lane_ready(index)
            ready.wait()
            start_gate.wait()
            results[index] = operation()
        except Exception as exc:  # pylint: disable=broad-except
            if not start_gate.is_set():
                # Release the caller and the other parked lanes.
                ready.abort()
            error = str(exc) or type(exc).__name__
            LOGGER.error("Lane %d failed: %s", index, error)
            results[index] = TransferResult.failed(error)
