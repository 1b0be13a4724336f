import io
import math

from bulkspeed.measurements.manager import MeasurementManager
from bulkspeed.measurements.models import Direction
from bulkspeed.report import ReportPresenter


def test_speedtest_against_live_server(config, serve, session_factory):
    config.client.base_url = serve(config)
    config.client.timeout_seconds = 30
    stream = io.StringIO()
    manager = MeasurementManager(config, session_factory, presenter=ReportPresenter(stream))

    report = manager.run_speedtest()

    for direction in (Direction.DOWNLOAD, Direction.UPLOAD):
        result = report.for_direction(direction)
        assert len(result.samples) == config.transfer.rounds
        assert all(sample > 0 and math.isfinite(sample) for sample in result.samples)
    assert stream.getvalue().count("Measurement 1:") == 4
