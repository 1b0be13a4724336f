import io

from bulkspeed.measurements.models import AggregateStats, Direction, DirectionReport, TransferSpec
from bulkspeed.report import ReportPresenter


def test_progress_lines():
    stream = io.StringIO()
    presenter = ReportPresenter(stream)
    presenter.start(Direction.DOWNLOAD)
    presenter.sample(1, 93.456)
    assert stream.getvalue() == "Measuring download speed...\nMeasurement 1: 93.46 Mbps\n"


def test_upload_header_separated_from_download_block():
    stream = io.StringIO()
    ReportPresenter(stream).start(Direction.UPLOAD)
    assert stream.getvalue() == "\nMeasuring upload speed...\n"


def test_summary_block():
    stream = io.StringIO()
    report = DirectionReport(
        direction=Direction.UPLOAD,
        spec=TransferSpec(Direction.UPLOAD, 1024, 4),
        samples=[10.0, 30.0],
        stats=AggregateStats(average=20.0, median=20.0),
    )

    ReportPresenter(stream).summary(report)

    lines = stream.getvalue().splitlines()
    assert "===== Upload Speed Test Results =====" in lines
    assert "Measurement 2: 30.00 Mbps" in lines
    assert "Average Speed: 20.00 Mbps" in lines
    assert "Median Speed: 20.00 Mbps" in lines
    assert lines[-1] == "=" * len("===== Upload Speed Test Results =====")
