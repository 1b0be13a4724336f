import logging

from bulkspeed.scheduler import JOB_ID, SchedulerService


class StubManager:
    def __init__(self, error=None):
        self.error = error
        self.runs = 0

    def run_speedtest(self):
        self.runs += 1
        if self.error:
            raise self.error


class StubExporter:
    def __init__(self):
        self.snapshots = 0

    def write_snapshot(self):
        self.snapshots += 1


def test_disabled_scheduler_does_not_start(config):
    config.scheduler.enabled = False
    service = SchedulerService(config, StubManager(), StubExporter())
    assert service.start() is False
    assert not service.started


def test_enabled_scheduler_registers_job(config):
    config.scheduler.enabled = True
    config.scheduler.interval_minutes = 15
    service = SchedulerService(config, StubManager(), StubExporter())
    try:
        assert service.start() is True
        job = service.scheduler.get_job(JOB_ID)
        assert job is not None
        assert job.trigger.interval.total_seconds() == 15 * 60
    finally:
        service.shutdown()
    assert not service.started


def test_cycle_runs_speedtest_then_exports(config):
    manager, exporter = StubManager(), StubExporter()
    SchedulerService(config, manager, exporter)._run_cycle()
    assert manager.runs == 1
    assert exporter.snapshots == 1


def test_cycle_failure_is_logged(config, caplog):
    manager, exporter = StubManager(error=RuntimeError("server down")), StubExporter()
    with caplog.at_level(logging.ERROR, logger="bulkspeed.scheduler"):
        SchedulerService(config, manager, exporter)._run_cycle()
    assert exporter.snapshots == 0
    assert "server down" in caplog.text
