from __future__ import annotations

import logging
import time

from dependency_injector import providers

from metrics_kafka.application.reporter import KafkaReporter
from metrics_kafka.application.scheduler import ReportingScheduler
from metrics_kafka.common.logger import PipelineLogger
from metrics_kafka.config.containers import ApplicationContainer
from metrics_kafka.config.init_infra import init_broker_client, init_logging
from metrics_kafka.config.settings import KafkaSettings, LoggingSettings
from metrics_kafka.core.dto.internal.snapshot import MetricSnapshot
from tests.factory_builders import RecordingBroker


def test_container_wires_reporter_and_scheduler() -> None:
    broker = RecordingBroker()
    container = ApplicationContainer(
        snapshot_provider=providers.Object(lambda: MetricSnapshot(gauges={"app.random": 42}))
    )
    container.messaging.broker_client.override(providers.Object(broker))

    try:
        reporter = container.reporter()
        scheduler = container.scheduler()

        assert isinstance(reporter, KafkaReporter)
        assert isinstance(scheduler, ReportingScheduler)
        assert reporter.broker is broker
        assert scheduler.reporter is reporter
        assert container.reporter() is reporter

        assert scheduler.report_now() is True
        assert [m.key for m in broker.sent] == ["app.random"]
    finally:
        container.messaging.broker_client.reset_override()


def test_init_logging_applies_level_to_existing_loggers() -> None:
    probe = PipelineLogger.get_logger("container_probe", "tests")
    resource = init_logging(LoggingSettings(level="DEBUG", to_file=False))
    try:
        next(resource)
        assert probe.logger.level == logging.DEBUG
    finally:
        PipelineLogger.configure(level="INFO")
        probe.close()

    assert probe.logger.level == logging.INFO


class _FakeProducer:
    def __init__(self) -> None:
        self.flushed = False

    def produce(self, *args, **kwargs) -> None:
        pass

    def poll(self, timeout: float = 0) -> int:
        if timeout:
            time.sleep(min(timeout, 0.01))
        return 0

    def flush(self, timeout: float = -1) -> int:
        self.flushed = True
        return 0


def test_init_broker_client_starts_and_stops(monkeypatch) -> None:
    import metrics_kafka.infra.messaging.clients.confluent_client as confluent_client

    created: list[_FakeProducer] = []

    def _factory(config):
        producer = _FakeProducer()
        created.append(producer)
        return producer

    monkeypatch.setattr(confluent_client, "Producer", _factory)

    resource = init_broker_client(KafkaSettings(bootstrap_servers="test:9092"))
    client = next(resource)
    assert client.started is True
    assert client.config["bootstrap.servers"] == "test:9092"

    for _ in resource:
        pass

    assert client.started is False
    assert created[0].flushed is True
