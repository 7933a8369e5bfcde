from __future__ import annotations

import logging
from types import SimpleNamespace

import orjson
import pytest

from metrics_kafka.application.reporter import (
    DEFAULT_TOPIC,
    KafkaReporter,
    ReporterConfig,
    build_reporter,
)
from metrics_kafka.common.exceptions import DispatchRejected, SerializationError
from metrics_kafka.config.settings import ReporterSettings
from metrics_kafka.core.dto.internal.snapshot import MetricSnapshot
from metrics_kafka.core.filters import prefix_filter
from metrics_kafka.core.types import TimeUnit
from metrics_kafka.infra.messaging.serializers import JsonBytesSerializer, JsonStringSerializer
from tests.factory_builders import (
    REPORT_STAMP,
    RecordingBroker,
    build_full_snapshot,
    build_meter,
    fixed_clock,
)

REPORTER_LOGGER = "kafka_reporter.application"


class _RetriableError:
    def retriable(self) -> bool:
        return True

    def __str__(self) -> str:
        return "Broker: Request timed out"


def _reporter(broker: RecordingBroker, **config) -> KafkaReporter:
    return KafkaReporter(broker, ReporterConfig(**config), clock=fixed_clock())


def test_report_sends_one_message_per_metric_in_order() -> None:
    broker = RecordingBroker()

    result = _reporter(broker).report(MetricSnapshot(gauges={"b": 2, "a": 1}))

    assert result is None
    assert [m.key for m in broker.sent] == ["a", "b"]
    assert all(m.topic == DEFAULT_TOPIC for m in broker.sent)
    assert orjson.loads(broker.sent[0].value) == {"value": 1, "timestamp": REPORT_STAMP}


def test_report_uses_configured_topic_and_filter() -> None:
    broker = RecordingBroker()
    reporter = _reporter(broker, topic="app.metrics", metric_filter=prefix_filter("http."))

    reporter.report(build_full_snapshot())

    assert reporter.topic == "app.metrics"
    assert [m.key for m in broker.sent] == ["http.errors", "http.requests", "http.latency"]
    assert {m.topic for m in broker.sent} == {"app.metrics"}


def test_report_returns_before_any_delivery_completes() -> None:
    broker = RecordingBroker()

    _reporter(broker).report(build_full_snapshot())

    # 콜백은 아직 호출되지 않았지만 report()는 이미 반환됨
    assert len(broker.callbacks) == 10


def test_serialization_error_sends_nothing() -> None:
    broker = RecordingBroker()
    snapshot = MetricSnapshot(
        gauges={"app.ok": 1}, meters={"http.bad": SimpleNamespace(count=1)}
    )

    with pytest.raises(SerializationError):
        _reporter(broker).report(snapshot)

    assert broker.sent == []


def test_dispatch_rejected_propagates_and_keeps_earlier_messages(
    caplog: pytest.LogCaptureFixture,
) -> None:
    rejection = DispatchRejected("metrics", "jobs.done", reason="queue full")
    broker = RecordingBroker(reject_at=2, reject_with=rejection)

    with caplog.at_level(logging.WARNING, logger=REPORTER_LOGGER):
        with pytest.raises(DispatchRejected) as exc_info:
            _reporter(broker).report(build_full_snapshot())

    assert exc_info.value is rejection
    assert len(broker.sent) == 2
    record = next(r for r in caplog.records if r.name == REPORTER_LOGGER)
    assert record.submitted == 2
    assert record.total == 10


def test_unexpected_broker_error_is_wrapped_as_dispatch_rejected() -> None:
    broker = RecordingBroker(reject_at=0, reject_with=RuntimeError("boom"))

    with pytest.raises(DispatchRejected) as exc_info:
        _reporter(broker).report(MetricSnapshot(gauges={"app.random": 42}))

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert exc_info.value.key == "app.random"


def test_successful_delivery_logs_nothing(caplog: pytest.LogCaptureFixture) -> None:
    broker = RecordingBroker()
    _reporter(broker).report(MetricSnapshot(gauges={"app.random": 42}))

    with caplog.at_level(logging.ERROR, logger=REPORTER_LOGGER):
        broker.complete_all(None)

    assert [r for r in caplog.records if r.name == REPORTER_LOGGER] == []


def test_failed_delivery_is_logged_with_message_context(
    caplog: pytest.LogCaptureFixture,
) -> None:
    broker = RecordingBroker()
    _reporter(broker).report(MetricSnapshot(gauges={"app.random": 42}))

    with caplog.at_level(logging.ERROR, logger=REPORTER_LOGGER):
        broker.complete_all(_RetriableError())

    record = next(r for r in caplog.records if r.name == REPORTER_LOGGER)
    assert record.levelno == logging.ERROR
    assert "Error sending metrics to Kafka" in record.getMessage()
    assert record.topic == DEFAULT_TOPIC
    assert record.key == "app.random"
    assert record.retriable is True
    assert record.error_code == "delivery_failed"


def test_failed_delivery_with_exception_carries_exc_info(
    caplog: pytest.LogCaptureFixture,
) -> None:
    broker = RecordingBroker()
    _reporter(broker).report(MetricSnapshot(gauges={"app.random": 42}))

    with caplog.at_level(logging.ERROR, logger=REPORTER_LOGGER):
        # 콜백은 예외를 밖으로 올리지 않는다
        broker.complete_all(ConnectionError("broker down"))

    record = next(r for r in caplog.records if r.name == REPORTER_LOGGER)
    assert record.exc_info is not None
    assert record.retriable is False


def test_reporter_config_rejects_empty_topic() -> None:
    with pytest.raises(ValueError):
        ReporterConfig(topic="")


def test_reporter_config_defaults() -> None:
    config = ReporterConfig()

    assert config.topic == "metrics"
    assert config.rate_unit is TimeUnit.SECONDS
    assert config.duration_unit is TimeUnit.MILLISECONDS
    assert isinstance(config.serializer, JsonStringSerializer)


def test_reporter_config_from_settings() -> None:
    settings = ReporterSettings(
        topic="app.metrics",
        rate_unit="minutes",
        serializer="json-bytes",
        name_prefixes="http., db.",
    )

    config = ReporterConfig.from_settings(settings)

    assert config.topic == "app.metrics"
    assert config.rate_unit is TimeUnit.MINUTES
    assert isinstance(config.serializer, JsonBytesSerializer)
    assert config.metric_filter("http.requests", "meter") is True
    assert config.metric_filter("jobs.done", "counter") is False


def test_build_reporter_applies_options() -> None:
    broker = RecordingBroker()
    reporter = build_reporter(
        broker,
        topic="app.metrics",
        rate_unit="minutes",
        duration_unit=TimeUnit.SECONDS,
        serializer="json-bytes",
        clock=fixed_clock(),
    )

    reporter.report(MetricSnapshot(meters={"http.requests": build_meter()}))

    assert reporter.config.duration_unit is TimeUnit.SECONDS
    message = broker.sent[0]
    assert message.key == b"http.requests"
    document = orjson.loads(message.value)
    assert document["rate_1m"] == pytest.approx(120.0)
    assert document["unit"] == "events/minute"


def test_build_reporter_without_options_uses_defaults() -> None:
    reporter = build_reporter(RecordingBroker())

    assert reporter.config.topic == DEFAULT_TOPIC
    assert reporter.config.rate_unit is TimeUnit.SECONDS
