from __future__ import annotations

import time
from typing import Any

import pytest
from confluent_kafka import KafkaError, KafkaException

from metrics_kafka.common.exceptions import DispatchRejected
from metrics_kafka.config.settings import KafkaSettings
from metrics_kafka.infra.messaging.clients import ConfluentBrokerClient, producer_config
from tests.factory_builders import build_message


class FakeProducer:
    """confluent_kafka.Producer 대역 (produce/poll/flush)"""

    def __init__(self, raise_on_produce: BaseException | None = None) -> None:
        self.produced: list[dict[str, Any]] = []
        self.raise_on_produce = raise_on_produce
        self.flushed_with: float | None = None

    def produce(self, topic: str, value: Any = None, key: Any = None, on_delivery: Any = None) -> None:
        if self.raise_on_produce is not None:
            raise self.raise_on_produce
        self.produced.append(
            {"topic": topic, "key": key, "value": value, "on_delivery": on_delivery}
        )

    def poll(self, timeout: float = 0) -> int:
        if timeout:
            time.sleep(min(timeout, 0.01))
        return 0

    def flush(self, timeout: float = -1) -> int:
        self.flushed_with = timeout
        return 0


def _started_client(producer: FakeProducer) -> ConfluentBrokerClient:
    client = ConfluentBrokerClient(config={"bootstrap.servers": "test:9092"}, producer=producer)
    client.start()
    return client


def test_send_encodes_key_and_value_as_utf8() -> None:
    producer = FakeProducer()
    client = _started_client(producer)
    try:
        client.send(build_message(), lambda err: None)
    finally:
        client.stop()

    assert len(producer.produced) == 1
    produced = producer.produced[0]
    assert produced["topic"] == "metrics"
    assert produced["key"] == b"app.random"
    assert produced["value"] == b'{"value":42,"timestamp":"2015-10-22T11:50:34.762+00:00"}'


def test_delivery_report_is_forwarded_to_callback() -> None:
    producer = FakeProducer()
    received: list[Any] = []
    client = _started_client(producer)
    try:
        client.send(build_message(), received.append)
        client.send(build_message(key="other"), received.append)
    finally:
        client.stop()

    error = KafkaError(KafkaError._MSG_TIMED_OUT)
    producer.produced[0]["on_delivery"](None, object())
    producer.produced[1]["on_delivery"](error, object())

    assert received == [None, error]


def test_buffer_error_maps_to_dispatch_rejected() -> None:
    client = _started_client(FakeProducer(raise_on_produce=BufferError("Local: Queue full")))
    try:
        with pytest.raises(DispatchRejected) as exc_info:
            client.send(build_message(), lambda err: None)
    finally:
        client.stop()

    assert isinstance(exc_info.value.__cause__, BufferError)
    assert exc_info.value.topic == "metrics"
    assert "queue is full" in str(exc_info.value)


def test_kafka_exception_maps_to_dispatch_rejected() -> None:
    failure = KafkaException(KafkaError(KafkaError._UNKNOWN_TOPIC))
    client = _started_client(FakeProducer(raise_on_produce=failure))
    try:
        with pytest.raises(DispatchRejected) as exc_info:
            client.send(build_message(), lambda err: None)
    finally:
        client.stop()

    assert exc_info.value.__cause__ is failure


def test_send_before_start_is_rejected() -> None:
    client = ConfluentBrokerClient(config={}, producer=FakeProducer())

    with pytest.raises(DispatchRejected, match="producer not started"):
        client.send(build_message(), lambda err: None)


def test_start_is_idempotent_and_stop_flushes() -> None:
    producer = FakeProducer()
    client = ConfluentBrokerClient(config={}, producer=producer)

    with client:
        client.start()
        assert client.started is True

    assert client.started is False
    assert producer.flushed_with == 30.0
    assert client.stop() == 0


def test_producer_config_from_settings_and_overrides() -> None:
    settings = KafkaSettings(
        bootstrap_servers="kafka1:19092", acks=1, compression_type="zstd"
    )

    cfg = producer_config(settings, **{"linger.ms": 5})

    assert cfg["bootstrap.servers"] == "kafka1:19092"
    assert cfg["acks"] == "1"
    assert cfg["compression.type"] == "zstd"
    assert cfg["linger.ms"] == 5
    assert cfg["enable.idempotence"] is False


def test_producer_config_omits_compression_when_unset() -> None:
    cfg = producer_config(KafkaSettings(compression_type=None))

    assert "compression.type" not in cfg
