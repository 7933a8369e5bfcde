"""
confluent-kafka 기반 브로커 클라이언트

Producer.produce()는 로컬 큐에 넣고 바로 반환하며, delivery report는
전용 poll 스레드에서 처리합니다.
"""

from __future__ import annotations

import threading
from typing import Any

from confluent_kafka import KafkaException, Producer

from metrics_kafka.common.exceptions import DispatchRejected
from metrics_kafka.common.logger import PipelineLogger
from metrics_kafka.core.dto.io.message import MetricMessageDTO
from metrics_kafka.infra.messaging.clients.broker import DeliveryCallback
from metrics_kafka.infra.messaging.clients.config import producer_config

logger = PipelineLogger.get_logger("kafka_client", "infra")


class ConfluentBrokerClient:
    """confluent-kafka Producer 래퍼 - 논블로킹 send + poll 스레드

    Example:
        >>> with ConfluentBrokerClient() as client:
        ...     reporter = KafkaReporter(client)
        ...     reporter.report(snapshot)
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        producer: Any | None = None,
        poll_interval_sec: float = 0.1,
    ) -> None:
        self.config = config if config is not None else producer_config()
        # 테스트/외부 관리 Producer 주입 허용 (produce/poll/flush 인터페이스)
        self.producer: Any | None = producer
        self.poll_interval_sec = poll_interval_sec

        self._poll_thread: threading.Thread | None = None
        self._shutdown_event = threading.Event()
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        """Producer 생성 및 delivery report poll 스레드 시작 (멱등)"""
        if self._started:
            return

        if self.producer is None:
            self.producer = Producer(self.config)

        self._shutdown_event.clear()
        self._poll_thread = threading.Thread(
            target=self._poll_worker,
            name=f"{self.__class__.__name__}-poll",
            daemon=True,
        )
        self._poll_thread.start()
        self._started = True
        logger.info(
            "Kafka producer started",
            extra={"bootstrap_servers": self.config.get("bootstrap.servers")},
        )

    def stop(self, timeout: float = 30.0) -> int:
        """남은 메시지 flush 후 poll 스레드 종료.

        Returns:
            flush 이후에도 큐에 남은 메시지 수
        """
        if not self._started or self.producer is None:
            return 0

        remaining = self.producer.flush(timeout)

        self._shutdown_event.set()
        if self._poll_thread and self._poll_thread.is_alive():
            self._poll_thread.join(timeout=5.0)

        self._poll_thread = None
        self._started = False
        if remaining:
            logger.warning(
                f"Kafka producer stopped with {remaining} undelivered messages",
                extra={"remaining": remaining},
            )
        else:
            logger.info("Kafka producer stopped")
        return remaining

    def __enter__(self) -> ConfluentBrokerClient:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def send(self, message: MetricMessageDTO, callback: DeliveryCallback) -> None:
        """메시지를 Producer 로컬 큐에 넣는다 (acks를 기다리지 않음).

        Raises:
            DispatchRejected: 미시작 상태, 로컬 큐 가득 참(BufferError), produce 거부
        """
        if not self._started or self.producer is None:
            raise DispatchRejected(message.topic, message.key, reason="producer not started")

        def _on_delivery(err: Any, msg: Any) -> None:
            callback(err)

        try:
            self.producer.produce(
                message.topic,
                value=message.value_bytes(),
                key=message.key_bytes(),
                on_delivery=_on_delivery,
            )
        except BufferError as exc:
            raise DispatchRejected(
                message.topic, message.key, reason=f"local producer queue is full ({exc})"
            ) from exc
        except KafkaException as exc:
            raise DispatchRejected(message.topic, message.key, reason=str(exc)) from exc

        # 큐가 찬 상태에서도 delivery report가 빠지도록 즉시 서빙
        self.producer.poll(0)

    def _poll_worker(self) -> None:
        """전용 poll 스레드 - delivery report 콜백 실행"""
        while not self._shutdown_event.is_set():
            try:
                if self.producer is not None:
                    self.producer.poll(self.poll_interval_sec)
                else:
                    self._shutdown_event.wait(self.poll_interval_sec)
            except Exception as e:
                logger.error(
                    f"{self.__class__.__name__} poll worker error: {e}", exc_info=True
                )
