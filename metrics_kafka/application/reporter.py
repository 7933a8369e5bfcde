"""메트릭 스냅샷을 Kafka 토픽으로 발행하는 리포터

빌드 옵션 (ReporterConfig):
- topic: 발행 토픽 (기본: "metrics")
- serializer: 스냅샷 -> 메시지 변환 전략 (기본: JsonStringSerializer, 메트릭당 1메시지)
- metric_filter: (name, kind) -> bool, 발행 대상 제한 (기본: 전체)
- rate_unit: rate 보고 단위 (기본: 초)
- duration_unit: duration 보고 단위 (기본: 밀리초)

Note:
    serializer가 만드는 key/value 타입(str/bytes)은 브로커 클라이언트가 받을 수 있어야 한다.
"""

from __future__ import annotations

import contextlib
from dataclasses import dataclass, field, replace
from typing import Any

from metrics_kafka.common.exceptions import DeliveryFailed, DispatchRejected, is_retriable
from metrics_kafka.common.logger import PipelineLogger
from metrics_kafka.config.settings import ReporterSettings
from metrics_kafka.core.dto.internal.snapshot import MetricFilter, MetricSnapshot
from metrics_kafka.core.dto.io.message import MetricMessageDTO
from metrics_kafka.core.encoding import Clock, utc_now
from metrics_kafka.core.filters import accept_all, prefix_filter
from metrics_kafka.core.types import TimeUnit
from metrics_kafka.infra.messaging.clients.broker import BrokerClient, DeliveryCallback
from metrics_kafka.infra.messaging.serializers import (
    JsonStringSerializer,
    MetricsSerializer,
    resolve_serializer,
)

logger = PipelineLogger.get_logger("kafka_reporter", "application")

DEFAULT_TOPIC = "metrics"


@dataclass(slots=True, frozen=True, kw_only=True)
class ReporterConfig:
    """리포터 생성 시 고정되는 불변 설정"""

    topic: str = DEFAULT_TOPIC
    rate_unit: TimeUnit = TimeUnit.SECONDS
    duration_unit: TimeUnit = TimeUnit.MILLISECONDS
    metric_filter: MetricFilter = accept_all
    serializer: MetricsSerializer = field(default_factory=JsonStringSerializer)

    def __post_init__(self) -> None:
        if not self.topic:
            raise ValueError("topic must be a non-empty string")

    @classmethod
    def from_settings(cls, settings: ReporterSettings) -> ReporterConfig:
        return cls(
            topic=settings.topic,
            rate_unit=settings.rate_unit,
            duration_unit=settings.duration_unit,
            metric_filter=prefix_filter(*settings.prefixes),
            serializer=resolve_serializer(settings.serializer),
        )


class KafkaReporter:
    """스냅샷 1회 -> 메시지 목록 -> 브로커 비동기 전송 (fire-and-forget).

    - report()는 전송 개시까지만 책임지고 acks를 기다리지 않는다
    - 사이클 간 상태를 두지 않으므로 재시도/버퍼링이 없다
    - 동시에 여러 report()가 겹치지 않도록 하는 것은 스케줄러의 몫이다
    """

    def __init__(
        self,
        broker: BrokerClient,
        config: ReporterConfig | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.broker = broker
        self.config = config or ReporterConfig()
        self._clock = clock

    @property
    def topic(self) -> str:
        return self.config.topic

    def report(self, snapshot: MetricSnapshot) -> None:
        """현재 스냅샷을 한 사이클로 발행.

        Raises:
            SerializationError: 메트릭 인코딩 실패 (아무것도 전송하지 않음)
            DispatchRejected: 브로커 동기 거부 (이미 넘긴 메시지는 되돌리지 않음)
        """
        cfg = self.config
        timestamp = self._clock()

        if cfg.metric_filter is not accept_all:
            snapshot = snapshot.filtered(cfg.metric_filter)

        messages = cfg.serializer.serialize(
            snapshot, cfg.topic, timestamp, cfg.rate_unit, cfg.duration_unit
        )
        self._dispatch(messages)
        logger.debug(
            f"Dispatched {len(messages)} metric messages",
            extra={"topic": cfg.topic, "message_count": len(messages)},
        )

    def _dispatch(self, messages: list[MetricMessageDTO]) -> None:
        for index, message in enumerate(messages):
            try:
                self.broker.send(message, self._delivery_callback(message))
            except DispatchRejected as exc:
                self._log_abort(exc, index, len(messages))
                raise
            except Exception as exc:
                rejected = DispatchRejected(message.topic, message.key, reason=str(exc))
                self._log_abort(rejected, index, len(messages))
                raise rejected from exc

    @staticmethod
    def _log_abort(exc: DispatchRejected, submitted: int, total: int) -> None:
        logger.warning(
            f"Reporting cycle aborted after {submitted}/{total} messages: {exc}",
            extra={**exc.log_extra(), "submitted": submitted, "total": total},
        )

    @staticmethod
    def _delivery_callback(message: MetricMessageDTO) -> DeliveryCallback:
        topic, key = message.topic, message.key

        def _on_completion(error: Any) -> None:
            # 브로커 I/O 스레드에서 호출되므로 어떤 경우에도 예외를 올리지 않는다
            if error is None:
                return
            try:
                failure = DeliveryFailed(
                    topic, key, reason=str(error), retriable=is_retriable(error)
                )
                logger.error(
                    str(failure),
                    extra=failure.log_extra(),
                    exc_info=error if isinstance(error, BaseException) else None,
                )
            except Exception:
                with contextlib.suppress(Exception):
                    logger.error(f"Error sending metrics to Kafka --> Topic: {topic}")

        return _on_completion


def build_reporter(
    broker: BrokerClient,
    *,
    rate_unit: TimeUnit | str | None = None,
    duration_unit: TimeUnit | str | None = None,
    metric_filter: MetricFilter | None = None,
    topic: str | None = None,
    serializer: MetricsSerializer | str | None = None,
    clock: Clock = utc_now,
) -> KafkaReporter:
    """옵션 키워드로 리포터 생성. 생략한 옵션은 ReporterConfig 기본값을 쓴다."""
    overrides: dict[str, Any] = {}
    if rate_unit is not None:
        overrides["rate_unit"] = TimeUnit(rate_unit)
    if duration_unit is not None:
        overrides["duration_unit"] = TimeUnit(duration_unit)
    if metric_filter is not None:
        overrides["metric_filter"] = metric_filter
    if topic is not None:
        overrides["topic"] = topic
    if serializer is not None:
        overrides["serializer"] = (
            resolve_serializer(serializer) if isinstance(serializer, str) else serializer
        )
    return KafkaReporter(broker, replace(ReporterConfig(), **overrides), clock=clock)
