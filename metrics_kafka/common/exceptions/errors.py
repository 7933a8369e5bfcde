"""리포터 예외 계층

- SerializationError: 사이클 치명 에러, report() 호출자에게 전파
- DispatchRejected: 브로커가 동기적으로 거부 (백프레셔 등), 호출자에게 전파
- DeliveryFailed: 비동기 전송 실패, 콜백에서 로깅만 수행
"""

from __future__ import annotations

from typing import Any

from metrics_kafka.core.types import ErrorCode, MetricKind


class ReporterError(Exception):
    """리포터 공통 베이스 예외"""

    code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def log_extra(self) -> dict[str, Any]:
        return {"error_code": str(self.code)}


class SerializationError(ReporterError):
    code = ErrorCode.SERIALIZATION_FAILED

    def __init__(self, metric_name: str, kind: MetricKind | str, reason: str | None = None) -> None:
        self.metric_name = metric_name
        self.kind = MetricKind(kind)
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failed to serialize {self.kind} '{metric_name}'{detail}")

    def log_extra(self) -> dict[str, Any]:
        return {
            "error_code": str(self.code),
            "metric_name": self.metric_name,
            "metric_kind": str(self.kind),
        }


class _MessageError(ReporterError):
    _summary = "Message error"

    def __init__(self, topic: str, key: Any, reason: str | None = None) -> None:
        self.topic = topic
        self.key = key
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"{self._summary} --> Topic: {topic}, Key: {key!r}{detail}")

    def log_extra(self) -> dict[str, Any]:
        return {
            "error_code": str(self.code),
            "topic": self.topic,
            "key": _printable_key(self.key),
        }


class DispatchRejected(_MessageError):
    code = ErrorCode.DISPATCH_REJECTED
    _summary = "Broker rejected metric message"


class DeliveryFailed(_MessageError):
    code = ErrorCode.DELIVERY_FAILED
    _summary = "Error sending metrics to Kafka"

    def __init__(
        self, topic: str, key: Any, reason: str | None = None, *, retriable: bool = False
    ) -> None:
        self.retriable = retriable
        super().__init__(topic, key, reason)

    def log_extra(self) -> dict[str, Any]:
        extra = super().log_extra()
        extra["retriable"] = self.retriable
        return extra


def _printable_key(key: Any) -> str | None:
    if key is None:
        return None
    if isinstance(key, bytes):
        return key.decode("utf-8", errors="replace")
    return str(key)


def is_retriable(error: BaseException | Any) -> bool:
    """KafkaError/KafkaException의 retriable 플래그 조회 (로그 기록용, 재시도 안 함)"""
    candidate = error
    args = getattr(error, "args", ())
    if not hasattr(candidate, "retriable") and args:
        # KafkaException은 args[0]에 KafkaError를 담는다
        candidate = args[0]
    check = getattr(candidate, "retriable", None)
    if not callable(check):
        return False
    return bool(check())
