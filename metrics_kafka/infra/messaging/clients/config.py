"""
Kafka Producer 설정 관리

KafkaSettings 기반으로 confluent-kafka 형식(점 표기법) 설정 딕셔너리를 구성합니다.
"""

from typing import Any

from metrics_kafka.config.settings import KafkaSettings, kafka_settings


def producer_config(settings: KafkaSettings | None = None, **overrides: Any) -> dict[str, Any]:
    """메트릭 리포터용 Producer 설정.

    - at-most-once 발행: 리포터는 재시도/버퍼링을 하지 않으므로 멱등성 비활성
    - 로컬 큐 상한 초과 시 produce()가 BufferError로 즉시 거부

    Args:
        settings: 사용할 KafkaSettings (기본: 모듈 싱글톤)
        **overrides: confluent-kafka 키로 덮어쓸 값들 (예: {"linger.ms": 5})
    """
    s = settings or kafka_settings
    cfg: dict[str, Any] = {
        "bootstrap.servers": s.bootstrap_servers,
        "client.id": s.client_id,
        "acks": str(s.acks),
        "linger.ms": s.linger_ms,
        "queue.buffering.max.messages": s.queue_max_messages,
        "enable.idempotence": False,
        "request.timeout.ms": 30000,
        "delivery.timeout.ms": 120000,
    }
    if s.compression_type:
        cfg["compression.type"] = s.compression_type

    cfg.update(overrides)
    return cfg
