"""통합 Settings 모듈 - 환경변수 기반

설정 우선순위:
    1. 환경변수 (최우선) - export METRICS_TOPIC=...
    2. .env 파일 - config/.env
    3. 코드 기본값

사용 예시:
    export KAFKA_BOOTSTRAP_SERVERS=prod-kafka:9092
    export METRICS_TOPIC=app.metrics
    export METRICS_RATE_UNIT=minutes
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from metrics_kafka.core.types import TimeUnit

config_dir = Path(__file__).resolve().parents[2] / "config"


def env_settings(prefix: str) -> SettingsConfigDict:
    """환경변수 + .env 통합 설정

    Args:
        prefix: 환경변수 접두사 (예: KAFKA_, METRICS_)
    """
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=config_dir / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class KafkaSettings(BaseSettings):
    """Kafka Producer 설정

    환경변수 오버라이드:
        KAFKA_BOOTSTRAP_SERVERS: 브로커 주소 (기본: localhost:9092)
        KAFKA_CLIENT_ID: 클라이언트 ID (기본: kafka-reporter)
        KAFKA_ACKS: acks 설정 (기본: 1)
        KAFKA_LINGER_MS: Batch linger 시간 (기본: 10)
        KAFKA_COMPRESSION_TYPE: 압축 타입 (gzip, snappy, lz4, zstd)
        KAFKA_QUEUE_MAX_MESSAGES: 로컬 송신 큐 상한 (초과 시 BufferError)
    """

    bootstrap_servers: str = "localhost:9092"
    client_id: str = "kafka-reporter"
    acks: str | int = "1"
    linger_ms: int = 10
    compression_type: str | None = None
    queue_max_messages: int = 100000

    model_config = env_settings("KAFKA_")


class ReporterSettings(BaseSettings):
    """메트릭 리포터 설정

    환경변수 오버라이드:
        METRICS_TOPIC: 발행 토픽 (기본: metrics)
        METRICS_RATE_UNIT: rate 단위 (기본: seconds)
        METRICS_DURATION_UNIT: duration 단위 (기본: milliseconds)
        METRICS_SERIALIZER: 직렬화 전략 이름 (json-string, json-bytes)
        METRICS_INTERVAL_SEC: 리포팅 주기 (기본: 60초)
        METRICS_NAME_PREFIXES: 발행할 메트릭 이름 접두사 (쉼표 구분, 비우면 전체)
    """

    topic: str = "metrics"
    rate_unit: TimeUnit = TimeUnit.SECONDS
    duration_unit: TimeUnit = TimeUnit.MILLISECONDS
    serializer: str = "json-string"
    interval_sec: float = 60.0
    name_prefixes: str = ""

    model_config = env_settings("METRICS_")

    @property
    def prefixes(self) -> tuple[str, ...]:
        return tuple(p.strip() for p in self.name_prefixes.split(",") if p.strip())


class LoggingSettings(BaseSettings):
    """로깅 설정

    환경변수 오버라이드:
        LOG_LEVEL: 로그 레벨 (기본: INFO)
        LOG_TO_FILE: 파일 로깅 여부 (기본: false)
        LOG_DIR: 로그 디렉터리 (기본: logs)
    """

    level: str = "INFO"
    to_file: bool = False
    dir: str = "logs"

    model_config = env_settings("LOG_")


# ========================================
# 설정 인스턴스 (싱글톤)
# ========================================

kafka_settings = KafkaSettings()
reporter_settings = ReporterSettings()
logging_settings = LoggingSettings()
