"""브로커 전송 경계 DTO

직렬화 전략이 만든 메시지를 브로커 클라이언트에 넘기는 단위입니다.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from metrics_kafka.common.serde import key_to_bytes

# 값 변환/트림 없이 전략이 만든 str/bytes를 그대로 보존
MESSAGE_CONFIG = ConfigDict(
    extra="forbid",
    frozen=True,
    strict=True,
    validate_default=True,
    arbitrary_types_allowed=False,
)


class MetricMessageDTO(BaseModel):
    """토픽 주소가 지정된 메트릭 메시지 (key/value는 str 또는 bytes).

    - 기본 전략: 메트릭 1개당 메시지 1개, key = 점 표기 메트릭 이름
    - 전송 후 소유권은 브로커 클라이언트로 넘어간다
    """

    topic: str = Field(..., min_length=1, description="발행 대상 토픽")
    key: str | bytes | None = Field(None, description="메시지 키 (메트릭 이름)")
    value: str | bytes = Field(..., description="JSON 문서 (str 또는 UTF-8 bytes)")

    model_config = MESSAGE_CONFIG

    def key_bytes(self) -> bytes | None:
        return key_to_bytes(self.key)

    def value_bytes(self) -> bytes:
        if isinstance(self.value, bytes):
            return self.value
        return self.value.encode("utf-8")
