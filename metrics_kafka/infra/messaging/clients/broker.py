from __future__ import annotations

from typing import Callable, Protocol

from metrics_kafka.core.dto.io.message import MetricMessageDTO

# 메시지당 정확히 한 번 호출: 성공 시 None, 실패 시 원인 예외/에러 객체
DeliveryCallback = Callable[[BaseException | object | None], None]


class BrokerClient(Protocol):
    """리포터가 사용하는 브로커 송신 싱크.

    `send`는 메시지를 큐에 넣고 즉시 반환해야 하며, 동기 거부(백프레셔 등)는
    DispatchRejected로 알린다. 콜백은 브로커 I/O 스레드에서 호출될 수 있다.
    """

    def send(self, message: MetricMessageDTO, callback: DeliveryCallback) -> None: ...
