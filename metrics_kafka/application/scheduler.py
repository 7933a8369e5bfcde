"""주기적 리포팅 스케줄러 (asyncio)

interval마다 레지스트리 스냅샷을 받아 KafkaReporter.report()를 호출합니다.
사이클은 순차 실행되므로 한 리포터에 대해 동시에 하나만 진행됩니다.
"""

from __future__ import annotations

import asyncio
from typing import Callable

from metrics_kafka.application.reporter import KafkaReporter
from metrics_kafka.common.exceptions import ReporterError
from metrics_kafka.common.logger import PipelineLogger
from metrics_kafka.core.dto.internal.snapshot import MetricSnapshot

logger = PipelineLogger.get_logger("reporting_scheduler", "application")

SnapshotProvider = Callable[[], MetricSnapshot]


class ReportingScheduler:
    """고정 주기 리포팅 루프.

    - 실패한 사이클은 로깅 후 버리고 다음 tick에서 새 스냅샷으로 진행
    - stop(report_final=True)이면 종료 직전 한 번 더 발행
    """

    def __init__(
        self,
        reporter: KafkaReporter,
        snapshot_provider: SnapshotProvider,
        interval_sec: float = 60.0,
    ) -> None:
        if interval_sec <= 0:
            raise ValueError(f"interval_sec must be positive, got {interval_sec}")
        self.reporter = reporter
        self.snapshot_provider = snapshot_provider
        self.interval_sec = interval_sec
        self._task: asyncio.Task[None] | None = None
        # 워커 스레드에서 진행 중인 사이클 (태스크 취소와 무관하게 끝까지 실행됨)
        self._cycle: asyncio.Future[bool] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def report_now(self) -> bool:
        """스냅샷을 즉시 한 번 발행. 사이클 실패 시 False (예외는 로깅만)."""
        snapshot = self.snapshot_provider()
        try:
            self.reporter.report(snapshot)
        except ReporterError as e:
            logger.error(
                f"Metrics reporting cycle failed: {e}",
                extra=e.log_extra(),
                exc_info=True,
            )
            return False
        return True

    async def start(self) -> None:
        """리포팅 태스크 시작 (이미 실행 중이면 무시)"""
        if self.running:
            return
        self._task = asyncio.create_task(
            self._run(), name=f"{self.__class__.__name__}-{self.reporter.topic}"
        )
        logger.info(
            "Metrics reporting started",
            extra={"topic": self.reporter.topic, "interval_sec": self.interval_sec},
        )

    async def stop(self, report_final: bool = False) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            await self._drain_cycle()
            logger.info("Metrics reporting stopped", extra={"topic": self.reporter.topic})

        if report_final:
            await asyncio.to_thread(self.report_now)

    async def _drain_cycle(self) -> None:
        """취소 시점에 진행 중이던 사이클이 끝날 때까지 대기"""
        cycle, self._cycle = self._cycle, None
        if cycle is None or cycle.done():
            return
        try:
            await cycle
        except Exception as e:
            logger.error(
                f"Snapshot collection failed: {e}",
                extra={"topic": self.reporter.topic},
                exc_info=True,
            )

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_sec)
            # 직렬화는 CPU 작업이므로 이벤트 루프 밖에서 수행
            self._cycle = asyncio.ensure_future(asyncio.to_thread(self.report_now))
            try:
                # 태스크가 취소돼도 사이클 future는 stop()이 마저 기다린다
                await asyncio.shield(self._cycle)
            except Exception as e:
                logger.error(
                    f"Snapshot collection failed: {e}",
                    extra={"topic": self.reporter.topic},
                    exc_info=True,
                )
            else:
                self._cycle = None
