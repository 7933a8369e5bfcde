from __future__ import annotations

import logging
import queue
import sys
import weakref
from datetime import datetime
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from pathlib import Path
from typing import Any

_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def resolve_level(level: int | str | None) -> int:
    """"INFO" 같은 이름 또는 정수 레벨을 logging 레벨로 변환 (기본 INFO)"""
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    return _LEVELS.get(level.strip().upper(), logging.INFO)


class PipelineLogger:
    """
    리포터 컴포넌트별 로깅 시스템

    - QueueHandler로 호출 스레드(브로커 poll 스레드 포함)에서 즉시 반환
    - QueueListener가 콘솔/파일 핸들러로 전달
    - extra 컨텍스트 병합, exc_info 전달
    """

    _default_level: int = logging.INFO
    _default_log_to_file: bool = False
    _default_log_dir: str = "logs"
    _instances: weakref.WeakSet[PipelineLogger] = weakref.WeakSet()

    @classmethod
    def configure(
        cls,
        level: int | str | None = None,
        log_to_file: bool | None = None,
        log_dir: str | None = None,
    ) -> None:
        """이후 생성되는 로거의 기본값 설정 (LoggingSettings에서 호출)"""
        cls._default_level = resolve_level(level)
        if log_to_file is not None:
            cls._default_log_to_file = log_to_file
        if log_dir is not None:
            cls._default_log_dir = log_dir
        # 이미 생성된 모듈 로거에도 레벨 반영
        for instance in list(cls._instances):
            instance.level = cls._default_level
            instance.logger.setLevel(cls._default_level)

    @classmethod
    def get_logger(cls, name: str, component: str | None = None, **kwargs: Any) -> PipelineLogger:
        """
        로거 인스턴스 팩토리.
        logging.getLogger가 이름 단위 싱글톤이므로 별도 레지스트리를 두지 않습니다.
        """
        return cls(name, component, **kwargs)

    def __init__(
        self,
        name: str,
        component: str | None = None,
        level: int | str | None = None,
        log_to_file: bool | None = None,
        log_to_console: bool = True,
        log_dir: str | None = None,
        rotation: str = "midnight",
    ) -> None:
        self.name = name
        self.component = component
        self.level = resolve_level(level) if level is not None else self._default_level
        self.log_to_file = self._default_log_to_file if log_to_file is None else log_to_file
        self.log_to_console = log_to_console
        self.log_dir = log_dir or self._default_log_dir
        self.rotation = rotation

        # 무제한 버퍼 (queue.Full 방지)
        self.log_queue: queue.Queue = queue.Queue()
        self.context: dict[str, Any] = {}

        self._setup_logger()
        self._instances.add(self)

    def _setup_logger(self) -> None:
        self.logger_name = f"{self.name}.{self.component}" if self.component else self.name
        self.logger = logging.getLogger(self.logger_name)
        self.logger.setLevel(self.level)

        # 같은 이름으로 재생성 시 핸들러 중복 방지
        if self.logger.hasHandlers():
            self.logger.handlers.clear()

        self.formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s [%(component)s] %(message)s"
        )

        handlers: list[logging.Handler] = []

        if self.log_to_console:
            console = logging.StreamHandler(sys.stdout)
            console.setFormatter(self.formatter)
            handlers.append(console)

        if self.log_to_file:
            log_filename = self._get_log_filename()
            Path(log_filename).parent.mkdir(parents=True, exist_ok=True)
            file_handler = TimedRotatingFileHandler(
                filename=log_filename,
                when=self.rotation,
                backupCount=7,
            )
            file_handler.setFormatter(self.formatter)
            handlers.append(file_handler)

        self.queue_handler = QueueHandler(self.log_queue)
        self.logger.addHandler(self.queue_handler)

        self.listener = QueueListener(self.log_queue, *handlers, respect_handler_level=True)
        self.listener.start()

    def _get_log_filename(self) -> str:
        today = datetime.now().strftime("%Y-%m-%d")
        component_part = f"{self.component}/" if self.component else ""
        return f"{self.log_dir}/{component_part}{self.name}_{today}.log"

    def set_context(self, **kwargs: Any) -> None:
        self.context.update(kwargs)

    def clear_context(self) -> None:
        self.context.clear()

    def _process_message(self, level: int, msg: str, extra: dict[str, Any] | None = None) -> None:
        log_extra: dict[str, Any] = {"component": self.component or "main"}
        if self.context:
            log_extra.update(self.context)

        exc_info_param = None
        stack_info_param = False

        if extra:
            exc_info_param = extra.pop("exc_info", None)
            stack_info_param = bool(extra.pop("stack_info", False))

            # extra={...} 형태로 넘어온 값은 풀어서 병합
            nested_extra = extra.pop("extra", None)
            if isinstance(nested_extra, dict):
                log_extra.update(nested_extra)

            log_extra.update(extra)

        self.logger.log(
            level, msg, exc_info=exc_info_param, stack_info=stack_info_param, extra=log_extra
        )

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._process_message(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._process_message(logging.INFO, msg, kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._process_message(logging.WARNING, msg, kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._process_message(logging.ERROR, msg, kwargs)

    def critical(self, msg: str, **kwargs: Any) -> None:
        self._process_message(logging.CRITICAL, msg, kwargs)

    def close(self) -> None:
        self.listener.stop()
