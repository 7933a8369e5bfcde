from typing import Iterator

from metrics_kafka.common.logger import PipelineLogger
from metrics_kafka.config.settings import KafkaSettings, LoggingSettings
from metrics_kafka.infra.messaging.clients import ConfluentBrokerClient, producer_config


def init_logging(settings: LoggingSettings) -> Iterator[None]:
    """LoggingSettings를 PipelineLogger 기본값에 반영"""
    PipelineLogger.configure(
        level=settings.level, log_to_file=settings.to_file, log_dir=settings.dir
    )
    yield


def init_broker_client(settings: KafkaSettings) -> Iterator[ConfluentBrokerClient]:
    """브로커 클라이언트 시작 및 종료(flush) 관리"""
    client = ConfluentBrokerClient(config=producer_config(settings))
    client.start()
    yield client
    client.stop()
