"""
Dependency Injection Containers

아키텍처:
- MessagingContainer: Kafka 브로커 클라이언트 (Resource로 start/stop 자동 관리)
- ApplicationContainer: 최상위 컨테이너 (ReporterConfig, KafkaReporter, ReportingScheduler)

사용 예시:
    container = ApplicationContainer(snapshot_provider=providers.Object(registry.snapshot))
    container.init_resources()
    scheduler = container.scheduler()
    ...
    container.shutdown_resources()
"""

from dependency_injector import containers, providers

from metrics_kafka.application.reporter import KafkaReporter, ReporterConfig
from metrics_kafka.application.scheduler import ReportingScheduler
from metrics_kafka.config.init_infra import init_broker_client, init_logging
from metrics_kafka.config.settings import kafka_settings, logging_settings, reporter_settings


class MessagingContainer(containers.DeclarativeContainer):
    """메시징 레이어: Kafka 브로커 클라이언트"""

    # settings.py 싱글톤 주입
    kafka_config = providers.Object(kafka_settings)

    broker_client = providers.Resource(init_broker_client, settings=kafka_config)


class ApplicationContainer(containers.DeclarativeContainer):
    """최상위 컨테이너

    snapshot_provider는 외부 레지스트리가 제공해야 한다 (() -> MetricSnapshot).
    """

    logging_config = providers.Object(logging_settings)
    reporter_options = providers.Object(reporter_settings)

    logging_resource = providers.Resource(init_logging, settings=logging_config)

    messaging = providers.Container(MessagingContainer)

    reporter_config = providers.Singleton(
        ReporterConfig.from_settings, settings=reporter_options
    )

    reporter = providers.Singleton(
        KafkaReporter,
        broker=messaging.broker_client,
        config=reporter_config,
    )

    snapshot_provider = providers.Dependency()

    scheduler = providers.Singleton(
        ReportingScheduler,
        reporter=reporter,
        snapshot_provider=snapshot_provider,
        interval_sec=reporter_options.provided.interval_sec,
    )
