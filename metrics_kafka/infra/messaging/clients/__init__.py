from metrics_kafka.infra.messaging.clients.broker import BrokerClient, DeliveryCallback
from metrics_kafka.infra.messaging.clients.config import producer_config
from metrics_kafka.infra.messaging.clients.confluent_client import ConfluentBrokerClient

__all__ = [
    "BrokerClient",
    "ConfluentBrokerClient",
    "DeliveryCallback",
    "producer_config",
]
