"""
ros2topics rclpy backend - Middleware handles implemented with rclpy.

rclpy and rosidl_runtime_py come from a sourced ROS2 install, not from the
package index, so they are imported lazily: building the CLI, printing usage
and the unimplemented commands work without ROS2 on the path.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ros2topics.core.config import QoSSettings
from ros2topics.middleware.base import (
    MessageCallback,
    Middleware,
    NodeHandle,
    PublisherHandle,
    SubscriptionHandle,
)
from ros2topics.middleware.registry import MessageType, TypeRegistry

logger = logging.getLogger(__name__)

SERVICE_SUFFIXES = ("_Request", "_Response")


def _describe(identifier: str, message_class: Any) -> MessageType:
    from rosidl_runtime_py import message_to_ordereddict, set_message_fields

    return MessageType(
        identifier=identifier,
        message_class=message_class,
        populate=set_message_fields,
        to_dict=lambda message: dict(message_to_ordereddict(message)),
    )


def load_message_type(identifier: str) -> Optional[MessageType]:
    """Primary tier: ``pkg/msg/Type`` or ``pkg/Type``."""
    from rosidl_runtime_py.utilities import get_message

    try:
        message_class = get_message(identifier)
    except (AttributeError, ImportError, ValueError) as e:
        logger.debug(f"No message type {identifier}: {e}")
        return None

    return _describe(identifier, message_class)


def load_internal_type(identifier: str) -> Optional[MessageType]:
    """Secondary tier: service halves, ``pkg/srv/Type_Request`` or ``pkg/Type_Response``."""
    from rosidl_runtime_py.utilities import get_service

    for suffix in SERVICE_SUFFIXES:
        if not identifier.endswith(suffix):
            continue

        service_name = identifier[: -len(suffix)]
        try:
            service_class = get_service(service_name)
        except (AttributeError, ImportError, ValueError) as e:
            logger.debug(f"No service type {service_name}: {e}")
            return None

        return _describe(identifier, getattr(service_class, suffix.lstrip("_")))

    return None


def to_rclpy_qos(settings: QoSSettings):
    from rclpy.qos import DurabilityPolicy, HistoryPolicy, QoSProfile, ReliabilityPolicy

    return QoSProfile(
        history=HistoryPolicy.KEEP_LAST,
        depth=settings.depth,
        reliability=ReliabilityPolicy[settings.reliability.upper()],
        durability=DurabilityPolicy[settings.durability.upper()],
    )


class RclpyPublisher(PublisherHandle):
    def __init__(self, node, publisher):
        self._node = node
        self._publisher = publisher

    def publish(self, message: Any) -> None:
        self._publisher.publish(message)

    def destroy(self) -> None:
        self._node.destroy_publisher(self._publisher)


class RclpySubscription(SubscriptionHandle):
    def __init__(self, node, subscription):
        self._node = node
        self._subscription = subscription

    def destroy(self) -> None:
        self._node.destroy_subscription(self._subscription)


class RclpyNode(NodeHandle):
    """Wraps an rclpy.node.Node."""

    def __init__(self, node):
        self._node = node

    def get_topic_names_and_types(self) -> Dict[str, List[str]]:
        return {name: list(types) for name, types in self._node.get_topic_names_and_types()}

    def spin_once(self, timeout_sec: float = 0.0) -> None:
        import rclpy

        rclpy.spin_once(self._node, timeout_sec=timeout_sec)

    def create_publisher(
        self, msg_type: MessageType, topic: str, qos: QoSSettings
    ) -> PublisherHandle:
        publisher = self._node.create_publisher(msg_type.message_class, topic, to_rclpy_qos(qos))
        return RclpyPublisher(self._node, publisher)

    def create_subscription(
        self,
        msg_type: MessageType,
        topic: str,
        callback: MessageCallback,
        qos: QoSSettings,
    ) -> SubscriptionHandle:
        subscription = self._node.create_subscription(
            msg_type.message_class, topic, callback, to_rclpy_qos(qos)
        )
        return RclpySubscription(self._node, subscription)

    def destroy(self) -> None:
        self._node.destroy_node()


class RclpyMiddleware(Middleware):
    """
    rclpy-backed middleware.

    rclpy is initialised without its own signal handlers: SIGINT is turned into
    a cancellation by the CLI so loops finish and nodes are disposed.
    """

    def __init__(self):
        self._registry = TypeRegistry(
            primary_loader=load_message_type,
            secondary_loader=load_internal_type,
        )

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    def init(self, args: Sequence[str]) -> None:
        import rclpy
        from rclpy.signals import SignalHandlerOptions

        rclpy.init(args=list(args), signal_handler_options=SignalHandlerOptions.NO)

    def shutdown(self) -> None:
        import rclpy

        rclpy.try_shutdown()

    def ok(self) -> bool:
        import rclpy

        return rclpy.ok()

    def create_node(self, name: str) -> NodeHandle:
        import rclpy

        return RclpyNode(rclpy.create_node(name))
