"""
ros2topics Middleware - Handles onto the ROS2 client library.

The sub-commands only talk to these abstract handles. The real implementation
lives in rclpy_backend; discovery, transport and serialization stay inside
the client library.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Sequence

from ros2topics.core.config import QoSSettings
from ros2topics.middleware.registry import MessageType, TypeRegistry

logger = logging.getLogger(__name__)

MessageCallback = Callable[[Any], None]


class PublisherHandle(ABC):
    """A publisher bound to one topic and message type."""

    @abstractmethod
    def publish(self, message: Any) -> None:
        ...

    @abstractmethod
    def destroy(self) -> None:
        ...


class SubscriptionHandle(ABC):
    """A subscription whose callback runs inside NodeHandle.spin_once."""

    @abstractmethod
    def destroy(self) -> None:
        ...


class NodeHandle(ABC):
    """A short-lived middleware node owned by one command."""

    @abstractmethod
    def get_topic_names_and_types(self) -> Dict[str, List[str]]:
        """Current discovery snapshot: topic name -> type identifiers."""

    @abstractmethod
    def spin_once(self, timeout_sec: float = 0.0) -> None:
        """Deliver pending discovery updates and subscription callbacks."""

    @abstractmethod
    def create_publisher(
        self, msg_type: MessageType, topic: str, qos: QoSSettings
    ) -> PublisherHandle:
        ...

    @abstractmethod
    def create_subscription(
        self,
        msg_type: MessageType,
        topic: str,
        callback: MessageCallback,
        qos: QoSSettings,
    ) -> SubscriptionHandle:
        ...

    @abstractmethod
    def destroy(self) -> None:
        ...


class Middleware(ABC):
    """Process-level client library lifecycle plus the type registry."""

    @abstractmethod
    def init(self, args: Sequence[str]) -> None:
        ...

    @abstractmethod
    def shutdown(self) -> None:
        ...

    @abstractmethod
    def ok(self) -> bool:
        """False once the client library has been shut down."""

    @abstractmethod
    def create_node(self, name: str) -> NodeHandle:
        ...

    @property
    @abstractmethod
    def registry(self) -> TypeRegistry:
        ...


@contextmanager
def middleware_session(middleware: Middleware, args: Sequence[str]) -> Iterator[Middleware]:
    """Initialise the middleware and guarantee shutdown on every exit path."""
    logger.debug("Initialising middleware")
    middleware.init(args)
    try:
        yield middleware
    finally:
        logger.debug("Shutting down middleware")
        middleware.shutdown()


@contextmanager
def node_scope(middleware: Middleware, name: str) -> Iterator[NodeHandle]:
    """Create a node and dispose it exactly once."""
    node = middleware.create_node(name)
    logger.debug(f"Created node '{name}'")
    try:
        yield node
    finally:
        node.destroy()
        logger.debug(f"Disposed node '{name}'")


def discover_topics(node: NodeHandle, timeout_sec: float = 0.0) -> Dict[str, List[str]]:
    """
    Snapshot topic names and types, tick once, snapshot again and merge.

    Discovery is asynchronous, so the second poll picks up whatever the tick
    delivered. Keys are returned in lexical order.
    """
    topics = dict(node.get_topic_names_and_types())
    node.spin_once(timeout_sec)
    topics.update(node.get_topic_names_and_types())

    return {name: list(topics[name]) for name in sorted(topics)}
