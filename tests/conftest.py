"""Shared fixtures: an in-memory middleware so tests run without ROS2."""

import pytest
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ros2topics.commands.context import CommandContext
from ros2topics.core.cancellation import CancellationToken
from ros2topics.core.config import ToolConfig
from ros2topics.middleware.base import (
    Middleware,
    NodeHandle,
    PublisherHandle,
    SubscriptionHandle,
)
from ros2topics.middleware.registry import MessageType, TypeRegistry


@dataclass
class StringMsg:
    data: str = ""


@dataclass
class Int32Msg:
    data: int = 0


@dataclass
class ParamsRequest:
    names: List[str] = field(default_factory=list)


def _populate(message, values: Dict) -> None:
    for key, value in values.items():
        if not hasattr(message, key):
            raise AttributeError(f"{type(message).__name__} has no field '{key}'")
        setattr(message, key, value)


def make_type(identifier: str, cls) -> MessageType:
    return MessageType(
        identifier=identifier,
        message_class=cls,
        populate=_populate,
        to_dict=asdict,
    )


class FakePublisher(PublisherHandle):
    def __init__(self, middleware, topic):
        self.middleware = middleware
        self.topic = topic
        self.destroyed = False

    def publish(self, message: Any) -> None:
        self.middleware.published.append((self.topic, message))
        if self.middleware.on_publish:
            self.middleware.on_publish(len(self.middleware.published))

    def destroy(self) -> None:
        self.destroyed = True


class FakeSubscription(SubscriptionHandle):
    def __init__(self, topic, callback):
        self.topic = topic
        self.callback = callback
        self.destroyed = False

    def destroy(self) -> None:
        self.destroyed = True


class FakeNode(NodeHandle):
    def __init__(self, middleware, name):
        self.middleware = middleware
        self.name = name
        self.destroy_count = 0
        self.spins = 0
        self.publishers: List[FakePublisher] = []
        self.subscriptions: List[FakeSubscription] = []

    def get_topic_names_and_types(self) -> Dict[str, List[str]]:
        polls = self.middleware.discovery_polls
        index = min(self.middleware.poll_count, len(polls) - 1)
        self.middleware.poll_count += 1
        return dict(polls[index]) if polls else {}

    def spin_once(self, timeout_sec: float = 0.0) -> None:
        self.spins += 1
        incoming = self.middleware.incoming
        if incoming:
            message = incoming.pop(0)
            for sub in self.subscriptions:
                sub.callback(message)

    def create_publisher(self, msg_type, topic, qos) -> PublisherHandle:
        publisher = FakePublisher(self.middleware, topic)
        self.publishers.append(publisher)
        return publisher

    def create_subscription(self, msg_type, topic, callback, qos) -> SubscriptionHandle:
        sub = FakeSubscription(topic, callback)
        self.subscriptions.append(sub)
        return sub

    def destroy(self) -> None:
        self.destroy_count += 1


class FakeMiddleware(Middleware):
    """Records every interaction with the client library."""

    def __init__(self):
        self._registry = TypeRegistry()
        self._registry.primary.register(make_type("std_msgs/msg/String", StringMsg))
        self._registry.primary.register(make_type("std_msgs/msg/Int32", Int32Msg))
        self._registry.secondary.register(
            make_type("rcl_interfaces/srv/ListParameters_Request", ParamsRequest)
        )
        self.calls: List[str] = []
        self.nodes: List[FakeNode] = []
        self.discovery_polls: List[Dict[str, List[str]]] = []
        self.poll_count = 0
        self.incoming: List[Any] = []
        self.published: List[Any] = []
        self.on_publish: Optional[Callable[[int], None]] = None
        self.is_ok = True
        self.fail_on_init: Optional[Exception] = None

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    def init(self, args) -> None:
        self.calls.append("init")
        if self.fail_on_init:
            raise self.fail_on_init

    def shutdown(self) -> None:
        self.calls.append("shutdown")

    def ok(self) -> bool:
        return self.is_ok

    def create_node(self, name: str) -> NodeHandle:
        self.calls.append("create_node")
        node = FakeNode(self, name)
        self.nodes.append(node)
        return node


class RecordingToken(CancellationToken):
    """Cancellation token that records waits instead of sleeping."""

    def __init__(self):
        super().__init__()
        self.waits: List[float] = []

    def wait(self, timeout: float) -> bool:
        self.waits.append(timeout)
        return self.cancelled


@pytest.fixture
def middleware():
    return FakeMiddleware()


@pytest.fixture
def output():
    return []


@pytest.fixture
def token():
    return RecordingToken()


@pytest.fixture
def context(middleware, output, token):
    return CommandContext(
        middleware=middleware,
        config=ToolConfig(),
        emit=output.append,
        token=token,
    )


@pytest.fixture
def make_message(middleware):
    """Build a message of a registered type: make_message("std_msgs/msg/String", data="x")."""
    def _make(identifier, **values):
        return middleware.registry.resolve(identifier, fallback=True).create(values)
    return _make
