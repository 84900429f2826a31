"""
ros2topics Middleware - Client library handles, type registry and JSON codec

Provides:
- Middleware / NodeHandle: lifecycle and discovery handles
- TypeRegistry: primary + secondary type identifier lookup
- decode_message / encode_message: JSON literal <-> message
- RclpyMiddleware (ros2topics.middleware.rclpy_backend): the rclpy implementation
"""

from ros2topics.middleware.registry import (
    MessageType,
    RegistryTier,
    TypeRegistry,
    TypeTable,
)

from ros2topics.middleware.base import (
    Middleware,
    NodeHandle,
    PublisherHandle,
    SubscriptionHandle,
    discover_topics,
    middleware_session,
    node_scope,
)

from ros2topics.middleware.codec import (
    MessageCodecError,
    decode_message,
    encode_message,
)

__all__ = [
    # Registry
    "MessageType",
    "RegistryTier",
    "TypeRegistry",
    "TypeTable",
    # Handles
    "Middleware",
    "NodeHandle",
    "PublisherHandle",
    "SubscriptionHandle",
    "discover_topics",
    "middleware_session",
    "node_scope",
    # Codec
    "MessageCodecError",
    "decode_message",
    "encode_message",
]
