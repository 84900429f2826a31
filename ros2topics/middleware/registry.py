"""
ros2topics Type Registry - Resolve type identifiers to message descriptors.

Two tiers, tried in order for echo/hz:
- primary: regular message types (``std_msgs/msg/String``, ``std_msgs/String``)
- secondary: internal types such as the request/response halves of a service
  (``rcl_interfaces/srv/ListParameters_Request``)

Each tier is an explicit identifier -> descriptor mapping. A tier may also
carry a loader that is asked for identifiers not registered up front; the
result is cached in the mapping.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class RegistryTier(Enum):
    """Which registry resolved a type."""
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass
class MessageType:
    """Descriptor for one decodable message type."""
    identifier: str
    message_class: Callable[[], Any]
    populate: Callable[[Any, Dict], None]
    to_dict: Callable[[Any], Dict]
    tier: RegistryTier = RegistryTier.PRIMARY

    def create(self, values: Optional[Dict] = None) -> Any:
        """Instantiate the message and fill it from a dictionary."""
        message = self.message_class()
        if values:
            self.populate(message, values)
        return message


TypeLoader = Callable[[str], Optional[MessageType]]


class TypeTable:
    """One registry tier."""

    def __init__(self, tier: RegistryTier, loader: Optional[TypeLoader] = None):
        self.tier = tier
        self._loader = loader
        self._types: Dict[str, MessageType] = {}

    def register(self, descriptor: MessageType) -> None:
        descriptor.tier = self.tier
        self._types[descriptor.identifier] = descriptor

    def lookup(self, identifier: str) -> Optional[MessageType]:
        if identifier in self._types:
            return self._types[identifier]

        if self._loader is None:
            return None

        descriptor = self._loader(identifier)
        if descriptor is not None:
            self.register(descriptor)
        return descriptor


class TypeRegistry:
    """
    Primary + secondary type tables.

    Usage:
        registry = TypeRegistry()
        registry.primary.register(MessageType("std_msgs/msg/String", ...))
        msg_type = registry.resolve("std_msgs/msg/String", fallback=True)
    """

    def __init__(
        self,
        primary_loader: Optional[TypeLoader] = None,
        secondary_loader: Optional[TypeLoader] = None,
    ):
        self.primary = TypeTable(RegistryTier.PRIMARY, primary_loader)
        self.secondary = TypeTable(RegistryTier.SECONDARY, secondary_loader)

    def resolve(self, identifier: str, fallback: bool = False) -> Optional[MessageType]:
        """
        Resolve a type identifier.

        Args:
            identifier: Type string as given on the command line
            fallback: Also try the secondary registry (echo/hz)

        Returns:
            MessageType descriptor, or None if no tier knows the identifier
        """
        descriptor = self.primary.lookup(identifier)
        if descriptor is None and fallback:
            descriptor = self.secondary.lookup(identifier)

        if descriptor is None:
            logger.info(f"Message type not found: {identifier}")
        else:
            logger.debug(f"Resolved {identifier} from {descriptor.tier.value} registry")

        return descriptor
