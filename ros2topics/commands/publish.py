"""
ros2topics Publish - pub <topic> <type> <json> [rate].

Rate is messages per second. 0 means 1, omitted means 1, and -1 means
"publish once and exit".

Counter token: every occurrence of ``iii`` in the JSON literal is replaced by
the iteration number (1, 2, 3, ...) before the message is rebuilt, so
``'{"data": "hello iii"}'`` publishes "hello 1", "hello 2", ... This is a
plain string replacement on the literal. It also hits ``iii`` inside field
names or unrelated values and has no escape; it is not a template language.
"""

import logging
from typing import Optional, Sequence, Tuple

from ros2topics.commands.context import CommandContext
from ros2topics.core.result import CommandResult
from ros2topics.middleware.base import node_scope
from ros2topics.middleware.codec import MessageCodecError, decode_message, encode_message

logger = logging.getLogger(__name__)

COUNTER_TOKEN = "iii"
DEFAULT_RATE = 1
PUBLISH_ONCE = -1


def parse_rate(value: Optional[str]) -> Tuple[Optional[int], Optional[str]]:
    """
    Parse the optional rate argument.

    Returns:
        (rate, None) on success, (None, error message) otherwise
    """
    if value is None:
        return DEFAULT_RATE, None

    try:
        rate = int(value)
    except ValueError:
        return None, f"rate must be an integer >= -1, got '{value}'"

    if rate == 0:
        return DEFAULT_RATE, None
    if rate < PUBLISH_ONCE:
        return None, f"rate must be an integer >= -1, got '{value}'"

    return rate, None


def substitute_counter(literal: str, count: int) -> str:
    """Replace every counter token in the literal with count."""
    return literal.replace(COUNTER_TOKEN, str(count))


def period_seconds(rate: int) -> float:
    """Sleep between publishes, whole milliseconds like 1000 / rate."""
    return (1000 // rate) / 1000.0


def cmd_pub(argv: Sequence[str], context: CommandContext) -> CommandResult:
    """pub: publish a message built from a JSON literal, repeatedly."""
    if len(argv) < 2:
        return CommandResult.usage("/topic must be specified")
    if len(argv) < 3:
        return CommandResult.usage("topic type must be specified")
    if len(argv) < 4:
        return CommandResult.usage("message must be specified")

    topic, type_name, literal = argv[1], argv[2], argv[3]
    rate, error = parse_rate(argv[4] if len(argv) > 4 else None)
    if error:
        return CommandResult.usage(error)

    msg_type = context.middleware.registry.resolve(type_name)
    if msg_type is None:
        return CommandResult.lookup(f"Message type {type_name} not found !")

    with_counter = COUNTER_TOKEN in literal

    # With the counter token the literal may only parse after substitution
    # ({"data": iii}), so the loop builds the message
    message = None
    if not with_counter:
        try:
            message = decode_message(msg_type, literal)
        except MessageCodecError as e:
            return CommandResult.usage(f"Invalid message literal: {e}")

    logger.info(f"Publishing {type_name} on {topic} at rate {rate}")

    with node_scope(context.middleware, context.config.node_name) as node:
        publisher = node.create_publisher(msg_type, topic, context.config.qos)
        try:
            count = 0
            while context.running:
                if with_counter:
                    count += 1
                    try:
                        message = decode_message(msg_type, substitute_counter(literal, count))
                    except MessageCodecError as e:
                        return CommandResult.usage(f"Invalid message literal: {e}")

                context.emit(f"Publishing: {encode_message(msg_type, message)}")
                publisher.publish(message)

                if rate == PUBLISH_ONCE:
                    break

                if context.token.wait(period_seconds(rate)):
                    break
        finally:
            publisher.destroy()

    return CommandResult.success()
