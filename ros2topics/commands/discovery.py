"""
ros2topics Discovery - list, type and find.

All three work on a merged discovery snapshot (see discover_topics). Service
request/reply pairs show up as topics ending in "Request"/"Reply"; list hides
them.
"""

import logging
from typing import Dict, Iterable, List, Sequence

from ros2topics.commands.context import CommandContext
from ros2topics.core.result import CommandResult
from ros2topics.middleware.base import discover_topics, node_scope

logger = logging.getLogger(__name__)

SERVICE_TOPIC_SUFFIXES = ("Reply", "Request")


def is_service_topic(name: str) -> bool:
    return name.endswith(SERVICE_TOPIC_SUFFIXES)


def visible_topics(topics: Dict[str, List[str]]) -> List[str]:
    """Topic names for `list`: lexical order, service pairs removed."""
    return [name for name in sorted(topics) if not is_service_topic(name)]


def topics_with_type(topics: Dict[str, List[str]], type_name: str) -> List[str]:
    """Topic names whose type list contains type_name exactly."""
    return [name for name in sorted(topics) if type_name in topics[name]]


def format_types(types: Iterable[str]) -> str:
    return f"[{', '.join(types)}]"


def _snapshot(context: CommandContext) -> Dict[str, List[str]]:
    with node_scope(context.middleware, context.config.node_name) as node:
        topics = discover_topics(node, context.config.discovery_timeout_sec)

    logger.debug(f"Discovered {len(topics)} topics")
    return topics


def cmd_list(argv: Sequence[str], context: CommandContext) -> CommandResult:
    """list: print every active topic name."""
    topics = _snapshot(context)

    if not topics:
        context.emit("Empty topics !")
        return CommandResult.success()

    for name in visible_topics(topics):
        context.emit(name)

    return CommandResult.success()


def cmd_type(argv: Sequence[str], context: CommandContext) -> CommandResult:
    """type <topic>: print the type list of one topic."""
    if len(argv) < 2:
        return CommandResult.usage("Need to add topic name.")
    if len(argv) > 2:
        return CommandResult.usage("You may only specify one input topic.")

    topic = argv[1]
    topics = _snapshot(context)

    if not topics:
        return CommandResult.lookup("No Topics available !")
    if topic not in topics:
        return CommandResult.lookup(f"No Topic {topic} available !")

    context.emit(format_types(topics[topic]))
    return CommandResult.success()


def cmd_find(argv: Sequence[str], context: CommandContext) -> CommandResult:
    """find <type>: print topics carrying exactly that type."""
    if len(argv) < 2:
        return CommandResult.usage("topic type must be specified")

    for name in topics_with_type(_snapshot(context), argv[1]):
        context.emit(name)

    return CommandResult.success()
