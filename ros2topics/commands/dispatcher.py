"""
ros2topics Dispatcher - Route the first argument to a sub-command.

Unknown or missing commands print the usage text and never touch the
middleware. Known commands run inside a middleware session; any exception
from initialisation or the handler is reported here and the process carries
on to a normal exit.
"""

import logging
import traceback
from dataclasses import dataclass
from typing import Callable, Dict, Sequence

from ros2topics.commands.context import CommandContext
from ros2topics.commands.discovery import cmd_find, cmd_list, cmd_type
from ros2topics.commands.monitor import cmd_echo, cmd_hz
from ros2topics.commands.publish import cmd_pub
from ros2topics.core.result import CommandResult
from ros2topics.middleware.base import middleware_session

logger = logging.getLogger(__name__)

PROG_NAME = "ros2topics"

USAGE_TEXT = (
    f"{PROG_NAME} is a command-line tool for printing information about ROS Topics.\n"
    "Commands:\n"
    f"\t{PROG_NAME} echo\tprint messages to screen\n"
    f"\t{PROG_NAME} find\tfind topics by type\n"
    f"\t{PROG_NAME} hz\tdisplay publishing rate of topic\n"
    f"\t{PROG_NAME} list\tlist active topics\n"
    f"\t{PROG_NAME} pub\tpublish data to topic\n"
    f"\t{PROG_NAME} type\tprint topic type\n"
    f"Type {PROG_NAME} <command> -h for more detailed usage, e.g. '{PROG_NAME} echo -h'"
)

NOT_IMPLEMENTED = "Not implemented..."

HELP_FLAGS = ("-h", "--help")

Handler = Callable[[Sequence[str], CommandContext], CommandResult]


def cmd_not_implemented(argv: Sequence[str], context: CommandContext) -> CommandResult:
    context.emit(NOT_IMPLEMENTED)
    return CommandResult.success()


@dataclass
class Command:
    """A sub-command entry."""
    name: str
    handler: Handler
    usage: str
    uses_middleware: bool = True


COMMANDS: Dict[str, Command] = {
    command.name: command
    for command in [
        Command("echo", cmd_echo, "echo <topic> <type> [max_count]"),
        Command("hz", cmd_hz, "hz <topic> <type> [max_count]"),
        Command("type", cmd_type, "type <topic>"),
        Command("list", cmd_list, "list"),
        Command("info", cmd_not_implemented, "info", uses_middleware=False),
        Command("pub", cmd_pub, "pub <topic> <type> <json> [rate]  (rate -1: publish once)"),
        Command("bw", cmd_not_implemented, "bw", uses_middleware=False),
        Command("find", cmd_find, "find <type>"),
        Command("delay", cmd_not_implemented, "delay", uses_middleware=False),
    ]
}


def _report(result: CommandResult, context: CommandContext) -> CommandResult:
    if result.message and not result.ok:
        context.emit(result.message)
    return result


def dispatch(argv: Sequence[str], context: CommandContext) -> CommandResult:
    """
    Run one sub-command.

    Args:
        argv: Full argument vector, argv[0] is the command keyword
        context: Command context (middleware, config, output, cancellation)

    Returns:
        The handler's CommandResult; FAULT if it raised
    """
    argv = list(argv)

    command = COMMANDS.get(argv[0]) if argv else None
    if command is None:
        if argv:
            logger.debug(f"Unknown command '{argv[0]}'")
        context.emit(USAGE_TEXT)
        return CommandResult.success()

    if len(argv) > 1 and argv[1] in HELP_FLAGS:
        context.emit(f"usage: {PROG_NAME} {command.usage}")
        return CommandResult.success()

    if not command.uses_middleware:
        return _report(command.handler(argv, context), context)

    try:
        with middleware_session(context.middleware, argv):
            result = command.handler(argv, context)
    except Exception as e:
        logger.exception(f"Command '{command.name}' failed")
        context.emit(f"ERROR : {e}")
        context.emit(traceback.format_exc().rstrip())
        return CommandResult.fault(str(e))

    return _report(result, context)
