"""
ros2topics Monitor - echo and hz.

Both subscribe to a topic and spin the node a bounded number of times; echo
prints every message as JSON, hz prints an approximate frequency about once a
second.
"""

import logging
import sys
from typing import Callable, Optional, Sequence

from ros2topics.commands.context import CommandContext
from ros2topics.core.result import CommandResult
from ros2topics.middleware.base import node_scope
from ros2topics.middleware.codec import encode_message

logger = logging.getLogger(__name__)

NS_PER_SEC = 1_000_000_000
UNBOUNDED = sys.maxsize


class RateEstimator:
    """
    Inter-arrival frequency, reported at most about once per second.

    On every arrival: if more than a second has passed since the window
    start, report 1e9 / (now - previous arrival) and restart the window.
    The previous arrival is updated after the check.
    """

    def __init__(self, start_ns: int):
        self.window_start_ns = start_ns
        self.last_arrival_ns = start_ns

    def observe(self, now_ns: int) -> Optional[float]:
        frequency = None

        if now_ns - self.window_start_ns > NS_PER_SEC:
            interval = now_ns - self.last_arrival_ns
            if interval > 0:
                frequency = NS_PER_SEC / interval
            self.window_start_ns = now_ns

        self.last_arrival_ns = now_ns
        return frequency


def format_frequency(frequency: float) -> str:
    return f"Freq : {frequency:f} hz"


def _rate_callback(context: CommandContext) -> Callable:
    estimator = RateEstimator(context.clock_ns())

    def on_message(message) -> None:
        frequency = estimator.observe(context.clock_ns())
        if frequency is not None:
            context.emit(format_frequency(frequency))

    return on_message


def _echo_callback(context: CommandContext, msg_type) -> Callable:
    def on_message(message) -> None:
        context.emit(encode_message(msg_type, message))

    return on_message


def run_monitor(argv: Sequence[str], context: CommandContext, rate: bool) -> CommandResult:
    """
    Shared echo/hz loop.

    Args:
        argv: [command, topic, type, [max_count]]
        context: Command context
        rate: True for hz, False for echo
    """
    if len(argv) < 2:
        return CommandResult.usage("/topic must be specified")
    if len(argv) < 3:
        return CommandResult.usage("topic type must be specified")

    topic, type_name = argv[1], argv[2]

    max_count = UNBOUNDED
    if len(argv) > 3:
        try:
            max_count = int(argv[3])
        except ValueError:
            return CommandResult.usage(f"max count must be an integer, got '{argv[3]}'")

    msg_type = context.middleware.registry.resolve(type_name, fallback=True)
    if msg_type is None:
        return CommandResult.lookup(f"Message type {type_name} not found !")

    callback = _rate_callback(context) if rate else _echo_callback(context, msg_type)

    with node_scope(context.middleware, context.config.node_name) as node:
        subscription = node.create_subscription(msg_type, topic, callback, context.config.qos)
        logger.info(f"Subscribed to {topic} ({msg_type.identifier}), max {max_count} ticks")
        try:
            ticks = 0
            while ticks < max_count and context.running:
                node.spin_once(context.config.spin_timeout_sec)
                ticks += 1
        finally:
            subscription.destroy()

    return CommandResult.success()


def cmd_echo(argv: Sequence[str], context: CommandContext) -> CommandResult:
    """echo <topic> <type> [max_count]: print messages as JSON."""
    return run_monitor(argv, context, rate=False)


def cmd_hz(argv: Sequence[str], context: CommandContext) -> CommandResult:
    """hz <topic> <type> [max_count]: print the publishing rate."""
    return run_monitor(argv, context, rate=True)
