"""
ros2topics Commands - Sub-command handlers and the dispatcher.
"""

from ros2topics.commands.context import CommandContext
from ros2topics.commands.dispatcher import COMMANDS, USAGE_TEXT, dispatch

__all__ = [
    "CommandContext",
    "COMMANDS",
    "USAGE_TEXT",
    "dispatch",
]
