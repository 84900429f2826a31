"""
ros2topics - Command-line diagnostics for ROS2 topics

Lists topics, prints topic types, finds topics by type, echoes messages,
measures publishing rate and publishes messages built from JSON literals.
Discovery, transport and serialization are done by rclpy.

Usage:
    ros2topics list
    ros2topics echo /chatter std_msgs/msg/String 10
    ros2topics pub /chatter std_msgs/msg/String '{"data": "hello iii"}' 2
"""

__version__ = "0.1.0"

from ros2topics.commands.dispatcher import COMMANDS, USAGE_TEXT, dispatch
from ros2topics.core.result import CommandResult, ResultStatus

__all__ = [
    "__version__",
    "COMMANDS",
    "USAGE_TEXT",
    "dispatch",
    "CommandResult",
    "ResultStatus",
]
