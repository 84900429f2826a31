"""
ros2topics Core - Configuration, result values and cancellation.
"""

from ros2topics.core.cancellation import CancellationToken
from ros2topics.core.config import QoSSettings, ToolConfig, load_config
from ros2topics.core.result import CommandResult, ResultStatus

__all__ = [
    "CancellationToken",
    "QoSSettings",
    "ToolConfig",
    "load_config",
    "CommandResult",
    "ResultStatus",
]
