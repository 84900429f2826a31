"""
ros2topics Command Context - Everything a sub-command handler needs.
"""

import time
from dataclasses import dataclass, field
from typing import Callable

from ros2topics.core.cancellation import CancellationToken
from ros2topics.core.config import ToolConfig
from ros2topics.middleware.base import Middleware


@dataclass
class CommandContext:
    """Per-invocation state handed to each handler. Nothing here outlives one command."""
    middleware: Middleware
    config: ToolConfig = field(default_factory=ToolConfig)
    emit: Callable[[str], None] = print
    token: CancellationToken = field(default_factory=CancellationToken)
    clock_ns: Callable[[], int] = time.monotonic_ns

    @property
    def running(self) -> bool:
        """The cooperative keep-running check polled by the loops."""
        return not self.token.cancelled and self.middleware.ok()
