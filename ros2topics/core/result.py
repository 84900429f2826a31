"""
ros2topics Results - Outcome of a sub-command.

Handlers never raise for bad input. They return a CommandResult and the
dispatcher prints its message and carries on.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ResultStatus(Enum):
    """How a sub-command ended."""
    OK = "ok"
    USAGE = "usage"      # missing or malformed arguments
    LOOKUP = "lookup"    # unknown topic or unresolvable type
    FAULT = "fault"      # unexpected exception caught by the dispatcher


@dataclass
class CommandResult:
    """Result value returned by every sub-command handler."""
    status: ResultStatus = ResultStatus.OK
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.OK

    @classmethod
    def success(cls, message: Optional[str] = None) -> "CommandResult":
        return cls(ResultStatus.OK, message)

    @classmethod
    def usage(cls, message: str) -> "CommandResult":
        return cls(ResultStatus.USAGE, message)

    @classmethod
    def lookup(cls, message: str) -> "CommandResult":
        return cls(ResultStatus.LOOKUP, message)

    @classmethod
    def fault(cls, message: str) -> "CommandResult":
        return cls(ResultStatus.FAULT, message)
