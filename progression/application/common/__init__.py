"""
Application common module.

Contains base classes for the application layer:
- Command / Query: message base classes
- Result: Success | Failure returned by the message bus
- EngineError / ErrorCode: failures as seen by callers
- UnitOfWork: transaction port
- Clock: time port
- MessageBus: explicit message routing
"""

from .clock import Clock
from .command import Command
from .errors import EngineError, ErrorCode
from .message_bus import MessageBus, MessageHandler
from .query import Query
from .result import Failure, Result, Success
from .unit_of_work import UnitOfWork

__all__ = [
    "Clock",
    "Command",
    "EngineError",
    "ErrorCode",
    "Failure",
    "MessageBus",
    "MessageHandler",
    "Query",
    "Result",
    "Success",
    "UnitOfWork",
]
