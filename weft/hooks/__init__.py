"""Hook gate — policy handlers consulted before and after side effects."""

from .handlers import BashConfirmHandler, ToolConfirmHandler
from .hook import Feedback, HookData, HookHandler, HookPoint
from .manager import HookManager

__all__ = [
    "HookPoint", "HookData", "Feedback", "HookHandler", "HookManager",
    "BashConfirmHandler", "ToolConfirmHandler",
]
