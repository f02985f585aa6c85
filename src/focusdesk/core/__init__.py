"""FocusDesk Core -- 任务集合引擎与专注计时器"""

from .collection import TaskCollection
from .exceptions import (
    FocusDeskError,
    PersistenceError,
    TaskNotFoundError,
    TaskValidationError,
)
from .notifications import NotificationHub, Notifier
from .ticker import IntervalTicker
from .timer import CountdownTimer, format_clock

__all__ = [
    "TaskCollection",
    "CountdownTimer",
    "IntervalTicker",
    "format_clock",
    "Notifier",
    "NotificationHub",
    "FocusDeskError",
    "TaskValidationError",
    "TaskNotFoundError",
    "PersistenceError",
]
