"""Notification dispatch for fiscalcontrol."""

from fiscalcontrol.notifications.dispatcher import (
    CallMeBotDispatcher,
    DispatchError,
    Dispatcher,
    LogDispatcher,
    Notification,
    create_dispatcher,
    dispatch_safely,
)

__all__ = [
    "CallMeBotDispatcher",
    "DispatchError",
    "Dispatcher",
    "LogDispatcher",
    "Notification",
    "create_dispatcher",
    "dispatch_safely",
]
