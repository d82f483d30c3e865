"""
Dispatch package: session state, queries, broadcasts and messaging.
"""

from .session import Session, SessionBusyError, entity_from_record
from .dispatcher import (
    Dispatcher, DispatchResult, QueryStatus, Notifier, RouteCallback, format_km
)
from .messaging import MessageCenter, MessageLog, LogEntry, RECIPIENTS

__all__ = [
    'Session', 'SessionBusyError', 'entity_from_record',
    'Dispatcher', 'DispatchResult', 'QueryStatus', 'Notifier', 'RouteCallback',
    'format_km',
    'MessageCenter', 'MessageLog', 'LogEntry', 'RECIPIENTS'
]
