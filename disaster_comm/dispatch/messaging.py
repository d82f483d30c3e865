"""
Messaging front end: recipient routing, SOS helper and message log.
"""

from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Callable, List, Optional, Tuple
import logging

from .dispatcher import Dispatcher, DispatchResult

logger = logging.getLogger(__name__)


RECIPIENTS = (
    "Visible",  # What the current role sees
    "All",
    "Hospitals",
    "Police",
    "Rescuers",
    "Survivors",
    "Nearest Rescuer",
    "Nearest Hospital",
)

SOS_TEXT = "SOS! Immediate help required!"


@dataclass
class LogEntry:
    """One line of the message log."""
    timestamp: time
    text: str

    def __str__(self) -> str:
        return f"[{self.timestamp.isoformat()}] {self.text}"


@dataclass
class MessageLog:
    """Append-only, timestamped log shown to the operator."""
    entries: List[LogEntry] = field(default_factory=list)
    clock: Callable[[], datetime] = datetime.now

    def append(self, text: str) -> LogEntry:
        entry = LogEntry(self.clock().time().replace(microsecond=0), text)
        self.entries.append(entry)
        return entry

    def lines(self) -> List[str]:
        return [str(e) for e in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


class MessageCenter:
    """Sends operator messages through a Dispatcher and logs the outcome."""

    def __init__(self, dispatcher: Dispatcher, log: Optional[MessageLog] = None):
        self.dispatcher = dispatcher
        self.log = log if log is not None else MessageLog()

    @property
    def role(self) -> str:
        return self.dispatcher.session.active_role

    def send(self, recipient: str, text: str) -> int:
        """
        Send a message to a recipient group.

        Unknown recipients fall back to "All". Returns the delivered count.
        """
        message = (text or "").strip()
        if not message:
            self.log.append("[UI] Type a message to send.")
            return 0

        payload = f"{self.role}: {message}"
        delivered = self._route(recipient, payload)
        self.log.append(f'Sent → [{recipient}] "{message}" (delivered to {delivered} target(s))')
        return delivered

    def _route(self, recipient: str, payload: str) -> int:
        if recipient == "Visible":
            return self.dispatcher.broadcast_visible(payload)
        if recipient.startswith("Nearest "):
            result = self.dispatcher.find_nearest_and_highlight(
                recipient[len("Nearest "):], draw_route=True, also_notify=True)
            return self._delivered(result)
        if recipient in RECIPIENTS:
            return self.dispatcher.broadcast_to_type(recipient, payload)
        logger.warning("Unknown recipient %r, sending to All", recipient)
        return self.dispatcher.broadcast_to_type("All", payload)

    def _delivered(self, result: DispatchResult) -> int:
        if not result.ok:
            self.log.append(f"[UI] {result.message}")
        return result.delivered

    def simulate_sos(self) -> Tuple[int, int]:
        """
        Survivor SOS: notify the nearest Rescuer and alert every Hospital.

        Returns:
            (rescuers notified, hospitals reached)
        """
        rescuer = self.dispatcher.find_nearest_and_highlight(
            "Rescuer", draw_route=True, also_notify=True)
        notified = self._delivered(rescuer)
        hospitals = self.dispatcher.broadcast_to_type("Hospital", f"Survivor: {SOS_TEXT}")
        self.log.append(f"SOS simulated → Nearest Rescuer notified: {notified} | "
                        f"Hospitals broadcast: {hospitals}")
        return notified, hospitals

    def nearest_by_role(self) -> DispatchResult:
        """Nearest counterpart for the active role, logged."""
        result = self.dispatcher.find_nearest_by_role(draw_route=True)
        self.log.append(result.message)
        return result

    def nearest_of(self, entity_type: str) -> DispatchResult:
        """Nearest entity of one type, logged."""
        result = self.dispatcher.find_nearest_and_highlight(entity_type, draw_route=True)
        self.log.append(result.message)
        return result
