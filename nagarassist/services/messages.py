from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional
import itertools

from .complaint import IssueCategory


class Sender(str, Enum):
    USER = "user"
    BOT = "bot"


class MessageKind(str, Enum):
    WELCOME = "welcome"
    MENU = "menu"
    COMPLAINT = "complaint"
    STATUS = "status"
    CATEGORY_SELECTION = "category-selection"
    COMPLAINT_FORM = "complaint-form"
    RESOLUTION_CHECK = "resolution-check"
    RESOLUTION_CONFIRMED = "resolution-confirmed"
    RESOLUTION_ESCALATED = "resolution-escalated"
    CLARIFICATION = "clarification"
    GUIDANCE = "guidance"


@dataclass(frozen=True)
class MessageMetadata:
    category: Optional[IssueCategory] = None
    location: Optional[str] = None
    images: tuple = ()
    complaint_id: Optional[str] = None


@dataclass(frozen=True)
class Message:
    id: str
    text: str
    sender: Sender
    timestamp: datetime
    kind: Optional[MessageKind] = None
    metadata: Optional[MessageMetadata] = None


class MessageLog:
    """Append-only, ordered record of the conversation."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._messages: List[Message] = []
        self._ids = itertools.count(1)
        self._clock = clock

    def __len__(self) -> int:
        return len(self._messages)

    def append(self, text: str, sender: Sender, kind: Optional[MessageKind] = None,
               metadata: Optional[MessageMetadata] = None) -> Message:
        msg = Message(
            id=str(next(self._ids)),
            text=text,
            sender=sender,
            timestamp=self._clock(),
            kind=kind,
            metadata=metadata,
        )
        self._messages.append(msg)
        return msg

    def all(self) -> List[Message]:
        return list(self._messages)

    def since(self, message_id: Optional[str]) -> List[Message]:
        """Messages appended after ``message_id`` (everything when None)."""
        if message_id is None:
            return self.all()
        for i, m in enumerate(self._messages):
            if m.id == message_id:
                return self._messages[i + 1:]
        return self.all()
