from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from .complaint import IssueCategory


class ComplaintStep(str, Enum):
    LOCATION = "location"
    DESCRIPTION = "description"


class ResolutionStep(str, Enum):
    CHECK = "check"


@dataclass
class ComplaintSession:
    """Intake of a new complaint. The category is bound when the session starts."""
    category: IssueCategory
    step: ComplaintStep = ComplaintStep.LOCATION
    location: Optional[str] = None
    images: List[str] = field(default_factory=list)


@dataclass
class ResolutionSession:
    """Waiting for the citizen to confirm whether a complaint was really fixed."""
    complaint_id: str
    step: ResolutionStep = ResolutionStep.CHECK


Session = Union[ComplaintSession, ResolutionSession]


class SessionStore:
    """Holds at most one active session; a second one is refused, not swapped in."""

    def __init__(self) -> None:
        self._active: Optional[Session] = None

    @property
    def active(self) -> Optional[Session]:
        return self._active

    @property
    def is_idle(self) -> bool:
        return self._active is None

    def start(self, session: Session) -> bool:
        if self._active is not None:
            return False
        self._active = session
        return True

    def clear(self) -> Optional[Session]:
        ended, self._active = self._active, None
        return ended

    def describe(self) -> dict:
        s = self._active
        if s is None:
            return {"type": None}
        if isinstance(s, ComplaintSession):
            return {
                "type": "complaint",
                "step": s.step.value,
                "category": s.category.value,
                "location": s.location,
                "images": len(s.images),
            }
        return {"type": "resolution", "step": s.step.value, "complaint_id": s.complaint_id}
