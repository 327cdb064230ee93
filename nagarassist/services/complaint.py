from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional
import time


class IssueCategory(str, Enum):
    SANITATION = "sanitation"
    ROAD = "road"
    WATER = "water"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def emoji(self) -> str:
        return CATEGORY_INFO[self]["emoji"]


CATEGORY_INFO: Dict[IssueCategory, Dict[str, str]] = {
    IssueCategory.SANITATION: {
        "emoji": "🧹",
        "name": "Sanitation Issue",
        "examples": "garbage collection, waste management, cleanliness",
    },
    IssueCategory.ROAD: {
        "emoji": "🛣️",
        "name": "Road Issue",
        "examples": "potholes, street damage, traffic signals",
    },
    IssueCategory.WATER: {
        "emoji": "💧",
        "name": "Water Supply Issue",
        "examples": "water shortage, pipe leaks, quality issues",
    },
    IssueCategory.OTHER: {
        "emoji": "📝",
        "name": "Other Municipal Issue",
        "examples": "street lights, parks, general complaints",
    },
}


class ComplaintStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


@dataclass
class ResolutionFeedback:
    is_resolved: bool
    feedback_date: datetime
    user_message: Optional[str] = None


@dataclass
class Complaint:
    id: str
    category: str
    description: str
    location: str
    images: List[str]
    status: ComplaintStatus
    timestamp: datetime
    resolution_feedback: Optional[ResolutionFeedback] = None

    @property
    def awaiting_confirmation(self) -> bool:
        """Marked resolved by the municipality but not yet confirmed by the citizen."""
        return self.status == ComplaintStatus.RESOLVED and self.resolution_feedback is None


class ComplaintIdGenerator:
    """Yields ``NP`` + 6 digits, seeded from the clock and advancing by one.

    Ids only repeat after a million complaints in the same repository.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        if seed is None:
            seed = int(str(time.time_ns() // 1_000_000)[-6:])
        self._next = seed % 1_000_000

    def __call__(self) -> str:
        value = self._next
        self._next = (self._next + 1) % 1_000_000
        return f"NP{value:06d}"


class ComplaintRepository:
    """In-memory complaint store. Records are never deleted."""

    def __init__(self, id_generator: Optional[Callable[[], str]] = None,
                 clock: Callable[[], datetime] = datetime.now) -> None:
        self._complaints: List[Complaint] = []
        self._by_id: Dict[str, Complaint] = {}
        self._next_id = id_generator or ComplaintIdGenerator()
        self._clock = clock
        self.last_complaint: Optional[Complaint] = None

    def __len__(self) -> int:
        return len(self._complaints)

    def submit(self, category: IssueCategory, location: str, description: str,
               images: Optional[List[str]] = None) -> Complaint:
        c = Complaint(
            id=self._next_id(),
            category=category.display_name,
            description=description,
            location=location,
            images=list(images or []),
            status=ComplaintStatus.PENDING,
            timestamp=self._clock(),
        )
        self._complaints.append(c)
        self._by_id[c.id] = c
        self.last_complaint = c
        return c

    def get(self, complaint_id: str) -> Optional[Complaint]:
        return self._by_id.get(complaint_id)

    def list_all(self) -> List[Complaint]:
        return list(self._complaints)

    def list_recent(self, limit: int = 3) -> List[Complaint]:
        if limit <= 0:
            return []
        return self._complaints[-limit:]

    def update_resolution(self, complaint_id: str, is_resolved: bool,
                          user_message: Optional[str] = None) -> Optional[Complaint]:
        """Record the citizen's verdict. Unknown ids are ignored."""
        c = self._by_id.get(complaint_id)
        if c is None:
            return None
        c.status = ComplaintStatus.RESOLVED if is_resolved else ComplaintStatus.UNRESOLVED
        c.resolution_feedback = ResolutionFeedback(
            is_resolved=is_resolved,
            feedback_date=self._clock(),
            user_message=user_message,
        )
        if not is_resolved:
            self.last_complaint = c
        return c

    def update_status(self, complaint_id: str, status: ComplaintStatus) -> Optional[Complaint]:
        """Municipal-side status change; re-opening drops earlier feedback.

        ``unresolved`` is only reachable through citizen feedback.
        """
        if status == ComplaintStatus.UNRESOLVED:
            raise ValueError("unresolved is set only by resolution feedback")
        c = self._by_id.get(complaint_id)
        if c is None:
            return None
        c.status = status
        c.resolution_feedback = None
        return c

    def stats(self) -> dict:
        counts = {s.value: 0 for s in ComplaintStatus}
        for c in self._complaints:
            counts[c.status.value] += 1
        return {
            "count": len(self._complaints),
            "by_status": counts,
            "latest_ids": [c.id for c in self.list_recent(5)],
        }
