from __future__ import annotations
from dataclasses import dataclass
from typing import List
import time

FEEDBACK_CATEGORIES = {
    "general": "General Experience",
    "service": "Service Quality",
    "response": "Response Time",
    "interface": "User Interface",
    "suggestion": "Suggestion",
}


class InvalidFeedback(ValueError):
    pass


@dataclass
class ServiceFeedback:
    rating: int
    category: str
    message: str
    timestamp: float


class FeedbackService:
    """Star ratings about the assistant itself, kept in memory."""

    def __init__(self) -> None:
        self.entries: List[ServiceFeedback] = []

    def submit(self, rating: int, category: str = "general", message: str = "") -> ServiceFeedback:
        if not 1 <= rating <= 5:
            raise InvalidFeedback("Please provide a rating")
        if category not in FEEDBACK_CATEGORIES:
            raise InvalidFeedback(f"Unknown feedback category: {category}")
        fb = ServiceFeedback(rating, category, message.strip(), time.time())
        self.entries.append(fb)
        return fb

    @staticmethod
    def thank_you(fb: ServiceFeedback) -> str:
        return f"Thank you for your {fb.rating}-star feedback! We appreciate your input."

    def stats(self) -> dict:
        count = len(self.entries)
        return {
            "count": count,
            "average_rating": round(sum(f.rating for f in self.entries) / count, 2) if count else 0.0,
        }
