from __future__ import annotations
from enum import Enum


class Intent(str, Enum):
    STATUS = "status"
    HELP = "help"
    UNRECOGNIZED = "unrecognized"


class ResolutionReply(str, Enum):
    AFFIRMATIVE = "affirmative"
    NEGATIVE = "negative"
    AMBIGUOUS = "ambiguous"


AFFIRMATIVE_WORDS = ("yes", "resolved", "fixed", "solved")
NEGATIVE_WORDS = ("no", "not", "still", "problem")


def classify_intent(text: str) -> Intent:
    lt = text.lower()
    # status is checked first: "help with my complaint status" is a status query
    if "status" in lt or ("complaint" in lt and "id" in lt):
        return Intent.STATUS
    if any(w in lt for w in ["help", "menu"]):
        return Intent.HELP
    return Intent.UNRECOGNIZED


def classify_resolution_reply(text: str) -> ResolutionReply:
    """Decide whether a reply confirms or denies that an issue was fixed.

    Matching is by substring, so "unresolved" counts as affirmative because it
    contains "resolved"; affirmative words always win over negative ones.
    """
    lt = text.lower()
    if any(w in lt for w in AFFIRMATIVE_WORDS):
        return ResolutionReply.AFFIRMATIVE
    if any(w in lt for w in NEGATIVE_WORDS):
        return ResolutionReply.NEGATIVE
    return ResolutionReply.AMBIGUOUS
