from __future__ import annotations
from datetime import datetime
from typing import Callable, List, Optional
import re

from . import replies
from .complaint import ComplaintRepository, IssueCategory
from .messages import Message, MessageKind, MessageLog, MessageMetadata, Sender
from .session import ComplaintSession, ComplaintStep, ResolutionSession, SessionStore
from nagarassist.utils.intent import Intent, ResolutionReply, classify_intent, classify_resolution_reply

COMPLAINT_ID_RE = re.compile(r"\bNP\d{6}\b", re.IGNORECASE)


class DialogueController:
    """Synchronous state machine behind the chat.

    Each turn appends the user message, then routes the text to the active
    session (resolution check first, then complaint intake) or, when idle, to
    the intent router. Attachments are already-encoded image references.
    """

    def __init__(self, repository: Optional[ComplaintRepository] = None,
                 messages: Optional[MessageLog] = None,
                 sessions: Optional[SessionStore] = None,
                 clock: Callable[[], datetime] = datetime.now) -> None:
        self.repository = repository or ComplaintRepository(clock=clock)
        self.messages = messages or MessageLog(clock=clock)
        self.sessions = sessions or SessionStore()

    def greet(self, name: Optional[str] = None) -> Message:
        return self._bot(replies.welcome(name), MessageKind.WELCOME)

    def handle(self, text: str, attachment: Optional[str] = None) -> List[Message]:
        """Run one full turn and return the bot messages it produced."""
        self.receive(text, attachment)
        return self.respond(text, attachment)

    def receive(self, text: str, attachment: Optional[str] = None) -> Message:
        metadata = MessageMetadata(images=(attachment,)) if attachment else None
        return self.messages.append(text, Sender.USER, metadata=metadata)

    def respond(self, text: str, attachment: Optional[str] = None) -> List[Message]:
        session = self.sessions.active
        if isinstance(session, ResolutionSession):
            return [self._continue_resolution(session, text)]
        if isinstance(session, ComplaintSession):
            return [self._continue_complaint(session, text, attachment)]
        return [self._route(text)]

    # Entry points, driven by quick actions rather than typed text

    def start_complaint_session(self, category: IssueCategory) -> Optional[Message]:
        """Begin intake for ``category``; None when a session is already active."""
        if not self.sessions.start(ComplaintSession(category=category)):
            return None
        return self._bot(
            replies.location_request(category),
            MessageKind.CATEGORY_SELECTION,
            MessageMetadata(category=category),
        )

    def start_resolution_check(self, complaint_id: str) -> Optional[Message]:
        """Ask whether a complaint marked resolved was really fixed.

        None when the complaint is unknown, already has feedback, is not
        resolved, or another session is active.
        """
        complaint = self.repository.get(complaint_id)
        if complaint is None or not complaint.awaiting_confirmation:
            return None
        if not self.sessions.start(ResolutionSession(complaint_id=complaint_id)):
            return None
        return self._bot(
            replies.resolution_check(complaint),
            MessageKind.RESOLUTION_CHECK,
            MessageMetadata(complaint_id=complaint_id),
        )

    def _continue_resolution(self, session: ResolutionSession, text: str) -> Message:
        verdict = classify_resolution_reply(text)
        if verdict == ResolutionReply.AMBIGUOUS:
            return self._bot(
                replies.RESOLUTION_CLARIFICATION,
                MessageKind.CLARIFICATION,
                MessageMetadata(complaint_id=session.complaint_id),
            )

        self.sessions.clear()
        resolved = verdict == ResolutionReply.AFFIRMATIVE
        complaint = self.repository.update_resolution(session.complaint_id, resolved, text)
        if complaint is None:
            return self._bot(replies.GUIDANCE, MessageKind.GUIDANCE)

        meta = MessageMetadata(complaint_id=complaint.id)
        if resolved:
            return self._bot(replies.resolution_confirmed(complaint), MessageKind.RESOLUTION_CONFIRMED, meta)
        return self._bot(replies.resolution_escalated(complaint), MessageKind.RESOLUTION_ESCALATED, meta)

    def _continue_complaint(self, session: ComplaintSession, text: str,
                            attachment: Optional[str]) -> Message:
        if attachment:
            session.images.append(attachment)

        text = text.strip()
        if not text:
            # blank turn: keep the step, ask again
            missing = replies.LOCATION_MISSING if session.step == ComplaintStep.LOCATION else replies.DESCRIPTION_MISSING
            return self._bot(missing, MessageKind.CLARIFICATION, MessageMetadata(category=session.category))

        if session.step == ComplaintStep.LOCATION:
            session.location = text
            session.step = ComplaintStep.DESCRIPTION
            return self._bot(
                replies.description_request(session.category, text),
                MessageKind.COMPLAINT_FORM,
                MessageMetadata(category=session.category, location=text),
            )

        assert session.step == ComplaintStep.DESCRIPTION, f"unknown intake step {session.step!r}"
        assert session.location is not None, "description step reached without a location"
        complaint = self.repository.submit(session.category, session.location, text, session.images)
        self.sessions.clear()
        return self._bot(
            replies.complaint_registered(complaint, session.category),
            MessageKind.COMPLAINT,
            MessageMetadata(
                category=session.category,
                location=complaint.location,
                images=tuple(complaint.images),
                complaint_id=complaint.id,
            ),
        )

    def _route(self, text: str) -> Message:
        intent = classify_intent(text)
        if intent == Intent.STATUS:
            return self._bot(self._status_reply(text), MessageKind.STATUS)
        if intent == Intent.HELP:
            return self._bot(replies.HELP_MENU, MessageKind.MENU)
        return self._bot(replies.GUIDANCE, MessageKind.GUIDANCE)

    def _status_reply(self, text: str) -> str:
        for mentioned in COMPLAINT_ID_RE.findall(text):
            complaint = self.repository.get(mentioned.upper())
            if complaint is not None:
                return replies.single_status(complaint)
        return replies.status_summary(self.repository.list_recent(3))

    def _bot(self, text: str, kind: MessageKind,
             metadata: Optional[MessageMetadata] = None) -> Message:
        return self.messages.append(text, Sender.BOT, kind, metadata)
