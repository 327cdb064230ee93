"""Tests for the dialogue controller state machine."""
from datetime import datetime
import re

import pytest

from nagarassist.services.complaint import (
    ComplaintIdGenerator,
    ComplaintRepository,
    ComplaintStatus,
    IssueCategory,
)
from nagarassist.services.dialogue import DialogueController
from nagarassist.services.messages import MessageKind, Sender
from nagarassist.services.session import ComplaintSession, ComplaintStep, ResolutionSession, ResolutionStep

NOW = datetime(2024, 3, 1, 10, 30)
IMG_A = "data:image/png;base64,QQ=="
IMG_B = "data:image/png;base64,Qg=="


@pytest.fixture
def bot():
    repo = ComplaintRepository(id_generator=ComplaintIdGenerator(seed=42), clock=lambda: NOW)
    return DialogueController(repository=repo, clock=lambda: NOW)


def file_complaint(bot, category=IssueCategory.WATER, location="12 MG Road",
                   description="No water since 3 days"):
    bot.start_complaint_session(category)
    bot.handle(location)
    bot.handle(description)
    return bot.repository.last_complaint


def resolved_complaint(bot):
    c = file_complaint(bot)
    bot.repository.update_status(c.id, ComplaintStatus.RESOLVED)
    return c


def test_turn_appends_user_then_bot(bot):
    replies = bot.handle("hello there")
    log = bot.messages.all()
    assert [m.sender for m in log] == [Sender.USER, Sender.BOT]
    assert log[0].text == "hello there"
    assert replies == log[1:]
    assert replies[0].kind == MessageKind.GUIDANCE


def test_greet_posts_welcome(bot):
    msg = bot.greet("Asha")
    assert msg.kind == MessageKind.WELCOME
    assert "Asha" in msg.text


def test_full_intake_creates_one_complaint(bot):
    start = bot.start_complaint_session(IssueCategory.WATER)
    assert start.kind == MessageKind.CATEGORY_SELECTION
    assert start.metadata.category == IssueCategory.WATER

    reply = bot.handle("12 MG Road")[0]
    assert reply.kind == MessageKind.COMPLAINT_FORM
    session = bot.sessions.active
    assert isinstance(session, ComplaintSession)
    assert session.step == ComplaintStep.DESCRIPTION
    assert session.location == "12 MG Road"

    replies = bot.handle("No water since 3 days")
    assert len(bot.repository) == 1
    c = bot.repository.last_complaint
    assert c.status == ComplaintStatus.PENDING
    assert c.category == "Water"
    assert re.fullmatch(r"NP\d{6}", c.id)
    assert c.description == "No water since 3 days"
    assert [m.kind for m in replies] == [MessageKind.COMPLAINT]
    assert replies[0].metadata.complaint_id == c.id
    assert c.id in replies[0].text
    assert bot.sessions.is_idle


def test_after_submission_messages_go_to_router(bot):
    file_complaint(bot)
    reply = bot.handle("Garbage near the park")[0]
    assert reply.kind == MessageKind.GUIDANCE
    assert len(bot.repository) == 1


def test_attachments_from_both_intake_turns_are_kept(bot):
    bot.start_complaint_session(IssueCategory.ROAD)
    bot.handle("Ring Road", IMG_A)
    bot.handle("Deep pothole", IMG_B)
    c = bot.repository.last_complaint
    assert c.images == [IMG_A, IMG_B]
    user_msgs = [m for m in bot.messages.all() if m.sender == Sender.USER]
    assert user_msgs[0].metadata.images == (IMG_A,)


def test_second_session_is_rejected(bot):
    bot.start_complaint_session(IssueCategory.WATER)
    before = len(bot.messages)
    assert bot.start_complaint_session(IssueCategory.ROAD) is None
    assert len(bot.messages) == before
    assert bot.sessions.active.category == IssueCategory.WATER


def test_status_query_with_no_complaints(bot):
    reply = bot.handle("What is my complaint status?")[0]
    assert reply.kind == MessageKind.STATUS
    assert "No complaints found" in reply.text


def test_status_query_lists_last_three(bot):
    for n in range(4):
        file_complaint(bot, location=f"Ward {n}", description=f"Issue {n}")
    reply = bot.handle("status")[0]
    assert "Ward 0" not in reply.text
    for n in (1, 2, 3):
        assert f"Ward {n}" in reply.text


def test_status_query_for_specific_id(bot):
    first = file_complaint(bot, location="Ward 1")
    file_complaint(bot, location="Ward 2")
    reply = bot.handle(f"status of {first.id.lower()}")[0]
    assert "Complaint Details" in reply.text
    assert "Ward 1" in reply.text
    assert "Ward 2" not in reply.text


def test_help_menu(bot):
    reply = bot.handle("need help")[0]
    assert reply.kind == MessageKind.MENU


def test_unrecognized_leaves_state_alone(bot):
    bot.handle("hello there")
    assert bot.sessions.is_idle
    assert len(bot.repository) == 0


def test_resolution_check_requires_resolved_without_feedback(bot):
    c = file_complaint(bot)
    assert bot.start_resolution_check(c.id) is None
    assert bot.start_resolution_check("NP123456") is None
    bot.repository.update_status(c.id, ComplaintStatus.RESOLVED)
    msg = bot.start_resolution_check(c.id)
    assert msg.kind == MessageKind.RESOLUTION_CHECK
    assert msg.metadata.complaint_id == c.id
    assert bot.sessions.active.step == ResolutionStep.CHECK
    assert isinstance(bot.sessions.active, ResolutionSession)


def test_resolution_check_rejected_during_intake(bot):
    c = resolved_complaint(bot)
    bot.start_complaint_session(IssueCategory.OTHER)
    assert bot.start_resolution_check(c.id) is None
    assert isinstance(bot.sessions.active, ComplaintSession)


@pytest.mark.parametrize("answer", ["Yes", "it is FIXED now", "solved, thanks"])
def test_affirmative_answer_resolves(bot, answer):
    c = resolved_complaint(bot)
    bot.start_resolution_check(c.id)
    reply = bot.handle(answer)[0]
    assert reply.kind == MessageKind.RESOLUTION_CONFIRMED
    assert c.status == ComplaintStatus.RESOLVED
    assert c.resolution_feedback.is_resolved is True
    assert c.resolution_feedback.user_message == answer
    assert bot.sessions.is_idle


@pytest.mark.parametrize("answer", ["No", "still leaking", "there is a problem"])
def test_negative_answer_escalates(bot, answer):
    c = resolved_complaint(bot)
    newer = file_complaint(bot, location="Other place")
    assert bot.repository.last_complaint is newer
    bot.start_resolution_check(c.id)
    reply = bot.handle(answer)[0]
    assert reply.kind == MessageKind.RESOLUTION_ESCALATED
    assert c.status == ComplaintStatus.UNRESOLVED
    assert c.resolution_feedback.is_resolved is False
    assert bot.repository.last_complaint is c
    assert bot.sessions.is_idle


def test_ambiguous_answer_keeps_session(bot):
    c = resolved_complaint(bot)
    bot.start_resolution_check(c.id)
    for _ in range(2):
        reply = bot.handle("maybe")[0]
        assert reply.kind == MessageKind.CLARIFICATION
        assert isinstance(bot.sessions.active, ResolutionSession)
        assert c.resolution_feedback is None
    bot.handle("yes")
    assert c.status == ComplaintStatus.RESOLVED


@pytest.mark.parametrize("blank", ["   ", "  \n "])
def test_blank_intake_turns_reprompt_without_advancing(bot, blank):
    bot.start_complaint_session(IssueCategory.WATER)

    reply = bot.handle(blank)[0]
    assert reply.kind == MessageKind.CLARIFICATION
    assert bot.sessions.active.step == ComplaintStep.LOCATION
    assert bot.sessions.active.location is None

    bot.handle("  12 MG Road  ")
    assert bot.sessions.active.location == "12 MG Road"

    reply = bot.handle(blank)[0]
    assert reply.kind == MessageKind.CLARIFICATION
    assert bot.sessions.active.step == ComplaintStep.DESCRIPTION
    assert len(bot.repository) == 0

    bot.handle("No water since 3 days")
    c = bot.repository.last_complaint
    assert (c.location, c.description) == ("12 MG Road", "No water since 3 days")


def test_photo_without_text_is_kept_for_the_complaint(bot):
    bot.start_complaint_session(IssueCategory.ROAD)
    bot.handle("Ring Road")
    reply = bot.handle("", IMG_A)[0]
    assert reply.kind == MessageKind.CLARIFICATION
    assert bot.sessions.active.images == [IMG_A]
    bot.handle("Deep pothole")
    assert bot.repository.last_complaint.images == [IMG_A]


def test_session_with_impossible_step_fails_loudly(bot):
    bot.start_complaint_session(IssueCategory.WATER)
    bot.sessions.active.step = ComplaintStep.DESCRIPTION
    with pytest.raises(AssertionError):
        bot.handle("a description without a location")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
