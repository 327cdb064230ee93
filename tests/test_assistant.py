"""Tests for the async chat facade (typing delay and turn serialization)."""
import asyncio

import pytest

from nagarassist.services.assistant import ChatAssistant, TurnInProgress
from nagarassist.services.complaint import ComplaintStatus, IssueCategory
from nagarassist.services.messages import MessageKind, Sender


def test_user_message_visible_before_reply():
    seen = []

    async def scenario():
        assistant = ChatAssistant(reply_delay=0.05)

        async def watch():
            await asyncio.sleep(0.01)
            seen.extend(m.sender for m in assistant.controller.messages.all())

        replies, _ = await asyncio.gather(assistant.send("need help"), watch())
        return assistant, replies

    assistant, replies = asyncio.run(scenario())
    assert seen == [Sender.USER]
    assert [m.kind for m in replies] == [MessageKind.MENU]
    assert [m.sender for m in assistant.controller.messages.all()] == [Sender.USER, Sender.BOT]


def test_overlapping_send_is_rejected():
    async def scenario():
        assistant = ChatAssistant(reply_delay=0.05)
        first = asyncio.ensure_future(assistant.send("status"))
        await asyncio.sleep(0)
        assert assistant.is_typing
        with pytest.raises(TurnInProgress):
            await assistant.send("help")
        await first
        return assistant

    assistant = asyncio.run(scenario())
    texts = [m.text for m in assistant.controller.messages.all() if m.sender == Sender.USER]
    assert texts == ["status"]
    assert not assistant.is_typing


def test_pauses_use_configured_delays():
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    async def scenario():
        assistant = ChatAssistant(reply_delay=1.5, quick_action_delay=1.0, sleep=fake_sleep)
        await assistant.select_category(IssueCategory.SANITATION)
        await assistant.send("Near the bus stand")
        await assistant.send("Bins not emptied for a week")
        return assistant

    assistant = asyncio.run(scenario())
    assert delays == [1.0, 1.5, 1.5]
    assert len(assistant.controller.repository) == 1


def test_resolution_check_through_facade():
    async def no_sleep(seconds):
        return None

    async def scenario():
        assistant = ChatAssistant(sleep=no_sleep)
        await assistant.select_category(IssueCategory.WATER)
        await assistant.send("12 MG Road")
        await assistant.send("No water since 3 days")
        c = assistant.controller.repository.last_complaint
        assistant.controller.repository.update_status(c.id, ComplaintStatus.RESOLVED)
        started = await assistant.check_resolution(c.id)
        replies = await assistant.send("yes, water is back")
        return c, started, replies

    c, started, replies = asyncio.run(scenario())
    assert started.kind == MessageKind.RESOLUTION_CHECK
    assert replies[0].kind == MessageKind.RESOLUTION_CONFIRMED
    assert c.resolution_feedback.is_resolved is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
