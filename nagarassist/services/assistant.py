from __future__ import annotations
from typing import Awaitable, Callable, List, Optional
import asyncio

from .complaint import IssueCategory
from .dialogue import DialogueController
from .messages import Message


class TurnInProgress(Exception):
    pass


class ChatAssistant:
    """Async front of the dialogue controller.

    Adds the "typing" pause before each bot reply and refuses a new turn while
    one is still pending. The pause is never cancelled once started.
    """

    def __init__(self, controller: Optional[DialogueController] = None,
                 reply_delay: float = 1.5, quick_action_delay: float = 1.0,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> None:
        self.controller = controller or DialogueController()
        self.reply_delay = reply_delay
        self.quick_action_delay = quick_action_delay
        self._sleep = sleep
        self.is_typing = False

    def _begin_turn(self) -> None:
        if self.is_typing:
            raise TurnInProgress("A reply is still being prepared")
        self.is_typing = True

    async def send(self, text: str, attachment: Optional[str] = None) -> List[Message]:
        self._begin_turn()
        try:
            self.controller.receive(text, attachment)
            await self._sleep(self.reply_delay)
            return self.controller.respond(text, attachment)
        finally:
            self.is_typing = False

    async def select_category(self, category: IssueCategory) -> Optional[Message]:
        self._begin_turn()
        try:
            await self._sleep(self.quick_action_delay)
            return self.controller.start_complaint_session(category)
        finally:
            self.is_typing = False

    async def check_resolution(self, complaint_id: str) -> Optional[Message]:
        self._begin_turn()
        try:
            await self._sleep(self.quick_action_delay)
            return self.controller.start_resolution_check(complaint_id)
        finally:
            self.is_typing = False
