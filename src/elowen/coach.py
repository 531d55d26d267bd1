"""
Elowen - Coach chat.

Append-only transcript of user and assistant messages. Each user message
schedules an assistant reply as an asyncio task on the running loop, so
replies land in the same single-threaded event queue as collaborator
responses.
"""

import asyncio
import logging
from datetime import datetime, timezone

from elowen.core.models import ChatMessage

logger = logging.getLogger(__name__)

GREETING = "Hello {name}! I'm your Elowen Skin Coach. How are you feeling about your routine today?"

COACH_REPLIES = [
    "Analyzing your concern. Based on your profile, it's likely a localized barrier "
    "disruption. Try stripping back to just your gentle cleanser and moisturizer for 48 hours.",
    "Noted. Your current hydration levels are trending lower, so consider swapping the AM "
    "serum for a humectant-rich essence.",
]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CoachChat:
    """
    Conversational coach.

    Replies arrive `reply_delay` seconds after each user message, in the
    order the messages were sent.
    """

    def __init__(self, display_name: str = "", reply_delay: float = 1.2):
        self.reply_delay = reply_delay
        self._reply_index = 0
        self._pending: list[asyncio.Task] = []
        self.transcript: list[ChatMessage] = []
        self._greet(display_name)

    def _greet(self, display_name: str) -> None:
        name = display_name or "there"
        self.transcript.append(
            ChatMessage(role="assistant", text=GREETING.format(name=name), sent_at=_now())
        )

    def _next_reply(self) -> str:
        text = COACH_REPLIES[self._reply_index % len(COACH_REPLIES)]
        self._reply_index += 1
        return text

    @property
    def pending(self) -> int:
        """Replies still on their way."""
        return sum(1 for task in self._pending if not task.done())

    def send(self, text: str) -> bool:
        """
        Append a user message and schedule the coach's reply.

        Must be called from a running event loop. Blank messages are ignored.
        """
        text = text.strip()
        if not text:
            return False

        loop = asyncio.get_running_loop()
        self.transcript.append(ChatMessage(role="user", text=text, sent_at=_now()))

        previous = self._pending[-1] if self._pending else None
        task = loop.create_task(
            self._reply_later(self.transcript, self._next_reply(), previous)
        )
        self._pending = [t for t in self._pending if not t.done()] + [task]
        return True

    async def _reply_later(
        self,
        transcript: list[ChatMessage],
        text: str,
        previous: asyncio.Task | None,
    ) -> None:
        await asyncio.sleep(self.reply_delay)
        if previous is not None:
            await previous
        # A reset swaps in a new list; late replies land in the old one
        transcript.append(ChatMessage(role="assistant", text=text, sent_at=_now()))
        logger.debug(f"Coach replied ({len(transcript)} messages)")

    async def drain(self) -> None:
        """Wait for every scheduled reply."""
        while self._pending:
            pending, self._pending = self._pending, []
            await asyncio.gather(*pending)

    def reset(self, display_name: str = "") -> None:
        """Start a fresh transcript."""
        self.transcript = []
        self._reply_index = 0
        self._greet(display_name)
