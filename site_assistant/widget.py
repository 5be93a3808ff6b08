"""
Chat widget controller.

Mirrors the behaviour of the browser widget served with the site: an
open/closed panel, a transcript of user and bot entries, and a canned
fallback whenever the proxy cannot produce a reply. It also backs the
``site-assistant-chat`` terminal client.

Usage:
    widget = ChatWidget("http://localhost:3000/api/chat")
    widget.open()
    entry = await widget.submit("What services do you offer?")
    print(entry.text)
"""

import argparse
import asyncio
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import httpx

from site_assistant.config.prompts import FALLBACK_REPLIES, THINKING_PLACEHOLDER
from site_assistant.logging import get_logger

logger = get_logger("widget")

DEFAULT_ENDPOINT = "http://localhost:3000/api/chat"


class WidgetState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


@dataclass
class TranscriptEntry:
    """One line of the transcript. ``new`` is set while the entrance animation plays."""
    role: str  # "user" | "bot"
    text: str
    new: bool = True

    def settle(self) -> None:
        """Entrance animation finished."""
        self.new = False


@dataclass
class ChatWidget:
    """
    Drives the chat panel and its request/response cycle.

    Args:
        endpoint: URL of the chat proxy.
        transport: Optional httpx transport (used to stub the network in tests).
        rng: Random source for picking fallback replies.
        timeout: Client-side request timeout in seconds.
    """

    endpoint: str = DEFAULT_ENDPOINT
    transport: Optional[httpx.AsyncBaseTransport] = None
    rng: random.Random = field(default_factory=random.Random)
    timeout: float = 30.0

    state: WidgetState = WidgetState.CLOSED
    input_value: str = ""
    input_focused: bool = False
    transcript: list[TranscriptEntry] = field(default_factory=list)

    @property
    def is_open(self) -> bool:
        return self.state is WidgetState.OPEN

    def open(self) -> None:
        """Show the panel and focus the input."""
        self.state = WidgetState.OPEN
        self.input_focused = True

    def close(self) -> None:
        """Hide the panel."""
        self.state = WidgetState.CLOSED
        self.input_focused = False

    def fallback_reply(self) -> str:
        """One of the canned sentences, chosen uniformly."""
        return self.rng.choice(FALLBACK_REPLIES)

    def _append(self, text: str, role: str) -> TranscriptEntry:
        entry = TranscriptEntry(role=role, text=text)
        self.transcript.append(entry)
        return entry

    async def submit(self, text: Optional[str] = None) -> Optional[TranscriptEntry]:
        """
        Send a question and fill in the bot's answer.

        Uses ``text`` when given, otherwise the current input value. Blank
        input is ignored.

        Returns:
            The bot entry holding the reply, or None when nothing was sent.
        """
        question = (self.input_value if text is None else text).strip()
        if not question:
            return None

        self._append(question, "user")
        self.input_value = ""

        placeholder = self._append(THINKING_PLACEHOLDER, "bot")
        placeholder.text = await self._fetch_reply(question)
        return placeholder

    async def _fetch_reply(self, question: str) -> str:
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response = await client.post(self.endpoint, json={"message": question})
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warn("Chat request failed", error=str(e))
            return self.fallback_reply()

        if not response.is_success:
            logger.warn("Chat request rejected", status=response.status_code)
            return self.fallback_reply()

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        reply = payload.get("reply") if isinstance(payload, dict) else None
        if isinstance(reply, str) and reply.strip():
            return reply.strip()
        return self.fallback_reply()


# ============================================================================
# Terminal client
# ============================================================================

async def _chat_loop(widget: ChatWidget) -> None:
    widget.open()
    print("JV Solutions assistant. Empty line or Ctrl-D to quit.")
    while widget.is_open:
        try:
            widget.input_value = await asyncio.to_thread(input, "you> ")
        except EOFError:
            widget.close()
            break
        if not widget.input_value.strip():
            widget.close()
            break
        entry = await widget.submit()
        if entry is not None:
            print(f"bot> {entry.text}")
            entry.settle()


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Chat with the site assistant from a terminal.")
    parser.add_argument("--url", default=DEFAULT_ENDPOINT, help="Chat endpoint URL")
    parser.add_argument("--timeout", type=float, default=30.0, help="Request timeout in seconds")
    args = parser.parse_args(argv)

    try:
        asyncio.run(_chat_loop(ChatWidget(endpoint=args.url, timeout=args.timeout)))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
