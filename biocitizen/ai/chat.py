from __future__ import annotations

import logging
from dataclasses import dataclass

from ..services.prompt_bridge import ChatHandoff
from .client import AIError, GeminiClient, ImagePayload

"""Conversational analyst session and transcript export.

AI failures never escape ``send``: they are logged and shown to the user as a
model message, so the transcript stays usable.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ChatMessage",
    "ChatSession",
    "render_transcript",
]

ROLE_USER = "user"
ROLE_MODEL = "model"

ANALYST_SYSTEM_PROMPT = (
    "You are a friendly and helpful biodiversity expert assisting a citizen scientist. Your goal is "
    "to identify species (from images), analyze simple datasets (when text is provided), and answer "
    "questions about ecology. When a user provides biodiversity indices (Richness, Shannon, Simpson), "
    "help them interpret what these numbers mean in a simple, understandable way. For example, "
    "explain what high or low diversity means. Be encouraging and clear."
)
GREETING = (
    "Hello! I'm BioBot. Ask me a question about biodiversity, upload an image for identification, "
    "or discuss your calculated indices!"
)
TRANSCRIPT_SEPARATOR = "\n---------------------------------\n"


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "user" or "model"
    text: str
    has_image: bool = False


def render_transcript(messages: list[ChatMessage]) -> str:
    """Plain-text transcript, one block per message."""
    blocks = []
    for msg in messages:
        speaker = "User" if msg.role == ROLE_USER else "BioBot"
        block = f"[{speaker}]\n{msg.text}\n"
        if msg.has_image:
            block += "(Image Attached)\n"
        blocks.append(block)
    return TRANSCRIPT_SEPARATOR.join(blocks)


class ChatSession:
    """In-memory chat with the analyst model."""

    def __init__(self, client: GeminiClient, *, system_prompt: str = ANALYST_SYSTEM_PROMPT) -> None:
        self.client = client
        self.system_prompt = system_prompt
        self.history: list[ChatMessage] = [ChatMessage(role=ROLE_MODEL, text=GREETING)]

    def send(self, prompt: str, image: ImagePayload | None = None) -> ChatMessage | None:
        """Append the user's turn and the model's reply; returns the reply.

        Blank prompts without an image are ignored (returns None).
        """
        prompt = prompt.strip()
        if not prompt and image is None:
            return None
        self.history.append(ChatMessage(role=ROLE_USER, text=prompt, has_image=image is not None))
        try:
            text = self.client.generate(prompt, system_prompt=self.system_prompt, image=image)
        except AIError as e:
            logger.error(f"chat: {e}")
            text = f"Sorry, I encountered an error: {e}"
        reply = ChatMessage(role=ROLE_MODEL, text=text)
        self.history.append(reply)
        return reply

    def seed(self, handoff: ChatHandoff) -> ChatMessage | None:
        """Start a turn with the analysis hand-off text."""
        return self.send(handoff.seed_text)

    def export_transcript(self) -> str:
        return render_transcript(self.history)
