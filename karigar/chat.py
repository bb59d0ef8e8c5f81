"""Multilingual assistant chat.

History is held by the client and sent with every turn. ``ConversationLog``
is the explicit, append-only container for it.
"""
from __future__ import annotations

import logging
from typing import Iterator, Sequence

from schemas.chat import ChatReply, ChatRequest, ChatTurn, ContentPart, MediaRef

from .config import Config
from .media import MediaPart, parse_data_uri, validate_media
from .provider import ModelProvider

log = logging.getLogger(__name__)

GREETING = (
    "Hello! 👋 I’m your AI Voice Assistant. You don’t need to type—just speak in the language you’re most "
    "comfortable with. I can understand and reply in Hindi, English, Tamil, Telugu, Bengali, Marathi, Gujarati, "
    "Punjabi, Kannada, Malayalam, and more. Tap the mic 🎤 and let’s talk in your language."
)

_SYSTEM = """You are an AI assistant for Indian artisans. Your persona is empowering, respectful of tradition, simple, and supportive.

Core Principles:
- Empowerment: Always frame your responses to help the artisan take the next step.
- Respect for Tradition: Acknowledge and honor the cultural significance of their craft.
- Simplicity: Break down complex digital concepts into simple, actionable steps.
- Multilingual: Your primary rule is to detect the language of the user's last message and ALWAYS respond in that same language. This applies to all languages, especially Indian languages like Hindi, Bengali, Tamil, etc.

Key Functionalities:
- If the user mentions uploading a file or taking a picture, confirm you are ready and ask what you should do with it. For example: "I'm ready for your photo. What should I do with it once you've sent it?"
- After answering a question, suggest a logical next step or ask a guiding question to continue the conversation. You can present numbered options."""


class ConversationLog:
    """Ordered, append-only chat history."""

    def __init__(self, turns: Sequence[ChatTurn] = ()):
        self._turns: list[ChatTurn] = list(turns)

    @classmethod
    def with_greeting(cls) -> "ConversationLog":
        return cls([ChatTurn(role="model", content=[ContentPart(text=GREETING)])])

    def append(self, turn: ChatTurn) -> None:
        self._turns.append(turn)

    def add_user(self, text: str, media: MediaRef | None = None) -> ChatTurn:
        content = [ContentPart(text=text)]
        if media is not None:
            content.append(ContentPart(media=media))
        turn = ChatTurn(role="user", content=content)
        self.append(turn)
        return turn

    def add_model(self, text: str) -> ChatTurn:
        turn = ChatTurn(role="model", content=[ContentPart(text=text)])
        self.append(turn)
        return turn

    @property
    def turns(self) -> tuple[ChatTurn, ...]:
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[ChatTurn]:
        return iter(tuple(self._turns))


def render_history(history: Sequence[ChatTurn]) -> str:
    lines = []
    for turn in history:
        speaker = "From user:" if turn.role == "user" else "From you:"
        parts = [p.text for p in turn.content if p.text]
        if turn.has_media:
            parts.append("User has uploaded a file.")
        lines.append(f"{speaker} {' '.join(parts)}".rstrip())
    return "\n".join(lines)


def build_prompt(request: ChatRequest) -> str:
    return (
        f"{_SYSTEM}\n\n"
        f"Conversation History:\n{render_history(request.history)}\n\n"
        f"New user message: {request.message}\n\n"
        "Your response:"
    )


def _attachment(media: MediaRef | None, config: Config) -> list[MediaPart]:
    if media is None or not media.url.startswith("data:"):
        return []
    return [validate_media(parse_data_uri(media.url, field="media"), config.max_media_bytes)]


def chat(request: ChatRequest, provider: ModelProvider, config: Config) -> ChatReply:
    """One assistant turn. The history is read, never modified."""
    attachments = _attachment(request.media, config)
    log.info("Chat turn with %d prior message(s)", len(request.history))
    return provider.generate_structured(build_prompt(request), ChatReply, media=attachments)


def converse(
    conversation: ConversationLog,
    message: str,
    provider: ModelProvider,
    config: Config,
    media: MediaRef | None = None,
) -> ChatReply:
    """Send ``message`` with the log's history, then record both turns."""
    request = ChatRequest(history=list(conversation.turns), message=message, media=media)
    reply = chat(request, provider, config)
    conversation.add_user(message, media=media)
    conversation.add_model(reply.message)
    return reply
