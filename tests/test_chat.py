import pytest
from pydantic import ValidationError

from conftest import FakeProvider, data_uri
from karigar.chat import GREETING, ConversationLog, build_prompt, chat, converse, render_history
from karigar.errors import InputValidationError
from schemas.chat import ChatReply, ChatRequest, ChatTurn, MediaRef


def test_log_starts_with_greeting():
    log = ConversationLog.with_greeting()
    assert len(log) == 1
    assert log.turns[0].role == "model"
    assert log.turns[0].text == GREETING


def test_turns_snapshot_is_not_live():
    log = ConversationLog()
    snapshot = log.turns
    log.add_user("namaste")
    assert snapshot == ()
    assert [t.role for t in log] == ["user"]


def test_converse_appends_both_turns(config):
    provider = FakeProvider(structured=ChatReply(message="नमस्ते! मैं आपकी कैसे मदद करूँ?"))
    log = ConversationLog.with_greeting()

    reply = converse(log, "नमस्ते", provider, config)

    assert reply.message.startswith("नमस्ते")
    assert [t.role for t in log] == ["model", "user", "model"]
    assert log.turns[1].text == "नमस्ते"
    assert log.turns[2].text == reply.message
    # The request only saw the history that existed before this turn
    prompt = provider.calls_of("structured")[0][1]
    assert "New user message: नमस्ते" in prompt
    assert prompt.count("From user:") == 0


def test_history_rendering():
    history = [
        ChatTurn(role="model", content=[{"text": "Hello"}]),
        ChatTurn(role="user", content=[{"text": "Here is my pot"}, {"media": {"url": "data:image/png;base64,AA=="}}]),
    ]
    assert render_history(history) == (
        "From you: Hello\n"
        "From user: Here is my pot User has uploaded a file."
    )
    prompt = build_prompt(ChatRequest(history=history, message="Price it?"))
    assert "Conversation History:\nFrom you: Hello" in prompt
    assert prompt.endswith("Your response:")


def test_chat_forwards_inline_attachment(config):
    provider = FakeProvider(structured=ChatReply(message="Nice photo"))
    media = MediaRef(url=data_uri(b"\x89PNG....", "image/png"), content_type="image/png")
    chat(ChatRequest(message="", media=media), provider, config)
    forwarded = provider.calls_of("structured")[0][3]
    assert forwarded[0].mime_type == "image/png"


def test_chat_ignores_remote_attachment_urls(config):
    provider = FakeProvider(structured=ChatReply(message="ok"))
    chat(ChatRequest(message="see this", media=MediaRef(url="https://example.com/p.png")), provider, config)
    assert provider.calls_of("structured")[0][3] == []


def test_chat_rejects_unsupported_attachment(config):
    provider = FakeProvider(structured=ChatReply(message="ok"))
    media = MediaRef(url=data_uri(b"%PDF", "application/pdf"))
    with pytest.raises(InputValidationError):
        chat(ChatRequest(message="read this", media=media), provider, config)
    assert provider.calls == []


def test_empty_message_rejected():
    with pytest.raises(ValidationError):
        ChatRequest(message="   ")
