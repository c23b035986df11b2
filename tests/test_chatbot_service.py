from __future__ import annotations

import random
from types import SimpleNamespace
from typing import Any, Dict, List

import openai
import pytest

from neuromood.chatbot.chatbot_service import (
    DEFAULT_TONE,
    EMOTION_TO_TONE,
    MOCK_RESPONSES,
    ChatbotService,
    build_messages,
    build_system_message,
    select_tone,
)
from neuromood.config.settings import EMOTION_LABELS, MAX_HISTORY, WELCOME_MESSAGE


def _fake_client(reply: Any = "Hi there", captured: List[Dict[str, Any]] = None) -> SimpleNamespace:
    def create(**kwargs: Any) -> Any:
        if captured is not None:
            captured.append(kwargs)
        if isinstance(reply, Exception):
            raise reply
        message = SimpleNamespace(content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def test_every_label_has_a_tone() -> None:
    assert set(EMOTION_TO_TONE) == set(EMOTION_LABELS)
    for label in EMOTION_LABELS:
        assert select_tone(label) == EMOTION_TO_TONE[label]


@pytest.mark.parametrize("emotion", [None, "", "bored"])
def test_missing_or_unknown_emotion_uses_default_tone(emotion: Any) -> None:
    assert select_tone(emotion) == DEFAULT_TONE


def test_system_message_names_emotion_and_tone() -> None:
    message = build_system_message("sad")
    assert message["role"] == "system"
    assert "feeling sad" in message["content"]
    assert "empathetic and comforting tone" in message["content"]


def test_build_messages_prepends_system_message() -> None:
    history = [{"role": "user", "content": "hello"}]
    messages = build_messages(history, "happy")
    assert [m["role"] for m in messages] == ["system", "user"]
    assert messages[1] == history[0]


def test_without_key_replies_are_canned(monkeypatch: pytest.MonkeyPatch) -> None:
    def no_client(**kwargs: Any) -> Any:
        raise AssertionError("client must not be built without a key")

    monkeypatch.setattr(openai, "OpenAI", no_client)
    chatbot = ChatbotService(api_key="", rng=random.Random(0))

    assert not chatbot.has_llm
    assert chatbot.get_response("I got the job!", "happy") in MOCK_RESPONSES["happy"]


def test_placeholder_key_counts_as_missing() -> None:
    assert not ChatbotService(api_key="your_openrouter_key_here").has_llm


def test_llm_reply_uses_emotion_aware_prompt() -> None:
    captured: List[Dict[str, Any]] = []
    chatbot = ChatbotService(model="test-model", client=_fake_client("  Sounds great!  ", captured))

    assert chatbot.get_response("Good news today", "happy") == "Sounds great!"

    request = captured[0]
    assert request["model"] == "test-model"
    assert request["messages"][0]["role"] == "system"
    assert "enthusiastic and upbeat" in request["messages"][0]["content"]
    assert request["messages"][-1] == {"role": "user", "content": "Good news today"}
    assert chatbot.conversation_history[-1] == {"role": "assistant", "content": "Sounds great!"}


def test_transport_failure_falls_back_to_canned_reply() -> None:
    chatbot = ChatbotService(client=_fake_client(openai.OpenAIError("down")), rng=random.Random(1))
    assert chatbot.get_response("hello", "sad") in MOCK_RESPONSES["sad"]


@pytest.mark.parametrize("reply", ["", "   ", None])
def test_empty_llm_reply_falls_back(reply: Any) -> None:
    chatbot = ChatbotService(client=_fake_client(reply))
    assert chatbot.get_response("hello", None) in MOCK_RESPONSES["neutral"]


def test_malformed_llm_response_falls_back() -> None:
    client = SimpleNamespace(
        chat=SimpleNamespace(completions=SimpleNamespace(create=lambda **kwargs: SimpleNamespace(choices=[])))
    )
    chatbot = ChatbotService(client=client)
    assert chatbot.get_response("hello", "calm") in MOCK_RESPONSES["calm"]


@pytest.mark.parametrize("message", ["", "   \n"])
def test_blank_message_is_rejected(message: str) -> None:
    chatbot = ChatbotService(client=_fake_client())
    with pytest.raises(ValueError):
        chatbot.get_response(message, "happy")
    assert len(chatbot.conversation_history) == 1


def test_history_is_trimmed_and_clearable() -> None:
    chatbot = ChatbotService(client=_fake_client())
    for i in range(MAX_HISTORY):
        chatbot.get_response(f"message {i}", "neutral")

    assert len(chatbot.conversation_history) == MAX_HISTORY
    assert chatbot.conversation_history[-1]["role"] == "assistant"

    chatbot.clear_history()
    assert chatbot.conversation_history == [{"role": "assistant", "content": WELCOME_MESSAGE}]


def test_recommend_genre_without_llm_uses_lookup() -> None:
    chatbot = ChatbotService(api_key="")
    assert chatbot.recommend_genre("sad") == "melancholic piano music"
    assert chatbot.recommend_genre(None) == "lofi study beats"


def test_recommend_genre_asks_llm() -> None:
    chatbot = ChatbotService(client=_fake_client('"Synthwave"'))
    assert chatbot.recommend_genre("happy") == "Synthwave"


def test_recommend_genre_falls_back_on_failure() -> None:
    chatbot = ChatbotService(client=_fake_client(openai.OpenAIError("down")))
    assert chatbot.recommend_genre("angry") == "calming ambient music"
