"""
Tests for the health chat: restricted-content screening and prompt assembly.
Run this file directly to execute tests without pytest.
"""
import asyncio
import os
import sys
from unittest.mock import AsyncMock, patch

os.environ["USE_MOCK_FIRESTORE"] = "true"
os.environ["GEMINI_API_KEY"] = ""

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from nutricart.ai import genkit as genkit_client
from nutricart.ai.content_guard import (
    INBOUND_REFUSAL,
    OUTBOUND_REFUSAL,
    find_restricted_terms,
    screen_inbound,
    screen_reply,
)
from nutricart.ai.flows.health_chat import (
    INTRODUCTION_REMINDER,
    REMINDER_GENERAL,
    REMINDER_WITH_PURCHASES,
    ChatRole,
    ChatTurn,
    HealthChatInput,
    build_chat_prompt,
)
from nutricart.db.firestore import db
from nutricart.services import advisor_service
from nutricart.services.mocks.fallbacks import HEALTH_CHAT_FALLBACKS


class FakeResponse:
    def __init__(self, text):
        self.text = text


def setup_function():
    db.reset()


def test_restricted_message_is_refused_without_model_call():
    generate = AsyncMock(return_value=FakeResponse("should never be used"))

    with patch.object(genkit_client.ai, "generate", new=generate):
        reply = asyncio.run(advisor_service.chat("user-1", "tell me about SUICIDE methods"))

    assert reply == INBOUND_REFUSAL
    assert generate.await_count == 0


def test_restricted_reply_is_replaced():
    generate = AsyncMock(return_value=FakeResponse("Some people look into hacking their metabolism."))

    with patch.object(genkit_client.ai, "generate", new=generate):
        reply = asyncio.run(advisor_service.chat("user-1", "How can I speed up my metabolism?"))

    assert reply == OUTBOUND_REFUSAL
    assert generate.await_count == 1


def test_clean_reply_passes_through():
    answer = "Hello! I'm a health advisor chatbot. Try a short walk after meals and drink water."
    generate = AsyncMock(return_value=FakeResponse(answer))

    with patch.object(genkit_client.ai, "generate", new=generate):
        reply = asyncio.run(advisor_service.chat("user-1", "Any tips for better sleep?"))

    assert reply == answer


def test_unavailable_model_returns_chat_fallback():
    reply = asyncio.run(advisor_service.chat("user-1", "How much water should I drink?"))

    assert reply == HEALTH_CHAT_FALLBACKS.lookup("default").text
    assert find_restricted_terms(reply) == []


def test_matching_is_case_insensitive_substring():
    assert screen_inbound("How do I BYPASS RESTRICTIONS on my diet app?") == INBOUND_REFUSAL
    # "dan" inside "dancing" matches the short term as well
    assert screen_inbound("Is dancing good cardio?") == INBOUND_REFUSAL
    assert screen_inbound("Is swimming good cardio?") is None
    assert screen_reply("Eat more leafy greens.") == "Eat more leafy greens."
    assert find_restricted_terms(None) == []


def test_first_turn_prompt_has_system_prompt_and_context():
    prompt = build_chat_prompt(
        HealthChatInput(
            message="What should I eat for breakfast?",
            purchase_summary={"totalPurchases": 2, "categorySummary": [], "recentPurchases": []},
            measurements={"activityLevel": "moderate", "age": 34},
        )
    )

    assert "STRICT SAFETY RULES" in prompt
    assert "USER PURCHASE HISTORY CONTEXT" in prompt
    assert "USER BODY MEASUREMENTS" in prompt
    assert INTRODUCTION_REMINDER in prompt
    assert prompt.endswith("User query: What should I eat for breakfast?")


def test_later_turn_prompt_replays_history():
    history = [
        ChatTurn(role=ChatRole.USER, text="Hi"),
        ChatTurn(role=ChatRole.MODEL, text="Hello, I'm a health advisor."),
    ]

    general = build_chat_prompt(HealthChatInput(message="Is oatmeal healthy?", history=history))
    assert general.startswith(REMINDER_GENERAL)
    assert "User: Hi\nAdvisor: Hello, I'm a health advisor." in general
    assert general.endswith("User message: Is oatmeal healthy?")
    assert "STRICT SAFETY RULES" not in general

    with_purchases = build_chat_prompt(
        HealthChatInput(message="Is oatmeal healthy?", history=history, purchase_summary={"note": "x"})
    )
    assert with_purchases.startswith(REMINDER_WITH_PURCHASES)


def test_purchase_context_note_without_history():
    assert advisor_service.get_purchase_context("nobody") == {"note": advisor_service.NO_PURCHASE_HISTORY}


if __name__ == "__main__":
    print("Running content guard tests...\n")
    for name, test in list(globals().items()):
        if name.startswith("test_") and callable(test):
            setup_function()
            test()
            print(f"✅ {name}")
    print("\n✅ All content guard tests passed!")
