"""
Tests for nutrition recommendations: purchase window, goal resolution and fallbacks.
Run this file directly to execute tests without pytest.
"""
import asyncio
import os
import sys
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch

os.environ["USE_MOCK_FIRESTORE"] = "true"
os.environ["GEMINI_API_KEY"] = ""

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import pytest

from nutricart.ai import genkit as genkit_client
from nutricart.db.crud import create_purchase, get_user_purchases, get_user_recommendations
from nutricart.db.firestore import db
from nutricart.db.models import (
    Height,
    HealthGoal,
    Measurement,
    PurchaseCreate,
    PurchaseItem,
    RecommendationType,
    Weight,
)
from nutricart.services.mocks.fallbacks import RECOMMENDATION_FALLBACKS
from nutricart.services.purchase_history import summarize_measurements, summarize_purchases
from nutricart.services.recommendation_service import NotEnoughPurchaseData, generate_recommendations

USER_ID = "user-123"


class FakeResponse:
    def __init__(self, text):
        self.text = text


def setup_function():
    db.reset()


def add_user(goal):
    db.collection("users").document(USER_ID).set({
        "id": USER_ID,
        "email": "shopper@example.com",
        "name": "Sam",
        "goal": goal,
    })


def add_purchase(days_ago=1, items=None):
    items = items or [
        PurchaseItem(name="Spinach", category="vegetables", quantity=2, price=2.5),
        PurchaseItem(name="Potato Chips", category="snacks", quantity=1, price=3.0),
    ]
    return create_purchase(
        USER_ID,
        PurchaseCreate(
            items=items,
            total_amount=sum(item.price * item.quantity for item in items),
            date=datetime.utcnow() - timedelta(days=days_ago),
        ),
    )


def test_no_purchases_raises():
    with pytest.raises(NotEnoughPurchaseData):
        asyncio.run(generate_recommendations(USER_ID))

    assert get_user_recommendations(USER_ID) == []


def test_purchases_outside_window_do_not_count():
    add_purchase(days_ago=45)

    with pytest.raises(NotEnoughPurchaseData):
        asyncio.run(generate_recommendations(USER_ID))


def test_unavailable_model_stores_goal_fallback():
    add_user("weight_loss")
    add_purchase()

    recommendation = asyncio.run(generate_recommendations(USER_ID))

    expected = RECOMMENDATION_FALLBACKS.lookup("weight_loss").data
    assert recommendation.summary == expected["overallSummary"]
    assert [r.category for r in recommendation.recommendations] == [
        "vegetables", "processed foods", "lean proteins",
    ]
    assert recommendation.recommendations[2].item == "chicken breast or tofu"

    stored = get_user_recommendations(USER_ID)
    assert len(stored) == 1
    assert stored[0].id == recommendation.id


def test_unknown_user_defaults_to_health_improvement():
    add_purchase()

    recommendation = asyncio.run(generate_recommendations(USER_ID))

    expected = RECOMMENDATION_FALLBACKS.lookup("health_improvement").data
    assert recommendation.summary == expected["overallSummary"]


def test_model_reply_is_stored_and_prompt_has_goal_and_items():
    add_user("weight_gain")
    add_purchase()
    reply = """Here you go:
```json
{
  "summary": "Mostly vegetables with some snacks.",
  "recommendations": [
    {"type": "add", "category": "healthy fats", "item": "avocado", "reason": "Calorie dense."},
    {"type": "remove", "category": "snacks", "reason": "Low in nutrients."}
  ],
  "overallSummary": "Add healthy fats and cut chips."
}
```"""
    generate = AsyncMock(return_value=FakeResponse(reply))

    with patch.object(genkit_client.ai, "generate", new=generate):
        recommendation = asyncio.run(generate_recommendations(USER_ID))

    assert recommendation.summary == "Add healthy fats and cut chips."
    assert recommendation.recommendations[0].type == RecommendationType.ADD
    assert recommendation.recommendations[1].item is None

    prompt = generate.await_args.kwargs["prompt"]
    assert '"weight_gain"' in prompt
    assert "Spinach" in prompt
    assert "Potato Chips" in prompt


def test_explicit_goal_overrides_profile():
    add_user("weight_loss")
    add_purchase()

    recommendation = asyncio.run(generate_recommendations(USER_ID, HealthGoal.WEIGHT_GAIN))

    assert recommendation.summary == RECOMMENDATION_FALLBACKS.lookup("weight_gain").data["overallSummary"]


def test_unusable_reply_falls_back():
    add_user("weight_loss")
    add_purchase()
    generate = AsyncMock(return_value=FakeResponse("I'm not sure what you mean."))

    with patch.object(genkit_client.ai, "generate", new=generate):
        recommendation = asyncio.run(generate_recommendations(USER_ID))

    assert recommendation.summary == RECOMMENDATION_FALLBACKS.lookup("weight_loss").data["overallSummary"]


def test_summarize_purchases_groups_by_category():
    add_purchase(days_ago=2)
    add_purchase(days_ago=1, items=[PurchaseItem(name="Kale", category="vegetables", quantity=1, price=3)])

    summary = summarize_purchases(get_user_purchases(USER_ID))

    assert summary["totalPurchases"] == 2
    top = summary["categorySummary"][0]
    assert top["category"] == "vegetables"
    assert top["count"] == 3
    assert top["items"] == ["Kale", "Spinach"]
    assert summary["recentPurchases"][0]["items"][0]["name"] == "Kale"


def test_summarize_measurements():
    assert summarize_measurements(None) is None

    summary = summarize_measurements(
        Measurement(user_id=USER_ID, height=Height(value=170.0), weight=Weight(value=65.5, unit="kg"), age=34)
    )
    assert summary == {
        "activityLevel": "moderately_active",
        "height": "170 cm",
        "weight": "65.5 kg",
        "age": 34,
    }


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
