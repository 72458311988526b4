"""
Tests for recipe generation: ingredient matching, Edamam/AI sources and full recipes.
Run this file directly to execute tests without pytest.
"""
import asyncio
import os
import sys
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch

os.environ["USE_MOCK_FIRESTORE"] = "true"
os.environ["GEMINI_API_KEY"] = ""
os.environ["EDAMAM_APP_ID"] = ""
os.environ["EDAMAM_APP_KEY"] = ""

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import httpx
import pytest

from nutricart.ai import genkit as genkit_client
from nutricart.db.crud import create_purchase
from nutricart.db.firestore import db
from nutricart.db.models import PurchaseCreate, PurchaseItem
from nutricart.services import edamam_service, recipe_service
from nutricart.services.mocks.fallbacks import RECIPE_BLURB_FALLBACKS
from nutricart.services.purchase_history import get_user_ingredients
from nutricart.services.recipe_service import (
    NoIngredientData,
    NoRecipesFound,
    main_ingredient,
    split_ingredients,
)

USER_ID = "cook-1"

EDAMAM_RECIPE = {
    "uri": "http://www.edamam.com/ontologies/edamam.owl#recipe_abc123",
    "label": "Spinach Salad",
    "ingredientLines": ["2 cups spinach", "1 tbsp olive oil", "2 cups spinach"],
    "totalTime": 0,
    "yield": 4.0,
    "calories": 250.4,
    "totalNutrients": {"PROCNT": {"quantity": 6.2, "unit": "g"}},
    "url": "https://example.com/spinach-salad",
    "source": "Example Kitchen",
}


class FakeResponse:
    def __init__(self, text):
        self.text = text


def setup_function():
    db.reset()


def add_purchase(items, days_ago=1):
    create_purchase(
        USER_ID,
        PurchaseCreate(
            items=items,
            total_amount=sum(item.price * item.quantity for item in items),
            date=datetime.utcnow() - timedelta(days=days_ago),
        ),
    )


def add_groceries():
    add_purchase([
        PurchaseItem(name="Spinach", category="vegetables", quantity=1, price=2.0),
        PurchaseItem(name="Chicken Breast", category="meat", quantity=1, price=8.0),
        PurchaseItem(name="Paper Towels", category="household", quantity=1, price=4.0),
    ])


def test_main_ingredient():
    assert main_ingredient("2 cups rice, rinsed") == "cups rice"
    assert main_ingredient("salt") == "salt"


def test_split_ingredients_matches_both_directions():
    matching, missing = split_ingredients(
        ["1 chicken", "2 cups spinach leaves", "1 lemon", "1 lemon"],
        ["Chicken Breast", "spinach"],
    )

    assert matching == ["chicken", "cups spinach leaves"]
    assert missing == ["lemon"]


def test_ingredients_skip_non_food_and_old_purchases():
    add_groceries()
    add_purchase([PurchaseItem(name="Quinoa", category="grains", quantity=1, price=5.0)], days_ago=90)

    assert get_user_ingredients(USER_ID) == ["spinach", "chicken breast"]


def test_no_food_purchases_raises():
    add_purchase([PurchaseItem(name="Detergent", category="household", quantity=1, price=9.0)])

    with pytest.raises(NoIngredientData):
        asyncio.run(recipe_service.generate_recipes(USER_ID))


def test_no_recipes_from_any_source_raises():
    add_groceries()

    with patch.object(edamam_service, "fetch_recipes", new=AsyncMock(return_value=[])):
        with pytest.raises(NoRecipesFound):
            asyncio.run(recipe_service.generate_recipes(USER_ID))


def test_without_edamam_or_model_uses_fallback_recipe():
    add_groceries()

    recipes = asyncio.run(recipe_service.generate_recipes(USER_ID))

    assert len(recipes) == 1
    recipe = recipes[0]
    assert recipe.title == "Simple Recipe with Your Ingredients"
    assert recipe.ingredients == ["1 portion spinach", "1 portion chicken breast"]
    assert recipe.matching_ingredients == ["portion spinach", "portion chicken breast"]
    assert recipe.missing_ingredients == []
    assert recipe.recipe_id == "ai-generated-recipe-fallback"
    assert recipe.ready_in_minutes == 30
    assert recipe.servings == 2
    assert recipe.ai_recommendation == RECIPE_BLURB_FALLBACKS.lookup("default").text


def test_edamam_recipes_are_formatted_and_replace_old_ones():
    add_groceries()
    blurb = "High in iron and folate. " * 20
    generate = AsyncMock(return_value=FakeResponse(blurb))

    with patch.object(edamam_service, "fetch_recipes", new=AsyncMock(return_value=[EDAMAM_RECIPE])), \
            patch.object(genkit_client.ai, "generate", new=generate):
        asyncio.run(recipe_service.generate_recipes(USER_ID))
        recipes = asyncio.run(recipe_service.generate_recipes(USER_ID))

    assert len(recipe_service.list_recipes(USER_ID)) == 1
    recipe = recipes[0]
    assert recipe.recipe_id == "abc123"
    assert recipe.title == "Spinach Salad"
    assert recipe.ready_in_minutes == 30
    assert recipe.servings == 4
    assert recipe.source_url == "https://example.com/spinach-salad"
    assert recipe.summary == "Example Kitchen"
    assert recipe.matching_ingredients == ["cups spinach"]
    assert recipe.missing_ingredients == ["tbsp olive oil"]
    assert len(recipe.ai_recommendation) == 300

    prompt = generate.await_args.kwargs["prompt"]
    assert "Calories: 250 kcal" in prompt
    assert "Protein: 6.2 g" in prompt
    assert "Fat: N/A g" in prompt


def test_model_recipe_with_flat_nutrients_and_huge_numbers():
    add_groceries()
    ideas = (
        '{"recipes": [{"label": "Spinach Soup", "ingredientLines": ["1 cup spinach"], '
        '"totalNutrients": {"PROCNT": 15, "FAT": 3, "FIBTG": "lots"}, '
        '"yield": 1e400, "totalTime": 1e400, "calories": 1e400}]}'
    )

    def reply(prompt=None, config=None, **kwargs):
        if "culinary AI assistant" in prompt:
            return FakeResponse(ideas)
        return FakeResponse("Light and full of greens.")

    generate = AsyncMock(side_effect=reply)
    with patch.object(genkit_client.ai, "generate", new=generate):
        recipes = asyncio.run(recipe_service.generate_recipes(USER_ID))

    recipe = recipes[0]
    assert recipe.title == "Spinach Soup"
    assert recipe.servings == 2
    assert recipe.ready_in_minutes == 30
    assert recipe.ai_recommendation == "Light and full of greens."

    prompt = generate.await_args.kwargs["prompt"]
    assert "Calories: N/A kcal" in prompt
    assert "Protein: 15.0 g" in prompt
    assert "Fat: 3.0 g" in prompt
    assert "Fiber: N/A g" in prompt


def test_full_recipe_fallback_keeps_title_heading():
    text = asyncio.run(recipe_service.generate_full_recipe(USER_ID, "Spinach Salad"))

    assert text.startswith("# Spinach Salad\n\n")
    assert "try again later" in text


def test_full_recipe_from_model():
    add_groceries()
    markdown = "# Spinach Salad\n\n## Description\nFresh and green."
    generate = AsyncMock(return_value=FakeResponse(markdown))

    with patch.object(genkit_client.ai, "generate", new=generate):
        text = asyncio.run(recipe_service.generate_full_recipe(USER_ID, "Spinach Salad", ["spinach", "lemon"]))

    assert text == markdown
    prompt = generate.await_args.kwargs["prompt"]
    assert "spinach, chicken breast" in prompt
    assert "spinach, lemon" in prompt


def test_edamam_unconfigured_raises():
    with pytest.raises(edamam_service.EdamamUnavailable):
        asyncio.run(edamam_service.fetch_recipes(["spinach"]))


def configured_edamam():
    return patch.multiple(edamam_service, EDAMAM_APP_ID="app-id", EDAMAM_APP_KEY="app-key")


def test_edamam_planner_failure_uses_search():
    planner = AsyncMock(side_effect=httpx.HTTPError("planner down"))
    search = AsyncMock(return_value=[EDAMAM_RECIPE])

    with configured_edamam(), \
            patch.object(edamam_service, "fetch_meal_plan_recipes", new=planner), \
            patch.object(edamam_service, "search_recipes", new=search):
        recipes = asyncio.run(edamam_service.fetch_recipes(["spinach", "chicken breast"]))

    assert recipes == [EDAMAM_RECIPE]
    assert planner.await_count == 1
    assert search.await_args.args[1] == ["spinach", "chicken breast"]


def test_edamam_planner_and_search_failure_raises():
    with configured_edamam(), \
            patch.object(edamam_service, "fetch_meal_plan_recipes", new=AsyncMock(side_effect=httpx.HTTPError("planner down"))), \
            patch.object(edamam_service, "search_recipes", new=AsyncMock(side_effect=httpx.HTTPError("search down"))):
        with pytest.raises(edamam_service.EdamamUnavailable):
            asyncio.run(edamam_service.fetch_recipes(["spinach"]))


def test_edamam_empty_plan_raises_without_search():
    search = AsyncMock(return_value=[EDAMAM_RECIPE])

    with configured_edamam(), \
            patch.object(edamam_service, "fetch_meal_plan_recipes", new=AsyncMock(return_value=[])), \
            patch.object(edamam_service, "search_recipes", new=search):
        with pytest.raises(edamam_service.EdamamUnavailable):
            asyncio.run(edamam_service.fetch_recipes(["spinach"]))

    assert search.await_count == 0


def test_extract_recipes_from_meal_plan():
    plan = {
        "days": [
            {"items": [{"recipe": {"label": "Oats"}}, {"recipe": None}]},
            {"items": [{"recipe": {"label": "Soup"}}]},
            {},
        ]
    }

    assert edamam_service.extract_recipes_from_meal_plan(plan) == [{"label": "Oats"}, {"label": "Soup"}]
    assert edamam_service.extract_recipes_from_meal_plan({}) == []


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
