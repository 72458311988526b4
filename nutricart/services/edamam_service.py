"""
Edamam API Integration Service

Recipes come from the meal planner endpoint first; if that call fails the
recipe search endpoint is tried. Any remaining failure is raised as
EdamamUnavailable so the caller can switch to AI-generated recipes.
"""
import os
import httpx
from typing import Dict, List
from dotenv import load_dotenv

load_dotenv()

EDAMAM_APP_ID = os.getenv("EDAMAM_APP_ID")
EDAMAM_APP_KEY = os.getenv("EDAMAM_APP_KEY")
EDAMAM_BASE_URL = "https://api.edamam.com"
EDAMAM_TIMEOUT_SEC = float(os.getenv("EDAMAM_TIMEOUT_SEC", "15"))


class EdamamUnavailable(Exception):
    """Edamam is not configured or could not return recipes."""


def is_configured() -> bool:
    return bool(EDAMAM_APP_ID and EDAMAM_APP_KEY)


def extract_recipes_from_meal_plan(meal_plan: Dict) -> List[Dict]:
    """Collect the recipe objects from a meal planner response."""
    if not meal_plan or not isinstance(meal_plan.get("days"), list):
        return []

    recipes = []
    for day in meal_plan["days"]:
        for meal in day.get("items") or []:
            if isinstance(meal, dict) and meal.get("recipe"):
                recipes.append(meal["recipe"])
    return recipes


async def fetch_meal_plan_recipes(client: httpx.AsyncClient, ingredients: List[str], size: int = 5) -> List[Dict]:
    """
    Ask the meal planner for a short plan biased toward the user's first ingredients.

    Args:
        client: Open httpx client
        ingredients: User ingredient names
        size: Number of meals to request

    Returns:
        Recipes extracted from the plan (possibly empty)
    """
    response = await client.post(
        f"{EDAMAM_BASE_URL}/api/meal-planner/v1/3-day",
        params={"app_id": EDAMAM_APP_ID, "app_key": EDAMAM_APP_KEY},
        json={"size": size, "plan": {"accept": {"ingredients": ingredients[:3]}}},
    )
    response.raise_for_status()
    return extract_recipes_from_meal_plan(response.json())


async def search_recipes(client: httpx.AsyncClient, ingredients: List[str], number: int = 10) -> List[Dict]:
    """
    Search recipes by the user's top ingredients.

    Args:
        client: Open httpx client
        ingredients: User ingredient names (first five are used)
        number: Maximum number of hits

    Returns:
        Recipe objects from the search hits
    """
    response = await client.get(
        f"{EDAMAM_BASE_URL}/search",
        params={
            "q": ",".join(ingredients[:5]),
            "app_id": EDAMAM_APP_ID,
            "app_key": EDAMAM_APP_KEY,
            "to": number,
        },
    )
    response.raise_for_status()
    hits = response.json().get("hits") or []
    return [hit["recipe"] for hit in hits if isinstance(hit, dict) and hit.get("recipe")]


async def fetch_recipes(ingredients: List[str]) -> List[Dict]:
    """
    Fetch recipes for the given ingredients from Edamam.

    Returns:
        Recipes from the meal planner, or from recipe search when the
        planner request fails (search may legitimately return nothing)

    Raises:
        EdamamUnavailable: not configured, both requests failed, or the plan had no recipes
    """
    if not is_configured():
        raise EdamamUnavailable("EDAMAM_APP_ID / EDAMAM_APP_KEY not set in environment variables")

    async with httpx.AsyncClient(timeout=EDAMAM_TIMEOUT_SEC) as client:
        try:
            recipes = await fetch_meal_plan_recipes(client, ingredients)
        except httpx.HTTPError as e:
            print(f"Meal planner API failed ({e}), falling back to recipe search")
            try:
                return await search_recipes(client, ingredients)
            except httpx.HTTPError as search_error:
                raise EdamamUnavailable(f"Recipe search API also failed: {search_error}") from search_error

    if not recipes:
        raise EdamamUnavailable("No recipes found in meal plan")
    return recipes
