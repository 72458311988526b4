"""
Recipe Service
Finds recipes for the ingredients a user has been buying.

1. Collects ingredients from the last 60 days of purchases
2. Fetches recipes from Edamam, or asks the model when Edamam is unavailable
3. Normalizes every recipe, splits ingredients into matching/missing and
   attaches a short AI recommendation
4. Replaces the user's stored recipes
"""
import asyncio
import math
import uuid
from typing import Any, Dict, List, Optional

from nutricart.ai.flows.generate_full_recipe import GenerateFullRecipeInput, generate_full_recipe as full_recipe_flow
from nutricart.ai.flows.generate_recipe_ideas import GenerateRecipeIdeasInput, generate_recipe_ideas
from nutricart.ai.flows.recommend_recipe import RecipeNutrition, RecommendRecipeInput, recommend_recipe
from nutricart.db.crud import get_user_recipes, replace_user_recipes
from nutricart.db.models import Recipe, RecipeCreate
from nutricart.services import edamam_service
from nutricart.services.purchase_history import get_user_ingredients

EDAMAM_RECIPE_URI = "http://www.edamam.com/ontologies/edamam.owl#recipe_"
DEFAULT_READY_IN_MINUTES = 30


class NoIngredientData(Exception):
    """No food items in the user's recent purchases."""


class NoRecipesFound(Exception):
    """Neither Edamam nor the model produced any recipes."""


async def find_source_recipes(ingredients: List[str]) -> List[Dict]:
    """Edamam recipes, or AI-generated ones when Edamam cannot help."""
    try:
        return await edamam_service.fetch_recipes(ingredients)
    except Exception as e:
        print(f"Edamam unavailable ({e}), falling back to AI generation")

    ideas = await generate_recipe_ideas(GenerateRecipeIdeasInput(ingredients=ingredients))
    recipes = ideas.recipes
    if ideas.from_fallback:
        for recipe in recipes:
            recipe["ingredientLines"] = [f"1 portion {name}" for name in ingredients]
    return recipes


def _recipe_id(recipe: Dict) -> str:
    uri = recipe.get("uri") or ""
    if "#recipe_" in uri:
        return uri.split("#recipe_", 1)[1]
    if recipe.get("id"):
        return str(recipe["id"])
    if uri:
        return uri
    return f"mp_{uuid.uuid4().hex[:13]}"


def _ingredient_lines(recipe: Dict) -> List[str]:
    if isinstance(recipe.get("ingredientLines"), list):
        lines = recipe["ingredientLines"]
    else:
        lines = [
            (ing.get("text") or ing.get("food") or "") if isinstance(ing, dict) else ing
            for ing in recipe.get("ingredients") or []
        ]
    return [line for line in lines if isinstance(line, str) and line]


def main_ingredient(line: str) -> str:
    """Rough ingredient name from a line like "2 cups rice, rinsed" -> "cups rice"."""
    words = line.split(",")[0].split(" ")
    name = " ".join(words[1:]).strip().lower()
    return name or line.lower()


def split_ingredients(ingredient_lines: List[str], user_ingredients: List[str]):
    """
    Partition recipe ingredients into those the user has and those missing.

    Matching is a substring check in either direction, so "chicken" matches
    "chicken breast" and the other way around.

    Returns:
        (matching, missing) lists without duplicates
    """
    owned = [name.lower() for name in user_ingredients]
    matching: List[str] = []
    missing: List[str] = []

    for line in ingredient_lines:
        ingredient = main_ingredient(line)
        has_it = any(ingredient in name or name in ingredient for name in owned)
        target = matching if has_it else missing
        if ingredient not in target:
            target.append(ingredient)

    return matching, missing


def _finite_number(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        return value
    return None


def _mapping(value: Any) -> Dict:
    return value if isinstance(value, dict) else {}


# Edamam nests nutrients as {"PROCNT": {"quantity": ..}}; model replies may not
def _nutrient(recipe: Dict, code: str, key: str) -> Optional[float]:
    entry = _mapping(recipe.get("totalNutrients")).get(code)
    value = _finite_number(entry.get("quantity") if isinstance(entry, dict) else entry)
    if value is None:
        value = _finite_number(_mapping(recipe.get("nutrition")).get(key))
    return value


def recipe_nutrition(recipe: Dict) -> RecipeNutrition:
    calories = _finite_number(recipe.get("calories"))
    if calories is None:
        calories = _finite_number(_mapping(recipe.get("nutrition")).get("calories"))
    return RecipeNutrition(
        calories=calories,
        protein=_nutrient(recipe, "PROCNT", "protein"),
        carbs=_nutrient(recipe, "CHOCDF", "carbs"),
        fat=_nutrient(recipe, "FAT", "fat"),
        fiber=_nutrient(recipe, "FIBTG", "fiber"),
    )


def _as_int(value: Any, default: int) -> int:
    number = _finite_number(value)
    if number is not None and number >= 0.5:
        return int(round(number))
    return default


async def format_recipe(recipe: Dict, user_ingredients: List[str]) -> RecipeCreate:
    """
    Convert an Edamam (or AI-generated) recipe into a RecipeCreate.

    Args:
        recipe: Raw recipe object
        user_ingredients: Ingredients the user has

    Returns:
        RecipeCreate with matching/missing ingredients and an AI recommendation
    """
    title = recipe.get("title") or recipe.get("label") or "Untitled recipe"
    ingredient_lines = _ingredient_lines(recipe)
    matching, missing = split_ingredients(ingredient_lines, user_ingredients)

    instructions = recipe.get("instructions") or []
    if isinstance(instructions, str):
        instructions = [instructions]

    blurb = await recommend_recipe(
        RecommendRecipeInput(
            title=title,
            ingredient_lines=ingredient_lines,
            nutrition=recipe_nutrition(recipe),
            user_ingredients=user_ingredients,
        )
    )

    return RecipeCreate(
        recipe_id=_recipe_id(recipe),
        title=title,
        image="",
        ready_in_minutes=_as_int(recipe.get("totalTime"), DEFAULT_READY_IN_MINUTES),
        servings=_as_int(recipe.get("yield") or recipe.get("servings"), 2),
        source_url=recipe.get("url") or recipe.get("sourceUrl") or "#",
        summary=recipe.get("source") or recipe.get("summary") or "Recipe details",
        ingredients=ingredient_lines,
        instructions=[str(step) for step in instructions],
        matching_ingredients=matching,
        missing_ingredients=missing,
        ai_recommendation=blurb.recommendation,
    )


async def generate_recipes(user_id: str) -> List[Recipe]:
    """
    Generate recipes for a user and replace their stored recipes.

    Raises:
        NoIngredientData: no food purchases in the last 60 days
        NoRecipesFound: no recipe source returned anything
    """
    user_ingredients = get_user_ingredients(user_id)
    if not user_ingredients:
        raise NoIngredientData("No ingredient data available from purchase history")

    source_recipes = await find_source_recipes(user_ingredients)
    if not source_recipes:
        raise NoRecipesFound("No recipes found for your ingredients")

    formatted = await asyncio.gather(
        *(format_recipe(recipe, user_ingredients) for recipe in source_recipes)
    )

    return replace_user_recipes(user_id, list(formatted))


async def generate_full_recipe(user_id: str, title: str, ingredients: Optional[List[str]] = None) -> str:
    """Full Markdown recipe for ``title`` using the user's recent ingredients."""
    result = await full_recipe_flow(
        GenerateFullRecipeInput(
            title=title,
            base_ingredients=ingredients or [],
            user_ingredients=get_user_ingredients(user_id),
        )
    )
    return result.full_recipe


def list_recipes(user_id: str) -> List[Recipe]:
    return get_user_recipes(user_id)
