"""
Recommend Recipe Flow
Writes a short personalized note about why a recipe is worth cooking.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from nutricart.ai.genkit import ai, generate_with_fallback
from nutricart.services.mocks.fallbacks import RECIPE_BLURB_FALLBACKS

MAX_RECOMMENDATION_CHARS = 300


class RecipeNutrition(BaseModel):
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None
    fiber: Optional[float] = None


class RecommendRecipeInput(BaseModel):
    """Input schema for recipe recommendations."""
    title: str = Field(description="Recipe title")
    ingredient_lines: List[str] = Field(default=[], description="Recipe ingredient lines")
    nutrition: RecipeNutrition = Field(default_factory=RecipeNutrition)
    user_ingredients: List[str] = Field(default=[], description="Ingredients the user has")


class RecommendRecipeOutput(BaseModel):
    recommendation: str = Field(description="Two or three sentence recommendation")
    from_fallback: bool = False


def _fmt(value: Optional[float], digits: int) -> str:
    return "N/A" if value is None else f"{value:.{digits}f}"


@ai.flow()
async def recommend_recipe(input_data: RecommendRecipeInput) -> RecommendRecipeOutput:
    """Short recommendation for one recipe, capped at 300 characters."""
    nutrition = input_data.nutrition

    prompt = f"""
    As a nutrition-focused AI assistant, please provide a brief, personalized recommendation about the following recipe:

    Recipe Title: {input_data.title}

    Recipe Ingredients:
    {chr(10).join(input_data.ingredient_lines)}

    Nutritional Information:
    Calories: {_fmt(nutrition.calories, 0)} kcal
    Protein: {_fmt(nutrition.protein, 1)} g
    Carbs: {_fmt(nutrition.carbs, 1)} g
    Fat: {_fmt(nutrition.fat, 1)} g
    Fiber: {_fmt(nutrition.fiber, 1)} g

    User has these ingredients: {", ".join(input_data.user_ingredients)}

    Provide a concise 2-3 sentence recommendation highlighting:
    1. What's nutritionally good about this recipe
    2. Who might benefit from it (e.g., people wanting to increase protein, people on low-carb diets, etc.)
    3. Any potential substitutions that could improve it further

    Keep your response under 200 characters. Don't use bullet points or include a greeting/sign-off.
    """

    result = await generate_with_fallback(
        prompt=prompt,
        expected_shape=None,
        fallback_key="default",
        fallback_table=RECIPE_BLURB_FALLBACKS,
    )

    return RecommendRecipeOutput(
        recommendation=result.text[:MAX_RECOMMENDATION_CHARS],
        from_fallback=result.from_fallback,
    )
