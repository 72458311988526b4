"""
Generate Recipe Ideas Flow
Creates recipes from the user's ingredients when no recipe API results are available.
"""
from pydantic import BaseModel, Field
from typing import Dict, List

from nutricart.ai.genkit import ai, generate_with_fallback
from nutricart.ai.normalizer import FieldKind, FieldSpec, ResponseShape
from nutricart.services.mocks.fallbacks import RECIPE_IDEA_FALLBACKS


RECIPE_IDEAS_SHAPE = ResponseShape.of(
    FieldSpec(
        name="recipes",
        kind=FieldKind.LIST,
        item_shape=ResponseShape.of(
            FieldSpec(name="label", kind=FieldKind.STRING),
            FieldSpec(name="ingredientLines", kind=FieldKind.LIST),
            FieldSpec(name="instructions", kind=FieldKind.LIST, required=False),
            FieldSpec(name="totalTime", kind=FieldKind.NUMBER, required=False),
            FieldSpec(name="yield", kind=FieldKind.NUMBER, required=False),
            FieldSpec(name="calories", kind=FieldKind.NUMBER, required=False),
            FieldSpec(name="totalNutrients", kind=FieldKind.MAPPING, required=False),
            FieldSpec(name="uri", kind=FieldKind.STRING, required=False),
            FieldSpec(name="url", kind=FieldKind.STRING, required=False),
            FieldSpec(name="source", kind=FieldKind.STRING, required=False),
        ),
    ),
)


class GenerateRecipeIdeasInput(BaseModel):
    """Input schema for recipe idea generation."""
    ingredients: List[str] = Field(default=[], description="Ingredients the user has bought")
    count: int = Field(3, ge=1, le=10, description="Number of recipes to create")


class GenerateRecipeIdeasOutput(BaseModel):
    """Output schema for recipe idea generation."""
    recipes: List[Dict] = Field(default=[], description="Recipes in Edamam-like format")
    from_fallback: bool = Field(False, description="True when the canned recipe was used")


@ai.flow()
async def generate_recipe_ideas(input_data: GenerateRecipeIdeasInput) -> GenerateRecipeIdeasOutput:
    """
    Asks the model for recipe ideas that use the given ingredients.

    Args:
        input_data: Available ingredients and how many recipes to create

    Returns:
        GenerateRecipeIdeasOutput with recipes shaped like Edamam search hits
    """
    print(f"Generating recipes with AI using ingredients: {input_data.ingredients}")

    prompt = f"""
    As a culinary AI assistant, create {input_data.count} unique recipe ideas using some or all of these ingredients:
    {", ".join(input_data.ingredients)}

    For each recipe, include:
    1. Title
    2. List of ingredients with approximate measurements
    3. Brief cooking instructions
    4. Estimated preparation time
    5. Serving size
    6. Brief nutritional highlights (calories, protein, etc.)

    Format the response as a valid JSON object with a single "recipes" field holding an array of objects with these fields:
    - label (string): Recipe title
    - ingredientLines (array of strings): List of ingredients with measurements
    - instructions (array of strings): Preparation steps
    - totalTime (number): Preparation time in minutes
    - yield (number): Number of servings
    - calories (number): Estimated calories per serving
    - totalNutrients (object): Containing PROCNT, CHOCDF, FAT, FIBTG objects, each with quantity (number) and unit (string) properties
    - uri (string): A unique identifier (can be "ai-generated-recipe-X")
    - url (string): Can be "#"
    - source (string): "AI Generated"

    The response should be valid JSON only, no explanations.
    """

    result = await generate_with_fallback(
        prompt=prompt,
        expected_shape=RECIPE_IDEAS_SHAPE,
        fallback_key="ai_generated",
        fallback_table=RECIPE_IDEA_FALLBACKS,
    )

    return GenerateRecipeIdeasOutput(
        recipes=result.data["recipes"],
        from_fallback=result.from_fallback,
    )
