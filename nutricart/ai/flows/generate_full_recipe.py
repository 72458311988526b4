"""
Generate Full Recipe Flow
Produces a complete Markdown recipe for a selected title.
"""
from pydantic import BaseModel, Field
from typing import List

from nutricart.ai.genkit import ai, generate_with_fallback
from nutricart.services.mocks.fallbacks import FULL_RECIPE_FALLBACKS


class GenerateFullRecipeInput(BaseModel):
    """Input schema for full recipe generation."""
    title: str = Field(description="Recipe title")
    base_ingredients: List[str] = Field(default=[], description="Ingredients known to be in the recipe")
    user_ingredients: List[str] = Field(default=[], description="Ingredients from the user's purchases")


class GenerateFullRecipeOutput(BaseModel):
    full_recipe: str = Field(description="Recipe in Markdown")
    from_fallback: bool = False


@ai.flow()
async def generate_full_recipe(input_data: GenerateFullRecipeInput) -> GenerateFullRecipeOutput:
    """
    Generates the full recipe text in a fixed Markdown layout.

    Args:
        input_data: Title, known ingredients and the user's ingredients

    Returns:
        GenerateFullRecipeOutput; on failure the text is the title heading
        followed by an apology
    """
    title = input_data.title

    prompt = f"""
    As a professional chef, create a detailed recipe for "{title}".

    The user has these ingredients available from their purchase history:
    {", ".join(input_data.user_ingredients)}

    I know this recipe includes these ingredients:
    {", ".join(input_data.base_ingredients)}

    Please create a complete recipe with the following sections in exactly this format:

    # {title}

    ## Description
    [Write a brief description of this dish - 2-3 sentences about flavor profile, origin, or what makes it special]

    ## Ingredients
    [Format as a markdown list with each ingredient on its own line, starting with "* " and including precise measurements]
    * Ingredient 1 - measurement
    * Ingredient 2 - measurement
    etc.

    ## Instructions
    [Format as a numbered list with each step on its own line, starting with "1. ", "2. ", etc.]
    1. First step...
    2. Second step...
    etc.

    ## Cooking Time
    * Prep: [time in minutes]
    * Cook: [time in minutes]
    * Total: [time in minutes]

    ## Nutrition (Per Serving)
    * Calories: [amount]
    * Protein: [amount in grams]
    * Carbs: [amount in grams]
    * Fat: [amount in grams]

    ## Chef's Tips
    [Format as a markdown list with 2-3 bullet points]
    * Tip 1...
    * Tip 2...

    ## Serving Suggestion
    [Brief suggestion on how to serve or pair the dish]

    IMPORTANT: Format everything in clean, simple markdown. Use bullet points for ingredients and numbered lists for instructions. Keep it concise and easy to follow. Do not use any formatting that isn't standard markdown.
    """

    result = await generate_with_fallback(
        prompt=prompt,
        expected_shape=None,
        fallback_key="default",
        fallback_table=FULL_RECIPE_FALLBACKS,
    )

    text = result.text
    if result.from_fallback:
        text = f"# {title}\n\n{text}"

    return GenerateFullRecipeOutput(full_recipe=text, from_fallback=result.from_fallback)
