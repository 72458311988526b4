"""
Categorize Items Flow
Assigns a food category to imported grocery item names.
"""
from pydantic import BaseModel, Field
from typing import Dict, List

from nutricart.ai.genkit import ai, generate_with_fallback
from nutricart.ai.normalizer import FieldKind, FieldSpec, ResponseShape
from nutricart.services.mocks.fallbacks import CATEGORIZATION_FALLBACKS

CATEGORIES = [
    "fruits", "vegetables", "meat", "seafood", "dairy", "bakery", "grains",
    "canned goods", "frozen foods", "beverages", "snacks", "condiments",
    "spices", "oils", "baking", "household", "personal care", "other",
]

CATEGORIZATION_SHAPE = ResponseShape.of(
    FieldSpec(
        name="categories",
        kind=FieldKind.LIST,
        item_shape=ResponseShape.of(
            FieldSpec(name="name", kind=FieldKind.STRING),
            FieldSpec(name="category", kind=FieldKind.STRING),
        ),
    ),
)


class CategorizeItemsInput(BaseModel):
    """Input schema for item categorization."""
    item_names: List[str] = Field(default=[], description="Grocery item names as printed on the receipt")


class CategorizeItemsOutput(BaseModel):
    categories: Dict[str, str] = Field(default={}, description="Item name -> category")
    from_fallback: bool = False


@ai.flow()
async def categorize_items(input_data: CategorizeItemsInput) -> CategorizeItemsOutput:
    """
    Categorizes grocery items into the fixed category list.

    Args:
        input_data: Item names to categorize

    Returns:
        CategorizeItemsOutput mapping each recognized item to a known category;
        unknown categories and items the model skipped are left out
    """
    item_lines = "\n".join(f"- {name}" for name in input_data.item_names)

    prompt = f"""
    You are a grocery assistant. Categorize each of the following grocery items into exactly one of these categories:
    {", ".join(CATEGORIES)}

    Items:
    {item_lines}

    Format your response as a JSON object with the following structure:
    {{
      "categories": [
        {{"name": "item name exactly as given", "category": "one of the categories above"}}
      ]
    }}
    """

    result = await generate_with_fallback(
        prompt=prompt,
        expected_shape=CATEGORIZATION_SHAPE,
        fallback_key="default",
        fallback_table=CATEGORIZATION_FALLBACKS,
    )

    wanted = set(input_data.item_names)
    categories = {}
    for entry in result.data["categories"]:
        category = entry["category"].strip().lower()
        if entry["name"] in wanted and category in CATEGORIES:
            categories[entry["name"]] = category

    return CategorizeItemsOutput(categories=categories, from_fallback=result.from_fallback)
