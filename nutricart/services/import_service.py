"""
Purchase Import Service
Saves items imported from a store order as a purchase, categorizing them with AI.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from nutricart.ai.flows.categorize_items import CategorizeItemsInput, categorize_items
from nutricart.db.crud import create_purchase
from nutricart.db.models import NutritionalInfo, Purchase, PurchaseCreate, PurchaseItem

# Used when the model is unavailable or skips an item; first match wins
KEYWORD_CATEGORIES: Dict[str, List[str]] = {
    "fruits": ["apple", "banana", "berry", "berries", "grape", "orange", "lemon", "lime", "mango", "pear", "peach", "melon", "avocado"],
    "vegetables": ["lettuce", "spinach", "broccoli", "carrot", "tomato", "onion", "potato", "pepper", "cucumber", "kale", "celery", "garlic", "salad"],
    "meat": ["chicken", "beef", "pork", "turkey", "bacon", "sausage", "ham", "steak", "lamb"],
    "seafood": ["salmon", "tuna", "shrimp", "cod", "fish", "tilapia", "crab"],
    "dairy": ["milk", "cheese", "yogurt", "butter", "cream", "egg"],
    "bakery": ["bread", "bagel", "muffin", "tortilla", "bun", "croissant"],
    "grains": ["rice", "pasta", "oat", "cereal", "quinoa", "flour", "noodle"],
    "frozen foods": ["frozen", "ice cream", "pizza"],
    "canned goods": ["canned", "beans", "soup"],
    "beverages": ["water", "juice", "soda", "coffee", "tea", "drink"],
    "snacks": ["chips", "cracker", "cookie", "candy", "chocolate", "popcorn", "bar"],
    "condiments": ["ketchup", "mustard", "mayo", "sauce", "dressing", "vinegar"],
    "spices": ["salt", "pepper", "cinnamon", "paprika", "spice", "oregano"],
    "oils": ["oil"],
    "household": ["paper towel", "detergent", "trash bag", "cleaner", "foil", "sponge"],
    "personal care": ["shampoo", "soap", "toothpaste", "deodorant", "lotion"],
}


class ImportItem(BaseModel):
    """One line of an imported order."""
    name: str = Field(..., min_length=1)
    quantity: float = Field(1, gt=0)
    price: float = Field(0, ge=0)
    category: Optional[str] = Field(None, description="Known category, skips AI categorization")
    nutritional_info: Optional[NutritionalInfo] = None


def guess_category(name: str) -> str:
    """Category from keywords in the item name, "other" when nothing matches."""
    lowered = name.lower()
    for category, keywords in KEYWORD_CATEGORIES.items():
        if any(keyword in lowered for keyword in keywords):
            return category
    return "other"


async def import_items(user_id: str, items: List[ImportItem]) -> Purchase:
    """
    Categorize imported items and save them as one purchase.

    Args:
        user_id: User ID
        items: Imported lines (must not be empty)

    Returns:
        The saved purchase
    """
    if not items:
        raise ValueError("No items to import")

    to_categorize = sorted({item.name for item in items if not item.category})
    ai_categories: Dict[str, str] = {}
    if to_categorize:
        result = await categorize_items(CategorizeItemsInput(item_names=to_categorize))
        ai_categories = result.categories

    purchase_items = []
    for item in items:
        category = item.category or ai_categories.get(item.name) or guess_category(item.name)
        purchase_items.append(
            PurchaseItem(
                name=item.name,
                category=category,
                quantity=item.quantity,
                price=item.price,
                nutritional_info=item.nutritional_info,
            )
        )

    total = round(sum(item.price * item.quantity for item in purchase_items), 2)

    return create_purchase(user_id, PurchaseCreate(items=purchase_items, total_amount=total))
