"""
Purchase History Service
Condenses a user's purchases and measurements into prompt context.
"""
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from nutricart.db.crud import get_purchases_since, get_user_measurements
from nutricart.db.models import Measurement, Purchase

RECOMMENDATION_WINDOW_DAYS = 30
CHAT_WINDOW_DAYS = 30
INGREDIENT_WINDOW_DAYS = 60

# Categories that count as cooking ingredients (substring match, lowercase)
FOOD_CATEGORIES = [
    "produce", "fruits", "vegetables", "meat", "seafood", "dairy",
    "bakery", "grains", "canned goods", "frozen foods", "beverages",
    "snacks", "condiments", "spices", "oils", "baking",
]


def get_recent_purchases(user_id: str, days: int) -> List[Purchase]:
    """Purchases from the last ``days`` days, newest first."""
    since = datetime.utcnow() - timedelta(days=days)
    return get_purchases_since(user_id, since)


def purchases_for_prompt(purchases: List[Purchase]) -> List[Dict]:
    """Date plus item details for each purchase, ready for json.dumps."""
    return [
        {
            "date": purchase.date.date().isoformat(),
            "items": [
                {
                    "name": item.name,
                    "category": item.category,
                    "quantity": item.quantity,
                    "price": item.price,
                    "nutritionalInfo": (
                        item.nutritional_info.model_dump(exclude_none=True)
                        if item.nutritional_info else {}
                    ),
                }
                for item in purchase.items
            ],
        }
        for purchase in purchases
    ]


def summarize_purchases(purchases: List[Purchase], recent_limit: int = 5, items_per_category: int = 5) -> Dict:
    """
    Summarize purchases by category for the health chat.

    Args:
        purchases: Purchases ordered newest first
        recent_limit: How many recent purchases to include in full
        items_per_category: How many example item names to keep per category

    Returns:
        Dict with totalPurchases, categorySummary (by quantity, descending) and recentPurchases
    """
    categories: Dict[str, Dict] = {}
    for purchase in purchases:
        for item in purchase.items:
            entry = categories.setdefault(item.category, {"count": 0.0, "items": []})
            entry["count"] += item.quantity
            if item.name not in entry["items"]:
                entry["items"].append(item.name)

    category_summary = [
        {
            "category": category,
            "count": data["count"],
            "items": data["items"][:items_per_category],
        }
        for category, data in sorted(categories.items(), key=lambda kv: kv[1]["count"], reverse=True)
    ]

    return {
        "totalPurchases": len(purchases),
        "categorySummary": category_summary,
        "recentPurchases": purchases_for_prompt(purchases[:recent_limit]),
    }


def is_food_category(category: str) -> bool:
    lowered = (category or "").lower()
    return any(food in lowered for food in FOOD_CATEGORIES)


def extract_ingredients(purchases: List[Purchase]) -> List[str]:
    """Unique lowercase names of food items, in order of first appearance."""
    ingredients: List[str] = []
    for purchase in purchases:
        for item in purchase.items:
            name = item.name.strip().lower()
            if name and is_food_category(item.category) and name not in ingredients:
                ingredients.append(name)
    return ingredients


def get_user_ingredients(user_id: str) -> List[str]:
    """Ingredients bought in the last 60 days; empty list if the lookup fails."""
    try:
        return extract_ingredients(get_recent_purchases(user_id, INGREDIENT_WINDOW_DAYS))
    except Exception as e:
        print(f"Error fetching user ingredients: {e}")
        return []


def summarize_measurements(measurement: Optional[Measurement]) -> Optional[Dict]:
    """Measurements as a compact dict, or None when nothing useful is recorded."""
    if measurement is None:
        return None

    summary: Dict = {"activityLevel": measurement.activity_level.value}
    if measurement.height and measurement.height.value is not None:
        summary["height"] = f"{measurement.height.value:g} {measurement.height.unit}"
    if measurement.weight and measurement.weight.value is not None:
        summary["weight"] = f"{measurement.weight.value:g} {measurement.weight.unit}"
    if measurement.age is not None:
        summary["age"] = measurement.age
    if measurement.gender is not None:
        summary["gender"] = measurement.gender.value
    return summary


def get_measurement_summary(user_id: str) -> Optional[Dict]:
    try:
        return summarize_measurements(get_user_measurements(user_id))
    except Exception as e:
        print(f"Error fetching measurements: {e}")
        return None
