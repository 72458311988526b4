"""
Nutrition Recommendation Service
Analyzes recent purchases against the user's goal and stores the result.
"""
from typing import List, Optional

from nutricart.ai.flows.analyze_grocery_purchases import (
    AnalyzeGroceryPurchasesInput,
    analyze_grocery_purchases,
)
from nutricart.db.crud import (
    create_recommendation,
    get_user_goal,
    get_user_recommendations,
)
from nutricart.db.models import HealthGoal, Recommendation, RecommendationCreate
from nutricart.services.purchase_history import (
    RECOMMENDATION_WINDOW_DAYS,
    get_measurement_summary,
    get_recent_purchases,
    purchases_for_prompt,
)


class NotEnoughPurchaseData(Exception):
    """The user has no purchases in the recommendation window."""


async def generate_recommendations(user_id: str, goal: Optional[HealthGoal] = None) -> Recommendation:
    """
    Generate and save nutrition recommendations for a user.

    1. Loads purchases from the last 30 days
    2. Resolves the goal (explicit argument, else the user's profile goal)
    3. Runs the purchase analysis flow (falls back to canned advice for the goal)
    4. Saves the recommendation

    Args:
        user_id: User ID
        goal: Optional goal overriding the profile goal

    Returns:
        The stored recommendation

    Raises:
        NotEnoughPurchaseData: no purchases in the window
    """
    purchases = get_recent_purchases(user_id, RECOMMENDATION_WINDOW_DAYS)
    if not purchases:
        raise NotEnoughPurchaseData("Not enough purchase data to generate recommendations")

    if goal is None:
        goal = get_user_goal(user_id)

    analysis = await analyze_grocery_purchases(
        AnalyzeGroceryPurchasesInput(
            goal=goal.value,
            purchases=purchases_for_prompt(purchases),
            measurements=get_measurement_summary(user_id),
        )
    )

    if analysis.from_fallback:
        print(f"Using fallback recommendations for user {user_id} (goal: {goal.value})")

    return create_recommendation(
        user_id,
        RecommendationCreate(
            recommendations=analysis.recommendations,
            summary=analysis.overall_summary or analysis.summary,
        ),
    )


def list_recommendations(user_id: str) -> List[Recommendation]:
    """Stored recommendations for a user, newest first."""
    return get_user_recommendations(user_id)
