"""
Analyze Grocery Purchases Flow
Reviews recent purchases against the user's health goal and suggests changes.
"""
import json
from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from nutricart.ai.genkit import ai, generate_with_fallback
from nutricart.ai.normalizer import FieldKind, FieldSpec, ResponseShape
from nutricart.db.models import RecommendationEntry, RecommendationType
from nutricart.services.mocks.fallbacks import RECOMMENDATION_FALLBACKS


RECOMMENDATION_SHAPE = ResponseShape.of(
    FieldSpec(name="summary", kind=FieldKind.STRING),
    FieldSpec(
        name="recommendations",
        kind=FieldKind.LIST,
        item_shape=ResponseShape.of(
            FieldSpec(name="type", kind=FieldKind.STRING, choices=[t.value for t in RecommendationType]),
            FieldSpec(name="category", kind=FieldKind.STRING),
            FieldSpec(name="item", kind=FieldKind.STRING, required=False),
            FieldSpec(name="reason", kind=FieldKind.STRING, required=False),
        ),
    ),
    FieldSpec(name="overallSummary", kind=FieldKind.STRING, required=False),
)


class AnalyzeGroceryPurchasesInput(BaseModel):
    """Input schema for purchase analysis."""
    goal: str = Field(description="The user's health goal, e.g. weight_loss")
    purchases: List[Dict] = Field(default=[], description="Purchase history prepared for the prompt")
    measurements: Optional[Dict] = Field(None, description="Optional body measurements")


class AnalyzeGroceryPurchasesOutput(BaseModel):
    """Output schema for purchase analysis."""
    summary: str = Field(description="Analysis of current purchasing patterns")
    recommendations: List[RecommendationEntry] = Field(default=[])
    overall_summary: Optional[str] = Field(None, description="Brief summary of the recommendations")
    from_fallback: bool = Field(False, description="True when canned recommendations were used")


@ai.flow()
async def analyze_grocery_purchases(
    input_data: AnalyzeGroceryPurchasesInput,
) -> AnalyzeGroceryPurchasesOutput:
    """
    Analyzes the purchase history and recommends changes for the user's goal.

    Args:
        input_data: Goal, purchase history and optional measurements

    Returns:
        AnalyzeGroceryPurchasesOutput, the goal's fallback recommendations when
        the model is unavailable or its reply is unusable
    """
    goal = input_data.goal

    measurements_text = ""
    if input_data.measurements:
        measurements_text = f"""
      Body Measurements:
      {json.dumps(input_data.measurements, indent=2)}
"""

    prompt = f"""
      As a nutrition expert, analyze the following grocery purchase history and provide recommendations based on the user's health goal of "{goal}".

      Purchase History:
      {json.dumps(input_data.purchases, indent=2)}
{measurements_text}
      Please provide:
      1. A summary of the user's current purchasing patterns
      2. 5 specific recommendations based on their goal of "{goal}" in the following format:
         - Type: [increase, decrease, add, remove]
         - Category: [food category]
         - Item: [specific item if applicable]
         - Reason: [brief explanation]
      3. A brief overall summary of your recommendations (max 2 sentences)

      Format your response as a JSON object with the following structure:
      {{
        "summary": "Analysis of current patterns",
        "recommendations": [
          {{
            "type": "increase/decrease/add/remove",
            "category": "category name",
            "item": "specific item (optional)",
            "reason": "brief explanation"
          }}
        ],
        "overallSummary": "Brief summary of recommendations"
      }}
    """

    result = await generate_with_fallback(
        prompt=prompt,
        expected_shape=RECOMMENDATION_SHAPE,
        fallback_key=goal,
        fallback_table=RECOMMENDATION_FALLBACKS,
    )

    data = result.data
    return AnalyzeGroceryPurchasesOutput(
        summary=data["summary"],
        recommendations=[RecommendationEntry(**entry) for entry in data["recommendations"]],
        overall_summary=data.get("overallSummary"),
        from_fallback=result.from_fallback,
    )
