"""
Fallback dataset for AI generation.

Canned results served when Gemini is unavailable or replies with something
that cannot be used. Built once at import and shared read-only by every
request; FallbackTable hands out copies.
"""
from __future__ import annotations

from nutricart.ai.normalizer import FallbackTable, PlainTextResult, StructuredResult


_HEALTH_IMPROVEMENT_SUMMARY = (
    "To improve your overall health, we recommend increasing your consumption of whole foods, "
    "particularly fruits and vegetables, while reducing processed items."
)

_HEALTH_IMPROVEMENT = StructuredResult(data={
    "summary": _HEALTH_IMPROVEMENT_SUMMARY,
    "recommendations": [
        {
            "type": "increase",
            "category": "vegetables",
            "reason": "Vegetables provide essential vitamins, minerals, and antioxidants.",
        },
        {
            "type": "increase",
            "category": "fruits",
            "reason": "Fruits contain important vitamins and beneficial plant compounds.",
        },
        {
            "type": "decrease",
            "category": "processed foods",
            "reason": "Processed foods often contain additives and preservatives that may impact health.",
        },
    ],
    "overallSummary": _HEALTH_IMPROVEMENT_SUMMARY,
})

_WEIGHT_LOSS_SUMMARY = (
    "Based on your weight loss goal and recent purchases, we recommend focusing on more vegetables "
    "and lean proteins while reducing processed foods and sugary items."
)

_WEIGHT_GAIN_SUMMARY = (
    "To support your weight gain goal, we recommend increasing your intake of nutrient-dense foods, "
    "healthy fats, and protein sources."
)

RECOMMENDATION_FALLBACKS = FallbackTable(
    rows={
        "weight_loss": StructuredResult(data={
            "summary": _WEIGHT_LOSS_SUMMARY,
            "recommendations": [
                {
                    "type": "increase",
                    "category": "vegetables",
                    "reason": "Vegetables are low in calories but high in nutrients and fiber, which helps you feel full longer.",
                },
                {
                    "type": "decrease",
                    "category": "processed foods",
                    "reason": "Processed foods often contain hidden calories, sugars, and unhealthy fats that can hinder weight loss.",
                },
                {
                    "type": "add",
                    "category": "lean proteins",
                    "item": "chicken breast or tofu",
                    "reason": "Protein helps maintain muscle mass during weight loss and increases satiety.",
                },
            ],
            "overallSummary": _WEIGHT_LOSS_SUMMARY,
        }),
        "weight_gain": StructuredResult(data={
            "summary": _WEIGHT_GAIN_SUMMARY,
            "recommendations": [
                {
                    "type": "increase",
                    "category": "protein sources",
                    "reason": "Adequate protein is essential for muscle growth and recovery.",
                },
                {
                    "type": "add",
                    "category": "healthy fats",
                    "item": "nuts, avocados, or olive oil",
                    "reason": "Healthy fats are calorie-dense and help with hormone production.",
                },
                {
                    "type": "increase",
                    "category": "complex carbohydrates",
                    "reason": "Complex carbs provide sustained energy and support muscle glycogen stores.",
                },
            ],
            "overallSummary": _WEIGHT_GAIN_SUMMARY,
        }),
        "maintenance": _HEALTH_IMPROVEMENT,
        "health_improvement": _HEALTH_IMPROVEMENT,
    },
    default_key="health_improvement",
)


RECIPE_IDEA_FALLBACKS = FallbackTable(
    rows={
        "ai_generated": StructuredResult(data={
            "recipes": [
                {
                    "label": "Simple Recipe with Your Ingredients",
                    "ingredientLines": [],
                    "instructions": ["Combine all ingredients", "Cook until done", "Serve and enjoy"],
                    "totalTime": 30,
                    "yield": 2,
                    "calories": 400,
                    "totalNutrients": {
                        "PROCNT": {"quantity": 15, "unit": "g"},
                        "CHOCDF": {"quantity": 30, "unit": "g"},
                        "FAT": {"quantity": 10, "unit": "g"},
                        "FIBTG": {"quantity": 5, "unit": "g"},
                    },
                    "uri": "ai-generated-recipe-fallback",
                    "url": "#",
                    "source": "AI Generated",
                },
            ],
        }),
    },
    default_key="ai_generated",
)


RECIPE_BLURB_FALLBACKS = FallbackTable(
    rows={
        "default": PlainTextResult(
            text="A nutritious recipe that could be a great addition to your meal plan. "
                 "Consider trying it with ingredients you already have."
        ),
    },
    default_key="default",
)


FULL_RECIPE_FALLBACKS = FallbackTable(
    rows={
        "default": PlainTextResult(
            text="Sorry, I couldn't generate the full recipe details at this time. Please try again later."
        ),
    },
    default_key="default",
)


HEALTH_CHAT_FALLBACKS = FallbackTable(
    rows={
        "default": PlainTextResult(
            text="I'm sorry, I'm having trouble reaching the health advisor service right now. "
                 "Please try again in a little while. For any urgent or serious concern, please "
                 "contact a healthcare professional."
        ),
    },
    default_key="default",
)


CATEGORIZATION_FALLBACKS = FallbackTable(
    rows={
        "default": StructuredResult(data={"categories": []}),
    },
    default_key="default",
)
