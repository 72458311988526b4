"""
Pydantic models for Firestore database collections
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum


class HealthGoal(str, Enum):
    """Enum for user health goals."""
    WEIGHT_LOSS = "weight_loss"
    WEIGHT_GAIN = "weight_gain"
    MAINTENANCE = "maintenance"
    HEALTH_IMPROVEMENT = "health_improvement"


class RecommendationType(str, Enum):
    """Enum for the kind of change a recommendation suggests."""
    INCREASE = "increase"
    DECREASE = "decrease"
    ADD = "add"
    REMOVE = "remove"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    PREFER_NOT_TO_SAY = "prefer_not_to_say"


class ActivityLevel(str, Enum):
    SEDENTARY = "sedentary"
    LIGHTLY_ACTIVE = "lightly_active"
    MODERATELY_ACTIVE = "moderately_active"
    VERY_ACTIVE = "very_active"
    EXTREMELY_ACTIVE = "extremely_active"


# User Models
class User(BaseModel):
    """User model with ID and timestamps."""
    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User email address")
    name: Optional[str] = Field(None, description="User's full name")
    goal: HealthGoal = Field(HealthGoal.HEALTH_IMPROVEMENT, description="User's health goal")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        from_attributes = True


# Purchase Models
class NutritionalInfo(BaseModel):
    """Per-item nutrition facts, all optional."""
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None
    sugar: Optional[float] = None
    fiber: Optional[float] = None


class PurchaseItem(BaseModel):
    """A single line of a grocery purchase."""
    name: str = Field(..., description="Item name")
    category: str = Field(..., description="Food category")
    quantity: float = Field(1, gt=0, description="Quantity bought")
    price: float = Field(..., ge=0, description="Unit price")
    nutritional_info: Optional[NutritionalInfo] = Field(None, description="Nutrition facts")


class PurchaseCreate(BaseModel):
    """Model for creating a new purchase."""
    items: List[PurchaseItem] = Field(..., min_length=1, description="Purchased items")
    total_amount: float = Field(..., ge=0, description="Total amount paid")
    date: Optional[datetime] = Field(None, description="Purchase date, defaults to now")


class Purchase(BaseModel):
    """Purchase model with ID and timestamps."""
    id: str = Field(..., description="Purchase ID")
    user_id: str = Field(..., description="User ID this purchase belongs to")
    date: datetime = Field(default_factory=datetime.utcnow)
    items: List[PurchaseItem] = Field(default=[])
    total_amount: float = Field(..., ge=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        from_attributes = True


# Measurement Models
class Height(BaseModel):
    value: Optional[float] = None
    unit: str = Field("cm", pattern="^(cm|in)$")


class Weight(BaseModel):
    value: Optional[float] = None
    unit: str = Field("kg", pattern="^(kg|lb)$")


class Measurement(BaseModel):
    """Body measurements used as optional context for AI advice."""
    user_id: str = Field(..., description="User ID")
    height: Optional[Height] = None
    weight: Optional[Weight] = None
    age: Optional[int] = Field(None, ge=0)
    gender: Optional[Gender] = None
    activity_level: ActivityLevel = ActivityLevel.MODERATELY_ACTIVE
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        from_attributes = True


# Recommendation Models
class RecommendationEntry(BaseModel):
    """One suggested change to the user's shopping habits."""
    type: RecommendationType = Field(..., description="Kind of change")
    category: str = Field(..., description="Food category")
    item: Optional[str] = Field(None, description="Specific item, if any")
    reason: Optional[str] = Field(None, description="Short explanation")


class RecommendationCreate(BaseModel):
    """Model for creating a new recommendation."""
    recommendations: List[RecommendationEntry] = Field(default=[])
    summary: str = Field(..., description="Overall summary of the recommendations")


class Recommendation(RecommendationCreate):
    """Recommendation model with ID and timestamps."""
    id: str = Field(..., description="Recommendation ID")
    user_id: str = Field(..., description="User ID")
    date: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        from_attributes = True


# Recipe Models
class RecipeBase(BaseModel):
    """Base recipe model."""
    recipe_id: str = Field(..., description="Source recipe identifier")
    title: str = Field(..., description="Recipe title")
    image: str = Field("", description="Image URL, empty when not available")
    ready_in_minutes: int = Field(30, description="Total preparation time in minutes")
    servings: int = Field(2, description="Number of servings")
    source_url: str = Field("#", description="Source URL")
    summary: str = Field("Recipe details", description="Short summary or source name")
    ingredients: List[str] = Field(default=[], description="Ingredient lines")
    instructions: List[str] = Field(default=[], description="Preparation steps")
    matching_ingredients: List[str] = Field(default=[], description="Ingredients the user already bought")
    missing_ingredients: List[str] = Field(default=[], description="Ingredients the user still needs")
    ai_recommendation: str = Field("", description="AI-generated recommendation blurb")


class RecipeCreate(RecipeBase):
    """Model for creating a new recipe."""
    pass


class Recipe(RecipeBase):
    """Recipe model with ID and timestamps."""
    id: str = Field(..., description="Recipe document ID")
    user_id: str = Field(..., description="User ID")
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        from_attributes = True
