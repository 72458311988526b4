"""
FastAPI Application for NutriCart
Grocery purchase tracking with AI-powered nutrition recommendations,
recipe suggestions and a health advice chat
"""
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import List, Optional
import uvicorn
import os
from dotenv import load_dotenv

from nutricart.ai.flows.health_chat import ChatTurn
from nutricart.db.crud import get_user_purchases
from nutricart.db.models import HealthGoal, Purchase, Recipe, Recommendation
from nutricart.services import advisor_service, recipe_service, recommendation_service
from nutricart.services.import_service import ImportItem, import_items
from nutricart.services.recipe_service import NoIngredientData, NoRecipesFound
from nutricart.services.recommendation_service import NotEnoughPurchaseData

# Load environment variables
load_dotenv()

# Initialize FastAPI app
app = FastAPI(
    title="NutriCart API",
    description="AI-powered nutrition recommendations and recipes from your grocery purchases",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001").split(",")
        if origin.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request models for API endpoints
class GenerateRecommendationsRequest(BaseModel):
    """Request schema for generating recommendations."""
    goal: Optional[HealthGoal] = Field(None, description="Overrides the goal stored on the user profile")


class FullRecipeRequest(BaseModel):
    """Request schema for full recipe generation."""
    title: Optional[str] = Field(None, description="Recipe title")
    ingredients: List[str] = Field(default=[], description="Ingredients known to be in the recipe")


class FullRecipeResponse(BaseModel):
    fullRecipe: str


class GenerateRecipesResponse(BaseModel):
    message: str
    count: int


class HealthChatRequest(BaseModel):
    """Request schema for the health chat."""
    message: Optional[str] = Field(None, description="The user's message")
    chatHistory: List[ChatTurn] = Field(default=[], description="Earlier turns, oldest first")
    usePurchaseContext: bool = Field(False, description="Allow purchase history in the prompt")


class HealthChatResponse(BaseModel):
    reply: str


class ImportPurchaseRequest(BaseModel):
    """Request schema for importing an order."""
    store: Optional[str] = Field(None, description="Store the order came from")
    items: List[ImportItem] = Field(default=[], description="Order lines")


# Health check endpoints
@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {
        "status": "healthy",
        "service": "NutriCart API",
        "version": "1.0.0"
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# ========== RECOMMENDATION ENDPOINTS ==========

@app.post("/api/users/{user_id}/recommendations", response_model=Recommendation)
async def create_recommendations(user_id: str, request: Optional[GenerateRecommendationsRequest] = None):
    """
    Analyze the last 30 days of purchases and store new recommendations.
    Falls back to canned advice for the user's goal when the AI is unavailable.
    """
    goal = request.goal if request else None
    try:
        return await recommendation_service.generate_recommendations(user_id, goal)
    except NotEnoughPurchaseData as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        print(f"Generate recommendations error: {e}")
        raise HTTPException(status_code=500, detail="An error occurred while generating recommendations")


@app.get("/api/users/{user_id}/recommendations", response_model=List[Recommendation])
async def list_recommendations(user_id: str):
    """Get stored recommendations, newest first."""
    return recommendation_service.list_recommendations(user_id)


# ========== RECIPE ENDPOINTS ==========

@app.post("/api/users/{user_id}/recipes/generate", response_model=GenerateRecipesResponse)
async def create_recipes(user_id: str):
    """Generate recipes from the user's recent ingredients, replacing older ones."""
    try:
        recipes = await recipe_service.generate_recipes(user_id)
    except NoIngredientData as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NoRecipesFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        print(f"Error generating recipes: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to generate recipes: {str(e)}")

    return GenerateRecipesResponse(message="Recipes generated successfully", count=len(recipes))


@app.get("/api/users/{user_id}/recipes", response_model=List[Recipe])
async def list_recipes(user_id: str):
    """Get the user's generated recipes."""
    return recipe_service.list_recipes(user_id)


@app.post("/api/users/{user_id}/recipes/full-recipe", response_model=FullRecipeResponse)
async def create_full_recipe(user_id: str, request: FullRecipeRequest):
    """Generate the full Markdown recipe for a title."""
    if not request.title:
        raise HTTPException(status_code=400, detail="Recipe title is required")

    try:
        full_recipe = await recipe_service.generate_full_recipe(user_id, request.title, request.ingredients)
    except Exception as e:
        print(f"Error generating full recipe: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to generate full recipe: {str(e)}")

    return FullRecipeResponse(fullRecipe=full_recipe)


# ========== HEALTH CHAT ENDPOINT ==========

@app.post("/api/users/{user_id}/health/chat", response_model=HealthChatResponse)
async def health_chat(user_id: str, request: HealthChatRequest):
    """Answer a health chat message with general wellness advice."""
    if not request.message:
        raise HTTPException(status_code=400, detail="Message is required")

    try:
        reply = await advisor_service.chat(
            user_id,
            request.message,
            history=request.chatHistory,
            use_purchase_context=request.usePurchaseContext,
        )
    except Exception as e:
        print(f"Health chat error: {e}")
        raise HTTPException(status_code=500, detail="An error occurred while processing your message")

    return HealthChatResponse(reply=reply)


# ========== PURCHASE ENDPOINTS ==========

@app.post("/api/users/{user_id}/purchases/import", response_model=Purchase, status_code=201)
async def import_purchase(user_id: str, request: ImportPurchaseRequest):
    """Categorize imported order lines and save them as a purchase."""
    if not request.items:
        raise HTTPException(status_code=400, detail="Invalid items data")

    try:
        purchase = await import_items(user_id, request.items)
    except Exception as e:
        print(f"Error importing purchase data: {e}")
        raise HTTPException(status_code=500, detail="Failed to import purchase data")

    if request.store:
        print(f"Imported {len(purchase.items)} items from {request.store} for user {user_id}")
    return purchase


@app.get("/api/users/{user_id}/purchases", response_model=List[Purchase])
async def list_purchases(
    user_id: str,
    limit: int = Query(10, ge=1, le=100, description="Maximum number of purchases")
):
    """Get the user's most recent purchases."""
    return get_user_purchases(user_id, limit)


# Run the application
if __name__ == "__main__":
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,  # Enable auto-reload during development
        log_level="info"
    )
