"""
CRUD Operations Module
Simple wrapper module for all database operations
"""
from nutricart.db.crud.users import UserCRUD
from nutricart.db.crud.purchases import PurchaseCRUD
from nutricart.db.crud.measurements import MeasurementCRUD
from nutricart.db.crud.recommendations import RecommendationCRUD
from nutricart.db.crud.recipes import RecipeCRUD

# Simple aliases for easier imports
users = UserCRUD
purchases = PurchaseCRUD
measurements = MeasurementCRUD
recommendations = RecommendationCRUD
recipes = RecipeCRUD

# Direct function aliases for common operations
get_user_goal = UserCRUD.get_goal

create_purchase = PurchaseCRUD.create
get_user_purchases = PurchaseCRUD.list_by_user
get_purchases_since = PurchaseCRUD.list_since

get_user_measurements = MeasurementCRUD.get

create_recommendation = RecommendationCRUD.create
get_user_recommendations = RecommendationCRUD.list_by_user

get_user_recipes = RecipeCRUD.list_by_user
replace_user_recipes = RecipeCRUD.replace_all

__all__ = [
    "UserCRUD",
    "PurchaseCRUD",
    "MeasurementCRUD",
    "RecommendationCRUD",
    "RecipeCRUD",
    "users",
    "purchases",
    "measurements",
    "recommendations",
    "recipes",
    "get_user_goal",
    "create_purchase",
    "get_user_purchases",
    "get_purchases_since",
    "get_user_measurements",
    "create_recommendation",
    "get_user_recommendations",
    "get_user_recipes",
    "replace_user_recipes",
]
