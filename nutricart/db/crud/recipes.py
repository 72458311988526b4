"""
CRUD operations for Recipes subcollection
"""
from typing import List
from datetime import datetime
import uuid

from nutricart.db.firestore import db
from nutricart.db.models import Recipe, RecipeCreate


class RecipeCRUD:
    """CRUD operations for a user's generated recipes."""

    USERS_COLLECTION = "users"
    RECIPES_SUBCOLLECTION = "recipes"

    @staticmethod
    def _collection(user_id: str):
        return (
            db.collection(RecipeCRUD.USERS_COLLECTION)
            .document(user_id)
            .collection(RecipeCRUD.RECIPES_SUBCOLLECTION)
        )

    @staticmethod
    def create(user_id: str, recipe_data: RecipeCreate) -> Recipe:
        """
        Create a new recipe.

        Args:
            user_id: User ID
            recipe_data: Recipe creation data

        Returns:
            Created recipe
        """
        doc_id = str(uuid.uuid4())

        recipe_dict = recipe_data.model_dump()
        recipe_dict.update({
            "id": doc_id,
            "user_id": user_id,
            "created_at": datetime.utcnow(),
        })

        RecipeCRUD._collection(user_id).document(doc_id).set(recipe_dict)

        return Recipe(**recipe_dict)

    @staticmethod
    def list_by_user(user_id: str) -> List[Recipe]:
        """
        List a user's recipes, newest first.

        Args:
            user_id: User ID

        Returns:
            List of recipes
        """
        docs = (
            RecipeCRUD._collection(user_id)
            .order_by("created_at", direction="DESCENDING")
            .get()
        )

        return [Recipe(**doc.to_dict()) for doc in docs]

    @staticmethod
    def delete_all(user_id: str) -> int:
        """
        Delete all recipes for a user.

        Args:
            user_id: User ID

        Returns:
            Number of recipes deleted
        """
        count = 0
        for doc in RecipeCRUD._collection(user_id).get():
            doc.reference.delete()
            count += 1

        return count

    @staticmethod
    def replace_all(user_id: str, recipes: List[RecipeCreate]) -> List[Recipe]:
        """Remove the user's old recipes and store the new batch."""
        RecipeCRUD.delete_all(user_id)
        return [RecipeCRUD.create(user_id, recipe) for recipe in recipes]
