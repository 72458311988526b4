"""
CRUD operations for User collection
"""
from typing import Optional

from nutricart.db.firestore import db
from nutricart.db.models import User, HealthGoal


class UserCRUD:
    """Read access to the users collection."""

    COLLECTION = "users"

    @staticmethod
    def get(user_id: str) -> Optional[User]:
        """
        Get a user by ID.

        Args:
            user_id: User ID

        Returns:
            User if found, None otherwise
        """
        doc = db.collection(UserCRUD.COLLECTION).document(user_id).get()

        if doc.exists:
            return User(**doc.to_dict())
        return None

    @staticmethod
    def get_goal(user_id: str) -> HealthGoal:
        """Return the user's health goal, health_improvement when unknown."""
        user = UserCRUD.get(user_id)
        if user is None:
            return HealthGoal.HEALTH_IMPROVEMENT
        return user.goal
