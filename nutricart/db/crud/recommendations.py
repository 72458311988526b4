"""
CRUD operations for Recommendations subcollection
"""
from typing import List
from datetime import datetime
import uuid

from nutricart.db.firestore import db
from nutricart.db.models import Recommendation, RecommendationCreate


class RecommendationCRUD:
    """CRUD operations for nutrition recommendations subcollection."""

    USERS_COLLECTION = "users"
    RECOMMENDATIONS_SUBCOLLECTION = "recommendations"

    @staticmethod
    def create(user_id: str, recommendation_data: RecommendationCreate) -> Recommendation:
        """
        Create a new recommendation.

        Args:
            user_id: User ID
            recommendation_data: Recommendation creation data

        Returns:
            Created recommendation
        """
        recommendation_id = str(uuid.uuid4())
        now = datetime.utcnow()

        recommendation_dict = {
            "id": recommendation_id,
            "user_id": user_id,
            "recommendations": [
                entry.model_dump(mode="json") for entry in recommendation_data.recommendations
            ],
            "summary": recommendation_data.summary,
            "date": now,
        }

        db.collection(RecommendationCRUD.USERS_COLLECTION).document(user_id).collection(
            RecommendationCRUD.RECOMMENDATIONS_SUBCOLLECTION
        ).document(recommendation_id).set(recommendation_dict)

        return Recommendation(**recommendation_dict)

    @staticmethod
    def list_by_user(user_id: str, limit: int = 20) -> List[Recommendation]:
        """
        List all recommendations for a user.

        Args:
            user_id: User ID
            limit: Maximum number of recommendations to return

        Returns:
            List of recommendations ordered by date (newest first)
        """
        docs = (
            db.collection(RecommendationCRUD.USERS_COLLECTION)
            .document(user_id)
            .collection(RecommendationCRUD.RECOMMENDATIONS_SUBCOLLECTION)
            .order_by("date", direction="DESCENDING")
            .limit(limit)
            .get()
        )

        return [Recommendation(**doc.to_dict()) for doc in docs]
