"""
Read access to a user's body measurements (users/{uid}/meta/measurements)
"""
from typing import Optional

from nutricart.db.firestore import db
from nutricart.db.models import Measurement


class MeasurementCRUD:
    """Measurements are a single document per user."""

    USERS_COLLECTION = "users"
    META_SUBCOLLECTION = "meta"
    DOCUMENT_ID = "measurements"

    @staticmethod
    def get(user_id: str) -> Optional[Measurement]:
        """
        Get a user's measurements.

        Args:
            user_id: User ID

        Returns:
            Measurement if recorded, None otherwise
        """
        doc = (
            db.collection(MeasurementCRUD.USERS_COLLECTION)
            .document(user_id)
            .collection(MeasurementCRUD.META_SUBCOLLECTION)
            .document(MeasurementCRUD.DOCUMENT_ID)
            .get()
        )

        if doc.exists:
            data = doc.to_dict() or {}
            data.setdefault("user_id", user_id)
            return Measurement(**data)
        return None
