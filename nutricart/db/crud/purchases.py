"""
CRUD operations for Purchases subcollection
"""
from typing import List
from datetime import datetime
import uuid
from google.cloud.firestore_v1 import FieldFilter

from nutricart.db.firestore import db
from nutricart.db.models import Purchase, PurchaseCreate


class PurchaseCRUD:
    """CRUD operations for user purchases subcollection."""

    USERS_COLLECTION = "users"
    PURCHASES_SUBCOLLECTION = "purchases"

    @staticmethod
    def _collection(user_id: str):
        return (
            db.collection(PurchaseCRUD.USERS_COLLECTION)
            .document(user_id)
            .collection(PurchaseCRUD.PURCHASES_SUBCOLLECTION)
        )

    @staticmethod
    def create(user_id: str, purchase_data: PurchaseCreate) -> Purchase:
        """
        Create a new purchase for a user.

        Args:
            user_id: User ID
            purchase_data: Purchase creation data

        Returns:
            Created purchase
        """
        purchase_id = str(uuid.uuid4())
        now = datetime.utcnow()

        purchase_dict = {
            "id": purchase_id,
            "user_id": user_id,
            "date": purchase_data.date or now,
            "items": [item.model_dump() for item in purchase_data.items],
            "total_amount": purchase_data.total_amount,
            "created_at": now,
        }

        PurchaseCRUD._collection(user_id).document(purchase_id).set(purchase_dict)

        return Purchase(**purchase_dict)

    @staticmethod
    def list_by_user(user_id: str, limit: int = 10) -> List[Purchase]:
        """
        List the most recent purchases for a user.

        Args:
            user_id: User ID
            limit: Maximum number of purchases to return

        Returns:
            List of purchases ordered by date (newest first)
        """
        docs = (
            PurchaseCRUD._collection(user_id)
            .order_by("date", direction="DESCENDING")
            .limit(limit)
            .get()
        )

        return [Purchase(**doc.to_dict()) for doc in docs]

    @staticmethod
    def list_since(user_id: str, since: datetime) -> List[Purchase]:
        """
        List purchases made on or after a given date.

        Args:
            user_id: User ID
            since: Earliest purchase date to include

        Returns:
            List of purchases ordered by date (newest first)
        """
        docs = (
            PurchaseCRUD._collection(user_id)
            .where(filter=FieldFilter("date", ">=", since))
            .order_by("date", direction="DESCENDING")
            .get()
        )

        return [Purchase(**doc.to_dict()) for doc in docs]
