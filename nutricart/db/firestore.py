"""
Firestore database configuration and initialization
"""
import copy
import operator
import os
import uuid
from typing import Any, Dict, List, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


_OPERATORS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda value, options: value in options,
    "array_contains": lambda value, item: isinstance(value, list) and item in value,
}


class MockFirestoreClient:
    """In-memory Firestore stand-in for development and tests.

    Documents live in a dict keyed by collection path, so nested
    subcollections (``users/{uid}/purchases``) behave like the real client
    for the calls the CRUD layer makes.
    """

    def __init__(self):
        self._store: Dict[str, Dict[str, dict]] = {}

    def collection(self, name):
        return MockCollection(self._store, name)

    def document(self, path):
        parent, doc_id = path.rsplit("/", 1)
        return MockDocument(self._store, parent, doc_id)

    def reset(self):
        self._store.clear()


class MockCollection:
    """Mock Firestore collection / query"""

    def __init__(self, store, path, filters=None, order=None, max_results=None):
        self._store = store
        self._path = path
        self._filters = filters or []
        self._order = order or []
        self._limit = max_results

    def _derive(self, **changes):
        params = {
            "filters": list(self._filters),
            "order": list(self._order),
            "max_results": self._limit,
        }
        params.update(changes)
        return MockCollection(self._store, self._path, **params)

    def document(self, doc_id=None):
        return MockDocument(self._store, self._path, doc_id or uuid.uuid4().hex)

    def add(self, data):
        doc = self.document()
        doc.set(data)
        return None, doc

    def where(self, field_path=None, op_string=None, value=None, *, filter=None):
        if filter is not None:
            field_path, op_string, value = filter.field_path, filter.op_string, filter.value
        return self._derive(filters=self._filters + [(field_path, op_string, value)])

    def order_by(self, field_path, direction="ASCENDING"):
        return self._derive(order=self._order + [(field_path, str(direction).upper() == "DESCENDING")])

    def limit(self, count):
        return self._derive(max_results=count)

    def get(self) -> List["MockDocSnapshot"]:
        docs = self._store.get(self._path, {})
        rows = []
        for doc_id, data in docs.items():
            if all(
                field in data and _OPERATORS[op](data[field], value)
                for field, op, value in self._filters
            ):
                rows.append((doc_id, data))

        for field, descending in reversed(self._order):
            rows.sort(key=lambda row: (row[1].get(field) is None, row[1].get(field)), reverse=descending)

        if self._limit is not None:
            rows = rows[: self._limit]

        return [
            MockDocSnapshot(doc_id, data, MockDocument(self._store, self._path, doc_id))
            for doc_id, data in rows
        ]

    def stream(self):
        return iter(self.get())


class MockDocSnapshot:
    """Mock Firestore document snapshot"""

    def __init__(self, doc_id: str, data: Optional[dict], reference: "MockDocument"):
        self.id = doc_id
        self._data = data
        self.reference = reference

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._data) if self._data is not None else None


class MockDocument:
    """Mock Firestore document"""

    def __init__(self, store, parent_path: str, doc_id: str):
        self._store = store
        self._parent = parent_path
        self.id = doc_id

    @property
    def path(self) -> str:
        return f"{self._parent}/{self.id}"

    def collection(self, name):
        return MockCollection(self._store, f"{self.path}/{name}")

    def get(self):
        data = self._store.get(self._parent, {}).get(self.id)
        return MockDocSnapshot(self.id, data, self)

    def set(self, data, merge=False):
        docs = self._store.setdefault(self._parent, {})
        if merge and self.id in docs:
            docs[self.id].update(copy.deepcopy(data))
        else:
            docs[self.id] = copy.deepcopy(data)
        return None

    def update(self, data):
        docs = self._store.get(self._parent, {})
        if self.id not in docs:
            raise KeyError(f"No document to update: {self.path}")
        docs[self.id].update(copy.deepcopy(data))
        return None

    def delete(self):
        self._store.get(self._parent, {}).pop(self.id, None)
        return None


def initialize_firestore():
    """
    Initialize Firestore database connection.

    Returns:
        Firestore client instance, or the in-memory mock when Firebase is
        not configured (or USE_MOCK_FIRESTORE=true)
    """
    if os.getenv("USE_MOCK_FIRESTORE", "false").lower() == "true":
        print("🔄 USE_MOCK_FIRESTORE is set, using in-memory document store")
        return MockFirestoreClient()

    try:
        # Check if Firebase is already initialized
        if not firebase_admin._apps:
            service_account_path = os.getenv("FIREBASE_SERVICE_ACCOUNT_PATH")

            if service_account_path and os.path.exists(service_account_path):
                print(f"Initializing Firebase with service account: {service_account_path}")
                cred = credentials.Certificate(service_account_path)
                firebase_admin.initialize_app(cred)
            else:
                print("No service account found, trying default credentials...")
                project_id = os.getenv("FIREBASE_PROJECT_ID")
                if project_id:
                    firebase_admin.initialize_app(options={'projectId': project_id})
                else:
                    firebase_admin.initialize_app()

        client = firestore.client()
        print("✅ Firestore initialized successfully")
        return client
    except Exception as e:
        print(f"❌ Could not initialize Firestore: {e}")
        print("📝 To fix this:")
        print("   1. Download your Firebase service account key from Firebase Console")
        print("   2. Set FIREBASE_SERVICE_ACCOUNT_PATH in the .env file")
        print("🔄 Using in-memory document store for now...")
        return MockFirestoreClient()


# Global Firestore client instance
db = initialize_firestore()
