# ABOUTME: In-process document store for analysed surf conditions
# ABOUTME: Supports insert and query by spot id within a time window, newest first

import copy
from datetime import datetime, timezone
from typing import Any, Optional


class DocumentStore:
    """
    Single-collection document store.

    Documents are plain dicts carrying at least "spot_id" and a timezone-aware
    "timestamp". Stored and returned documents are copies.
    """

    def __init__(self, collection: str = "surf_conditions"):
        self.collection = collection
        self._documents: list[dict[str, Any]] = []

    def insert_one(self, document: dict[str, Any]) -> None:
        """Store a document, stamping created_at."""
        if "spot_id" not in document or "timestamp" not in document:
            raise ValueError("Document requires 'spot_id' and 'timestamp'")
        stored = copy.deepcopy(document)
        stored["created_at"] = datetime.now(timezone.utc)
        self._documents.append(stored)

    def find(self, spot_id: str, since: Optional[datetime] = None) -> list[dict[str, Any]]:
        """
        Documents for a spot, newest first

        Args:
            spot_id: Spot identifier to match
            since: Only documents with timestamp >= since (all when None)
        """
        matches = [
            doc for doc in self._documents
            if doc["spot_id"] == spot_id and (since is None or doc["timestamp"] >= since)
        ]
        matches.sort(key=lambda doc: doc["timestamp"], reverse=True)
        return copy.deepcopy(matches)

    def count(self) -> int:
        return len(self._documents)

    def clear(self) -> None:
        self._documents = []
