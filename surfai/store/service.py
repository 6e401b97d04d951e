# ABOUTME: Storage service pairing the vector index with the document store
# ABOUTME: Persists analyses, serves history and finds similar past conditions

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from surfai.weather.models import SurfConditions, SurfSpot, placeholder_conditions
from surfai.store.documents import DocumentStore
from surfai.store.vector_store import VectorIndex, InMemoryVectorIndex, hash_embedding, DEFAULT_DIMENSIONS

log = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a store operation fails."""


@dataclass
class SimilarConditions:
    """Past conditions returned by similarity search"""
    conditions: SurfConditions
    similarity: float
    metadata: dict[str, Any]


def describe_conditions(spot: SurfSpot, conditions: SurfConditions) -> str:
    """Text representation that gets embedded."""
    return f"""
        Spot: {spot.name}
        Break Type: {spot.break_type.value}
        Difficulty: {spot.difficulty.value}
        Wave Height: {conditions.waves.height_ft:.1f}ft
        Wave Period: {conditions.waves.period_s:.1f}s
        Wave Direction: {conditions.waves.direction_deg:.0f}°
        Wave Quality: {conditions.waves.quality.value}
        Wind Speed: {conditions.wind.speed_mph:.1f}mph
        Wind Direction: {conditions.wind.direction_deg:.0f}°
        Temperature: {conditions.weather.temperature_f:.0f}°F
        Humidity: {conditions.weather.humidity_pct:.0f}%
        Tide Height: {conditions.tide.height_ft:.1f}ft
        Rating: {conditions.rating}/5
    """


def recommendation_for_rating(rating: int, skill_level: str) -> str:
    if rating >= 4:
        return f"Excellent conditions! Perfect for {skill_level} surfers."
    if rating >= 3:
        return f"Good conditions for {skill_level} surfers."
    if rating >= 2:
        return f"Fair conditions. Suitable for {skill_level} surfers with experience."
    return "Challenging conditions. Recommended for advanced surfers only."


class VectorStoreService:
    """Stores surf analyses and answers history / similarity queries"""

    def __init__(
        self,
        index: Optional[VectorIndex] = None,
        documents: Optional[DocumentStore] = None,
        dimensions: int = DEFAULT_DIMENSIONS,
    ):
        self.dimensions = dimensions
        self.index = index or InMemoryVectorIndex(dimensions)
        self.documents = documents or DocumentStore()

    def embed(self, spot: SurfSpot, conditions: SurfConditions) -> list[float]:
        return hash_embedding(describe_conditions(spot, conditions), self.dimensions)

    def store_surf_analysis(
        self,
        spot: SurfSpot,
        conditions: SurfConditions,
        analysis: Any = None,
        timestamp: Optional[datetime] = None,
    ) -> str:
        """
        Embed conditions and upsert them into the vector index.

        Returns:
            The vector id ("<spot_id>_<epoch ms>")
        """
        timestamp = timestamp or datetime.now(timezone.utc)
        vector_id = f"{spot.id}_{int(timestamp.timestamp() * 1000)}"
        try:
            self.index.upsert(vector_id, self.embed(spot, conditions), {
                "spot_id": spot.id,
                "spot_name": spot.name,
                "timestamp": timestamp.isoformat(),
                "wave_height": conditions.waves.height_ft,
                "wave_period": conditions.waves.period_s,
                "wind_speed": conditions.wind.speed_mph,
                "rating": conditions.rating,
                "break_type": spot.break_type.value,
                "difficulty": spot.difficulty.value,
                "conditions": conditions.to_dict(),
            })
        except Exception as e:
            raise StorageError(f"Vector storage failed: {e}") from e

        log.info(f"Stored surf analysis vector {vector_id}")
        return vector_id

    def store_document(
        self,
        spot_id: str,
        conditions: SurfConditions,
        analysis: Any = None,
        timestamp: Optional[datetime] = None,
    ) -> None:
        """Insert the conditions and analysis into the document store."""
        try:
            self.documents.insert_one({
                "spot_id": spot_id,
                "conditions": conditions.to_dict(),
                "analysis": analysis,
                "timestamp": timestamp or datetime.now(timezone.utc),
            })
        except Exception as e:
            raise StorageError(f"Document storage failed: {e}") from e

        log.info(f"Stored surf document for {spot_id}")

    def get_historical_conditions(self, spot_id: str, days: int = 7) -> list[SurfConditions]:
        """Conditions stored for a spot in the last `days` days, newest first."""
        since = datetime.now(timezone.utc) - timedelta(days=days)
        try:
            return [SurfConditions.from_dict(doc["conditions"]) for doc in self.documents.find(spot_id, since)]
        except Exception as e:
            raise StorageError(f"Historical data retrieval failed: {e}") from e

    def search_similar_conditions(
        self,
        spot: SurfSpot,
        conditions: Optional[SurfConditions] = None,
        limit: int = 5,
    ) -> list[SimilarConditions]:
        """
        Past conditions most similar to `conditions`, same break type and difficulty.
        """
        conditions = conditions or placeholder_conditions(spot.name)
        try:
            matches = self.index.query(
                self.embed(spot, conditions),
                top_k=limit,
                filter={
                    "break_type": spot.break_type.value,
                    "difficulty": spot.difficulty.value,
                },
            )
            return [
                SimilarConditions(
                    conditions=SurfConditions.from_dict(match.metadata["conditions"]),
                    similarity=match.score,
                    metadata=match.metadata,
                )
                for match in matches
            ]
        except Exception as e:
            raise StorageError(f"Similar conditions search failed: {e}") from e

    def get_surf_recommendations(self, spot: SurfSpot, preferences: dict) -> list[dict]:
        """
        Similar past conditions that fit the surfer's preferences

        Args:
            spot: Spot to search around
            preferences: {"skill_level": str,
                          "preferred_wave_height": (min, max),
                          "preferred_wind_speed": (min, max)}

        Returns:
            Up to 5 dicts with spot, conditions, match_score and recommendation,
            best match first
        """
        min_height, max_height = preferences["preferred_wave_height"]
        min_wind, max_wind = preferences["preferred_wind_speed"]
        skill_level = preferences.get("skill_level", "intermediate")

        results = []
        for result in self.search_similar_conditions(spot):
            c = result.conditions
            if not (min_height <= c.waves.height_ft <= max_height and min_wind <= c.wind.speed_mph <= max_wind):
                continue
            results.append({
                "spot": spot,
                "conditions": c,
                "match_score": result.similarity,
                "recommendation": recommendation_for_rating(c.rating, skill_level),
            })

        results.sort(key=lambda r: r["match_score"], reverse=True)
        return results[:5]

    def get_database_stats(self) -> dict:
        try:
            return {
                "document_count": self.documents.count(),
                "vector_count": self.index.count(),
            }
        except Exception as e:
            raise StorageError(f"Database stats retrieval failed: {e}") from e
