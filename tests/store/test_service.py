# ABOUTME: Tests for the storage service over the vector index and document store
# ABOUTME: Exercises persistence, history windows and preference-filtered similarity search

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from surfai.store.service import VectorStoreService, StorageError, recommendation_for_rating, describe_conditions
from surfai.weather.models import BreakType, DifficultyLevel, WaveQuality
from tests.factories import make_spot, make_conditions


@pytest.fixture
def service():
    return VectorStoreService()


class TestStoreAnalysis:
    """Tests for store_surf_analysis and store_document"""

    def test_vector_id_uses_spot_and_epoch_ms(self, service):
        ts = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

        vector_id = service.store_surf_analysis(make_spot("malibu-1"), make_conditions(), timestamp=ts)

        assert vector_id == f"malibu-1_{int(ts.timestamp() * 1000)}"
        assert service.index.count() == 1

    def test_metadata_carries_filter_fields(self, service):
        spot = make_spot(break_type=BreakType.REEF, difficulty=DifficultyLevel.ADVANCED)
        service.store_surf_analysis(spot, make_conditions(height_ft=5.0, rating=3))

        match = service.index.query(service.embed(spot, make_conditions()), top_k=1)[0]

        assert match.metadata["break_type"] == "reef_break"
        assert match.metadata["difficulty"] == "advanced"
        assert match.metadata["wave_height"] == 5.0
        assert match.metadata["conditions"]["waves"]["quality"] == "good"

    def test_index_failure_is_wrapped(self):
        index = MagicMock()
        index.upsert.side_effect = Exception("quota exceeded")

        with pytest.raises(StorageError, match="Vector storage failed: quota exceeded"):
            VectorStoreService(index=index).store_surf_analysis(make_spot(), make_conditions())

    def test_document_failure_is_wrapped(self):
        documents = MagicMock()
        documents.insert_one.side_effect = Exception("disk full")

        with pytest.raises(StorageError, match="Document storage failed"):
            VectorStoreService(documents=documents).store_document("test-1", make_conditions())


class TestHistory:
    """Tests for get_historical_conditions"""

    def test_returns_window_newest_first(self, service):
        now = datetime.now(timezone.utc)
        for days_ago, rating in ((1, 4), (3, 2), (10, 5)):
            ts = now - timedelta(days=days_ago)
            service.store_document("test-1", make_conditions(rating=rating, timestamp=ts), timestamp=ts)

        history = service.get_historical_conditions("test-1", days=7)

        assert [c.rating for c in history] == [4, 2]
        assert history[0].waves.quality == WaveQuality.GOOD

    def test_other_spots_excluded(self, service):
        service.store_document("other", make_conditions())

        assert service.get_historical_conditions("test-1") == []

    def test_failure_is_wrapped(self):
        documents = MagicMock()
        documents.find.side_effect = Exception("boom")

        with pytest.raises(StorageError, match="Historical data retrieval failed"):
            VectorStoreService(documents=documents).get_historical_conditions("test-1")


class TestSimilarity:
    """Tests for search_similar_conditions and get_surf_recommendations"""

    def test_only_same_break_type_and_difficulty(self, service):
        beach = make_spot("a", break_type=BreakType.BEACH)
        reef = make_spot("b", break_type=BreakType.REEF)
        service.store_surf_analysis(beach, make_conditions(height_ft=3.0))
        service.store_surf_analysis(reef, make_conditions(height_ft=6.0))

        results = service.search_similar_conditions(beach, make_conditions())

        assert len(results) == 1
        assert results[0].conditions.waves.height_ft == 3.0
        assert results[0].metadata["spot_id"] == "a"

    def test_without_conditions_uses_placeholder_query(self, service):
        spot = make_spot()
        service.store_surf_analysis(spot, make_conditions())

        results = service.search_similar_conditions(spot)

        assert len(results) == 1
        assert -1.0 <= results[0].similarity <= 1.0

    def test_limit(self, service):
        spot = make_spot()
        base = datetime(2025, 6, 1, tzinfo=timezone.utc)
        for i in range(4):
            service.store_surf_analysis(spot, make_conditions(), timestamp=base + timedelta(minutes=i))

        assert len(service.search_similar_conditions(spot, limit=2)) == 2

    def test_search_failure_is_wrapped(self):
        index = MagicMock()
        index.query.side_effect = Exception("timeout")

        with pytest.raises(StorageError, match="Similar conditions search failed"):
            VectorStoreService(index=index).search_similar_conditions(make_spot())

    def test_recommendations_respect_preferences(self, service):
        spot = make_spot()
        base = datetime(2025, 6, 1, tzinfo=timezone.utc)
        service.store_surf_analysis(spot, make_conditions(height_ft=3.0, wind_mph=8.0, rating=4), timestamp=base)
        service.store_surf_analysis(
            spot, make_conditions(height_ft=9.0, wind_mph=8.0), timestamp=base + timedelta(minutes=1)
        )
        service.store_surf_analysis(
            spot, make_conditions(height_ft=3.0, wind_mph=30.0), timestamp=base + timedelta(minutes=2)
        )

        results = service.get_surf_recommendations(spot, {
            "skill_level": "beginner",
            "preferred_wave_height": (2, 5),
            "preferred_wind_speed": (0, 15),
        })

        assert len(results) == 1
        assert results[0]["conditions"].waves.height_ft == 3.0
        assert results[0]["recommendation"] == "Excellent conditions! Perfect for beginner surfers."


@pytest.mark.parametrize("rating,text", [
    (5, "Excellent conditions! Perfect for intermediate surfers."),
    (3, "Good conditions for intermediate surfers."),
    (2, "Fair conditions. Suitable for intermediate surfers with experience."),
    (1, "Challenging conditions. Recommended for advanced surfers only."),
])
def test_recommendation_for_rating(rating, text):
    assert recommendation_for_rating(rating, "intermediate") == text


def test_description_mentions_key_readings():
    text = describe_conditions(make_spot(), make_conditions(height_ft=4.0, rating=4))

    assert "Spot: Test Beach" in text
    assert "Wave Height: 4.0ft" in text
    assert "Rating: 4/5" in text


def test_database_stats(service):
    service.store_surf_analysis(make_spot(), make_conditions())
    service.store_document("test-1", make_conditions())
    service.store_document("test-1", make_conditions())

    assert service.get_database_stats() == {"document_count": 2, "vector_count": 1}
