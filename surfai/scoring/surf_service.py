# ABOUTME: Surf analysis service combining weather reads, wave synthesis and scoring
# ABOUTME: Produces one SurfConditions snapshot per call and mock best-time windows

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from surfai.weather.models import SurfConditions, SurfSpot, TideData
from surfai.weather.sources import WeatherClient
from surfai.weather.waves import WaveSynthesizer
from surfai.scoring.calculator import ScoreCalculator
from surfai.scoring.recommender import SurfRecommender
from surfai.debug import debug_log

log = logging.getLogger(__name__)

DEFAULT_TIDE_HEIGHT_FT = 3.0


class SurfAnalysisError(Exception):
    """Raised when a surf analysis cannot be completed."""


class SurfService:
    """Analyzes surf conditions for a spot"""

    def __init__(
        self,
        weather_client: WeatherClient,
        wave_synthesizer: Optional[WaveSynthesizer] = None,
        calculator: Optional[ScoreCalculator] = None,
        recommender: Optional[SurfRecommender] = None,
    ):
        self.weather_client = weather_client
        self.calculator = calculator or ScoreCalculator()
        self.wave_synthesizer = wave_synthesizer or WaveSynthesizer(calculator=self.calculator)
        self.recommender = recommender or SurfRecommender()

    async def fetch_readings(self, spot: SurfSpot):
        """Fetch weather, wind and tides concurrently."""
        lat, lon = spot.latitude, spot.longitude
        return await asyncio.gather(
            asyncio.to_thread(self.weather_client.get_current_weather, lat, lon),
            asyncio.to_thread(self.weather_client.get_wind_data, lat, lon),
            asyncio.to_thread(self.weather_client.get_tide_data, lat, lon),
        )

    async def analyze_surf_conditions(self, spot: SurfSpot) -> SurfConditions:
        """
        Analyze current surf conditions for a spot

        Args:
            spot: Spot to analyze

        Returns:
            SurfConditions snapshot with rating and recommendations

        Raises:
            SurfAnalysisError: if any read or computation fails
        """
        try:
            weather, wind, tides = await self.fetch_readings(spot)

            now = datetime.now(timezone.utc)
            tide = tides[0] if tides else TideData(height_ft=DEFAULT_TIDE_HEIGHT_FT, time=now, tide_type="high")

            waves = self.wave_synthesizer.generate(wind, tide)
            score = self.calculator.score_conditions(waves.height_ft, waves.period_s, wind.speed_mph)
            waves.quality = score.quality

            recommendations = self.recommender.recommend(waves, wind, weather, spot)
            debug_log(f"{spot.name}: {score.points} pts, {score.quality.value}, {score.rating}/5", "SURF")

            return SurfConditions(
                location=spot.name,
                timestamp=now,
                waves=waves,
                wind=wind,
                tide=tide,
                weather=weather,
                rating=score.rating,
                recommendations=recommendations,
            )
        except Exception as e:
            log.error(f"Surf analysis failed for {spot.id}: {e}")
            raise SurfAnalysisError(f"Failed to analyze surf conditions: {e}") from e

    def get_best_surf_times(self, spot: SurfSpot, days: int = 3) -> list[dict]:
        """
        Best surf windows per day.

        Mock schedule: clean early mornings, windier afternoons.
        """
        today = datetime.now(timezone.utc)
        best_times = []
        for i in range(days):
            best_times.append({
                "date": (today + timedelta(days=i)).date(),
                "morning": {
                    "time": "6:00 AM",
                    "rating": 4,
                    "conditions": "Clean conditions, light winds",
                },
                "afternoon": {
                    "time": "4:00 PM",
                    "rating": 3,
                    "conditions": "Moderate winds, good wave quality",
                },
            })
        return best_times
