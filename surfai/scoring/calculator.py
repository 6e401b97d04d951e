# ABOUTME: Rule-based scoring for wave quality and the overall 1-5 surf rating
# ABOUTME: Additive point bands for height, period and wind, mapped to quality labels

import logging
from dataclasses import dataclass

from surfai.weather.models import WaveQuality

log = logging.getLogger(__name__)

RATING_MIN = 1
RATING_MAX = 5

# Minimum points for each quality label, highest band first
QUALITY_BANDS = [
    (8, WaveQuality.EXCELLENT),
    (6, WaveQuality.GOOD),
    (4, WaveQuality.FAIR),
]


@dataclass(frozen=True)
class SurfScore:
    """Result of one scoring pass"""
    points: int           # 0-9
    quality: WaveQuality
    rating: int           # 1-5


class ScoreCalculator:
    """Scores wave quality and overall surf rating"""

    def score_conditions(self, height: float, period: float, wind_speed: float) -> SurfScore:
        """
        Score a reading in one pass.

        The rating reuses the quality computed here, so callers never see a
        rating and a quality derived from different inputs.

        Args:
            height: Wave height in feet
            period: Wave period in seconds
            wind_speed: Wind speed in mph

        Returns:
            SurfScore with points (0-9), quality and rating (1-5)
        """
        points = self.score_waves(height, period, wind_speed)
        quality = self._quality_for_points(points)
        rating = self.calculate_rating(height, period, wind_speed, quality)
        log.debug(f"Scored {height:.1f}ft @ {period:.1f}s, {wind_speed:.1f}mph -> {points} pts, {quality.value}, {rating}/5")
        return SurfScore(points=points, quality=quality, rating=rating)

    def score_waves(self, height: float, period: float, wind_speed: float) -> int:
        """
        Additive point score, 0-9.

        Inputs are scored literally; negative values simply earn no points.
        """
        score = 0

        # Height (2-6 ft is ideal)
        if 2 <= height <= 6:
            score += 3
        elif 1.5 <= height <= 8:
            score += 2
        elif 1 <= height <= 10:
            score += 1

        # Period (longer is cleaner)
        if period >= 12:
            score += 3
        elif period >= 8:
            score += 2
        elif period >= 6:
            score += 1

        # Wind (lighter is better)
        if wind_speed <= 10:
            score += 3
        elif wind_speed <= 15:
            score += 2
        elif wind_speed <= 20:
            score += 1

        return score

    def assess_wave_quality(self, height: float, period: float, wind_speed: float) -> WaveQuality:
        return self._quality_for_points(self.score_waves(height, period, wind_speed))

    def calculate_rating(self, height: float, period: float, wind_speed: float, quality: WaveQuality) -> int:
        """
        Overall 1-5 rating.

        Starts at 1 and gains a point for each of: height 3-6 ft, period >= 10 s,
        good/excellent quality, wind <= 15 mph. Always clamped to 1-5.
        """
        rating = RATING_MIN

        if 3 <= height <= 6:
            rating += 1
        if period >= 10:
            rating += 1
        if quality in (WaveQuality.GOOD, WaveQuality.EXCELLENT):
            rating += 1
        if wind_speed <= 15:
            rating += 1

        return max(RATING_MIN, min(RATING_MAX, rating))

    def _quality_for_points(self, points: int) -> WaveQuality:
        for minimum, quality in QUALITY_BANDS:
            if points >= minimum:
                return quality
        return WaveQuality.POOR
