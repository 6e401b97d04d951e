# ABOUTME: Canned advisory strings triggered by wave, wind, weather and skill thresholds
# ABOUTME: Every rule appends independently; the wave-size comment is always present

from surfai.weather.models import WaveData, WindData, WeatherData, SurfSpot, DifficultyLevel


class SurfRecommender:
    """Maps threshold breaches to recommendation text"""

    def recommend(self, waves: WaveData, wind: WindData, weather: WeatherData, spot: SurfSpot) -> list[str]:
        """
        Build recommendations for the given readings

        Args:
            waves: Wave reading
            wind: Wind reading
            weather: Weather reading
            spot: Spot being surfed

        Returns:
            List of advisory strings in evaluation order (never empty)
        """
        recommendations = []

        # Wave size
        if waves.height_ft < 2:
            recommendations.append("Waves are quite small - good for beginners or longboarding")
        elif waves.height_ft > 8:
            recommendations.append("Large waves - experienced surfers only")
        else:
            recommendations.append("Good wave size for most skill levels")

        # Wind
        if wind.speed_mph > 20:
            recommendations.append("Strong winds - conditions may be choppy")
        elif wind.speed_mph < 10:
            recommendations.append("Light winds - clean conditions expected")

        # Weather
        if weather.uv_index > 7:
            recommendations.append("High UV index - wear sunscreen and protective gear")
        if weather.temperature_f < 60:
            recommendations.append("Cold water - consider wearing a wetsuit")

        # Skill level vs. size
        if spot.difficulty == DifficultyLevel.BEGINNER and waves.height_ft > 4:
            recommendations.append("Waves may be too large for beginners")
        if spot.difficulty == DifficultyLevel.EXPERT and waves.height_ft < 2:
            recommendations.append("Waves may be too small for advanced surfers")

        return recommendations
