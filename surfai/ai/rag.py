# ABOUTME: Retrieval-then-generate service for surf spot knowledge
# ABOUTME: Assembles stored conditions and live weather into prompts for the LLM

import logging
from typing import Optional

from surfai.weather.models import SurfSpot, BreakType, DifficultyLevel, BestConditions
from surfai.weather.sources import WeatherClient
from surfai.store.service import VectorStoreService
from surfai.ai.llm_client import LLMClient, LLMServiceError, extract_json_object
from surfai.debug import debug_log

log = logging.getLogger(__name__)

NO_CONTEXT = "No historical context available."
NO_WEATHER = "Weather data unavailable."

KNOWLEDGE_SYSTEM_PROMPT = (
    "You are an expert surf analyst and oceanographer with deep knowledge of surf breaks, "
    "weather patterns, and ocean conditions. Provide detailed, accurate, and safety-focused surf analysis."
)

CONDITIONS_SYSTEM_PROMPT = (
    "You are a professional surf coach and safety expert. "
    "Provide detailed, accurate, and safety-focused surf analysis."
)

FALLBACK_CONDITIONS_ANALYSIS = {
    "recommendations": ["Check conditions before surfing", "Always surf with a buddy"],
    "safety_advice": ["Know your limits", "Check weather and tide conditions"],
}

DEMO_SPOT_RECOMMENDATIONS = [
    {
        "spot": "Malibu Surfrider Beach",
        "distance": 2.5,
        "conditions": "3-4ft waves, light winds, clean conditions",
        "recommendation": "Perfect for intermediate surfers",
    },
    {
        "spot": "Huntington Beach Pier",
        "distance": 5.2,
        "conditions": "2-3ft waves, moderate winds, good for beginners",
        "recommendation": "Great for learning and practice",
    },
]


class RAGService:
    """Builds context-enriched prompts from the stores and the weather feed"""

    def __init__(
        self,
        llm_client: LLMClient,
        vector_store: VectorStoreService,
        weather_client: WeatherClient,
    ):
        self.llm_client = llm_client
        self.vector_store = vector_store
        self.weather_client = weather_client

    def query_surf_knowledge(self, spot: SurfSpot) -> str:
        """
        Generate a surf guide for a spot from retrieved context

        Args:
            spot: Spot to describe

        Returns:
            Free-text guide from the model

        Raises:
            LLMServiceError: if the model call fails
        """
        context = self.retrieve_relevant_context(spot)
        weather = self.get_weather_context(spot.latitude, spot.longitude)

        prompt = f"""You are an expert surf analyst. Generate comprehensive surf knowledge for:

SPOT: {spot.name}
BREAK TYPE: {spot.break_type.value}
DIFFICULTY: {spot.difficulty.value}

HISTORICAL CONTEXT:
{context}

CURRENT WEATHER:
{weather}

Please provide:
1. Detailed analysis of this surf spot's characteristics
2. Best conditions for this break type
3. Safety considerations for the difficulty level
4. Equipment recommendations
5. Best times to surf
6. What to expect in different conditions

Format your response as a comprehensive surf guide."""

        try:
            return self.llm_client.generate_text(KNOWLEDGE_SYSTEM_PROMPT, prompt, temperature=0.7, max_tokens=1500) \
                or "Unable to generate surf knowledge."
        except LLMServiceError as e:
            raise LLMServiceError(f"RAG query failed: {e}") from e

    def query_surf_knowledge_by_name(self, spot_name: str, break_type: str, difficulty: str) -> str:
        """Knowledge query for a spot known only by name and category."""
        spot = SurfSpot(
            id="query-spot",
            name=spot_name,
            latitude=0.0,
            longitude=0.0,
            break_type=BreakType(break_type),
            difficulty=DifficultyLevel(difficulty),
            best_conditions=BestConditions((0, 0), (0, 0), (0, 0)),
        )
        return self.query_surf_knowledge(spot)

    def retrieve_relevant_context(self, spot: SurfSpot, limit: int = 5) -> str:
        """Similar stored conditions as prompt text; a fixed note when unavailable."""
        try:
            similar = self.vector_store.search_similar_conditions(spot, limit=limit)
        except Exception as e:
            log.warning(f"Context retrieval failed, using fallback: {e}")
            return NO_CONTEXT

        if not similar:
            return NO_CONTEXT

        blocks = []
        for result in similar:
            c = result.conditions
            blocks.append(
                "Similar conditions found:\n"
                f"- Wave Height: {c.waves.height_ft:.1f}ft\n"
                f"- Wave Period: {c.waves.period_s:.1f}s\n"
                f"- Wind Speed: {c.wind.speed_mph:.1f}mph\n"
                f"- Rating: {c.rating}/5\n"
                f"- Recommendations: {', '.join(c.recommendations)}"
            )
        debug_log(f"Retrieved {len(blocks)} context blocks for {spot.name}", "RAG")
        return "\n\n".join(blocks)

    def get_weather_context(self, lat: float, lon: float) -> str:
        try:
            weather = self.weather_client.get_current_weather(lat, lon)
            wind = self.weather_client.get_wind_data(lat, lon)
        except Exception as e:
            log.warning(f"Weather context retrieval failed: {e}")
            return NO_WEATHER

        return (
            "Current weather conditions:\n"
            f"- Temperature: {weather.temperature_f:.1f}°F\n"
            f"- Humidity: {weather.humidity_pct:.0f}%\n"
            f"- Pressure: {weather.pressure_hpa:.0f} hPa\n"
            f"- Wind Speed: {wind.speed_mph:.1f} mph\n"
            f"- Wind Direction: {wind.direction_deg:.0f}°\n"
            f"- Visibility: {weather.visibility_mi:.1f} miles\n"
            f"- UV Index: {weather.uv_index if weather.uv_index else 'N/A'}"
        )

    def query_surf_conditions(
        self,
        spot_id: str,
        wave_height: float,
        wind_speed: float,
        temperature: float,
        history_days: int = 30,
    ) -> dict:
        """
        Analyse specific conditions against similar history

        Returns:
            {"analysis": str, "recommendations": [...], "safety_advice": [...]}
        """
        historical = self.vector_store.get_historical_conditions(spot_id, history_days)
        similar = [
            h for h in historical
            if abs(h.waves.height_ft - wave_height) < 2 and abs(h.wind.speed_mph - wind_speed) < 10
        ][:5]

        history_text = "\n".join(
            f"- Wave Height: {h.waves.height_ft:.1f}ft, Wind Speed: {h.wind.speed_mph:.1f}mph, "
            f"Rating: {h.rating}/5, Recommendations: {', '.join(h.recommendations)}"
            for h in similar
        ) or NO_CONTEXT

        prompt = f"""Analyze these surf conditions for {spot_id}:

CURRENT CONDITIONS:
- Wave Height: {wave_height}ft
- Wind Speed: {wind_speed}mph
- Temperature: {temperature}°F

HISTORICAL CONTEXT:
{history_text}

Provide:
1. Detailed analysis of current conditions
2. Specific recommendations for surfers
3. Safety advice and warnings

Format as JSON with keys: analysis, recommendations (array), safety_advice (array)."""

        text = self.llm_client.generate_text(CONDITIONS_SYSTEM_PROMPT, prompt, temperature=0.6, max_tokens=1000)
        data = extract_json_object(text)
        if data is not None:
            return data

        log.warning("Conditions analysis JSON parsing failed, using fallback")
        return {"analysis": text, **{k: list(v) for k, v in FALLBACK_CONDITIONS_ANALYSIS.items()}}

    def get_spot_recommendations(self, user_location: Optional[tuple[float, float]] = None, preferences: Optional[dict] = None) -> list[dict]:
        """Nearby spot suggestions (fixed demo list)."""
        return [dict(rec) for rec in DEMO_SPOT_RECOMMENDATIONS]
