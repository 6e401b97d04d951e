# ABOUTME: LLM client for surf analysis, forecasts and personalized advice
# ABOUTME: Uses Google Gemini; replies are parsed best-effort with fixed fallbacks

import copy
import json
import logging
import re
from typing import Optional

import google.generativeai as genai

from surfai.weather.models import SurfConditions, SurfSpot, SurfAnalysis, WeatherData, WindData, as_str_list
from surfai.debug import debug_log

log = logging.getLogger(__name__)

# First "{" through last "}" - greedy on purpose, models wrap JSON in prose
JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")

DEFAULT_ANALYSIS = {
    "analysis": "AI analysis unavailable - showing standard guidance.",
    "recommendations": [
        "Check conditions before surfing",
        "Always surf with a buddy",
    ],
    "confidence": 5,
    "best_time": "Morning (6-10 AM)",
}

DEFAULT_FORECAST = {
    "forecast": "Forecast unavailable.",
    "best_days": [],
    "warnings": [],
}

DEFAULT_PERSONALIZED = {
    "recommendations": ["Check conditions before surfing"],
    "safety_advice": ["Always check conditions before surfing"],
    "equipment_suggestions": ["Appropriate wetsuit for water temperature"],
    "alternative_spots": [],
}

ANALYST_PERSONA = (
    "You are an expert surf analyst and oceanographer with 20+ years of experience. "
    "You specialize in analyzing surf conditions, wave forecasting, and providing personalized "
    "recommendations for surfers of all skill levels."
)

FORECASTER_PERSONA = (
    "You are a professional surf forecaster with expertise in meteorology, oceanography, "
    "and surf science. You predict surf conditions days in advance from weather patterns, "
    "swell models, and historical data."
)

COACH_PERSONA = (
    "You are a personal surf coach and safety expert. You provide tailored advice based on "
    "individual skill levels, preferences, and current conditions, and you always put safety first."
)


class LLMServiceError(Exception):
    """Raised when the language model call itself fails."""


def extract_json_object(text: str) -> Optional[dict]:
    """
    Pull the first brace-delimited JSON object out of free text.

    Returns:
        Parsed dict, or None when no object is found or it does not parse.
    """
    match = JSON_OBJECT_PATTERN.search(text or "")
    if not match:
        return None
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        debug_log(f"JSON decode failed: {e}", "LLM")
        return None
    return data if isinstance(data, dict) else None


def _log_fallback(text: str, kind: str) -> None:
    log.warning(f"Could not parse {kind} response, using defaults. Preview: {(text or '')[:200]!r}")


def _as_list(value) -> list:
    if isinstance(value, str):
        return [value]
    return value if isinstance(value, list) else []


def parse_analysis_response(text: str) -> dict:
    """Parse a surf analysis reply; DEFAULT_ANALYSIS on failure."""
    data = extract_json_object(text)
    if data is None:
        _log_fallback(text, "analysis")
        return copy.deepcopy(DEFAULT_ANALYSIS)
    return data


def parse_forecast_response(text: str) -> dict:
    """
    Parse a forecast reply.

    Unparseable replies keep their text as the forecast summary. List fields
    are normalised so callers can iterate them.
    """
    data = extract_json_object(text)
    if data is None:
        _log_fallback(text, "forecast")
        fallback = copy.deepcopy(DEFAULT_FORECAST)
        if text and text.strip():
            fallback["forecast"] = text.strip()
        return fallback
    return {
        **data,
        "forecast": str(data.get("forecast") or DEFAULT_FORECAST["forecast"]),
        "best_days": _as_list(data.get("best_days")),
        "warnings": as_str_list(data.get("warnings")),
    }


def parse_personalized_response(text: str) -> dict:
    """Parse a personalized recommendations reply; raw text becomes the only recommendation on failure."""
    data = extract_json_object(text)
    if data is None:
        _log_fallback(text, "personalized")
        fallback = copy.deepcopy(DEFAULT_PERSONALIZED)
        if text and text.strip():
            fallback["recommendations"] = [text.strip()]
        return fallback
    return {
        **data,
        "recommendations": as_str_list(data.get("recommendations")),
        "safety_advice": as_str_list(data.get("safety_advice")),
        "equipment_suggestions": as_str_list(data.get("equipment_suggestions")),
        "alternative_spots": _as_list(data.get("alternative_spots")),
    }


def _format_history(historical: Optional[list[SurfConditions]]) -> str:
    if not historical:
        return ""
    lines = [
        f"- {h.timestamp:%Y-%m-%d}: {h.waves.height_ft:.1f}ft, {h.wind.speed_mph:.1f}mph wind, rating: {h.rating}/5"
        for h in historical
    ]
    return f"HISTORICAL DATA (last {len(historical)} records):\n" + "\n".join(lines)


class LLMClient:
    """Client for surf analysis via the Gemini API"""

    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash-lite"):
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self.model = genai.GenerativeModel(model_name)
        self._persona_models: dict[str, object] = {}

    def _model_for(self, system_prompt: Optional[str]):
        if not system_prompt:
            return self.model
        if system_prompt not in self._persona_models:
            self._persona_models[system_prompt] = genai.GenerativeModel(
                self.model_name, system_instruction=system_prompt
            )
        return self._persona_models[system_prompt]

    def _complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        json_output: bool = False,
    ) -> str:
        config_kwargs = {"temperature": temperature, "max_output_tokens": max_tokens}
        if json_output:
            config_kwargs["response_mime_type"] = "application/json"

        debug_log(f"Prompt length: {len(prompt)} chars", "LLM")
        response = self._model_for(system_prompt).generate_content(
            prompt,
            generation_config=genai.GenerationConfig(**config_kwargs),
        )
        text = response.text or ""
        debug_log(f"Response length: {len(text)} chars", "LLM")
        return text

    def generate_text(self, system_prompt: str, prompt: str, temperature: float = 0.7, max_tokens: int = 1500) -> str:
        """Plain text completion."""
        try:
            return self._complete(prompt, system_prompt, temperature, max_tokens)
        except Exception as e:
            raise LLMServiceError(f"Text generation failed: {e}") from e

    def analyze_surf_conditions(
        self,
        conditions: SurfConditions,
        spot: SurfSpot,
        historical: Optional[list[SurfConditions]] = None,
    ) -> SurfAnalysis:
        """
        Generate an AI analysis of current conditions

        Args:
            conditions: Current analysed conditions
            spot: Spot the conditions belong to
            historical: Optional recent conditions for context

        Returns:
            SurfAnalysis (fallback defaults when the reply cannot be parsed)

        Raises:
            LLMServiceError: if the model call fails
        """
        prompt = self.build_analysis_prompt(conditions, spot, historical)
        try:
            text = self._complete(prompt, ANALYST_PERSONA, temperature=0.7, max_tokens=1000, json_output=True)
        except Exception as e:
            raise LLMServiceError(f"Surf analysis failed: {e}") from e
        return SurfAnalysis.from_dict(parse_analysis_response(text))

    def generate_surf_forecast(
        self,
        spot: SurfSpot,
        weather: list[WeatherData],
        wind: list[WindData],
        historical: list[SurfConditions],
    ) -> dict:
        """Generate a multi-day forecast with best days and warnings."""
        prompt = self.build_forecast_prompt(spot, weather, wind, historical)
        try:
            text = self._complete(prompt, FORECASTER_PERSONA, temperature=0.6, max_tokens=1200, json_output=True)
        except Exception as e:
            raise LLMServiceError(f"Forecast generation failed: {e}") from e
        return parse_forecast_response(text)

    def generate_personalized_recommendations(self, spot: SurfSpot, conditions: SurfConditions, profile: dict) -> dict:
        """
        Generate advice tailored to a surfer profile.

        profile keys: skill_level, preferences (list), goals (list)
        """
        prompt = self.build_personalized_prompt(spot, conditions, profile)
        try:
            text = self._complete(prompt, COACH_PERSONA, temperature=0.8, max_tokens=800, json_output=True)
        except Exception as e:
            raise LLMServiceError(f"Personalized recommendations failed: {e}") from e
        return parse_personalized_response(text)

    def build_analysis_prompt(
        self,
        conditions: SurfConditions,
        spot: SurfSpot,
        historical: Optional[list[SurfConditions]] = None,
    ) -> str:
        return f"""Analyze the following surf conditions and provide detailed insights:

SURF SPOT: {spot.name}
- Location: {spot.address}
- Break Type: {spot.break_type.value}
- Difficulty: {spot.difficulty.value}

CURRENT CONDITIONS:
- Wave Height: {conditions.waves.height_ft:.1f}ft
- Wave Period: {conditions.waves.period_s:.1f}s
- Wave Direction: {conditions.waves.direction_deg:.0f}°
- Wave Quality: {conditions.waves.quality.value}
- Wind Speed: {conditions.wind.speed_mph:.1f}mph
- Wind Direction: {conditions.wind.direction_deg:.0f}°
- Wind Gusts: {conditions.wind.gust_mph:.1f}mph
- Temperature: {conditions.weather.temperature_f:.1f}°F
- Humidity: {conditions.weather.humidity_pct:.0f}%
- Tide Height: {conditions.tide.height_ft:.1f}ft
- Tide Type: {conditions.tide.tide_type}
- Current Rating: {conditions.rating}/5

{_format_history(historical)}

Please provide:
1. Detailed analysis of current conditions
2. Specific recommendations for surfers
3. Safety considerations
4. Best time to surf today
5. Confidence level (1-10) in your assessment

Format your response as JSON with keys: analysis, recommendations (array), confidence (number), best_time (string).""".strip()

    def build_forecast_prompt(
        self,
        spot: SurfSpot,
        weather: list[WeatherData],
        wind: list[WindData],
        historical: list[SurfConditions],
    ) -> str:
        weather_lines = "\n".join(
            f"Day {i + 1}: {w.temperature_f:.0f}°F, {w.humidity_pct:.0f}% humidity, {w.pressure_hpa:.0f}hPa pressure"
            for i, w in enumerate(weather)
        )
        wind_lines = "\n".join(
            f"Day {i + 1}: {w.speed_mph:.1f}mph from {w.direction_deg:.0f}°, gusts to {w.gust_mph:.1f}mph"
            for i, w in enumerate(wind)
        )
        history_lines = "\n".join(
            f"- {h.timestamp:%Y-%m-%d}: {h.waves.height_ft:.1f}ft waves, {h.rating}/5 rating"
            for h in historical
        ) or "- none recorded"
        best = spot.best_conditions

        return f"""Generate a {len(weather)}-day surf forecast for {spot.name} ({spot.address}).

WEATHER FORECAST:
{weather_lines}

WIND FORECAST:
{wind_lines}

HISTORICAL PATTERNS:
{history_lines}

SPOT CHARACTERISTICS:
- Break Type: {spot.break_type.value}
- Difficulty: {spot.difficulty.value}
- Best Conditions: Wind {best.wind_direction[0]}-{best.wind_direction[1]}°, Swell {best.swell_direction[0]}-{best.swell_direction[1]}°, Tide {best.tide_range[0]}-{best.tide_range[1]}ft

Provide:
1. Overall forecast summary
2. Best days to surf (top 3)
3. Any warnings or concerns

Format as JSON with keys: forecast, best_days (array of objects with date, rating, conditions), warnings (array).""".strip()

    def build_personalized_prompt(self, spot: SurfSpot, conditions: SurfConditions, profile: dict) -> str:
        return f"""Provide personalized surf recommendations for this user:

USER PROFILE:
- Skill Level: {profile.get("skill_level", "intermediate")}
- Preferences: {", ".join(profile.get("preferences", []))}
- Goals: {", ".join(profile.get("goals", []))}

CURRENT CONDITIONS:
- Wave Height: {conditions.waves.height_ft:.1f}ft
- Wave Quality: {conditions.waves.quality.value}
- Wind: {conditions.wind.speed_mph:.1f}mph from {conditions.wind.direction_deg:.0f}°
- Rating: {conditions.rating}/5

SPOT: {spot.name} ({spot.difficulty.value} difficulty)

Provide:
1. Personalized recommendations
2. Safety advice specific to their skill level
3. Equipment suggestions
4. Alternative spots if current conditions aren't ideal

Format as JSON with keys: recommendations, safety_advice, equipment_suggestions, alternative_spots.""".strip()
