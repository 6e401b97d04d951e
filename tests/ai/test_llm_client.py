# ABOUTME: Tests for LLM client interface (Google Gemini API)
# ABOUTME: Uses mocked responses to avoid real API calls and costs in tests

import json
from unittest.mock import Mock, patch

import pytest

from surfai.ai.llm_client import (
    LLMClient,
    LLMServiceError,
    DEFAULT_ANALYSIS,
    DEFAULT_FORECAST,
    ANALYST_PERSONA,
    extract_json_object,
    parse_analysis_response,
    parse_forecast_response,
    parse_personalized_response,
)
from surfai.weather.models import SurfAnalysis
from tests.factories import make_spot, make_conditions, make_weather, make_wind


def _reply(text):
    response = Mock()
    response.text = text
    return response


class TestJsonExtraction:
    """Best-effort parsing of model replies"""

    def test_extracts_object_wrapped_in_prose(self):
        text = 'Sure! Here you go:\n{"analysis": "Fun", "confidence": 7}\nEnjoy.'

        assert extract_json_object(text) == {"analysis": "Fun", "confidence": 7}

    def test_returns_none_without_braces(self):
        assert extract_json_object("no json here") is None
        assert extract_json_object("") is None
        assert extract_json_object(None) is None

    def test_returns_none_for_broken_json(self):
        assert extract_json_object("{analysis: nope,}") is None

    def test_analysis_fallback_is_default_verbatim(self):
        result = parse_analysis_response("The waves look fun today.")

        assert result == DEFAULT_ANALYSIS

    def test_fallback_is_a_copy(self):
        result = parse_personalized_response("garbage")
        result["recommendations"].append("mutated")

        assert "mutated" not in parse_personalized_response("garbage")["recommendations"]

    def test_personalized_fallback_keeps_reply_text(self):
        result = parse_personalized_response("  Paddle out at the south peak.  ")

        assert result["recommendations"] == ["Paddle out at the south peak."]
        assert result["safety_advice"] == ["Always check conditions before surfing"]

    def test_empty_reply_uses_plain_defaults(self):
        assert parse_forecast_response("") == DEFAULT_FORECAST

    @pytest.mark.parametrize("value,expected", [
        ("Watch the rip", ["Watch the rip"]),
        (None, []),
        (3, []),
        ({"tip": "go early"}, []),
    ])
    def test_list_fields_are_normalised(self, value, expected):
        forecast = parse_forecast_response(json.dumps({"forecast": "ok", "best_days": value, "warnings": value}))
        personalized = parse_personalized_response(json.dumps({"safety_advice": value, "alternative_spots": value}))

        assert forecast["warnings"] == expected
        assert forecast["best_days"] == expected
        assert personalized["safety_advice"] == expected
        assert personalized["alternative_spots"] == expected
        assert personalized["recommendations"] == []


class TestAnalyzeSurfConditions:
    """Tests for structured surf analysis"""

    def test_parses_json_reply(self):
        payload = {
            "analysis": "Clean lines at mid tide.",
            "recommendations": ["Paddle out early"],
            "confidence": 8,
            "best_time": "7-9 AM",
        }
        with patch("surfai.ai.llm_client.genai") as mock_genai:
            mock_genai.GenerativeModel.return_value.generate_content.return_value = _reply(json.dumps(payload))

            client = LLMClient(api_key="test_key")
            result = client.analyze_surf_conditions(make_conditions(), make_spot())

            assert result == SurfAnalysis(
                analysis="Clean lines at mid tide.",
                recommendations=["Paddle out early"],
                confidence=8.0,
                best_time="7-9 AM",
            )

    def test_unparseable_reply_uses_default_analysis(self):
        with patch("surfai.ai.llm_client.genai") as mock_genai:
            mock_genai.GenerativeModel.return_value.generate_content.return_value = _reply("Looks fun out there!")

            result = LLMClient(api_key="test_key").analyze_surf_conditions(make_conditions(), make_spot())

            assert result.analysis == DEFAULT_ANALYSIS["analysis"]
            assert result.recommendations == DEFAULT_ANALYSIS["recommendations"]
            assert result.confidence == 5
            assert result.best_time == "Morning (6-10 AM)"

    @pytest.mark.parametrize("recommendations", [None, 3, {"tip": "go early"}])
    def test_odd_recommendation_types_do_not_raise(self, recommendations):
        reply = json.dumps({"analysis": "ok", "recommendations": recommendations, "confidence": 6, "best_time": "Noon"})
        with patch("surfai.ai.llm_client.genai") as mock_genai:
            mock_genai.GenerativeModel.return_value.generate_content.return_value = _reply(reply)

            result = LLMClient(api_key="test_key").analyze_surf_conditions(make_conditions(), make_spot())

            assert result.analysis == "ok"
            assert result.recommendations == []
            assert result.confidence == 6.0

    def test_api_failure_raises(self):
        with patch("surfai.ai.llm_client.genai") as mock_genai:
            mock_genai.GenerativeModel.return_value.generate_content.side_effect = Exception("API error")

            client = LLMClient(api_key="test_key")

            with pytest.raises(LLMServiceError, match="Surf analysis failed: API error"):
                client.analyze_surf_conditions(make_conditions(), make_spot())

    def test_requests_json_with_analyst_persona(self):
        with patch("surfai.ai.llm_client.genai") as mock_genai:
            mock_genai.GenerativeModel.return_value.generate_content.return_value = _reply("{}")

            client = LLMClient(api_key="test_key", model_name="gemini-test")
            client.analyze_surf_conditions(make_conditions(), make_spot())

            mock_genai.configure.assert_called_once_with(api_key="test_key")
            mock_genai.GenerativeModel.assert_any_call("gemini-test", system_instruction=ANALYST_PERSONA)
            config_kwargs = mock_genai.GenerationConfig.call_args[1]
            assert config_kwargs["response_mime_type"] == "application/json"
            assert config_kwargs["temperature"] == 0.7
            assert config_kwargs["max_output_tokens"] == 1000

    def test_prompt_includes_conditions_and_history(self):
        client = LLMClient.__new__(LLMClient)
        history = [make_conditions(height_ft=2.5, rating=3)]

        prompt = client.build_analysis_prompt(make_conditions(height_ft=4.0), make_spot(), history)

        assert "SURF SPOT: Test Beach" in prompt
        assert "Wave Height: 4.0ft" in prompt
        assert "Current Rating: 4/5" in prompt
        assert "HISTORICAL DATA (last 1 records)" in prompt
        assert "2.5ft" in prompt

    def test_persona_models_are_reused(self):
        with patch("surfai.ai.llm_client.genai") as mock_genai:
            mock_genai.GenerativeModel.return_value.generate_content.return_value = _reply("{}")

            client = LLMClient(api_key="test_key")
            client.analyze_surf_conditions(make_conditions(), make_spot())
            client.analyze_surf_conditions(make_conditions(), make_spot())

            # one default model plus one analyst persona model
            assert mock_genai.GenerativeModel.call_count == 2


class TestForecastAndPersonalized:
    """Tests for forecast and profile-based advice"""

    def test_forecast_parses_reply(self):
        payload = {"forecast": "Building swell", "best_days": [{"date": "Sat", "rating": 4}], "warnings": []}
        with patch("surfai.ai.llm_client.genai") as mock_genai:
            mock_genai.GenerativeModel.return_value.generate_content.return_value = _reply(json.dumps(payload))

            result = LLMClient(api_key="k").generate_surf_forecast(
                make_spot(), [make_weather()] * 2, [make_wind()] * 2, []
            )

            assert result == payload

    def test_forecast_fallback(self):
        with patch("surfai.ai.llm_client.genai") as mock_genai:
            mock_genai.GenerativeModel.return_value.generate_content.return_value = _reply("sorry")

            result = LLMClient(api_key="k").generate_surf_forecast(make_spot(), [make_weather()], [make_wind()], [])

            assert result == {**DEFAULT_FORECAST, "forecast": "sorry"}

    def test_forecast_prompt_lists_each_day(self):
        client = LLMClient.__new__(LLMClient)

        prompt = client.build_forecast_prompt(make_spot(), [make_weather()] * 3, [make_wind()] * 3, [])

        assert "Generate a 3-day surf forecast" in prompt
        assert "Day 3: 72°F" in prompt
        assert "- none recorded" in prompt

    def test_personalized_prompt_uses_profile(self):
        client = LLMClient.__new__(LLMClient)
        profile = {"skill_level": "beginner", "preferences": ["longboard"], "goals": ["catch green waves"]}

        prompt = client.build_personalized_prompt(make_spot(), make_conditions(), profile)

        assert "Skill Level: beginner" in prompt
        assert "longboard" in prompt
        assert "catch green waves" in prompt

    def test_personalized_failure_raises(self):
        with patch("surfai.ai.llm_client.genai") as mock_genai:
            mock_genai.GenerativeModel.return_value.generate_content.side_effect = Exception("quota")

            with pytest.raises(LLMServiceError):
                LLMClient(api_key="k").generate_personalized_recommendations(make_spot(), make_conditions(), {})

    def test_generate_text_passes_through(self):
        with patch("surfai.ai.llm_client.genai") as mock_genai:
            mock_genai.GenerativeModel.return_value.generate_content.return_value = _reply("A fine guide.")

            assert LLMClient(api_key="k").generate_text("system", "prompt") == "A fine guide."
