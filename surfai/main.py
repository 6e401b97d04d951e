# ABOUTME: Console entry point running AI surf analysis for the demo spots
# ABOUTME: Wires services once at startup and prints formatted reports

import asyncio
import logging
import random
from typing import Optional

from surfai.config import Config, DEMO_SPOTS
from surfai.weather.models import SurfSpot
from surfai.weather.sources import WeatherClient
from surfai.weather.waves import WaveSynthesizer
from surfai.scoring.surf_service import SurfService
from surfai.ai.llm_client import LLMClient
from surfai.ai.rag import RAGService
from surfai.store.service import VectorStoreService
from surfai.workflow import SurfAnalysisWorkflow, WorkflowState

log = logging.getLogger(__name__)

RULE = "=" * 60

DEMO_PROFILE = {
    "skill_level": "intermediate",
    "preferences": ["clean waves", "light winds"],
    "goals": ["improve technique", "have fun"],
}


def configure_logging(level: str = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or Config.LOG_LEVEL), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _numbered(title: str, items: list) -> None:
    print(f"\n{title}")
    for i, item in enumerate(items, start=1):
        print(f"   {i}. {item}")


class SurfConditionsApp:
    """Console application for AI-powered surf reports"""

    def __init__(
        self,
        weather_client: WeatherClient,
        llm_client: LLMClient,
        vector_store: VectorStoreService,
        seed: Optional[int] = None,
        history_days: int = 7,
    ):
        self.weather_client = weather_client
        self.llm_client = llm_client
        self.vector_store = vector_store
        self.surf_service = SurfService(weather_client, wave_synthesizer=WaveSynthesizer(rng=random.Random(seed)))
        self.rag_service = RAGService(llm_client, vector_store, weather_client)
        self.workflow = SurfAnalysisWorkflow(
            llm_client=llm_client,
            weather_client=weather_client,
            surf_service=self.surf_service,
            rag_service=self.rag_service,
            vector_store=vector_store,
            history_days=history_days,
        )

    @classmethod
    def from_config(cls) -> "SurfConditionsApp":
        return cls(
            weather_client=WeatherClient(
                api_key=Config.OPENWEATHER_API_KEY,
                base_url=Config.OPENWEATHER_BASE_URL,
                timeout=Config.HTTP_TIMEOUT_SECONDS,
            ),
            llm_client=LLMClient(api_key=Config.GEMINI_API_KEY, model_name=Config.GEMINI_MODEL),
            vector_store=VectorStoreService(dimensions=Config.EMBEDDING_DIMENSIONS),
            seed=Config.RANDOM_SEED,
            history_days=Config.HISTORY_DAYS,
        )

    async def get_surf_conditions(self, spot: SurfSpot) -> WorkflowState:
        print(f"Starting AI-powered surf analysis for {spot.name}...", flush=True)
        state = await self.workflow.run_analysis(spot)
        if state.errors:
            print(f"Workflow errors: {state.errors}", flush=True)
        else:
            self.display_surf_conditions(state)
        return state

    async def get_personalized_recommendations(self, spot: SurfSpot, profile: dict) -> Optional[dict]:
        print(f"Generating personalized recommendations for {spot.name}...", flush=True)
        try:
            conditions = await self.surf_service.analyze_surf_conditions(spot)
            recs = await asyncio.to_thread(
                self.llm_client.generate_personalized_recommendations, spot, conditions, profile
            )
        except Exception as e:
            log.error(f"Personalized recommendations failed for {spot.id}: {e}")
            return None
        self.display_personalized_recommendations(recs)
        return recs

    async def get_ai_surf_forecast(self, spot: SurfSpot, days: int = 5) -> Optional[dict]:
        print(f"Generating AI surf forecast for {spot.name}...", flush=True)
        try:
            weather = await asyncio.to_thread(self.weather_client.get_forecast, spot.latitude, spot.longitude, days)
            # No wind forecast source yet: repeat today's reading for each day
            wind_today = await asyncio.to_thread(self.weather_client.get_wind_data, spot.latitude, spot.longitude)
            wind = [wind_today] * len(weather)
            historical = self.vector_store.get_historical_conditions(spot.id, 30)
            forecast = await asyncio.to_thread(self.llm_client.generate_surf_forecast, spot, weather, wind, historical)
        except Exception as e:
            log.error(f"AI forecast failed for {spot.id}: {e}")
            return None
        self.display_forecast(forecast)
        return forecast

    def display_surf_conditions(self, state: WorkflowState) -> None:
        print(f"\nAI-POWERED SURF ANALYSIS\n{RULE}")

        c = state.current_conditions
        if c:
            print(f"Location: {c.location}")
            print(f"Time: {c.timestamp:%Y-%m-%d %H:%M %Z}")
            print(f"Rating: {'*' * c.rating} ({c.rating}/5)")

            print("\nWAVE CONDITIONS")
            print(f"   Height: {c.waves.height_ft:.1f} ft")
            print(f"   Period: {c.waves.period_s:.1f}s")
            print(f"   Direction: {c.waves.direction_deg:.0f}°")
            print(f"   Quality: {c.waves.quality.value.upper()}")

            print("\nWIND CONDITIONS")
            print(f"   Speed: {c.wind.speed_mph:.1f} mph")
            print(f"   Direction: {c.wind.direction_deg:.0f}°")
            print(f"   Gusts: {c.wind.gust_mph:.1f} mph")

            print("\nWEATHER CONDITIONS")
            print(f"   Temperature: {c.weather.temperature_f:.1f}°F")
            print(f"   Humidity: {c.weather.humidity_pct:.0f}%")
            print(f"   Pressure: {c.weather.pressure_hpa:.0f} hPa")
            print(f"   Visibility: {c.weather.visibility_mi:.1f} miles")

            _numbered("SURF NOTES", c.recommendations)

        if state.llm_analysis:
            print("\nAI ANALYSIS")
            print(f"   Confidence: {state.confidence}/10")
            print(f"   Best Time: {state.best_time}")
            print(f"   Analysis: {state.llm_analysis.analysis}")
            _numbered("AI RECOMMENDATIONS", state.recommendations)

        print(f"\n{RULE}", flush=True)

    def display_personalized_recommendations(self, recs: dict) -> None:
        print(f"\nPERSONALIZED RECOMMENDATIONS\n{RULE}")
        _numbered("RECOMMENDATIONS", recs.get("recommendations", []))
        _numbered("SAFETY ADVICE", recs.get("safety_advice", []))
        _numbered("EQUIPMENT SUGGESTIONS", recs.get("equipment_suggestions", []))
        if recs.get("alternative_spots"):
            _numbered("ALTERNATIVE SPOTS", recs["alternative_spots"])
        print(f"\n{RULE}", flush=True)

    def display_forecast(self, forecast: dict) -> None:
        print(f"\nAI SURF FORECAST\n{RULE}")
        print("\nFORECAST SUMMARY")
        print(forecast.get("forecast", ""))
        best_days = forecast.get("best_days") or []
        if best_days:
            print("\nBEST SURF DAYS")
            for i, day in enumerate(best_days, start=1):
                if isinstance(day, dict):
                    print(f"   {i}. {day.get('date')} - Rating: {day.get('rating')}/5")
                    print(f"      Conditions: {day.get('conditions')}")
                else:
                    print(f"   {i}. {day}")
        if forecast.get("warnings"):
            _numbered("WARNINGS", forecast["warnings"])
        print(f"\n{RULE}", flush=True)

    def display_system_stats(self) -> None:
        stats = self.vector_store.get_database_stats()
        print(f"\nSYSTEM STATISTICS\n{'=' * 40}")
        print(f"Documents stored: {stats['document_count']}")
        print(f"Vectors indexed: {stats['vector_count']}")
        print(f"Workflow steps: {', '.join(self.workflow.get_workflow_status()['steps'])}")
        print("=" * 40, flush=True)

    async def run(self, spots: Optional[list[SurfSpot]] = None) -> None:
        print("SurfAI - AI-Powered Surf Analysis")
        print("=" * 70, flush=True)

        spots = spots or [SurfSpot.from_dict(s) for s in DEMO_SPOTS]
        for spot in spots:
            print(f"\nAnalyzing {spot.name}...", flush=True)
            await self.get_surf_conditions(spot)
            await self.get_personalized_recommendations(spot, DEMO_PROFILE)
            await self.get_ai_surf_forecast(spot)
            print("\n" + "=" * 70, flush=True)

        self.display_system_stats()


def run() -> None:
    configure_logging()
    app = SurfConditionsApp.from_config()
    asyncio.run(app.run())


if __name__ == "__main__":
    run()
