# ABOUTME: Five-step async workflow from weather fetch to stored AI analysis
# ABOUTME: Each step updates shared state; the first failing step ends the run

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from surfai.weather.models import SurfSpot, SurfConditions, SurfAnalysis, WeatherData, WindData, TideData
from surfai.weather.sources import WeatherClient
from surfai.scoring.surf_service import SurfService
from surfai.ai.llm_client import LLMClient
from surfai.ai.rag import RAGService
from surfai.store.service import VectorStoreService

log = logging.getLogger(__name__)

WORKFLOW_STEPS = [
    "fetch_weather_data",
    "fetch_rag_context",
    "analyze_conditions",
    "generate_llm_analysis",
    "store_results",
]


class StepFailed(Exception):
    """Raised inside a step; the message becomes the state's error entry."""


@dataclass
class WorkflowState:
    """Everything accumulated during one analysis run"""
    spot: SurfSpot
    weather: Optional[WeatherData] = None
    wind: Optional[WindData] = None
    tides: list[TideData] = field(default_factory=list)
    rag_context: Optional[str] = None
    current_conditions: Optional[SurfConditions] = None
    llm_analysis: Optional[SurfAnalysis] = None
    errors: list[str] = field(default_factory=list)
    completed: bool = False

    @property
    def recommendations(self) -> list[str]:
        return self.llm_analysis.recommendations if self.llm_analysis else []

    @property
    def confidence(self) -> Optional[float]:
        return self.llm_analysis.confidence if self.llm_analysis else None

    @property
    def best_time(self) -> Optional[str]:
        return self.llm_analysis.best_time if self.llm_analysis else None


class SurfAnalysisWorkflow:
    """Runs the surf analysis pipeline for one spot"""

    def __init__(
        self,
        llm_client: LLMClient,
        weather_client: WeatherClient,
        surf_service: SurfService,
        rag_service: RAGService,
        vector_store: VectorStoreService,
        history_days: int = 7,
    ):
        self.llm_client = llm_client
        self.weather_client = weather_client
        self.surf_service = surf_service
        self.rag_service = rag_service
        self.vector_store = vector_store
        self.history_days = history_days

    async def fetch_weather_data(self, state: WorkflowState) -> None:
        try:
            state.weather, state.wind, state.tides = await self.surf_service.fetch_readings(state.spot)
        except Exception as e:
            raise StepFailed(f"Weather data fetch failed: {e}") from e

    async def fetch_rag_context(self, state: WorkflowState) -> None:
        try:
            state.rag_context = await asyncio.to_thread(self.rag_service.query_surf_knowledge, state.spot)
        except Exception as e:
            raise StepFailed(f"RAG context fetch failed: {e}") from e

    async def analyze_conditions(self, state: WorkflowState) -> None:
        try:
            state.current_conditions = await self.surf_service.analyze_surf_conditions(state.spot)
        except Exception as e:
            raise StepFailed(f"Conditions analysis failed: {e}") from e

    async def generate_llm_analysis(self, state: WorkflowState) -> None:
        try:
            if state.current_conditions is None:
                raise ValueError("No current conditions available")

            historical = await asyncio.to_thread(
                self.vector_store.get_historical_conditions, state.spot.id, self.history_days
            )
            state.llm_analysis = await asyncio.to_thread(
                self.llm_client.analyze_surf_conditions, state.current_conditions, state.spot, historical
            )
        except Exception as e:
            raise StepFailed(f"LLM analysis failed: {e}") from e

    async def store_results(self, state: WorkflowState) -> None:
        try:
            if state.current_conditions is None or state.llm_analysis is None:
                return
            timestamp = datetime.now(timezone.utc)
            analysis = vars(state.llm_analysis).copy()
            self.vector_store.store_surf_analysis(state.spot, state.current_conditions, analysis, timestamp)
            self.vector_store.store_document(state.spot.id, state.current_conditions, analysis, timestamp)
        except Exception as e:
            raise StepFailed(f"Results storage failed: {e}") from e

    async def run_analysis(self, spot: SurfSpot) -> WorkflowState:
        """
        Run every step in order for a spot

        Args:
            spot: Spot to analyze

        Returns:
            WorkflowState; check `errors` and `completed` for the outcome
        """
        log.info(f"Starting surf analysis workflow for {spot.name}")
        state = WorkflowState(spot=spot)

        steps = [
            self.fetch_weather_data,
            self.fetch_rag_context,
            self.analyze_conditions,
            self.generate_llm_analysis,
            self.store_results,
        ]

        for number, step in enumerate(steps, start=1):
            log.info(f"Step {number}/{len(steps)}: {step.__name__}")
            try:
                await step(state)
            except StepFailed as e:
                log.error(str(e))
                state.errors.append(str(e))
                return state

        state.completed = True
        log.info(f"Workflow completed for {spot.name}")
        return state

    def get_workflow_status(self) -> dict:
        return {
            "status": "linear_workflow",
            "steps": list(WORKFLOW_STEPS),
            "active": True,
        }
