# ABOUTME: Data models for surf spots, raw readings and analysed surf conditions
# ABOUTME: Provides structured representation of weather, wind, tide and wave data

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class BreakType(str, Enum):
    BEACH = "beach_break"
    REEF = "reef_break"
    POINT = "point_break"
    RIVER_MOUTH = "river_mouth"
    JETTY = "jetty"


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class WaveQuality(str, Enum):
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"


@dataclass(frozen=True)
class BestConditions:
    """Envelope of conditions a spot works best in"""
    wind_direction: tuple[float, float]   # degrees, from-to
    swell_direction: tuple[float, float]  # degrees, from-to
    tide_range: tuple[float, float]       # feet, low-high


@dataclass(frozen=True)
class SurfSpot:
    """Immutable reference data for a surf break"""
    id: str
    name: str
    latitude: float
    longitude: float
    break_type: BreakType
    difficulty: DifficultyLevel
    best_conditions: BestConditions
    address: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "SurfSpot":
        best = data.get("best_conditions", {})
        return cls(
            id=data["id"],
            name=data["name"],
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            address=data.get("address", ""),
            break_type=BreakType(data["break_type"]),
            difficulty=DifficultyLevel(data["difficulty"]),
            best_conditions=BestConditions(
                wind_direction=tuple(best.get("wind_direction", (0, 0))),
                swell_direction=tuple(best.get("swell_direction", (0, 0))),
                tide_range=tuple(best.get("tide_range", (0, 0))),
            ),
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.break_type.value}, {self.difficulty.value})"


@dataclass
class WeatherData:
    """Current weather reading"""
    temperature_f: float
    humidity_pct: float
    pressure_hpa: float
    visibility_mi: float
    uv_index: float = 0.0


@dataclass
class WindData:
    """Wind reading in imperial units"""
    speed_mph: float
    direction_deg: float
    gust_mph: float

    def __str__(self) -> str:
        return f"Wind: {self.speed_mph:.1f}mph @ {self.direction_deg:.0f}° (gusts {self.gust_mph:.1f})"


@dataclass
class TideData:
    """Single tide reading"""
    height_ft: float
    time: datetime
    tide_type: str  # "high" or "low"


@dataclass
class WaveData:
    """Wave reading, quality is derived from the scoring heuristic"""
    height_ft: float
    period_s: float
    direction_deg: float
    quality: WaveQuality

    def __str__(self) -> str:
        return (
            f"Waves: {self.height_ft:.1f}ft @ {self.period_s:.1f}s "
            f"from {self.direction_deg:.0f}° ({self.quality.value})"
        )


@dataclass
class SurfConditions:
    """Snapshot of one surf analysis for a spot"""
    location: str
    timestamp: datetime
    waves: WaveData
    wind: WindData
    tide: TideData
    weather: WeatherData
    rating: int  # 1-5
    recommendations: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.location}: {self.waves}, {self.wind}, rating {self.rating}/5"

    def to_dict(self) -> dict:
        """Plain dict for the document store and vector metadata."""
        data = asdict(self)
        data["waves"]["quality"] = self.waves.quality.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "SurfConditions":
        waves = dict(data["waves"])
        waves["quality"] = WaveQuality(waves["quality"])
        return cls(
            location=data["location"],
            timestamp=data["timestamp"],
            waves=WaveData(**waves),
            wind=WindData(**data["wind"]),
            tide=TideData(**data["tide"]),
            weather=WeatherData(**data["weather"]),
            rating=int(data["rating"]),
            recommendations=list(data.get("recommendations", [])),
        )


@dataclass
class SurfAnalysis:
    """Structured result of a language-model surf analysis"""
    analysis: str
    recommendations: list[str]
    confidence: float
    best_time: str

    @classmethod
    def from_dict(cls, data: dict) -> "SurfAnalysis":
        return cls(
            analysis=str(data.get("analysis", "")),
            recommendations=as_str_list(data.get("recommendations")),
            confidence=_as_float(data.get("confidence"), 5.0),
            best_time=str(data.get("best_time") or data.get("bestTime") or ""),
        )


def as_str_list(value) -> list[str]:
    """A single string becomes a one-item list; anything that is not a list becomes empty."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(v) for v in value]
    return []


def _as_float(value, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def placeholder_conditions(location: str, timestamp: Optional[datetime] = None) -> SurfConditions:
    """Neutral conditions used as a similarity-search query when no reading exists yet."""
    now = timestamp or utc_now()
    return SurfConditions(
        location=location,
        timestamp=now,
        waves=WaveData(height_ft=0, period_s=0, direction_deg=0, quality=WaveQuality.FAIR),
        wind=WindData(speed_mph=0, direction_deg=0, gust_mph=0),
        tide=TideData(height_ft=0, time=now, tide_type="high"),
        weather=WeatherData(temperature_f=0, humidity_pct=0, pressure_hpa=0, visibility_mi=0, uv_index=0),
        rating=3,
        recommendations=[],
    )
