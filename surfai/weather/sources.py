# ABOUTME: OpenWeatherMap client for current weather, wind and multi-day forecasts
# ABOUTME: Tide readings are a synthetic six-hourly cycle until a tide API is wired in

import logging
import math
from datetime import datetime, timedelta, timezone

import requests

from surfai.weather.models import WeatherData, WindData, TideData

log = logging.getLogger(__name__)

METERS_PER_MILE = 1609.34


class WeatherServiceError(Exception):
    """Raised when a weather provider call fails."""


class WeatherClient:
    """Client for fetching weather data from OpenWeatherMap (imperial units)"""

    DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5"

    def __init__(self, api_key: str, base_url: str = None, timeout: int = 10):
        self.api_key = api_key
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout

    def _get(self, endpoint: str, lat: float, lon: float) -> dict:
        params = {
            "lat": lat,
            "lon": lon,
            "appid": self.api_key,
            "units": "imperial",
        }
        response = requests.get(f"{self.base_url}/{endpoint}", params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def get_current_weather(self, lat: float, lon: float) -> WeatherData:
        """
        Fetch current weather for given coordinates

        Args:
            lat: Latitude
            lon: Longitude

        Returns:
            WeatherData with temperature in F and visibility in miles
        """
        try:
            data = self._get("weather", lat, lon)
            return _parse_weather(data)
        except Exception as e:
            raise WeatherServiceError(f"Failed to fetch weather data: {e}") from e

    def get_wind_data(self, lat: float, lon: float) -> WindData:
        """Fetch current wind; gust falls back to the sustained speed when absent."""
        try:
            data = self._get("weather", lat, lon)
            wind = data["wind"]
            speed = float(wind["speed"])
            return WindData(
                speed_mph=speed,
                direction_deg=float(wind.get("deg", 0)),
                gust_mph=float(wind.get("gust") or speed),
            )
        except Exception as e:
            raise WeatherServiceError(f"Failed to fetch wind data: {e}") from e

    def get_tide_data(self, lat: float, lon: float, now: datetime = None) -> list[TideData]:
        """
        Synthetic tide cycle for the next 24 hours.

        Four readings six hours apart, alternating high and low.
        """
        now = now or datetime.now(timezone.utc)
        tides = []
        for i in range(4):
            tides.append(TideData(
                height_ft=2.5 + math.sin(i * math.pi / 2) * 1.5,
                time=now + timedelta(hours=6 * i),
                tide_type="high" if i % 2 == 0 else "low",
            ))
        return tides

    def get_forecast(self, lat: float, lon: float, days: int = 5) -> list[WeatherData]:
        """
        Fetch a daily forecast.

        OpenWeatherMap returns 3-hourly entries, so every 8th entry is one day.
        """
        try:
            data = self._get("forecast", lat, lon)
            entries = data["list"]
            forecasts = []
            for i in range(0, min(days * 8, len(entries)), 8):
                forecasts.append(_parse_weather(entries[i]))
            log.info(f"Forecast fetched: {len(forecasts)} days for {lat},{lon}")
            return forecasts
        except Exception as e:
            raise WeatherServiceError(f"Failed to fetch forecast data: {e}") from e


def _parse_weather(data: dict) -> WeatherData:
    main = data["main"]
    return WeatherData(
        temperature_f=float(main["temp"]),
        humidity_pct=float(main["humidity"]),
        pressure_hpa=float(main["pressure"]),
        visibility_mi=float(data.get("visibility", 0)) / METERS_PER_MILE,
        uv_index=float(data.get("uvi", 0) or 0),
    )
