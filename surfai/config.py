# ABOUTME: Application configuration including API keys, model names and demo spots
# ABOUTME: Centralized config so services receive settings through their constructors

import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration"""

    # OpenWeatherMap
    OPENWEATHER_API_KEY = os.getenv("OPENWEATHER_API_KEY", "")
    OPENWEATHER_BASE_URL = os.getenv("OPENWEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5")
    HTTP_TIMEOUT_SECONDS = int(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

    # Gemini
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-lite")

    # History window fed into the analysis prompt
    HISTORY_DAYS = int(os.getenv("HISTORY_DAYS", "7"))

    # Hashed bag-of-words embedding size
    EMBEDDING_DIMENSIONS = int(os.getenv("EMBEDDING_DIMENSIONS", "384"))

    # Seed for the wave synthesizer; unset means a fresh draw every run
    RANDOM_SEED = int(os.getenv("RANDOM_SEED")) if os.getenv("RANDOM_SEED") else None

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Debug mode
    DEBUG = os.getenv("DEBUG", "false").lower() == "true"


# Spots used by the console demo
DEMO_SPOTS = [
    {
        "id": "malibu-1",
        "name": "Malibu Surfrider Beach",
        "latitude": 34.0369,
        "longitude": -118.6774,
        "address": "Malibu, CA",
        "break_type": "point_break",
        "difficulty": "intermediate",
        "best_conditions": {
            "wind_direction": (270, 315),  # W to NW
            "swell_direction": (200, 250),  # SW to W
            "tide_range": (2, 6),
        },
    },
    {
        "id": "huntington-1",
        "name": "Huntington Beach Pier",
        "latitude": 33.6558,
        "longitude": -117.9994,
        "address": "Huntington Beach, CA",
        "break_type": "beach_break",
        "difficulty": "beginner",
        "best_conditions": {
            "wind_direction": (270, 315),
            "swell_direction": (200, 250),
            "tide_range": (1, 5),
        },
    },
]
