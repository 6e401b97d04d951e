# ABOUTME: Wave synthesizer that fabricates plausible wave readings from wind and tide
# ABOUTME: Stands in for buoy data; draws are bounded and can be seeded for repeatable runs

import random
from typing import Optional

from surfai.weather.models import WaveData, WindData, TideData
from surfai.scoring.calculator import ScoreCalculator

WAVE_HEIGHT_RANGE = (2.0, 6.0)    # feet
WAVE_PERIOD_RANGE = (8.0, 16.0)   # seconds
WAVE_DIRECTION_RANGE = (0.0, 360.0)


class WaveSynthesizer:
    """Generates wave data; tide is accepted for interface parity but unused"""

    def __init__(self, rng: Optional[random.Random] = None, calculator: Optional[ScoreCalculator] = None):
        self.rng = rng or random.Random()
        self.calculator = calculator or ScoreCalculator()

    def generate(self, wind: WindData, tide: TideData) -> WaveData:
        height = self.rng.uniform(*WAVE_HEIGHT_RANGE)
        period = self.rng.uniform(*WAVE_PERIOD_RANGE)
        direction = self.rng.uniform(*WAVE_DIRECTION_RANGE)

        return WaveData(
            height_ft=height,
            period_s=period,
            direction_deg=direction,
            quality=self.calculator.assess_wave_quality(height, period, wind.speed_mph),
        )
