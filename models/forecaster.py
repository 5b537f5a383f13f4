"""
Placeholder series for dashboard charts
These are randomly perturbed values, not predictions. Views only depend on
SeriesGenerator so a real forecasting model can replace them.
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class SeriesGenerator(ABC):
    """Interface for the forecast and history series shown on the dashboards"""

    @abstractmethod
    def aqi_forecast(self, aqi: int, days: int = 5) -> List[Dict]:
        """Daily AQI category forecast, [{"day", "aqi"}]"""

    @abstractmethod
    def pm25_projection(self, pm25: float, days: int = 7) -> List[Dict]:
        """Daily PM2.5 projection, [{"day", "predicted"}]"""

    @abstractmethod
    def policy_history(self, months: int = 7) -> List[Dict]:
        """Monthly AQI before and after policy, [{"month", "beforePolicy", "afterPolicy"}]"""


class RandomPlaceholderGenerator(SeriesGenerator):
    """
    Random placeholder series

    Args:
        seed: Optional seed for reproducible series
    """

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def aqi_forecast(self, aqi: int, days: int = 5) -> List[Dict]:
        # Each day drifts at most one category from today, kept within 1-5
        offsets = self.rng.integers(-1, 2, size=days)
        return [
            {"day": f"Day {i + 1}", "aqi": int(np.clip(aqi + offset, 1, 5))}
            for i, offset in enumerate(offsets)
        ]

    def pm25_projection(self, pm25: float, days: int = 7) -> List[Dict]:
        noise = self.rng.uniform(-10, 10, size=days)
        return [
            {"day": f"Day {i + 1}", "predicted": round(float(pm25 + n), 2)}
            for i, n in enumerate(noise)
        ]

    def policy_history(self, months: int = 7) -> List[Dict]:
        before = self.rng.integers(150, 200, size=months)
        after = self.rng.integers(100, 140, size=months)
        return [
            {"month": f"Month {i + 1}", "beforePolicy": int(b), "afterPolicy": int(a)}
            for i, (b, a) in enumerate(zip(before, after))
        ]
