"""
Weather tool backed by the OpenWeatherMap current-weather API.
"""

import re
from typing import Any, Dict, List, Optional

import requests

from ..exceptions import ToolExecutionError
from ..models.tool_models import ToolParameter, ToolParameterType
from ..utils import get_logger
from .base import BaseTool

logger = get_logger("weather_tool")

API_URL = "https://api.openweathermap.org/data/2.5/weather"

_CONDITION_EMOJI = {
    "clear": "☀️",
    "clouds": "☁️",
    "rain": "🌧️",
    "drizzle": "🌧️",
    "thunderstorm": "⛈️",
    "snow": "❄️",
    "mist": "🌫️",
    "fog": "🌫️",
    "haze": "🌫️",
}

_STATUS_MESSAGES = {
    404: "City not found. Please check the spelling and try again.",
    401: "Invalid API key. Please check your OpenWeatherMap API key.",
    429: "Too many requests. Please wait a moment and try again.",
}


class WeatherTool(BaseTool):
    """Fetch current weather for a city."""

    _PATTERNS = [
        re.compile(r"how.*(hot|cold|warm|cool)"),
        re.compile(r"what.*like outside"),
        re.compile(r"climate"),
    ]

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout_seconds: float = 10,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize weather tool.

        Args:
            api_key: OpenWeatherMap API key
            timeout_seconds: HTTP timeout for each request
            session: Optional requests session (shared connection pool)
        """
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    @property
    def name(self) -> str:
        return "weather"

    @property
    def description(self) -> str:
        return (
            "Gets current weather information for any city worldwide. "
            "Use this when user asks about weather, temperature, conditions, or climate."
        )

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="city",
                type=ToolParameterType.STRING,
                description="City name (e.g., 'Mumbai', 'New York', 'London')",
                required=True,
            ),
        ]

    @property
    def returns(self) -> str:
        return "Temperature, conditions, humidity, wind and pressure for the city"

    def matches(self, message: str) -> bool:
        lower = message.lower()
        return (
            "weather" in lower
            or "temperature" in lower
            or "forecast" in lower
            or any(pattern.search(lower) for pattern in self._PATTERNS)
        )

    def execute(self, city: str) -> str:
        if not self.api_key:
            raise ToolExecutionError(
                "Weather API key not configured. Set OPENWEATHER_API_KEY or store "
                "the 'openweather_api_key' credential."
            )

        city = str(city).strip()
        if not city:
            raise ToolExecutionError("City name must not be empty")

        logger.debug(f"Calling weather API for: {city}")
        payload = self._fetch(city)

        try:
            result = self._format(payload)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ToolExecutionError("Unexpected response from the weather service") from e

        logger.info(f"Weather fetched successfully for: {city}")
        return result

    def _fetch(self, city: str) -> Dict[str, Any]:
        try:
            response = self.session.get(
                API_URL,
                params={"q": city, "units": "metric", "appid": self.api_key},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            message = _STATUS_MESSAGES.get(status, "Unable to fetch data. Please try again.")
            raise ToolExecutionError(message) from e
        except (requests.RequestException, ValueError) as e:
            raise ToolExecutionError("Unable to fetch data. Please try again.") from e

    @staticmethod
    def _format(payload: Dict[str, Any]) -> str:
        main = payload["main"]
        weather = payload["weather"][0]
        condition = weather["main"]
        emoji = _CONDITION_EMOJI.get(condition.lower(), "🌤️")

        return (
            f"{emoji} Weather in {payload['name']}, {payload['sys']['country']}:\n"
            f"🌡️ Temperature: {float(main['temp']):.1f}°C "
            f"(feels like {float(main['feels_like']):.1f}°C)\n"
            f"☁️ Conditions: {weather['description'].title()}\n"
            f"💧 Humidity: {int(main['humidity'])}%\n"
            f"🌬️ Wind Speed: {float(payload['wind']['speed']):.1f} m/s\n"
            f"🔽 Pressure: {int(main['pressure'])} hPa"
        )
