"""
Tests for the weather tool with the HTTP session mocked out.
"""

from unittest.mock import MagicMock

import pytest
import requests

from smartchat.exceptions import ToolExecutionError
from smartchat.tools import ToolRegistry, WeatherTool
from smartchat.tools.weather_tools import API_URL

SAMPLE_PAYLOAD = {
    "name": "Mumbai",
    "sys": {"country": "IN"},
    "main": {"temp": 31.04, "feels_like": 35.2, "humidity": 70, "pressure": 1008},
    "weather": [{"main": "Clouds", "description": "scattered clouds"}],
    "wind": {"speed": 3.6},
}


def _http_error(status_code):
    response = MagicMock()
    response.status_code = status_code
    return requests.HTTPError(f"{status_code} error", response=response)


class TestWeatherTool:
    """Formatting, error mapping and matching."""

    @pytest.fixture(autouse=True)
    def setup(self):
        """Create the tool around a mocked requests session."""
        self.response = MagicMock()
        self.response.json.return_value = SAMPLE_PAYLOAD
        self.session = MagicMock()
        self.session.get.return_value = self.response
        self.tool = WeatherTool(api_key="test-key", timeout_seconds=10, session=self.session)

    def test_formats_current_weather(self):
        result = self.tool.execute(city="Mumbai")

        assert result.startswith("☁️ Weather in Mumbai, IN:")
        assert "Temperature: 31.0°C (feels like 35.2°C)" in result
        assert "Conditions: Scattered Clouds" in result
        assert "Humidity: 70%" in result
        assert "Wind Speed: 3.6 m/s" in result
        assert "Pressure: 1008 hPa" in result

    def test_request_parameters(self):
        self.tool.execute(city="  Mumbai ")

        self.session.get.assert_called_once_with(
            API_URL,
            params={"q": "Mumbai", "units": "metric", "appid": "test-key"},
            timeout=10,
        )

    def test_condition_emoji(self):
        payload = dict(SAMPLE_PAYLOAD, weather=[{"main": "Rain", "description": "light rain"}])
        self.response.json.return_value = payload

        assert self.tool.execute(city="Mumbai").startswith("🌧️ ")

    def test_missing_api_key(self):
        tool = WeatherTool(api_key=None, session=self.session)

        with pytest.raises(ToolExecutionError, match="Weather API key not configured"):
            tool.execute(city="Mumbai")
        self.session.get.assert_not_called()

    @pytest.mark.parametrize("status_code,message", [
        (404, "City not found"),
        (401, "Invalid API key"),
        (429, "Too many requests"),
        (500, "Unable to fetch data"),
    ])
    def test_http_errors(self, status_code, message):
        self.response.raise_for_status.side_effect = _http_error(status_code)

        with pytest.raises(ToolExecutionError, match=message):
            self.tool.execute(city="Atlantis")

    def test_connection_error(self):
        self.session.get.side_effect = requests.ConnectionError("network down")

        with pytest.raises(ToolExecutionError, match="Unable to fetch data"):
            self.tool.execute(city="Mumbai")

    def test_unexpected_payload(self):
        self.response.json.return_value = {"cod": 200}

        with pytest.raises(ToolExecutionError, match="Unexpected response"):
            self.tool.execute(city="Mumbai")

    def test_dispatch_reports_errors_as_text(self):
        registry = ToolRegistry()
        registry.register(WeatherTool(api_key=None, session=self.session))

        result = registry.dispatch("weather", '{"city": "Paris"}')

        assert result.startswith("Error executing tool: Weather API key not configured")

    @pytest.mark.parametrize("message,expected", [
        ("What's the weather in Paris?", True),
        ("temperature in Delhi", True),
        ("How hot is it in Dubai", True),
        ("what is it like outside", True),
        ("climate of Norway", True),
        ("convert 5 km to miles", False),
    ])
    def test_matches(self, message, expected):
        assert self.tool.matches(message) is expected
