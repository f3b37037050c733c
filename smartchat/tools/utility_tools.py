"""
Utility tools: arithmetic, unit conversion and current time.

These tools are cheap and deterministic, so they also match user messages
directly and skip the model's tool-call round trip.
"""

import ast
import math
import operator
import re
from datetime import datetime
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..exceptions import ToolExecutionError
from ..models.tool_models import ToolParameter, ToolParameterType
from .base import BaseTool

_LOG10_2 = math.log10(2)


class CalculatorTool(BaseTool):
    """Evaluate arithmetic expressions."""

    MAX_EXPONENT = 1000
    MAX_RESULT_DIGITS = 4000

    _BINARY_OPERATORS = {
        ast.Add: operator.add,
        ast.Sub: operator.sub,
        ast.Mult: operator.mul,
        ast.Div: operator.truediv,
        ast.FloorDiv: operator.floordiv,
        ast.Mod: operator.mod,
        ast.Pow: operator.pow,
    }
    _UNARY_OPERATORS = {
        ast.UAdd: operator.pos,
        ast.USub: operator.neg,
    }
    _ALLOWED_CHARS = re.compile(r"^[0-9+\-*/%().\s]+$")
    _ARITHMETIC = re.compile(r"\d+\s*[+\-*/]\s*\d+")
    _OPERATOR_OR_DIGIT = re.compile(r"[+\-*/×÷]|\d")

    @property
    def name(self) -> str:
        return "calculator"

    @property
    def description(self) -> str:
        return (
            "Performs mathematical calculations. "
            "Use this tool when the user asks to calculate, compute, or solve math problems. "
            "Supports: addition (+), subtraction (-), multiplication (*), division (/), "
            "exponents (**), and parentheses."
        )

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="expression",
                type=ToolParameterType.STRING,
                description="Mathematical expression to calculate (e.g., '25 * 47', '(10 + 5) / 3')",
                required=True,
            ),
        ]

    @property
    def returns(self) -> str:
        return "Numeric result of the expression"

    @property
    def examples(self) -> Optional[List[str]]:
        return ['calculator {"expression": "25 * 47"}']

    def matches(self, message: str) -> bool:
        lower = message.lower()
        return (
            "calculate" in lower
            or "compute" in lower
            or ("what is" in lower and bool(self._OPERATOR_OR_DIGIT.search(message)))
            or "solve" in lower
            or bool(self._ARITHMETIC.search(lower))
        )

    def execute(self, expression: str) -> str:
        """Evaluate the expression without eval()."""
        cleaned = self._normalize(str(expression))

        if not cleaned or not self._ALLOWED_CHARS.match(cleaned):
            raise ToolExecutionError(f"Invalid mathematical expression: {expression!r}")
        if not re.search(r"\d", cleaned):
            raise ToolExecutionError("Expression must contain at least one number")

        try:
            tree = ast.parse(cleaned, mode="eval")
        except SyntaxError as e:
            raise ToolExecutionError(f"Invalid mathematical expression: {expression!r}") from e

        try:
            value = self._evaluate(tree.body)
        except ZeroDivisionError as e:
            raise ToolExecutionError("Division by zero") from e
        except OverflowError as e:
            raise ToolExecutionError("Result is too large") from e

        return self._format_number(value)

    @staticmethod
    def _normalize(expression: str) -> str:
        return (
            expression.replace("×", "*")
            .replace("÷", "/")
            .replace("^", "**")
            .replace(",", "")
            .strip()
        )

    def _evaluate(self, node: ast.AST):
        if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)) \
                and not isinstance(node.value, bool):
            return node.value

        if isinstance(node, ast.BinOp) and type(node.op) in self._BINARY_OPERATORS:
            left = self._evaluate(node.left)
            right = self._evaluate(node.right)
            if isinstance(node.op, ast.Pow):
                self._check_power(left, right)
            return self._check_size(self._BINARY_OPERATORS[type(node.op)](left, right))

        if isinstance(node, ast.UnaryOp) and type(node.op) in self._UNARY_OPERATORS:
            return self._UNARY_OPERATORS[type(node.op)](self._evaluate(node.operand))

        raise ToolExecutionError("Unsupported expression")

    def _check_power(self, base, exponent) -> None:
        if abs(exponent) > self.MAX_EXPONENT:
            raise ToolExecutionError(f"Exponent too large (max {self.MAX_EXPONENT})")
        # Estimate the digit count before pow() materialises a huge integer
        if isinstance(exponent, (int, float)) and exponent > 0 and abs(base) > 1 \
                and exponent * math.log10(abs(base)) > self.MAX_RESULT_DIGITS:
            raise ToolExecutionError("Result is too large")

    def _check_size(self, value):
        if isinstance(value, int) and abs(value).bit_length() * _LOG10_2 > self.MAX_RESULT_DIGITS:
            raise ToolExecutionError("Result is too large")
        return value

    @staticmethod
    def _format_number(value) -> str:
        if isinstance(value, complex):
            raise ToolExecutionError("Result is not a real number")
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)


# conversion -> (factor, from label, to label)
_CONVERSIONS = {
    "km_to_miles": (0.621371, "km", "miles"),
    "miles_to_km": (1.60934, "miles", "km"),
    "m_to_feet": (3.28084, "meters", "feet"),
    "feet_to_m": (0.3048, "feet", "meters"),
    "inches_to_cm": (2.54, "inches", "cm"),
    "cm_to_inches": (0.393701, "cm", "inches"),
    "kg_to_lbs": (2.20462, "kg", "lbs"),
    "lbs_to_kg": (0.453592, "lbs", "kg"),
    "g_to_oz": (0.035274, "g", "oz"),
    "oz_to_g": (28.3495, "oz", "g"),
}

_CONVERSION_ALIASES = {
    "m_to_ft": "m_to_feet",
    "ft_to_m": "feet_to_m",
    "in_to_cm": "inches_to_cm",
    "cm_to_in": "cm_to_inches",
    "kg_to_lb": "kg_to_lbs",
    "lb_to_kg": "lbs_to_kg",
    "celsius_to_fahrenheit": "c_to_f",
    "fahrenheit_to_celsius": "f_to_c",
}

_TEMPERATURE_CONVERSIONS = ("c_to_f", "f_to_c")

_SUPPORTED_SUMMARY = "km↔miles, m↔feet, inches↔cm, kg↔lbs, g↔oz, celsius↔fahrenheit"


class ConverterTool(BaseTool):
    """Convert between length, weight and temperature units."""

    _PATTERNS = [
        re.compile(r"(km|mile|meter|feet|inch|cm).*to.*(km|mile|meter|feet|inch|cm)"),
        re.compile(r"(kg|lb|pound|gram|ounce).*to.*(kg|lb|pound|gram|ounce)"),
        re.compile(r"(celsius|fahrenheit|degree).*to.*(celsius|fahrenheit|degree)"),
        re.compile(r"how many.*(km|mile|meter|feet|kg|lb|gram)"),
    ]

    @property
    def name(self) -> str:
        return "converter"

    @property
    def description(self) -> str:
        return (
            "Converts between units. "
            "Length: km, m, miles, feet, inches. "
            "Weight: kg, g, lbs, oz. "
            "Temperature: celsius, fahrenheit."
        )

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="value",
                type=ToolParameterType.NUMBER,
                description="Value to convert",
                required=True,
            ),
            ToolParameter(
                name="conversion",
                type=ToolParameterType.STRING,
                description="Type of conversion",
                required=True,
                enum=list(_CONVERSIONS.keys()) + list(_TEMPERATURE_CONVERSIONS),
            ),
        ]

    @property
    def returns(self) -> str:
        return "Human-readable conversion, e.g. '📏 100.00 km = 62.14 miles'"

    def matches(self, message: str) -> bool:
        lower = message.lower()
        if "convert" in lower:
            return True
        return any(pattern.search(lower) for pattern in self._PATTERNS)

    def execute(self, value: float, conversion: str) -> str:
        """Convert the value and format both sides."""
        try:
            amount = float(value)
        except (TypeError, ValueError) as e:
            raise ToolExecutionError(f"Value must be a number, got {value!r}") from e

        key = str(conversion).strip().lower()
        key = _CONVERSION_ALIASES.get(key, key)

        if key == "c_to_f":
            return f"🌡️ {amount:.1f}°C = {amount * 9.0 / 5.0 + 32:.1f}°F"
        if key == "f_to_c":
            return f"🌡️ {amount:.1f}°F = {(amount - 32) * 5.0 / 9.0:.1f}°C"

        if key not in _CONVERSIONS:
            raise ToolExecutionError(
                f"Unknown conversion: {conversion}. Supported conversions: {_SUPPORTED_SUMMARY}"
            )

        factor, from_label, to_label = _CONVERSIONS[key]
        converted = amount * factor
        emoji = "⚖️" if key in ("kg_to_lbs", "lbs_to_kg", "g_to_oz", "oz_to_g") else "📏"
        return f"{emoji} {amount:.2f} {from_label} = {converted:.2f} {to_label}"


class TimeTool(BaseTool):
    """Report the current date and time in a timezone."""

    lenient_arguments = True

    _NOW_PATTERN = re.compile(r"(time|date|day).*now")

    def __init__(
        self,
        default_timezone: str = "Asia/Kolkata",
        clock: Optional[Callable[[ZoneInfo], datetime]] = None,
    ):
        """
        Initialize time tool.

        Args:
            default_timezone: IANA zone used when the caller gives none
            clock: Returns the current time in a zone; injectable for tests
        """
        self.default_timezone = default_timezone
        self._clock = clock or (lambda zone: datetime.now(zone))

    @property
    def name(self) -> str:
        return "time"

    @property
    def description(self) -> str:
        return (
            "Gets the current date and time. "
            "Use this when the user asks what time it is, what day it is, "
            "or for current date/time information."
        )

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="timezone",
                type=ToolParameterType.STRING,
                description=(
                    "Timezone (e.g., 'Asia/Kolkata', 'America/New_York'). "
                    f"Defaults to '{self.default_timezone}'"
                ),
                required=False,
                default=self.default_timezone,
            ),
            ToolParameter(
                name="format",
                type=ToolParameterType.STRING,
                description="Output format: 'full', 'date', or 'time'. Defaults to 'full'",
                required=False,
                enum=["full", "date", "time"],
                default="full",
            ),
        ]

    @property
    def returns(self) -> str:
        return "Formatted current date and/or time"

    def matches(self, message: str) -> bool:
        lower = message.lower()
        return (
            "what time" in lower
            or "current time" in lower
            or "what day" in lower
            or "what date" in lower
            or ("today" in lower and ("date" in lower or "day" in lower))
            or bool(self._NOW_PATTERN.search(lower))
        )

    def execute(self, timezone: Optional[str] = None, format: str = "full") -> str:
        zone_name = timezone or self.default_timezone
        try:
            zone = ZoneInfo(zone_name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ToolExecutionError(f"Unknown timezone: {zone_name}") from e

        now = self._clock(zone)
        style = (format or "full").lower()

        if style == "date":
            return now.strftime("%A, %B %d, %Y")
        if style == "time":
            return now.strftime("%I:%M:%S %p")
        return f"{now.strftime('%A, %B %d, %Y at %I:%M:%S %p')} {zone_name}"
