"""WMO weather interpretation codes mapped to conditions, icons and descriptions.

All lookups are total: unknown codes fall back to the clear-sky condition,
the sun icon, and "Unknown weather".
"""

from weatherism.models.weather import WeatherCondition

DEFAULT_ICON = "sun.max"
UNKNOWN_DESCRIPTION = "Unknown weather"

_CONDITION_GROUPS: dict[WeatherCondition, tuple[int, ...]] = {
    WeatherCondition.CLEAR: (0,),
    WeatherCondition.PARTLY_CLOUDY: (1, 2),
    WeatherCondition.CLOUDY: (3,),
    WeatherCondition.FOGGY: (45, 48),
    WeatherCondition.DRIZZLE: (51, 53, 55, 56, 57),
    WeatherCondition.RAINY: (61, 63, 65, 66, 67, 80, 81, 82),
    WeatherCondition.SNOWY: (71, 73, 75, 77, 85, 86),
    WeatherCondition.STORMY: (95, 96, 99),
}

CONDITIONS: dict[int, WeatherCondition] = {
    code: condition
    for condition, codes in _CONDITION_GROUPS.items()
    for code in codes
}

# Icon names follow the SF Symbols naming used by mobile presenters
ICONS: dict[int, str] = {
    0: "sun.max",
    1: "cloud.sun", 2: "cloud.sun", 3: "cloud.sun",
    45: "cloud.fog", 48: "cloud.fog",
    51: "cloud.drizzle", 53: "cloud.drizzle", 55: "cloud.drizzle",
    56: "cloud.sleet", 57: "cloud.sleet",
    61: "cloud.rain", 63: "cloud.rain", 65: "cloud.rain",
    66: "cloud.sleet", 67: "cloud.sleet",
    71: "cloud.snow", 73: "cloud.snow", 75: "cloud.snow", 77: "cloud.snow",
    80: "cloud.heavyrain", 81: "cloud.heavyrain", 82: "cloud.heavyrain",
    85: "cloud.snow", 86: "cloud.snow",
    95: "cloud.bolt",
    96: "cloud.bolt.rain", 99: "cloud.bolt.rain",
}

DESCRIPTIONS: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}

# Background gradient (top, bottom) per condition
THEMES: dict[WeatherCondition, tuple[str, str]] = {
    WeatherCondition.CLEAR: ("#4A90E2", "#F5A623"),
    WeatherCondition.PARTLY_CLOUDY: ("#5DADE2", "#AEB6BF"),
    WeatherCondition.CLOUDY: ("#7F8C8D", "#BDC3C7"),
    WeatherCondition.FOGGY: ("#95A5A6", "#D5DBDB"),
    WeatherCondition.DRIZZLE: ("#5D6D7E", "#85C1E9"),
    WeatherCondition.RAINY: ("#2C3E50", "#5D6D7E"),
    WeatherCondition.SNOWY: ("#D6EAF8", "#FDFEFE"),
    WeatherCondition.STORMY: ("#17202A", "#5B2C6F"),
}
DEFAULT_THEME = ("#3498DB", "#8E44AD")


def weather_condition(code: int) -> WeatherCondition:
    """Map a WMO code to its condition group."""
    return CONDITIONS.get(code, WeatherCondition.CLEAR)


def weather_icon_name(code: int) -> str:
    """Map a WMO code to an icon identifier."""
    return ICONS.get(code, DEFAULT_ICON)


def weather_description(code: int) -> str:
    """Map a WMO code to a human readable description."""
    return DESCRIPTIONS.get(code, UNKNOWN_DESCRIPTION)


def background_theme(condition: WeatherCondition | None) -> tuple[str, str]:
    """Gradient colours for a condition, or the neutral theme without weather."""
    if condition is None:
        return DEFAULT_THEME
    return THEMES[condition]


def format_temperature(celsius: float) -> str:
    """Format a temperature for display, e.g. ``22°C``."""
    return f"{round(celsius):d}°C"
