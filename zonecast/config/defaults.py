"""Default data sources and color rule sets."""

from zonecast.config.schema import ColorRule, DataSource, RuleOperator

DEFAULT_DATA_SOURCES: list[DataSource] = [
    DataSource(
        id="open-meteo",
        name="Open-Meteo",
        description="Free weather API with global coverage",
        api_url="https://api.open-meteo.com/v1/forecast",
        is_live=True,
        parameters=["temperature_2m", "relative_humidity_2m", "wind_speed_10m", "surface_pressure"],
    ),
    DataSource(
        id="mock-tropical",
        name="Mock - Tropical Climate",
        description="Simulated tropical weather patterns",
        is_live=False,
        parameters=["temperature", "humidity", "wind_speed", "precipitation"],
    ),
    DataSource(
        id="mock-temperate",
        name="Mock - Temperate Climate",
        description="Simulated temperate weather patterns",
        is_live=False,
        parameters=["temperature", "humidity", "wind_speed", "precipitation"],
    ),
]


def _rule(op: RuleOperator, threshold: float, color: str, label: str) -> ColorRule:
    return ColorRule(operator=op, threshold=threshold, color=color, label=label)


DEFAULT_COLOR_RULES: dict[str, list[ColorRule]] = {
    "open-meteo": [
        _rule(RuleOperator.LT, 10, "#3b82f6", "Cold"),
        _rule(RuleOperator.GE, 10, "#10b981", "Mild"),
        _rule(RuleOperator.GE, 25, "#f59e0b", "Warm"),
        _rule(RuleOperator.GE, 35, "#ef4444", "Hot"),
    ],
    "mock-tropical": [
        _rule(RuleOperator.LT, 25, "#10b981", "Comfortable"),
        _rule(RuleOperator.GE, 25, "#f59e0b", "Warm"),
        _rule(RuleOperator.GE, 32, "#ef4444", "Very Hot"),
    ],
    "mock-temperate": [
        _rule(RuleOperator.LT, 5, "#3b82f6", "Cold"),
        _rule(RuleOperator.GE, 5, "#10b981", "Cool"),
        _rule(RuleOperator.GE, 20, "#f59e0b", "Warm"),
    ],
}
