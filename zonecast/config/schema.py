"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field


class RuleOperator(StrEnum):
    LT = "<"
    LE = "<="
    EQ = "="
    GE = ">="
    GT = ">"


class EmptyWindowPolicy(StrEnum):
    FIRST_VALID = "first_valid"  # first valid sample of the full series
    CONSTANT = "constant"  # aggregation.fallback_value


class ColorRule(BaseModel):
    """One (operator, threshold, color) triple.

    Serialized with the key ``value`` for the threshold, matching the
    persisted application state.
    """

    model_config = {"extra": "forbid", "frozen": True, "populate_by_name": True}

    operator: RuleOperator
    threshold: float = Field(alias="value")
    color: str = Field(min_length=1)
    label: str | None = None


class DataSource(BaseModel):
    model_config = {"extra": "forbid", "frozen": True, "populate_by_name": True}

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    is_live: bool = Field(default=False, alias="isLive")
    parameters: list[str] = []
    api_url: str | None = Field(default=None, alias="apiUrl")


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.open-meteo.com/v1/forecast"
    timeout_seconds: float = Field(default=10.0, gt=0.0)
    max_retries: int = Field(default=1, ge=0)
    retry_base_delay: float = Field(default=1.0, ge=0.0)
    hourly_fields: list[str] = [
        "temperature_2m",
        "relative_humidity_2m",
        "wind_speed_10m",
        "surface_pressure",
        "precipitation",
    ]
    timezone: str = "auto"
    past_days: int = Field(default=15, ge=0, le=92)
    future_days: int = Field(default=15, ge=0, le=16)


class CacheConfig(BaseModel):
    model_config = {"extra": "forbid"}

    ttl_minutes: int = Field(default=30, ge=1)
    coordinate_precision: int = Field(default=3, ge=3, le=4)


class AggregationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    empty_window_policy: EmptyWindowPolicy = EmptyWindowPolicy.FIRST_VALID
    fallback_value: float = 0.0


class ClassifierConfig(BaseModel):
    model_config = {"extra": "forbid"}

    default_color: str = "#6b7280"


class SyntheticConfig(BaseModel):
    model_config = {"extra": "forbid"}

    default_style: str = "temperate"
    hour_count: int = Field(default=24, ge=1, le=24 * 31)
    seed: int | None = None


class ZonecastConfig(BaseModel):
    model_config = {"extra": "forbid"}

    provider: ProviderConfig = ProviderConfig()
    cache: CacheConfig = CacheConfig()
    aggregation: AggregationConfig = AggregationConfig()
    classifier: ClassifierConfig = ClassifierConfig()
    synthetic: SyntheticConfig = SyntheticConfig()
    data_sources: list[DataSource] = []
    color_rules: dict[str, list[ColorRule]] = {}

    def data_source(self, source_id: str) -> DataSource | None:
        for source in self.data_sources:
            if source.id == source_id:
                return source
        return None
