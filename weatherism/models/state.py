"""Observable application state."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from weatherism.models.weather import GeocodingResult, WeatherResponse


class AppState(BaseModel):
    """Everything the presentation layer renders."""

    model_config = ConfigDict(frozen=True)

    is_loading: bool = Field(False, description="A location or weather request is in flight")
    error_message: Optional[str] = Field(None, description="User-facing error")
    weather: Optional[WeatherResponse] = Field(None, description="Latest weather snapshot")
    place: Optional[GeocodingResult] = Field(None, description="Place the snapshot belongs to")

    @property
    def has_weather_data(self) -> bool:
        return self.weather is not None

    @property
    def has_error(self) -> bool:
        return self.error_message is not None
