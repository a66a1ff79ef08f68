from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # API configuration
    api_version: str = "1.0"
    log_level: str = "INFO"

    # Route model
    closure_threshold_km: float = 0.001  # ~1 m around the first point

    # Initial map view handed to the browser client (NYC)
    default_center_lat: float = 40.7128
    default_center_lng: float = -74.0060
    default_zoom: int = 10

    # Geocoding (Nominatim-compatible /search endpoint)
    geocoder_url: str = "https://nominatim.openstreetmap.org/search"
    geocoder_user_agent: str = "loop-route-planner/0.1"
    geocoder_timeout_s: float = 10.0
    search_result_limit: int = 5
    search_min_query_length: int = 3
    search_debounce_s: float = 0.5

    model_config = SettingsConfigDict(
        env_prefix="ROUTE_PLANNER_", env_file=".env", extra="ignore"
    )


settings = Settings()
