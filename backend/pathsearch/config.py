from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "pathsearch"
    log_level: str = "INFO"
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    overpass_area: str = "Genté"
    overpass_highway_filter: str = "highway"
    overpass_timeout_s: float = Field(default=30.0, gt=0)
    ways_file: Optional[str] = None  # Overpass JSON on disk; replaces the network fetch
    snap_epsilon_km: float = Field(default=0.005, ge=0)
    max_snap_distance_km: float = Field(default=2.0, gt=0)
    coverage_buffer_m: float = Field(default=250.0, ge=0)
    route_deadline_s: float = Field(default=5.0, gt=0)

    class Config:
        env_prefix = "PATHSEARCH_"
        env_file = ".env"


settings = Settings()
