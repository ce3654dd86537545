from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    db_path: Path = Path("db/portal.duckdb")
    export_path: Path = Path("exports")
    log_path: Path = Path("logs")

    geocoder_url: str = "https://nominatim.openstreetmap.org/search"
    geocoder_user_agent: str = "MonolithePortal/1.0 (contact@monolithe.pro)"
    geocoder_country: str = "fr"
    geocoder_timeout: float = 10.0
    geocoder_min_interval: float = 1.1  # Nominatim usage policy: 1 req/s


settings = Settings()
