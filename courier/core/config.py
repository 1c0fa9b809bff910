# courier/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Courier API settings, read from the environment or a local .env file.

    Needed to boot:
      - DATABASE_URL: orders, users and order drafts live here
        (Supabase Postgres in production, sqlite is fine for local runs)
      - SUPABASE_URL / SUPABASE_KEY: project the mobile app signs in against
      - SUPABASE_JWT_SECRET: verifies the bearer tokens the app sends

    Tunable:
      - SUPABASE_SERVICE_ROLE_KEY: needed only to upload item pictures
      - ITEM_IMAGE_BUCKET: Storage bucket holding those pictures
      - BUSINESS_TIMEZONE: IANA zone in which pickup days and opening
        hours are judged
      - CORS_ORIGINS: JSON list of origins (Expo dev servers by default)
    """

    PROJECT_NAME: str = "Courier Booking API"
    API_V1_STR: str = "/api/v1"

    # Supabase / DB config
    SUPABASE_URL: str
    SUPABASE_KEY: str
    DATABASE_URL: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # Service role key bypasses RLS (backend only)
    SUPABASE_SERVICE_ROLE_KEY: str | None = None

    ITEM_IMAGE_BUCKET: str = "item-images"

    # Pickup scheduling; matches the default country of pickup locations
    BUSINESS_TIMEZONE: str = "Africa/Lagos"

    CORS_ORIGINS: list[str] = [
        "http://localhost:8081",
        "http://localhost:19006",
        "http://127.0.0.1:8081",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Parsed once per process."""
    return Settings()
