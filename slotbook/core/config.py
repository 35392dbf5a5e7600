from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STORE_PROVIDER: str = "memory"  # "memory" | "json"
    DATA_DIR: str = "./data"
    SEED_DEMO_DATA: bool = True

    # empty -> wizard runs against the in-process use cases
    BOOKING_API_BASE_URL: str = ""

    BUSINESS_HOURS: str = "09:00-12:00,13:00-17:00"
    CLOSED_WEEKDAYS: list[int] = []
    SLOT_INTERVAL_MINUTES: int = 30

    CATALOG_TIMEOUT_SECONDS: float = 15.0
    SUBMIT_TIMEOUT_SECONDS: float = 20.0


settings = Settings()
