from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://pledgeline.app,https://dash.pledgeline.app"
    CORS_ORIGINS: str = "*"

    # Commitment-line samples per day when the caller does not ask for a density.
    DEFAULT_POINTS_PER_DAY: int = 1

    # Upper bound on day-by-day series served over HTTP (~10 years).
    MAX_SERIES_DAYS: int = 3660

    # Upper bound on points in one sampled commitment line (days x density).
    MAX_SERIES_POINTS: int = 50_000

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
