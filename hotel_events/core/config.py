from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Hotel Event Reservation API"
    API_V1_STR: str = "/api/v1"
    SECRET_KEY: str = "changeme"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 8
    LOG_LEVEL: str = "INFO"

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "hotel_events"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: str = ""
    CREATE_DATABASE_ON_STARTUP: bool = True

    # Public URL used for booking verification links and QR payloads
    BASE_URL: str = "http://localhost:8000"
    QR_SIZE: int = 300

    # Bookings
    ENFORCE_BOOKING_TRANSITIONS: bool = False
    REFERENCE_CODE_MAX_ATTEMPTS: int = 10

    # Notification retention job
    NOTIFICATION_RETENTION_DAYS: int = 30
    NOTIFICATION_CLEANUP_ENABLED: bool = True
    NOTIFICATION_CLEANUP_INTERVAL_SECONDS: int = 60 * 60 * 24

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    def assemble_db_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

settings = Settings()
settings.DATABASE_URL = settings.assemble_db_url()
