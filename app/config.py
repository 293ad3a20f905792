#config.py
import os
from pydantic_settings import BaseSettings
from pydantic import Field
from pydantic_settings import SettingsConfigDict
from typing import List
from functools import lru_cache

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore", populate_by_name=True)
    # Application Settings
    APP_NAME: str = "Medical Connect Booking API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = int(os.environ.get("PORT", 8000))

    # Database Settings
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "sqlite:///./medconnect.db")

    # Security Settings
    SECRET_KEY: str = Field(default="change-me-in-prod", alias="JWT_SECRET_KEY")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24

    # CORS Settings (accept comma-separated strings to avoid JSON parsing in env)
    ALLOWED_ORIGINS: str = os.environ.get("ALLOWED_ORIGINS", "*")
    ALLOWED_METHODS: str = os.environ.get("ALLOWED_METHODS", "GET,POST,PUT,DELETE,OPTIONS")
    ALLOWED_HEADERS: str = os.environ.get("ALLOWED_HEADERS", "*")

    # Upload / audio storage
    MAX_UPLOAD_SIZE: int = 50 * 1024 * 1024  # 50MB
    UPLOAD_DIR: str = "uploads"
    AUDIO_BUCKET: str = "audio-recordings"
    AUDIO_CONTENT_TYPE: str = "audio/wav"
    BASE_URL: str = os.environ.get("BASE_URL", "http://localhost:8000")

    # Video calls
    FRONTEND_URL: str = os.environ.get("FRONTEND_URL", "http://localhost:3000")
    MEET_LINK: str = os.environ.get("MEET_LINK", "https://meet.google.com/kpe-qfki-pdb")
    STREAM_API_KEY: str = os.environ.get("STREAM_API_KEY", "")
    STREAM_API_SECRET: str = os.environ.get("STREAM_API_SECRET", "")
    STREAM_BASE_URL: str = "https://video.stream-io-api.com"
    VIDEO_PROVIDER_TIMEOUT_SEC: float = 10.0

    # Email
    EMAIL_USER: str = os.environ.get("EMAIL_USER", "")
    EMAIL_APP_PASSWORD: str = os.environ.get("EMAIL_APP_PASSWORD", "")
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_TIMEOUT_SEC: float = 15.0
    EMAIL_BRAND: str = "Rwanda Medical Connect"

    # Scheduling
    SCHEDULE_TIMEZONE: str = "UTC"
    NOTIFY_ON_REJECTION: bool = False

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Rate Limiting
    RATE_LIMIT_PER_MINUTE: int = 120

    # Accept comma-separated strings for list envs in addition to JSON arrays
    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_ORIGINS)

    @property
    def allowed_methods_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_METHODS)

    @property
    def allowed_headers_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_HEADERS)

    @property
    def video_provider_configured(self) -> bool:
        return bool(self.STREAM_API_KEY and self.STREAM_API_SECRET)


@lru_cache()
def get_settings() -> Settings:
    s = Settings()
    # Normalize ALLOWED_ORIGINS if provided as comma-separated string env var CORS_ORIGINS
    cors_env = os.environ.get("CORS_ORIGINS")
    if cors_env:
        s.ALLOWED_ORIGINS = cors_env
    return s

settings: Settings = get_settings()
