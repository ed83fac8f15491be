from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "YTI Standup API"
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    cors_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = True
    log_level: str = "INFO"
    request_id_header: str = "X-Request-ID"

    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout_seconds: float = 120.0
    gemini_temperature: float = 0.2

    # Used when a request carries no display name.
    default_standup_name: str = ""

    data_dir: str = "data"
    markdown_dir: str = "ytis"
    history_file_name: str = "history.json"
    history_max_entries: int = 200
    history_default_limit: int = 7
    history_max_limit: int = 50

    max_audio_bytes: int = 20 * 1024 * 1024
    max_text_chars: int = 10_000

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def history_path(self) -> Path:
        return Path(self.data_dir) / self.history_file_name


settings = Settings()
