import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    openrouter_api_key: str = ""
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
    ]
    environment: str = "production"  # "development" exposes upstream error details
    log_level: str = "INFO"

    # Completion service
    completion_url: str = "https://openrouter.ai/api/v1/chat/completions"
    completion_model: str = "qwen/qwen-2.5-72b-instruct"
    temperature: float = 0.3
    max_tokens: int = 1000
    request_timeout: float = 30.0  # seconds, whole call
    http_referer: str = "http://localhost:3000"
    app_title: str = "JobSnip Resume Analyzer"

    # Inbound limits
    max_body_size_mb: int = 10
    rate_limit: str = "10/minute"
    rate_limit_enabled: bool = True

    host: str = "0.0.0.0"
    port: int = 3000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def max_body_bytes(self) -> int:
        return self.max_body_size_mb * 1024 * 1024


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
