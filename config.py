# config.py — environment-driven settings
import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

# Load .env before anything reads os.environ
load_dotenv()

# Keys shipped in example .env files; treated as "not configured"
PLACEHOLDER_KEYS = {
    "hf_your_token_here",
    "your_gemini_api_key_here",
    "your_openai_api_key_here",
}


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings(BaseModel):
    # Provider credentials: presence selects whether a provider joins the chain
    gemini_api_key: str = ""
    openai_api_key: str = ""
    huggingface_token: str = ""

    gemini_model: str = "gemini-2.0-flash"
    openai_model: str = "gpt-3.5-turbo"
    huggingface_model: str = "microsoft/DialoGPT-medium"
    api_timeout: int = 30

    rate_limit_max_requests: int = 100
    rate_limit_window_seconds: int = 60
    rate_limit_max_clients: int = 10000

    max_content_length: int = 1024 * 1024  # 1MB
    secret_key: str = "dev-secret-key"
    session_cookie_secure: bool = False
    cors_origins: List[str] = ["*"]
    log_file: str = ""
    debug: bool = False
    port: int = 5000

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            huggingface_token=os.getenv("HUGGINGFACE_TOKEN", ""),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-3.5-turbo"),
            huggingface_model=os.getenv("HUGGINGFACE_MODEL", "microsoft/DialoGPT-medium"),
            api_timeout=int(os.getenv("API_TIMEOUT", 30)),
            rate_limit_max_requests=int(os.getenv("RATE_LIMIT_MAX_REQUESTS", 100)),
            rate_limit_window_seconds=int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", 60)),
            rate_limit_max_clients=int(os.getenv("RATE_LIMIT_MAX_CLIENTS", 10000)),
            max_content_length=int(os.getenv("MAX_CONTENT_LENGTH", 1024 * 1024)),
            secret_key=os.getenv("SECRET_KEY", "dev-secret-key"),
            session_cookie_secure=_env_bool("SESSION_COOKIE_SECURE"),
            cors_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
            log_file=os.getenv("LOG_FILE", ""),
            debug=_env_bool("DEBUG"),
            port=int(os.getenv("PORT", 5000)),
        )
