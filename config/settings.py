import os
from pathlib import Path
from dotenv import load_dotenv

from backend.errors import ConfigurationError

# Load environment variables from .env next to this file
BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")

class Settings:
    GEMINI_API_KEY: str | None = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-image")

    BACKEND_URL: str = os.getenv("BACKEND_URL", "http://127.0.0.1:8000")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    POLL_INTERVAL: float = 1.0  # seconds

    def require_api_key(self) -> str:
        """
        Return the Gemini API key or fail. Called once at startup.
        """
        if not self.GEMINI_API_KEY:
            raise ConfigurationError(
                "GEMINI_API_KEY is not set (environment or config/.env)"
            )
        return self.GEMINI_API_KEY

settings = Settings()
