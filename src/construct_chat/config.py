"""Application configuration."""

import os
from dataclasses import dataclass
from pathlib import Path

import dotenv

dotenv.load_dotenv()


# Project root is two levels up from this file (src/construct_chat/config.py -> project root)
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


@dataclass
class AppSettings:
    """Main application settings with environment variable overrides."""

    # Server
    host: str = "127.0.0.1"
    port: int = 3003

    # Persisted user settings (endpoint, presets, sampling knobs)
    settings_path: str = str(PROJECT_ROOT / "llm-settings.json")

    # Outbound HTTP
    request_timeout: float = 120.0

    # Horde job queue
    horde_api_url: str = "https://aihorde.net/api"
    horde_poll_interval: float = 5.0
    horde_max_polls: int = 120
    horde_deadline_seconds: float = 900.0

    @classmethod
    def from_env(cls) -> "AppSettings":
        return cls(
            host=os.getenv("APP_HOST", cls.host),
            port=int(os.getenv("APP_PORT", cls.port)),
            settings_path=os.getenv("LLM_SETTINGS_PATH", cls.settings_path),
            request_timeout=float(os.getenv("LLM_REQUEST_TIMEOUT", cls.request_timeout)),
            horde_api_url=os.getenv("HORDE_API_URL", cls.horde_api_url),
            horde_poll_interval=float(os.getenv("HORDE_POLL_INTERVAL", cls.horde_poll_interval)),
            horde_max_polls=int(os.getenv("HORDE_MAX_POLLS", cls.horde_max_polls)),
            horde_deadline_seconds=float(os.getenv("HORDE_DEADLINE_SECONDS", cls.horde_deadline_seconds)),
        )


settings = AppSettings.from_env()
