import logging
import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

from draftvista.llm.constants import LLMModels

logger = logging.getLogger(__name__)


def _env_number(name: str, default, cast=int):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %r", name, raw, default)
        return default


@dataclass
class Config:
    model_name: str = LLMModels.GEMINI_2_5_FLASH.value
    upload_dir: str = "uploads"
    max_file_size: int = 10 * 1024 * 1024
    port: int = 3001
    frontend_url: str = "http://localhost:3000"
    allowed_extensions: Tuple[str, ...] = (".pdf", ".docx", ".doc")

    # Oracle retries; each analysis type has its own delay
    max_retries: int = 2
    pre_submission_retry_delay: float = 3.0
    post_rejection_retry_delay: float = 1.5

    scrape_timeout: float = 30.0
    max_manuscript_chars: int = 30000

    cleanup_interval_hours: float = 6
    cleanup_max_age_hours: float = 24

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """Build a config from environment variables (and a .env file if present)."""
        load_dotenv()
        defaults = cls()
        return cls(
            model_name=os.getenv("GEMINI_MODEL", defaults.model_name),
            upload_dir=os.getenv("UPLOAD_DIR", defaults.upload_dir),
            max_file_size=_env_number("MAX_FILE_SIZE", defaults.max_file_size),
            port=_env_number("PORT", defaults.port),
            frontend_url=os.getenv("FRONTEND_URL", defaults.frontend_url),
            max_retries=_env_number("LLM_MAX_RETRIES", defaults.max_retries),
            scrape_timeout=_env_number("SCRAPE_TIMEOUT", defaults.scrape_timeout, float),
            cleanup_interval_hours=_env_number("CLEANUP_INTERVAL_HOURS", defaults.cleanup_interval_hours, float),
            cleanup_max_age_hours=_env_number("CLEANUP_MAX_AGE_HOURS", defaults.cleanup_max_age_hours, float),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
        )
