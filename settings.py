"""
Configuration for the outcome predictor

Values come from the environment, with a .env file loaded first when present.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv


DEFAULT_MODEL = 'gemini-2.0-flash'

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


class PredictorSettings:
    """Runtime settings read from the environment"""

    def __init__(self, load_env_file: bool = True):
        """
        Args:
            load_env_file: Load a .env file before reading the environment
        """
        if load_env_file:
            load_dotenv()

        self.gemini_api_key = os.getenv('GEMINI_API_KEY', '').strip()
        self.gemini_model = os.getenv('PREDICTOR_GEMINI_MODEL', DEFAULT_MODEL).strip() or DEFAULT_MODEL
        self.ai_enabled = _env_bool('PREDICTOR_AI_ENABLED', True)
        self.temperature = _env_float('PREDICTOR_TEMPERATURE', 0.2)
        self.max_output_tokens = _env_int('PREDICTOR_MAX_OUTPUT_TOKENS', 1000)
        self.log_level = os.getenv('PREDICTOR_LOG_LEVEL', 'INFO').strip().upper() or 'INFO'

    @property
    def ai_available(self) -> bool:
        """True when the Gemini path is enabled and a key is configured"""
        return self.ai_enabled and bool(self.gemini_api_key)


def configure_logging(level: Optional[str] = None):
    """Set up root logging in the format used across the service"""
    logging.basicConfig(
        level=getattr(logging, (level or 'INFO').upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
