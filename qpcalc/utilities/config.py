"""Configuration management for the Quantity Price Calculator."""
import os
from typing import Final
from pathlib import Path

# Load environment variables from .env file if it exists
try:
    from dotenv import load_dotenv
    env_path = Path(__file__).parent.parent / '.env'
    if env_path.exists():
        load_dotenv(env_path)
except ImportError:
    pass  # dotenv not installed, using defaults

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# Pricing
CURRENCY_SYMBOL: Final[str] = os.getenv('CURRENCY_SYMBOL', '₹')

# Offline compute worker
OFFLINE_WORKER_ENABLED: Final[bool] = os.getenv('OFFLINE_WORKER_ENABLED', 'True').lower() == 'true'
OFFLINE_TIMEOUT_SECONDS: Final[float] = float(os.getenv('OFFLINE_TIMEOUT_SECONDS', '2.0'))

# In-memory limits
MAX_EVENTS: Final[int] = int(os.getenv('MAX_EVENTS', '300'))
MAX_SESSIONS: Final[int] = int(os.getenv('MAX_SESSIONS', '1000'))
