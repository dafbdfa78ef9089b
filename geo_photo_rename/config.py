"""
Runtime configuration loaded from the environment (and an optional .env file).
"""

import os
from typing import Mapping, NamedTuple, Optional

from dotenv import load_dotenv

from . import __version__

API_KEY_VAR = "GEOCODE_API_KEY"
USER_AGENT_VAR = "GEOCODE_USER_AGENT"
DEFAULT_USER_AGENT = f"geo-photo-rename/{__version__}"


class ConfigurationError(Exception):
    """Raised when required configuration is missing."""


class Settings(NamedTuple):
    api_key: str
    user_agent: str = DEFAULT_USER_AGENT


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    When ``environ`` is not given, a ``.env`` file is loaded into
    ``os.environ`` first; variables already set in the environment win.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    api_key = environ.get(API_KEY_VAR, "").strip()
    if not api_key:
        raise ConfigurationError(
            f"{API_KEY_VAR} is not set. Export it or add it to a .env file."
        )

    user_agent = environ.get(USER_AGENT_VAR, "").strip() or DEFAULT_USER_AGENT
    return Settings(api_key=api_key, user_agent=user_agent)
