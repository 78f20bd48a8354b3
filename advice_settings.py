"""Runtime configuration read from the environment."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from advice_errors import ConfigurationError

MISSING_API_KEY_MESSAGE = "API key is missing. Check your .env file."

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1"
DEFAULT_TIMEOUT = 30.0


@dataclass
class Settings:
    """Configuration shared by the server and the command-line tool."""

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    api_base: str = DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT
    """Seconds to wait for the upstream answer before giving up."""

    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = ("*",)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        require_api_key: bool = True,
    ) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.
            require_api_key: Fail when ``GEMINI_API_KEY`` is absent.

        Raises:
            ConfigurationError: If the key is required but missing, or a
                numeric variable cannot be parsed.
        """
        env = os.environ if environ is None else environ

        api_key = (env.get("GEMINI_API_KEY") or "").strip() or None
        if require_api_key and not api_key:
            raise ConfigurationError(MISSING_API_KEY_MESSAGE)

        timeout = _parse_number(env, "GEMINI_TIMEOUT", DEFAULT_TIMEOUT, float)
        if timeout <= 0:
            raise ConfigurationError("GEMINI_TIMEOUT must be greater than zero")

        origins = tuple(
            o.strip() for o in env.get("CORS_ORIGINS", "*").split(",") if o.strip()
        )

        return cls(
            api_key=api_key,
            model=env.get("GEMINI_MODEL", DEFAULT_MODEL),
            api_base=env.get("GEMINI_API_BASE", DEFAULT_API_BASE),
            timeout=timeout,
            host=env.get("HOST", "0.0.0.0"),
            port=_parse_number(env, "PORT", 5000, int),
            debug=env.get("DEBUG", "false").lower() == "true",
            log_level=env.get("LOG_LEVEL", "INFO"),
            cors_origins=origins or ("*",),
        )


def _parse_number(env: Mapping[str, str], name: str, default, kind):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return kind(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
