"""Environment-driven settings for the identity and backend services."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from field_ops.errors import ConfigError

load_dotenv()

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    identity_url: str
    backend_url: str
    token: str = ""
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "WARNING"

    @classmethod
    def from_env(
        cls,
        identity_url: str | None = None,
        backend_url: str | None = None,
        token: str | None = None,
    ) -> "Settings":
        """Build settings from arguments, falling back to env vars / ``.env``.

        Raises:
            ConfigError: If a service URL is missing or the timeout is not
                a positive number.
        """
        identity = (identity_url or os.getenv("FIELD_OPS_IDENTITY_URL", "")).rstrip("/")
        backend = (backend_url or os.getenv("FIELD_OPS_BACKEND_URL", "")).rstrip("/")
        if not identity or not backend:
            raise ConfigError(
                "FIELD_OPS_IDENTITY_URL and FIELD_OPS_BACKEND_URL must be set "
                "either as arguments or in a .env file."
            )

        raw_timeout = os.getenv("FIELD_OPS_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigError(f"FIELD_OPS_TIMEOUT must be a number, got {raw_timeout!r}")
        if timeout <= 0:
            raise ConfigError(f"FIELD_OPS_TIMEOUT must be positive, got {raw_timeout!r}")

        return cls(
            identity_url=identity,
            backend_url=backend,
            token=token or os.getenv("FIELD_OPS_TOKEN", ""),
            timeout=timeout,
            log_level=os.getenv("FIELD_OPS_LOG_LEVEL", "WARNING").upper(),
        )
