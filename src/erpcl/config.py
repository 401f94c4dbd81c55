"""Client configuration resolved from arguments and environment variables."""

import os
from dataclasses import dataclass
from typing import Optional

from erpcl.domain.errors import ValidationError

DEFAULT_API_URL = "http://localhost:5000/api"
DEFAULT_TIMEOUT = 5.0
DEFAULT_POLL_INTERVAL = 30.0


@dataclass(frozen=True)
class ClientConfig:
    """Settings shared by the backend, the loaders and the poller."""

    api_url: str = DEFAULT_API_URL
    token: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL


def _seconds(name: str, value: str) -> float:
    try:
        seconds = float(value)
    except ValueError:
        raise ValidationError(f"{name} must be a number of seconds, got '{value}'")
    if seconds <= 0:
        raise ValidationError(f"{name} must be positive, got '{value}'")
    return seconds


def load_config(
    api_url: Optional[str] = None,
    token: Optional[str] = None,
    timeout: Optional[float] = None,
    poll_interval: Optional[float] = None,
) -> ClientConfig:
    """Resolve configuration.

    Explicit arguments win over the ERPCL_API_URL, ERPCL_TOKEN,
    ERPCL_TIMEOUT and ERPCL_POLL_INTERVAL environment variables, which win
    over the defaults.

    Raises:
        ValidationError: If a timeout or interval is not a positive number
    """
    if api_url is None:
        api_url = os.environ.get("ERPCL_API_URL") or DEFAULT_API_URL

    if token is None:
        token = os.environ.get("ERPCL_TOKEN") or None

    if timeout is None:
        env_timeout = os.environ.get("ERPCL_TIMEOUT")
        timeout = _seconds("ERPCL_TIMEOUT", env_timeout) if env_timeout else DEFAULT_TIMEOUT
    elif timeout <= 0:
        raise ValidationError(f"timeout must be positive, got '{timeout}'")

    if poll_interval is None:
        env_interval = os.environ.get("ERPCL_POLL_INTERVAL")
        poll_interval = (
            _seconds("ERPCL_POLL_INTERVAL", env_interval)
            if env_interval
            else DEFAULT_POLL_INTERVAL
        )

    return ClientConfig(
        api_url=api_url.rstrip("/"),
        token=token,
        timeout=float(timeout),
        poll_interval=float(poll_interval),
    )
