"""Factory functions for creating backend instances."""

from typing import Optional

from erpcl.api.http import HttpBackend
from erpcl.config import ClientConfig, load_config
from erpcl.domain.session import Session


def create_http_backend(
    session: Session, config: Optional[ClientConfig] = None
) -> HttpBackend:
    """Create an HTTP backend for the configured API.

    Args:
        session: Session whose token is sent with every request
        config: Client configuration. If None, it is resolved from the
            ERPCL_* environment variables and defaults.

    Returns:
        HttpBackend instance
    """
    if config is None:
        config = load_config()
    return HttpBackend(config.api_url, session=session, timeout=config.timeout)
