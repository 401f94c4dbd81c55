"""Notification domain service and background poller."""

import logging
import threading
from enum import Enum
from typing import Callable, Optional

from erpcl.api import mappers
from erpcl.api.base import Backend
from erpcl.api.errors import ApiError, TransportError
from erpcl.api.loader import LoadResult, View
from erpcl.config import DEFAULT_POLL_INTERVAL
from erpcl.domain.entities import Notification
from erpcl.domain.session import Session

logger = logging.getLogger(__name__)

FETCH_LIMIT = 10
FETCH_TIMEOUT = 5.0


class NotificationService:
    """Service for the current user's notifications."""

    def __init__(self, backend: Backend, session: Session, limit: int = FETCH_LIMIT):
        """Initialize notification service.

        Args:
            backend: Backend instance
            session: Session; nothing is fetched once it is closed
            limit: Number of notifications to fetch
        """
        self.backend = backend
        self.session = session
        self.limit = limit
        self.view: View[tuple[Notification, ...]] = View(())

    @property
    def notifications(self) -> tuple[Notification, ...]:
        return self.view.data

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.notifications if not n.read)

    def fetch(self) -> tuple[Notification, ...]:
        """Reload the notification list.

        Never raises for backend problems. An unreachable backend or a
        timeout leaves the list unchanged silently; other failures are
        logged and also leave it unchanged.

        Returns:
            The current notification list
        """
        if not self.session.is_active:
            return self.notifications

        sequence = self.view.begin()
        try:
            response = self.backend.get(
                "/notifications", params={"limit": self.limit}, timeout=FETCH_TIMEOUT
            )
            notifications = mappers.notifications_to_domain(response.data or [])
        except TransportError as e:
            logger.debug("Notifications unavailable: %s", e)
            return self.notifications
        except (ApiError, KeyError, TypeError, ValueError) as e:
            logger.error("Error fetching notifications: %s", e)
            return self.notifications

        self.view.resolve(sequence, LoadResult.ok(notifications))
        return self.notifications

    def mark_read(self, notification_id: int) -> tuple[Notification, ...]:
        """Mark one notification read, then reload the list.

        Raises:
            BackendError: If the backend rejects or never receives the change
        """
        self.backend.patch(f"/notifications/{notification_id}/read")
        return self.fetch()

    def mark_all_read(self) -> tuple[Notification, ...]:
        """Mark every notification read, then reload the list.

        Raises:
            BackendError: If the backend rejects or never receives the change
        """
        self.backend.patch("/notifications/read-all")
        return self.fetch()


class PollerState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"


class NotificationPoller:
    """Refreshes a NotificationService on a daemon thread.

    Polling only starts while the session holds a token. Use as a context
    manager to tie the thread to a block:

        with NotificationPoller(service, interval=30):
            ...
    """

    def __init__(
        self,
        service: NotificationService,
        interval: float = DEFAULT_POLL_INTERVAL,
        on_update: Optional[Callable[[tuple[Notification, ...]], None]] = None,
    ):
        if interval <= 0:
            raise ValueError(f"Poll interval must be positive, got {interval}")
        self.service = service
        self.interval = interval
        self.on_update = on_update
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> PollerState:
        if self._thread is not None and self._thread.is_alive():
            return PollerState.POLLING
        return PollerState.IDLE

    def start(self) -> bool:
        """Start polling. Returns False when there is no token to poll with."""
        if self.state == PollerState.POLLING:
            return True
        if not self.service.session.is_active:
            logger.debug("Not polling notifications: session has no token")
            return False

        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="notification-poller", daemon=True
        )
        self._thread.start()
        return True

    def _run(self) -> None:
        while True:
            try:
                notifications = self.service.fetch()
                if self.on_update is not None:
                    self.on_update(notifications)
            except Exception:
                logger.exception("Notification poll failed")
            if self._stop.wait(self.interval):
                break
            if not self.service.session.is_active:
                logger.debug("Session closed, stopping notification poller")
                break

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop polling and wait for the thread to finish."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def __enter__(self) -> "NotificationPoller":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
