"""Tests for the notification service and poller."""

import threading
import time

import pytest

from erpcl.api.errors import ApiError, RequestTimeout
from erpcl.domain.entities import NotificationPriority, NotificationType
from erpcl.domain.notification import (
    FETCH_LIMIT,
    FETCH_TIMEOUT,
    NotificationPoller,
    NotificationService,
    PollerState,
)
from erpcl.domain.session import Session


def _rows(read_flags):
    return [
        {
            "id": index + 1,
            "type": "approval",
            "priority": "high",
            "title": f"Aviso {index + 1}",
            "message": "Orden pendiente de aprobación",
            "read": read,
            "created_at": "2024-01-20T09:00:00Z",
        }
        for index, read in enumerate(read_flags)
    ]


def _wait_until(condition, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return False


class TestFetch:
    """Tests for NotificationService.fetch()."""

    def test_fetch_adopts_list(self, notification_service, stub_backend):
        stub_backend.route("GET", "/notifications", _rows([False, True, False]))

        notifications = notification_service.fetch()

        assert len(notifications) == 3
        assert notifications[0].type == NotificationType.APPROVAL
        assert notifications[0].priority == NotificationPriority.HIGH
        assert notification_service.unread_count == 2
        (call,) = stub_backend.calls
        assert call[2] == {"limit": FETCH_LIMIT}

    def test_unread_count_matches_list(self, notification_service, stub_backend):
        """unread_count always equals the unread notifications in the list."""
        for flags in ([], [True], [False, False], [True, False, True, False]):
            stub_backend.route("GET", "/notifications", _rows(flags))
            notification_service.fetch()
            assert notification_service.unread_count == sum(
                1 for n in notification_service.notifications if not n.read
            )
            assert notification_service.unread_count == flags.count(False)

    @pytest.mark.parametrize(
        "failure",
        [RequestTimeout(f"timed out after {FETCH_TIMEOUT}s"), ApiError("Server error", 500)],
    )
    def test_failures_keep_previous_list(self, notification_service, stub_backend, failure):
        stub_backend.route("GET", "/notifications", _rows([False]))
        notification_service.fetch()

        stub_backend.route("GET", "/notifications", failure)
        notifications = notification_service.fetch()

        assert len(notifications) == 1
        assert notification_service.unread_count == 1

    def test_bad_rows_keep_previous_list(self, notification_service, stub_backend):
        stub_backend.route("GET", "/notifications", [{"title": "no id"}])
        assert notification_service.fetch() == ()

    def test_closed_session_does_not_fetch(self, stub_backend):
        session = Session.open()
        session.close()
        service = NotificationService(stub_backend, session)

        assert service.fetch() == ()
        assert stub_backend.calls == []


class TestMarkRead:
    def test_mark_read_then_refetch(self, notification_service, stub_backend):
        stub_backend.route("PATCH", "/notifications/2/read", None)
        stub_backend.route("GET", "/notifications", _rows([True, True]))

        notification_service.mark_read(2)

        assert [c[0] for c in stub_backend.calls] == ["PATCH", "GET"]
        assert notification_service.unread_count == 0

    def test_mark_all_read(self, notification_service, stub_backend):
        stub_backend.route("PATCH", "/notifications/read-all", None)
        stub_backend.route("GET", "/notifications", _rows([True]))

        notification_service.mark_all_read()

        assert stub_backend.calls_to("PATCH", "/notifications/read-all")

    def test_mark_read_failure_propagates(self, notification_service, stub_backend):
        stub_backend.route("PATCH", "/notifications/2/read", ApiError("Not Found", 404))

        with pytest.raises(ApiError):
            notification_service.mark_read(2)


class TestPoller:
    """Tests for the background poller."""

    def test_interval_must_be_positive(self, notification_service):
        with pytest.raises(ValueError):
            NotificationPoller(notification_service, interval=0)

    def test_polls_until_stopped(self, notification_service, stub_backend):
        stub_backend.route("GET", "/notifications", _rows([False]))
        updates = []
        twice = threading.Event()

        def on_update(notifications):
            updates.append(notifications)
            if len(updates) >= 2:
                twice.set()

        poller = NotificationPoller(notification_service, interval=0.01, on_update=on_update)
        assert poller.state == PollerState.IDLE
        assert poller.start()
        assert poller.state == PollerState.POLLING

        assert twice.wait(2.0)
        poller.stop(timeout=2.0)

        assert poller.state == PollerState.IDLE
        assert all(len(n) == 1 for n in updates)

    def test_failing_callback_is_logged_and_polling_continues(
        self, notification_service, stub_backend, caplog
    ):
        stub_backend.route("GET", "/notifications", _rows([False]))
        calls = []
        recovered = threading.Event()

        def on_update(notifications):
            calls.append(notifications)
            if len(calls) == 1:
                raise RuntimeError("render failed")
            recovered.set()

        poller = NotificationPoller(notification_service, interval=0.01, on_update=on_update)
        with caplog.at_level("ERROR", logger="erpcl.domain.notification"):
            poller.start()
            assert recovered.wait(2.0)
            assert poller.state == PollerState.POLLING
            poller.stop(timeout=2.0)

        assert "Notification poll failed" in caplog.text
        assert "render failed" in caplog.text

    def test_no_token_no_polling(self, stub_backend):
        session = Session.open()
        session.close()
        poller = NotificationPoller(NotificationService(stub_backend, session), interval=0.01)

        assert poller.start() is False
        assert poller.state == PollerState.IDLE

    def test_stops_when_session_closes(self, stub_backend):
        stub_backend.route("GET", "/notifications", [])
        session = Session.open()
        poller = NotificationPoller(NotificationService(stub_backend, session), interval=0.01)
        poller.start()

        session.close()

        assert _wait_until(lambda: poller.state == PollerState.IDLE)
        poller.stop(timeout=1.0)

    def test_context_manager(self, notification_service, stub_backend):
        stub_backend.route("GET", "/notifications", [])

        with NotificationPoller(notification_service, interval=0.01) as poller:
            assert poller.state == PollerState.POLLING

        assert poller.state == PollerState.IDLE
