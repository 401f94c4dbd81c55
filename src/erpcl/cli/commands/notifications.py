"""Notification commands."""

import time

import click

from erpcl.api.errors import BackendError
from erpcl.cli.error_handling import handle_backend_error
from erpcl.config import DEFAULT_POLL_INTERVAL
from erpcl.domain.notification import NotificationPoller, NotificationService, PollerState
from erpcl.domain.status import label_for


def _service(ctx) -> NotificationService:
    return NotificationService(ctx.obj["backend"], ctx.obj["session"])


def _show(notifications, unread_only: bool = False) -> None:
    shown = [n for n in notifications if not (unread_only and n.read)]
    if not shown:
        click.echo("No notifications.")
        return
    for n in shown:
        marker = " " if n.read else "*"
        created = n.created_at.strftime("%Y-%m-%d %H:%M") if n.created_at else ""
        click.echo(
            f"{marker} {n.id:>4}  {created:<16}  {label_for(n.priority):<8}  "
            f"{label_for(n.type):<12}  {n.title}"
        )
        if n.message:
            click.echo(f"        {n.message}")


@click.group()
def notifications_group():
    """View and acknowledge notifications."""
    pass


@notifications_group.command("list")
@click.option("--unread", is_flag=True, help="Show only unread notifications")
@click.pass_context
def list_notifications(ctx, unread: bool):
    """List the latest notifications. Unread ones are marked with '*'."""
    service = _service(ctx)
    notifications = service.fetch()
    click.echo(f"{service.unread_count} unread")
    _show(notifications, unread_only=unread)


@notifications_group.command("read")
@click.argument("notification_id", type=int)
@click.pass_context
def read_notification(ctx, notification_id: int):
    """Mark one notification as read."""
    service = _service(ctx)
    try:
        service.mark_read(notification_id)
    except BackendError as e:
        handle_backend_error(ctx, e)
    click.echo(f"Marked notification {notification_id} as read ({service.unread_count} unread)")


@notifications_group.command("read-all")
@click.pass_context
def read_all_notifications(ctx):
    """Mark every notification as read."""
    service = _service(ctx)
    try:
        service.mark_all_read()
    except BackendError as e:
        handle_backend_error(ctx, e)
    click.echo(f"Marked all notifications as read ({service.unread_count} unread)")


@notifications_group.command("watch")
@click.option("--interval", type=float, help="Seconds between refreshes (default from ERPCL_POLL_INTERVAL)")
@click.option("--duration", type=float, help="Stop after this many seconds (default: until Ctrl+C)")
@click.pass_context
def watch_notifications(ctx, interval: float | None, duration: float | None):
    """Poll for notifications and print the unread count on each change."""
    config = ctx.obj.get("config")
    if interval is None:
        interval = config.poll_interval if config is not None else DEFAULT_POLL_INTERVAL
    if interval <= 0:
        click.echo("Error: --interval must be positive", err=True)
        ctx.exit(1)

    service = _service(ctx)
    last_count = None

    def on_update(notifications):
        nonlocal last_count
        count = service.unread_count
        if count != last_count:
            click.echo(f"{count} unread notification(s)")
            last_count = count

    poller = NotificationPoller(service, interval=interval, on_update=on_update)
    with poller:
        if poller.state != PollerState.POLLING:
            click.echo("Error: no session token; not polling.", err=True)
            ctx.exit(1)
        deadline = time.monotonic() + duration if duration is not None else None
        try:
            while deadline is None or time.monotonic() < deadline:
                time.sleep(0.1)
        except KeyboardInterrupt:
            pass
    click.echo("Stopped watching.")


def register_commands(cli: click.Group) -> None:
    """Register notification commands with main CLI."""
    cli.add_command(notifications_group, name="notifications")
