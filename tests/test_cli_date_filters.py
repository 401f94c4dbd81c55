"""Tests for CLI date filter helpers."""

from datetime import date

import click
import pytest

from erpcl.cli.date_filters import date_range_options, resolve_cli_date_range
from erpcl.utils.date_parser import PERIODS, get_date_range


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_rejects_multiple_periods(capsys):
    period_flags = {"this-month": True, "last-month": True}

    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(_ctx(), start_date=None, end_date=None, period_flags=period_flags)

    assert excinfo.value.exit_code == 1
    assert "Only one period option" in capsys.readouterr().err


def test_rejects_period_with_explicit_dates(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(), start_date="2024-01-01", end_date=None, period_flags={"this-month": True}
        )

    assert excinfo.value.exit_code == 1
    assert "cannot be combined" in capsys.readouterr().err


def test_returns_period_range():
    start, end = resolve_cli_date_range(
        _ctx(), start_date=None, end_date=None, period_flags={"last-year": True}
    )

    assert (start, end) == get_date_range("last-year")


def test_parses_explicit_dates():
    start, end = resolve_cli_date_range(
        _ctx(), start_date="2024-01-02", end_date="2024-01-05", period_flags={}
    )

    assert start == date(2024, 1, 2)
    assert end == date(2024, 1, 5)


def test_open_ended_range():
    start, end = resolve_cli_date_range(
        _ctx(), start_date="2024-01-02", end_date=None, period_flags={}
    )

    assert start == date(2024, 1, 2)
    assert end is None


def test_applies_default_range():
    default_range = (date(2020, 1, 1), date(2020, 1, 31))

    start, end = resolve_cli_date_range(
        _ctx(), start_date=None, end_date=None, period_flags={}, default_range=default_range
    )

    assert (start, end) == default_range


def test_no_dates_no_default():
    assert resolve_cli_date_range(_ctx(), start_date=None, end_date=None, period_flags={}) == (
        None,
        None,
    )


def test_invalid_start_date(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(_ctx(), start_date="not-a-date", end_date=None, period_flags={})

    assert excinfo.value.exit_code == 1
    assert "Invalid start date" in capsys.readouterr().err


def test_start_after_end(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(), start_date="2024-02-01", end_date="2024-01-01", period_flags={}
        )

    assert excinfo.value.exit_code == 1
    assert "is after end date" in capsys.readouterr().err


def test_date_range_options_collects_period_flags(cli_runner):
    seen = {}

    @click.command()
    @date_range_options
    def show(start_date, end_date, period_flags):
        seen.update(start_date=start_date, end_date=end_date, period_flags=period_flags)

    result = cli_runner.invoke(show, ["--last-week", "--start-date", "today"])

    assert result.exit_code == 0
    assert seen["start_date"] == "today"
    assert seen["end_date"] is None
    assert set(seen["period_flags"]) == set(PERIODS)
    assert seen["period_flags"]["last-week"] is True
    assert seen["period_flags"]["this-month"] is False
