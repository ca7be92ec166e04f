"""Tests for CLI date filter helper."""

from datetime import date

import click
import pytest

from kedai.cli.date_filters import resolve_cli_date_range
from kedai.utils.date_parser import get_date_range


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_resolve_cli_date_range_rejects_period_with_start_end(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(_ctx(), start_date="2024-01-01", end_date=None, period="today")

    assert excinfo.value.exit_code == 1
    assert "cannot be combined" in capsys.readouterr().err


def test_resolve_cli_date_range_uses_period():
    result = resolve_cli_date_range(_ctx(), start_date=None, end_date=None, period="this-month")

    assert result == get_date_range("this-month")


def test_resolve_cli_date_range_parses_dates():
    result = resolve_cli_date_range(
        _ctx(), start_date="2024-01-01", end_date="2024-01-31", period=None
    )

    assert result == (date(2024, 1, 1), date(2024, 1, 31))


def test_resolve_cli_date_range_open_ended():
    assert resolve_cli_date_range(_ctx(), start_date=None, end_date=None, period=None) == (None, None)


def test_resolve_cli_date_range_invalid_date(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_date_range(_ctx(), start_date="not a date", end_date=None, period=None)

    assert "Invalid start date" in capsys.readouterr().err
