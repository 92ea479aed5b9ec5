"""Tests for CLI date filter helper."""

from datetime import date

import click
import pytest

from tvdetrack.cli.date_filters import resolve_cli_date_range
from tvdetrack.utils.date_parser import get_date_range, parse_date


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_resolve_cli_date_range_rejects_period_with_start_end(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date="2024-01-01",
            end_date=None,
            period="month",
        )

    assert excinfo.value.exit_code == 1
    err = capsys.readouterr().err
    assert "cannot be combined" in err


def test_resolve_cli_date_range_returns_period_range():
    today = date(2024, 5, 20)

    start, end = resolve_cli_date_range(
        _ctx(),
        start_date=None,
        end_date=None,
        period="quarter",
        today=today,
    )

    assert (start, end) == get_date_range("quarter", today)


def test_resolve_cli_date_range_parses_explicit_dates():
    start, end = resolve_cli_date_range(
        _ctx(),
        start_date="2024-01-02",
        end_date="05/01/2024",
    )

    assert start == parse_date("2024-01-02")
    assert end == date(2024, 1, 5)


def test_resolve_cli_date_range_no_filters():
    start, end = resolve_cli_date_range(_ctx(), start_date=None, end_date=None)

    assert start is None
    assert end is None


def test_resolve_cli_date_range_rejects_reversed_dates(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date="2024-02-01",
            end_date="2024-01-01",
        )

    assert excinfo.value.exit_code == 1
    assert "is after end date" in capsys.readouterr().err


def test_resolve_cli_date_range_invalid_start_date(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date="not-a-date",
            end_date=None,
        )

    assert excinfo.value.exit_code == 1
    err = capsys.readouterr().err
    assert "Invalid start date" in err
