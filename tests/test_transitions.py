"""Tests for start/middle/end classification and template rendering."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from drakeema.cycle import Cycle, TableSet
from drakeema.models import ElapsedDays, Item, Phase
from drakeema.templates import render
from drakeema.transitions import classify

JST = timezone(timedelta(hours=9))


def test_classify_multi_day_steps():
    reference = datetime(2025, 2, 1, 6, tzinfo=JST)
    cycle = Cycle(reference, (Item("a"), Item("b")), ElapsedDays(3))
    assert classify(cycle, datetime(2025, 2, 1, 6, 1, 30, tzinfo=JST)) is Phase.START
    assert classify(cycle, datetime(2025, 2, 2, 6, 1, 30, tzinfo=JST)) is Phase.MID
    assert classify(cycle, datetime(2025, 2, 3, 6, 1, 30, tzinfo=JST)) is Phase.END
    assert classify(cycle, datetime(2025, 2, 4, 6, 1, 30, tzinfo=JST)) is Phase.START


def test_single_day_steps_are_always_starts():
    reference = datetime(2025, 2, 1, 6, tzinfo=JST)
    cycle = Cycle(reference, (Item("a"), Item("b")), ElapsedDays(1))
    assert classify(cycle, datetime(2025, 2, 2, 6, 1, 30, tzinfo=JST)) is Phase.START


def test_classify_table_set():
    reference = datetime(2020, 7, 10, 6, tzinfo=JST)
    tables = TableSet.build(reference, [(10, ["a", "b"]), (25, ["x", "y"])])
    assert classify(tables, datetime(2020, 7, 25, 6, 1, 30, tzinfo=JST)) is Phase.START
    assert classify(tables, datetime(2020, 8, 9, 6, 1, 30, tzinfo=JST)) is Phase.END
    assert classify(tables, datetime(2020, 8, 1, 6, 1, 30, tzinfo=JST)) is Phase.MID


def test_render_replaces_known_placeholders():
    text = render("__TITLE__ は __MONSTERS__ と __UNKNOWN__", title="宮殿", monsters="A")
    assert text == "宮殿 は A と __UNKNOWN__"


def test_render_formats_numbers():
    assert render("あと __REMAIN__ 分", remain=5) == "あと 5 分"


@pytest.mark.parametrize(
    "now, phase",
    [
        (datetime(2025, 2, 4, 5, 59, 59, tzinfo=JST), Phase.END),
        (datetime(2025, 2, 4, 6, 0, 0, tzinfo=JST), Phase.START),
        (datetime(2025, 2, 6, 5, 59, 59, tzinfo=JST), Phase.MID),
        (datetime(2025, 2, 1, 5, 59, 59, tzinfo=JST), Phase.END),
        (datetime(2025, 2, 1, 6, 0, 0, tzinfo=JST), Phase.START),
    ],
)
def test_classify_at_step_boundaries(now, phase):
    """The last instant of a step is its END and the first instant of the next is a START."""

    reference = datetime(2025, 2, 1, 6, tzinfo=JST)
    cycle = Cycle(reference, (Item("a"), Item("b")), ElapsedDays(3))
    assert classify(cycle, now) is phase
