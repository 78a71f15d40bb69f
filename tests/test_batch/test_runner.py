"""Tests for the bounded batch worker pool."""

import time

import pytest

from arc_scoring.batch import run_units
from arc_scoring.config.settings import Settings


@pytest.mark.asyncio
async def test_results_keyed_by_unit(test_settings):
    outcomes = await run_units("test", {"a": lambda: 1, "b": lambda: 2}, settings=test_settings)
    assert outcomes.results == {"a": 1, "b": 2}
    assert outcomes.succeeded == 2
    assert outcomes.failed == 0


@pytest.mark.asyncio
async def test_failure_isolated(test_settings):
    def boom():
        raise ValueError("bad input")

    outcomes = await run_units("test", {"ok": lambda: "fine", "bad": boom}, settings=test_settings)

    assert outcomes.results == {"ok": "fine"}
    assert outcomes.errors == {"bad": "ValueError: bad input"}


@pytest.mark.asyncio
async def test_timeout_recorded():
    settings = Settings(batch_max_workers=2, batch_unit_timeout_seconds=0.05)

    outcomes = await run_units(
        "test",
        {"slow": lambda: time.sleep(0.5), "fast": lambda: "done"},
        settings=settings,
    )

    assert outcomes.results == {"fast": "done"}
    assert outcomes.errors["slow"].startswith("timeout")


@pytest.mark.asyncio
async def test_empty(test_settings):
    outcomes = await run_units("test", {}, settings=test_settings)
    assert outcomes.succeeded == 0
    assert outcomes.failed == 0
