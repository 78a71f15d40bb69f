"""Bounded worker pool for independent batch units.

Each unit is a synchronous, CPU-bound callable. Units run on the default
thread pool via ``asyncio.to_thread`` with at most ``max_workers`` in
flight, and each is bounded by a timeout. A failing unit is recorded and
never aborts its siblings.
"""

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from arc_scoring.config.settings import Settings, get_settings
from arc_scoring.observability.metrics import get_metrics

logger = logging.getLogger(__name__)


@dataclass
class UnitOutcomes:
    """Results and failures of one ``run_units`` call."""

    results: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return len(self.errors)


async def run_units(
    batch: str,
    units: Mapping[str, Callable[[], Any]],
    *,
    settings: Settings | None = None,
) -> UnitOutcomes:
    """Run ``units`` concurrently on a bounded pool.

    Args:
        batch: Batch name used in logs and metrics labels.
        units: Unit key to zero-argument callable.
        settings: Supplies worker count and per-unit timeout (default: global).

    Returns:
        UnitOutcomes keyed by unit key.
    """
    settings = settings or get_settings()
    semaphore = asyncio.Semaphore(settings.batch_max_workers)
    timeout = settings.batch_unit_timeout_seconds
    metrics = get_metrics()
    outcomes = UnitOutcomes()

    async def _run(key: str, fn: Callable[[], Any]) -> None:
        async with semaphore:
            started = time.monotonic()
            try:
                result = await asyncio.wait_for(asyncio.to_thread(fn), timeout=timeout)
            except asyncio.TimeoutError:
                logger.error("Batch %s unit %s timed out after %.1fs", batch, key, timeout)
                outcomes.errors[key] = f"timeout after {timeout:.1f}s"
                metrics.record_unit(batch, "timeout", time.monotonic() - started)
            except Exception as e:
                logger.exception("Batch %s unit %s failed", batch, key)
                outcomes.errors[key] = f"{type(e).__name__}: {e}"
                metrics.record_unit(batch, "error", time.monotonic() - started)
            else:
                outcomes.results[key] = result
                metrics.record_unit(batch, "success", time.monotonic() - started)

    await asyncio.gather(*(_run(key, fn) for key, fn in units.items()))

    logger.info(
        "Batch %s finished: %d succeeded, %d failed",
        batch, outcomes.succeeded, outcomes.failed,
    )
    return outcomes
