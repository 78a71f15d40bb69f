"""Largest-remainder apportionment of attention into basis points."""

import math
from collections.abc import Mapping

from arc_scoring.errors import InvariantViolationError
from arc_scoring.mindshare.schemas import TOTAL_BPS


def allocate_bps(attention: Mapping[str, float], total: int = TOTAL_BPS) -> dict[str, int]:
    """Split ``total`` basis points proportionally to ``attention``.

    Each project first gets ``floor(total * a / sum(a))``. The leftover
    points go one each to the largest fractional remainders, ties broken by
    project id. Projects with zero attention never receive leftover points.

    Args:
        attention: Non-negative attention value per project id.
        total: Points to distribute.

    Returns:
        Points per project id, summing to ``total`` when any attention is
        positive and to 0 otherwise.

    Raises:
        ValueError: If an attention value is negative or not finite.
        InvariantViolationError: If the allocation does not sum as promised.
    """
    if not attention:
        return {}

    for project_id, value in attention.items():
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"Invalid attention {value!r} for project {project_id}")

    grand_total = math.fsum(attention.values())
    if grand_total <= 0:
        return {project_id: 0 for project_id in attention}

    allocated: dict[str, int] = {}
    remainders: list[tuple[float, str]] = []
    for project_id, value in attention.items():
        exact = total * value / grand_total
        whole = math.floor(exact)
        allocated[project_id] = whole
        if value > 0:
            remainders.append((exact - whole, project_id))

    leftover = total - sum(allocated.values())
    remainders.sort(key=lambda item: (-item[0], item[1]))
    for _, project_id in remainders[: max(0, leftover)]:
        allocated[project_id] += 1

    check_bps_sum(allocated, total)
    return allocated


def check_bps_sum(allocated: Mapping[str, int], total: int = TOTAL_BPS) -> None:
    """Raise InvariantViolationError unless ``allocated`` sums to ``total`` or 0."""
    observed = sum(allocated.values())
    if observed not in (0, total) or any(v < 0 for v in allocated.values()):
        raise InvariantViolationError(
            f"Mindshare bps sum to {observed}, expected {total} or 0"
        )
