"""Composable clamped multiplier pipeline.

Quality multipliers (authenticity, originality, sentiment, smart-followers
boost, ...) are each clamped independently and then multiplied together in
a fixed order. A stage whose input is missing contributes its neutral value
instead of blocking the computation.

Example:
    pipeline = MultiplierPipeline([
        MultiplierStage("originality", floor=0.7, cap=1.3),
        MultiplierStage("sentiment", floor=0.8, cap=1.2),
    ])
    product, breakdown = pipeline.apply({"originality": 1.5, "sentiment": None})
    # product == 1.3, breakdown == {"originality": 1.3, "sentiment": 1.0}
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from arc_scoring.errors import ConfigurationError
from arc_scoring.weighting.decay import clamp


@dataclass(frozen=True)
class MultiplierStage:
    """A single bounded multiplier.

    Attributes:
        name: Key looked up in the values passed to the pipeline.
        floor: Lower bound after clamping.
        cap: Upper bound after clamping.
        neutral: Value used when the input is missing.
    """

    name: str
    floor: float
    cap: float
    neutral: float = 1.0

    def __post_init__(self) -> None:
        if self.floor > self.cap:
            raise ConfigurationError(
                f"Multiplier stage {self.name!r}: floor {self.floor} exceeds cap {self.cap}"
            )

    def apply(self, value: float | None) -> float:
        """Clamp ``value``; a missing value yields the neutral multiplier."""
        if value is None:
            return self.neutral
        return clamp(value, self.floor, self.cap)


class MultiplierPipeline:
    """Ordered product of clamped stages."""

    def __init__(self, stages: Sequence[MultiplierStage]) -> None:
        names = [s.name for s in stages]
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Duplicate multiplier stage names: {names}")
        self._stages = tuple(stages)

    @property
    def stages(self) -> tuple[MultiplierStage, ...]:
        return self._stages

    def apply(self, values: Mapping[str, float | None]) -> tuple[float, dict[str, float]]:
        """Apply every stage in order.

        Args:
            values: Stage name to raw multiplier. Missing names are neutral.

        Returns:
            Tuple of (product, per-stage clamped values).
        """
        product = 1.0
        breakdown: dict[str, float] = {}
        for stage in self._stages:
            clamped = stage.apply(values.get(stage.name))
            breakdown[stage.name] = clamped
            product *= clamped
        return product, breakdown
