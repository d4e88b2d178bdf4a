"""Weighted aggregation of quality functions over forecast time series.

An engine pairs a weight map with a list of quality functions and the data
they should score. Each function claims the series it understands, produces a
contribution already multiplied by its own weight, and the engine sums those
contributions against the weight that was actually achievable with the data
supplied. Families that are made of several bands (cloud cover, moisture)
run a nested engine over their own series in sorted mode.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from models.forecast import WeatherBundle
from utils.time_index import InvalidArgumentError, nearest_index

logger = logging.getLogger(__name__)

SeriesPair = tuple[str, Sequence[float | None]]


@dataclass(frozen=True)
class FactorReason:
    """Score of one quality function, kept for breakdowns and explanations."""

    name: str
    score: float
    weight: float
    children: tuple["FactorReason", ...] = ()

    @property
    def contribution(self) -> float:
        return self.score * self.weight


@dataclass(frozen=True)
class FunctionResult:
    """Output of a quality function: weighted contribution plus reasoning."""

    result: float
    reasoning: list[FactorReason] = field(default_factory=list)


class QualityFunction:
    """Base class for a unit of scoring logic.

    ``key`` is both the function's weight-map key and its identity. By default a
    function claims only the series whose name equals its key; families that
    cover several series override ``claims``.
    """

    key: str = ""

    def claims(self, name: str) -> bool:
        return name == self.key

    def evaluate(
        self,
        series: list[SeriesPair],
        weights: Mapping[str, float],
        times: Sequence[int],
        index: int,
        sorted_mode: bool,
    ) -> FunctionResult:
        """Score the claimed series around ``index``.

        Args:
            series: (name, samples) pairs claimed by this function
            weights: Weight map of the engine running this function
            times: Timestamp axis, empty when running nested
            index: Resolved sample index for the target instant
            sorted_mode: True when called from a nested engine

        Returns:
            FunctionResult whose ``result`` is pre-multiplied by this function's weight
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r})"


@dataclass(frozen=True)
class EngineResult:
    """Result of one engine evaluation."""

    value: float
    contribution: float
    total_possible_weight: float
    reasoning: list[FactorReason] = field(default_factory=list)

    @property
    def normalized(self) -> float:
        """Contribution as a fraction of the achievable weight (0 when nothing matched)."""
        if self.total_possible_weight <= 0:
            return 0.0
        return min(1.0, max(0.0, self.contribution / self.total_possible_weight))


def round_score(value: float) -> float:
    """Round to two decimals, halves away from zero.

    The value is first cut to 9 decimals so float noise from the weighted sum
    (0.245 * 70 / 70 == 0.24499999999999997) does not pull a half down.
    """
    trimmed = Decimal(repr(round(value, 9)))
    return float(trimmed.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def adjusted_weights(
    weights: Mapping[str, float], penalties: Mapping[str, float]
) -> dict[str, float]:
    """Copy of ``weights`` with each key scaled by ``max(1 - penalty, 0)``."""
    adjusted = dict(weights)
    for key, penalty in penalties.items():
        if key in adjusted:
            adjusted[key] *= max(1.0 - penalty, 0.0)
    return adjusted


class WeightedQualityEngine:
    """Aggregate quality functions into a single score.

    ``data`` is either a ``WeatherBundle`` (or a plain mapping holding a
    ``time`` series) for top-level use, or a list of (name, samples) pairs for
    nested use. Nested engines take a sample index instead of a timestamp and
    return their raw contribution sum; only the top-level engine normalizes
    and rounds.
    """

    def __init__(
        self,
        weights: Mapping[str, float],
        functions: Sequence[QualityFunction],
        data: WeatherBundle | Mapping[str, Any] | Sequence[SeriesPair],
    ):
        self.weights = dict(weights)
        self.functions = list(functions)

        if isinstance(data, WeatherBundle):
            self.sorted_mode = False
            self.times = list(data.time)
            self.series = list(data.series.items())
        elif isinstance(data, Mapping):
            self.sorted_mode = False
            self.times = list(data.get("time") or [])
            self.series = [(name, values) for name, values in data.items() if name != "time"]
            for name, values in self.series:
                if len(values) != len(self.times):
                    raise InvalidArgumentError(
                        f"Series '{name}' has {len(values)} samples "
                        f"but time has {len(self.times)}"
                    )
        else:
            self.sorted_mode = True
            self.times = []
            self.series = list(data)

        self.variables = [name for name, _ in self.series]
        self.matched_functions = [
            function
            for function in self.functions
            if any(function.claims(name) for name in self.variables)
        ]
        self.total_possible_weight = sum(
            self.weights.get(function.key, 0.0) for function in self.matched_functions
        )

        skipped = [f.key for f in self.functions if f not in self.matched_functions]
        if skipped:
            logger.debug("No data for quality functions %s", skipped)

    def evaluate(self, target: int) -> EngineResult:
        """Run every matched function and aggregate the results.

        Args:
            target: UNIX timestamp at top level, sample index when nested
        """
        if self.total_possible_weight <= 0:
            logger.debug(
                "Total possible weight is zero for %s; scoring 0",
                [f.key for f in self.functions],
            )
            return EngineResult(
                value=0.0, contribution=0.0, total_possible_weight=0.0, reasoning=[]
            )

        index = target if self.sorted_mode else nearest_index(self.times, target)

        contribution = 0.0
        reasoning: list[FactorReason] = []
        for function in self.matched_functions:
            claimed = [(name, values) for name, values in self.series if function.claims(name)]
            calculation = function.evaluate(
                claimed,
                self.weights,
                [] if self.sorted_mode else self.times,
                index,
                self.sorted_mode,
            )
            contribution += calculation.result
            reasoning.extend(calculation.reasoning)

        if self.sorted_mode:
            value = contribution
        else:
            value = round_score(min(1.0, max(0.0, contribution / self.total_possible_weight)))

        return EngineResult(
            value=value,
            contribution=contribution,
            total_possible_weight=self.total_possible_weight,
            reasoning=reasoning,
        )

    def calculate(self, target: int) -> float:
        """Score at ``target``: rounded 0-1 at top level, raw contribution when nested."""
        return self.evaluate(target).value


def aggregate(
    weights: Mapping[str, float],
    functions: Sequence[QualityFunction],
    series: Sequence[SeriesPair],
    index: int,
) -> EngineResult:
    """Evaluate ``functions`` over already-claimed series at a resolved index."""
    return WeightedQualityEngine(weights, functions, series).evaluate(index)
