"""Quality functions for sunrise/sunset scoring.

Three families feed the top-level engine:

- cloud cover: high/mid/low bands, nested engine, with the band weights and
  optima adjusted from how the bands relate to each other
- moisture: relative humidity at three pressure levels, nested engine
- visibility: single series against a ceiling distance

Every variable is scored over a short window starting at the target index
(the target sample and the one after it by default) to smooth out single
noisy samples.
"""

import logging
from collections.abc import Callable, Mapping, Sequence

from models.scoring import (
    CLOUDCOVER_HIGH,
    VISIBILITY,
    CloudCoverConfig,
    HighCloudCurve,
    MoistureConfig,
    ScoringAlgorithm,
    VisibilityConfig,
)
from services.scoring_engine import (
    FactorReason,
    FunctionResult,
    QualityFunction,
    adjusted_weights,
    aggregate,
)

logger = logging.getLogger(__name__)


def proximity(value: float, optimum: float) -> float:
    """Score how close ``value`` is to ``optimum`` (1.0 at the optimum).

    Rises linearly from 0 to the optimum, falls linearly back to 0 at twice
    the optimum, and never goes negative.
    """
    if optimum <= 0:
        return 1.0 if value <= 0 else 0.0
    ratio = value / optimum
    if ratio < 1:
        return max(ratio, 0.0)
    return max(2.0 - ratio, 0.0)


def high_cloud_score(value: float, curve: HighCloudCurve) -> float:
    """Score high cloud cover (percent) on a 0-1 scale.

    Below the threshold a wide parabola ramps up towards heavy-but-broken high
    cloud; above it a steep parabola drops off towards full overcast.
    """
    if value > curve.threshold:
        raw = min(100.0 - curve.upper_steepness * (value - curve.upper_vertex) ** 2, 100.0)
    else:
        raw = 100.0 - (value - curve.lower_vertex) ** 2 / curve.lower_spread
    return min(1.0, max(0.0, raw / 100.0))


def window_samples(samples: Sequence[float | None], index: int, size: int) -> list[float]:
    """Samples from ``index`` onward, clamped to the last sample, skipping gaps."""
    if not samples:
        return []
    last = len(samples) - 1
    values = []
    for position in range(index, index + size):
        sample = samples[min(max(position, 0), last)]
        if sample is not None:
            values.append(float(sample))
    return values


def window_score(
    samples: Sequence[float | None],
    index: int,
    size: int,
    scorer: Callable[[float], float],
) -> float | None:
    """Average of ``scorer`` over the window, or None when the window is empty."""
    values = window_samples(samples, index, size)
    if not values:
        return None
    return sum(scorer(value) for value in values) / len(values)


def sample_at(samples: Sequence[float | None], index: int) -> float | None:
    if not samples:
        return None
    sample = samples[min(max(index, 0), len(samples) - 1)]
    return None if sample is None else float(sample)


class _WindowedQuality(QualityFunction):
    """A single-series function scored by averaging a per-sample curve."""

    def __init__(self, key: str, window: int = 2):
        self.key = key
        self.window = window

    def score_sample(self, value: float) -> float:
        raise NotImplementedError

    def evaluate(self, series, weights, times, index, sorted_mode) -> FunctionResult:
        weight = weights.get(self.key, 0.0)
        samples = series[0][1] if series else []
        score = window_score(samples, index, self.window, self.score_sample)
        if score is None:
            logger.debug("No usable %s samples at index %d", self.key, index)
            score = 0.0
        return FunctionResult(
            result=score * weight,
            reasoning=[FactorReason(name=self.key, score=score, weight=weight)],
        )


class ProximityQuality(_WindowedQuality):
    """Score a series by its proximity to an ideal value."""

    def __init__(self, key: str, optimum: float, window: int = 2):
        super().__init__(key, window)
        self.optimum = optimum

    def score_sample(self, value: float) -> float:
        return proximity(value, self.optimum)


class HighCloudQuality(_WindowedQuality):
    """Score high cloud cover with the two-piece parabola."""

    def __init__(self, curve: HighCloudCurve, key: str = CLOUDCOVER_HIGH, window: int = 2):
        super().__init__(key, window)
        self.curve = curve

    def score_sample(self, value: float) -> float:
        return high_cloud_score(value, self.curve)


class VisibilityQuality(_WindowedQuality):
    """Visibility as a fraction of the useful ceiling distance."""

    def __init__(self, config: VisibilityConfig, window: int = 2):
        super().__init__(VISIBILITY, window)
        self.ceiling = config.ceiling_m

    def score_sample(self, value: float) -> float:
        return min(max(value / self.ceiling, 0.0), 1.0)


class CloudCoverQuality(QualityFunction):
    """Cloud cover family: high, mid and low bands aggregated by a nested engine.

    Before the bands are scored their weights and optima are adjusted:

    - Band weights start at a 1.0 multiplier and lose
      ``proximity(source, source_optimum) / divisor`` for every configured
      penalty. Heavy low or mid cloud hides the sky, so the high band matters
      less.
    - Proximity optima for the mid and low bands are raised when the bands
      driving them hold a small share of the total cover.
    """

    key = "cloudcover"

    def __init__(self, config: CloudCoverConfig, window: int = 2):
        self.config = config
        self.window = window

    def claims(self, name: str) -> bool:
        return name in self.config.band_weights

    def band_weights(
        self, data: Mapping[str, Sequence[float | None]], index: int
    ) -> dict[str, float]:
        """Band weights after the cross-band penalties at ``index``."""
        penalties: dict[str, float] = {}
        for penalty in self.config.weight_penalties:
            if penalty.target not in data:
                continue
            source = sample_at(data.get(penalty.source, []), index)
            if source is None:
                continue
            penalties[penalty.target] = penalties.get(penalty.target, 0.0) + (
                proximity(source, penalty.source_optimum) / penalty.divisor
            )
        return adjusted_weights(self.config.band_weights, penalties)

    def band_optima(
        self, data: Mapping[str, Sequence[float | None]], index: int
    ) -> dict[str, float]:
        """Proximity optima after shifting for each band's share of total cover."""
        averages = {}
        for name, samples in data.items():
            values = window_samples(samples, index, self.window)
            if values:
                averages[name] = max(sum(values) / len(values), 0.0)

        total = sum(averages.values())
        shares = {
            name: (average / total * 100.0 if total > 0 else 0.0)
            for name, average in averages.items()
        }

        optima = dict(self.config.band_optima)
        for shift in self.config.optimum_shifts:
            if shift.target not in optima or shift.source not in shares:
                continue
            optima[shift.target] += (
                max(shift.offset - shares[shift.source] ** shift.exponent, 0.0) / 100.0
            )
        return optima

    def evaluate(self, series, weights, times, index, sorted_mode) -> FunctionResult:
        data = dict(series)
        band_weights = self.band_weights(data, index)
        optima = self.band_optima(data, index)

        functions: list[QualityFunction] = [
            HighCloudQuality(self.config.high_curve, window=self.window)
        ]
        functions.extend(
            ProximityQuality(name, optimum, window=self.window)
            for name, optimum in optima.items()
        )

        nested = aggregate(band_weights, functions, series, index)
        score = nested.normalized
        weight = weights.get(self.key, 0.0)
        logger.debug(
            "Cloud cover score %.3f (band weights %s, optima %s)", score, band_weights, optima
        )
        return FunctionResult(
            result=score * weight,
            reasoning=[
                FactorReason(
                    name=self.key,
                    score=score,
                    weight=weight,
                    children=tuple(nested.reasoning),
                )
            ],
        )


class MoistureQuality(QualityFunction):
    """Moisture family: relative humidity per pressure level, nested engine."""

    key = "moisture"

    def __init__(self, config: MoistureConfig, window: int = 2):
        self.config = config
        self.window = window
        self.levels = [
            ProximityQuality(level, optimum, window=window)
            for level, optimum in config.level_optima.items()
        ]

    def claims(self, name: str) -> bool:
        return name in self.config.level_weights

    def evaluate(self, series, weights, times, index, sorted_mode) -> FunctionResult:
        nested = aggregate(self.config.level_weights, self.levels, series, index)
        score = nested.normalized
        weight = weights.get(self.key, 0.0)
        return FunctionResult(
            result=score * weight,
            reasoning=[
                FactorReason(
                    name=self.key,
                    score=score,
                    weight=weight,
                    children=tuple(nested.reasoning),
                )
            ],
        )


def build_quality_functions(algorithm: ScoringAlgorithm) -> list[QualityFunction]:
    """Top-level quality functions for an algorithm configuration."""
    window = algorithm.sample_window
    return [
        CloudCoverQuality(algorithm.cloud, window=window),
        MoistureQuality(algorithm.moisture, window=window),
        VisibilityQuality(algorithm.visibility, window=window),
    ]

