"""Sunrise/sunset viewing quality service."""

import logging
from collections.abc import Iterable

from models.forecast import (
    BreakdownItem,
    DailySunTable,
    EventForecast,
    ForecastResult,
    QualityAssessment,
    SunEvent,
    WeatherBundle,
)
from models.scoring import ScoringAlgorithm
from services.quality_explanation_service import (
    generate_quality_explanation,
    score_to_quality,
)
from services.quality_functions import build_quality_functions, window_samples
from services.scoring_engine import EngineResult, WeightedQualityEngine
from services.sun_event_service import nearest_sun_event, upcoming_sun_events
from utils.time_index import nearest_index

logger = logging.getLogger(__name__)


class ForecastQualityService:
    """Service for scoring sunrises and sunsets from hourly forecast data."""

    def __init__(self, algorithm_config: ScoringAlgorithm | None = None):
        """Initialize the service with algorithm configuration."""
        self.algorithm = algorithm_config or ScoringAlgorithm()
        self.functions = build_quality_functions(self.algorithm)

    def _evaluate(self, bundle: WeatherBundle, target: int) -> EngineResult:
        engine = WeightedQualityEngine(
            self.algorithm.family_weights, self.functions, bundle
        )
        return engine.evaluate(target)

    def compute_quality(self, bundle: WeatherBundle, target: int) -> float:
        """Viewing quality (0-1, two decimals) at ``target``.

        Families missing from the bundle are left out of the normalization,
        so a bundle holding only visibility still scores on the full 0-1 range.
        """
        return self._evaluate(bundle, target).value

    def assess(self, bundle: WeatherBundle, target: int) -> QualityAssessment:
        """Score ``target`` and explain the result.

        Returns:
            QualityAssessment with families ranked by their share of the score
        """
        result = self._evaluate(bundle, target)
        breakdown = self._breakdown(result)
        conditions = self._conditions(bundle, target)

        assessment = QualityAssessment(
            target=target,
            score=result.value,
            quality=score_to_quality(result.value, has_data=bool(breakdown)),
            breakdown=breakdown,
            explanation=generate_quality_explanation(result.value, breakdown, conditions),
            conditions=conditions,
        )
        logger.info(
            "Assessed %d: score=%.2f families=%s",
            target,
            assessment.score,
            [item.key for item in breakdown],
        )
        return assessment

    def score_events(
        self, bundle: WeatherBundle, events: Iterable[SunEvent]
    ) -> list[EventForecast]:
        """Score a batch of sun events; each is an independent evaluation."""
        return [
            EventForecast(event=event, quality=self.compute_quality(bundle, event.timestamp))
            for event in events
        ]

    def forecast(
        self,
        bundle: WeatherBundle,
        daily: DailySunTable,
        now: int,
        margin_seconds: int = 0,
        days: int = 7,
    ) -> ForecastResult:
        """Assess the nearest upcoming sun event and score the events after it.

        Raises:
            NoUpcomingSunEventError: If every event in ``daily`` has passed.
        """
        current_event = nearest_sun_event(daily, now, margin_seconds)
        assessment = self.assess(bundle, current_event.timestamp)
        upcoming = self.score_events(
            bundle, upcoming_sun_events(daily, current_event, days)
        )
        return ForecastResult(
            current=EventForecast(event=current_event, quality=assessment.score),
            assessment=assessment,
            upcoming=upcoming,
        )

    def _breakdown(self, result: EngineResult) -> list[BreakdownItem]:
        """Top-level families ranked by their share of the final score."""
        if result.total_possible_weight <= 0:
            return []

        items = [
            BreakdownItem(
                key=reason.name,
                weight=reason.weight,
                score=round(reason.score, 4),
                share=round(reason.contribution / result.total_possible_weight, 4),
                details={child.name: round(child.score, 4) for child in reason.children},
            )
            for reason in result.reasoning
        ]
        return sorted(items, key=lambda item: (-item.share, item.key))

    def _conditions(self, bundle: WeatherBundle, target: int) -> dict[str, float]:
        """Window-averaged raw values of every series at ``target``."""
        if not bundle.series:
            return {}
        index = nearest_index(bundle.time, target)
        conditions = {}
        for name, samples in bundle.series.items():
            values = window_samples(samples, index, self.algorithm.sample_window)
            if values:
                conditions[name] = round(sum(values) / len(values), 2)
        return conditions


def compute_quality(
    bundle: WeatherBundle, target: int, algorithm: ScoringAlgorithm | None = None
) -> float:
    """Viewing quality (0-1) of ``bundle`` at UNIX time ``target``."""
    return ForecastQualityService(algorithm).compute_quality(bundle, target)
