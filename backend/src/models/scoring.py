"""Configuration models for the sunrise/sunset quality algorithm.

Every weight, optimum and curve constant used by the quality functions lives
here so the values can be tuned without touching the scoring code.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

CLOUDCOVER_HIGH = "cloudcover_high"
CLOUDCOVER_MID = "cloudcover_mid"
CLOUDCOVER_LOW = "cloudcover_low"

HUMIDITY_HIGH = "relativehumidity_150hPa"
HUMIDITY_MID = "relativehumidity_500hPa"
HUMIDITY_LOW = "relativehumidity_1000hPa"

VISIBILITY = "visibility"


class WeightPenalty(BaseModel):
    """Reduce one cloud band's weight when another band nears its optimum.

    The target band's multiplier (starting at 1.0) loses
    ``proximity(source sample, source_optimum) / divisor``.
    """

    target: str = Field(..., description="Band whose weight is reduced")
    source: str = Field(..., description="Band whose coverage drives the penalty")
    source_optimum: float = Field(..., gt=0, description="Coverage where penalty peaks")
    divisor: float = Field(..., gt=0, description="Scales the penalty down")

    model_config = ConfigDict(frozen=True)


class OptimumShift(BaseModel):
    """Raise a band's optimum when another band holds little of the total cover.

    The shift is ``max(offset - share ** exponent, 0) / 100`` where ``share``
    is the source band's percentage of the summed cover.
    """

    target: str = Field(..., description="Band whose optimum moves")
    source: str = Field(..., description="Band whose share of cover drives the shift")
    exponent: float = Field(..., gt=0)
    offset: float = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)


class HighCloudCurve(BaseModel):
    """Two-piece parabola used for high cloud cover (percent in, 0-100 out)."""

    threshold: float = Field(default=85.0, description="Switch point between pieces")
    lower_vertex: float = Field(default=94.86, description="Vertex of the ramp-up piece")
    lower_spread: float = Field(
        default=90.0, gt=0, description="Width divisor of the ramp-up piece"
    )
    upper_vertex: float = Field(default=90.0, description="Vertex of the overcast piece")
    upper_steepness: float = Field(
        default=1.0, gt=0, description="Steepness of the overcast piece"
    )

    model_config = ConfigDict(frozen=True)


class CloudCoverConfig(BaseModel):
    """Cloud cover family settings."""

    band_weights: dict[str, float] = Field(
        default={CLOUDCOVER_HIGH: 120.0, CLOUDCOVER_MID: 87.0, CLOUDCOVER_LOW: 70.0},
        description="Relative importance of each cloud band",
    )
    band_optima: dict[str, float] = Field(
        default={CLOUDCOVER_MID: 14.0, CLOUDCOVER_LOW: 8.0},
        description="Ideal coverage (percent) for the proximity-scored bands",
    )
    high_curve: HighCloudCurve = Field(default_factory=HighCloudCurve)
    weight_penalties: list[WeightPenalty] = Field(
        default=[
            WeightPenalty(
                target=CLOUDCOVER_HIGH,
                source=CLOUDCOVER_LOW,
                source_optimum=85.0,
                divisor=1.6,
            ),
            WeightPenalty(
                target=CLOUDCOVER_HIGH,
                source=CLOUDCOVER_MID,
                source_optimum=40.0,
                divisor=1.75,
            ),
            WeightPenalty(
                target=CLOUDCOVER_MID,
                source=CLOUDCOVER_LOW,
                source_optimum=85.0,
                divisor=1.7,
            ),
        ]
    )
    optimum_shifts: list[OptimumShift] = Field(
        default=[
            OptimumShift(
                target=CLOUDCOVER_MID, source=CLOUDCOVER_HIGH, exponent=1.42, offset=350
            ),
            OptimumShift(
                target=CLOUDCOVER_LOW, source=CLOUDCOVER_HIGH, exponent=1.6, offset=100
            ),
            OptimumShift(
                target=CLOUDCOVER_LOW, source=CLOUDCOVER_MID, exponent=1.6, offset=200
            ),
        ]
    )

    @model_validator(mode="after")
    def _check_band_keys(self) -> "CloudCoverConfig":
        # High cloud is scored by the curve, every other band by its optimum
        if CLOUDCOVER_HIGH in self.band_optima:
            raise ValueError(f"'{CLOUDCOVER_HIGH}' uses high_curve, not an optimum")
        expected = set(self.band_weights) - {CLOUDCOVER_HIGH}
        if set(self.band_optima) != expected:
            raise ValueError(
                f"band_optima keys {sorted(self.band_optima)} must match "
                f"band_weights keys {sorted(expected)}"
            )
        return self


class MoistureConfig(BaseModel):
    """Relative humidity family settings, keyed by pressure level."""

    level_weights: dict[str, float] = Field(
        default={HUMIDITY_HIGH: 110.0, HUMIDITY_MID: 85.0, HUMIDITY_LOW: 40.0}
    )
    level_optima: dict[str, float] = Field(
        default={HUMIDITY_HIGH: 3.0, HUMIDITY_MID: 15.0, HUMIDITY_LOW: 40.0},
        description="Ideal relative humidity (percent) per level",
    )

    @model_validator(mode="after")
    def _check_level_keys(self) -> "MoistureConfig":
        if set(self.level_optima) != set(self.level_weights):
            raise ValueError(
                f"level_optima keys {sorted(self.level_optima)} must match "
                f"level_weights keys {sorted(self.level_weights)}"
            )
        return self


class VisibilityConfig(BaseModel):
    """Visibility family settings."""

    ceiling_m: float = Field(
        default=16000.0, gt=0, description="Visibility beyond which nothing improves"
    )


class ScoringAlgorithm(BaseModel):
    """Configuration for the sunrise/sunset quality algorithm."""

    family_weights: dict[str, float] = Field(
        default={"moisture": 120.0, "cloudcover": 85.0, "visibility": 70.0},
        description="Top-level weight per quality family",
    )
    cloud: CloudCoverConfig = Field(default_factory=CloudCoverConfig)
    moisture: MoistureConfig = Field(default_factory=MoistureConfig)
    visibility: VisibilityConfig = Field(default_factory=VisibilityConfig)
    sample_window: int = Field(
        default=2, ge=1, description="Consecutive samples averaged per variable"
    )

    @model_validator(mode="after")
    def _check_weights(self) -> "ScoringAlgorithm":
        weight_maps = [
            self.family_weights,
            self.cloud.band_weights,
            self.moisture.level_weights,
        ]
        for weights in weight_maps:
            for key, value in weights.items():
                if value < 0:
                    raise ValueError(f"Weight for '{key}' must be non-negative")
        return self
