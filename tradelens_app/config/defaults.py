"""Default configuration parameters for the decision normalization pipeline."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationParams:
    """Decision validator parameters."""
    max_rationale: int = 5                # Rationale entries kept after validation
    default_confidence: float = 0.5       # Used when provider confidence is not finite


@dataclass(frozen=True)
class ScoringParams:
    """Order-book consistency scoring and confidence blending."""
    prior: float = 0.5                    # Neutral starting score
    imbalance_threshold: float = 0.05     # |imbalance| needed to count as directional
    imbalance_bonus: float = 0.2          # Added/subtracted for (dis)agreeing imbalance
    pressure_bonus: float = 0.15          # Added when pressure agrees with decision

    # Blend: confidence' = confidence * confidence_weight + score * score_weight
    confidence_weight: float = 0.6
    score_weight: float = 0.4


@dataclass(frozen=True)
class GapParams:
    """Order-book price spacing analysis."""
    max_distinct_gaps: int = 2            # More distinct spacings than this is irregular
    precision: int = 6                    # Decimal places for gap rounding


@dataclass(frozen=True)
class NotesParams:
    """User-visible note rendering."""
    locale: str = "en"


@dataclass(frozen=True)
class StubParams:
    """Fail-safe response parameters."""
    confidence: float = 0.3
    timeframe: str = "15m"


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters passed to configure_logging."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    validation: ValidationParams
    scoring: ScoringParams
    gaps: GapParams
    notes: NotesParams
    stub: StubParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        validation=ValidationParams(),
        scoring=ScoringParams(),
        gaps=GapParams(),
        notes=NotesParams(),
        stub=StubParams(),
        logging=LoggingParams(),
    )
