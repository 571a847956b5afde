"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from ..validation.messages import SUPPORTED_LOCALES

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_validation_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate decision validator parameters."""
        errors = []

        if "max_rationale" in params:
            value = params["max_rationale"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="max_rationale",
                    message="Must be a positive integer",
                    value=value
                ))

        if "default_confidence" in params:
            value = params["default_confidence"]
            if not _is_number(value) or value < 0 or value > 1:
                errors.append(ValidationError(
                    field="default_confidence",
                    message="Must be a number between 0 and 1",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_scoring_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate consistency scoring parameters."""
        errors = []

        for name in ("prior", "confidence_weight", "score_weight"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0 or value > 1:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a number between 0 and 1",
                        value=value
                    ))

        for name in ("imbalance_threshold", "imbalance_bonus", "pressure_bonus"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-negative number",
                        value=value
                    ))

        # Weights must describe a convex blend
        weights = (params.get("confidence_weight"), params.get("score_weight"))
        if all(_is_number(w) for w in weights) and abs(sum(weights) - 1.0) > 1e-9:
            errors.append(ValidationError(
                field="score_weight",
                message="confidence_weight and score_weight must sum to 1",
                value=weights
            ))

        return errors

    @staticmethod
    def validate_gap_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate order-book gap analysis parameters."""
        errors = []

        if "max_distinct_gaps" in params:
            value = params["max_distinct_gaps"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                errors.append(ValidationError(
                    field="max_distinct_gaps",
                    message="Must be a positive integer",
                    value=value
                ))

        if "precision" in params:
            value = params["precision"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(ValidationError(
                    field="precision",
                    message="Must be a non-negative integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_notes_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate note rendering parameters."""
        errors = []

        if "locale" in params and params["locale"] not in SUPPORTED_LOCALES:
            errors.append(ValidationError(
                field="locale",
                message=f"Must be one of {sorted(SUPPORTED_LOCALES)}",
                value=params["locale"]
            ))

        return errors

    @staticmethod
    def validate_stub_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate fail-safe response parameters."""
        errors = []

        if "confidence" in params:
            value = params["confidence"]
            if not _is_number(value) or value < 0 or value > 1:
                errors.append(ValidationError(
                    field="confidence",
                    message="Must be a number between 0 and 1",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params and str(params["level"]).upper() not in LOG_LEVELS:
            errors.append(ValidationError(
                field="level",
                message=f"Must be one of {list(LOG_LEVELS)}",
                value=params["level"]
            ))

        if "format_json" in params and not isinstance(params["format_json"], bool):
            errors.append(ValidationError(
                field="format_json",
                message="Must be a boolean",
                value=params["format_json"]
            ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if isinstance(config.get("validation"), dict):
            errors.extend(ConfigValidator.validate_validation_params(config["validation"]))

        if isinstance(config.get("scoring"), dict):
            errors.extend(ConfigValidator.validate_scoring_params(config["scoring"]))

        if isinstance(config.get("gaps"), dict):
            errors.extend(ConfigValidator.validate_gap_params(config["gaps"]))

        if isinstance(config.get("notes"), dict):
            errors.extend(ConfigValidator.validate_notes_params(config["notes"]))

        if isinstance(config.get("stub"), dict):
            errors.extend(ConfigValidator.validate_stub_params(config["stub"]))

        if isinstance(config.get("logging"), dict):
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
