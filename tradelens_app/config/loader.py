"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import DefaultConfig, get_default_config
from .validation import ConfigValidator


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_market_config(self, market: str) -> dict[str, Any]:
        """Load market-specific configuration overrides."""
        markets_file = self.config_dir / "markets.yaml"

        if not markets_file.exists():
            return {}

        with open(markets_file) as f:
            markets_config = yaml.safe_load(f) or {}

        return (markets_config.get("markets") or {}).get(market, {}) or {}  # type: ignore[no-any-return]

    def merge_config(
        self,
        market: str,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. Market-specific overrides from markets.yaml
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        market_config = self.load_market_config(market)
        config = self._deep_merge(config, market_config)

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load(
        self,
        market: str,
        overrides: Optional[dict[str, Any]] = None
    ) -> DefaultConfig:
        """
        Merge, validate and materialize configuration for a market.

        Raises:
            ConfigurationError: If the merged configuration is invalid
        """
        merged = self.merge_config(market, overrides)

        errors = ConfigValidator.validate_config(merged)
        if errors:
            details = [f"{err.field}: {err.message} (got: {err.value})" for err in errors]
            raise ConfigurationError(
                f"Invalid configuration for market {market}: {'; '.join(details)}",
                errors=errors,
                context={"market": market},
            )

        return self._dict_to_config(merged)

    def _dict_to_config(self, data: dict[str, Any]) -> DefaultConfig:
        """Build typed configuration sections, ignoring unknown keys."""
        sections = {}
        for section in fields(self.defaults):
            default_section = getattr(self.defaults, section.name)
            known = {f.name for f in fields(default_section)}
            values = {k: v for k, v in (data.get(section.name) or {}).items() if k in known}
            sections[section.name] = type(default_section)(**values)
        return DefaultConfig(**sections)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name, _field in obj.__dataclass_fields__.items():
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
