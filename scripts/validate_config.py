#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tradelens_app.config.loader import ConfigLoader
from tradelens_app.config.validation import ConfigValidator, ValidationError
from tradelens_app.data.models import Market


def validate_market_config(loader: ConfigLoader, market: Market) -> List[ValidationError]:
    """Validate merged configuration for a specific market."""
    config = loader.merge_config(market.value)
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)
    print(f"🔍 Validating {loader.config_dir / 'markets.yaml'}...")

    all_valid = True

    for market in Market:
        print(f"\n📊 Validating {market.value}...")

        errors = validate_market_config(loader, market)
        if errors:
            print(f"❌ Found {len(errors)} validation errors:")
            for error in errors:
                print(f"  • {error.field}: {error.message} (value: {error.value})")
            all_valid = False
        else:
            config = loader.load(market.value)
            print(f"✅ {market.value} configuration is valid "
                  f"(locale={config.notes.locale}, weights={config.scoring.confidence_weight}"
                  f"/{config.scoring.score_weight})")

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
