#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path

from dotenv import load_dotenv

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from looplens_app.config.loader import ConfigLoader
from looplens_app.errors import ConfigurationError


def main():
    """Main validation function."""
    print("🔍 Validating LoopLens agent configuration...")

    load_dotenv(override=False)
    loader = ConfigLoader.create()

    try:
        settings = loader.load_settings()
    except ConfigurationError as e:
        print(f"❌ Found {len(e.errors) or 1} validation errors:")
        if e.errors:
            for error in e.errors:
                print(f"  • {error.field}: {error.message}")
        else:
            print(f"  • {e}")
        print(f"\n❌ Configuration validation failed!")
        sys.exit(1)

    print(f"✅ Market data: {len(settings.market_data.assets)} assets, "
          f"timeout {settings.market_data.timeout_seconds}s")
    print(f"✅ Arbitration: {settings.arbitration.model} via {settings.arbitration.base_url}")
    print(f"✅ Ledger: contract {settings.credentials.contract_address} "
          f"on {settings.credentials.rpc_url}")
    print(f"✅ Schedule: every {settings.schedule.interval_seconds}s, "
          f"run on start: {settings.schedule.run_on_start}")

    print(f"\n🎉 All configuration validation passed!")
    sys.exit(0)


if __name__ == "__main__":
    main()
