#!/usr/bin/env python3
"""macleftovers main entry point.

Finds the leftover files of one application and prints them as JSON.

Usage:
    python3 -m macleftovers.python.main /path/to/config.json

The config.json file should contain:
    {
        "app_path": "/Applications/Example.app",
        "settings": {"name_search_strict": true, "spotlight": true},  // optional
        "registry_path": "~/.config/macleftovers/orphans.yaml",        // optional
        "conditions_path": "/path/to/conditions.yaml"                 // optional
    }

This script:
    1. Reads configuration from the JSON file
    2. Describes the app bundle from its Info.plist
    3. Runs the synchronous discovery pipeline
    4. Outputs JSON with every leftover path, its sizes and the app architecture
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from .discovery import (
    AppPathFinder,
    ConditionTable,
    ConditionsError,
    describe_app,
    load_registry,
)
from .utils.settings import FinderSettings, SettingsError


def run_discovery(config: dict[str, Any]) -> dict[str, Any]:
    """Run leftover discovery for the app named in ``config``.

    Args:
        config: Configuration dictionary with:
            - app_path: Path to the .app bundle
            - settings: Optional FinderSettings values
            - registry_path: Optional orphan registry YAML file
            - conditions_path: Optional conditions table override

    Returns:
        Results dictionary for JSON output

    Raises:
        SettingsError: If settings are invalid or app_path is missing
        ConditionsError: If the conditions table is malformed
    """
    if not isinstance(config, dict):
        raise SettingsError("Config file must contain a JSON object")

    app_path = config.get("app_path")
    if not app_path:
        raise SettingsError("Config must name an 'app_path'")

    settings = FinderSettings.from_dict(config.get("settings") or {})

    conditions_path = config.get("conditions_path")
    table = ConditionTable(Path(conditions_path).expanduser() if conditions_path else None)

    registry_path = config.get("registry_path")
    registry = load_registry(Path(registry_path).expanduser()) if registry_path else None

    app = describe_app(app_path)
    logging.info("Finding leftovers for %s (%s)", app.app_name, app.bundle_id or "no bundle id")

    finder = AppPathFinder(app, settings=settings, conditions=table.conditions, registry=registry)
    result = finder.find_paths_sync()

    return {
        "status": "success",
        "app": {
            "name": app.app_name,
            "bundle_id": app.bundle_id,
            "path": str(app.path),
            "web_app": app.web_app,
        },
        "leftovers": result.to_dict(),
    }


def main() -> None:
    """Main entry point for macleftovers."""
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if len(sys.argv) < 2:
        print(json.dumps({
            "status": "error",
            "error": "Usage: python3 -m macleftovers.python.main /path/to/config.json"
        }))
        sys.exit(1)

    config_path = Path(sys.argv[1]).expanduser()

    try:
        with open(config_path) as f:
            config = json.load(f)
    except FileNotFoundError:
        print(json.dumps({
            "status": "error",
            "error": f"Config file not found: {config_path}"
        }))
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(json.dumps({
            "status": "error",
            "error": f"Invalid JSON in config file: {e}"
        }))
        sys.exit(1)

    try:
        results = run_discovery(config)
        print(json.dumps(results, indent=2, default=str))
    except (SettingsError, ConditionsError, OSError, yaml.YAMLError) as e:
        print(json.dumps({
            "status": "error",
            "error": f"Discovery failed: {e}",
            "exception_type": type(e).__name__,
        }))
        sys.exit(1)


if __name__ == "__main__":
    main()
