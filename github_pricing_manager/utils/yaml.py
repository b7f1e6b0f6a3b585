"""Contains utility functions for working with YAML and JSON files."""

import json
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

yaml = YAML(typ="safe")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Loads a YAML file and returns a dictionary."""
    with open(path, encoding="utf-8") as f:
        data = yaml.load(f)
    return data or {}


def load_json_file(path: Path) -> dict[str, Any]:
    """Loads a JSON file and returns a dictionary."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]
