"""Contains utility functions for synchronization actions."""

from typing import Sequence

from github_pricing_manager.synchronize.types import HasName, LabelType
from github_pricing_manager.utils.constants import PRICE_LABEL_PREFIX


def extract_label_names(labels: Sequence[LabelType] | None) -> list[str]:
    """Extract label names from a list of GitHub label objects, strings, or dicts, preserving order."""
    names: list[str] = []
    for label in labels or []:
        if isinstance(label, str):
            name = label
        elif isinstance(label, dict) and "name" in label:
            name = label["name"]
        elif isinstance(label, HasName):
            name = label.name
        else:
            continue
        if name and name not in names:
            names.append(name)
    return names


def is_price_label(name: str) -> bool:
    """Return True if a label name encodes a price."""
    return name.startswith(PRICE_LABEL_PREFIX)
