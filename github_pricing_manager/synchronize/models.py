"""Internal data models shared by the synchronization steps."""

from dataclasses import dataclass
from enum import Enum


class SyncDecision(Enum):
    """Enum for sync decisions."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    NOOP = "noop"


class SkipReason(str, Enum):
    """Reasons a repository is left out of fleet propagation."""

    ARCHIVED = "archived"
    DISABLED = "disabled"
    EXCLUDED = "excluded"


@dataclass(frozen=True)
class RateChange:
    """Base price multiplier before and after a push.

    ``new_base_rate`` is None when the diff holds no usable assignment.
    """

    previous_base_rate: float | None
    new_base_rate: float | None
