"""Validation errors raised when a link cannot be created."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Set


class FailureKind(str, Enum):
    """Kinds of client-input failures."""

    INVALID_URL = "InvalidUrl"
    INVALID_VALIDITY = "InvalidValidity"
    INVALID_SHORTCODE = "InvalidShortcode"
    SHORTCODE_TAKEN = "ShortcodeTaken"


# Wire field each failure kind is reported under
FIELD_NAMES = {
    FailureKind.INVALID_URL: "originalUrl",
    FailureKind.INVALID_VALIDITY: "validityPeriod",
    FailureKind.INVALID_SHORTCODE: "customShortcode",
    FailureKind.SHORTCODE_TAKEN: "customShortcode",
}


@dataclass(frozen=True)
class FieldFailure:
    """A single field-level validation failure."""

    kind: FailureKind
    message: str

    @property
    def field(self) -> str:
        return FIELD_NAMES[self.kind]


class LinkValidationError(ValueError):
    """Raised by the registry when a creation request is rejected.

    Carries every failing field, so callers can render all problems at once.
    """

    def __init__(self, failures: List[FieldFailure]):
        self.failures = list(failures)
        super().__init__("; ".join(f"{f.field}: {f.message}" for f in self.failures))

    @property
    def kinds(self) -> Set[FailureKind]:
        return {f.kind for f in self.failures}

    @property
    def is_conflict(self) -> bool:
        """True when the requested custom code is already in use."""
        return FailureKind.SHORTCODE_TAKEN in self.kinds

    def to_dict(self) -> Dict[str, str]:
        """Field-keyed error map, as returned to API clients."""
        return {f.field: f.message for f in self.failures}
