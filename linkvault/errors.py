from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class LinkVaultError(Exception):
    """Base class for infrastructure failures."""


class SnapshotError(LinkVaultError):
    """Raised when persisted library state cannot be read or is inconsistent."""


class OutcomeStatus(str, Enum):
    OK = "ok"
    DUPLICATE_IGNORED = "duplicate_ignored"
    NOT_FOUND = "not_found"
    INVALID_ARGUMENT = "invalid_argument"


@dataclass(frozen=True)
class Outcome:
    """Result of a store mutation.

    Business conditions (missing ids, rejected input, idempotent repeats) are
    reported here instead of raised. ``value`` holds the created, updated or
    already-existing entity when there is one.
    """

    status: OutcomeStatus
    value: Any = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status in (OutcomeStatus.OK, OutcomeStatus.DUPLICATE_IGNORED)

    @property
    def duplicate(self) -> bool:
        return self.status is OutcomeStatus.DUPLICATE_IGNORED

    @classmethod
    def success(cls, value: Any = None) -> "Outcome":
        return cls(OutcomeStatus.OK, value)

    @classmethod
    def ignored(cls, value: Any = None, message: str = "") -> "Outcome":
        return cls(OutcomeStatus.DUPLICATE_IGNORED, value, message)

    @classmethod
    def not_found(cls, message: str) -> "Outcome":
        return cls(OutcomeStatus.NOT_FOUND, None, message)

    @classmethod
    def invalid(cls, message: str, value: Optional[Any] = None) -> "Outcome":
        return cls(OutcomeStatus.INVALID_ARGUMENT, value, message)
