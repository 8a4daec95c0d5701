# ===== TYPES & INTERFACES =====
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class FetchStatus(Enum):
    """Outcome of a single logical fetch, after retries."""
    OK = "ok"
    NOT_FOUND = "not_found"
    TRANSIENT_FAILURE = "transient_failure"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class FetchResult:
    """
    Wraps a fetched payload together with the reason it is missing, so callers
    can pick a fallback per failure mode instead of testing for None.
    """
    status: FetchStatus
    payload: Any = None
    http_status: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK

    @classmethod
    def success(cls, payload: Any, http_status: Optional[int] = 200) -> "FetchResult":
        return cls(FetchStatus.OK, payload, http_status)

    @classmethod
    def not_found(cls, http_status: Optional[int] = None) -> "FetchResult":
        return cls(FetchStatus.NOT_FOUND, None, http_status)

    @classmethod
    def transient(cls, http_status: Optional[int] = None) -> "FetchResult":
        return cls(FetchStatus.TRANSIENT_FAILURE, None, http_status)

    @classmethod
    def malformed(cls, http_status: Optional[int] = None) -> "FetchResult":
        return cls(FetchStatus.MALFORMED, None, http_status)
