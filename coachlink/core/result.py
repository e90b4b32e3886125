"""Explicit success/failure values returned by service operations.

Callers may inspect a result or ignore it; the service has already logged
the failure either way.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from coachlink.core.errors import CoachlinkError

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of a single operation.

    Attributes:
        value: Result value on success
        error: Error on failure, None on success
    """

    value: T | None = None
    error: CoachlinkError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T | None:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: T | None = None) -> OperationResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: CoachlinkError) -> OperationResult[T]:
        return cls(error=error)


@dataclass(frozen=True)
class BatchResult:
    """Per-item outcomes of a batch operation.

    Each item succeeds or fails on its own; a failed item never undoes a
    successful one.
    """

    results: dict[str, OperationResult[None]] = field(default_factory=dict)

    @property
    def succeeded(self) -> list[str]:
        return [item_id for item_id, result in self.results.items() if result.ok]

    @property
    def failed(self) -> list[str]:
        return [item_id for item_id, result in self.results.items() if not result.ok]

    @property
    def ok(self) -> bool:
        return not self.failed
