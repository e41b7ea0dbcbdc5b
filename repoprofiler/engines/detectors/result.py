"""Explicit outcome of one detector run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Detection(Generic[T]):
    """What a detector found, or why it found nothing.

    ``value`` is None when the facet is not detected; ``error`` is set only
    when the detector itself failed and was downgraded.
    """

    detector: str
    value: T | None = None
    error: str | None = None

    @property
    def detected(self) -> bool:
        return self.value is not None

    @property
    def failed(self) -> bool:
        return self.error is not None
