from __future__ import annotations

"""Rate source abstraction.

A rate source yields the raw TIZO tier rows (`topup_rb`, `tizo_value`) that the
rate cache parses, validates and swaps in as its new snapshot.
"""
from abc import ABC, abstractmethod
from typing import Any, Mapping, Protocol, Sequence


class RateSource(ABC):
    name: str = "abstract"

    @abstractmethod
    def fetch_rate_rows(self) -> Sequence[Mapping[str, Any]]:
        """Return every tier row; raise SourceUnavailable when unreachable."""
        raise NotImplementedError


class SupportsSnapshot(Protocol):
    def snapshot(self) -> tuple: ...
