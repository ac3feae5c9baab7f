"""Configuration for the indexed list.

Defines the tunable index maintenance policy.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class IndexConfig:
    """Configuration parameters for index maintenance.

    Attributes:
        rebuild_threshold: Fraction of the collection length. A range
            mutation touching more positions than this fraction rebuilds
            every index map instead of patching it.
    """

    rebuild_threshold: float = 0.5

    def __post_init__(self) -> None:
        if not 0.0 <= self.rebuild_threshold <= 1.0:
            raise ValueError(f"Invalid rebuild_threshold: {self.rebuild_threshold}")

    def exceeds_threshold(self, touched: int, length: int) -> bool:
        """Return True if touching `touched` of `length` positions warrants a rebuild."""
        if length <= 0:
            return touched > 0
        return touched / length > self.rebuild_threshold
