"""Bounds value object — half-open numeric range used by courier rules."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Bounds:
    """``minimum <= x < maximum``; a missing side is unbounded."""

    minimum: float | None = None
    maximum: float | None = None

    def __post_init__(self) -> None:
        if self.minimum is not None and self.minimum < 0:
            raise ValueError("Range minimum must be non-negative")
        if self.maximum is not None and self.maximum < 0:
            raise ValueError("Range maximum must be non-negative")
        if (
            self.minimum is not None
            and self.maximum is not None
            and self.maximum <= self.minimum
        ):
            raise ValueError(
                f"Range maximum ({self.maximum}) must be greater than minimum ({self.minimum})"
            )

    @classmethod
    def optional(cls, minimum: float | None, maximum: float | None) -> Bounds | None:
        """Build Bounds from two nullable columns; None when both are absent."""
        if minimum is None and maximum is None:
            return None
        return cls(minimum=minimum, maximum=maximum)

    def contains(self, value: float) -> bool:
        if self.minimum is not None and value < self.minimum:
            return False
        if self.maximum is not None and value >= self.maximum:
            return False
        return True

    def describe(self, unit: str = "", prefix: str = "") -> str:
        """Human-readable form, e.g. ``0-30 kg`` or ``₹10000-∞``."""
        low = _fmt(self.minimum) if self.minimum is not None else "0"
        high = _fmt(self.maximum) if self.maximum is not None else "∞"
        text = f"{prefix}{low}-{high}"
        return f"{text} {unit}" if unit else text


def _fmt(value: float) -> str:
    return f"{value:g}"
