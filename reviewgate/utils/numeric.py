from __future__ import annotations

from typing import Iterable, Tuple


def clamp(value: float, bounds: Tuple[float, float]) -> float:
    lower, upper = bounds
    if value < lower:
        return lower
    if value > upper:
        return upper
    return value


def average(values: Iterable[float]) -> float:
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


__all__ = ["clamp", "average"]
