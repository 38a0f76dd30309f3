from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, TypeVar


T = TypeVar("T")


class RandomSource(Protocol):
    """Anything that can feed phrase draws; ``random.Random`` qualifies."""

    def random(self) -> float: ...

    def randrange(self, stop: int) -> int: ...


@dataclass(frozen=True)
class VariationItem:
    """Single selectable option for a variation group."""

    text: str
    weight: float = 1.0


def choose(pool: Sequence[T], rng: RandomSource) -> Optional[T]:
    """Uniform pick from ``pool``; ``None`` when the pool is empty."""

    if not pool:
        return None
    index = rng.randrange(len(pool))
    return pool[min(max(index, 0), len(pool) - 1)]


class VariationEngine:
    """Threads one random source through every phrase draw of a generation call."""

    def __init__(self, rng: RandomSource | None = None) -> None:
        self.rng: RandomSource = rng if rng is not None else random.Random()

    def choice(self, items: Sequence[T]) -> Optional[T]:
        return choose(items, self.rng)

    def weighted_choice(self, items: Sequence[VariationItem]) -> Optional[VariationItem]:
        candidates = [item for item in items if item.text]
        if not candidates:
            return None
        weights = [max(float(item.weight), 0.0) for item in candidates]
        if len(set(weights)) == 1 or sum(weights) <= 0:
            return self.choice(candidates)
        target = self.rng.random() * sum(weights)
        cumulative = 0.0
        for item, weight in zip(candidates, weights):
            cumulative += weight
            if target < cumulative:
                return item
        return candidates[-1]

    def chance(self, probability: float) -> bool:
        """Probabilistic gate; always consumes one draw."""

        return self.rng.random() < probability

    def one_of(self, options: Sequence[T]) -> Optional[T]:
        """Single draw among mutually exclusive options."""

        return self.choice(options)


__all__ = ["RandomSource", "VariationEngine", "VariationItem", "choose"]
