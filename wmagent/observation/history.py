"""Bounded history of composed observations fed to the world model."""
from __future__ import annotations

import collections
from typing import Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")

DEFAULT_CAPACITY = 10


class BoundedHistory(Generic[T]):
    """Keeps the most recent `capacity` observations, oldest first.

    Pushing past capacity evicts the oldest entry, so length never exceeds
    `capacity` however long the agent runs.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._items: collections.deque[T] = collections.deque(maxlen=capacity)
        self.capacity = capacity

    def push(self, observation: T) -> None:
        self._items.append(observation)

    def extend(self, observations: Iterable[T]) -> None:
        for observation in observations:
            self.push(observation)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def clear(self) -> None:
        self._items.clear()

    def newest(self) -> T:
        """Most recently pushed observation."""
        return self._items[-1]
