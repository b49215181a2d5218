"""Ordered list of thinkers that are ticked once per game update."""

from __future__ import annotations

from typing import Dict, Protocol


class Thinker(Protocol):
    def tick(self) -> None:
        ...


class TickerList:
    """Thinkers run in insertion order; removal and addition are safe mid-run."""

    def __init__(self) -> None:
        self._thinkers: Dict[int, Thinker] = {}

    def add(self, thinker: Thinker) -> None:
        """Append a thinker; it runs in the current pass if one is under way."""
        key = id(thinker)
        if key in self._thinkers:
            raise ValueError("thinker is already registered")
        self._thinkers[key] = thinker

    def remove(self, thinker: Thinker) -> None:
        """Unregister a thinker; removing an absent one does nothing."""
        self._thinkers.pop(id(thinker), None)

    def run(self) -> None:
        """Tick every registered thinker once, including ones added during the pass."""
        visited: Dict[int, Thinker] = {}
        while True:
            pending = [t for key, t in self._thinkers.items() if key not in visited]
            if not pending:
                return
            for thinker in pending:
                visited[id(thinker)] = thinker
                if thinker in self:
                    thinker.tick()

    def __len__(self) -> int:
        return len(self._thinkers)

    def __contains__(self, thinker: object) -> bool:
        return self._thinkers.get(id(thinker)) is thinker