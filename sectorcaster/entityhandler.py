"""Container of all live entities."""

from __future__ import annotations

from typing import Iterator, List

from .entity import Entity
from .ticker import TickerList


class EntityHandler:
    """Holds entities and drops the ones marked dirty."""

    def __init__(self, tickers: TickerList) -> None:
        self.tickers = tickers
        self._entities: List[Entity] = []

    def add(self, entity: Entity) -> None:
        self._entities.append(entity)

    def remove_dirty(self) -> List[Entity]:
        """Remove dirty entities, filling each gap with the last entity."""
        removed: List[Entity] = []
        i = 0
        while i < len(self._entities):
            entity = self._entities[i]
            if not entity.dirty:
                i += 1
                continue
            self.tickers.remove(entity)
            removed.append(entity)
            last = self._entities.pop()
            if i < len(self._entities):
                self._entities[i] = last
        return removed

    def clear(self) -> None:
        """Forget every entity and stop ticking them."""
        for entity in self._entities:
            self.tickers.remove(entity)
        self._entities.clear()

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._entities))

    def __len__(self) -> int:
        return len(self._entities)