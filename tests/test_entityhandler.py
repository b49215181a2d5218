from sectorcaster.entity import Entity, EntityType
from sectorcaster.entityhandler import EntityHandler
from sectorcaster.ticker import TickerList


def _make(handler, count):
    entities = [Entity(type=EntityType.ITEM) for _ in range(count)]
    for entity in entities:
        handler.tickers.add(entity)
        handler.add(entity)
    return entities


def test_add_and_iterate():
    handler = EntityHandler(TickerList())
    entities = _make(handler, 3)
    assert len(handler) == 3
    assert list(handler) == entities


def test_remove_dirty_swaps_last_into_gap():
    handler = EntityHandler(TickerList())
    a, b, c, d = _make(handler, 4)
    b.dirty = True
    removed = handler.remove_dirty()
    assert removed == [b]
    assert list(handler) == [a, d, c]
    assert b not in handler.tickers
    assert a in handler.tickers


def test_remove_dirty_handles_consecutive_dirty():
    handler = EntityHandler(TickerList())
    a, b, c = _make(handler, 3)
    a.dirty = True
    c.dirty = True
    handler.remove_dirty()
    assert list(handler) == [b]
    assert len(handler.tickers) == 1


def test_remove_dirty_all():
    handler = EntityHandler(TickerList())
    entities = _make(handler, 3)
    for entity in entities:
        entity.dirty = True
    assert len(handler.remove_dirty()) == 3
    assert len(handler) == 0


def test_clear_empties_and_unregisters():
    handler = EntityHandler(TickerList())
    _make(handler, 2)
    handler.clear()
    assert len(handler) == 0
    assert len(handler.tickers) == 0


def test_iteration_is_a_snapshot():
    handler = EntityHandler(TickerList())
    _make(handler, 2)
    for _ in handler:
        handler.add(Entity(type=EntityType.ENEMY))
    assert len(handler) == 4