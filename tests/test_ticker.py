import pytest

from sectorcaster.ticker import TickerList


class Recorder:
    def __init__(self, name, log, action=None):
        self.name = name
        self.log = log
        self.action = action

    def tick(self):
        self.log.append(self.name)
        if self.action:
            self.action()


def test_run_in_insertion_order():
    log = []
    tickers = TickerList()
    for name in ("a", "b", "c"):
        tickers.add(Recorder(name, log))
    tickers.run()
    assert log == ["a", "b", "c"]


def test_len_and_contains():
    tickers = TickerList()
    a = Recorder("a", [])
    b = Recorder("b", [])
    tickers.add(a)
    assert len(tickers) == 1
    assert a in tickers
    assert b not in tickers


def test_remove_stops_ticking():
    log = []
    tickers = TickerList()
    a, b = Recorder("a", log), Recorder("b", log)
    tickers.add(a)
    tickers.add(b)
    tickers.remove(a)
    tickers.run()
    assert log == ["b"]
    assert a not in tickers


def test_remove_absent_is_ignored():
    tickers = TickerList()
    a = Recorder("a", [])
    tickers.add(a)
    tickers.remove(Recorder("x", []))
    assert len(tickers) == 1


def test_double_add_raises():
    tickers = TickerList()
    a = Recorder("a", [])
    tickers.add(a)
    with pytest.raises(ValueError):
        tickers.add(a)


def test_self_removal_during_run():
    log = []
    tickers = TickerList()
    a = Recorder("a", log)
    a.action = lambda: tickers.remove(a)
    b = Recorder("b", log)
    tickers.add(a)
    tickers.add(b)
    tickers.run()
    assert a not in tickers
    assert b in tickers
    assert len(tickers) == 1
    tickers.run()
    assert log == ["a", "b", "b"]
    assert len(tickers) == 1


def test_removing_later_thinker_during_run_skips_it():
    log = []
    tickers = TickerList()
    c = Recorder("c", log)
    a = Recorder("a", log, action=lambda: tickers.remove(c))
    tickers.add(a)
    tickers.add(c)
    tickers.run()
    assert log == ["a"]
    assert len(tickers) == 1


def test_thinker_added_during_run_runs_same_pass():
    log = []
    tickers = TickerList()
    late = Recorder("late", log)
    a = Recorder("a", log, action=lambda: late in tickers or tickers.add(late))
    tickers.add(a)
    tickers.run()
    assert log == ["a", "late"]
    assert len(tickers) == 2


def test_equal_but_distinct_thinkers_are_separate():
    tickers = TickerList()
    log = []
    tickers.add(Recorder("same", log))
    tickers.add(Recorder("same", log))
    tickers.run()
    assert log == ["same", "same"]