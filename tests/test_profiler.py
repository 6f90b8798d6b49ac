import pytest

from pairprof.profiler import Anchor, Profiler, estimate_timer_freq, format_anchor


class Clock:
    def __init__(self):
        self.now = 0

    def __call__(self):
        return self.now

    def advance(self, ticks):
        self.now += ticks


@pytest.fixture
def clock():
    return Clock()


def test_single_block_records_time(clock):
    prof = Profiler(clock, True)
    with prof.block("work"):
        clock.advance(10)
    [anchor] = prof.anchors()
    assert anchor.label == "work"
    assert anchor.elapsed_exclusive == 10
    assert anchor.elapsed_inclusive == 10
    assert anchor.hit_count == 1


def test_nested_blocks_split_exclusive_time(clock):
    prof = Profiler(clock, True)
    with prof.block("outer"):
        clock.advance(5)
        with prof.block("inner"):
            clock.advance(7)
        clock.advance(3)
    outer, inner = prof.anchors()
    assert outer.elapsed_inclusive == 15
    assert outer.elapsed_exclusive == 15 - inner.elapsed_inclusive
    assert inner.elapsed_exclusive == inner.elapsed_inclusive == 7


def test_recursion_does_not_double_count_inclusive(clock):
    prof = Profiler(clock, True)

    @prof.function
    def recurse(n):
        clock.advance(1)
        if n:
            recurse(n - 1)

    recurse(3)
    [anchor] = prof.anchors()
    assert anchor.label == "recurse"
    assert anchor.hit_count == 4
    assert anchor.elapsed_inclusive == 4
    assert anchor.elapsed_exclusive == 4


def test_function_decorator_returns_value(clock):
    prof = Profiler(clock, True)

    @prof.function
    def add(a, b):
        clock.advance(2)
        return a + b

    assert add(2, 3) == 5
    assert add.__name__ == "add"
    assert prof.anchors()[0].hit_count == 1


def test_disabled_profiler_records_nothing(clock):
    prof = Profiler(clock, False)
    with prof.block("work") as anchor:
        clock.advance(10)
    assert anchor is None
    assert prof.anchors() == []


def test_block_records_on_exception(clock):
    prof = Profiler(clock, True)
    with pytest.raises(RuntimeError):
        with prof.block("fails"):
            clock.advance(4)
            raise RuntimeError("boom")
    [anchor] = prof.anchors()
    assert anchor.elapsed_inclusive == 4
    assert anchor.hit_count == 1


def test_format_anchor_without_children():
    anchor = Anchor("foo", elapsed_exclusive=25, elapsed_inclusive=25, hit_count=2)
    assert format_anchor(anchor, 100) == "  foo[2]: 25 (25.00%)"


def test_format_anchor_with_children():
    anchor = Anchor("foo", elapsed_exclusive=25, elapsed_inclusive=50, hit_count=1)
    assert format_anchor(anchor, 100) == "  foo[1]: 25 (25.00%, 50.00% w/children)"


def test_format_anchor_rejects_zero_total():
    with pytest.raises(ValueError):
        format_anchor(Anchor("foo", 1, 1, 1), 0)


def test_report_lines_with_frequency(clock):
    prof = Profiler(clock, True)
    with prof.block("work"):
        clock.advance(500)
    lines = prof.report_lines(500, 1000)
    assert lines[0] == ""
    assert lines[1] == "Total time: 500.0000ms (timer freq 1000)"
    assert lines[2] == format_anchor(prof.anchors()[0], 500)


def test_report_lines_without_frequency_omits_total(clock):
    prof = Profiler(clock, True)
    with prof.block("work"):
        clock.advance(8)
    lines = prof.report_lines(8, 0)
    assert len(lines) == 1
    assert lines[0].startswith("  work[1]: 8 ")


def test_begin_end_and_report(clock, capsys):
    prof = Profiler(clock, True)
    prof.begin()
    with prof.block("step"):
        clock.advance(40)
    clock.advance(10)
    lines = prof.end_and_report(1000)
    assert prof.stop - prof.start == 50
    out = capsys.readouterr().out
    assert out == "\n".join(lines) + "\n"
    assert lines[-1] == format_anchor(prof.anchors()[0], 50)


def test_estimate_timer_freq_zero_wait_gives_zero():
    ticks = iter(range(1000))
    assert estimate_timer_freq(lambda: 0, lambda: next(ticks), 1000, 0) == 0


def test_estimate_timer_freq_tracks_ratio():
    counter = {"c": 0}

    def os_timer():
        counter["c"] += 1
        return counter["c"]

    def timer():
        return 3 * counter["c"]

    freq = estimate_timer_freq(timer, os_timer, 1000, 100)
    assert 3000 <= freq <= 3100


def test_estimate_timer_freq_requires_os_freq():
    with pytest.raises(ValueError):
        estimate_timer_freq(lambda: 0, lambda: 0, None, 10)