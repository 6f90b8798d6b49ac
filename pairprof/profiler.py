"""Hierarchical block profiler with exclusive and inclusive timings."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TypeVar

Timer = Callable[[], int]
F = TypeVar("F", bound=Callable)

OS_TIMER_FREQ = 1_000_000_000


@dataclass
class Anchor:
    """Accumulated timing for one labelled block."""

    label: str
    elapsed_exclusive: int = 0
    elapsed_inclusive: int = 0
    hit_count: int = 0


def format_anchor(anchor: Anchor, total_elapsed: int) -> str:
    """Render one anchor as a report line relative to the total elapsed ticks."""
    if total_elapsed <= 0:
        raise ValueError("total elapsed time must be positive")
    percent = 100.0 * (anchor.elapsed_exclusive / total_elapsed)
    line = (
        f"  {anchor.label}[{anchor.hit_count}]: "
        f"{anchor.elapsed_exclusive} ({percent:.2f}%"
    )
    if anchor.elapsed_inclusive != anchor.elapsed_exclusive:
        with_children = 100.0 * (anchor.elapsed_inclusive / total_elapsed)
        line += f", {with_children:.2f}% w/children"
    return line + ")"


def estimate_timer_freq(
    timer: Timer,
    os_timer: Timer | None = None,
    os_freq: int | None = None,
    milliseconds: int = 100,
) -> int:
    """Estimate ticks per second of ``timer`` by spinning on a reference clock."""
    if os_timer is None:
        os_timer = time.perf_counter_ns
        if os_freq is None:
            os_freq = OS_TIMER_FREQ
    if os_freq is None:
        raise ValueError("os_freq is required when os_timer is given")

    wait = os_freq * milliseconds // 1000
    block_start = timer()
    os_start = os_timer()
    os_elapsed = 0
    while os_elapsed < wait:
        os_elapsed = os_timer() - os_start
    block_elapsed = timer() - block_start

    if not os_elapsed:
        return 0
    return os_freq * block_elapsed // os_elapsed


class Profiler:
    """Collects timings for nested, labelled blocks of code."""

    def __init__(self, timer: Timer | None = None, enabled: bool = True) -> None:
        self.timer: Timer = timer if timer is not None else time.perf_counter_ns
        self.enabled = enabled
        self.start = 0
        self.stop = 0
        self._anchors: dict[str, Anchor] = {}
        self._parent: Anchor | None = None

    @contextmanager
    def block(self, label: str) -> Iterator[Anchor | None]:
        """Time the body of a ``with`` statement under ``label``."""
        if not self.enabled:
            yield None
            return

        anchor = self._anchors.setdefault(label, Anchor(label))
        parent = self._parent
        old_inclusive = anchor.elapsed_inclusive
        self._parent = anchor
        start = self.timer()
        try:
            yield anchor
        finally:
            elapsed = self.timer() - start
            self._parent = parent
            if parent is not None:
                parent.elapsed_exclusive -= elapsed
            anchor.elapsed_exclusive += elapsed
            anchor.elapsed_inclusive = old_inclusive + elapsed
            anchor.hit_count += 1

    def function(self, func: F) -> F:
        """Decorate ``func`` so each call is timed under its name."""

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with self.block(func.__name__):
                return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    def begin(self) -> None:
        """Mark the start of the whole profiled run."""
        self.start = self.timer()

    def end(self) -> int:
        """Mark the end of the run and return the total elapsed ticks."""
        self.stop = self.timer()
        return self.stop - self.start

    def anchors(self) -> list[Anchor]:
        """Anchors that recorded any time, in first-seen order."""
        return [a for a in self._anchors.values() if a.elapsed_inclusive]

    def report_lines(self, total_elapsed: int, timer_freq: int) -> list[str]:
        """Build the report text for a run of ``total_elapsed`` ticks."""
        lines: list[str] = []
        if timer_freq:
            ms = 1000.0 * total_elapsed / timer_freq
            lines.append("")
            lines.append(f"Total time: {ms:0.4f}ms (timer freq {timer_freq})")
        if self.enabled:
            lines.extend(format_anchor(a, total_elapsed) for a in self.anchors())
        return lines

    def end_and_report(self, timer_freq: int | None = None) -> list[str]:
        """End the run, print the report and return its lines."""
        total = self.end()
        if timer_freq is None:
            timer_freq = estimate_timer_freq(self.timer)
        lines = self.report_lines(total, timer_freq)
        for line in lines:
            print(line)
        return lines