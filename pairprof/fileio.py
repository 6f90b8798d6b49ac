"""Reading input files and sizing the pair table from them."""

from __future__ import annotations

import os
from contextlib import nullcontext

from pairprof.profiler import Profiler

# Smallest number of bytes a single pair can take in the JSON input.
MINIMUM_JSON_PAIR_ENCODING = 6 * 4


def read_entire_file(
    path: str | os.PathLike, profiler: Profiler | None = None
) -> bytes:
    """Return the whole contents of ``path``; raises ``OSError`` on failure."""
    with profiler.block("read_entire_file") if profiler is not None else nullcontext():
        with open(path, "rb") as handle:
            return handle.read()


def max_pair_count(input_size: int) -> int:
    """Upper bound on the number of pairs an input of ``input_size`` bytes holds."""
    if input_size < 0:
        raise ValueError("input size cannot be negative")
    return input_size // MINIMUM_JSON_PAIR_ENCODING