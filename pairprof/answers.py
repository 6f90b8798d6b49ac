"""Reference answers stored as a flat array of little-endian 64-bit floats."""

from __future__ import annotations

import struct
from dataclasses import dataclass

F64_SIZE = struct.calcsize("<d")


@dataclass(frozen=True)
class ReferenceAnswers:
    """Per-pair reference distances followed by the reference sum."""

    distances: tuple[float, ...]
    total: float

    @property
    def pair_count(self) -> int:
        """Number of per-pair distances the answers hold."""
        return len(self.distances)


def load_reference_answers(data: bytes | bytearray | memoryview) -> ReferenceAnswers:
    """Decode an answers file: one f64 per pair, then one f64 for the sum.

    Bytes after the last whole value are ignored. Raises ``ValueError`` when
    the data is too short to hold even the sum.
    """
    raw = bytes(data)
    if len(raw) < F64_SIZE:
        raise ValueError(
            f"answers data holds {len(raw)} bytes; at least {F64_SIZE} are needed"
        )
    count = (len(raw) - F64_SIZE) // F64_SIZE
    values = struct.unpack_from(f"<{count + 1}d", raw)
    return ReferenceAnswers(distances=tuple(values[:count]), total=values[count])