"""Text of the run summary and of the check against reference answers."""

from __future__ import annotations

from pairprof.answers import ReferenceAnswers


def _check_count(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} cannot be negative")


def summary_lines(input_size: int, pair_count: int, total: float) -> list[str]:
    """Lines reporting the input size, the pair count and the haversine sum."""
    _check_count("input size", input_size)
    _check_count("pair count", pair_count)
    return [
        f"Input size: {input_size}",
        f"Pair count: {pair_count}",
        f"Haversine sum: {total:.16f}",
    ]


def validation_lines(
    pair_count: int, total: float, answers: ReferenceAnswers
) -> list[str]:
    """Lines comparing a computed sum and pair count with reference answers.

    The block opens and closes with an empty line. A line starting with
    ``FAILED`` appears when the pair counts differ.
    """
    _check_count("pair count", pair_count)
    lines = ["", "Validation:"]
    if pair_count != answers.pair_count:
        lines.append(f"FAILED - pair count doesn't match {answers.pair_count}.")
    lines.append(f"Reference sum: {answers.total:.16f}")
    lines.append(f"Difference: {total - answers.total:.16f}")
    lines.append("")
    return lines