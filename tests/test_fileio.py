import itertools

import pytest

from pairprof.fileio import MINIMUM_JSON_PAIR_ENCODING, max_pair_count, read_entire_file
from pairprof.profiler import Profiler


def test_read_round_trip(tmp_path):
    data = bytes(range(256)) * 3
    path = tmp_path / "input.bin"
    path.write_bytes(data)
    assert read_entire_file(path) == data


def test_read_empty_file(tmp_path):
    path = tmp_path / "empty.json"
    path.write_bytes(b"")
    assert read_entire_file(str(path)) == b""


def test_read_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_entire_file(tmp_path / "missing.json")


def test_read_records_profile_block(tmp_path):
    path = tmp_path / "input.json"
    path.write_bytes(b'{"pairs": []}')
    profiler = Profiler(timer=itertools.count().__next__)
    assert read_entire_file(path, profiler) == b'{"pairs": []}'
    anchors = profiler.anchors()
    assert [a.label for a in anchors] == ["read_entire_file"]
    assert anchors[0].hit_count == 1


def test_minimum_encoding_is_twenty_four_bytes():
    assert max_pair_count(24) == 1
    assert max_pair_count(23) == 0
    assert max_pair_count(48) == 2


@pytest.mark.parametrize("pairs", [0, 1, 5, 1000])
def test_max_pair_count_exact_multiples(pairs):
    assert max_pair_count(pairs * MINIMUM_JSON_PAIR_ENCODING) == pairs


def test_max_pair_count_rounds_down():
    assert max_pair_count(MINIMUM_JSON_PAIR_ENCODING - 1) == 0
    assert max_pair_count(2 * MINIMUM_JSON_PAIR_ENCODING + 5) == 2


def test_max_pair_count_negative_raises():
    with pytest.raises(ValueError):
        max_pair_count(-1)