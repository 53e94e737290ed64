# tests/unit/test_compute_range.py
import random

from fshelpers.services.operations import compute_range


def test_range_stays_within_bounds():
    rng = random.Random(42)
    for size in [1, 2, 7, 100, 4096, 1_000_003]:
        for _ in range(200):
            offset, length = compute_range(size, rng)
            assert 0 <= offset < size
            assert 0 <= length <= 0.6 * size


def test_length_fraction_follows_configuration():
    rng = random.Random(7)
    for _ in range(500):
        _, length = compute_range(10_000, rng, fraction=(0.5, 0.6))
        assert 5_000 <= length <= 6_000


def test_empty_file_gives_empty_range():
    assert compute_range(0, random.Random(1)) == (0, 0)
