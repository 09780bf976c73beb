"""Tests for legacy Elo to DUPR rating conversion."""

from __future__ import annotations

import pytest

from domain.ratings.dupr.conversion import convert_elo_to_dupr, looks_like_elo


@pytest.mark.parametrize(
    ("elo", "expected"),
    [
        (1000.0, 2.0),
        (1500.0, 5.0),
        (2000.0, 8.0),
        (1234.0, 3.4),
        (1025.0, 2.2),
        (1175.0, 3.1),
        (1375.0, 4.3),
        (1875.0, 7.3),
        (800.0, 2.0),
        (2400.0, 8.0),
    ],
)
def test_convert_elo_to_dupr(elo: float, expected: float) -> None:
    assert convert_elo_to_dupr(elo) == pytest.approx(expected)


def test_convert_rejects_empty_elo_range() -> None:
    with pytest.raises(ValueError):
        convert_elo_to_dupr(1500.0, min_elo=2000.0, max_elo=2000.0)


def test_looks_like_elo_threshold() -> None:
    assert looks_like_elo(1200.0)
    assert looks_like_elo(10.5)
    assert not looks_like_elo(10.0)
    assert not looks_like_elo(4.25)
