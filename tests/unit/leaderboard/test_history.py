"""Tests for leaderboard storage."""

from pathlib import Path

import pytest

from novadefense.leaderboard import Leaderboard, LeaderboardEntry


@pytest.fixture
def tmp_board(tmp_path: Path) -> Leaderboard:
    """Create a Leaderboard in a temp directory."""
    return Leaderboard(tmp_path / "runs" / "leaderboard.json", max_entries=3)


def _entry(score: int, difficulty: str = "NORMAL", ts: float = 0.0) -> LeaderboardEntry:
    return LeaderboardEntry(difficulty=difficulty, score=score, rating="B", timestamp=ts)


def test_missing_file_is_empty(tmp_board: Leaderboard):
    assert tmp_board.entries() == []
    assert tmp_board.top() == []


def test_add_persists_and_sorts(tmp_board: Leaderboard):
    tmp_board.add(_entry(200))
    tmp_board.add(_entry(600))
    tmp_board.add(_entry(400))

    assert tmp_board.path.exists()
    reloaded = Leaderboard(tmp_board.path)
    assert [e.score for e in reloaded.entries()] == [600, 400, 200]


def test_add_truncates_to_max_entries(tmp_board: Leaderboard):
    for score in (100, 500, 300, 700, 200):
        tmp_board.add(_entry(score))
    assert [e.score for e in tmp_board.entries()] == [700, 500, 300]


def test_equal_scores_keep_insertion_order(tmp_board: Leaderboard):
    tmp_board.add(_entry(300, ts=1.0))
    tmp_board.add(_entry(300, ts=2.0))
    assert [e.timestamp for e in tmp_board.entries()] == [1.0, 2.0]


def test_top_and_filter(tmp_board: Leaderboard):
    tmp_board.add(_entry(100, "EASY"))
    tmp_board.add(_entry(900, "HARD"))
    tmp_board.add(_entry(500, "EASY"))
    assert [e.score for e in tmp_board.top(2)] == [900, 500]
    assert [e.score for e in tmp_board.for_difficulty("EASY")] == [500, 100]


def test_malformed_file_raises(tmp_board: Leaderboard):
    tmp_board.path.parent.mkdir(parents=True)
    tmp_board.path.write_text("{not json")
    with pytest.raises(ValueError, match="Malformed"):
        tmp_board.entries()


def test_wrong_shape_raises(tmp_board: Leaderboard):
    tmp_board.path.parent.mkdir(parents=True)
    tmp_board.path.write_text('[{"score": 1}]')
    with pytest.raises(ValueError, match="Malformed"):
        tmp_board.entries()
