"""
tests/test_ledger.py — Unit Tests for Points & Level Carry-Over
================================================================

Pure calculation tests (no database).
"""

from __future__ import annotations

import pytest

from quickask.database.models import User
from quickask.engine.ledger import LevelState, apply_points, apply_to_user


class TestApplyPoints:
    def test_carry_over_into_next_level(self):
        result = apply_points(LevelState(points=198, level=3, level_progress=98), 5)
        assert result.after == LevelState(points=203, level=4, level_progress=3)
        assert result.leveled_up

    def test_no_carry_below_span(self):
        result = apply_points(LevelState(points=150, level=2, level_progress=50), 10)
        assert result.after == LevelState(points=160, level=2, level_progress=60)
        assert not result.leveled_up

    def test_exactly_reaching_span_levels_up_with_zero_progress(self):
        result = apply_points(LevelState(points=90, level=1, level_progress=90), 10)
        assert result.after.level == 2
        assert result.after.level_progress == 0

    def test_zero_delta_is_noop(self):
        state = LevelState(points=7, level=1, level_progress=7)
        result = apply_points(state, 0)
        assert result.after == state
        assert result.before == state

    def test_negative_delta_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            apply_points(LevelState(), -2)

    def test_single_carry_only(self):
        """An award of a full span or more still advances a single level."""
        result = apply_points(LevelState(points=0, level=1, level_progress=50), 250)
        assert result.after.level == 2
        assert result.after.level_progress == 200

    @pytest.mark.parametrize("delta", [2, 5, 10])
    def test_progress_stays_below_span_for_real_awards(self, delta):
        state = LevelState()
        for _ in range(500):
            state = apply_points(state, delta).after
            assert 0 <= state.level_progress < 100
        assert state.points == 500 * delta

    def test_lost_update_when_two_writers_share_a_snapshot(self):
        """Without a row lock, two awards computed from one read lose one award."""
        snapshot = LevelState(points=98, level=1, level_progress=98)
        first = apply_points(snapshot, 2).after
        second = apply_points(snapshot, 2).after
        # Last writer wins: the stored result reflects only one award.
        assert second == first
        assert second.points == 100

        serialized = apply_points(apply_points(snapshot, 2).after, 2).after
        assert serialized.points == 102


class TestApplyToUser:
    def test_writes_triple_onto_user(self):
        user = User(id=1, username="ada", points=98, level=3, level_progress=98)
        result = apply_to_user(user, 5)
        assert (user.points, user.level, user.level_progress) == (103, 4, 3)
        assert result.before.level == 3

    def test_unset_columns_treated_as_defaults(self):
        user = User(id=2, username="new")
        apply_to_user(user, 10)
        assert (user.points, user.level, user.level_progress) == (10, 1, 10)

    def test_level_up_is_logged(self, caplog):
        user = User(id=3, username="lvl", points=99, level=1, level_progress=99)
        with caplog.at_level("INFO", logger="quickask.engine.ledger"):
            apply_to_user(user, 2)
        assert "leveled up" in caplog.text
