"""Tests for the payout arithmetic - multipliers, truncation and streak tiers."""

import pytest

from casino.core.wager import compute_payout, streak_tiers


def test_plain_win_doubles_bet():
    result = compute_payout(bet_points=10, is_correct=True)
    assert result.points_won == 20
    assert result.streak_bonus == 0
    assert not result.ai_bonus_applied
    assert not result.daily_bonus_applied


def test_plain_loss_costs_bet():
    result = compute_payout(bet_points=10, is_correct=False)
    assert result.points_won == -10


def test_zodiac_applies_to_wins_and_losses():
    assert compute_payout(bet_points=10, is_correct=True, zodiac_multiplier=1.3).points_won == 26
    assert compute_payout(bet_points=10, is_correct=False, zodiac_multiplier=1.3).points_won == -13


def test_each_step_truncates():
    """2 * 1.15 = 2.3 -> 2, then 2 * 1.1 = 2.2 -> 2."""
    result = compute_payout(bet_points=1, is_correct=True, zodiac_multiplier=1.15, is_ai_challenge=True)
    assert result.after_zodiac == 2
    assert result.points_won == 2

    # Truncation is toward zero for losses
    assert compute_payout(bet_points=1, is_correct=False, zodiac_multiplier=1.15).points_won == -1


def test_ai_bonus_only_on_win():
    assert compute_payout(bet_points=10, is_correct=True, is_ai_challenge=True).points_won == 22
    loss = compute_payout(bet_points=10, is_correct=False, is_ai_challenge=True)
    assert loss.points_won == -10
    assert not loss.ai_bonus_applied


def test_daily_bonus_only_on_win():
    win = compute_payout(bet_points=10, is_correct=True, is_daily_challenge=True, daily_multiplier=3)
    assert win.points_won == 60
    assert win.daily_bonus_applied

    loss = compute_payout(bet_points=10, is_correct=False, is_daily_challenge=True)
    assert loss.points_won == -10
    assert not loss.daily_bonus_applied


@pytest.mark.parametrize("streak, tiers", [
    (0, 0), (2, 0), (3, 1), (5, 1), (6, 2), (14, 4), (15, 5), (30, 5), (100, 5),
])
def test_streak_tiers(streak, tiers):
    assert streak_tiers(streak) == tiers


def test_streak_bonus_on_win():
    result = compute_payout(bet_points=50, is_correct=True, current_streak=6)
    assert result.streak_bonus == 20
    assert result.points_won == 120


def test_streak_bonus_capped():
    result = compute_payout(bet_points=50, is_correct=True, current_streak=30)
    assert result.points_won == 150


def test_streak_ignored_on_loss():
    result = compute_payout(bet_points=10, is_correct=False, current_streak=9)
    assert result.points_won == -10
    assert result.streak_bonus == 0


def test_all_multipliers_in_order():
    """zodiac -> AI -> daily -> streak: 20 -> 26 -> 28 -> 84 -> 84 + 8."""
    result = compute_payout(
        bet_points=10,
        is_correct=True,
        zodiac_multiplier=1.3,
        is_ai_challenge=True,
        is_daily_challenge=True,
        daily_multiplier=3,
        current_streak=3,
    )
    assert result.base_points == 20
    assert result.after_zodiac == 26
    assert result.streak_bonus == 8
    assert result.points_won == 92
