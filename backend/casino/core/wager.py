"""Wager payout arithmetic.

Multipliers are applied in a fixed order and each multiplicative step
truncates toward zero (``int()``), matching how balances have always been
computed. Changing the order or the rounding changes payouts.
"""

from dataclasses import dataclass

AI_BONUS_MULTIPLIER = 1.1
STREAK_BONUS_THRESHOLD = 3
STREAK_BONUS_RATE = 0.1
MAX_STREAK_TIERS = 5


@dataclass(frozen=True)
class WagerBreakdown:
    is_correct: bool
    base_points: int
    after_zodiac: int
    ai_bonus_applied: bool
    daily_bonus_applied: bool
    streak_bonus: int
    points_won: int


def streak_tiers(current_streak: int) -> int:
    """Number of 10% streak bonus tiers earned (one per 3 wins, capped at 5)."""
    if current_streak < STREAK_BONUS_THRESHOLD:
        return 0
    return min(current_streak // STREAK_BONUS_THRESHOLD, MAX_STREAK_TIERS)


def compute_payout(
    *,
    bet_points: int,
    is_correct: bool,
    zodiac_multiplier: float = 1.0,
    is_ai_challenge: bool = False,
    is_daily_challenge: bool = False,
    daily_multiplier: int = 3,
    current_streak: int = 0,
) -> WagerBreakdown:
    """Turn a resolved bet into a signed point delta."""
    base = bet_points * 2 if is_correct else -bet_points
    delta = int(base * zodiac_multiplier)
    after_zodiac = delta

    ai_bonus = is_correct and is_ai_challenge
    if ai_bonus:
        delta = int(delta * AI_BONUS_MULTIPLIER)

    daily_bonus = is_correct and is_daily_challenge
    if daily_bonus:
        delta *= daily_multiplier

    bonus = 0
    if is_correct:
        bonus = int(delta * STREAK_BONUS_RATE * streak_tiers(current_streak))
        delta += bonus

    return WagerBreakdown(
        is_correct=is_correct,
        base_points=base,
        after_zodiac=after_zodiac,
        ai_bonus_applied=ai_bonus,
        daily_bonus_applied=daily_bonus,
        streak_bonus=bonus,
        points_won=delta,
    )
