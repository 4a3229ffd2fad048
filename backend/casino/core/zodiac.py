"""Zodiac signs and the per-sign luck multiplier applied to wager payouts."""

from enum import Enum


class ZodiacSign(str, Enum):
    ARIES = "Aries"
    TAURUS = "Taurus"
    GEMINI = "Gemini"
    CANCER = "Cancer"
    LEO = "Leo"
    VIRGO = "Virgo"
    LIBRA = "Libra"
    SCORPIO = "Scorpio"
    SAGITTARIUS = "Sagittarius"
    CAPRICORN = "Capricorn"
    AQUARIUS = "Aquarius"
    PISCES = "Pisces"


ZODIAC_LUCK = {
    ZodiacSign.LEO: 1.3,
    ZodiacSign.SAGITTARIUS: 1.25,
    ZodiacSign.ARIES: 1.2,
    ZodiacSign.GEMINI: 1.15,
    ZodiacSign.LIBRA: 1.1,
    ZodiacSign.AQUARIUS: 1.1,
    ZodiacSign.SCORPIO: 1.05,
    ZodiacSign.PISCES: 1.05,
    ZodiacSign.CANCER: 1.05,
    ZodiacSign.TAURUS: 1.02,
    ZodiacSign.CAPRICORN: 1.02,
    ZodiacSign.VIRGO: 1.0,
}
DEFAULT_LUCK = 1.05


def luck_multiplier(sign: ZodiacSign | str | None) -> float:
    """Luck multiplier for a sign; unknown or missing signs get the default."""
    try:
        return ZODIAC_LUCK[ZodiacSign(sign)]
    except (KeyError, ValueError):
        return DEFAULT_LUCK
