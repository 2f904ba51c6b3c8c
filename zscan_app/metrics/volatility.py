"""Volatility regime classification from the one-bar ATR proxy"""

import math
from enum import Enum

from ..config.defaults import ClassifierParams
from ..errors import UndefinedStatisticError


class Category(Enum):
    """Volatility regime, ordered from calmest to noisiest"""
    MAINSTREAM = "mainstream"
    ALTCOIN = "altcoin"
    WILDCARD = "wildcard"


def calculate_atr_proxy(latest_return: float) -> float:
    """
    One-bar volatility proxy

    ATR (here) = abs(latest fractional return). This is not the classic
    multi-bar average true range.
    """
    if not math.isfinite(latest_return):
        raise UndefinedStatisticError("Latest return is not finite", statistic="atr", value=latest_return)
    return abs(latest_return)


class VolatilityClassifier:
    """Buckets an ATR proxy into a Category by descending threshold"""

    def __init__(self, wildcard_threshold: float = 0.05, altcoin_threshold: float = 0.02):
        self.wildcard_threshold = wildcard_threshold
        self.altcoin_threshold = altcoin_threshold

    @classmethod
    def from_config(cls, params: ClassifierParams) -> "VolatilityClassifier":
        return cls(
            wildcard_threshold=params.wildcard_threshold,
            altcoin_threshold=params.altcoin_threshold,
        )

    def classify(self, atr: float) -> Category:
        """
        Classify an ATR proxy

        atr > wildcard_threshold        -> WILDCARD
        atr > altcoin_threshold         -> ALTCOIN
        otherwise                       -> MAINSTREAM

        Thresholds are exclusive, so atr == 0.05 is ALTCOIN.
        """
        if not math.isfinite(atr):
            raise UndefinedStatisticError("ATR is not finite", statistic="atr", value=atr)

        if atr > self.wildcard_threshold:
            return Category.WILDCARD
        if atr > self.altcoin_threshold:
            return Category.ALTCOIN
        return Category.MAINSTREAM
