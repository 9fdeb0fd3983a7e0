# pnl.py
# Expiry payoff / PnL of single positions and multi-leg strategies.
#
# Strategies are combinations of European options on one underlying with a
# common expiry; every leg's premium is its Black-Scholes price at entry.

from __future__ import annotations
import logging
from dataclasses import dataclass, field

import numpy as np

from .core import (
    PositionPayoff, OptionParameters, InvalidInputError,
    CALL, PUT, LONG, SHORT, _finite, _kind, _side,
)
from .black_scholes import price as bs_price
from . import config

logger = logging.getLogger(__name__)

__all__ = [
    "payoff", "payoff_vec",
    "Leg", "Strategy",
    "bull_call_spread", "bear_put_spread", "straddle", "butterfly",
    "iron_condor", "build_strategy", "STRATEGIES",
]


# ---------------------------------------------------------------------------
# Single position
# ---------------------------------------------------------------------------
def payoff(position: PositionPayoff) -> float:
    """PnL at expiry: long = intrinsic - premium, short = premium - intrinsic."""
    if position.kind == CALL:
        intrinsic = max(position.spot_at_expiry - position.strike, 0.0)
    else:
        intrinsic = max(position.strike - position.spot_at_expiry, 0.0)
    if position.side == LONG:
        return (intrinsic - position.premium) * position.quantity
    return (position.premium - intrinsic) * position.quantity


def payoff_vec(spots, strike, premium, kind=CALL, side=LONG, quantity=1.0) -> np.ndarray:
    """Vectorised :func:`payoff` over an array of settlement prices."""
    spots = np.asarray(spots, dtype=float)
    if _kind(kind) == CALL:
        intrinsic = np.maximum(spots - strike, 0.0)
    else:
        intrinsic = np.maximum(strike - spots, 0.0)
    sign = 1.0 if _side(side) == LONG else -1.0
    return sign * (intrinsic - premium) * quantity


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Leg:
    kind: str
    strike: float
    side: str
    premium: float
    quantity: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "kind", _kind(self.kind))
        object.__setattr__(self, "side", _side(self.side))
        for name in ("strike", "premium", "quantity"):
            object.__setattr__(self, name, _finite(name, getattr(self, name)))
        if self.strike <= 0:
            raise InvalidInputError("strike", f"must be positive, got {self.strike}")

    def pnl(self, spot_at_expiry: float) -> float:
        return payoff(PositionPayoff(spot_at_expiry, self.strike, self.premium,
                                     self.kind, self.side, self.quantity))

    def pnl_vec(self, spots) -> np.ndarray:
        return payoff_vec(spots, self.strike, self.premium,
                          self.kind, self.side, self.quantity)


@dataclass(frozen=True)
class Strategy:
    """A named set of legs sharing one underlying and expiry."""
    name: str
    legs: tuple[Leg, ...] = field(default_factory=tuple)

    @property
    def net_cost(self) -> float:
        """Premium paid on long legs minus premium received on short legs."""
        return sum(
            (leg.premium if leg.side == LONG else -leg.premium) * leg.quantity
            for leg in self.legs
        )

    def pnl(self, spot_at_expiry: float) -> float:
        return sum(leg.pnl(spot_at_expiry) for leg in self.legs)

    def pnl_vec(self, spots) -> np.ndarray:
        spots = np.asarray(spots, dtype=float)
        total = np.zeros_like(spots)
        for leg in self.legs:
            total = total + leg.pnl_vec(spots)
        return total


def _leg(kind, strike, side, spot, rate, volatility, expiry, quantity=1.0) -> Leg:
    premium = bs_price(OptionParameters(spot, strike, rate, volatility, expiry, kind))
    return Leg(kind, strike, side, premium, quantity)


def _ordered(name: str, *strikes: float) -> None:
    if any(a >= b for a, b in zip(strikes, strikes[1:])):
        raise InvalidInputError("strikes", f"{name} needs strictly increasing strikes, got {strikes}")


def bull_call_spread(spot, k_low, k_high, *, rate=config.RISK_FREE_RATE,
                     volatility=config.VOLATILITY, expiry=config.EXPIRY) -> Strategy:
    """Long call at ``k_low``, short call at ``k_high``."""
    _ordered("bull_call", k_low, k_high)
    return Strategy("bull_call", (
        _leg(CALL, k_low, LONG, spot, rate, volatility, expiry),
        _leg(CALL, k_high, SHORT, spot, rate, volatility, expiry),
    ))


def bear_put_spread(spot, k_low, k_high, *, rate=config.RISK_FREE_RATE,
                    volatility=config.VOLATILITY, expiry=config.EXPIRY) -> Strategy:
    """Long put at ``k_high``, short put at ``k_low``."""
    _ordered("bear_put", k_low, k_high)
    return Strategy("bear_put", (
        _leg(PUT, k_high, LONG, spot, rate, volatility, expiry),
        _leg(PUT, k_low, SHORT, spot, rate, volatility, expiry),
    ))


def straddle(spot, strike, *, rate=config.RISK_FREE_RATE,
             volatility=config.VOLATILITY, expiry=config.EXPIRY) -> Strategy:
    return Strategy("straddle", (
        _leg(CALL, strike, LONG, spot, rate, volatility, expiry),
        _leg(PUT, strike, LONG, spot, rate, volatility, expiry),
    ))


def butterfly(spot, k_low, k_mid, k_high, *, rate=config.RISK_FREE_RATE,
              volatility=config.VOLATILITY, expiry=config.EXPIRY) -> Strategy:
    """Long 1 call ``k_low``, short 2 calls ``k_mid``, long 1 call ``k_high``."""
    _ordered("butterfly", k_low, k_mid, k_high)
    return Strategy("butterfly", (
        _leg(CALL, k_low, LONG, spot, rate, volatility, expiry),
        _leg(CALL, k_mid, SHORT, spot, rate, volatility, expiry, quantity=2.0),
        _leg(CALL, k_high, LONG, spot, rate, volatility, expiry),
    ))


def iron_condor(spot, k1, k2, k3, k4, *, rate=config.RISK_FREE_RATE,
                volatility=config.VOLATILITY, expiry=config.EXPIRY) -> Strategy:
    """Credit condor: long put ``k1``, short put ``k2``, short call ``k3``, long call ``k4``."""
    _ordered("iron_condor", k1, k2, k3, k4)
    return Strategy("iron_condor", (
        _leg(PUT, k1, LONG, spot, rate, volatility, expiry),
        _leg(PUT, k2, SHORT, spot, rate, volatility, expiry),
        _leg(CALL, k3, SHORT, spot, rate, volatility, expiry),
        _leg(CALL, k4, LONG, spot, rate, volatility, expiry),
    ))


STRATEGIES = {
    "bull_call": (bull_call_spread, 2),
    "bear_put": (bear_put_spread, 2),
    "straddle": (straddle, 1),
    "butterfly": (butterfly, 3),
    "iron_condor": (iron_condor, 4),
}


def build_strategy(name: str, spot: float, strikes, **market) -> Strategy:
    """Build a strategy by name with the given strikes (ascending)."""
    try:
        builder, n_strikes = STRATEGIES[name]
    except KeyError:
        raise InvalidInputError(
            "strategy", f"unknown strategy {name!r}, expected one of {sorted(STRATEGIES)}"
        ) from None
    strikes = tuple(strikes)
    if len(strikes) != n_strikes:
        raise InvalidInputError("strikes", f"{name} takes {n_strikes} strike(s), got {len(strikes)}")
    strat = builder(spot, *strikes, **market)
    logger.debug("built %s with %d legs, net cost %.4f", name, len(strat.legs), strat.net_cost)
    return strat
