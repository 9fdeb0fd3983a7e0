"""Spot sweeps and bump-and-reprice Greeks.

Sweeps evaluate the vectorised engine over a grid of spot prices with every
other input held fixed; they are the data behind price / delta / PnL versus
spot charts.  ``numerical_greeks`` reprices with central finite differences
and works with **any** pricer taking ``OptionParameters``, which makes it a
cross-check on the analytic Greeks.
"""

from __future__ import annotations

import numpy as np
from typing import Callable
from dataclasses import replace

from . import config
from .core import OptionParameters, GreeksResult, PositionPayoff, InvalidInputError
from .black_scholes import price as bs_price
from .black_scholes_vec import bs_price_vec, bs_greeks_vec
from .pnl import Strategy, payoff_vec

__all__ = [
    "spot_grid",
    "price_curve",
    "delta_curve",
    "pnl_curve",
    "strategy_curve",
    "numerical_greeks",
]


# ---------------------------------------------------------------------------
# Spot grid
# ---------------------------------------------------------------------------

def spot_grid(
    center: float,
    lower: float = config.SWEEP_LOWER,
    upper: float = config.SWEEP_UPPER,
    step: float = config.SWEEP_STEP,
) -> np.ndarray:
    """Evenly stepped spots from ``round(center*lower)`` to ``round(center*upper)``.

    The low end never drops below ``config.MIN_SWEEP_SPOT``.
    """
    if center <= 0:
        raise InvalidInputError("center", f"must be positive, got {center}")
    if step <= 0:
        raise InvalidInputError("step", f"must be positive, got {step}")
    if not 0 <= lower < upper:
        raise InvalidInputError("lower", f"need 0 <= lower < upper, got {lower}, {upper}")
    lo = max(config.MIN_SWEEP_SPOT, float(round(center * lower)))
    hi = float(round(center * upper))
    if hi < lo:
        raise InvalidInputError(
            "center", f"window {center * lower:g}..{center * upper:g} lies below {lo:g}"
        )
    n = int(np.floor((hi - lo) / step + 1e-9)) + 1
    return lo + step * np.arange(n)


def _checked_spots(spots, *, positive: bool) -> np.ndarray:
    spots = np.asarray(spots, dtype=float)
    if not np.all(np.isfinite(spots)):
        raise InvalidInputError("spots", "must be finite")
    if positive and np.any(spots <= 0):
        raise InvalidInputError("spots", f"must be positive, got min {spots.min():g}")
    return spots


# ---------------------------------------------------------------------------
# Curves
# ---------------------------------------------------------------------------

def price_curve(opt: OptionParameters, spots) -> dict:
    """Option price across ``spots``.

    Returns
    -------
    dict
        ``"spot_values"``, ``"values"``.
    """
    spots = _checked_spots(spots, positive=True)
    values = bs_price_vec(spots, opt.strike, opt.expiry, opt.rate,
                          opt.dividend_yield, opt.volatility, opt.kind)
    return {"spot_values": spots.copy(), "values": values}


def delta_curve(opt: OptionParameters, spots) -> dict:
    spots = _checked_spots(spots, positive=True)
    g = bs_greeks_vec(spots, opt.strike, opt.expiry, opt.rate,
                      opt.dividend_yield, opt.volatility, opt.kind)
    return {"spot_values": spots.copy(), "values": g["delta"]}


def pnl_curve(position: PositionPayoff, spots) -> dict:
    """Expiry PnL of ``position`` across settlement prices ``spots``.

    ``position.spot_at_expiry`` is ignored; the grid replaces it.
    """
    spots = _checked_spots(spots, positive=False)
    values = payoff_vec(spots, position.strike, position.premium,
                        position.kind, position.side, position.quantity)
    return {"spot_values": spots.copy(), "values": values}


def strategy_curve(strategy: Strategy, spots) -> dict:
    """Combined expiry PnL of a strategy plus its extremes over the grid.

    Returns
    -------
    dict
        ``"spot_values"``, ``"values"``, ``"net_cost"``, ``"max_profit"``,
        ``"max_loss"`` (the most negative PnL, reported as a signed number).
    """
    spots = _checked_spots(spots, positive=False)
    values = strategy.pnl_vec(spots)
    return {
        "spot_values": spots.copy(),
        "values": values,
        "net_cost": float(strategy.net_cost),
        "max_profit": float(values.max()),
        "max_loss": float(values.min()),
    }


# ---------------------------------------------------------------------------
# Numerical Greeks
# ---------------------------------------------------------------------------

def numerical_greeks(
    opt: OptionParameters,
    pricer: Callable[[OptionParameters], float] = bs_price,
    *,
    bump_pct: float = config.BUMP_PCT,
    days_per_year: float = config.DAYS_PER_YEAR,
) -> GreeksResult:
    """Compute Greeks via central finite differences on an arbitrary pricer.

    Parameters
    ----------
    opt : OptionParameters
        Base point.
    pricer : callable
        ``pricer(opt) -> float`` (default: Black-Scholes).
    bump_pct : float
        Relative bump size for spot and vol; absolute for rate (default 0.01).

    Returns
    -------
    GreeksResult
        Same units as the analytic Greeks (theta per year).
    """
    P0 = pricer(opt)

    # --- Delta & Gamma (spot bump) ---
    eps_S = bump_pct * opt.spot
    P_up = pricer(replace(opt, spot=opt.spot + eps_S))
    P_dn = pricer(replace(opt, spot=opt.spot - eps_S))
    delta = (P_up - P_dn) / (2.0 * eps_S)
    gamma = (P_up - 2.0 * P0 + P_dn) / (eps_S ** 2)

    # --- Vega (vol bump) ---
    eps_v = max(bump_pct * opt.volatility, 1e-4)
    sig_dn = max(opt.volatility - eps_v, 0.0)
    P_vup = pricer(replace(opt, volatility=opt.volatility + eps_v))
    P_vdn = pricer(replace(opt, volatility=sig_dn))
    vega = (P_vup - P_vdn) / (opt.volatility + eps_v - sig_dn)

    # --- Theta (time decay, 1-day bump) ---
    dt = 1.0 / days_per_year
    if opt.expiry > dt:
        P_t = pricer(replace(opt, expiry=opt.expiry - dt))
        theta = (P_t - P0) / dt
    else:
        theta = 0.0

    # --- Rho (rate bump) ---
    eps_r = bump_pct
    P_rup = pricer(replace(opt, rate=opt.rate + eps_r))
    P_rdn = pricer(replace(opt, rate=opt.rate - eps_r))
    rho = (P_rup - P_rdn) / (2.0 * eps_r)

    return GreeksResult(
        delta=float(delta),
        gamma=float(gamma),
        vega=float(vega),
        theta=float(theta),
        rho=float(rho),
    )
