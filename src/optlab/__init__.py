# optlab — Black-Scholes pricing, Greeks and expiry PnL
# Public API

# Data model
from .core import (
    OptionParameters, GreeksResult, PositionPayoff, InvalidInputError,
    CALL, PUT, LONG, SHORT,
)

# Scalar engine
from .black_scholes import price, greeks, d1_d2, intrinsic_value, norm_cdf, norm_pdf

# Vectorised engine
from .black_scholes_vec import bs_price_vec, bs_greeks_vec

# Payoff & strategies
from .pnl import (
    payoff, payoff_vec, Leg, Strategy,
    bull_call_spread, bear_put_spread, straddle, butterfly, iron_condor,
    build_strategy,
)

# Sweeps & numerical Greeks
from .risk import (
    spot_grid, price_curve, delta_curve, pnl_curve, strategy_curve,
    numerical_greeks,
)

__all__ = [
    # Data model
    "OptionParameters", "GreeksResult", "PositionPayoff", "InvalidInputError",
    "CALL", "PUT", "LONG", "SHORT",
    # Scalar
    "price", "greeks", "d1_d2", "intrinsic_value", "norm_cdf", "norm_pdf",
    # Vectorised
    "bs_price_vec", "bs_greeks_vec",
    # Payoff & strategies
    "payoff", "payoff_vec", "Leg", "Strategy",
    "bull_call_spread", "bear_put_spread", "straddle", "butterfly",
    "iron_condor", "build_strategy",
    # Sweeps
    "spot_grid", "price_curve", "delta_curve", "pnl_curve", "strategy_curve",
    "numerical_greeks",
]

__version__ = "0.1.0"
