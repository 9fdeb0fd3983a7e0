import math
from math import log, sqrt, exp
from statistics import NormalDist

from .core import OptionParameters, GreeksResult, CALL

_nd = NormalDist()


def norm_cdf(x: float) -> float:
    """Standard normal CDF (erf-based, exact to double precision)."""
    return _nd.cdf(x)


def norm_pdf(x: float) -> float:
    return math.exp(-0.5 * x * x) / math.sqrt(2 * math.pi)


def _degenerate(opt: OptionParameters) -> bool:
    # sigma * sqrt(T) can underflow to zero for tiny positive inputs
    return opt.expiry <= 0 or opt.volatility * sqrt(opt.expiry) <= 0


def d1_d2(opt: OptionParameters) -> tuple[float, float]:
    """Return (d1, d2).  Undefined when sigma * sqrt(T) is zero."""
    if _degenerate(opt):
        raise ValueError("d1/d2 require positive volatility and expiry.")
    rt = opt.volatility * sqrt(opt.expiry)
    d1 = (log(opt.spot / opt.strike)
          + (opt.rate - opt.dividend_yield + 0.5 * opt.volatility * opt.volatility) * opt.expiry) / rt
    return d1, d1 - rt


def intrinsic_value(spot: float, strike: float, kind: str = CALL) -> float:
    if kind == CALL:
        return max(spot - strike, 0.0)
    return max(strike - spot, 0.0)


def price(opt: OptionParameters) -> float:
    """Black-Scholes price of a European option.

    At expiry (T = 0) the option is worth its intrinsic value.  With zero
    volatility it is worth the discounted intrinsic value of the forward.
    """
    if opt.expiry <= 0:
        return intrinsic_value(opt.spot, opt.strike, opt.kind)
    disc_r = exp(-opt.rate * opt.expiry)
    disc_q = exp(-opt.dividend_yield * opt.expiry)
    if _degenerate(opt):
        return intrinsic_value(disc_q * opt.spot, disc_r * opt.strike, opt.kind)

    d1, d2 = d1_d2(opt)
    if opt.kind == CALL:
        return disc_q * opt.spot * _nd.cdf(d1) - disc_r * opt.strike * _nd.cdf(d2)
    return disc_r * opt.strike * _nd.cdf(-d2) - disc_q * opt.spot * _nd.cdf(-d1)


def _degenerate_greeks(opt: OptionParameters) -> GreeksResult:
    # T = 0: only delta survives, as a step at the strike.
    if opt.expiry <= 0:
        if opt.kind == CALL:
            delta = 1.0 if opt.spot > opt.strike else 0.0
        else:
            delta = -1.0 if opt.spot < opt.strike else 0.0
        return GreeksResult(delta=delta, gamma=0.0, vega=0.0, theta=0.0, rho=0.0)

    # sigma = 0: price is max(+/-(S e^-qT - K e^-rT), 0), differentiate that.
    disc_r = exp(-opt.rate * opt.expiry)
    disc_q = exp(-opt.dividend_yield * opt.expiry)
    fwd_s = disc_q * opt.spot
    fwd_k = disc_r * opt.strike
    sign = 1.0 if opt.kind == CALL else -1.0
    if sign * (fwd_s - fwd_k) <= 0:
        return GreeksResult(delta=0.0, gamma=0.0, vega=0.0, theta=0.0, rho=0.0)
    return GreeksResult(
        delta=sign * disc_q,
        gamma=0.0,
        vega=0.0,
        theta=sign * (opt.dividend_yield * fwd_s - opt.rate * fwd_k),
        rho=sign * opt.strike * opt.expiry * disc_r,
    )


def greeks(opt: OptionParameters) -> GreeksResult:
    """Returns greeks with sigma in absolute units (vega is dPrice/dSigma, not per 1%).

    Theta is dPrice/dt per year; use ``GreeksResult.scaled()`` for per-day.
    """
    if _degenerate(opt):
        return _degenerate_greeks(opt)

    S, K, T, r, q, sigma = (opt.spot, opt.strike, opt.expiry, opt.rate,
                            opt.dividend_yield, opt.volatility)
    d1, d2 = d1_d2(opt)
    n_d1   = norm_pdf(d1)
    N_d1   = _nd.cdf(d1)
    N_d2   = _nd.cdf(d2)
    disc_r = exp(-r * T)
    disc_q = exp(-q * T)
    srt    = sigma * sqrt(T)

    # Common
    gamma = disc_q * n_d1 / (S * srt)
    vega  = S * disc_q * n_d1 * sqrt(T)

    if opt.kind == CALL:
        delta = disc_q * N_d1
        theta = (-S * disc_q * n_d1 * sigma / (2 * sqrt(T))
                 - r * K * disc_r * N_d2
                 + q * S * disc_q * N_d1)
        rho   = K * T * disc_r * N_d2
    else:
        delta = disc_q * (N_d1 - 1.0)
        theta = (-S * disc_q * n_d1 * sigma / (2 * sqrt(T))
                 + r * K * disc_r * _nd.cdf(-d2)
                 - q * S * disc_q * _nd.cdf(-d1))
        rho   = -K * T * disc_r * _nd.cdf(-d2)

    return GreeksResult(delta=delta, gamma=gamma, vega=vega, theta=theta, rho=rho)
