# black_scholes_vec.py
# Vectorised Black-Scholes pricing and Greeks.
# All public functions accept scalars *or* NumPy arrays and broadcast.
# Zero expiry and zero volatility follow the same closed-form limits as
# the scalar engine in black_scholes.py.

from __future__ import annotations
import numpy as np
from scipy.stats import norm

_N = norm.cdf   # vectorised standard-normal CDF
_n = norm.pdf   # vectorised standard-normal PDF


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------
def _broadcast(S, K, T, r, q, sigma):
    arrays = [np.asarray(x, dtype=float) for x in (S, K, T, r, q, sigma)]
    return np.broadcast_arrays(*arrays)


def _d1_d2(S, K, T, r, q, sigma):
    """Compute d1, d2 arrays on the regular domain (sigma * sqrt(T) > 0).

    Degenerate entries are evaluated with T = sigma = 1 so no warnings are
    raised; callers mask them out.
    """
    regular = (T > 0) & (sigma > 0) & (sigma * np.sqrt(np.maximum(T, 0.0)) > 0)
    T_safe = np.where(regular, T, 1.0)
    sig_safe = np.where(regular, sigma, 1.0)
    sqrt_T = np.sqrt(T_safe)
    sig_sqrt_T = sig_safe * sqrt_T
    d1 = (np.log(S / K) + (r - q + 0.5 * sig_safe * sig_safe) * T_safe) / sig_sqrt_T
    d2 = d1 - sig_sqrt_T
    return d1, d2, regular


def _is_call(kind) -> np.ndarray:
    """Return boolean mask: True where kind == 'call'."""
    kind = np.asarray(kind)
    if kind.ndim == 0:
        return np.bool_(str(kind) == "call")
    return np.array([str(k) == "call" for k in kind.flat], dtype=bool).reshape(kind.shape)


# ---------------------------------------------------------------------------
# Vectorised price
# ---------------------------------------------------------------------------
def bs_price_vec(S, K, T, r, q, sigma, kind) -> np.ndarray:
    """Vectorised Black-Scholes price.

    Parameters accept scalars or arrays; NumPy broadcasting rules apply.

    Returns
    -------
    np.ndarray
        Option prices (same shape as broadcasted inputs).
    """
    S, K, T, r, q, sigma = _broadcast(S, K, T, r, q, sigma)
    d1, d2, regular = _d1_d2(S, K, T, r, q, sigma)
    T_pos = np.maximum(T, 0.0)
    disc_r = np.exp(-r * T_pos)
    disc_q = np.exp(-q * T_pos)
    is_call = _is_call(kind)

    call_px = disc_q * S * _N(d1) - disc_r * K * _N(d2)
    put_px  = disc_r * K * _N(-d2) - disc_q * S * _N(-d1)

    # T <= 0 -> intrinsic; sigma <= 0 -> discounted intrinsic of the forward
    fwd_s = disc_q * S
    fwd_k = disc_r * K
    flat_call = np.maximum(fwd_s - fwd_k, 0.0)
    flat_put  = np.maximum(fwd_k - fwd_s, 0.0)

    px = np.where(is_call,
                  np.where(regular, call_px, flat_call),
                  np.where(regular, put_px, flat_put))
    return px


# ---------------------------------------------------------------------------
# Vectorised Greeks
# ---------------------------------------------------------------------------
def bs_greeks_vec(S, K, T, r, q, sigma, kind) -> dict[str, np.ndarray]:
    """Vectorised Black-Scholes Greeks.

    Returns dict with keys: delta, gamma, vega, theta, rho.
    Vega is dPrice/dSigma (absolute), theta is dPrice/dt (per year).
    """
    S, K, T, r, q, sigma = _broadcast(S, K, T, r, q, sigma)
    d1, d2, regular = _d1_d2(S, K, T, r, q, sigma)
    T_pos = np.maximum(T, 0.0)
    T_safe = np.where(regular, T, 1.0)
    sig_safe = np.where(regular, sigma, 1.0)
    disc_r = np.exp(-r * T_pos)
    disc_q = np.exp(-q * T_pos)
    sqrt_T = np.sqrt(T_safe)
    n_d1 = _n(d1)
    is_call = _is_call(kind)

    # Common
    gamma = disc_q * n_d1 / (S * sig_safe * sqrt_T)
    vega  = S * disc_q * n_d1 * sqrt_T

    # Call-specific
    delta_c = disc_q * _N(d1)
    theta_c = (-S * disc_q * n_d1 * sig_safe / (2 * sqrt_T)
               - r * K * disc_r * _N(d2)
               + q * S * disc_q * _N(d1))
    rho_c   = K * T_pos * disc_r * _N(d2)

    # Put-specific
    delta_p = disc_q * (_N(d1) - 1.0)
    theta_p = (-S * disc_q * n_d1 * sig_safe / (2 * sqrt_T)
               + r * K * disc_r * _N(-d2)
               - q * S * disc_q * _N(-d1))
    rho_p   = -K * T_pos * disc_r * _N(-d2)

    # Degenerate limits (see black_scholes._degenerate_greeks)
    expired = T <= 0
    sign = np.where(is_call, 1.0, -1.0)
    fwd_s = disc_q * S
    fwd_k = disc_r * K
    itm = sign * (fwd_s - fwd_k) > 0
    step_delta = np.where(is_call, (S > K).astype(float), -(S < K).astype(float))
    flat_delta = np.where(expired, step_delta, np.where(itm, sign * disc_q, 0.0))
    flat_theta = np.where(~expired & itm, sign * (q * fwd_s - r * fwd_k), 0.0)
    flat_rho   = np.where(~expired & itm, sign * K * T_pos * disc_r, 0.0)

    delta = np.where(regular, np.where(is_call, delta_c, delta_p), flat_delta)
    theta = np.where(regular, np.where(is_call, theta_c, theta_p), flat_theta)
    rho   = np.where(regular, np.where(is_call, rho_c, rho_p), flat_rho)
    gamma = np.where(regular, gamma, 0.0)
    vega  = np.where(regular, vega, 0.0)

    return {"delta": delta, "gamma": gamma, "vega": vega, "theta": theta, "rho": rho}
