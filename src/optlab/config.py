"""
Default settings for optlab.

Single source of truth for market defaults, sweep ranges and output
formatting.  Library functions take these as keyword defaults; the CLI
exposes the ones a user is likely to override as flags.
"""

# ---------------------------------------------------------------------------
# Market defaults
# ---------------------------------------------------------------------------
RISK_FREE_RATE = 0.03   # annualised, continuous
VOLATILITY = 0.20
EXPIRY = 0.25           # years
DAYS_PER_YEAR = 365     # calendar-day theta

# ---------------------------------------------------------------------------
# Spot sweeps (fractions of the centre price)
# ---------------------------------------------------------------------------
SWEEP_LOWER = 0.5
SWEEP_UPPER = 1.5
SWEEP_STEP = 1.0
MIN_SWEEP_SPOT = 1.0

STRATEGY_SWEEP_LOWER = 0.6
STRATEGY_SWEEP_UPPER = 1.4

# ---------------------------------------------------------------------------
# Finite-difference bumps
# ---------------------------------------------------------------------------
BUMP_PCT = 0.01

# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------
PRICE_DECIMALS = 4
PNL_DECIMALS = 2
CHART_DPI = 150
