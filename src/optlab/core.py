from __future__ import annotations
import math
from dataclasses import dataclass, asdict
from typing import Mapping

from .config import DAYS_PER_YEAR

CALL = "call"
PUT  = "put"
LONG  = "long"
SHORT = "short"

KINDS = (CALL, PUT)
SIDES = (LONG, SHORT)


class InvalidInputError(ValueError):
    """Raised when option or position inputs fall outside the pricing domain."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


def _finite(field: str, value) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(field, f"not a number: {value!r}") from None
    if not math.isfinite(value):
        raise InvalidInputError(field, f"must be finite, got {value}")
    return value


def _kind(value) -> str:
    kind = str(value).strip().lower()
    if kind in ("c", CALL):
        return CALL
    if kind in ("p", PUT):
        return PUT
    raise InvalidInputError("kind", f"must be 'call' or 'put', got {value!r}")


def _side(value) -> str:
    side = str(value).strip().lower()
    if side not in SIDES:
        raise InvalidInputError("side", f"must be 'long' or 'short', got {value!r}")
    return side


# ---------------------------------------------------------------------------
# Option parameters
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class OptionParameters:
    """Inputs to the Black-Scholes engine for one European option.

    Parameters
    ----------
    spot : float
        Current underlying price, must be positive.
    strike : float
        Strike price, must be positive.
    rate : float
        Continuously-compounded risk-free rate.
    volatility : float
        Annualised volatility.  Zero is allowed and prices the option as a
        deterministic forward claim.
    expiry : float
        Time to expiry in years.  Zero is allowed and prices at intrinsic.
    kind : str
        ``"call"`` or ``"put"``.
    dividend_yield : float
        Continuous dividend yield (default 0).
    """
    spot: float
    strike: float
    rate: float
    volatility: float
    expiry: float
    kind: str = CALL
    dividend_yield: float = 0.0

    def __post_init__(self):
        for name in ("spot", "strike", "rate", "volatility", "expiry", "dividend_yield"):
            object.__setattr__(self, name, _finite(name, getattr(self, name)))
        object.__setattr__(self, "kind", _kind(self.kind))
        if self.spot <= 0:
            raise InvalidInputError("spot", f"must be positive, got {self.spot}")
        if self.strike <= 0:
            raise InvalidInputError("strike", f"must be positive, got {self.strike}")
        if self.volatility < 0:
            raise InvalidInputError("volatility", f"must be non-negative, got {self.volatility}")
        if self.expiry < 0:
            raise InvalidInputError("expiry", f"must be non-negative, got {self.expiry}")

    @property
    def is_call(self) -> bool:
        return self.kind == CALL

    @classmethod
    def from_mapping(cls, values: Mapping[str, object]) -> OptionParameters:
        """Build parameters from untyped form values (e.g. strings).

        Recognised keys are the field names plus the short aliases
        ``S``, ``K``, ``r``, ``sigma``, ``T``, ``type`` and ``q``.
        """
        aliases = {
            "S": "spot", "K": "strike", "r": "rate", "sigma": "volatility",
            "T": "expiry", "type": "kind", "q": "dividend_yield",
        }
        fields = {}
        for key, value in values.items():
            name = aliases.get(key, key)
            if name not in cls.__dataclass_fields__:
                raise InvalidInputError(str(key), "unknown field")
            if isinstance(value, str) and name != "kind":
                value = value.strip()
                if not value:
                    raise InvalidInputError(name, "missing value")
            fields[name] = value
        missing = [n for n in ("spot", "strike", "rate", "volatility", "expiry") if n not in fields]
        if missing:
            raise InvalidInputError(missing[0], "missing value")
        return cls(**fields)


# ---------------------------------------------------------------------------
# Greeks
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class GreeksResult:
    """Sensitivities of the option price.

    Raw units: vega per unit volatility, theta per year (dV/dt, negative
    for decay), rho per unit rate.
    """
    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float

    def as_dict(self) -> dict[str, float]:
        return asdict(self)

    def scaled(self, days_per_year: float = DAYS_PER_YEAR) -> GreeksResult:
        """Display units: vega and rho per 1 percentage point, theta per day."""
        return GreeksResult(
            delta=self.delta,
            gamma=self.gamma,
            vega=self.vega / 100.0,
            theta=self.theta / days_per_year,
            rho=self.rho / 100.0,
        )


# ---------------------------------------------------------------------------
# Position at expiry
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class PositionPayoff:
    """A single option position evaluated at a settlement price."""
    spot_at_expiry: float
    strike: float
    premium: float
    kind: str = CALL
    side: str = LONG
    quantity: float = 1.0

    def __post_init__(self):
        for name in ("spot_at_expiry", "strike", "premium", "quantity"):
            object.__setattr__(self, name, _finite(name, getattr(self, name)))
        object.__setattr__(self, "kind", _kind(self.kind))
        object.__setattr__(self, "side", _side(self.side))
