import argparse
import csv
import json
import logging
import sys
from pathlib import Path

from . import config
from .core import OptionParameters, PositionPayoff, InvalidInputError, CALL, PUT, LONG, SHORT
from .black_scholes import price as bs_price, greeks as bs_greeks
from .pnl import payoff, build_strategy, STRATEGIES
from .risk import spot_grid, price_curve, delta_curve, pnl_curve, strategy_curve

logger = logging.getLogger(__name__)


def _kind(s: str):
    s = s.lower()
    if s in {"call", "c"}:
        return CALL
    if s in {"put", "p"}:
        return PUT
    raise argparse.ArgumentTypeError("kind must be 'call' or 'put'")


def _side(s: str):
    s = s.lower()
    if s in {LONG, SHORT}:
        return s
    raise argparse.ArgumentTypeError("side must be 'long' or 'short'")


def add_market(parser: argparse.ArgumentParser):
    parser.add_argument("--S", type=float, required=True, help="spot")
    parser.add_argument("--K", type=float, required=True, help="strike")
    parser.add_argument("--T", type=float, default=config.EXPIRY, help="years")
    parser.add_argument("--r", type=float, default=config.RISK_FREE_RATE, help="cont. risk-free")
    parser.add_argument("--sigma", type=float, default=config.VOLATILITY)
    parser.add_argument("--q", type=float, default=0.0, help="cont. dividend yield")
    parser.add_argument("--kind", type=_kind, default=CALL, help="call|put")


def add_position(parser: argparse.ArgumentParser):
    parser.add_argument("--K", type=float, required=True, help="strike")
    parser.add_argument("--premium", type=float, required=True)
    parser.add_argument("--kind", type=_kind, default=CALL, help="call|put")
    parser.add_argument("--side", type=_side, default=LONG, help="long|short")
    parser.add_argument("--qty", type=float, default=1.0)


def _params(args) -> OptionParameters:
    return OptionParameters(spot=args.S, strike=args.K, rate=args.r,
                            volatility=args.sigma, expiry=args.T,
                            kind=args.kind, dividend_yield=args.q)


def cmd_price(args):
    print(f"{bs_price(_params(args)):.{config.PRICE_DECIMALS}f}")


def cmd_greeks(args):
    g = bs_greeks(_params(args))
    if args.per_day:
        g = g.scaled()
    for name, value in g.as_dict().items():
        print(f"{name:<6} {value:.{config.PRICE_DECIMALS}f}")


def cmd_payoff(args):
    pos = PositionPayoff(args.S_T, args.K, args.premium, args.kind, args.side, args.qty)
    print(f"{payoff(pos):.{config.PNL_DECIMALS}f}")


def cmd_strategy(args):
    strat = build_strategy(args.name, args.S, args.strikes,
                           rate=args.r, volatility=args.sigma, expiry=args.T)
    spots = spot_grid(args.S, config.STRATEGY_SWEEP_LOWER, config.STRATEGY_SWEEP_UPPER)
    curve = strategy_curve(strat, spots)
    dp = config.PNL_DECIMALS
    for leg in strat.legs:
        print(f"{leg.side:<5} {leg.quantity:g} x {leg.kind:<4} K={leg.strike:g}  premium {leg.premium:.{dp}f}")
    print(f"net cost   {curve['net_cost']:.{dp}f}")
    print(f"max profit {curve['max_profit']:.{dp}f}")
    print(f"max loss   {curve['max_loss']:.{dp}f}")
    _emit(args, curve, f"{args.name} PnL", "PnL")


def cmd_sweep(args):
    if args.what == "pnl":
        premium = args.premium
        if premium is None:
            premium = bs_price(_params(args))
            logger.info("no premium given, using Black-Scholes price %.4f", premium)
        pos = PositionPayoff(args.S, args.K, premium, args.kind, args.side, args.qty)
        curve = pnl_curve(pos, spot_grid(args.S, args.lower, args.upper, args.step))
        ylabel = "PnL"
    else:
        opt = _params(args)
        # price and delta are swept around the strike, pnl around the spot
        spots = spot_grid(opt.strike, args.lower, args.upper, args.step)
        if args.what == "price":
            curve, ylabel = price_curve(opt, spots), "Price"
        else:
            curve, ylabel = delta_curve(opt, spots), "Delta"
    if args.output is None:
        for s, v in zip(curve["spot_values"], curve["values"]):
            print(f"{s:g},{v:.{config.PRICE_DECIMALS}f}")
    _emit(args, curve, f"{ylabel} vs spot", ylabel)


def _emit(args, curve: dict, title: str, ylabel: str):
    """Write the curve to --output and render it to --plot when requested."""
    if getattr(args, "output", None):
        path = Path(args.output)
        rows = [{"spot": float(s), "value": float(v)}
                for s, v in zip(curve["spot_values"], curve["values"])]
        if path.suffix == ".json":
            with open(path, "w") as f:
                json.dump(rows, f, indent=2)
        else:
            with open(path, "w", newline="") as f:
                writer = csv.DictWriter(f, fieldnames=["spot", "value"])
                writer.writeheader()
                writer.writerows(rows)
        logger.info("wrote %d points to %s", len(rows), path)
    if getattr(args, "plot", None):
        from .chart import CurveChart
        with CurveChart(title=title, ylabel=ylabel) as chart:
            chart.update(curve["spot_values"], {ylabel: curve["values"]})
            chart.save(args.plot)


def _add_outputs(parser: argparse.ArgumentParser):
    parser.add_argument("--output", default=None, help="write curve to .csv or .json")
    parser.add_argument("--plot", default=None, help="save chart image (needs matplotlib)")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="optlab", description="Black-Scholes pricing CLI")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Price
    p_px = sub.add_parser("price", help="Black-Scholes price")
    add_market(p_px)
    p_px.set_defaults(func=cmd_price)

    # Greeks
    p_g = sub.add_parser("greeks", help="Black-Scholes Greeks")
    add_market(p_g)
    p_g.add_argument("--per-day", dest="per_day", action="store_true",
                     help="theta per day, vega and rho per 1%%")
    p_g.set_defaults(func=cmd_greeks)

    # Payoff at expiry
    p_pay = sub.add_parser("payoff", help="PnL of one position at expiry")
    p_pay.add_argument("--S-T", dest="S_T", type=float, required=True, help="spot at expiry")
    add_position(p_pay)
    p_pay.set_defaults(func=cmd_payoff)

    # Strategy
    p_st = sub.add_parser("strategy", help="multi-leg strategy PnL")
    p_st.add_argument("name", choices=sorted(STRATEGIES))
    p_st.add_argument("--S", type=float, required=True, help="spot at entry")
    p_st.add_argument("--strikes", type=float, nargs="+", required=True)
    p_st.add_argument("--T", type=float, default=config.EXPIRY, help="years")
    p_st.add_argument("--r", type=float, default=config.RISK_FREE_RATE)
    p_st.add_argument("--sigma", type=float, default=config.VOLATILITY)
    _add_outputs(p_st)
    p_st.set_defaults(func=cmd_strategy)

    # Sweep
    p_sw = sub.add_parser("sweep", help="price, delta or PnL across spot")
    p_sw.add_argument("what", choices=["price", "delta", "pnl"])
    add_market(p_sw)
    p_sw.add_argument("--premium", type=float, default=None, help="pnl sweep only (default: Black-Scholes price)")
    p_sw.add_argument("--side", type=_side, default=LONG, help="long|short")
    p_sw.add_argument("--qty", type=float, default=1.0)
    p_sw.add_argument("--lower", type=float, default=config.SWEEP_LOWER)
    p_sw.add_argument("--upper", type=float, default=config.SWEEP_UPPER)
    p_sw.add_argument("--step", type=float, default=config.SWEEP_STEP)
    _add_outputs(p_sw)
    p_sw.set_defaults(func=cmd_sweep)

    return p


def main(argv=None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        args.func(args)
    except InvalidInputError as e:
        logger.debug("rejected arguments", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        logger.debug("output failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
