"""Tests for spot sweeps and bump-and-reprice Greeks."""

import numpy as np
import pytest
from optlab.core import OptionParameters, PositionPayoff, InvalidInputError, CALL, PUT, LONG, SHORT
from optlab.black_scholes import price, greeks
from optlab.pnl import butterfly, straddle
from optlab.risk import (
    spot_grid, price_curve, delta_curve, pnl_curve, strategy_curve, numerical_greeks,
)

OPT = OptionParameters(100, 100, 0.05, 0.2, 1.0, CALL)


class TestSpotGrid:
    def test_default_range(self):
        grid = spot_grid(100)
        assert grid[0] == 50.0
        assert grid[-1] == 150.0
        assert len(grid) == 101

    def test_floor_at_one(self):
        grid = spot_grid(1.2)
        assert grid[0] == 1.0

    def test_custom_step(self):
        grid = spot_grid(100, 0.6, 1.4, step=5.0)
        np.testing.assert_allclose(grid, np.arange(60.0, 141.0, 5.0))

    @pytest.mark.parametrize("args", [(0,), (100, 0.5, 1.5, 0.0), (100, 1.5, 0.5)])
    def test_rejects_bad_inputs(self, args):
        with pytest.raises(InvalidInputError):
            spot_grid(*args)

    def test_rejects_window_below_floor(self):
        with pytest.raises(InvalidInputError) as exc:
            spot_grid(0.4)
        assert exc.value.field == "center"


class TestCurves:
    def test_call_price_non_decreasing(self):
        curve = price_curve(OPT, spot_grid(100))
        assert np.all(np.diff(curve["values"]) >= 0)

    def test_put_price_non_increasing(self):
        put = OptionParameters(100, 100, 0.05, 0.2, 1.0, PUT)
        curve = price_curve(put, spot_grid(100))
        assert np.all(np.diff(curve["values"]) <= 0)

    def test_price_curve_matches_scalar(self):
        spots = np.array([80.0, 100.0, 125.0])
        curve = price_curve(OPT, spots)
        for s, v in zip(spots, curve["values"]):
            assert v == pytest.approx(price(OptionParameters(s, 100, 0.05, 0.2, 1.0)), abs=1e-10)

    def test_delta_curve_bounds(self):
        curve = delta_curve(OPT, spot_grid(100))
        assert np.all((curve["values"] > 0) & (curve["values"] < 1))
        assert np.all(np.diff(curve["values"]) > 0)

    def test_pnl_curve(self):
        pos = PositionPayoff(100, 100, 5, CALL, SHORT)
        curve = pnl_curve(pos, [90.0, 100.0, 110.0])
        np.testing.assert_allclose(curve["values"], [5.0, 5.0, -5.0])

    def test_strategy_curve_extremes(self):
        st = butterfly(100, 90, 100, 110)
        curve = strategy_curve(st, spot_grid(100, 0.6, 1.4))
        assert curve["net_cost"] == pytest.approx(st.net_cost)
        assert curve["max_loss"] == pytest.approx(-st.net_cost)
        assert curve["max_profit"] == pytest.approx(10 - st.net_cost)

    def test_strategy_curve_straddle(self):
        st = straddle(100, 100)
        curve = strategy_curve(st, spot_grid(100, 0.6, 1.4))
        assert curve["max_profit"] == pytest.approx(40 - st.net_cost)

    @pytest.mark.parametrize("spots", [[-5.0, 0.0, 50.0], [100.0, np.nan], [np.inf]])
    def test_price_and_delta_reject_bad_spots(self, spots):
        put = OptionParameters(100, 100, 0.05, 0.2, 1.0, PUT)
        for curve in (price_curve, delta_curve):
            with pytest.raises(InvalidInputError) as exc:
                curve(put, spots)
            assert exc.value.field == "spots"

    def test_pnl_curves_reject_non_finite_spots(self):
        with pytest.raises(InvalidInputError) as exc:
            pnl_curve(PositionPayoff(100, 100, 5, CALL, LONG), [90.0, np.nan])
        assert exc.value.field == "spots"
        with pytest.raises(InvalidInputError):
            strategy_curve(straddle(100, 100), [np.nan, 100.0])

    def test_pnl_curve_accepts_zero_settlement(self):
        curve = pnl_curve(PositionPayoff(100, 100, 5, PUT, LONG), [0.0])
        np.testing.assert_allclose(curve["values"], [95.0])


class TestNumericalGreeks:
    @pytest.mark.parametrize("kind", [CALL, PUT])
    def test_vs_analytical_bs(self, kind):
        opt = OptionParameters(100, 100, 0.05, 0.2, 1.0, kind)
        ng, ag = numerical_greeks(opt), greeks(opt)
        assert abs(ng.delta - ag.delta) < 1e-4
        assert abs(ng.gamma - ag.gamma) < 1e-4
        assert abs(ng.vega - ag.vega) < 1e-2
        assert abs(ng.theta - ag.theta) < 0.05
        assert abs(ng.rho - ag.rho) < 0.05

    def test_custom_pricer(self):
        # a linear pricer has delta 1, no gamma
        ng = numerical_greeks(OPT, lambda o: 2.0 + o.spot)
        assert ng.delta == pytest.approx(1.0)
        assert ng.gamma == pytest.approx(0.0, abs=1e-8)
        assert ng.vega == 0.0

    def test_near_expiry_theta_zero(self):
        opt = OptionParameters(100, 100, 0.05, 0.2, 0.001)
        assert numerical_greeks(opt).theta == 0.0
