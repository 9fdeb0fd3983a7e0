"""Tests for the vectorised Black-Scholes engine."""

import numpy as np
import pytest
from optlab.core import OptionParameters, CALL, PUT
from optlab.black_scholes import price as bs_scalar, greeks as greeks_scalar
from optlab.black_scholes_vec import bs_price_vec, bs_greeks_vec


# ---------------------------------------------------------------------------
# bs_price_vec matches scalar price
# ---------------------------------------------------------------------------
class TestBSPriceVec:
    def test_single_call_matches_scalar(self):
        expected = bs_scalar(OptionParameters(100, 100, 0.05, 0.2, 1.0, CALL))
        got = bs_price_vec(100, 100, 1.0, 0.05, 0.0, 0.2, "call")
        assert abs(float(got) - expected) < 1e-10

    def test_single_put_matches_scalar(self):
        expected = bs_scalar(OptionParameters(100, 100, 0.05, 0.2, 1.0, PUT))
        got = bs_price_vec(100, 100, 1.0, 0.05, 0.0, 0.2, "put")
        assert abs(float(got) - expected) < 1e-10

    def test_array_of_spots(self):
        spots = np.array([90.0, 100.0, 110.0])
        prices = bs_price_vec(spots, 100, 1.0, 0.05, 0.0, 0.2, "call")
        assert prices.shape == (3,)
        for i, S in enumerate(spots):
            assert abs(prices[i] - bs_scalar(OptionParameters(S, 100, 0.05, 0.2, 1.0))) < 1e-10

    def test_array_of_strikes(self):
        strikes = np.linspace(80, 120, 50)
        prices = bs_price_vec(100, strikes, 1.0, 0.05, 0.0, 0.2, "call")
        assert prices.shape == (50,)
        # Prices should be monotonically decreasing for calls
        assert np.all(np.diff(prices) < 0)

    def test_with_dividend(self):
        expected = bs_scalar(OptionParameters(100, 110, 0.03, 0.25, 0.5, CALL, dividend_yield=0.02))
        got = bs_price_vec(100, 110, 0.5, 0.03, 0.02, 0.25, "call")
        assert abs(float(got) - expected) < 1e-10

    def test_mixed_kinds(self):
        got = bs_price_vec(100, 100, 1.0, 0.05, 0.0, 0.2, np.array(["call", "put"]))
        np.testing.assert_allclose(got, [10.450583572185565, 5.573526022256971], atol=1e-9)

    def test_degenerate_entries_match_scalar(self):
        T = np.array([0.0, 0.0, 1.0, 1.0])
        sigma = np.array([0.2, 0.0, 0.0, 0.2])
        for kind in (CALL, PUT):
            for S in (80.0, 100.0, 120.0):
                got = bs_price_vec(S, 100, T, 0.05, 0.0, sigma, kind)
                expected = [bs_scalar(OptionParameters(S, 100, 0.05, s, t, kind))
                            for t, s in zip(T, sigma)]
                np.testing.assert_allclose(got, expected, atol=1e-10)
                assert not np.any(np.isnan(got))


# ---------------------------------------------------------------------------
# bs_greeks_vec matches scalar greeks
# ---------------------------------------------------------------------------
class TestBSGreeksVec:
    def test_scalar_greeks_match(self):
        expected = greeks_scalar(OptionParameters(100, 100, 0.05, 0.2, 1.0, CALL)).as_dict()
        got = bs_greeks_vec(100, 100, 1.0, 0.05, 0.0, 0.2, "call")
        for key in ("delta", "gamma", "vega", "theta", "rho"):
            assert abs(float(got[key]) - expected[key]) < 1e-10, f"{key} mismatch"

    def test_put_with_dividend(self):
        opt = OptionParameters(95, 100, 0.04, 0.3, 0.75, PUT, dividend_yield=0.01)
        expected = greeks_scalar(opt).as_dict()
        got = bs_greeks_vec(95, 100, 0.75, 0.04, 0.01, 0.3, "put")
        for key in expected:
            assert abs(float(got[key]) - expected[key]) < 1e-10, f"{key} mismatch"

    def test_vectorized_greeks(self):
        spots = np.array([90.0, 100.0, 110.0])
        got = bs_greeks_vec(spots, 100, 1.0, 0.05, 0.0, 0.2, "call")
        assert got["delta"].shape == (3,)
        # Call delta should increase with spot
        assert np.all(np.diff(got["delta"]) > 0)

    def test_degenerate_entries_match_scalar(self):
        cases = [(110, 0.0, 0.2), (90, 0.0, 0.2), (100, 1.0, 0.0), (80, 1.0, 0.0), (120, 1.0, 0.0)]
        for kind in (CALL, PUT):
            for S, T, sigma in cases:
                expected = greeks_scalar(OptionParameters(S, 100, 0.05, sigma, T, kind)).as_dict()
                got = bs_greeks_vec(S, 100, T, 0.05, 0.0, sigma, kind)
                for key in expected:
                    assert float(got[key]) == pytest.approx(expected[key], abs=1e-10), (kind, S, T, key)

    def test_underflowing_vol_time_matches_scalar(self):
        for kind in (CALL, PUT):
            opt = OptionParameters(100, 90, 0.05, 1e-320, 1e-10, kind)
            px = bs_price_vec(100, 90, 1e-10, 0.05, 0.0, 1e-320, kind)
            assert float(px) == pytest.approx(bs_scalar(opt), abs=1e-12)
            got = bs_greeks_vec(100, 90, 1e-10, 0.05, 0.0, 1e-320, kind)
            for key, value in greeks_scalar(opt).as_dict().items():
                assert not np.isnan(got[key])
                assert float(got[key]) == pytest.approx(value, abs=1e-10), key
