"""Tests for the single-figure curve chart."""

import numpy as np
import pytest

pytest.importorskip("matplotlib")

from optlab.chart import CurveChart
from optlab.core import OptionParameters
from optlab.risk import spot_grid, price_curve, delta_curve


@pytest.fixture
def chart():
    c = CurveChart(title="Call", ylabel="Price")
    yield c
    c.close()


class TestCurveChart:
    def test_update_replaces_data(self, chart):
        x = np.arange(5.0)
        chart.update(x, {"a": x ** 2})
        chart.update(x, {"b": x, "c": -x})
        lines = chart.lines()
        assert set(lines) == {"b", "c"}
        np.testing.assert_allclose(lines["c"], -x)

    def test_same_figure_across_updates(self, chart):
        fig = chart.figure
        x = np.arange(3.0)
        chart.update(x, {"a": x})
        chart.update(x, {"a": 2 * x})
        assert chart.figure is fig
        assert len(fig.axes) == 1

    def test_labels_survive_update(self, chart):
        chart.update([1.0, 2.0], {"a": [0.0, 1.0]})
        ax = chart.figure.axes[0]
        assert ax.get_title() == "Call"
        assert ax.get_ylabel() == "Price"

    def test_shape_mismatch(self, chart):
        with pytest.raises(ValueError):
            chart.update([1.0, 2.0, 3.0], {"a": [1.0, 2.0]})

    def test_save_engine_curves(self, chart, tmp_path):
        opt = OptionParameters(100, 100, 0.05, 0.2, 1.0)
        spots = spot_grid(opt.strike)
        chart.update(spots, {"price": price_curve(opt, spots)["values"],
                             "delta": delta_curve(opt, spots)["values"]})
        out = tmp_path / "curve.png"
        chart.save(out)
        assert out.exists() and out.stat().st_size > 0

    def test_close(self):
        with CurveChart() as c:
            assert not c.closed
        assert c.closed
        with pytest.raises(RuntimeError):
            c.update([1.0], {"a": [1.0]})
        c.close()  # idempotent
