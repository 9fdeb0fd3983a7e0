# chart.py
# Line chart of one or more curves against spot.
#
# ``CurveChart`` owns a single matplotlib Figure for its whole life and
# redraws it in place on every ``update``; nothing goes through pyplot's
# global figure registry.  Requires the ``plot`` extra (matplotlib).

from __future__ import annotations
import logging
from typing import Mapping

import numpy as np
from matplotlib.figure import Figure

from . import config

logger = logging.getLogger(__name__)


class CurveChart:
    """One figure, redrawn from scratch on each :meth:`update`.

    Parameters
    ----------
    title, xlabel, ylabel : str
        Axis decoration kept across updates.
    figsize : tuple
        Figure size in inches.
    """

    def __init__(self, title: str = "", xlabel: str = "Spot at expiry",
                 ylabel: str = "PnL", figsize=(6.0, 4.0)):
        self.title = title
        self.xlabel = xlabel
        self.ylabel = ylabel
        self._fig: Figure | None = Figure(figsize=figsize)
        self._fig.add_subplot(1, 1, 1)

    @property
    def figure(self) -> Figure:
        if self._fig is None:
            raise RuntimeError("chart is closed")
        return self._fig

    @property
    def closed(self) -> bool:
        return self._fig is None

    def update(self, x, series: Mapping[str, object], *, zero_line: bool = True) -> None:
        """Replace the plotted data with ``series`` (label -> y values)."""
        ax = self.figure.axes[0]
        ax.clear()
        x = np.asarray(x, dtype=float)
        for label, y in series.items():
            y = np.asarray(y, dtype=float)
            if y.shape != x.shape:
                raise ValueError(f"series {label!r} has shape {y.shape}, expected {x.shape}")
            ax.plot(x, y, label=label)
        if zero_line:
            ax.axhline(0.0, color="grey", linewidth=0.8)
        ax.set_title(self.title)
        ax.set_xlabel(self.xlabel)
        ax.set_ylabel(self.ylabel)
        if len(series) > 1:
            ax.legend()
        logger.debug("chart %r redrawn with %d series over %d points",
                     self.title, len(series), x.size)

    def lines(self) -> dict[str, np.ndarray]:
        """Currently plotted y-data by label (excluding the zero line)."""
        ax = self.figure.axes[0]
        return {ln.get_label(): np.asarray(ln.get_ydata(), dtype=float)
                for ln in ax.get_lines() if not ln.get_label().startswith("_")}

    def save(self, path, dpi: int = config.CHART_DPI) -> None:
        self.figure.tight_layout()
        self.figure.savefig(path, dpi=dpi)
        logger.info("chart saved to %s", path)

    def close(self) -> None:
        if self._fig is not None:
            self._fig.clear()
            self._fig = None

    def __enter__(self) -> CurveChart:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
