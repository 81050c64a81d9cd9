"""Shared plotting configuration (style, palette, font sizes)."""

from __future__ import annotations

from collections.abc import Generator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import matplotlib as mpl
import plotly.io as pio
import seaborn as sns


@dataclass
class PlottingConfig:
    """Reusable plotting style for report figures.

    The label palette is fixed per category so that exercise fashion "A" has
    the same colour in every chart of a report.
    """

    style: str = "whitegrid"
    palette: str | list[str] = "Set2"
    cluster_palette: str = "tab10"
    font_family: str = "DejaVu Sans"
    font_scale: float = 1.0
    title_size: int = 14
    label_size: int = 12
    tick_size: int = 10
    figure_dpi: int = 100
    context: str = "notebook"
    plotly_template: str = "plotly_white"
    seaborn_kwargs: dict[str, Any] = field(default_factory=dict)

    def label_colors(self, categories: Sequence[str]) -> dict[str, tuple[float, float, float]]:
        """Map each label category to a colour of :attr:`palette`."""
        colors = sns.color_palette(self.palette, n_colors=max(len(categories), 1))
        return {str(cat): colors[idx] for idx, cat in enumerate(categories)}

    def cluster_colors(self, n_clusters: int) -> list[tuple[float, float, float]]:
        return list(sns.color_palette(self.cluster_palette, n_colors=max(n_clusters, 1)))

    def _rc_updates(self) -> dict[str, Any]:
        return {
            "axes.titlesize": self.title_size,
            "axes.labelsize": self.label_size,
            "xtick.labelsize": self.tick_size,
            "ytick.labelsize": self.tick_size,
            "figure.dpi": self.figure_dpi,
            "savefig.bbox": "tight",
            "axes.prop_cycle": mpl.cycler(color=sns.color_palette(self.palette)),
            "font.family": [self.font_family],
        }

    def _set_theme(self) -> None:
        sns.set_theme(
            style=self.style,
            palette=sns.color_palette(self.palette),
            context=self.context,
            font_scale=self.font_scale,
            **self.seaborn_kwargs,
        )
        mpl.rcParams.update(self._rc_updates())
        pio.templates.default = self.plotly_template

    def apply_global(self) -> None:
        """Apply plotting style globally (no automatic restore).

        For temporary styling, use :meth:`apply` instead.
        """
        self._set_theme()

    @contextmanager
    def apply(self) -> Generator[None]:
        """Apply style within a context, restoring previous rcParams and plotly template afterwards."""
        prev_plotly_template = pio.templates.default
        with mpl.rc_context():
            self._set_theme()
            try:
                yield
            finally:
                pio.templates.default = prev_plotly_template


# Default configuration used across plotting functions
DEFAULT_PLOT_CFG = PlottingConfig()


__all__ = ["DEFAULT_PLOT_CFG", "PlottingConfig"]
