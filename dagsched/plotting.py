"""Plots of schedulability ratios and analysis running times."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

LINE_COLORS = (
    "#0072BD", "#D95319", "#7E2F8E", "#77AC30", "#4DBEEE",
    "#A2142F", "#EDB120", "k", "#0072BD", "#D95319",
)
LINE_STYLES = (
    "-", "--", ":", "-.", "--", ":", "-.", "-", "--", ":", "-.", "-", "--", ":", "-.",
)
LINE_MARKERS = (
    ".", "v", "*", "o", "+", ".", "X", "<", "", "v", "*", ".", "+", "X", "4", "<",
)

MAX_SERIES = min(len(LINE_COLORS), len(LINE_STYLES), len(LINE_MARKERS))


def plot_results(
    sched_res: Mapping[str, Sequence[float]],
    x: Sequence[float],
    x_axis: str,
    y_axis: str,
    output_fig_path: str,
    show_plots: bool = True,
) -> Figure:
    """Draw one styled line per method, ordered by name, and save it as PDF.

    The figure is written to ``output_fig_path + ".pdf"`` and returned.
    """
    if len(sched_res) > MAX_SERIES:
        raise ValueError(f"at most {MAX_SERIES} series can be plotted")

    fig = plt.figure()
    ax = fig.gca()
    styles = zip(LINE_COLORS, LINE_MARKERS, LINE_STYLES)
    for (name, values), (color, marker, style) in zip(sorted(sched_res.items()), styles):
        ax.plot(list(x), list(values), color=color, marker=marker, linestyle=style, label=name)

    ax.set_xlabel(x_axis)
    ax.set_ylabel(y_axis)
    if sched_res:
        ax.legend()
    fig.savefig(Path(f"{output_fig_path}.pdf"))
    if show_plots:
        plt.show()
    return fig


def plot_times(
    time_res: Mapping[str, Sequence[float]],
    output_fig_path: str,
    show_plots: bool = True,
) -> Figure:
    """Box-plot the running times of each method, ordered by name.

    The figure is written to ``output_fig_path + "_times.pdf"`` and returned.
    """
    ordered = sorted(time_res.items())
    names = [name for name, _ in ordered]
    data = [list(values) for _, values in ordered]
    positions = list(range(1, len(names) + 1))

    fig = plt.figure()
    ax = fig.gca()
    if data:
        ax.boxplot(data, positions=positions)
        ax.set_xticks(positions)
        ax.set_xticklabels(names)
    ax.set_ylabel("Latency (us)")
    fig.savefig(Path(f"{output_fig_path}_times.pdf"))
    if show_plots:
        plt.show()
    return fig