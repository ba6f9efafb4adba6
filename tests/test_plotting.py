import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402

from dagsched.plotting import MAX_SERIES, plot_results, plot_times  # noqa: E402


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


def _results():
    return {"zeta": [0.1, 0.2, 0.3], "alpha": [1.0, 0.5, 0.0], "mid": [0.4, 0.4, 0.4]}


def test_plot_results_writes_pdf(tmp_path):
    out = tmp_path / "res"
    fig = plot_results(_results(), [1, 2, 3], "U", "ratio", str(out), show_plots=False)
    pdf = tmp_path / "res.pdf"
    assert pdf.exists()
    assert pdf.read_bytes().startswith(b"%PDF")
    assert len(fig.axes[0].get_lines()) == 3


def test_plot_results_lines_sorted_by_name(tmp_path):
    fig = plot_results(_results(), [1, 2, 3], "U", "ratio", str(tmp_path / "r"), show_plots=False)
    ax = fig.axes[0]
    labels = [line.get_label() for line in ax.get_lines()]
    assert labels == ["alpha", "mid", "zeta"]
    assert list(ax.get_lines()[0].get_ydata()) == [1.0, 0.5, 0.0]


def test_plot_results_styles_and_axes(tmp_path):
    fig = plot_results(_results(), [1, 2, 3], "U", "ratio", str(tmp_path / "r"), show_plots=False)
    ax = fig.axes[0]
    lines = ax.get_lines()
    assert lines[0].get_color() == "#0072BD"
    assert lines[1].get_linestyle() == "--"
    assert ax.get_xlabel() == "U"
    assert ax.get_ylabel() == "ratio"


def test_plot_results_too_many_series(tmp_path):
    res = {f"m{i}": [0.0] for i in range(MAX_SERIES + 1)}
    with pytest.raises(ValueError):
        plot_results(res, [1], "x", "y", str(tmp_path / "r"), show_plots=False)


def test_plot_times_writes_pdf_and_labels(tmp_path):
    times = {"b": [1.0, 2.0, 3.0], "a": [4.0, 5.0, 6.0]}
    fig = plot_times(times, str(tmp_path / "t"), show_plots=False)
    pdf = tmp_path / "t_times.pdf"
    assert pdf.read_bytes().startswith(b"%PDF")
    ax = fig.axes[0]
    assert [t.get_text() for t in ax.get_xticklabels()] == ["a", "b"]
    assert ax.get_ylabel() == "Latency (us)"


def test_plot_times_box_medians(tmp_path):
    times = {"b": [1.0, 2.0, 3.0], "a": [4.0, 5.0, 6.0]}
    fig = plot_times(times, str(tmp_path / "t"), show_plots=False)
    ax = fig.axes[0]
    ydata = [list(line.get_ydata()) for line in ax.get_lines()]
    assert [5.0, 5.0] in ydata
    assert [2.0, 2.0] in ydata