import io

import matplotlib.pyplot as plt
import numpy as np

from colorkmeans import Colorspace, ViewMode
from colorkmeans.engine import IterationState
from colorkmeans.viz import ViewReporter, format_progress, plot_swatches


def _state(iteration=3, rmse=0.25):
    colors = np.zeros((2, 3))
    return IterationState(iteration, colors, colors, rmse, np.array([1, 1]))


def test_plot_swatches_one_axis_per_color():
    colors = np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0], [0.5, 0.2, 0.1]])
    fig = plot_swatches(colors, Colorspace.SRGB, title="colors", counts=[1, 2, 3])
    try:
        assert len(fig.axes) == 3
        assert fig.axes[1].get_title() == "#FFFFFF\n2 px"
    finally:
        plt.close(fig)


def test_format_progress():
    assert format_progress(_state()) == "iteration=3 100*rmse=0.25"


def test_reporter_respects_view_mode():
    stream = io.StringIO()
    reporter = ViewReporter(ViewMode.HEXCOLORS, Colorspace.LAB, stream=stream)
    reporter.on_iteration(_state())
    reporter.report_seeds(np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 1.0]]))

    text = stream.getvalue()
    assert "iteration=" not in text
    assert "seed colors (LAB):" in text
    assert "  0: #FF0000" in text


def test_disabled_reporter_writes_nothing():
    stream = io.StringIO()
    reporter = ViewReporter(None, stream=stream)
    reporter.on_iteration(_state())
    reporter.report_seeds(np.zeros((2, 3)))
    assert stream.getvalue() == ""
